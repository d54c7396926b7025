from __future__ import annotations

from pathlib import Path

from panelchart.charts.bar import BarChartVariant
from panelchart.charts.chart import Chart
from panelchart.core.render_record import (
    RenderRecord,
    ensure_record_dir,
    generate_record_id,
    read_render_record,
    record_for,
    write_render_record,
)


def test_render_record_write_and_read(tmp_path: Path) -> None:
    base_outputs = tmp_path / "outputs"
    record_id = generate_record_id(prefix="test")
    record_dir = ensure_record_dir(base_outputs, record_id)

    record = RenderRecord(record_id=record_id, variant="bar", render_version=2, facet_count=3)
    record_path = write_render_record(record_dir, record)
    assert record_path.exists()
    assert record_path.parent == base_outputs / "renders" / record_id

    loaded = read_render_record(record_path)
    assert loaded.record_id == record_id
    assert loaded.variant == "bar"
    assert loaded.facet_count == 3
    assert loaded.timestamp
    assert loaded.python_version
    assert loaded.matplotlib_backend


def test_record_describes_rendered_chart(crosstab_data, static_backend, scheduler) -> None:
    chart = Chart({"title": "Sales"}, variant=BarChartVariant(), backend=static_backend, scheduler=scheduler)
    chart.set_data(crosstab_data)
    chart.render()

    record = record_for(chart, "render_x", "chart.png")
    assert record.variant == "bar"
    assert record.render_version == 1
    assert record.animated is False
    assert record.no_data is False
    assert record.output_path == "chart.png"

    outline = record.panels[0]
    assert outline["type"] == "BasePanel"
    assert [c["type"] for c in outline["children"]] == ["TitlePanel", "LegendPanel", "BarPanel"]
    assert outline["children"][0]["box"] == [0.0, 0.0, 400.0, 25.0]


def test_record_flags_no_data(static_backend, scheduler) -> None:
    chart = Chart(backend=static_backend, scheduler=scheduler)
    chart.render()
    assert record_for(chart, "render_y").no_data is True
