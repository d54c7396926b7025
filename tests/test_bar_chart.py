from __future__ import annotations

from matplotlib.colors import to_hex

from panelchart.charts.bar import BarChartVariant, BarPanel
from panelchart.charts.chart import Chart


def _bar(data, backend, scheduler, **options) -> Chart:
    chart = Chart(options, variant=BarChartVariant(), backend=backend, scheduler=scheduler)
    chart.set_data(data)
    return chart


def _bar_patches(chart: Chart):
    axes = chart.base_panel.surface.figure.axes
    assert len(axes) == 1
    return list(axes[0].patches)


def test_variant_defaults_show_legend(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(crosstab_data, static_backend, scheduler)
    chart.pre_render()
    assert chart.options.legend is True
    assert chart.legend_panel is not None
    assert [text for text, _ in chart.legend_entries()] == ["Q1", "Q2"]


def test_series_values(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(crosstab_data, static_backend, scheduler)
    chart.pre_render()
    assert isinstance(chart.content_panel, BarPanel)
    assert chart.content_panel.series_values() == [
        ("Q1", ["North", "South", "East"], [10.0, 30.0, 5.0]),
        ("Q2", ["North", "South", "East"], [20.0, 40.0, 15.0]),
    ]


def test_bars_are_drawn_and_saved(crosstab_data, static_backend, scheduler, tmp_path) -> None:
    out = tmp_path / "bars.png"
    chart = _bar(crosstab_data, static_backend, scheduler, canvas=str(out), title="Sales by region")
    chart.render()

    heights = [p.get_height() for p in _bar_patches(chart)]
    assert heights == [10.0, 30.0, 5.0, 20.0, 40.0, 15.0]
    assert out.exists()
    assert out.stat().st_size > 0


def test_bar_colors_match_legend(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(crosstab_data, static_backend, scheduler)
    chart.render()
    colors = dict(chart.legend_entries())
    first = _bar_patches(chart)[0]
    assert to_hex(first.get_facecolor()) == colors["Q1"]


def test_stacked_bars_sit_on_previous_series(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(crosstab_data, static_backend, scheduler, stacked=True)
    chart.render()
    patches = _bar_patches(chart)
    assert [p.get_y() for p in patches[3:]] == [10.0, 30.0, 5.0]


def test_horizontal_bars(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(crosstab_data, static_backend, scheduler, orientation="horizontal")
    chart.render()
    widths = [p.get_width() for p in _bar_patches(chart)]
    assert widths == [10.0, 30.0, 5.0, 20.0, 40.0, 15.0]


def test_animated_bars_grow_from_zero(crosstab_data, animated_backend, scheduler) -> None:
    chart = _bar(crosstab_data, animated_backend, scheduler)
    chart.render()
    assert all(p.get_height() == 0 for p in _bar_patches(chart))

    scheduler.advance(2.0)
    assert [p.get_height() for p in _bar_patches(chart)] == [10.0, 30.0, 5.0, 20.0, 40.0, 15.0]


def test_bar_extension_points(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(
        crosstab_data,
        static_backend,
        scheduler,
        extension_points={"bar_bar_width_ratio": 0.5, "bar_show_grid": False},
    )
    chart.pre_render()
    assert chart.content_panel.bar_width_ratio == 0.5
    assert chart.content_panel.show_grid is False


def test_faceted_bar_chart(relational_data, static_backend, scheduler, tmp_path) -> None:
    out = tmp_path / "facets.png"
    chart = _bar(
        relational_data,
        static_backend,
        scheduler,
        crosstab_mode=False,
        multi_chart_column_indexes=[0],
        width=900,
        height=600,
        canvas=str(out),
    )
    chart.render()

    assert chart.content_panel is None
    assert len(chart.facets) == 7
    assert all(isinstance(f.chart.content_panel, BarPanel) for f in chart.facets)
    assert len(chart.base_panel.surface.figure.axes) == 7
    assert chart.facets[0].chart.content_panel.series_values() == [
        ("value", ["Bikes", "Cars"], [100.0, 200.0])
    ]
    assert out.exists()


def test_second_axis_series_take_second_axis_colors(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(crosstab_data, static_backend, scheduler, second_axis=True, second_axis_color=["#ff0000"])
    chart.render()
    assert chart.second_axis_series() == ["Q2"]
    colors = dict(chart.legend_entries())
    assert colors["Q2"] == "#ff0000"
    assert colors["Q1"] != "#ff0000"
    # Q2 bars come after the three Q1 bars
    assert to_hex(_bar_patches(chart)[3].get_facecolor()) == "#ff0000"


def test_second_axis_series_by_index(crosstab_data, static_backend, scheduler) -> None:
    chart = _bar(crosstab_data, static_backend, scheduler, second_axis=True, second_axis_series_indexes=[0, 5])
    chart.pre_render()
    assert chart.second_axis_series() == ["Q1"]

    chart.options.second_axis = False
    assert chart.second_axis_series() == []
