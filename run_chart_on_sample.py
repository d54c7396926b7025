from __future__ import annotations

import json
from pathlib import Path

from panelchart.charts.bar import BarChartVariant
from panelchart.charts.chart import Chart
from panelchart.core.options import merge_options
from panelchart.core.settings import load_options_file


def main() -> None:
    data = json.loads(Path("data/samples/sales_by_country.json").read_text(encoding="utf-8"))
    defaults = load_options_file("data/samples/chart_options.yaml")

    out_dir = Path("outputs")
    out_dir.mkdir(parents=True, exist_ok=True)

    # 1) One bar chart per country, series = product, category = quarter
    out_png = out_dir / "facets_sample.png"
    chart = Chart(merge_options(defaults, data["options"], {"canvas": str(out_png)}), variant=BarChartVariant())
    chart.set_data(data)
    chart.render(bypass_animation=True)
    print("Wrote:", out_png, f"({len(chart.facets)} facets)")

    # 2) No rows: the chart shows its no-data message
    out_empty = out_dir / "no_data_sample.png"
    empty = Chart({"canvas": str(out_empty)}, variant=BarChartVariant())
    empty.render(bypass_animation=True)
    print("Wrote:", out_empty)


if __name__ == "__main__":
    main()
