"""CLI entrypoint: render a chart from a JSON data file to an image."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from panelchart.charts.bar import BarChartVariant
from panelchart.charts.chart import Chart
from panelchart.charts.variant import ChartVariant
from panelchart.core.errors import ConfigError
from panelchart.core.options import merge_options
from panelchart.core.render_record import (
    ensure_record_dir,
    generate_record_id,
    record_for,
    write_render_record,
)
from panelchart.core.settings import configure_logging, get_settings, load_options_file

logger = logging.getLogger(__name__)

VARIANTS: dict[str, type[ChartVariant]] = {
    "base": ChartVariant,
    "bar": BarChartVariant,
}


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="render",
        description="Render a chart from a JSON file holding 'metadata' and 'resultset'.",
    )
    p.add_argument(
        "--data",
        required=True,
        help="Path to the JSON data file.",
    )
    p.add_argument(
        "--options",
        default=None,
        help="Path to a YAML file of chart options, merged over PANELCHART_OPTIONS_FILE.",
    )
    p.add_argument(
        "--variant",
        default="bar",
        choices=sorted(VARIANTS),
        help="Chart variant. Default: bar",
    )
    p.add_argument(
        "--out",
        required=True,
        help="Output image path (format from the extension).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Log resolved options and data at debug level.",
    )
    return p


def _load_data(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Data file not found: {path}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigError(f"Data file must hold an object with 'metadata' and 'resultset': {path}")
    return data


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.debug or settings.debug)

    try:
        data = _load_data(args.data)
        defaults = load_options_file(settings.options_file) if settings.options_file else {}
        overrides = load_options_file(args.options) if args.options else {}
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)

    options = merge_options(defaults, data.get("options"), overrides, {"canvas": str(out)})
    chart = Chart(options, variant=VARIANTS[args.variant]())
    chart.set_resultset(data.get("resultset") or [])
    chart.set_metadata(data.get("metadata") or [])
    chart.render(bypass_animation=True)
    logger.info("Rendered %r to %s", chart, out)

    record_id = generate_record_id(prefix="render")
    record_dir = ensure_record_dir(settings.outputs_dir, record_id)
    record_path = write_render_record(record_dir, record_for(chart, record_id, str(out.resolve())))

    print("Chart rendered successfully.")
    print(f"Variant: {chart.variant.name}")
    print(f"Facets: {len(chart.facets)}")
    print(f"Image: {out}")
    print(f"Render record: {record_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
