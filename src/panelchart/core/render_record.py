from __future__ import annotations

import json
import platform
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import matplotlib
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from panelchart.charts.chart import Chart
    from panelchart.viz.panels import Panel


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_record_id(prefix: str = "render") -> str:
    # Example: render_20260130T120501Z
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"{prefix}_{ts}"


def get_python_version() -> str:
    return platform.python_version()


def get_matplotlib_backend() -> str:
    return str(matplotlib.get_backend())


class RenderRecord(BaseModel):
    record_id: str
    timestamp: str = Field(default_factory=utc_now_iso)
    variant: str = "base"

    render_version: int = 0
    facet_count: int = 0
    animated: bool = False
    no_data: bool = False
    output_path: str | None = None
    panels: list[dict[str, Any]] = Field(default_factory=list)

    python_version: str = Field(default_factory=get_python_version)
    matplotlib_backend: str = Field(default_factory=get_matplotlib_backend)


def describe_panel(panel: Panel) -> dict[str, Any]:
    """Outline of a panel subtree: type, box and children."""
    left, top, width, height = panel.absolute_box()
    return {
        "type": type(panel).__name__,
        "anchor": str(panel.anchor.value) if panel.anchor is not None else None,
        "box": [round(left, 2), round(top, 2), round(width, 2), round(height, 2)],
        "children": [describe_panel(child) for child in panel.children],
    }


def record_for(chart: Chart, record_id: str, output_path: str | None = None) -> RenderRecord:
    return RenderRecord(
        record_id=record_id,
        variant=chart.variant.name,
        render_version=chart.render_version,
        facet_count=len(chart.facets),
        animated=bool(chart.options.animate) and chart.backend.supports_animation,
        no_data=chart.no_data_message is not None,
        output_path=output_path,
        panels=[describe_panel(chart.base_panel)] if chart.base_panel is not None else [],
    )


def ensure_record_dir(base_outputs_dir: Path, record_id: str) -> Path:
    record_dir = base_outputs_dir / "renders" / record_id
    record_dir.mkdir(parents=True, exist_ok=True)
    return record_dir


def write_render_record(record_dir: Path, record: RenderRecord) -> Path:
    path = record_dir / "render_record.json"
    path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
    return path


def read_render_record(path: Path) -> RenderRecord:
    data = json.loads(path.read_text(encoding="utf-8"))
    return RenderRecord.model_validate(data)
