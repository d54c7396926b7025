"""Typed chart options: defaults, merging and idempotent normalization."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from panelchart.core.constants import (
    DEFAULT_HEIGHT,
    DEFAULT_MULTI_CHART_WRAP_COLUMN,
    DEFAULT_WIDTH,
)
from panelchart.core.margins import parse_margins
from panelchart.viz.backend import RenderBackend
from panelchart.viz.formatting import (
    default_click_action,
    default_tooltip_format,
    format_percent_value,
    format_value,
)

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case(key: str) -> str:
    """'multiChartLimit' -> 'multi_chart_limit'; snake_case keys pass through."""
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def as_index_list(value: Any) -> list[int] | None:
    """One column/series index or many, as a list of ints."""
    if value is None:
        return None
    if isinstance(value, (int, str)):
        value = [value]
    return [int(v) for v in value]


class ChartOptions(BaseModel):
    """
    Resolved chart configuration.

    Unknown keys are kept as extras so variants can read their own settings.
    Fields are plain attributes: callers may mutate them between renders.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    canvas: Any = None

    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    margins: Any = None

    multi_chart_limit: Any = None
    multi_chart_wrap_column: Any = DEFAULT_MULTI_CHART_WRAP_COLUMN

    orientation: str = "vertical"

    extension_points: dict[str, Any] | None = None

    # data shape
    roles: dict[str, Any] | None = None
    dimensions: dict[str, Any] | None = None
    readers: list[Any] | None = None
    crosstab_mode: bool = True
    multi_chart_column_indexes: Any = None
    multi_chart_row_indexes: Any = None
    is_multi_valued: bool = False
    series_in_rows: bool = False
    measures_indexes: Any = None
    data_options: dict[str, Any] | None = None
    get_category_label: Any = None
    get_series_label: Any = None

    time_series: bool | None = None
    time_series_format: str | None = None

    animate: bool = True

    title: str | None = None
    title_position: str = "top"
    title_align: str = "center"
    title_size: float | None = None

    legend: bool = False
    legend_position: str = "bottom"
    legend_size: float | None = None
    legend_align: str | None = None
    legend_min_margin_x: float | None = None
    legend_min_margin_y: float | None = None
    legend_text_margin: float | None = None
    legend_padding: float | None = None
    legend_text_adjust: float | None = None
    legend_shape: str | None = None
    legend_draw_line: bool | None = None
    legend_draw_marker: bool | None = None
    legend_marker_size: float | None = None

    colors: Any = None

    second_axis: bool = False
    second_axis_idx: int = -1
    second_axis_series_indexes: Any = None
    second_axis_color: Any = None

    tooltip_format: Any = default_tooltip_format
    value_format: Any = format_value
    percent_value_format: Any = format_percent_value

    stacked: bool = False
    percentage_normalized: bool = False

    clickable: bool = False
    selectable: bool = False
    click_action: Any = default_click_action

    render_callback: Any = None
    allow_no_data: bool = False

    # child (facet) charts only
    parent: Any = None
    data_engine: Any = None
    left: float | None = None
    top: float | None = None


def _as_mapping(source: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
    if isinstance(source, BaseModel):
        # iterating a model yields fields and extras without serializing values
        return dict(source)
    return {snake_case(str(k)): v for k, v in source.items()}


def _merge_into(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if value is None:
            continue
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            nested = dict(current)
            _merge_into(nested, value)
            target[key] = nested
        elif isinstance(value, Mapping):
            target[key] = dict(value)
        else:
            target[key] = value


def merge_options(*sources: Mapping[str, Any] | BaseModel | None) -> dict[str, Any]:
    """
    Merge option sources left to right into a new dict.

    None values never override; nested mappings are merged recursively.
    """
    out: dict[str, Any] = {}
    for source in sources:
        if source is None:
            continue
        _merge_into(out, _as_mapping(source))
    return out


def option_value(options: Mapping[str, Any] | BaseModel | None, name: str) -> Any:
    """Read one option from a raw mapping (snake or camel key) or a ChartOptions."""
    if options is None:
        return None
    if isinstance(options, BaseModel):
        return getattr(options, name, None)
    if name in options:
        return options[name]
    for key, value in options.items():
        if snake_case(str(key)) == name:
            return value
    return None


def normalize_options(options: ChartOptions, backend: RenderBackend | None = None) -> ChartOptions:
    """
    Base processing applied after defaults and user options are merged.

    Runs before every pre-render and must be idempotent.
    """
    backend = backend or RenderBackend.detect()
    if not backend.supports_animation:
        options.animate = False

    if options.margins is not None:
        options.margins = parse_margins(options.margins)

    return options


def resolve_options(
    options: Mapping[str, Any] | ChartOptions | None = None,
    defaults: Mapping[str, Any] | None = None,
    backend: RenderBackend | None = None,
) -> ChartOptions:
    """Merge `options` over `defaults`, validate, then normalize."""
    resolved = ChartOptions.model_validate(merge_options(defaults, options))
    return normalize_options(resolved, backend)
