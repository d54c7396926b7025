"""Multi-chart faceting: replicate a root chart into a grid of child charts."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from panelchart.core.constants import DEFAULT_MULTI_CHART_WRAP_COLUMN
from panelchart.core.errors import NoDataError
from panelchart.data.engine import DataEngine
from panelchart.viz.surface import Box

if TYPE_CHECKING:
    from panelchart.charts.chart import Chart

logger = logging.getLogger(__name__)


@dataclass
class Facet:
    """One grid cell: its position, its data slice and the chart drawn there."""

    index: int
    row: int
    column: int
    box: Box
    data: DataEngine | None = None
    chart: Chart | None = None


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def coerce_limit(value: Any) -> float:
    """Unset, non-numeric or < 1 means unlimited."""
    limit = _as_number(value)
    if math.isnan(limit) or limit < 1:
        return math.inf
    return limit


def coerce_wrap_column(value: Any) -> float:
    """Non-numeric or < 1 falls back to the default; infinity means a single row."""
    wrap = _as_number(value)
    if math.isnan(wrap) or wrap < 1:
        return DEFAULT_MULTI_CHART_WRAP_COLUMN
    return wrap


def compute_facet_grid(count: int, wrap_column: float, box: Box) -> tuple[int, int, list[Facet]]:
    """
    Lay `count` cells row-major over `box`, at most `wrap_column` per row.

    Returns (col_count, row_count, facets).
    """
    if count <= 0:
        return 0, 0, []

    col_count = int(min(count, wrap_column))
    row_count = math.ceil(count / col_count)
    width = box.width / col_count
    height = box.height / row_count

    facets = []
    for index in range(count):
        row, column = divmod(index, col_count)
        facets.append(
            Facet(
                index=index,
                row=row,
                column=column,
                box=Box(box.left + column * width, box.top + row * height, width, height),
            )
        )
    return col_count, row_count, facets


def replicate(chart: Chart) -> list[Facet]:
    """
    Create and pre-render one child chart per visible `multi_chart_column`
    group, laid out over the base panel's client box.
    """
    options = chart.options
    data = chart.data_for("multi_chart_column", visible=True)

    leaf_count = len(data.leaves)
    count = int(min(leaf_count, coerce_limit(options.multi_chart_limit)))
    if count == 0:
        if not options.allow_no_data:
            raise NoDataError()
        return []

    # Cells cover the client box (the content box minus docked title and legend)
    box = chart.base_panel.layout()
    col_count, row_count, facets = compute_facet_grid(
        count, coerce_wrap_column(options.multi_chart_wrap_column), box
    )
    logger.debug("Multi-chart: %d of %d groups in %dx%d grid", count, leaf_count, row_count, col_count)

    for facet in facets:
        facet.data = data.leaves[facet.index]
        child_options = options.model_copy(
            update={
                "parent": chart,
                "title": facet.data.abs_label,
                "legend": False,
                "data_engine": facet.data,
                "width": facet.box.width,
                "height": facet.box.height,
                "left": facet.box.left,
                "top": facet.box.top,
            }
        )
        facet.chart = type(chart)(
            child_options,
            variant=chart.variant,
            backend=chart.backend,
            scheduler=chart.scheduler,
        )
        facet.chart.pre_render()
    return facets
