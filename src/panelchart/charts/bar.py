"""Bar chart variant: one bar per category (and series), heights from the value role."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from panelchart.charts.variant import ChartVariant
from panelchart.core.constants import Anchor
from panelchart.viz.panels import Panel
from panelchart.viz.surface import PaintSurface

if TYPE_CHECKING:
    from panelchart.charts.chart import Chart


def _matching(frame: pd.DataFrame, key: Mapping[str, Any]) -> pd.DataFrame:
    mask = pd.Series(True, index=frame.index)
    for dim, value in key.items():
        mask &= frame[dim].isna() if pd.isna(value) else frame[dim] == value
    return frame[mask]


class BarPanel(Panel):
    extension_prefix = "bar_"

    def __init__(self, chart: Chart) -> None:
        super().__init__(chart, anchor=Anchor.FILL)
        self.bar_width_ratio = 0.8
        self.edge_style: str | None = None
        self.show_grid = True

    def series_values(self) -> list[tuple[str, list[str], list[float]]]:
        """(series label, category labels, values) for every visible series."""
        chart = self.chart
        categories = chart.data_for("category", assert_exists=False, visible=True)
        if categories is None or not categories.leaves or not chart.has_role("value"):
            return []

        value_dim = chart.role_of("value").grouping.dimension_names[0]
        series = chart.data_for("series", assert_exists=False, visible=True)
        series_leaves = series.leaves if series is not None else [None]

        out = []
        for s in series_leaves:
            values = []
            for cat in categories.leaves:
                frame = cat.frame if s is None else _matching(cat.frame, s.key)
                values.append(float(frame[value_dim].sum()))
            label = s.label if s is not None else value_dim
            out.append((label, [c.label for c in categories.leaves], values))
        return out

    def paint(self, surface: PaintSurface) -> None:
        super().paint(surface)
        data = self.series_values()
        if not data or self.width <= 0 or self.height <= 0:
            return

        chart = self.chart
        ax = surface.figure.add_axes(surface.figure_rect(self.absolute_box()))
        stacked = bool(chart.options.stacked)
        horizontal = chart.is_orientation_horizontal()
        n_series = len(data)
        width = self.bar_width_ratio if stacked else self.bar_width_ratio / n_series

        categories = data[0][1]
        positions = np.arange(len(categories), dtype=float)
        bottoms = np.zeros(len(categories))
        for i, (label, _, values) in enumerate(data):
            heights = np.asarray(chart.animate(np.zeros(len(values)), values), dtype=float)
            offset = 0.0 if stacked else (i - (n_series - 1) / 2) * width
            xs = positions + offset
            draw = ax.barh if horizontal else ax.bar
            kwargs = {"left": bottoms} if horizontal else {"bottom": bottoms}
            draw(xs, heights, width, color=chart.series_color(label), edgecolor=self.edge_style, label=label, **kwargs)
            if stacked:
                bottoms = bottoms + heights

        if horizontal:
            ax.set_yticks(positions, categories)
        else:
            ax.set_xticks(positions, categories)
        if self.show_grid:
            ax.grid(axis="x" if horizontal else "y", alpha=0.3)


class BarChartVariant(ChartVariant):
    name = "bar"
    default_options = MappingProxyType({"legend": True, "legend_position": "bottom"})

    def pre_render_core(self, chart: Chart) -> None:
        panel = BarPanel(chart)
        panel.append_to(chart.base_panel)
        panel.apply_extensions()
        chart.content_panel = panel
