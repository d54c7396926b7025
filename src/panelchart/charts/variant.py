"""Chart variant strategy: per-chart-type hooks injected into a Chart."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from panelchart.core.options import ChartOptions, normalize_options

if TYPE_CHECKING:
    from panelchart.charts.chart import Chart


class ChartVariant:
    """
    Base variant: no content panels.

    Subclasses set `default_options` and override the hooks. `process_options`
    runs before every pre-render and must stay idempotent; overrides should
    call the base implementation.
    """

    name = "base"
    default_options: Mapping[str, Any] = MappingProxyType({})

    def process_options(self, options: ChartOptions, chart: Chart) -> None:
        normalize_options(options, chart.backend)

    def pre_render_core(self, chart: Chart) -> None:
        """Create the chart-specific content panels."""

    def on_render_end(self, chart: Chart, animated: bool) -> None:
        chart.base_panel.on_render_end(animated)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
