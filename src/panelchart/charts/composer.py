"""Assemble a chart's panel tree: base panel, optional title and legend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from panelchart.viz.panels import BasePanel, LegendPanel, Panel, TitlePanel

if TYPE_CHECKING:
    from panelchart.charts.chart import Chart


def init_base_panel(chart: Chart) -> BasePanel:
    """
    Root charts get a panel with its own paint surface; facet charts attach
    theirs to the parent chart's base panel at the given offset.
    """
    options = chart.options
    panel = BasePanel(chart, is_root=chart.parent is None)
    panel.set_size(options.width, options.height)
    if options.margins:
        panel.set_margins(options.margins)

    if chart.parent is None:
        panel.create()
        panel.apply_extensions()
        panel.surface.canvas(options.canvas)
    else:
        panel.set_position(options.left or 0.0, options.top or 0.0)
        panel.append_to(chart.parent.base_panel)

    chart.base_panel = panel
    return panel


def init_title_panel(chart: Chart) -> TitlePanel | None:
    options = chart.options
    chart.title_panel = None
    if options.title is None or options.title == "":
        return None

    panel = TitlePanel(
        chart,
        title=options.title,
        anchor=options.title_position,
        title_size=options.title_size,
        title_align=options.title_align,
    )
    panel.append_to(chart.base_panel)
    panel.apply_extensions()
    chart.title_panel = panel
    return panel


def init_legend_panel(chart: Chart) -> LegendPanel | None:
    options = chart.options
    chart.legend_panel = None
    if not options.legend:
        return None

    panel = LegendPanel(
        chart,
        anchor=options.legend_position,
        legend_size=options.legend_size,
        align=options.legend_align,
        min_margin_x=options.legend_min_margin_x,
        min_margin_y=options.legend_min_margin_y,
        text_margin=options.legend_text_margin,
        padding=options.legend_padding,
        text_adjust=options.legend_text_adjust,
        shape=options.legend_shape,
        marker_size=options.legend_marker_size,
        draw_line=options.legend_draw_line,
        draw_marker=options.legend_draw_marker,
    )
    panel.append_to(chart.base_panel)
    panel.apply_extensions()
    chart.legend_panel = panel
    return panel


def compose_panels(chart: Chart) -> Panel:
    """Build and attach the chart's panels; no drawing happens here."""
    init_base_panel(chart)
    init_title_panel(chart)
    init_legend_panel(chart)
    return chart.base_panel
