"""Render tree: panels (base, title, legend) and the marks they paint."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from matplotlib.lines import Line2D
from matplotlib.patches import Rectangle

from panelchart.core.constants import DEFAULT_LEGEND_SIZE, DEFAULT_TITLE_SIZE, Anchor
from panelchart.core.errors import OperationInvalidError
from panelchart.core.margins import parse_margins, resolve_sides
from panelchart.viz.extensions import ExtensionCapabilities
from panelchart.viz.surface import Box, PaintSurface
from panelchart.viz.transition import CanvasTimerScheduler, Transition

if TYPE_CHECKING:
    from panelchart.charts.chart import Chart

logger = logging.getLogger(__name__)

_DOCKED = (Anchor.TOP, Anchor.BOTTOM, Anchor.LEFT, Anchor.RIGHT)

_LEGEND_MARKERS = {"square": "s", "circle": "o", "triangle": "^", "diamond": "D", "cross": "x", "bar": "|"}


# ---------------------------
# Marks
# ---------------------------


class Label:
    """Text mark anchored inside its panel."""

    extension_capabilities = ExtensionCapabilities(intercepted=frozenset({"anchor", "panel"}))

    def __init__(self, panel: Panel, anchor: Anchor | str = Anchor.CENTER, text: str = "") -> None:
        self.panel = panel
        self.anchor = Anchor(anchor)
        self.text = text
        self.font_size: float = 12
        self.text_style: str = "#333333"
        self.font_weight: str = "normal"
        self.visible: bool = True

    def position(self) -> tuple[float, float, str, str]:
        """Absolute (x, y) plus matplotlib ha/va for the anchor."""
        left, top, width, height = self.panel.absolute_box()
        cx, cy = left + width / 2, top + height / 2
        if self.anchor is Anchor.TOP:
            return cx, top, "center", "top"
        if self.anchor is Anchor.BOTTOM:
            return cx, top + height, "center", "bottom"
        if self.anchor is Anchor.LEFT:
            return left, cy, "left", "center"
        if self.anchor is Anchor.RIGHT:
            return left + width, cy, "right", "center"
        return cx, cy, "center", "center"

    def paint(self, surface: PaintSurface) -> None:
        if not self.visible:
            return
        x, y, ha, va = self.position()
        fx, fy = surface.figure_point(x, y)
        surface.figure.text(
            fx, fy, self.text, ha=ha, va=va,
            fontsize=self.font_size, color=self.text_style, fontweight=self.font_weight,
        )


# ---------------------------
# Panels
# ---------------------------


class Panel:
    """
    Node of the render tree. Geometry is in pixels relative to the parent
    panel's top-left corner. Only the root panel owns a paint surface.
    """

    anchor: Anchor | None = None
    extension_prefix = "panel_"
    extension_capabilities = ExtensionCapabilities(
        setters=frozenset({"set_size", "set_position", "set_margins"}),
        locked=frozenset({"width", "height", "left", "top", "margins", "parent", "chart"}),
    )

    def __init__(self, chart: Chart, *, is_root: bool = False, anchor: Anchor | str | None = None) -> None:
        self.chart = chart
        self.is_root = is_root
        self.parent: Panel | None = None
        self.children: list[Panel] = []
        self.marks: list[Label] = []

        self.width = 0.0
        self.height = 0.0
        self.left = 0.0
        self.top = 0.0
        self.margins = resolve_sides(None)

        self.fill_style: str | None = None
        self.stroke_style: str | None = None

        self.rendered_animated: bool | None = None
        self._surface: PaintSurface | None = None

        if anchor is not None:
            self.anchor = Anchor(anchor)

    # ---------------------------
    # Geometry
    # ---------------------------

    def set_size(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)

    def set_position(self, left: float, top: float) -> None:
        self.left = float(left)
        self.top = float(top)

    def set_margins(self, margins: Mapping[str, Any] | str | float | None) -> None:
        """Accepts a sides mapping or the css-like shorthand ("10 20", 8)."""
        self.margins = resolve_sides(parse_margins(margins))

    @property
    def content_width(self) -> float:
        return max(self.width - self.margins["left"] - self.margins["right"], 0.0)

    @property
    def content_height(self) -> float:
        return max(self.height - self.margins["top"] - self.margins["bottom"], 0.0)

    def absolute_origin(self) -> tuple[float, float]:
        if self.parent is None:
            return 0.0, 0.0
        px, py = self.parent.absolute_origin()
        return px + self.left, py + self.top

    def absolute_box(self) -> Box:
        x, y = self.absolute_origin()
        return Box(x, y, self.width, self.height)

    @property
    def dock_size(self) -> float:
        return 0.0

    def dock(self, box: Box) -> Box:
        """Take a strip of `box` at this panel's anchor; return what is left."""
        if self.anchor in (Anchor.TOP, Anchor.BOTTOM):
            size = min(self.dock_size, box.height)
            top = box.top if self.anchor is Anchor.TOP else box.top + box.height - size
            self.set_position(box.left, top)
            self.set_size(box.width, size)
            new_top = box.top + size if self.anchor is Anchor.TOP else box.top
            return Box(box.left, new_top, box.width, box.height - size)

        size = min(self.dock_size, box.width)
        left = box.left if self.anchor is Anchor.LEFT else box.left + box.width - size
        self.set_position(left, box.top)
        self.set_size(size, box.height)
        new_left = box.left + size if self.anchor is Anchor.LEFT else box.left
        return Box(new_left, box.top, box.width - size, box.height)

    def layout(self) -> Box:
        """
        Dock title/legend children inside the content box, stretch fill
        children over the rest, and return that remaining client box.
        """
        box = Box(self.margins["left"], self.margins["top"], self.content_width, self.content_height)
        for child in self.children:
            if child.anchor in _DOCKED:
                box = child.dock(box)
        for child in self.children:
            if child.anchor is Anchor.FILL:
                child.set_position(box.left, box.top)
                child.set_size(box.width, box.height)
        return box

    # ---------------------------
    # Tree
    # ---------------------------

    def append_to(self, parent: Panel) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
        self.parent = parent
        parent.children.append(self)

    @property
    def root_panel(self) -> Panel:
        panel = self
        while panel.parent is not None:
            panel = panel.parent
        return panel

    def walk(self) -> Iterator[Panel]:
        yield self
        for child in self.children:
            yield from child.walk()

    def add_mark(self, mark: Label) -> Label:
        self.marks.append(mark)
        return mark

    # ---------------------------
    # Surface + rendering
    # ---------------------------

    def create(self) -> PaintSurface:
        """Create the paint surface; only for a panel without a parent."""
        if self.parent is not None:
            raise OperationInvalidError("Only a root panel owns a paint surface.")
        backend = self.chart.backend if self.chart is not None else None
        canvas_class = backend.canvas_class() if backend is not None else None
        self._surface = PaintSurface(self.width, self.height, canvas_class=canvas_class)
        return self._surface

    @property
    def surface(self) -> PaintSurface:
        root = self.root_panel
        if root._surface is None:
            raise OperationInvalidError("Panel tree has no paint surface; call create() on its root.")
        return root._surface

    def apply_extensions(self) -> None:
        self.chart.extend(self, self.extension_prefix)

    def render(self) -> None:
        """Repaint the whole tree this panel belongs to."""
        root = self.root_panel
        surface = self.surface
        surface.clear()
        root._paint_tree(surface)
        surface.flush()

    def _paint_tree(self, surface: PaintSurface) -> None:
        self.layout()
        self.paint(surface)
        for mark in self.marks:
            mark.paint(surface)
        for child in self.children:
            child._paint_tree(surface)

    def paint(self, surface: PaintSurface) -> None:
        if self.fill_style is None and self.stroke_style is None:
            return
        rect = surface.figure_rect(self.absolute_box())
        surface.figure.add_artist(
            Rectangle(
                (rect[0], rect[1]), rect[2], rect[3],
                transform=surface.figure.transFigure,
                facecolor=self.fill_style or "none",
                edgecolor=self.stroke_style or "none",
            )
        )

    def transition(self) -> Transition:
        scheduler = self.chart.scheduler or CanvasTimerScheduler(self.surface.figure.canvas)
        return Transition(scheduler)

    def on_render_end(self, animated: bool) -> None:
        self.rendered_animated = animated
        for child in self.children:
            child.on_render_end(animated)


class BasePanel(Panel):
    extension_prefix = "base_"

    def on_render_end(self, animated: bool) -> None:
        logger.debug("Render ended (animated=%s) for %s", animated, self.chart)
        super().on_render_end(animated)


class TitlePanel(Panel):
    extension_prefix = "title_"

    def __init__(
        self,
        chart: Chart,
        *,
        title: str,
        anchor: Anchor | str = Anchor.TOP,
        title_size: float | None = None,
        title_align: str = "center",
    ) -> None:
        super().__init__(chart, anchor=anchor)
        self.title = title
        self.title_size = title_size
        self.title_align = title_align
        self.font_size: float | None = None
        self.text_style = "#000000"

    @property
    def dock_size(self) -> float:
        return float(self.title_size or DEFAULT_TITLE_SIZE)

    def paint(self, surface: PaintSurface) -> None:
        super().paint(surface)
        left, top, width, height = self.absolute_box()
        vertical = self.anchor in (Anchor.LEFT, Anchor.RIGHT)
        if vertical or self.title_align == "center":
            x, ha = left + width / 2, "center"
        elif self.title_align == "left":
            x, ha = left, "left"
        else:
            x, ha = left + width, "right"
        fx, fy = surface.figure_point(x, top + height / 2)
        surface.figure.text(
            fx, fy, self.title, ha=ha, va="center",
            fontsize=self.font_size or self.dock_size * 0.55,
            color=self.text_style,
            rotation=90 if vertical else 0,
        )


class LegendPanel(Panel):
    extension_prefix = "legend_"

    def __init__(
        self,
        chart: Chart,
        *,
        anchor: Anchor | str = Anchor.BOTTOM,
        legend_size: float | None = None,
        align: str | None = None,
        min_margin_x: float | None = None,
        min_margin_y: float | None = None,
        text_margin: float | None = None,
        padding: float | None = None,
        text_adjust: float | None = None,
        shape: str | None = None,
        marker_size: float | None = None,
        draw_line: bool | None = None,
        draw_marker: bool | None = None,
    ) -> None:
        super().__init__(chart, anchor=anchor)
        self.legend_size = legend_size
        self.align = align or "center"
        self.min_margin_x = min_margin_x if min_margin_x is not None else 8
        self.min_margin_y = min_margin_y if min_margin_y is not None else 8
        self.text_margin = text_margin if text_margin is not None else 6
        self.padding = padding if padding is not None else 24
        self.text_adjust = text_adjust if text_adjust is not None else 0
        self.shape = shape or "square"
        self.marker_size = marker_size if marker_size is not None else 8
        self.draw_line = bool(draw_line)
        self.draw_marker = True if draw_marker is None else bool(draw_marker)
        self.font_size: float = 9

    @property
    def dock_size(self) -> float:
        return float(self.legend_size or DEFAULT_LEGEND_SIZE)

    def entries(self) -> list[tuple[str, str]]:
        return self.chart.legend_entries()

    def paint(self, surface: PaintSurface) -> None:
        super().paint(surface)
        entries = self.entries()
        if not entries:
            return
        left, top, width, height = self.absolute_box()
        horizontal = self.anchor in (Anchor.TOP, Anchor.BOTTOM)
        step = (width - 2 * self.min_margin_x) / len(entries) if horizontal else min(
            self.padding, (height - 2 * self.min_margin_y) / len(entries)
        )
        fig = surface.figure
        marker = _LEGEND_MARKERS.get(self.shape, "s")
        for i, (text, color) in enumerate(entries):
            if horizontal:
                x, y = left + self.min_margin_x + i * step, top + height / 2
            else:
                x, y = left + self.min_margin_x, top + self.min_margin_y + (i + 0.5) * step
            fx, fy = surface.figure_point(x + self.marker_size / 2, y)
            if self.draw_line:
                fx0, _ = surface.figure_point(x, y)
                fx1, _ = surface.figure_point(x + self.marker_size, y)
                fig.add_artist(Line2D([fx0, fx1], [fy, fy], color=color, transform=fig.transFigure))
            if self.draw_marker:
                fig.add_artist(
                    Line2D([fx], [fy], marker=marker, markersize=self.marker_size * 0.75,
                           color=color, linestyle="none", transform=fig.transFigure)
                )
            tx, ty = surface.figure_point(x + self.marker_size + self.text_margin, y + self.text_adjust)
            fig.text(tx, ty, text, ha="left", va="center", fontsize=self.font_size)
