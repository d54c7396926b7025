"""Paint surface: a matplotlib Figure addressed in pixel coordinates from the top-left."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

from matplotlib.backend_bases import FigureCanvasBase
from matplotlib.figure import Figure

from panelchart.core.constants import DEFAULT_DPI

logger = logging.getLogger(__name__)


class Box(NamedTuple):
    left: float
    top: float
    width: float
    height: float


class PaintSurface:
    def __init__(
        self,
        width: float,
        height: float,
        dpi: int = DEFAULT_DPI,
        canvas_class: type[FigureCanvasBase] | None = None,
    ) -> None:
        self.width = max(float(width), 1.0)
        self.height = max(float(height), 1.0)
        self.dpi = dpi
        self.figure = Figure(figsize=(self.width / dpi, self.height / dpi), dpi=dpi)
        if canvas_class is not None:
            # attaches itself as figure.canvas
            canvas_class(self.figure)
        self.target: str | Path | None = None
        self.render_count = 0

    def canvas(self, target: str | Path | None) -> None:
        """Output file written on every flush (None keeps the figure in memory)."""
        self.target = target

    def clear(self) -> None:
        self.figure.clear()

    def figure_rect(self, box: Box) -> list[float]:
        """[left, bottom, width, height] in figure fractions."""
        return [
            box.left / self.width,
            1.0 - (box.top + box.height) / self.height,
            box.width / self.width,
            box.height / self.height,
        ]

    def figure_point(self, x: float, y: float) -> tuple[float, float]:
        return x / self.width, 1.0 - y / self.height

    def flush(self) -> None:
        self.render_count += 1
        if self.target is None:
            return
        path = Path(self.target)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.figure.savefig(path, dpi=self.dpi)
        logger.debug("Wrote %s", path)
