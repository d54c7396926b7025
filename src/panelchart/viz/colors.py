"""Color schemes: stable key -> color assignment over a palette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import matplotlib
from matplotlib.colors import to_hex

DEFAULT_PALETTE = "tab10"


class ColorScheme:
    """
    Assigns palette colors to keys in first-seen order, cycling when exhausted.
    The same key always gets the same color.
    """

    def __init__(self, colors: Sequence[str]) -> None:
        if not colors:
            raise ValueError("A color scheme needs at least one color.")
        self.colors = [to_hex(c) for c in colors]
        self._assigned: dict[Any, str] = {}

    def __call__(self, key: Any) -> str:
        if key not in self._assigned:
            self._assigned[key] = self.colors[len(self._assigned) % len(self.colors)]
        return self._assigned[key]

    def reset(self) -> None:
        self._assigned.clear()


def _palette(name: str) -> list[str]:
    cmap = matplotlib.colormaps[name]
    colors = getattr(cmap, "colors", None)
    if colors is None:
        colors = [cmap(i / 9) for i in range(10)]
    return [to_hex(c) for c in colors]


def create_color_scheme(colors: str | Sequence[str] | ColorScheme | None = None) -> ColorScheme:
    """
    Build a color scheme from a palette name, a list of colors, or nothing (default palette).
    """
    if isinstance(colors, ColorScheme):
        return colors
    if colors is None:
        return ColorScheme(_palette(DEFAULT_PALETTE))
    if isinstance(colors, str):
        if colors in matplotlib.colormaps:
            return ColorScheme(_palette(colors))
        return ColorScheme([colors])
    return ColorScheme(list(colors))
