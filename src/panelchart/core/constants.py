"""Constants and enums for panel anchors, render states and roles."""

from __future__ import annotations

from enum import Enum


class Anchor(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    FILL = "fill"


class Orientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class RenderState(str, Enum):
    UNINITIALIZED = "uninitialized"
    PRERENDERED = "prerendered"
    RENDER_START = "render_start"
    RENDER_TRANSITIONING = "render_transitioning"
    RENDER_END = "render_end"


# Roles that may be bound to several dimensions of the same group
MULTI_DIMENSION_ROLES: tuple[str, ...] = (
    "series",
    "category",
    "multi_chart_column",
    "multi_chart_row",
)

# Roles bound to exactly one dimension of the same name
SINGLE_DIMENSION_ROLES: tuple[str, ...] = ("value", "value2")

DEFAULT_WIDTH: int = 400
DEFAULT_HEIGHT: int = 300
DEFAULT_MULTI_CHART_WRAP_COLUMN: int = 3

DEFAULT_DPI: int = 100
DEFAULT_TITLE_SIZE: int = 25
DEFAULT_LEGEND_SIZE: int = 30

TRANSITION_DURATION_S: float = 2.0
TRANSITION_EASING: str = "cubic-in-out"

NO_DATA_MESSAGE: str = "No data found"
NO_DATA_EXTENSION_PREFIX: str = "no_data_message_"

# Splits "<series><sep><measure>" crosstab headers
DEFAULT_CROSSTAB_SEPARATOR: str = "~"
