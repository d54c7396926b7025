"""Default value/tooltip formatters and click action used by chart options."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def format_value(x: Any) -> str:
    """Number with thousands separator and 0..2 fraction digits."""
    try:
        text = f"{float(x):,.2f}"
    except (TypeError, ValueError):
        return str(x)
    return text.rstrip("0").rstrip(".")


def format_percent_value(x: Any) -> str:
    return f"{format_value(x)}%"


def default_tooltip_format(
    series: Any,
    category: Any,
    value: Any,
    datum: Mapping[str, Any] | None = None,
) -> str:
    text = f"{series}, {category}:  {format_value(value)}"
    percent = datum.get("percent_label") if datum else None
    if percent:
        text += f" ({percent})"
    return text


def default_click_action(series: Any, category: Any, value: Any) -> None:
    logger.info("You clicked on series %s, category %s, value %s", series, category, value)
