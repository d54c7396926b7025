"""CSS-like margin shorthand parsing."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

MarginsSpec = dict[str, Any]

_SIDES = ("top", "right", "bottom", "left")


def _coerce_token(token: str) -> int | float | str:
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        return token


def parse_margins(margins: Any) -> MarginsSpec | None:
    """
    Convert a css-like shorthand margin value to a margins mapping.

      - "1"        -> {"all": 1}
      - "1 2"      -> {"top": 1, "left": 2, "right": 2, "bottom": 1}
      - "1 2 3"    -> {"top": 1, "left": 2, "right": 2, "bottom": 3}
      - "1 2 3 4"  -> {"top": 1, "right": 2, "bottom": 3, "left": 4}
      - 10         -> {"all": 10}
      - a mapping is returned as a plain dict (already parsed)

    Any other token count, or a value of another type, logs a warning and yields None.
    """
    if margins is None:
        return None

    if isinstance(margins, str):
        comps = [_coerce_token(t) for t in re.split(r"\s+", margins.strip())]
        if len(comps) == 1:
            return {"all": comps[0]}
        if len(comps) == 2:
            return {"top": comps[0], "left": comps[1], "right": comps[1], "bottom": comps[0]}
        if len(comps) == 3:
            return {"top": comps[0], "left": comps[1], "right": comps[1], "bottom": comps[2]}
        if len(comps) == 4:
            return dict(zip(_SIDES, comps))

        logger.warning("Invalid 'margins' option value: %r", margins)
        return None

    # bool is an int subclass but never a margin
    if isinstance(margins, (int, float)) and not isinstance(margins, bool):
        return {"all": margins}

    if isinstance(margins, Mapping):
        return dict(margins)

    logger.warning("Invalid 'margins' option value: %r", margins)
    return None


def resolve_sides(margins: Mapping[str, Any] | None) -> dict[str, float]:
    """Expand a parsed margins mapping to four numeric sides ('all' fills the gaps)."""
    if not margins:
        return {side: 0.0 for side in _SIDES}

    fallback = margins.get("all", 0)
    out: dict[str, float] = {}
    for side in _SIDES:
        value = margins.get(side, fallback)
        try:
            out[side] = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric margin %s=%r", side, value)
            out[side] = 0.0
    return out
