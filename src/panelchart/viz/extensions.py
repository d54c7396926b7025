"""Declarative extension points: `prefix + member -> value` overrides on visual objects."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from panelchart.core.errors import ArgumentInvalidError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtensionCapabilities:
    """
    What a visual object allows extension points to touch.

    - setters: members invoked with the configured value instead of assigned;
      a list or tuple value is spread over the setter's arguments
    - locked: members never overridden
    - intercepted: members controlled by the chart itself
    """

    setters: frozenset[str] = field(default_factory=frozenset)
    locked: frozenset[str] = field(default_factory=frozenset)
    intercepted: frozenset[str] = field(default_factory=frozenset)

    def is_locked(self, member: str) -> bool:
        return member in self.locked

    def is_intercepted(self, member: str) -> bool:
        return member in self.intercepted

    def is_setter(self, member: str) -> bool:
        return member in self.setters


def capabilities_of(target: Any) -> ExtensionCapabilities | None:
    declared = getattr(target, "extension_capabilities", None)
    if callable(declared):
        declared = declared()
    return declared if isinstance(declared, ExtensionCapabilities) else None


def _is_locked(target: Any, caps: ExtensionCapabilities | None, member: str) -> bool:
    if caps is not None:
        return caps.is_locked(member)
    check = getattr(target, "is_locked", None)
    return bool(check(member)) if callable(check) else False


def _is_intercepted(target: Any, caps: ExtensionCapabilities | None, member: str) -> bool:
    if caps is not None:
        return caps.is_intercepted(member)
    check = getattr(target, "is_intercepted", None)
    return bool(check(member)) if callable(check) else False


def apply_extensions(
    target: Any,
    prefix: str,
    extension_points: Mapping[str, Any] | None,
) -> list[str]:
    """
    Apply every extension point whose key starts with `prefix` to `target`.

    Returns the members that were applied. A callable member is invoked with
    the value; anything else is assigned. When the target declares its
    capabilities, only its declared setters are invoked and its other
    methods are never replaced.
    """
    logger.debug(
        "Applying extension points for '%s'%s", prefix, "" if target is not None else " (target does not exist)"
    )
    if target is None or not extension_points:
        return []

    caps = capabilities_of(target)
    applied: list[str] = []
    for key, value in extension_points.items():
        if not key.startswith(prefix):
            continue
        member = key[len(prefix):]
        if not member:
            continue

        if _is_locked(target, caps, member):
            logger.debug("* %s: locked extension point!", member)
            continue
        if _is_intercepted(target, caps, member):
            logger.debug("* %s: %r (controlled)", member, value)
            continue

        current = getattr(target, member, None)
        if caps is not None and caps.is_setter(member):
            if not callable(current):
                raise ArgumentInvalidError(
                    "extension_points",
                    f"'{type(target).__name__}' declares '{member}' as a setter but has no such method.",
                )
            logger.debug("* %s(%r)", member, value)
            if isinstance(value, (list, tuple)):
                current(*value)
            else:
                current(value)
        elif caps is not None and callable(current):
            logger.debug("* %s: method is not an extension setter!", member)
            continue
        elif caps is None and callable(current):
            logger.debug("* %s(%r)", member, value)
            current(value)
        else:
            logger.debug("* %s: %r", member, value)
            setattr(target, member, value)
        applied.append(member)
    return applied
