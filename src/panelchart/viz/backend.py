"""Rendering backend capability detection."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass

import matplotlib

logger = logging.getLogger(__name__)

# Backends that only write files; they cannot show a timed transition
_NON_INTERACTIVE_BACKENDS = frozenset(
    {"agg", "cairo", "pdf", "pgf", "ps", "svg", "template"}
)


@dataclass(frozen=True)
class RenderBackend:
    """What the active drawing backend can do."""

    name: str
    supports_animation: bool = False

    @classmethod
    def detect(cls) -> RenderBackend:
        name = str(matplotlib.get_backend())
        return cls(name=name, supports_animation=name.lower() not in _NON_INTERACTIVE_BACKENDS)

    def canvas_class(self) -> type | None:
        """
        The backend's `FigureCanvas`, whose timers run on its event loop.
        None for file-only backends, or when the backend module cannot be loaded.
        """
        if not self.supports_animation:
            return None
        if self.name.startswith("module://"):
            module_name = self.name[len("module://"):]
        else:
            module_name = f"matplotlib.backends.backend_{self.name.lower()}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.warning("Cannot load backend %s (%s); transitions complete immediately", self.name, e)
            return None
        return getattr(module, "FigureCanvas", None)
