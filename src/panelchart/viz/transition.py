"""Timed transitions with cancellable handles and pluggable schedulers."""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable
from typing import Any, Protocol

from matplotlib.backend_bases import FigureCanvasBase, TimerBase

from panelchart.core.constants import TRANSITION_DURATION_S, TRANSITION_EASING

logger = logging.getLogger(__name__)

# Painting is two-point (start/end): an easing is validated and logged, never sampled
EASINGS: frozenset[str] = frozenset({"linear", "cubic-in", "cubic-out", "cubic-in-out"})


class TransitionHandle:
    """A pending transition completion. Cancelling prevents the callback from running."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self.cancelled = False
        self.done = False
        self.timer: Any = None

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> bool:
        if self.done:
            return False
        self.cancelled = True
        if self.timer is not None:
            self.timer.stop()
            self.timer = None
        return True

    def fire(self) -> None:
        if self.cancelled or self.done:
            return
        self.done = True
        self.timer = None
        self._callback()


class Scheduler(Protocol):
    def call_later(self, delay: float, handle: TransitionHandle) -> None: ...


class CanvasTimerScheduler:
    """
    Fires handles from the canvas' own event-loop timer, so completions run
    on the thread that paints. A canvas without an event loop (plain
    `FigureCanvasBase`) has nothing to wait on and completes at once.
    """

    def __init__(self, canvas: FigureCanvasBase) -> None:
        self.canvas = canvas

    def call_later(self, delay: float, handle: TransitionHandle) -> None:
        timer = self.canvas.new_timer(interval=max(int(delay * 1000), 1))
        if type(timer) is TimerBase:
            logger.debug("%s has no event loop timer; completing now", type(self.canvas).__name__)
            handle.fire()
            return
        timer.single_shot = True
        timer.add_callback(handle.fire)
        # GUI timers are collected unless referenced
        handle.timer = timer
        timer.start()


class ManualScheduler:
    """
    Deterministic scheduler: time only moves when `advance()` is called.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, TransitionHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, handle: TransitionHandle) -> None:
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle))

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if h.pending)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self.now = due
            handle.fire()
        self.now = target


class Transition:
    """
    Builder for one transition: `Transition(s).duration(2).ease("linear").start(cb)`.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self.scheduler = scheduler
        self._duration = TRANSITION_DURATION_S
        self.easing_name = TRANSITION_EASING

    def duration(self, seconds: float) -> Transition:
        self._duration = float(seconds)
        return self

    def ease(self, name: str) -> Transition:
        if name not in EASINGS:
            raise ValueError(f"Unknown easing '{name}'. Known: {sorted(EASINGS)}")
        self.easing_name = name
        return self

    def start(self, on_complete: Callable[[], None]) -> TransitionHandle:
        handle = TransitionHandle(on_complete)
        logger.debug("Starting transition: %.2fs %s", self._duration, self.easing_name)
        self.scheduler.call_later(self._duration, handle)
        return handle
