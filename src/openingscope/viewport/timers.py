"""Timer scheduling for the viewport controller.

The controller never sleeps or spawns threads; it asks a Scheduler for
delayed callbacks and animation frames. ``AsyncioScheduler`` runs on an
event loop, ``ManualScheduler`` is a virtual clock advanced explicitly
(headless hosts, tests).
"""

import asyncio
import heapq
import itertools
from collections.abc import Callable
from enum import Enum
from typing import Protocol


FRAME_INTERVAL = 1.0 / 60.0


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Clock and timer source used by the controller."""

    def time(self) -> float:
        """Monotonic time in seconds."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def request_frame(self, callback: Callable[[float], None]) -> TimerHandle:
        """Run ``callback(timestamp)`` on the next animation frame."""
        ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def time(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self._loop.call_later(max(delay, 0.0), callback)

    def request_frame(self, callback: Callable[[float], None]) -> TimerHandle:
        return self._loop.call_later(FRAME_INTERVAL, lambda: callback(self._loop.time()))


class _ManualTimer:
    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Virtual clock.

    Nothing runs until ``advance`` (or ``run_until_idle``) moves time
    forward; callbacks then fire in time order, each seeing ``time()``
    equal to its due time.
    """

    def __init__(self, start: float = 0.0, frame_interval: float = FRAME_INTERVAL) -> None:
        self._now = start
        self.frame_interval = frame_interval
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._counter = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _ManualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.when, next(self._counter), timer))
        return timer

    def request_frame(self, callback: Callable[[float], None]) -> TimerHandle:
        return self.call_later(self.frame_interval, lambda: callback(self._now))

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every timer that falls due."""
        deadline = self._now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = when
            timer.callback()
        self._now = deadline

    def run_until_idle(self, limit: float = 60.0) -> None:
        """Fire timers until none remain or ``limit`` virtual seconds pass."""
        deadline = self._now + limit
        while self._queue and self._queue[0][0] <= deadline:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = when
            timer.callback()


class TimerKind(str, Enum):
    """One slot per kind of timer the controller runs."""

    DIMENSION_FALLBACK = "dimension_fallback"
    INIT_FALLBACK = "init_fallback"
    RESIZE_SETTLE = "resize_settle"
    AUTO_FIT = "auto_fit"
    AUTO_FIT_SETTLE = "auto_fit_settle"
    AUTO_ZOOM = "auto_zoom"
    ANIMATION = "animation"


class TimerSlots:
    """Named timers with cancel-and-replace semantics."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handles: dict[TimerKind, TimerHandle] = {}

    def replace(self, kind: TimerKind, delay: float, callback: Callable[[], None]) -> None:
        """Cancel any pending timer of this kind and schedule a new one."""
        self.cancel(kind)

        def fire() -> None:
            self._handles.pop(kind, None)
            callback()

        self._handles[kind] = self._scheduler.call_later(delay, fire)

    def frame(self, kind: TimerKind, callback: Callable[[float], None]) -> None:
        """Cancel-and-replace for an animation frame request."""
        self.cancel(kind)

        def fire(timestamp: float) -> None:
            self._handles.pop(kind, None)
            callback(timestamp)

        self._handles[kind] = self._scheduler.request_frame(fire)

    def cancel(self, kind: TimerKind) -> None:
        handle = self._handles.pop(kind, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for kind in list(self._handles):
            self.cancel(kind)

    def is_pending(self, kind: TimerKind) -> bool:
        return kind in self._handles
