"""Cancellable delayed callbacks.

Sessions never touch timers directly; they receive a :class:`Scheduler`.
The desktop app plugs in a ``QTimer`` implementation, headless code and
tests use :class:`ManualScheduler`, whose clock only moves when told to.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Protocol, Tuple


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimerHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False

    def fire(self) -> None:
        if self._active:
            self._active = False
            self._callback()


class ManualScheduler:
    """Virtual-clock scheduler; :meth:`advance` runs whatever comes due."""

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: List[Tuple[float, int, ManualTimerHandle]] = []
        self._counter = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if handle.active)

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ManualTimerHandle:
        handle = ManualTimerHandle(self._now + max(0.0, delay_seconds), callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in due order.

        Callbacks scheduled while advancing fire too if they fall inside
        the window.
        """
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self._now = due
            handle.fire()
        self._now = target
