"""Cancellable timers.

A :class:`Timer` is the ownership token a room keeps for its pending delay.
Schedulers create timers; callbacks only run for timers that were neither
cancelled nor already fired.

- ``BackgroundScheduler`` runs each delay as a Socket.IO background task
- ``ManualScheduler`` keeps a virtual clock that tests move with ``advance``
"""

from __future__ import annotations

import heapq
import itertools
import time
from typing import Any, Callable


TimerCallback = Callable[["Timer"], None]


class Timer:
    __slots__ = ("due", "label", "cancelled", "fired")

    def __init__(self, due: float, label: str = "") -> None:
        self.due = due
        self.label = label
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Cancel the timer. Returns False if it already fired or was cancelled."""
        if not self.active:
            return False
        self.cancelled = True
        return True

    def fire(self) -> bool:
        if not self.active:
            return False
        self.fired = True
        return True

    def __repr__(self) -> str:
        status = "cancelled" if self.cancelled else "fired" if self.fired else "pending"
        return f"<Timer {self.label or '?'} due={self.due:.2f} {status}>"


class BackgroundScheduler:
    def __init__(self, socketio: Any) -> None:
        self.socketio = socketio

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: TimerCallback, label: str = "") -> Timer:
        timer = Timer(self.now() + delay, label)
        self.socketio.start_background_task(self._run, timer, delay, callback)
        return timer

    def _run(self, timer: Timer, delay: float, callback: TimerCallback) -> None:
        self.socketio.sleep(delay)
        if timer.fire():
            callback(timer)


class ManualScheduler:
    """Virtual clock. Nothing fires until :meth:`advance` is called."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, Timer, TimerCallback]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: TimerCallback, label: str = "") -> Timer:
        timer = Timer(self._now + delay, label)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer, callback))
        return timer

    def pending(self) -> list[Timer]:
        return sorted((t for _, _, t, _ in self._queue if t.active), key=lambda t: t.due)

    def advance(self, seconds: float) -> None:
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, timer, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if timer.fire():
                callback(timer)
        self._now = target
