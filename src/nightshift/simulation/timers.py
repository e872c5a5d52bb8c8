"""Cancellable delayed callbacks.

The spawn scheduler never sleeps.  It asks a ``Timers`` implementation to
run a callback after a delay and keeps the returned handle so a shift
ending can cancel it.

  LoopTimers   — real time, backed by an asyncio event loop
                 (``loop.call_later``); used by the HTTP service.
  ManualTimers — virtual time advanced explicitly; used by the headless
                 runner and the tests.

Both run callbacks on the caller's thread, one at a time, so a callback
finishes its state changes before any other callback or tick can observe
them.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timers(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopTimers:
    """Timers on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(delay, callback)


class _ManualHandle:
    __slots__ = ("due", "callback", "cancelled")

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimers:
    """Virtual-time timer queue. Nothing fires until ``advance()``."""

    def __init__(self) -> None:
        self.now: float = 0.0
        self._heap: list[tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._heap, (handle.due, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)

    def next_due(self) -> float | None:
        """Virtual time of the earliest live timer, or None."""
        for due, _, handle in sorted(self._heap):
            if not handle.cancelled:
                return due
        return None

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing due callbacks in order.

        Callbacks scheduled while advancing fire too if they fall inside the
        window.  Returns the number of callbacks run.
        """
        deadline = self.now + seconds
        fired = 0
        while self._heap and self._heap[0][0] <= deadline:
            due, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self.now = due
            handle.callback()
            fired += 1
        self.now = deadline
        return fired
