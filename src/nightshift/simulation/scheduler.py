"""SpawnScheduler — adaptive anomaly pacing.

The scheduler owns a single outstanding timer.  On start it schedules the
first spawn after a short fixed delay so the player sees something early.
Every spawn then schedules the next one with a delay drawn from a band
that tightens as the shift progresses:

  progress < 0.33          90-120 s   early shift, forgiving
  0.33 <= progress < 0.67  60-80 s    mid shift
  progress >= 0.67         35-55 s    final stretch, tense

Delays are real seconds.  Progress is simulated time / shift duration.

A fired timer first checks that the shift is still active.  Ending the
shift cancels the pending timer, but a callback already in flight on the
loop can still arrive; it is dropped here.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .shift import ShiftController
    from .timers import TimerHandle, Timers

FIRST_SPAWN_DELAY = 15.0  # real seconds

# (progress upper bound, min delay, max delay)
PACING_BANDS: list[tuple[float, float, float]] = [
    (0.33, 90.0, 120.0),
    (0.67, 60.0, 80.0),
    (float("inf"), 35.0, 55.0),
]


def spawn_delay(progress: float, rng: random.Random | None = None) -> float:
    """Real-time delay before the next spawn at shift *progress*."""
    rng = rng or random
    for upper, low, high in PACING_BANDS:
        if progress < upper:
            return low + rng.random() * (high - low)
    _, low, high = PACING_BANDS[-1]
    return low + rng.random() * (high - low)


class SpawnScheduler:
    """Schedules anomaly spawns for one shift."""

    def __init__(
        self,
        controller: ShiftController,
        timers: Timers,
        rng: random.Random | None = None,
        first_delay: float = FIRST_SPAWN_DELAY,
    ) -> None:
        self._controller = controller
        self._timers = timers
        self._rng = rng or random.Random()
        self._first_delay = first_delay
        self._handle: TimerHandle | None = None
        self._stopped = True
        self.spawn_count: int = 0
        self.next_delay: float | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        self._stopped = False
        self._schedule(self._first_delay)

    def stop(self) -> None:
        """Cancel the pending spawn. The scheduler cannot be restarted."""
        self._stopped = True
        self.next_delay = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self, delay: float) -> None:
        self.next_delay = delay
        self._handle = self._timers.call_later(delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._stopped or not self._controller.is_active:
            logger.debug("Spawn timer fired after shift end, ignored")
            return

        self._controller.spawn_anomaly()
        self.spawn_count += 1

        if not self._stopped and self._controller.is_active:
            self._schedule(spawn_delay(self._controller.clock.progress, self._rng))
