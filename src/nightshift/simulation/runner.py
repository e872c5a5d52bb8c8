"""ShiftRunner — real-time tick driver on an asyncio event loop.

Ticks the controller at ``tick_hz`` with measured wall-clock deltas while
the shift is active and exits on its own once the shift completes.  Spawn
timers run on the same loop (see ``LoopTimers``), so ticks, timers and
HTTP handlers never interleave inside one another.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .shift import ShiftController


class ShiftRunner:
    """Drives ``ShiftController.tick`` from the event loop."""

    def __init__(self, controller: ShiftController, tick_hz: float = 10.0) -> None:
        if tick_hz <= 0:
            raise ValueError(f"tick_hz must be positive, got {tick_hz}")
        self._controller = controller
        self._interval = 1.0 / tick_hz
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._tick_loop(), name="shift-tick"
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _tick_loop(self) -> None:
        loop = asyncio.get_running_loop()
        last = loop.time()
        clock = self._controller.clock
        while self._controller.is_active:
            await asyncio.sleep(self._interval)
            now = loop.time()
            if self._controller.clock is clock:
                self._controller.tick(now - last)
            else:
                # A new shift began since the last tick; count from here
                clock = self._controller.clock
            last = now
        logger.debug("Shift tick loop finished")
