"""ShiftController — night-shift state machine, win/loss, and debrief.

Architecture
------------
A session moves through four states:

  idle -> briefing -> active -> complete
  idle ------------> active

  - ``idle``: pre-game.  The room catalogue is fresh.
  - ``briefing``: free-look study period.  No spawns, no scoring, no clock.
  - ``active``: clock ticking, spawn scheduler armed, reports accepted.
  - ``complete``: terminal for the shift.  ``reset()`` returns to idle with
    a rebuilt catalogue so the next shift never sees old mutations.

Entering ``active`` builds a new AnomalyEngine, ShiftClock and
SpawnScheduler; nothing carries over from a previous shift.

A shift ends exactly once, through ``end_shift()``:

  - win: the clock reaches the configured duration
  - loss: the undetected count reaches ``max_anomalies``, either after a
    spawn or after a wrong-report penalty
  - aborted: ``abort()`` from the operator

Ending always cancels the pending spawn timer before anything else.

Events published on the EventBus for presentation:
  - ``shift_state_change``: any state transition (``get_state()``)
  - ``anomaly_spawned``: new anomaly (sound cue, alert banner)
  - ``tension_alert``: undetected count at or above ``alert_threshold``
  - ``anomaly_resolved``: correct report
  - ``report_rejected``: wrong report, penalty applied
  - ``shift_over``: debrief (``ShiftReport.to_dict()``)
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from loguru import logger

from .anomaly import Anomaly, AnomalyEngine, AnomalyKind
from .clock import DEFAULT_REAL_PER_HOUR, DEFAULT_SHIFT_DURATION, ShiftClock
from .report import ShiftReport, build_report
from .rooms import Room, build_house, camera_labels
from .scheduler import FIRST_SPAWN_DELAY, SpawnScheduler

if TYPE_CHECKING:
    from nightshift.comms.event_bus import EventBus
    from .timers import Timers


class ShiftState(str, Enum):
    IDLE = "idle"
    BRIEFING = "briefing"
    ACTIVE = "active"
    COMPLETE = "complete"


RESULTS = ("win", "loss", "aborted")


@dataclass(frozen=True)
class ShiftConfig:
    """Fixed tuning for a shift."""

    duration: float = DEFAULT_SHIFT_DURATION
    real_seconds_per_hour: float = DEFAULT_REAL_PER_HOUR
    max_anomalies: int = 5
    first_spawn_delay: float = FIRST_SPAWN_DELAY
    alert_threshold: int = 3


class ShiftController:
    """Orchestrates one player's shifts."""

    STATES = tuple(s.value for s in ShiftState)

    def __init__(
        self,
        event_bus: EventBus,
        timers: Timers,
        config: ShiftConfig | None = None,
        catalogue_factory: Callable[[], dict[str, Room]] = build_house,
        rng: random.Random | None = None,
    ) -> None:
        self._event_bus = event_bus
        self._timers = timers
        self.config = config or ShiftConfig()
        self._catalogue_factory = catalogue_factory
        self._rng = rng or random.Random()

        self.state: ShiftState = ShiftState.IDLE
        self.rooms: dict[str, Room] = catalogue_factory()
        self.session: AnomalyEngine | None = None
        self.clock = self._new_clock()
        self.scheduler: SpawnScheduler | None = None
        self.result: str | None = None
        self.last_report: ShiftReport | None = None
        self.camera_index: int = 0

    # -- Transitions ----------------------------------------------------------

    def begin_briefing(self) -> bool:
        """Idle -> briefing. Nothing about anomalies is touched."""
        if self.state != ShiftState.IDLE:
            return False
        self.state = ShiftState.BRIEFING
        self.camera_index = 0
        self._publish_state_change()
        return True

    def start_shift(self) -> bool:
        """Idle/briefing -> active with zeroed counters and a fresh clock."""
        if self.state not in (ShiftState.IDLE, ShiftState.BRIEFING):
            return False

        self.session = AnomalyEngine(
            self.rooms,
            max_anomalies=self.config.max_anomalies,
            rng=self._rng,
        )
        self.clock = self._new_clock()
        self.scheduler = SpawnScheduler(
            self,
            self._timers,
            rng=self._rng,
            first_delay=self.config.first_spawn_delay,
        )
        self.result = None
        self.last_report = None
        self.state = ShiftState.ACTIVE

        self.clock.start()
        self.scheduler.start()
        logger.info(
            f"Shift started: {self.clock.duration:.0f}s simulated, "
            f"max {self.config.max_anomalies} undetected"
        )
        self._publish_state_change()
        return True

    def end_shift(self, result: str) -> ShiftReport | None:
        """Active -> complete. Returns the debrief, or None if not active."""
        if result not in RESULTS:
            raise ValueError(f"Unknown shift result: {result!r}")
        if self.state != ShiftState.ACTIVE:
            return None

        self.state = ShiftState.COMPLETE
        if self.scheduler is not None:
            self.scheduler.stop()
        self.clock.stop()
        self.result = result

        report = build_report(self.session, result, self.clock.label)
        self.last_report = report
        logger.info(
            f"Shift over ({result}) at {report.final_clock}: "
            f"{report.total_resolved}/{report.total_triggered} resolved, "
            f"detection rate {report.detection_rate}%"
        )
        self._event_bus.publish("shift_over", report.to_dict())
        self._publish_state_change()
        return report

    def abort(self) -> bool:
        return self.end_shift("aborted") is not None

    def reset(self) -> bool:
        """Back to idle with a rebuilt catalogue. Not allowed mid-shift."""
        if self.state == ShiftState.ACTIVE:
            return False
        self.state = ShiftState.IDLE
        self.rooms = self._catalogue_factory()
        self.session = None
        self.scheduler = None
        self.clock = self._new_clock()
        self.result = None
        self.camera_index = 0
        self._publish_state_change()
        return True

    # -- Driving --------------------------------------------------------------

    def tick(self, real_dt: float) -> None:
        """Advance the shift clock by *real_dt* real seconds."""
        if self.state != ShiftState.ACTIVE:
            return
        self.clock.advance(real_dt)
        if self.clock.expired:
            self.end_shift("win")

    def spawn_anomaly(self) -> Anomaly | None:
        """Spawn one anomaly now and notify presentation.

        Returns None outside an active shift.  The spawn that fills the
        last undetected slot ends the shift as a loss.
        """
        if self.state != ShiftState.ACTIVE:
            return None
        anomaly = self.session.spawn()
        undetected = self.session.undetected_count
        self._event_bus.publish("anomaly_spawned", {
            **anomaly.to_dict(),
            "undetected": undetected,
        })
        if undetected >= self.config.alert_threshold:
            self._event_bus.publish("tension_alert", {"undetected": undetected})
        if self.session.limit_reached:
            self.end_shift("loss")
        return anomaly

    def report(self, room_id: str, kind: AnomalyKind | str) -> bool:
        """Player report. A wrong guess costs one undetected slot."""
        if self.state != ShiftState.ACTIVE:
            return False

        if self.session.resolve(room_id, kind):
            self._event_bus.publish("anomaly_resolved", {
                "room": room_id,
                "kind": _kind_value(kind),
                "undetected": self.session.undetected_count,
            })
            return True

        undetected = self.session.apply_penalty()
        logger.debug(f"Wrong report: {room_id} / {_kind_value(kind)}")
        self._event_bus.publish("report_rejected", {
            "room": room_id,
            "kind": _kind_value(kind),
            "undetected": undetected,
        })
        if self.session.limit_reached:
            self.end_shift("loss")
        return False

    # -- Cameras --------------------------------------------------------------

    @property
    def camera_labels(self) -> list[str]:
        return camera_labels(self.rooms)

    @property
    def camera_room(self) -> str:
        return list(self.rooms)[self.camera_index]

    def select_camera(self, index: int) -> str:
        """Switch the viewed camera. Returns its label."""
        if not 0 <= index < len(self.rooms):
            raise IndexError(f"No camera {index} (have {len(self.rooms)})")
        self.camera_index = index
        return self.camera_labels[index]

    def glitch_level(self, room_id: str | None = None) -> str:
        if self.session is None or self.state != ShiftState.ACTIVE:
            return "none"
        return self.session.glitch_level(room_id or self.camera_room)

    # -- Queries --------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.state == ShiftState.ACTIVE

    @property
    def undetected_count(self) -> int:
        return self.session.undetected_count if self.session else 0

    @property
    def tension(self) -> bool:
        return self.is_active and self.undetected_count > 0

    def get_state(self) -> dict:
        """Return serializable shift state for API/frontend."""
        session = self.session
        return {
            "state": self.state.value,
            "result": self.result,
            "clock": self.clock.label,
            "elapsed": round(self.clock.elapsed, 1),
            "progress": round(min(self.clock.progress, 1.0), 4),
            "undetected": self.undetected_count,
            "max_anomalies": self.config.max_anomalies,
            "total_triggered": session.total_triggered if session else 0,
            "total_resolved": session.total_resolved if session else 0,
            "tension": self.tension,
            "camera": self.camera_index,
            "camera_label": self.camera_labels[self.camera_index],
            "glitch": self.glitch_level(),
        }

    # -- Internals ------------------------------------------------------------

    def _new_clock(self) -> ShiftClock:
        return ShiftClock(self.config.duration, self.config.real_seconds_per_hour)

    def _publish_state_change(self) -> None:
        self._event_bus.publish("shift_state_change", self.get_state())


def _kind_value(kind: AnomalyKind | str) -> str:
    return kind.value if isinstance(kind, AnomalyKind) else str(kind)
