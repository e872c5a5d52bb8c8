"""Shift report — the end-of-shift debrief built from engine counters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .anomaly import AnomalyEngine


def detection_rate(triggered: int, resolved: int) -> int:
    """Resolved / triggered as a whole percent, rounded half-up.

    A shift with nothing triggered scores 100.
    """
    if triggered <= 0:
        return 100
    return int(resolved * 100 / triggered + 0.5)


@dataclass
class RoomReport:
    room: str
    name: str
    triggered: int = 0
    resolved: int = 0

    @property
    def missed(self) -> int:
        return self.triggered - self.resolved

    def to_dict(self) -> dict:
        return {
            "room": self.room,
            "name": self.name,
            "triggered": self.triggered,
            "resolved": self.resolved,
            "missed": self.missed,
        }


@dataclass
class ShiftReport:
    result: str  # win, loss, aborted
    total_triggered: int
    total_resolved: int
    penalties: int = 0
    unresolved: int = 0
    final_clock: str = "12:00 AM"
    rooms: list[RoomReport] = field(default_factory=list)

    @property
    def won(self) -> bool:
        return self.result == "win"

    @property
    def missed(self) -> int:
        return self.total_triggered - self.total_resolved

    @property
    def detection_rate(self) -> int:
        return detection_rate(self.total_triggered, self.total_resolved)

    def to_dict(self) -> dict:
        return {
            "result": self.result,
            "won": self.won,
            "total_triggered": self.total_triggered,
            "total_resolved": self.total_resolved,
            "missed": self.missed,
            "penalties": self.penalties,
            "unresolved": self.unresolved,
            "detection_rate": self.detection_rate,
            "final_clock": self.final_clock,
            "rooms": [r.to_dict() for r in self.rooms],
        }


def build_report(engine: AnomalyEngine, result: str, final_clock: str) -> ShiftReport:
    """Summarise *engine* counters. Every catalogue room gets a row."""
    rooms = []
    for room_id, room in engine.rooms.items():
        tally = engine.room_log.get(room_id)
        rooms.append(RoomReport(
            room=room_id,
            name=room.name,
            triggered=tally.triggered if tally else 0,
            resolved=tally.resolved if tally else 0,
        ))
    return ShiftReport(
        result=result,
        total_triggered=engine.total_triggered,
        total_resolved=engine.total_resolved,
        penalties=engine.penalties,
        unresolved=len(engine.active_anomalies),
        final_clock=final_clock,
        rooms=rooms,
    )
