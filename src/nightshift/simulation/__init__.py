"""Shift simulation — anomaly engine, clock, spawn pacing, state machine.

Package layout:
  rooms.py     — Room descriptors + default six-room house
  anomaly.py   — AnomalyEngine (spawn / apply / resolve, per-shift counters)
  clock.py     — ShiftClock (simulated time, 12-hour label)
  timers.py    — cancellable delayed callbacks (asyncio or virtual time)
  scheduler.py — SpawnScheduler (adaptive pacing)
  shift.py     — ShiftController (idle/briefing/active/complete)
  report.py    — ShiftReport (end-of-shift debrief)
  runner.py    — ShiftRunner (asyncio tick loop)
"""

from .anomaly import Anomaly, AnomalyEngine, AnomalyKind, RoomTally, kind_pool
from .clock import ShiftClock, format_clock
from .report import RoomReport, ShiftReport, build_report, detection_rate
from .rooms import Artifact, Light, Painting, Room, SceneObject, Screen, Vec3, build_house
from .runner import ShiftRunner
from .scheduler import SpawnScheduler, spawn_delay
from .shift import ShiftConfig, ShiftController, ShiftState
from .timers import LoopTimers, ManualTimers

__all__ = [
    "Anomaly",
    "AnomalyEngine",
    "AnomalyKind",
    "Artifact",
    "Light",
    "LoopTimers",
    "ManualTimers",
    "Painting",
    "Room",
    "RoomReport",
    "RoomTally",
    "SceneObject",
    "Screen",
    "ShiftClock",
    "ShiftConfig",
    "ShiftController",
    "ShiftReport",
    "ShiftRunner",
    "ShiftState",
    "SpawnScheduler",
    "Vec3",
    "build_house",
    "build_report",
    "detection_rate",
    "format_clock",
    "kind_pool",
    "spawn_delay",
]
