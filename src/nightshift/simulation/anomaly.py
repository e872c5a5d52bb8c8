"""AnomalyEngine — spawn, apply, and resolve visual anomalies.

Architecture
------------
An anomaly is a single deviation injected into one room.  Its lifecycle:

  spawn -> apply (same step) -> active / undetected -> resolve | discarded

``spawn()`` picks a room uniformly, builds that room's kind pool, picks a
kind (and a target object for target-based kinds), applies the mutation
and records it.  The mutation step snapshots whatever it overwrites into
``original_state`` so ``resolve()`` can put the room back exactly.

Per-kind logic lives in two dispatch tables keyed by ``AnomalyKind``:

  _APPLIERS   — one entry per kind; import fails if a kind is missing
  _RESTORERS  — kinds that restore saved values; any anomaly carrying an
                ``artifact`` handle (extra, intruder) is undone by removing
                that artifact from the room instead

One engine instance holds the counters for exactly one shift.  The shift
controller builds a fresh engine every time a shift starts, so nothing
leaks from one shift into the next.

Counters:
  - ``undetected_count``: unresolved anomalies plus wrong-report penalties,
    capped at ``max_anomalies``
  - ``total_triggered`` / ``total_resolved``: monotonic per shift
  - ``room_log``: room id -> RoomTally(triggered, resolved)

Wrong reports bump ``undetected_count`` through ``apply_penalty()`` only.
They are not logged as anomalies, so detection rate and per-room tallies
reflect genuine spawns.
"""

from __future__ import annotations

import itertools
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from loguru import logger

from .rooms import Artifact, Room, SceneObject, Vec3


class AnomalyKind(str, Enum):
    DISPLACED = "displaced"
    EXTRA = "extra"
    LIGHT = "light"
    INTRUDER = "intruder"
    MISSING = "missing"
    PAINTING = "painting"
    TV = "tv"


# Kinds that act on one of the room's generic objects
TARGET_KINDS = frozenset({AnomalyKind.DISPLACED, AnomalyKind.MISSING})

# Offered in every room (given it has objects for the target kinds)
BASE_POOL: tuple[AnomalyKind, ...] = (
    AnomalyKind.DISPLACED,
    AnomalyKind.EXTRA,
    AnomalyKind.LIGHT,
    AnomalyKind.INTRUDER,
    AnomalyKind.MISSING,
)

DISPLACE_DISTANCE = 2.0
OMINOUS_INTENSITY = 5.0
OMINOUS_COLOR = 0xFF00FF
PAINTING_PALETTE: tuple[int, ...] = (0xFF2222, 0x22FF22, 0xFF8800, 0xAA00FF, 0x00FFEE)
STATIC_COLOR = 0x99BBFF
STATIC_EMISSIVE = 0x4466CC
STATIC_EMISSIVE_INTENSITY = 1.8
GHOST_OFFSET = (2.0, 1.0, 2.0)
INTRUDER_OFFSET = (-2.0, 1.0, -2.0)


@dataclass
class Anomaly:
    """One active deviation. Owned by the engine until resolved or discarded."""

    anomaly_id: int
    room: str
    kind: AnomalyKind
    target: SceneObject | None = None
    original_state: dict | None = None
    artifact: Artifact | None = None
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "id": self.anomaly_id,
            "room": self.room,
            "kind": self.kind.value,
            "target": self.target.name if self.target is not None else None,
            "created_at": self.created_at,
        }


@dataclass
class RoomTally:
    triggered: int = 0
    resolved: int = 0


# -- Per-kind mutations ---------------------------------------------------------

def _apply_displaced(room: Room, anomaly: Anomaly, rng: random.Random) -> None:
    target = anomaly.target
    if target is None:
        return
    anomaly.original_state = {"position": target.position.copy()}
    target.position.x += DISPLACE_DISTANCE if rng.random() < 0.5 else -DISPLACE_DISTANCE


def _apply_light(room: Room, anomaly: Anomaly, rng: random.Random) -> None:
    light = room.light
    if light is None:
        return
    anomaly.original_state = {"intensity": light.intensity, "color": light.color}
    if rng.random() < 0.5:
        light.intensity = 0.0  # blackout
    else:
        light.intensity = OMINOUS_INTENSITY
        light.color = OMINOUS_COLOR


def _apply_extra(room: Room, anomaly: Anomaly, rng: random.Random) -> None:
    anomaly.artifact = room.add_artifact(Artifact("ghost", Vec3(*GHOST_OFFSET)))


def _apply_intruder(room: Room, anomaly: Anomaly, rng: random.Random) -> None:
    anomaly.artifact = room.add_artifact(Artifact("intruder", Vec3(*INTRUDER_OFFSET)))


def _apply_missing(room: Room, anomaly: Anomaly, rng: random.Random) -> None:
    if anomaly.target is not None:
        anomaly.target.visible = False


def _apply_painting(room: Room, anomaly: Anomaly, rng: random.Random) -> None:
    painting = room.painting
    if painting is None:
        return
    anomaly.original_state = {"color": painting.color}
    painting.color = rng.choice(PAINTING_PALETTE)


def _apply_tv(room: Room, anomaly: Anomaly, rng: random.Random) -> None:
    screen = room.screen
    if screen is None:
        return
    anomaly.original_state = {
        "color": screen.color,
        "emissive": screen.emissive,
        "emissive_intensity": screen.emissive_intensity,
    }
    screen.color = STATIC_COLOR
    screen.emissive = STATIC_EMISSIVE
    screen.emissive_intensity = STATIC_EMISSIVE_INTENSITY


def _restore_displaced(room: Room, anomaly: Anomaly) -> None:
    saved = anomaly.original_state
    if anomaly.target is not None and saved is not None:
        anomaly.target.position.set(saved["position"])


def _restore_light(room: Room, anomaly: Anomaly) -> None:
    saved = anomaly.original_state
    if room.light is not None and saved is not None:
        room.light.intensity = saved["intensity"]
        room.light.color = saved["color"]


def _restore_missing(room: Room, anomaly: Anomaly) -> None:
    if anomaly.target is not None:
        anomaly.target.visible = True


def _restore_painting(room: Room, anomaly: Anomaly) -> None:
    saved = anomaly.original_state
    if room.painting is not None and saved is not None:
        room.painting.color = saved["color"]


def _restore_tv(room: Room, anomaly: Anomaly) -> None:
    saved = anomaly.original_state
    if room.screen is not None and saved is not None:
        room.screen.color = saved["color"]
        room.screen.emissive = saved["emissive"]
        room.screen.emissive_intensity = saved["emissive_intensity"]


_APPLIERS: dict[AnomalyKind, Callable[[Room, Anomaly, random.Random], None]] = {
    AnomalyKind.DISPLACED: _apply_displaced,
    AnomalyKind.EXTRA: _apply_extra,
    AnomalyKind.LIGHT: _apply_light,
    AnomalyKind.INTRUDER: _apply_intruder,
    AnomalyKind.MISSING: _apply_missing,
    AnomalyKind.PAINTING: _apply_painting,
    AnomalyKind.TV: _apply_tv,
}

_RESTORERS: dict[AnomalyKind, Callable[[Room, Anomaly], None]] = {
    AnomalyKind.DISPLACED: _restore_displaced,
    AnomalyKind.LIGHT: _restore_light,
    AnomalyKind.MISSING: _restore_missing,
    AnomalyKind.PAINTING: _restore_painting,
    AnomalyKind.TV: _restore_tv,
}

_missing_appliers = set(AnomalyKind) - set(_APPLIERS)
if _missing_appliers:
    raise RuntimeError(f"No apply step for anomaly kinds: {sorted(_missing_appliers)}")


def kind_pool(room: Room) -> list[AnomalyKind]:
    """Kinds that may be spawned in *room*."""
    pool = [
        k for k in BASE_POOL
        if k not in TARGET_KINDS or room.objects
    ]
    if room.painting is not None:
        pool.append(AnomalyKind.PAINTING)
    if room.screen is not None:
        pool.append(AnomalyKind.TV)
    return pool


def glitch_level(active_in_room: int) -> str:
    """Camera interference cue for a room with *active_in_room* anomalies."""
    if active_in_room >= 2:
        return "heavy"
    if active_in_room == 1:
        return "glitch"
    return "none"


class AnomalyEngine:
    """Creates, applies, and resolves anomalies for one shift."""

    def __init__(
        self,
        rooms: dict[str, Room],
        max_anomalies: int = 5,
        rng: random.Random | None = None,
    ) -> None:
        if not rooms:
            raise ValueError("AnomalyEngine needs at least one room")
        self.rooms = rooms
        self.max_anomalies = max_anomalies
        self._rng = rng or random.Random()
        self._ids = itertools.count(1)

        self.active_anomalies: list[Anomaly] = []
        self.undetected_count: int = 0
        self.total_triggered: int = 0
        self.total_resolved: int = 0
        self.penalties: int = 0
        self.room_log: dict[str, RoomTally] = {}

    # -- Spawn ----------------------------------------------------------------

    def spawn(self) -> Anomaly:
        """Trigger a random anomaly in a random room and return it."""
        room_id = self._rng.choice(list(self.rooms))
        room = self.rooms[room_id]
        kind = self._rng.choice(kind_pool(room))
        target = self._rng.choice(room.objects) if kind in TARGET_KINDS else None

        anomaly = Anomaly(
            anomaly_id=next(self._ids),
            room=room_id,
            kind=kind,
            target=target,
        )
        self.apply_mutation(room, anomaly)
        self.active_anomalies.append(anomaly)
        self.undetected_count += 1
        self.total_triggered += 1
        self.room_log.setdefault(room_id, RoomTally()).triggered += 1

        logger.info(f"Anomaly triggered in {room_id}: {kind.value}")
        return anomaly

    def apply_mutation(self, room: Room, anomaly: Anomaly) -> None:
        """Apply *anomaly* to *room*, recording what is needed to undo it.

        A feature-level kind on a room without that feature is a no-op and
        leaves ``original_state`` as ``None``.
        """
        _APPLIERS[anomaly.kind](room, anomaly, self._rng)

    def restore_mutation(self, room: Room, anomaly: Anomaly) -> None:
        """Undo *anomaly* on *room* and clear its saved state."""
        restorer = _RESTORERS.get(anomaly.kind)
        if restorer is not None:
            restorer(room, anomaly)
        elif anomaly.artifact is not None:
            room.remove_artifact(anomaly.artifact)
            anomaly.artifact = None
        anomaly.original_state = None

    # -- Resolve --------------------------------------------------------------

    def resolve(self, room_id: str, kind: AnomalyKind | str) -> bool:
        """Resolve the earliest active anomaly matching *room_id* and *kind*.

        Returns False (no state change) when nothing matches.
        """
        try:
            kind = AnomalyKind(kind)
        except ValueError:
            return False

        index = next(
            (i for i, a in enumerate(self.active_anomalies)
             if a.room == room_id and a.kind is kind),
            None,
        )
        if index is None:
            return False

        anomaly = self.active_anomalies.pop(index)
        room = self.rooms.get(room_id)
        if room is not None:
            self.restore_mutation(room, anomaly)
        self.undetected_count -= 1
        self.total_resolved += 1
        tally = self.room_log.get(room_id)
        if tally is not None:
            tally.resolved += 1

        logger.info(f"Anomaly resolved in {room_id}: {kind.value}")
        return True

    def apply_penalty(self) -> int:
        """Count a wrong report against the player. Returns the new count."""
        self.undetected_count = min(self.undetected_count + 1, self.max_anomalies)
        self.penalties += 1
        return self.undetected_count

    # -- Queries --------------------------------------------------------------

    @property
    def limit_reached(self) -> bool:
        return self.undetected_count >= self.max_anomalies

    def anomalies_in(self, room_id: str) -> list[Anomaly]:
        return [a for a in self.active_anomalies if a.room == room_id]

    def glitch_level(self, room_id: str) -> str:
        return glitch_level(len(self.anomalies_in(room_id)))
