"""Shared fixtures for shift-engine tests: fake bus, scripted RNG, rooms."""

from __future__ import annotations

import queue
import random
import threading

import pytest

from nightshift.simulation.rooms import Light, Painting, Room, SceneObject, Screen, Vec3


class SimpleEventBus:
    """Minimal EventBus for unit testing. Queues receive the event data."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[queue.Queue]] = {}
        self._lock = threading.Lock()
        self.published: list[tuple[str, object]] = []

    def publish(self, topic: str, data: object = None) -> None:
        with self._lock:
            self.published.append((topic, data))
            for q in self._subscribers.get(topic, []):
                q.put(data)

    def subscribe(self, topic: str) -> queue.Queue:
        q: queue.Queue = queue.Queue()
        with self._lock:
            self._subscribers.setdefault(topic, []).append(q)
        return q

    def topics(self) -> list[str]:
        return [t for t, _ in self.published]


class ScriptedRandom(random.Random):
    """Random whose ``choice`` follows a script, then falls back to seeded.

    Each scripted pick is consumed only if it is in the sequence offered;
    otherwise the seeded generator chooses.  ``randoms`` does the same for
    ``random()``.
    """

    def __init__(self, picks=(), randoms=()) -> None:
        super().__init__(1234)
        self._picks = list(picks)
        self._randoms = list(randoms)

    def choice(self, seq):
        if self._picks and self._picks[0] in seq:
            return self._picks.pop(0)
        return super().choice(seq)

    def random(self):
        if self._randoms:
            return self._randoms.pop(0)
        return super().random()


def make_room(
    room_id: str = "test-room",
    painting: bool = False,
    screen: bool = False,
    objects: int = 2,
) -> Room:
    room = Room(
        room_id=room_id,
        name=room_id.replace("-", " ").title(),
        objects=[SceneObject(f"obj{i}", Vec3(float(i), 0.5, -1.0)) for i in range(objects)],
        light=Light(intensity=15.0, color=0xFFFFFF),
    )
    if painting:
        room.painting = Painting(color=0x1A3A6B)
    if screen:
        room.screen = Screen(color=0x050505)
    return room


@pytest.fixture
def bus() -> SimpleEventBus:
    return SimpleEventBus()


@pytest.fixture
def room_factory():
    """The ``make_room`` builder, for tests that need custom rooms."""
    return make_room


@pytest.fixture
def scripted_random():
    """The ``ScriptedRandom`` class, for forcing spawn choices."""
    return ScriptedRandom
