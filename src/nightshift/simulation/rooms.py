"""Room descriptors — the mutable features an anomaly can perturb.

The shift engine never knows how a room *looks*.  It only needs, per room,
the handful of values it may change and later put back:

  - ``objects``  — generic furniture targets (position + visibility)
  - ``light``    — optional point light (intensity + 24-bit colour)
  - ``painting`` — optional canvas (colour)
  - ``screen``   — optional TV screen (colour, emissive colour, intensity)
  - ``artifacts``— things an anomaly introduced (ghosts, intruders)

Optional features are either a full dataclass or ``None``.  Code that
mutates a feature checks for ``None`` and skips; it never probes for
attributes.

``build_house()`` returns the default six-room catalogue the game ships
with.  Positions are room-local metres (x right, y up, z toward camera).
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Vec3:
    """Mutable 3-component position."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def copy(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)

    def set(self, other: Vec3) -> None:
        self.x, self.y, self.z = other.x, other.y, other.z

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass
class SceneObject:
    """A generic piece of furniture that can be displaced or hidden."""

    name: str
    position: Vec3 = field(default_factory=Vec3)
    visible: bool = True


@dataclass
class Light:
    intensity: float
    color: int  # 0xRRGGBB


@dataclass
class Painting:
    color: int


@dataclass
class Screen:
    color: int
    emissive: int = 0x000000
    emissive_intensity: float = 0.0


@dataclass
class Artifact:
    """Something an anomaly placed into a room (ghost orb, intruder)."""

    kind: str
    position: Vec3 = field(default_factory=Vec3)
    visible: bool = True


@dataclass
class Room:
    """One monitored room."""

    room_id: str
    name: str
    objects: list[SceneObject] = field(default_factory=list)
    light: Light | None = None
    painting: Painting | None = None
    screen: Screen | None = None
    artifacts: list[Artifact] = field(default_factory=list)

    def add_artifact(self, artifact: Artifact) -> Artifact:
        self.artifacts.append(artifact)
        return artifact

    def remove_artifact(self, artifact: Artifact) -> bool:
        """Remove *artifact* (by identity). Returns False if it was not here."""
        for i, a in enumerate(self.artifacts):
            if a is artifact:
                del self.artifacts[i]
                return True
        return False


# -- Default house ------------------------------------------------------------

# Catalogue order is camera order: CAM 01 is the first room.
HOUSE_ROOMS: list[tuple[str, str]] = [
    ("living-room", "Living Room"),
    ("kitchen", "Kitchen"),
    ("bedroom", "Bedroom"),
    ("hallway", "Hallway"),
    ("office", "Office"),
    ("bathroom", "Bathroom"),
]

_LIGHT_COLORS: dict[str, int] = {
    "living-room": 0xFFFFFF,
    "kitchen": 0xFFFFEE,
    "bedroom": 0x88BBFF,
    "hallway": 0xFFF5E0,
    "office": 0xFFEEAA,
    "bathroom": 0xCCFFFF,
}

_OBJECTS: dict[str, list[tuple[str, float, float, float]]] = {
    "living-room": [
        ("rug", 0.0, 0.04, 0.0),
        ("sofa seat", 0.0, 0.5, -2.5),
        ("sofa back", 0.0, 1.0, -3.4),
        ("sofa arm right", 2.95, 0.5, -2.5),
        ("sofa arm left", -2.95, 0.5, -2.5),
        ("coffee table", 0.0, 0.86, 1.0),
        ("side cabinet", -4.3, 0.9, -2.5),
        ("plant", -4.3, 2.075, -2.0),
        ("tv stand", 0.0, 0.45, 4.0),
        ("tv body", 0.0, 1.9, 4.0),
        ("picture frame", 3.5, 3.8, -5.92),
    ],
    "kitchen": [
        ("rug", 0.0, 0.04, 0.0),
        ("left cabinets", -2.55, 0.75, -4.25),
        ("right cabinets", 2.55, 0.75, -4.25),
        ("stove", 0.0, 0.75, -4.25),
        ("countertop", 0.0, 1.56, -4.175),
        ("vent hood", 0.0, 4.62, -4.25),
        ("kettle", -2.5, 1.92, -4.1),
        ("sink", 3.0, 1.66, -4.2),
        ("plant", 4.5, 0.275, 1.5),
    ],
    "bedroom": [
        ("rug", 0.0, 0.04, 0.0),
        ("headboard", 0.0, 1.8, -5.9),
        ("mattress", 0.0, 0.45, -2.9),
        ("pillow left", -1.1, 1.0, -5.2),
        ("pillow right", 1.1, 1.0, -5.2),
        ("nightstand left", -3.2, 0.45, -5.05),
        ("nightstand right", 3.2, 0.45, -5.05),
        ("plant", 3.2, 0.275, 4.0),
    ],
    "hallway": [
        ("door", -2.85, 1.5, 0.0),
    ],
    "office": [
        ("rug", 0.0, 0.04, 0.0),
        ("desk", 0.0, 1.45, -1.8),
        ("monitor base", 0.0, 1.54, -2.4),
        ("monitor", 0.0, 2.98, -2.4),
        ("chair seat", 0.0, 0.9, 0.0),
        ("chair back", 0.0, 1.8, 0.65),
        ("plant left", -3.5, 0.275, 0.0),
        ("plant right", 3.5, 0.275, -2.5),
    ],
    "bathroom": [
        ("rug", 0.5, 0.04, 0.0),
        ("vanity", 1.2, 0.9, -2.25),
        ("vanity top", 1.2, 1.55, -2.25),
        ("toilet", -2.0, 0.5, -1.5),
        ("toilet seat", -2.0, 1.07, -1.5),
        ("toilet tank", -2.0, 0.9, -2.65),
        ("plant", -2.0, 1.275, -2.4),
    ],
}


def camera_labels(rooms: dict[str, Room]) -> list[str]:
    """CCTV labels in camera order, e.g. ``CAM 01 — LIVING ROOM``."""
    return [
        f"CAM {i + 1:02d} — {room.name.upper()}"
        for i, room in enumerate(rooms.values())
    ]


def build_house() -> dict[str, Room]:
    """Build the default catalogue: six rooms, living room has TV + painting."""
    rooms: dict[str, Room] = {}
    for room_id, name in HOUSE_ROOMS:
        room = Room(
            room_id=room_id,
            name=name,
            objects=[
                SceneObject(obj_name, Vec3(x, y, z))
                for obj_name, x, y, z in _OBJECTS[room_id]
            ],
            light=Light(
                intensity=25.0 if room_id == "hallway" else 15.0,
                color=_LIGHT_COLORS[room_id],
            ),
        )
        if room_id == "living-room":
            room.painting = Painting(color=0x1A3A6B)
            room.screen = Screen(color=0x050505)
        rooms[room_id] = room
    return rooms
