"""
Core data structures for voxelplace: integer cells, shape definitions and the
runtime shape instances that sit on (or float above) the occupancy grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np


DEFAULT_AUTHORED_ID = "P_Unknown"
DEFAULT_RUNTIME_ID = "R_Unknown"


def _whole(value) -> int:
    """Integer value of a coordinate; fractional input raises ValueError."""
    if isinstance(value, (int, np.integer)):
        return int(value)
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"Coordinate must be a whole number, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class Vec3:
    """Integer 3D vector. ``y`` is the vertical axis."""
    x: int
    y: int
    z: int

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def to_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def to_list(self) -> List[int]:
        return [self.x, self.y, self.z]

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=int)

    def to_key(self) -> str:
        """String key, handy for JSON maps."""
        return f"{self.x},{self.y},{self.z}"

    @staticmethod
    def from_list(lst: Sequence[int]) -> "Vec3":
        if len(lst) != 3:
            raise ValueError(f"Expected 3 coordinates, got {len(lst)}")
        return Vec3(*(_whole(v) for v in lst))

    @staticmethod
    def from_key(key: str) -> "Vec3":
        x, y, z = map(int, key.split(','))
        return Vec3(x, y, z)

    @staticmethod
    def coerce(value) -> "Vec3":
        """Accept a Vec3 or any 3-sequence of ints."""
        if isinstance(value, Vec3):
            return value
        return Vec3.from_list(value)


ZERO = Vec3(0, 0, 0)
UP = Vec3(0, 1, 0)

# Six axis-aligned neighbour directions (+x, -x, +z, -z, +y, -y).
NEIGHBOR_DIRECTIONS: Tuple[Vec3, ...] = (
    Vec3(1, 0, 0),
    Vec3(-1, 0, 0),
    Vec3(0, 0, 1),
    Vec3(0, 0, -1),
    Vec3(0, 1, 0),
    Vec3(0, -1, 0),
)


class ShapeOrigin(Enum):
    """Where a shape definition came from. Fixed when the definition is built."""
    PREDEFINED = "predefined"
    PROCEDURAL = "procedural"


@dataclass(frozen=True)
class ShapeDefinition:
    """
    Immutable polycube geometry: integer cell offsets around a pivot at the origin.

    The pivot is always a member cell, so ``cells`` contains ``(0, 0, 0)`` exactly
    once and never repeats a cell.
    """
    id: str
    cells: Tuple[Vec3, ...]
    origin: ShapeOrigin = ShapeOrigin.PREDEFINED

    def __post_init__(self):
        if not self.cells:
            raise ValueError(f"Shape '{self.id}' must have at least one cell")
        if len(set(self.cells)) != len(self.cells):
            raise ValueError(f"Shape '{self.id}' has duplicate cells")
        if ZERO not in self.cells:
            raise ValueError(f"Shape '{self.id}' does not contain its pivot cell (0,0,0)")

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def is_procedural(self) -> bool:
        return self.origin is ShapeOrigin.PROCEDURAL

    @classmethod
    def from_cells(cls, shape_id: Optional[str], cells: Optional[Iterable],
                   origin: ShapeOrigin = ShapeOrigin.PROCEDURAL) -> "ShapeDefinition":
        """
        Build a definition from a raw cell list, repairing it where needed.

        An empty list becomes the single pivot cell, a missing pivot is inserted
        at the front, and duplicates are dropped (first occurrence wins).

        Args:
            shape_id: Identifier; blank ids fall back to a default per origin.
            cells: Offsets as Vec3 or [x, y, z] sequences.
            origin: Provenance of the definition.

        Returns:
            A valid ShapeDefinition.
        """
        if not shape_id or not str(shape_id).strip():
            shape_id = DEFAULT_RUNTIME_ID if origin is ShapeOrigin.PROCEDURAL else DEFAULT_AUTHORED_ID

        repaired: List[Vec3] = []
        seen = set()
        for raw in cells or []:
            cell = Vec3.coerce(raw)
            if cell in seen:
                continue
            seen.add(cell)
            repaired.append(cell)

        if ZERO not in seen:
            repaired.insert(0, ZERO)

        return cls(id=str(shape_id), cells=tuple(repaired), origin=origin)


RGB = Tuple[float, float, float]


def cell_to_world(cell: Vec3) -> np.ndarray:
    """Centre of a grid cell in continuous world space."""
    return np.array([cell.x + 0.5, cell.y + 0.5, cell.z + 0.5], dtype=float)


def world_to_cell(point) -> Vec3:
    """Grid cell containing a continuous world point."""
    p = np.floor(np.asarray(point, dtype=float)).astype(int)
    return Vec3(int(p[0]), int(p[1]), int(p[2]))


@dataclass
class ShapeInstance:
    """
    A shape living in the world.

    ``pivot`` and ``rotation`` are the discrete state tracked by the grid;
    ``position`` and ``orientation`` are the continuous transform that an
    external renderer draws (they differ only while the shape is in hand).
    """
    instance_id: str
    definition: Optional[ShapeDefinition]
    pivot: Vec3 = ZERO
    rotation: int = 0
    color: RGB = (1.0, 1.0, 1.0)
    collidable: bool = True
    alive: bool = True
    position: np.ndarray = field(default_factory=lambda: cell_to_world(ZERO))
    orientation: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))

    def apply_state(self, pivot: Vec3, rotation: int):
        """Snap the instance (discrete and continuous transform) to a grid pose."""
        from voxelplace.core.rotation import rotation_to_quaternion

        self.pivot = pivot
        self.rotation = rotation
        self.position = cell_to_world(pivot)
        self.orientation = rotation_to_quaternion(rotation)

    def set_collision_enabled(self, enabled: bool):
        self.collidable = enabled

    def destroy(self):
        """Mark the instance as gone; any hold session on it must tear down."""
        self.alive = False
        self.collidable = False

    def is_available(self) -> bool:
        return self.alive and self.definition is not None
