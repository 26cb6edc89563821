"""
Serializable world snapshots.

A snapshot records the world extents and, for every shape in the world, which
definition it uses (a library id or its own cell list), its pivot cell, its
rotation and its colour. ``to_dict``/``from_dict`` give the JSON layout used by
save slots.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from voxelplace.core.rotation import NUM_ROTATIONS, snap_to_right_angles
from voxelplace.core.types import RGB, Vec3


SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class PredefinedShape:
    """Reference to a shape in the library."""
    shape_id: str


@dataclass(frozen=True)
class ProceduralShape:
    """Generated shape carried inline with its own cells."""
    shape_id: str
    cells: Tuple[Vec3, ...] = ()


ShapeRef = Union[PredefinedShape, ProceduralShape]


def parse_rotation(value) -> int:
    """
    Read a stored rotation: an index, Euler degrees ``[x, y, z]`` or a
    quaternion ``[w, x, y, z]``. Off-grid values snap to the nearest quarter turn.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid rotation: {value!r}")
    if isinstance(value, int):
        if not 0 <= value < NUM_ROTATIONS:
            raise ValueError(f"Rotation index out of range: {value}")
        return value
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        return snap_to_right_angles([float(v) for v in value])
    raise ValueError(f"Invalid rotation: {value!r}")


def _parse_color(value) -> RGB:
    if value is None:
        return (1.0, 1.0, 1.0)
    if not isinstance(value, (list, tuple)) or len(value) not in (3, 4):
        raise ValueError(f"Invalid color: {value!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


@dataclass
class PlacementRecord:
    shape: ShapeRef
    pivot: Vec3
    rotation: int = 0
    color: RGB = (1.0, 1.0, 1.0)

    @property
    def is_procedural(self) -> bool:
        return isinstance(self.shape, ProceduralShape)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "definition_id": self.shape.shape_id,
            "is_procedural": self.is_procedural,
            "pivot": self.pivot.to_list(),
            "rotation": self.rotation,
            "color": list(self.color),
        }
        if self.is_procedural:
            data["cells"] = [c.to_list() for c in self.shape.cells]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacementRecord":
        if not isinstance(data, dict):
            raise ValueError("Placement entry must be a mapping")
        if "pivot" not in data:
            raise ValueError("Placement entry has no pivot")

        shape_id = str(data.get("definition_id") or "")
        if data.get("is_procedural", False):
            cells = tuple(Vec3.from_list(c) for c in data.get("cells") or [])
            shape: ShapeRef = ProceduralShape(shape_id, cells)
        else:
            shape = PredefinedShape(shape_id)

        return cls(
            shape=shape,
            pivot=Vec3.from_list(data["pivot"]),
            rotation=parse_rotation(data.get("rotation", 0)),
            color=_parse_color(data.get("color")),
        )


@dataclass
class WorldSnapshot:
    world_bounds: Vec3
    placements: List[PlacementRecord] = field(default_factory=list)
    version: int = SNAPSHOT_VERSION
    saved_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "saved_at": self.saved_at,
            "world_bounds": self.world_bounds.to_list(),
            "placements": [p.to_dict() for p in self.placements],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorldSnapshot":
        """
        Parse a snapshot mapping.

        Raises:
            ValueError: If the mapping or any placement entry is malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a mapping")
        if "world_bounds" not in data:
            raise ValueError("Snapshot has no world_bounds")

        try:
            bounds = Vec3.from_list(data["world_bounds"])
            version = int(data.get("version", SNAPSHOT_VERSION))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid snapshot header: {e}")
        if bounds.x <= 0 or bounds.y <= 0 or bounds.z <= 0:
            raise ValueError(f"World bounds must be positive, got {bounds.to_tuple()}")

        placements = []
        for i, entry in enumerate(data.get("placements") or []):
            try:
                placements.append(PlacementRecord.from_dict(entry))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid placement {i}: {e}")

        return cls(
            world_bounds=bounds,
            placements=placements,
            version=version,
            saved_at=data.get("saved_at"),
        )
