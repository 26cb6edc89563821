"""
Authoritative voxel occupancy for a bounded world.

Occupancy is a sparse set of filled cells, so memory grows with the number of
placed cells rather than the world volume, and every query is O(shape size).
"""

from typing import FrozenSet, List, Optional, Set, Tuple

from voxelplace.core.rotation import rotate_offset
from voxelplace.core.types import ShapeDefinition, Vec3, ZERO


def _validate_bounds(bounds) -> Vec3:
    size = Vec3.coerce(bounds)
    if size.x <= 0 or size.y <= 0 or size.z <= 0:
        raise ValueError(f"World bounds must be positive on every axis, got {size.to_tuple()}")
    return size


def _clamp(value: int, low: int, high: int) -> int:
    # An inverted range (shape wider than the world) resolves to the lower limit.
    if low > high:
        return low
    return max(low, min(value, high))


class OccupancyGrid:
    """Set of filled cells inside ``[0, bounds)`` on every axis."""

    def __init__(self, bounds=(32, 16, 32)):
        self._bounds = _validate_bounds(bounds)
        self._occupied: Set[Vec3] = set()

    @property
    def bounds(self) -> Vec3:
        return self._bounds

    @property
    def occupied(self) -> FrozenSet[Vec3]:
        """Read-only copy of the filled cells."""
        return frozenset(self._occupied)

    def __len__(self) -> int:
        return len(self._occupied)

    def __contains__(self, cell: Vec3) -> bool:
        return cell in self._occupied

    def clear(self):
        self._occupied.clear()

    def resize(self, bounds):
        """Change the world extents. Existing placements are not migrated."""
        self._bounds = _validate_bounds(bounds)
        self._occupied.clear()

    def is_occupied(self, cell: Vec3) -> bool:
        return cell in self._occupied

    def in_bounds(self, cell: Vec3) -> bool:
        b = self._bounds
        return (0 <= cell.x < b.x and
                0 <= cell.y < b.y and
                0 <= cell.z < b.z)

    def world_cells(self, definition: Optional[ShapeDefinition], pivot: Vec3, rotation: int) -> List[Vec3]:
        """Rotated offsets translated to ``pivot``, in definition order."""
        if definition is None:
            return []
        return [pivot + rotate_offset(offset, rotation) for offset in definition.cells]

    def can_place(self, definition: Optional[ShapeDefinition], pivot: Vec3, rotation: int) -> bool:
        if definition is None:
            return False

        for cell in self.world_cells(definition, pivot, rotation):
            if not self.in_bounds(cell):
                return False
            if cell in self._occupied:
                return False

        return True

    def register(self, definition: Optional[ShapeDefinition], pivot: Vec3, rotation: int):
        """Mark a shape's cells as filled. Callers validate with ``can_place`` first."""
        if definition is None:
            return
        self._occupied.update(self.world_cells(definition, pivot, rotation))

    def unregister(self, definition: Optional[ShapeDefinition], pivot: Vec3, rotation: int):
        if definition is None:
            return
        for cell in self.world_cells(definition, pivot, rotation):
            self._occupied.discard(cell)

    def rotated_extents(self, definition: ShapeDefinition, rotation: int) -> Tuple[Vec3, Vec3]:
        """Componentwise min and max of the rotated offsets."""
        rotated = [rotate_offset(offset, rotation) for offset in definition.cells]
        if not rotated:
            return ZERO, ZERO
        lo = Vec3(min(c.x for c in rotated), min(c.y for c in rotated), min(c.z for c in rotated))
        hi = Vec3(max(c.x for c in rotated), max(c.y for c in rotated), max(c.z for c in rotated))
        return lo, hi

    def clamp_pivot_to_bounds(self, definition: Optional[ShapeDefinition], pivot: Vec3, rotation: int) -> Vec3:
        """
        Clamp the pivot so the rotated shape stays fully inside the bounds.

        Each axis is clamped independently to ``[-min, (bounds - 1) - max]``.
        When the shape is wider than the world on an axis the range is inverted
        and the pivot lands on the lower limit, which keeps the shape's minimum
        extent on the world floor for that axis.
        """
        if definition is None:
            return pivot

        lo, hi = self.rotated_extents(definition, rotation)
        b = self._bounds

        return Vec3(
            _clamp(pivot.x, -lo.x, (b.x - 1) - hi.x),
            _clamp(pivot.y, -lo.y, (b.y - 1) - hi.y),
            _clamp(pivot.z, -lo.z, (b.z - 1) - hi.z),
        )
