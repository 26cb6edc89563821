"""
The world: bounds, the occupancy grid, and every shape instance living in it.

``World`` is the one place that creates and destroys ``ShapeInstance`` objects,
and it keeps the grid in step with the instances that are resting in it.
Snapshots are exported from and imported into a ``World``.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from voxelplace.core.config import Config
from voxelplace.core.occupancy import OccupancyGrid
from voxelplace.core.types import RGB, ShapeDefinition, ShapeInstance, ShapeOrigin, Vec3
from voxelplace.shapes.library import ShapeLibrary, default_library, load_shape_library
from voxelplace.snapshot import (
    PlacementRecord, PredefinedShape, ProceduralShape, WorldSnapshot
)
from voxelplace.utils.display import LiveLogger


@dataclass
class ImportReport:
    """Outcome of restoring a snapshot; ``skipped`` holds one reason per dropped entry."""
    restored: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.skipped


class World:
    """Container of shape instances on top of an ``OccupancyGrid``."""

    def __init__(self, bounds=(32, 16, 32), library: Optional[ShapeLibrary] = None,
                 logger: Optional[LiveLogger] = None):
        self.grid = OccupancyGrid(bounds)
        self.library = library if library is not None else default_library()
        self.logger = logger or LiveLogger(verbose=False)
        self._instances: Dict[str, ShapeInstance] = {}
        self._counter = 0

    @classmethod
    def from_config(cls, config: Config, logger: Optional[LiveLogger] = None) -> "World":
        library = None
        if config.spawner.library_path:
            library = load_shape_library(config.spawner.library_path)
        return cls(bounds=config.world.size, library=library, logger=logger)

    @property
    def bounds(self) -> Vec3:
        return self.grid.bounds

    @property
    def instances(self) -> List[ShapeInstance]:
        return list(self._instances.values())

    def __len__(self) -> int:
        return len(self._instances)

    def get_instance(self, instance_id: str) -> Optional[ShapeInstance]:
        return self._instances.get(instance_id)

    def add_instance(self, definition: ShapeDefinition, pivot: Vec3, rotation: int = 0,
                     color: RGB = (1.0, 1.0, 1.0), tag: str = "") -> Optional[ShapeInstance]:
        """
        Create a resting instance and register its cells.

        Returns None, leaving the world untouched, when the cells are not free.
        """
        if not self.grid.can_place(definition, pivot, rotation):
            return None

        self._counter += 1
        prefix = f"Polycube_{tag}_" if tag else "Polycube_"
        instance_id = f"{prefix}{self._counter:02d}_{definition.id}"

        instance = ShapeInstance(instance_id=instance_id, definition=definition, color=color)
        instance.apply_state(pivot, rotation)
        self.grid.register(definition, pivot, rotation)
        self._instances[instance_id] = instance
        return instance

    def remove_instance(self, instance_id: str) -> bool:
        """Destroy an instance. Cells are released only if it was resting in the grid."""
        instance = self._instances.pop(instance_id, None)
        if instance is None:
            return False
        if instance.collidable:
            self.grid.unregister(instance.definition, instance.pivot, instance.rotation)
        instance.destroy()
        return True

    def clear(self):
        for instance in self._instances.values():
            instance.destroy()
        self._instances.clear()
        self.grid.clear()
        self._counter = 0

    def resize(self, bounds):
        """Change the world extents. Everything in the world is removed."""
        self.clear()
        self.grid.resize(bounds)

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #
    def export_snapshot(self, overrides: Optional[Mapping[str, Tuple[Vec3, int]]] = None) -> WorldSnapshot:
        """
        Record every shape in the world.

        Args:
            overrides: Per-instance ``(pivot, rotation)`` to store instead of the
                live pose, used for a shape that is currently in hand.
        """
        overrides = overrides or {}
        placements = []
        for instance in self._instances.values():
            if not instance.is_available():
                continue

            pivot, rotation = overrides.get(instance.instance_id, (instance.pivot, instance.rotation))
            definition = instance.definition
            if definition.is_procedural:
                shape = ProceduralShape(definition.id, definition.cells)
            else:
                shape = PredefinedShape(definition.id)

            placements.append(PlacementRecord(
                shape=shape, pivot=pivot, rotation=rotation, color=tuple(instance.color)
            ))

        return WorldSnapshot(world_bounds=self.bounds, placements=placements)

    def resolve_definition(self, record: PlacementRecord) -> Tuple[Optional[ShapeDefinition], str]:
        """Definition for a record, or None with the reason it could not be resolved."""
        shape = record.shape
        if isinstance(shape, ProceduralShape):
            if not shape.cells:
                return None, f"procedural shape '{shape.shape_id}' has no cells"
            return ShapeDefinition.from_cells(shape.shape_id, shape.cells, origin=ShapeOrigin.PROCEDURAL), ""

        definition = self.library.get_definition_by_id(shape.shape_id)
        if definition is None:
            return None, f"unknown shape id '{shape.shape_id}'"
        return definition, ""

    def import_snapshot(self, snapshot: WorldSnapshot) -> ImportReport:
        """
        Replace the world's contents with a snapshot.

        The world is cleared and resized to the snapshot's bounds first. Entries
        whose shape cannot be resolved or that no longer fit are skipped and
        reported; the rest are restored.
        """
        self.resize(snapshot.world_bounds)
        report = ImportReport()

        for i, record in enumerate(snapshot.placements):
            definition, reason = self.resolve_definition(record)
            if definition is None:
                report.skipped.append(f"entry {i}: {reason}")
                self.logger.log_warning(f"Skipping saved shape {i}: {reason}")
                continue

            instance = self.add_instance(
                definition, record.pivot, record.rotation, color=record.color, tag="Load"
            )
            if instance is None:
                reason = f"'{definition.id}' no longer fits at {record.pivot.to_tuple()}"
                report.skipped.append(f"entry {i}: {reason}")
                self.logger.log_warning(f"Skipping saved shape {i}: {reason}")
                continue

            report.restored.append(instance.instance_id)

        self.logger.log_result(
            f"Restored {len(report.restored)} shape(s), skipped {len(report.skipped)}",
            success=report.success,
        )
        return report
