"""Shape sources: the predefined library, the procedural generator and the spawner."""

from voxelplace.shapes.generator import GeneratedShape, ShapeGenerator
from voxelplace.shapes.library import ShapeLibrary, default_library, load_shape_library
from voxelplace.shapes.spawner import SpawnReport, Spawner

__all__ = [
    "GeneratedShape",
    "ShapeGenerator",
    "ShapeLibrary",
    "default_library",
    "load_shape_library",
    "SpawnReport",
    "Spawner",
]
