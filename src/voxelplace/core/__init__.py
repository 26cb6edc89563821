"""
Core modules for voxelplace.

This package contains the fundamental components:
- Integer cells, shape definitions and shape instances
- The 24-element right-angle rotation group
- The occupancy grid
- Configuration management
"""

from voxelplace.core.config import (
    Config, GeneratorConfig, InteractionConfig, SpawnerConfig, SpawnMode, WorldConfig,
    create_default_config, load_config, validate_config
)
from voxelplace.core.occupancy import OccupancyGrid
from voxelplace.core.rotation import (
    IDENTITY, NUM_ROTATIONS, ROTATION_MATRICES, Axis, rotate_about_axis, rotate_offset,
    snap_to_right_angles
)
from voxelplace.core.types import ShapeDefinition, ShapeInstance, ShapeOrigin, Vec3

__all__ = [
    "Config",
    "GeneratorConfig",
    "InteractionConfig",
    "SpawnerConfig",
    "SpawnMode",
    "WorldConfig",
    "create_default_config",
    "load_config",
    "validate_config",
    "OccupancyGrid",
    "IDENTITY",
    "NUM_ROTATIONS",
    "ROTATION_MATRICES",
    "Axis",
    "rotate_about_axis",
    "rotate_offset",
    "snap_to_right_angles",
    "ShapeDefinition",
    "ShapeInstance",
    "ShapeOrigin",
    "Vec3",
]
