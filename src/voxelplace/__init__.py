"""
voxelplace: pick up, rotate and place polycubes on a bounded voxel grid

An authoritative occupancy grid rejects overlapping or out-of-bounds
placements, a hold-session state machine drives pick-up / rotate / place /
cancel, and a procedural generator grows random connected shapes.

Example Usage:
```python
import random

from voxelplace import Config, World, Spawner, PlacementController, VoxelRayPicker

config = Config()
world = World.from_config(config)
Spawner(world, config.spawner, config.generator, random.Random(7)).spawn_initial_set()

controller = PlacementController(world.grid, VoxelRayPicker(world), world.get_instance)
```

Command-line Usage:
```bash
voxelplace spawn --slot 1 --seed 7
voxelplace show --slot 1
voxelplace play --slot 1
```
"""

from voxelplace.core.config import Config, load_config, validate_config
from voxelplace.core.occupancy import OccupancyGrid
from voxelplace.core.types import ShapeDefinition, ShapeInstance, ShapeOrigin, Vec3
from voxelplace.interaction.controller import FrameInput, PlacementController, ViewRay
from voxelplace.interaction.raypick import VoxelRayPicker
from voxelplace.interaction.session import HoldState, HoldStateMachine
from voxelplace.shapes.generator import ShapeGenerator
from voxelplace.shapes.spawner import Spawner
from voxelplace.world import World

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "validate_config",
    "OccupancyGrid",
    "ShapeDefinition",
    "ShapeInstance",
    "ShapeOrigin",
    "Vec3",
    "FrameInput",
    "PlacementController",
    "ViewRay",
    "VoxelRayPicker",
    "HoldState",
    "HoldStateMachine",
    "ShapeGenerator",
    "Spawner",
    "World",
]
