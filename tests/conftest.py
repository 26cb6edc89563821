import random

import numpy as np
import pytest

from voxelplace.core.config import InteractionConfig
from voxelplace.core.occupancy import OccupancyGrid
from voxelplace.core.types import ShapeDefinition, ShapeInstance, ShapeOrigin, Vec3
from voxelplace.interaction.raypick import RayHit, RayPickProvider
from voxelplace.shapes.library import ShapeLibrary
from voxelplace.world import World


def make_definition(shape_id, cells, origin=ShapeOrigin.PREDEFINED):
    return ShapeDefinition(id=shape_id, cells=tuple(Vec3(*c) for c in cells), origin=origin)


@pytest.fixture
def mono():
    return make_definition("P_Mono", [(0, 0, 0)])


@pytest.fixture
def domino():
    return make_definition("P_Domino", [(0, 0, 0), (1, 0, 0)])


@pytest.fixture
def tri_l():
    return make_definition("P_TriL", [(0, 0, 0), (1, 0, 0), (0, 1, 0)])


@pytest.fixture
def grid4():
    return OccupancyGrid((4, 4, 4))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def small_library(mono, domino, tri_l):
    return ShapeLibrary([mono, domino, tri_l])


@pytest.fixture
def world4(small_library):
    return World(bounds=(4, 4, 4), library=small_library)


@pytest.fixture
def fast_config():
    """Interaction settings that settle within one frame of dt=1."""
    return InteractionConfig(rotate_duration=0.1)


def place_instance(grid, instance_id, definition, pivot, rotation=0):
    """Resting instance registered in the grid."""
    instance = ShapeInstance(instance_id=instance_id, definition=definition)
    instance.apply_state(pivot, rotation)
    grid.register(definition, pivot, rotation)
    return instance


class ScriptedRayPick(RayPickProvider):
    """Ray-pick provider that returns a queued hit (or None) for every call."""

    def __init__(self, hit=None):
        self.hit = hit
        self.calls = []

    def pick(self, origin, direction, max_distance):
        self.calls.append((np.asarray(origin), np.asarray(direction), max_distance))
        return self.hit

    def aim_at_top(self, cell, shape_id=None):
        """Hit on the top face of ``cell``."""
        self.hit = RayHit(
            point=np.array([cell.x + 0.5, cell.y + 1.0, cell.z + 0.5]),
            normal=np.array([0.0, 1.0, 0.0]),
            shape_id=shape_id,
        )

    def aim_at_ground(self, x, z):
        self.hit = RayHit(point=np.array([x + 0.5, 0.0, z + 0.5]), normal=np.array([0.0, 1.0, 0.0]))
