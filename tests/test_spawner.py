import random

import pytest

from voxelplace.core.config import GeneratorConfig, SpawnerConfig, SpawnMode
from voxelplace.core.types import Vec3
from voxelplace.shapes.library import ShapeLibrary
from voxelplace.shapes.spawner import Spawner, generate_unique_color
from voxelplace.world import World


def test_spawn_predefined_fills_ground(small_library):
    world = World(bounds=(8, 4, 8), library=small_library)
    config = SpawnerConfig(min_spawn_count=4, max_spawn_count=6)
    report = Spawner(world, config, rng=random.Random(11)).spawn_initial_set()

    assert report.complete
    assert 4 <= report.placed <= 6
    assert len(world) == report.placed
    for inst in world.instances:
        assert inst.rotation == 0
        assert inst.pivot.y == 0
        assert inst.collidable

    cells = [c for inst in world.instances
             for c in world.grid.world_cells(inst.definition, inst.pivot, inst.rotation)]
    assert len(cells) == len(set(cells)) == len(world.grid)


def test_spawn_procedural_uses_generator():
    world = World(bounds=(12, 8, 12))
    config = SpawnerConfig(mode=SpawnMode.PROCEDURAL, min_spawn_count=3, max_spawn_count=3,
                           spawn_on_ground_only=False)
    spawner = Spawner(world, config, GeneratorConfig(max_cubes=5), random.Random(2))
    report = spawner.spawn_initial_set()

    assert report.placed == 3
    assert all(inst.definition.is_procedural for inst in world.instances)
    assert all(inst.definition.size <= 5 for inst in world.instances)


def test_spawn_clears_previous_world(small_library, mono):
    world = World(bounds=(8, 4, 8), library=small_library)
    old = world.add_instance(mono, Vec3(7, 3, 7))

    Spawner(world, SpawnerConfig(min_spawn_count=1, max_spawn_count=1),
            rng=random.Random(0)).spawn_initial_set()

    assert not old.alive
    assert len(world) == 1


def test_spawn_stops_at_attempt_cap(mono):
    world = World(bounds=(1, 1, 1), library=ShapeLibrary([mono]))
    config = SpawnerConfig(min_spawn_count=3, max_spawn_count=3, max_attempts_per_shape=2)
    report = Spawner(world, config, rng=random.Random(0)).spawn_initial_set()

    assert report.placed == 1
    assert not report.complete
    assert report.attempts == 3 * 50
    assert report.pivot_failures == report.attempts - 1
    assert world.logger.messages("warning")


def test_spawn_with_empty_library_logs_error():
    world = World(bounds=(4, 4, 4), library=ShapeLibrary())
    report = Spawner(world, SpawnerConfig(), rng=random.Random(0)).spawn_initial_set()
    assert report.placed == 0
    assert world.logger.messages("error")


def test_unique_colors():
    first = generate_unique_color(0)
    assert first == pytest.approx((0.95, 0.2375, 0.2375))
    colors = {tuple(round(v, 4) for v in generate_unique_color(i)) for i in range(10)}
    assert len(colors) == 10
    for color in colors:
        assert all(0.0 <= v <= 1.0 for v in color)
