"""
Initial population of the world.

The spawner picks a target count, then repeatedly draws a definition (from the
library or the procedural generator) and looks for a free random pivot for it,
until the target is met or the global attempt cap runs out.
"""

import random
from dataclasses import dataclass
from typing import Optional

from matplotlib.colors import hsv_to_rgb

from voxelplace.core.config import GeneratorConfig, SpawnerConfig, SpawnMode
from voxelplace.core.rotation import IDENTITY
from voxelplace.core.types import RGB, ShapeDefinition, Vec3
from voxelplace.shapes.generator import ShapeGenerator
from voxelplace.utils.display import LiveLogger


GOLDEN_RATIO_CONJUGATE = 0.61803398875
SPAWN_SATURATION = 0.75
SPAWN_VALUE = 0.95
ATTEMPTS_PER_TARGET = 50


def generate_unique_color(index: int) -> RGB:
    """Well-separated colour for the ``index``-th spawned shape (golden-ratio hue walk)."""
    hue = (index * GOLDEN_RATIO_CONJUGATE) % 1.0
    r, g, b = hsv_to_rgb([hue, SPAWN_SATURATION, SPAWN_VALUE])
    return (float(r), float(g), float(b))


@dataclass
class SpawnReport:
    target: int = 0
    placed: int = 0
    attempts: int = 0
    definition_failures: int = 0
    pivot_failures: int = 0

    @property
    def complete(self) -> bool:
        return self.placed >= self.target


class Spawner:
    """Fills a ``World`` with a random set of resting shapes."""

    def __init__(self, world, config: Optional[SpawnerConfig] = None,
                 generator_config: Optional[GeneratorConfig] = None,
                 rng: Optional[random.Random] = None, logger: Optional[LiveLogger] = None):
        self.world = world
        self.config = config or SpawnerConfig()
        self.rng = rng or random.Random()
        self.generator = ShapeGenerator(generator_config, self.rng)
        self.logger = logger or world.logger

    def next_definition(self, index: int) -> Optional[ShapeDefinition]:
        if self.config.mode is SpawnMode.PROCEDURAL:
            return self.generator.create_definition(index)
        return self.world.library.pick_definition(
            self.rng,
            weight_by_size=self.config.weight_by_size,
            weight_exponent=self.config.weight_exponent,
        )

    def try_find_pivot(self, definition: ShapeDefinition) -> Optional[Vec3]:
        """Random free pivot for the shape at identity rotation, or None."""
        bounds = self.world.bounds
        for _ in range(self.config.max_attempts_per_shape):
            x = self.rng.randrange(bounds.x)
            z = self.rng.randrange(bounds.z)
            y = 0 if self.config.spawn_on_ground_only else self.rng.randrange(bounds.y)

            pivot = Vec3(x, y, z)
            if self.world.grid.can_place(definition, pivot, IDENTITY):
                return pivot
        return None

    def spawn_initial_set(self) -> SpawnReport:
        """
        Clear the world and populate it.

        Returns:
            SpawnReport with the target, how many shapes landed, and why the
            rest did not.
        """
        report = SpawnReport()

        if self.config.mode is SpawnMode.PREDEFINED and len(self.world.library) == 0:
            self.logger.log_error("Spawner is in predefined mode but the shape library is empty")
            return report

        min_count = self.config.min_spawn_count
        max_count = max(min_count, self.config.max_spawn_count)
        report.target = self.rng.randint(min_count, max_count)

        self.world.clear()
        self.logger.log_action("spawn", f"{report.target} shape(s), {self.config.mode.value} mode")

        attempt_cap = report.target * ATTEMPTS_PER_TARGET
        while report.placed < report.target and report.attempts < attempt_cap:
            report.attempts += 1

            definition = self.next_definition(report.placed)
            if definition is None:
                report.definition_failures += 1
                continue

            pivot = self.try_find_pivot(definition)
            if pivot is None:
                report.pivot_failures += 1
                continue

            self.world.add_instance(
                definition, pivot, IDENTITY, color=generate_unique_color(report.placed)
            )
            report.placed += 1

        if report.complete:
            self.logger.log_result(f"Spawned {report.placed} shape(s) in {report.attempts} attempt(s)")
        else:
            self.logger.log_warning(
                f"Spawned only {report.placed}/{report.target} shape(s) "
                f"after {report.attempts} attempt(s)"
            )
        return report
