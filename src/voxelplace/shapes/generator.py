"""
Procedural polycube generation.

Shapes are grown as random connected clusters, several candidates are built for
the same size, and the tallest-scoring one wins:

1. decide how many cubes the shape should have (weighted size draw),
2. grow candidates by attaching cubes next to existing ones,
3. score each candidate by its vertical extent,
4. keep the best one and wrap it in a runtime definition.
"""

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from voxelplace.core.config import GeneratorConfig
from voxelplace.core.types import (
    NEIGHBOR_DIRECTIONS, ShapeDefinition, ShapeOrigin, Vec3, ZERO
)


@dataclass
class GeneratedShape:
    """
    A grown cluster.

    ``cells`` are the raw growth offsets (the growth origin is (0,0,0) and no cell
    sits below it); ``normalized_cells`` are the same cells shifted so the
    bounding corner is at the origin, and ``pivot`` is where the growth origin
    landed after that shift.
    """
    cells: List[Vec3]
    normalized_cells: List[Vec3]
    pivot: Vec3
    score: int = 0

    @property
    def height(self) -> int:
        return shape_height(self.cells)


def normalize_to_origin(cells: Sequence[Vec3]) -> Tuple[List[Vec3], Vec3]:
    """
    Shift cells so the minimum on each axis is zero.

    Returns:
        (normalized cells, the shift that was subtracted)
    """
    if not cells:
        return [], ZERO

    min_x = min(c.x for c in cells)
    min_y = min(c.y for c in cells)
    min_z = min(c.z for c in cells)
    shift = Vec3(min_x, min_y, min_z)

    return [c - shift for c in cells], shift


def shape_height(cells: Sequence[Vec3]) -> int:
    if not cells:
        return 0
    return (max(c.y for c in cells) - min(c.y for c in cells)) + 1


def score_verticality(cells: Sequence[Vec3], verticality_weight: float) -> int:
    """Score = 10 per cube plus a bonus proportional to height."""
    height = shape_height(cells)
    score = len(cells) * 10
    score += int(round(height * verticality_weight * 10.0))
    return score


class ShapeGenerator:
    """Builds random connected shapes from an injected random source."""

    def __init__(self, config: Optional[GeneratorConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or GeneratorConfig()
        self.rng = rng or random.Random()

    def grow_cluster(self, target_count: int) -> Optional[List[Vec3]]:
        """
        Grow a connected cluster of ``target_count`` cells from the origin.

        Each draw picks a random existing cell and a random axis direction; the
        neighbour is accepted when it is new and not below the base plane.
        Returns None when the draw budget runs out before the target is reached.
        """
        if target_count <= 0:
            return None

        occupied = {ZERO}
        cells = [ZERO]

        for _ in range(self.config.max_build_attempts * target_count):
            if len(cells) >= target_count:
                break

            base_cell = cells[self.rng.randrange(len(cells))]
            step = NEIGHBOR_DIRECTIONS[self.rng.randrange(len(NEIGHBOR_DIRECTIONS))]
            next_cell = base_cell + step

            if next_cell in occupied:
                continue
            if next_cell.y < 0:
                continue

            occupied.add(next_cell)
            cells.append(next_cell)

        if len(cells) < target_count:
            return None

        return cells

    def generate_candidate(self, target_count: int) -> Optional[GeneratedShape]:
        cells = self.grow_cluster(target_count)
        if cells is None:
            return None

        normalized, shift = normalize_to_origin(cells)
        return GeneratedShape(
            cells=cells,
            normalized_cells=normalized,
            pivot=ZERO - shift,
            score=score_verticality(cells, self.config.verticality_weight),
        )

    def generate_best(self, target_count: int) -> Optional[GeneratedShape]:
        """Grow several candidates of the same size and keep the highest score."""
        best = None
        for _ in range(self.config.candidates_per_shape):
            candidate = self.generate_candidate(target_count)
            if candidate is None:
                continue
            if best is None or candidate.score > best.score:
                best = candidate
        return best

    def pick_cube_count(self) -> int:
        """
        Weighted draw of the shape size over ``[min_cubes, max_cubes]``.

        Falls back to a uniform draw when the weight table is missing, too
        short to cover the range, or sums to zero inside it.
        """
        min_count = self.config.min_cubes
        max_count = max(self.config.max_cubes, min_count)
        weights = self.config.size_weights

        if weights is None or len(weights) <= max_count:
            return self.rng.randint(min_count, max_count)

        total_weight = sum(max(0, weights[n]) for n in range(min_count, max_count + 1))
        if total_weight <= 0:
            return self.rng.randint(min_count, max_count)

        roll = self.rng.randrange(total_weight)
        accumulated = 0
        for n in range(min_count, max_count + 1):
            accumulated += max(0, weights[n])
            if roll < accumulated:
                return n

        return max_count

    def create_definition(self, index: int = 0, cube_count: Optional[int] = None) -> Optional[ShapeDefinition]:
        """
        Generate a runtime (procedural) shape definition.

        The definition's offsets are relative to the growth origin, so the pivot
        is always a member cell and the shape rests on its pivot's plane.

        Args:
            index: Sequence number used in the runtime id.
            cube_count: Fixed size; drawn from the weight table when omitted.

        Returns:
            The definition, or None when no candidate could be grown.
        """
        if cube_count is None:
            cube_count = self.pick_cube_count()

        best = self.generate_best(cube_count)
        if best is None:
            return None

        shape_id = f"R_{index + 1:02d}_N{cube_count}"
        offsets = [c - best.pivot for c in best.normalized_cells]
        return ShapeDefinition.from_cells(shape_id, offsets, origin=ShapeOrigin.PROCEDURAL)
