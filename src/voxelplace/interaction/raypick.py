"""
Ray-pick contract and a voxel implementation of it.

The interaction layer only ever asks one question of the scene: what does a ray
hit first? ``RayPickProvider`` is that contract; ``VoxelRayPicker`` answers it
against the world's resting shapes and its ground plane.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

import numpy as np

from voxelplace.core.types import Vec3

if TYPE_CHECKING:
    from voxelplace.world import World


@dataclass
class RayHit:
    """First surface hit by a ray. ``shape_id`` is None for non-shape geometry."""
    point: np.ndarray
    normal: np.ndarray
    shape_id: Optional[str] = None


class RayPickProvider(ABC):
    """Scene query consumed by the placement controller."""

    @abstractmethod
    def pick(self, origin, direction, max_distance: float) -> Optional[RayHit]:
        """Return the first hit along the ray, ignoring trigger-only geometry."""
        pass


class VoxelRayPicker(RayPickProvider):
    """
    3D-DDA ray walk over the cells of collidable shapes, plus the ground plane
    ``y = 0`` inside the world's x/z extents.

    Shapes with collision disabled (the one in hand) are invisible to the ray.
    """

    def __init__(self, world: "World"):
        self.world = world

    def _cell_owners(self) -> Dict[Vec3, str]:
        owners: Dict[Vec3, str] = {}
        for inst in self.world.instances:
            if not inst.collidable or not inst.is_available():
                continue
            for cell in self.world.grid.world_cells(inst.definition, inst.pivot, inst.rotation):
                owners[cell] = inst.instance_id
        return owners

    def _ground_distance(self, origin: np.ndarray, direction: np.ndarray) -> Optional[float]:
        if direction[1] >= 0 or origin[1] <= 0:
            return None
        t = origin[1] / -direction[1]
        point = origin + direction * t
        bounds = self.world.bounds
        if not (0 <= point[0] < bounds.x and 0 <= point[2] < bounds.z):
            return None
        return float(t)

    def pick(self, origin, direction, max_distance: float) -> Optional[RayHit]:
        o = np.asarray(origin, dtype=float)
        d = np.asarray(direction, dtype=float)
        norm = np.linalg.norm(d)
        if norm == 0:
            return None
        d = d / norm

        limit = float(max_distance)
        t_ground = self._ground_distance(o, d)
        if t_ground is not None and t_ground <= limit:
            limit = t_ground
        else:
            t_ground = None

        owners = self._cell_owners()
        if owners:
            hit = self._walk(o, d, limit, owners)
            if hit is not None:
                return hit

        if t_ground is not None:
            return RayHit(point=o + d * t_ground, normal=np.array([0.0, 1.0, 0.0]), shape_id=None)
        return None

    @staticmethod
    def _walk(o: np.ndarray, d: np.ndarray, limit: float, owners: Dict[Vec3, str]) -> Optional[RayHit]:
        cell = np.floor(o).astype(int)
        step = np.sign(d).astype(int)

        t_max = np.full(3, np.inf)
        t_delta = np.full(3, np.inf)
        for axis in range(3):
            if d[axis] > 0:
                t_max[axis] = (cell[axis] + 1 - o[axis]) / d[axis]
                t_delta[axis] = 1.0 / d[axis]
            elif d[axis] < 0:
                t_max[axis] = (cell[axis] - o[axis]) / d[axis]
                t_delta[axis] = -1.0 / d[axis]

        while True:
            axis = int(np.argmin(t_max))
            t = float(t_max[axis])
            if t > limit:
                return None

            cell[axis] += step[axis]
            t_max[axis] += t_delta[axis]

            key = Vec3(int(cell[0]), int(cell[1]), int(cell[2]))
            if key in owners:
                normal = np.zeros(3)
                normal[axis] = -step[axis]
                return RayHit(point=o + d * t, normal=normal, shape_id=owners[key])
