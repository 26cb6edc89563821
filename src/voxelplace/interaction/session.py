"""
Hold-session state machine: one shape detached from the grid under user control.

States are ``IDLE`` (no session), ``FLOATING`` (held, not turning) and
``ROTATING`` (held, a timed quarter turn in progress). Every transition method
returns the state the machine is in afterwards, so a rejected request simply
returns the unchanged state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from voxelplace.core.config import InteractionConfig
from voxelplace.core.occupancy import OccupancyGrid
from voxelplace.core.rotation import (
    Axis, rotate_about_axis, rotation_to_quaternion, slerp, smoothstep,
    snap_to_right_angles
)
from voxelplace.core.types import ShapeInstance, Vec3, cell_to_world, world_to_cell


class HoldState(Enum):
    IDLE = "idle"
    FLOATING = "floating"
    ROTATING = "rotating"


@dataclass
class HoldSession:
    """Bookkeeping for the shape currently in hand."""
    shape: ShapeInstance
    pickup_cell: Vec3
    pickup_rotation: int
    target_cell: Vec3
    target_rotation: int
    rotating: bool = False
    rotate_from: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))
    rotate_to: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))
    rotate_elapsed: float = 0.0
    last_valid: bool = False

    @property
    def state(self) -> HoldState:
        return HoldState.ROTATING if self.rotating else HoldState.FLOATING


def move_towards(current: np.ndarray, target: np.ndarray, max_delta: float) -> np.ndarray:
    """Step ``current`` toward ``target`` by at most ``max_delta``."""
    delta = target - current
    dist = float(np.linalg.norm(delta))
    if dist <= max_delta or dist == 0.0:
        return target.copy()
    return current + delta / dist * max_delta


class HoldStateMachine:
    """
    Drives a single hold session against an occupancy grid.

    The grid is the only shared mutable state; this class touches it only
    through ``register`` and ``unregister``.
    """

    def __init__(self, grid: OccupancyGrid, config: Optional[InteractionConfig] = None):
        if grid is None:
            raise ValueError("HoldStateMachine requires an occupancy grid")
        self.grid = grid
        self.config = config or InteractionConfig()
        self.session: Optional[HoldSession] = None

    @property
    def state(self) -> HoldState:
        if self.session is None:
            return HoldState.IDLE
        return self.session.state

    @property
    def is_holding(self) -> bool:
        return self.session is not None

    @property
    def last_valid(self) -> bool:
        return self.session is not None and self.session.last_valid

    def shape_available(self) -> bool:
        return self.session is not None and self.session.shape.is_available()

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #
    def pick_up(self, shape: ShapeInstance, start_point) -> HoldState:
        """
        Detach a resting shape from the grid (IDLE -> FLOATING).

        Args:
            shape: The shape to take into hand.
            start_point: Continuous world point used as the first floating target.
        """
        if self.session is not None:
            return self.state
        if shape is None or not shape.is_available():
            return self.state

        definition = shape.definition
        pickup_rotation = snap_to_right_angles(shape.orientation)
        pickup_cell = shape.pivot

        self.grid.unregister(definition, pickup_cell, pickup_rotation)
        shape.set_collision_enabled(False)

        session = HoldSession(
            shape=shape,
            pickup_cell=pickup_cell,
            pickup_rotation=pickup_rotation,
            target_cell=pickup_cell,
            target_rotation=pickup_rotation,
        )
        session.target_cell = self.grid.clamp_pivot_to_bounds(
            definition, world_to_cell(start_point), session.target_rotation
        )
        shape.apply_state(session.target_cell, session.target_rotation)
        session.last_valid = self.grid.can_place(definition, session.target_cell, session.target_rotation)

        self.session = session
        return self.state

    def retarget(self, desired_cell: Vec3) -> HoldState:
        """Clamp a desired pivot into bounds and recompute placement validity."""
        session = self.session
        if session is None:
            return self.state
        if not self.shape_available():
            return self.abort()

        definition = session.shape.definition
        session.target_cell = self.grid.clamp_pivot_to_bounds(
            definition, desired_cell, session.target_rotation
        )
        session.last_valid = self.grid.can_place(definition, session.target_cell, session.target_rotation)
        return self.state

    def advance(self, dt: float) -> HoldState:
        """
        Move the held shape's displayed transform toward its target.

        Position follows with proportional catch-up (never slower than the base
        speed) and snaps once within ``snap_epsilon``. A running turn eases with
        smoothstep and completes exactly on ``rotate_to``.
        """
        session = self.session
        if session is None:
            return self.state
        if not self.shape_available():
            return self.abort()

        shape = session.shape
        target_pos = cell_to_world(session.target_cell)
        current = np.asarray(shape.position, dtype=float)
        dist = float(np.linalg.norm(target_pos - current))

        speed = max(dist * self.config.catch_up_multiplier, self.config.base_follow_speed)
        shape.position = move_towards(current, target_pos, speed * dt)
        if dist <= self.config.snap_epsilon:
            shape.position = target_pos

        if session.rotating:
            session.rotate_elapsed += dt
            duration = max(self.config.rotate_duration, 0.0001)
            t = smoothstep(session.rotate_elapsed / duration)
            shape.orientation = slerp(session.rotate_from, session.rotate_to, t)

            if session.rotate_elapsed >= self.config.rotate_duration:
                session.rotating = False
                shape.orientation = session.rotate_to.copy()
        else:
            shape.orientation = rotation_to_quaternion(session.target_rotation)

        return self.state

    def rotate(self, axis: Axis, degrees: float = 90.0) -> HoldState:
        """Start a timed turn about a world axis (FLOATING -> ROTATING)."""
        session = self.session
        if session is None or session.rotating:
            return self.state
        if not self.shape_available():
            return self.abort()

        session.target_rotation = rotate_about_axis(session.target_rotation, axis, degrees)
        session.rotating = True
        session.rotate_from = np.asarray(session.shape.orientation, dtype=float).copy()
        session.rotate_to = rotation_to_quaternion(session.target_rotation)
        session.rotate_elapsed = 0.0
        return self.state

    def place(self) -> HoldState:
        """Commit the shape at its target (FLOATING -> IDLE) when valid."""
        session = self.session
        if session is None or session.rotating:
            return self.state
        if not self.shape_available():
            return self.abort()
        if not session.last_valid:
            return self.state

        shape = session.shape
        self.grid.register(shape.definition, session.target_cell, session.target_rotation)
        shape.set_collision_enabled(True)
        shape.apply_state(session.target_cell, session.target_rotation)

        self.session = None
        return self.state

    def cancel(self) -> HoldState:
        """
        Return the shape to where it was picked up (FLOATING -> IDLE).

        Refused, leaving the shape in hand, when the pickup spot is no longer free.
        """
        session = self.session
        if session is None or session.rotating:
            return self.state
        if not self.shape_available():
            return self.abort()

        shape = session.shape
        if not self.grid.can_place(shape.definition, session.pickup_cell, session.pickup_rotation):
            return self.state

        self.grid.register(shape.definition, session.pickup_cell, session.pickup_rotation)
        shape.set_collision_enabled(True)
        shape.apply_state(session.pickup_cell, session.pickup_rotation)

        self.session = None
        return self.state

    def abort(self) -> HoldState:
        """Drop the session without touching the grid."""
        self.session = None
        return self.state
