"""
Per-frame placement controller.

Each ``tick`` consumes one ``FrameInput`` (the view ray plus the buttons pressed
this frame) and returns a ``FeedbackReport`` describing what the held shape is
doing. The controller owns no geometry: it asks a ``RayPickProvider`` what the
view ray hits and forwards everything else to ``HoldStateMachine``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from voxelplace.core.config import InteractionConfig
from voxelplace.core.occupancy import OccupancyGrid
from voxelplace.core.rotation import Axis
from voxelplace.core.types import UP, ShapeInstance, Vec3, world_to_cell
from voxelplace.interaction.raypick import RayHit, RayPickProvider
from voxelplace.interaction.session import HoldState, HoldStateMachine
from voxelplace.utils.display import LiveLogger


SURFACE_NUDGE = 1e-3
AXIS_DOMINANCE = 0.9


@dataclass
class ViewRay:
    """Camera ray in world space."""
    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self):
        self.origin = np.asarray(self.origin, dtype=float)
        self.direction = np.asarray(self.direction, dtype=float)

    def point_at(self, distance: float) -> np.ndarray:
        norm = np.linalg.norm(self.direction)
        direction = self.direction / norm if norm > 0 else self.direction
        return self.origin + direction * distance


BUTTONS = ("pick", "place", "cancel", "rotate_x", "rotate_y", "rotate_z")


@dataclass
class FrameInput:
    """
    One frame of user input. Button fields are edge signals: True only on the
    frame the button went down.
    """
    view: ViewRay
    pick: bool = False
    place: bool = False
    cancel: bool = False
    rotate_x: bool = False
    rotate_y: bool = False
    rotate_z: bool = False

    @classmethod
    def from_pressed(cls, view: ViewRay, pressed: Iterable[str]) -> "FrameInput":
        pressed = set(pressed)
        unknown = pressed - set(BUTTONS)
        if unknown:
            raise ValueError(f"Unknown buttons: {sorted(unknown)}")
        return cls(view=view, **{name: True for name in pressed})


class ButtonEdges:
    """Turns polled held-button sets into pressed-this-frame edges."""

    def __init__(self):
        self._down: Set[str] = set()

    def update(self, held: Iterable[str]) -> Set[str]:
        held = set(held)
        pressed = held - self._down
        self._down = held
        return pressed


class InteractionEvent(Enum):
    PICKED_UP = "picked_up"
    PLACED = "placed"
    CANCELLED = "cancelled"
    PLACE_REJECTED = "place_rejected"
    CANCEL_REFUSED = "cancel_refused"
    ROTATION_STARTED = "rotation_started"
    SESSION_ABORTED = "session_aborted"


@dataclass
class HeldTransform:
    """Where the held shape is heading, and where it is drawn right now."""
    pivot: Vec3
    rotation: int
    position: np.ndarray
    orientation: np.ndarray


@dataclass
class FeedbackReport:
    """What a renderer needs after a tick: validity tint, ghost pose, hover."""
    state: HoldState
    holding: bool = False
    valid: bool = False
    target_transform: Optional[HeldTransform] = None
    hovered_shape_id: Optional[str] = None
    events: List[InteractionEvent] = field(default_factory=list)


def normal_to_offset(normal) -> Vec3:
    """
    Snap a surface normal to a unit axis offset.

    An axis wins when its component of the unit normal exceeds 0.9 in magnitude
    (checked x, then y, then z); anything else counts as up.
    """
    n = np.asarray(normal, dtype=float)
    norm = np.linalg.norm(n)
    if norm == 0:
        return UP
    n = n / norm

    if abs(n[0]) > AXIS_DOMINANCE:
        return Vec3(int(np.sign(n[0])), 0, 0)
    if abs(n[1]) > AXIS_DOMINANCE:
        return Vec3(0, int(np.sign(n[1])), 0)
    if abs(n[2]) > AXIS_DOMINANCE:
        return Vec3(0, 0, int(np.sign(n[2])))
    return UP


ShapeLookup = Callable[[str], Optional[ShapeInstance]]


class PlacementController:
    """
    Turns frames of input into hold-session transitions.

    Tick order while holding: liveness check, rotation request (X before Y
    before Z, at most one), target and validity, transform advance, then
    place and cancel when no turn is running.
    """

    def __init__(self, grid: OccupancyGrid, ray_pick: RayPickProvider,
                 shape_lookup: ShapeLookup, config: Optional[InteractionConfig] = None,
                 logger: Optional[LiveLogger] = None):
        if grid is None:
            raise ValueError("PlacementController requires an occupancy grid")
        if ray_pick is None:
            raise ValueError("PlacementController requires a ray-pick provider")

        self.config = config or InteractionConfig()
        self.grid = grid
        self.ray_pick = ray_pick
        self.shape_lookup = shape_lookup
        self.logger = logger or LiveLogger(verbose=False)
        self.machine = HoldStateMachine(grid, self.config)

    @property
    def state(self) -> HoldState:
        return self.machine.state

    @property
    def held_shape(self) -> Optional[ShapeInstance]:
        session = self.machine.session
        return session.shape if session is not None else None

    def resting_overrides(self) -> Dict[str, Tuple[Vec3, int]]:
        """Pickup pose of the held shape, for saving it where it last rested."""
        session = self.machine.session
        if session is None:
            return {}
        return {session.shape.instance_id: (session.pickup_cell, session.pickup_rotation)}

    # ------------------------------------------------------------------ #
    # Frame update
    # ------------------------------------------------------------------ #
    def tick(self, frame: FrameInput, dt: float) -> FeedbackReport:
        if self.machine.is_holding:
            return self._tick_holding(frame, dt)
        return self._tick_idle(frame)

    def _cast(self, view: ViewRay) -> Optional[RayHit]:
        return self.ray_pick.pick(view.origin, view.direction, self.config.ray_distance)

    def _tick_idle(self, frame: FrameInput) -> FeedbackReport:
        report = FeedbackReport(state=self.state)

        hit = self._cast(frame.view)
        hovered = None
        if hit is not None and hit.shape_id is not None:
            candidate = self.shape_lookup(hit.shape_id)
            if candidate is not None and candidate.is_available() and candidate.collidable:
                hovered = candidate
                report.hovered_shape_id = candidate.instance_id

        if frame.pick and hovered is not None:
            start_point = frame.view.point_at(self.config.fallback_depth)
            if self.machine.pick_up(hovered, start_point) is not HoldState.IDLE:
                report.events.append(InteractionEvent.PICKED_UP)
                self.logger.log_action("pick up", hovered.instance_id)

        return self._fill(report)

    def _tick_holding(self, frame: FrameInput, dt: float) -> FeedbackReport:
        report = FeedbackReport(state=self.state)

        if not self.machine.shape_available():
            self.machine.abort()
            report.events.append(InteractionEvent.SESSION_ABORTED)
            self.logger.log_warning("Held shape disappeared; hold session aborted")
            return self._fill(report)

        axis = None
        if frame.rotate_x:
            axis = Axis.X
        elif frame.rotate_y:
            axis = Axis.Y
        elif frame.rotate_z:
            axis = Axis.Z
        if axis is not None and self.machine.state is HoldState.FLOATING:
            if self.machine.rotate(axis) is HoldState.ROTATING:
                report.events.append(InteractionEvent.ROTATION_STARTED)

        self.machine.retarget(self.desired_cell(frame.view))
        self.machine.advance(dt)

        if self.machine.state is HoldState.FLOATING:
            shape = self.held_shape
            if frame.place:
                if self.machine.place() is HoldState.IDLE:
                    report.events.append(InteractionEvent.PLACED)
                    self.logger.log_action("place", f"{shape.instance_id} at {shape.pivot.to_tuple()}")
                else:
                    report.events.append(InteractionEvent.PLACE_REJECTED)

            if frame.cancel and self.machine.is_holding:
                if self.machine.cancel() is HoldState.IDLE:
                    report.events.append(InteractionEvent.CANCELLED)
                    self.logger.log_action("cancel", shape.instance_id)
                else:
                    report.events.append(InteractionEvent.CANCEL_REFUSED)
                    self.logger.log_warning(f"Cannot return {shape.instance_id}: pickup spot is occupied")

        return self._fill(report)

    def desired_cell(self, view: ViewRay) -> Vec3:
        """
        Cell the held shape should move to.

        With a surface hit this is the hit cell's neighbour along the surface
        normal; otherwise the cell at ``fallback_depth`` along the view ray.
        """
        hit = self._cast(view)
        held = self.held_shape
        if hit is not None and (held is None or hit.shape_id != held.instance_id):
            offset = normal_to_offset(hit.normal)
            inside = np.asarray(hit.point, dtype=float) - offset.to_array() * SURFACE_NUDGE
            return world_to_cell(inside) + offset
        return world_to_cell(view.point_at(self.config.fallback_depth))

    def _fill(self, report: FeedbackReport) -> FeedbackReport:
        session = self.machine.session
        report.state = self.state
        report.holding = session is not None
        if session is not None:
            report.valid = session.last_valid
            report.target_transform = HeldTransform(
                pivot=session.target_cell,
                rotation=session.target_rotation,
                position=np.array(session.shape.position, dtype=float),
                orientation=np.array(session.shape.orientation, dtype=float),
            )
        return report
