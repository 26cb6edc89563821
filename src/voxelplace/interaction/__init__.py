"""Hold sessions, the per-frame placement controller and ray picking."""

from voxelplace.interaction.controller import (
    ButtonEdges, FeedbackReport, FrameInput, HeldTransform, InteractionEvent,
    PlacementController, ViewRay, normal_to_offset
)
from voxelplace.interaction.raypick import RayHit, RayPickProvider, VoxelRayPicker
from voxelplace.interaction.session import HoldSession, HoldState, HoldStateMachine

__all__ = [
    "ButtonEdges",
    "FeedbackReport",
    "FrameInput",
    "HeldTransform",
    "InteractionEvent",
    "PlacementController",
    "ViewRay",
    "normal_to_offset",
    "RayHit",
    "RayPickProvider",
    "VoxelRayPicker",
    "HoldSession",
    "HoldState",
    "HoldStateMachine",
]
