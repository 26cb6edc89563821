"""Utility modules for voxelplace."""

from voxelplace.utils.display import StatusDisplay, LiveLogger

__all__ = [
    "StatusDisplay",
    "LiveLogger",
]
