"""
Exception types raised by voxel_sculpt.

Both conditions are local and recoverable: callers decide whether to clamp
a paint stroke or skip a frame.
"""

from typing import Tuple


class VoxelSculptError(Exception):
    """Base class for all voxel_sculpt errors."""


class CoordinateOutOfRange(VoxelSculptError, IndexError):
    """A read or paint targeted a voxel outside [0, size) on some axis."""

    def __init__(self, coords: Tuple[int, ...], size: int, what: str = "voxel"):
        self.coords = tuple(int(c) for c in coords)
        self.size = size
        super().__init__(
            f"{what} {self.coords} outside volume bounds [0, {size})"
        )


class MeshCapacityExceeded(VoxelSculptError):
    """Extracted mesh does not fit a fixed-size upload buffer."""

    def __init__(self, buffer: str, required: int, capacity: int):
        self.buffer = buffer
        self.required = required
        self.capacity = capacity
        super().__init__(
            f"{buffer} buffer needs {required} bytes, capacity is {capacity}"
        )
