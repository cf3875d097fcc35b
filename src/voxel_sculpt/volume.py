"""
Occupancy Volume Storage and Boolean Composition

This module provides:
- Volume: Fixed 64³ occupancy grid packed one uint64 word per (y, z) column
- Paint primitives (cube, sphere) and whole-volume union / difference

Memory consideration: 64 × 64 words × 8 bytes = 32 KiB per volume, so
a document with dozens of layers stays well under a megabyte.
"""

import logging
import math
from typing import Tuple

import numpy as np

from .config import VOLUME_SIZE
from .errors import CoordinateOutOfRange

logger = logging.getLogger(__name__)

Coords = Tuple[int, int, int]

_ONE = np.uint64(1)
_BITS = np.arange(VOLUME_SIZE, dtype=np.uint64)


class Volume:
    """
    Dense binary occupancy volume of edge VOLUME_SIZE.

    Storage is an (N, N) uint64 array indexed [z, y]; bit x of a word is
    the voxel (x, y, z). A Volume has no identity beyond its bits: two
    volumes with the same bits compare equal.

    Coordinate system: X-right, Y-back, Z-up, integers in [0, N).
    """

    size = VOLUME_SIZE

    def __init__(self):
        self._columns = np.zeros((self.size, self.size), dtype=np.uint64)

    @classmethod
    def from_dense(cls, occupancy: np.ndarray) -> "Volume":
        """
        Build a volume from a dense occupancy array.

        Args:
            occupancy: Boolean-like array of shape (N, N, N) indexed [x, y, z]

        Returns:
            New Volume with the same occupied voxels
        """
        occupancy = np.asarray(occupancy)
        if occupancy.shape != (cls.size, cls.size, cls.size):
            raise ValueError(
                f"Occupancy must have shape {(cls.size,) * 3}, got {occupancy.shape}"
            )

        # [x, y, z] -> [z, y, x] so the packed bit axis is last
        bits = occupancy.transpose(2, 1, 0).astype(bool).astype(np.uint64) << _BITS
        volume = cls()
        volume._columns = np.ascontiguousarray(
            np.bitwise_or.reduce(bits, axis=2), dtype=np.uint64
        )
        return volume

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Get volume dimensions (x, y, z)."""
        return (self.size, self.size, self.size)

    @property
    def columns(self) -> np.ndarray:
        """Read-only view of the packed column words, indexed [z, y]."""
        view = self._columns.view()
        view.flags.writeable = False
        return view

    def to_dense(self) -> np.ndarray:
        """
        Unpack the volume into a dense boolean array.

        Returns:
            Array of shape (N, N, N) indexed [x, y, z]
        """
        dense = ((self._columns[:, :, None] >> _BITS) & _ONE).astype(bool)
        return np.ascontiguousarray(dense.transpose(2, 1, 0))

    def read(self, x: int, y: int, z: int) -> int:
        """
        Get the occupancy bit of a voxel.

        Args:
            x, y, z: Voxel coordinates

        Returns:
            1 if the voxel is occupied, 0 otherwise
        """
        x, y, z = (int(c) for c in (x, y, z))
        self._check_coords((x, y, z))
        return int((self._columns[z, y] >> np.uint64(x)) & _ONE)

    def union(self, other: "Volume") -> "Volume":
        """Add every voxel of `other` to this volume (per-word OR)."""
        self._columns |= other._columns
        return self

    def difference(self, other: "Volume") -> "Volume":
        """Remove every voxel of `other` from this volume (per-word AND NOT)."""
        self._columns &= ~other._columns
        return self

    def paint_cube(self, min_corner: Coords, max_corner: Coords) -> "Volume":
        """
        Set every voxel of an axis-aligned box.

        The x range is half-open [min.x, max.x) while y and z are closed
        [min.y, max.y] and [min.z, max.z]. A single column mask is built
        once and OR'd into each selected (y, z) word.

        Args:
            min_corner: Lower corner (x, y, z)
            max_corner: Upper corner (x exclusive, y and z inclusive)

        Returns:
            self for method chaining
        """
        x0, y0, z0 = (int(c) for c in min_corner)
        x1, y1, z1 = (int(c) for c in max_corner)

        self._check_coords((x0, y0, z0), what="cube min corner")
        # max.x is exclusive, so x == size is a valid upper bound
        if not (0 <= x1 <= self.size and 0 <= y1 < self.size and 0 <= z1 < self.size):
            raise CoordinateOutOfRange((x1, y1, z1), self.size, what="cube max corner")
        if x0 > x1 or y0 > y1 or z0 > z1:
            raise ValueError(
                f"Cube min corner {(x0, y0, z0)} exceeds max corner {(x1, y1, z1)}"
            )

        mask = ((1 << x1) - 1) - ((1 << x0) - 1)
        self._columns[z0:z1 + 1, y0:y1 + 1] |= np.uint64(mask)
        return self

    def paint_sphere(
        self,
        center: Coords,
        radius: float,
        clip: bool = False
    ) -> "Volume":
        """
        Set every voxel within `radius` of `center`.

        Offsets are integer lattice steps from the center voxel; an offset
        is painted when its Euclidean length is <= radius. Only the part of
        the bounding box that lies inside the volume is scanned, so the cost
        is bounded by the volume size whatever the radius.

        Args:
            center: Center voxel (x, y, z), must lie inside the volume
            radius: Sphere radius in voxels, finite and >= 0
            clip: If True, silently drop voxels outside the volume instead
                of raising CoordinateOutOfRange

        Returns:
            self for method chaining
        """
        cx, cy, cz = (int(c) for c in center)
        self._check_coords((cx, cy, cz), what="sphere center")
        if not math.isfinite(radius):
            raise ValueError(f"Sphere radius must be finite, got {radius}")
        if radius < 0:
            raise ValueError(f"Sphere radius must be non-negative, got {radius}")

        bound = int(math.ceil(radius))
        center_xyz = (cx, cy, cz)

        if not clip:
            # The closest out-of-range lattice point lies on an axis through the center
            for axis, c in enumerate(center_xyz):
                for outside in (-1, self.size):
                    if radius >= abs(outside - c):
                        coords = list(center_xyz)
                        coords[axis] = outside
                        raise CoordinateOutOfRange(
                            tuple(coords), self.size, what="sphere voxel"
                        )

        # Scan only the part of the bounding box inside the volume
        spans = [
            np.arange(max(-bound, -c), min(bound, self.size - 1 - c) + 1)
            for c in center_xyz
        ]
        dz, dy, dx = np.meshgrid(spans[2], spans[1], spans[0], indexing="ij")
        inside = np.sqrt(dx * dx + dy * dy + dz * dz) <= radius

        if clip and any(len(span) < 2 * bound + 1 for span in spans):
            logger.debug(
                "Clipped sphere of radius %s at %s to the volume", radius, center_xyz
            )

        xs = cx + dx[inside]
        ys = cy + dy[inside]
        zs = cz + dz[inside]

        np.bitwise_or.at(self._columns, (zs, ys), _ONE << xs.astype(np.uint64))
        return self

    def clear(self):
        """Clear all voxels from the volume."""
        self._columns.fill(0)

    def copy(self) -> "Volume":
        """Create an independent copy of this volume."""
        volume = type(self)()
        volume._columns = self._columns.copy()
        return volume

    def is_empty(self) -> bool:
        """Check whether no voxel is set."""
        return not self._columns.any()

    def count_voxels(self) -> int:
        """Count the number of occupied voxels."""
        words = np.ascontiguousarray(self._columns)
        return int(np.unpackbits(words.view(np.uint8)).sum())

    def _check_coords(self, coords: Coords, what: str = "voxel"):
        """Raise CoordinateOutOfRange unless every coordinate is in [0, size)."""
        if not all(0 <= int(c) < self.size for c in coords):
            raise CoordinateOutOfRange(coords, self.size, what=what)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Volume):
            return NotImplemented
        return bool(np.array_equal(self._columns, other._columns))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Volume(size={self.size}, voxels={self.count_voxels()})"
