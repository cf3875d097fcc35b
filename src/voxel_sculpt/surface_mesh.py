"""
Boundary Surface Extraction with Numba JIT Compilation

This module turns a Volume's occupancy into a renderable triangle mesh.
Each unit cell whose 8 corner voxels are mixed (some occupied, some
empty) contributes exactly one vertex at its center; every pair of
face-adjacent voxels with differing occupancy contributes one quad
joining the four cells that share that face.

Algorithm Overview:
1. Vertex Placement: Scan all cells, emit one vertex per boundary cell
2. Face Emission: Sweep X, Y and Z adjacencies, emit two triangles per
   occupancy change and accumulate the face normal on its 4 vertices
3. Output: Exactly-sized vertex, normal and index arrays

Normals are accumulated sums of unit face normals and are NOT
normalized; use normalized_normals() before shading.
"""

import logging
from typing import NamedTuple

import numpy as np
from numba import njit

from .config import VERTEX_DTYPE, VERTEX_STRIDE, INDEX_DTYPE
from .volume import Volume

logger = logging.getLogger(__name__)


class MeshData(NamedTuple):
    """Container for extracted surface geometry."""
    vertices: np.ndarray     # (V, 3) float32 positions
    normals: np.ndarray      # (V, 3) float32 accumulated normals
    indices: np.ndarray      # (M,) uint32 triangle indices

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def vertex_bytes(self) -> int:
        """Size of the interleaved vertex records in bytes."""
        return len(self.vertices) * VERTEX_STRIDE

    @property
    def index_bytes(self) -> int:
        """Size of the index list in bytes."""
        return len(self.indices) * INDEX_DTYPE.itemsize

    def vertex_records(self) -> np.ndarray:
        """
        Interleave positions and normals into GPU vertex records.

        Returns:
            Structured array of VERTEX_DTYPE (24-byte stride)
        """
        records = np.empty(len(self.vertices), dtype=VERTEX_DTYPE)
        records["position"] = self.vertices
        records["normal"] = self.normals
        return records


def empty_mesh() -> MeshData:
    """Return a mesh with no vertices and no indices."""
    return MeshData(
        vertices=np.zeros((0, 3), dtype=np.float32),
        normals=np.zeros((0, 3), dtype=np.float32),
        indices=np.zeros((0,), dtype=np.uint32)
    )


@njit(cache=True)
def _place_vertices(
    occupancy: np.ndarray,
    index_grid: np.ndarray,
    positions: np.ndarray
) -> int:
    """
    Emit one vertex per boundary cell.

    Args:
        occupancy: Dense uint8 grid (X, Y, Z)
        index_grid: int64 lookup (X, Y, Z), filled with -1 on entry
        positions: Preallocated (max_cells, 3) float32 output

    Returns:
        Number of vertices written
    """
    n = occupancy.shape[0]
    count = 0

    for z in range(n - 1):
        for y in range(n - 1):
            for x in range(n - 1):
                corners = (
                    occupancy[x, y, z] + occupancy[x + 1, y, z] +
                    occupancy[x + 1, y + 1, z] + occupancy[x, y + 1, z] +
                    occupancy[x, y, z + 1] + occupancy[x + 1, y, z + 1] +
                    occupancy[x + 1, y + 1, z + 1] + occupancy[x, y + 1, z + 1]
                )
                if corners > 0 and corners < 8:
                    index_grid[x, y, z] = count
                    positions[count, 0] = x + 0.5
                    positions[count, 1] = y + 0.5
                    positions[count, 2] = z + 0.5
                    count += 1

    return count


@njit(cache=True)
def _emit_quad(
    normals: np.ndarray,
    indices: np.ndarray,
    cursor: int,
    i0: int, i1: int, i2: int, i3: int,
    axis: int,
    lower_solid: bool
) -> int:
    """
    Write two triangles for one face crossing and accumulate its normal.

    The quad faces away from the occupied side: when the lower voxel is
    solid the normal is +axis, otherwise -axis.

    Returns:
        Cursor advanced past the 6 written indices
    """
    if lower_solid:
        sign = 1.0
        indices[cursor] = i0
        indices[cursor + 1] = i3
        indices[cursor + 2] = i2
        indices[cursor + 3] = i2
        indices[cursor + 4] = i1
        indices[cursor + 5] = i0
    else:
        sign = -1.0
        indices[cursor] = i0
        indices[cursor + 1] = i1
        indices[cursor + 2] = i2
        indices[cursor + 3] = i2
        indices[cursor + 4] = i3
        indices[cursor + 5] = i0

    normals[i0, axis] += sign
    normals[i1, axis] += sign
    normals[i2, axis] += sign
    normals[i3, axis] += sign

    return cursor + 6


@njit(cache=True)
def _emit_faces(
    occupancy: np.ndarray,
    index_grid: np.ndarray,
    normals: np.ndarray,
    indices: np.ndarray
) -> int:
    """
    Sweep the X, Y and Z adjacencies and emit a quad per occupancy change.

    Args:
        occupancy: Dense uint8 grid (X, Y, Z)
        index_grid: Lookup filled by _place_vertices
        normals: (V, 3) float32, zeroed on entry, accumulated in place
        indices: Preallocated uint32 output sized for every crossing

    Returns:
        Number of indices written
    """
    n = occupancy.shape[0]
    cursor = 0

    # X adjacencies: (x, y, z) | (x + 1, y, z)
    for z in range(1, n - 1):
        for y in range(1, n - 1):
            for x in range(n - 1):
                v0 = occupancy[x, y, z]
                v1 = occupancy[x + 1, y, z]
                if v0 != v1:
                    cursor = _emit_quad(
                        normals, indices, cursor,
                        index_grid[x, y - 1, z - 1],
                        index_grid[x, y - 1, z],
                        index_grid[x, y, z],
                        index_grid[x, y, z - 1],
                        0, v0 > v1
                    )

    # Y adjacencies: (x, y, z) | (x, y + 1, z)
    for z in range(1, n - 1):
        for x in range(1, n - 1):
            for y in range(n - 1):
                v0 = occupancy[x, y, z]
                v1 = occupancy[x, y + 1, z]
                if v0 != v1:
                    cursor = _emit_quad(
                        normals, indices, cursor,
                        index_grid[x - 1, y, z - 1],
                        index_grid[x, y, z - 1],
                        index_grid[x, y, z],
                        index_grid[x - 1, y, z],
                        1, v0 > v1
                    )

    # Z adjacencies: (x, y, z) | (x, y, z + 1)
    for y in range(1, n - 1):
        for x in range(1, n - 1):
            for z in range(n - 1):
                v0 = occupancy[x, y, z]
                v1 = occupancy[x, y, z + 1]
                if v0 != v1:
                    cursor = _emit_quad(
                        normals, indices, cursor,
                        index_grid[x - 1, y - 1, z],
                        index_grid[x - 1, y, z],
                        index_grid[x, y, z],
                        index_grid[x, y - 1, z],
                        2, v0 > v1
                    )

    return cursor


def _count_face_crossings(occupancy: np.ndarray) -> int:
    """Count the adjacencies _emit_faces will turn into quads."""
    inner = slice(1, -1)
    crossings = np.count_nonzero(
        occupancy[:-1, inner, inner] != occupancy[1:, inner, inner]
    )
    crossings += np.count_nonzero(
        occupancy[inner, :-1, inner] != occupancy[inner, 1:, inner]
    )
    crossings += np.count_nonzero(
        occupancy[inner, inner, :-1] != occupancy[inner, inner, 1:]
    )
    return int(crossings)


def extract(volume: Volume) -> MeshData:
    """
    Extract the boundary surface of a volume.

    This is a pure function of the volume's bits: calling it twice on an
    unmodified volume yields identical arrays.

    Args:
        volume: Volume (or composite) to mesh

    Returns:
        MeshData with accumulated, unnormalized vertex normals
    """
    if volume.is_empty():
        return empty_mesh()

    occupancy = volume.to_dense().astype(np.uint8)
    n = occupancy.shape[0]

    # Per-call scratch lookup, discarded on return
    index_grid = np.full((n, n, n), -1, dtype=np.int64)
    positions = np.empty(((n - 1) ** 3, 3), dtype=np.float32)
    vertex_count = _place_vertices(occupancy, index_grid, positions)

    normals = np.zeros((vertex_count, 3), dtype=np.float32)
    indices = np.empty(_count_face_crossings(occupancy) * 6, dtype=np.uint32)
    written = _emit_faces(occupancy, index_grid, normals, indices)

    mesh = MeshData(
        vertices=positions[:vertex_count].copy(),
        normals=normals,
        indices=indices[:written]
    )
    logger.debug(
        "Extracted %d vertices, %d triangles (%d + %d bytes)",
        mesh.vertex_count, mesh.triangle_count, mesh.vertex_bytes, mesh.index_bytes
    )
    return mesh


generate_mesh = extract


def normalized_normals(mesh: MeshData) -> np.ndarray:
    """
    Scale accumulated normals to unit length.

    Vertices whose contributions cancel out keep a zero normal.

    Args:
        mesh: MeshData from extract()

    Returns:
        (V, 3) float32 array of unit normals
    """
    lengths = np.linalg.norm(mesh.normals, axis=1, keepdims=True)
    safe = np.where(lengths > 0, lengths, 1.0)
    return (mesh.normals / safe).astype(np.float32)


class SurfaceMesher:
    """
    Mesh generation for occupancy volumes.

    This class wraps the Numba-accelerated extraction kernels and
    optionally rescales and centers the output for export.
    """

    def __init__(self, scale: float = 1.0, center: bool = False):
        """
        Initialize the mesher.

        Args:
            scale: Vertex position scale factor (default 1.0 = 1 unit per voxel)
            center: If True, center the mesh at origin
        """
        self.scale = scale
        self.center = center

    def mesh(self, volume: Volume) -> MeshData:
        """
        Generate a surface mesh from a volume.

        Args:
            volume: Volume instance

        Returns:
            MeshData containing vertices, normals and indices
        """
        mesh = extract(volume)
        if mesh.vertex_count == 0 or (self.scale == 1.0 and not self.center):
            return mesh

        vertices = mesh.vertices * np.float32(self.scale)
        if self.center:
            center = (vertices.max(axis=0) + vertices.min(axis=0)) / 2
            vertices = vertices - center

        return mesh._replace(vertices=vertices.astype(np.float32))


def mesh_stats(mesh: MeshData) -> dict:
    """
    Summarize an extracted mesh.

    Args:
        mesh: MeshData from extract()

    Returns:
        Dictionary with counts and buffer sizes
    """
    return {
        "vertices": mesh.vertex_count,
        "triangles": mesh.triangle_count,
        "indices": len(mesh.indices),
        "vertex_bytes": mesh.vertex_bytes,
        "index_bytes": mesh.index_bytes,
    }
