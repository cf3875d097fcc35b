"""
Voxel Sculpt
============

A fixed-resolution occupancy volume with boolean composition and
surface mesh extraction.

This package stores a 64³ binary voxel volume as packed column words,
composes volumes with paint primitives and union/difference, and extracts
a renderable triangle surface (one vertex per boundary cell, one quad per
occupancy change) ready for upload to a fixed-size GPU buffer.

Key Features:
- Bit-packed storage: one 64-bit word per (y, z) column
- Cube and sphere paint primitives with explicit bounds checking
- Ordered layer composition (union / difference)
- Surface extraction with Numba JIT compilation
- Capacity-checked staging for fixed-size vertex/index buffers

Example Usage:
    from voxel_sculpt import Document, BlendMode

    doc = Document()
    doc.add_layer("Base").volume.paint_cube((8, 8, 8), (56, 55, 55))
    doc.add_layer("Carve", BlendMode.DIFFERENCE).volume.paint_sphere((32, 32, 32), 22)
    mesh = doc.generate_mesh()
"""

__version__ = "0.1.0"
__author__ = "Voxel Sculpt Team"

from .config import VOLUME_SIZE, UPLOAD_BUFFER_SIZE
from .errors import VoxelSculptError, CoordinateOutOfRange, MeshCapacityExceeded
from .volume import Volume
from .surface_mesh import MeshData, SurfaceMesher, extract, generate_mesh, normalized_normals
from .document import BlendMode, Layer, Document, compose
from .tools import Tool
from .upload import UploadBuffers

__all__ = [
    "VOLUME_SIZE",
    "UPLOAD_BUFFER_SIZE",
    "VoxelSculptError",
    "CoordinateOutOfRange",
    "MeshCapacityExceeded",
    "Volume",
    "MeshData",
    "SurfaceMesher",
    "extract",
    "generate_mesh",
    "normalized_normals",
    "BlendMode",
    "Layer",
    "Document",
    "compose",
    "Tool",
    "UploadBuffers",
]
