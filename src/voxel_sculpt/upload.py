"""
Fixed-Capacity Upload Staging

The renderer allocates one vertex buffer and one index buffer of fixed
size up front. UploadBuffers packs an extracted mesh into the exact byte
layout of those buffers and rejects meshes that would not fit, rather
than truncating them.

Vertex layout (24 bytes per vertex, little-endian):
    offset  0: position  float32 × 3
    offset 12: normal    float32 × 3
Index layout: uint32, three per triangle.
"""

import logging
from typing import Tuple

from .config import UPLOAD_BUFFER_SIZE, INDEX_DTYPE
from .errors import MeshCapacityExceeded
from .surface_mesh import MeshData

logger = logging.getLogger(__name__)


class UploadBuffers:
    """
    Stage meshes for a pair of fixed-size GPU buffers.

    Attributes:
        capacity: Size of each buffer in bytes
    """

    def __init__(self, capacity: int = UPLOAD_BUFFER_SIZE):
        """
        Initialize the staging area.

        Args:
            capacity: Byte size of each of the vertex and index buffers
        """
        if capacity <= 0:
            raise ValueError(f"Buffer capacity must be positive, got {capacity}")
        self.capacity = capacity

    def fits(self, mesh: MeshData) -> bool:
        """Check whether both buffers can hold the mesh."""
        return (mesh.vertex_bytes <= self.capacity and
                mesh.index_bytes <= self.capacity)

    def check(self, mesh: MeshData):
        """Raise MeshCapacityExceeded if either buffer would overflow."""
        for buffer, required in (("vertex", mesh.vertex_bytes),
                                 ("index", mesh.index_bytes)):
            if required > self.capacity:
                logger.warning(
                    "Rejecting mesh: %s data is %d bytes, buffer holds %d",
                    buffer, required, self.capacity
                )
                raise MeshCapacityExceeded(buffer, required, self.capacity)

    def stage(self, mesh: MeshData) -> Tuple[bytes, bytes]:
        """
        Pack a mesh for upload.

        Args:
            mesh: MeshData from extract()

        Returns:
            (vertex_bytes, index_bytes) ready to write at offset 0

        Raises:
            MeshCapacityExceeded: If the mesh does not fit
        """
        self.check(mesh)
        vertex_data = mesh.vertex_records().tobytes()
        index_data = mesh.indices.astype(INDEX_DTYPE, copy=False).tobytes()
        return vertex_data, index_data
