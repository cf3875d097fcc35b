"""
Wavefront OBJ Format Exporter

OBJ is a universal text-based format supported by virtually all 3D software.
The exporter writes the extracted surface as-is: one `v` per mesh vertex,
one `vn` per vertex (accumulated normals rescaled to unit length) and one
`f v//vn` line per triangle.

Limitations:
- Text format = larger file sizes
- Geometry only, no materials
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np

from ..surface_mesh import MeshData, normalized_normals

logger = logging.getLogger(__name__)


class OBJExporter:
    """
    Export mesh data to Wavefront OBJ format.

    Supports:
    - Per-vertex unit normals
    - Uniform scaling of positions
    """

    def __init__(
        self,
        scale: float = 1.0,
        include_normals: bool = True
    ):
        """
        Initialize the exporter.

        Args:
            scale: Scale factor for vertex positions
            include_normals: Whether to include vertex normals
        """
        self.scale = scale
        self.include_normals = include_normals

    def export(
        self,
        mesh: MeshData,
        output_path: Union[str, Path],
        model_name: str = "voxel_sculpt"
    ):
        """
        Export mesh to OBJ file.

        Args:
            mesh: MeshData from extract()
            output_path: Output file path (.obj)
            model_name: Name for the model/object
        """
        output_path = Path(output_path)

        if len(mesh.vertices) == 0:
            raise ValueError("Cannot export empty mesh")

        with open(output_path, 'w') as f:
            f.write('\n'.join(self.to_lines(mesh, model_name)))
            f.write('\n')

        logger.debug("Wrote %s (%d vertices)", output_path, mesh.vertex_count)

    def to_lines(self, mesh: MeshData, model_name: str = "voxel_sculpt") -> list:
        """Render the OBJ document as a list of lines."""
        vertices = mesh.vertices * np.float32(self.scale)
        indices = mesh.indices

        lines = []
        lines.append("# voxel_sculpt OBJ Export")
        lines.append(f"# Vertices: {len(vertices)}")
        lines.append(f"# Triangles: {len(indices) // 3}")
        lines.append("")
        lines.append(f"o {model_name}")
        lines.append("")

        for v in vertices:
            lines.append(f"v {v[0]:.6f} {v[1]:.6f} {v[2]:.6f}")
        lines.append("")

        if self.include_normals:
            for n in normalized_normals(mesh):
                lines.append(f"vn {n[0]:.6f} {n[1]:.6f} {n[2]:.6f}")
            lines.append("")

        # OBJ indices are 1-based; normals share the vertex numbering
        for i in range(0, len(indices), 3):
            i0, i1, i2 = indices[i] + 1, indices[i+1] + 1, indices[i+2] + 1
            if self.include_normals:
                lines.append(f"f {i0}//{i0} {i1}//{i1} {i2}//{i2}")
            else:
                lines.append(f"f {i0} {i1} {i2}")

        return lines
