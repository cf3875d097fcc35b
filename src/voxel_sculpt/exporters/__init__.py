"""
Export modules for extracted surface meshes.

Supported formats:
- Wavefront (.obj) - Universal legacy support
"""

from .obj_exporter import OBJExporter

__all__ = ["OBJExporter"]
