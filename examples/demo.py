#!/usr/bin/env python3
"""
Voxel Sculpt Demo Script

This script demonstrates the full sculpting pipeline by:
1. Building a few layered documents from paint primitives
2. Compositing the layers and extracting the surface mesh
3. Checking the mesh against the default upload buffer size
4. Exporting each result to OBJ and printing statistics

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import time

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voxel_sculpt import BlendMode, Document, Tool, UploadBuffers
from voxel_sculpt.exporters import OBJExporter
from voxel_sculpt.surface_mesh import mesh_stats


def create_carved_box() -> Document:
    """A box with a spherical bite taken out of one corner."""
    doc = Document()
    doc.add_layer("Box").volume.paint_cube((12, 12, 12), (52, 51, 51))
    doc.add_layer("Bite", BlendMode.DIFFERENCE).volume.paint_sphere((50, 50, 50), 14)
    return doc


def create_snowman() -> Document:
    """Three stacked spheres."""
    doc = Document()
    body = doc.add_layer("Body")
    body.volume.paint_sphere((32, 32, 14), 12)
    body.volume.paint_sphere((32, 32, 33), 9)
    body.volume.paint_sphere((32, 32, 48), 6.5)
    return doc


def create_brush_strokes() -> Document:
    """A slab sculpted with the paintbrush and eraser tools."""
    doc = Document()
    slab = doc.add_layer("Slab")
    slab.volume.paint_cube((4, 4, 4), (60, 59, 12))

    for i in range(8):
        Tool.PAINTBRUSH.apply(slab.volume, (8 + i * 6, 32, 12), 4.5)
        Tool.ERASER.apply(slab.volume, (8 + i * 6, 12, 8), 3.5)

    return doc


def run_demo():
    """Run the demonstration."""
    print("=" * 60)
    print("Voxel Sculpt - Demo")
    print("=" * 60)
    print()

    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    scenes = [
        ("carved_box", create_carved_box()),
        ("snowman", create_snowman()),
        ("brush_strokes", create_brush_strokes()),
    ]

    buffers = UploadBuffers()
    exporter = OBJExporter(scale=0.1)
    total_start = time.time()

    for name, doc in scenes:
        print(f"\n--- Processing: {name} ---")
        print(f"Layers: {', '.join(layer.name for layer in doc)}")

        scene_start = time.time()
        mesh = doc.generate_mesh()
        elapsed = time.time() - scene_start

        stats = mesh_stats(mesh)
        print(f"  Voxels:    {doc.composite().count_voxels()}")
        print(f"  Vertices:  {stats['vertices']}")
        print(f"  Triangles: {stats['triangles']}")
        print(f"  Buffers:   {stats['vertex_bytes']} + {stats['index_bytes']} bytes")
        print(f"  Fits upload buffers: {buffers.fits(mesh)}")
        print(f"  Meshed in {elapsed * 1000:.1f} ms")

        output_path = output_dir / f"{name}.obj"
        exporter.export(mesh, output_path)
        print(f"  Exported: {output_path}")

    print()
    print(f"Total time: {time.time() - total_start:.2f}s")


if __name__ == "__main__":
    run_demo()
