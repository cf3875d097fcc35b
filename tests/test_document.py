"""
Unit tests for layer composition, tools and upload staging.
"""

import sys
from pathlib import Path
import numpy as np
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voxel_sculpt import VOLUME_SIZE
from voxel_sculpt.document import BlendMode, Document, Layer, compose
from voxel_sculpt.errors import MeshCapacityExceeded
from voxel_sculpt.surface_mesh import MeshData, extract
from voxel_sculpt.tools import Tool
from voxel_sculpt.upload import UploadBuffers
from voxel_sculpt.volume import Volume


class TestLayer(unittest.TestCase):
    """Tests for Layer defaults."""

    def test_defaults(self):
        """Test a new layer is visible, unions and owns an empty volume."""
        layer = Layer()
        assert layer.visible
        assert layer.blend_mode is BlendMode.UNION
        assert layer.volume.is_empty()

    def test_volumes_not_shared(self):
        """Test each layer gets its own volume."""
        a, b = Layer(), Layer()
        a.volume.paint_cube((0, 0, 0), (1, 0, 0))
        assert b.volume.is_empty()


class TestComposite(unittest.TestCase):
    """Tests for folding layers into a composite."""

    def setUp(self):
        # B covers A (R1) plus an extra region (R2)
        self.a = Volume().paint_cube((10, 10, 10), (20, 19, 19))
        self.b = Volume().paint_cube((10, 10, 10), (30, 19, 19))

    def test_empty_document(self):
        """Test a document with no layers composites to empty."""
        doc = Document()
        assert doc.composite().is_empty()
        assert doc.generate_mesh().vertex_count == 0

    def test_union_then_difference(self):
        """Test a later difference removes earlier unions."""
        layers = [
            Layer("A", blend_mode=BlendMode.UNION, volume=self.a),
            Layer("B", blend_mode=BlendMode.DIFFERENCE, volume=self.b),
        ]
        assert compose(layers).is_empty()

    def test_difference_then_union(self):
        """Test an early difference has nothing to remove."""
        layers = [
            Layer("B", blend_mode=BlendMode.DIFFERENCE, volume=self.b),
            Layer("A", blend_mode=BlendMode.UNION, volume=self.a),
        ]
        assert compose(layers) == self.a

    def test_order_sensitivity(self):
        """Test reordering layers changes the composite."""
        doc = Document([
            Layer("A", blend_mode=BlendMode.UNION, volume=self.a),
            Layer("B", blend_mode=BlendMode.DIFFERENCE, volume=self.b),
        ])
        before = doc.composite()
        doc.move_layer(1, 0)
        after = doc.composite()

        assert [layer.name for layer in doc] == ["B", "A"]
        assert before != after

    def test_hidden_layers_skipped(self):
        """Test invisible layers do not contribute."""
        doc = Document()
        doc.add_layer("A").volume.union(self.a)
        carve = doc.add_layer("Carve", BlendMode.DIFFERENCE)
        carve.volume.union(self.b)
        carve.visible = False

        assert doc.composite() == self.a

    def test_composite_is_fresh(self):
        """Test the composite is rebuilt and never aliases a layer."""
        doc = Document()
        doc.add_layer("A").volume.union(self.a)

        composite = doc.composite()
        composite.clear()

        assert doc.layers[0].volume == self.a
        assert doc.composite() == self.a

    def test_layers_not_modified(self):
        """Test folding leaves layer volumes untouched."""
        doc = Document([
            Layer("A", volume=self.a.copy()),
            Layer("B", blend_mode=BlendMode.DIFFERENCE, volume=self.b.copy()),
        ])
        doc.composite()
        assert doc.layers[0].volume == self.a
        assert doc.layers[1].volume == self.b

    def test_generate_mesh_uses_composite(self):
        """Test document meshing equals meshing the composite."""
        doc = Document()
        doc.add_layer("Ball").volume.paint_sphere((32, 32, 32), 8)
        doc.add_layer("Cut", BlendMode.DIFFERENCE).volume.paint_cube(
            (32, 20, 20), (45, 44, 44)
        )

        mesh = doc.generate_mesh()
        expected = extract(doc.composite())
        assert np.array_equal(mesh.vertices, expected.vertices)
        assert np.array_equal(mesh.indices, expected.indices)

    def test_add_remove_layers(self):
        """Test inserting and removing layers."""
        doc = Document()
        doc.add_layer("top")
        doc.add_layer("bottom", index=0)
        assert [layer.name for layer in doc] == ["bottom", "top"]

        removed = doc.remove_layer(0)
        assert removed.name == "bottom"
        assert len(doc) == 1

    def test_blend_mode_apply(self):
        """Test blend modes fold in place."""
        target = self.b.copy()
        assert BlendMode.DIFFERENCE.apply(target, self.a) is target
        assert target.count_voxels() == self.b.count_voxels() - self.a.count_voxels()
        assert BlendMode.UNION.apply(target, self.a) == self.b


class TestTools(unittest.TestCase):
    """Tests for brush tools."""

    def test_paintbrush_adds_sphere(self):
        """Test the paintbrush paints a sphere."""
        volume = Tool.PAINTBRUSH.apply(Volume(), (20, 20, 20), 3)
        assert volume == Volume().paint_sphere((20, 20, 20), 3)

    def test_eraser_removes_sphere(self):
        """Test the eraser removes a sphere."""
        volume = Volume().paint_cube((10, 10, 10), (30, 29, 29))
        Tool.ERASER.apply(volume, (20, 20, 20), 3)

        assert volume.read(20, 20, 20) == 0
        assert volume.read(10, 10, 10) == 1
        assert volume.count_voxels() == 20 ** 3 - Volume().paint_sphere((20, 20, 20), 3).count_voxels()

    def test_strokes_clip_at_faces(self):
        """Test strokes at the volume edge do not raise."""
        volume = Tool.PAINTBRUSH.apply(Volume(), (0, 0, 0), 10)
        assert volume.read(0, 0, 0) == 1
        Tool.ERASER.apply(volume, (63, 63, 63), 10)

    def test_oversized_strokes(self):
        """Test strokes far larger than the volume fill or empty it."""
        volume = Tool.PAINTBRUSH.apply(Volume(), (32, 32, 32), 5000)
        assert volume.count_voxels() == VOLUME_SIZE ** 3
        Tool.ERASER.apply(volume, (0, 63, 0), 5000)
        assert volume.is_empty()

    def test_metadata(self):
        """Test icons, tooltips and shortcuts."""
        assert Tool.PAINTBRUSH.tooltip == "Paintbrush"
        assert Tool.ERASER.tooltip == "Eraser"
        assert Tool.PAINTBRUSH.icon != Tool.ERASER.icon
        assert Tool.from_key("e") is Tool.ERASER
        assert Tool.from_key("B") is Tool.PAINTBRUSH
        with self.assertRaises(ValueError):
            Tool.from_key("Q")


class TestUploadBuffers(unittest.TestCase):
    """Tests for capacity-checked staging."""

    def setUp(self):
        self.mesh = extract(Volume().paint_sphere((32, 32, 32), 6))

    def test_stage_layout(self):
        """Test staged bytes match the reported sizes."""
        vertex_data, index_data = UploadBuffers().stage(self.mesh)

        assert len(vertex_data) == self.mesh.vertex_bytes
        assert len(index_data) == self.mesh.index_bytes
        assert np.array_equal(
            np.frombuffer(index_data, dtype="<u4"), self.mesh.indices
        )
        first = np.frombuffer(vertex_data[:24], dtype="<f4")
        assert np.array_equal(first[:3], self.mesh.vertices[0])
        assert np.array_equal(first[3:], self.mesh.normals[0])

    def test_capacity_exceeded(self):
        """Test oversized meshes are rejected with details."""
        buffers = UploadBuffers(capacity=self.mesh.vertex_bytes - 1)
        assert not buffers.fits(self.mesh)

        with self.assertRaises(MeshCapacityExceeded) as ctx:
            buffers.stage(self.mesh)
        assert ctx.exception.required > ctx.exception.capacity
        assert ctx.exception.buffer in ("vertex", "index")

    def test_index_buffer_checked(self):
        """Test the index buffer limit is enforced on its own."""
        mesh = MeshData(
            vertices=np.zeros((3, 3), dtype=np.float32),
            normals=np.zeros((3, 3), dtype=np.float32),
            indices=np.zeros((300,), dtype=np.uint32)
        )
        buffers = UploadBuffers(capacity=mesh.vertex_bytes)

        with self.assertRaises(MeshCapacityExceeded) as ctx:
            buffers.check(mesh)
        assert ctx.exception.buffer == "index"
        assert ctx.exception.required == 1200

    def test_default_capacity_rejects_worst_case(self):
        """Test a checkerboard volume overflows the default 1 MiB buffers."""
        x, y, z = np.indices((VOLUME_SIZE,) * 3)
        checker = Volume.from_dense((x + y + z) % 2 == 1)
        mesh = extract(checker)

        assert len(mesh.indices) % 3 == 0
        assert not UploadBuffers().fits(mesh)
        with self.assertRaises(MeshCapacityExceeded):
            UploadBuffers().stage(mesh)

    def test_invalid_capacity(self):
        """Test capacity must be positive."""
        with self.assertRaises(ValueError):
            UploadBuffers(capacity=0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
