"""
Layered Document and Composite Volume

A Document owns an ordered list of layers, each wrapping one Volume and a
blend mode. Before meshing, visible layers are folded in order into a
fresh composite volume:

    composite = empty
    for layer in layers (visible only):
        composite = composite ∪ layer   (UNION)
        composite = composite ∖ layer   (DIFFERENCE)

Order matters: a DIFFERENCE layer only removes what earlier UNION layers
contributed.

Example Usage:
    doc = Document()
    doc.add_layer("Base").volume.paint_cube((8, 8, 8), (40, 40, 40))
    doc.add_layer("Hole", BlendMode.DIFFERENCE).volume.paint_sphere((24, 24, 24), 10)
    mesh = doc.generate_mesh()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .surface_mesh import MeshData, extract
from .volume import Volume

logger = logging.getLogger(__name__)


class BlendMode(Enum):
    """How a layer is folded into the composite."""
    UNION = "union"
    DIFFERENCE = "difference"

    def apply(self, target: Volume, source: Volume) -> Volume:
        """Fold `source` into `target` in place."""
        if self is BlendMode.UNION:
            return target.union(source)
        return target.difference(source)


@dataclass
class Layer:
    """
    One editable volume in a document.

    Attributes:
        name: Display name
        visible: Hidden layers are skipped by the composite
        blend_mode: How the layer combines with the layers below it
        volume: The layer's exclusively owned occupancy
    """

    name: str = "Layer"
    visible: bool = True
    blend_mode: BlendMode = BlendMode.UNION
    volume: Volume = field(default_factory=Volume, repr=False)


def compose(layers: Iterable[Layer]) -> Volume:
    """
    Fold layers into a new composite volume.

    Args:
        layers: Layers in document order

    Returns:
        Freshly allocated composite Volume
    """
    composite = Volume()
    for layer in layers:
        if not layer.visible:
            continue
        layer.blend_mode.apply(composite, layer.volume)
        logger.debug("Folded layer %r (%s)", layer.name, layer.blend_mode.value)
    return composite


class Document:
    """
    Ordered stack of layers.

    The composite is scratch state: it is rebuilt on every call to
    composite() or generate_mesh() and never cached.
    """

    def __init__(self, layers: Optional[List[Layer]] = None):
        """
        Initialize the document.

        Args:
            layers: Initial layers, bottom first
        """
        self.layers: List[Layer] = list(layers) if layers else []

    def add_layer(
        self,
        name: str = "Layer",
        blend_mode: BlendMode = BlendMode.UNION,
        index: Optional[int] = None
    ) -> Layer:
        """
        Create an empty layer.

        Args:
            name: Display name
            blend_mode: Layer blend mode
            index: Insert position (default: top of the stack)

        Returns:
            The new layer
        """
        layer = Layer(name=name, blend_mode=blend_mode)
        if index is None:
            self.layers.append(layer)
        else:
            self.layers.insert(index, layer)
        return layer

    def remove_layer(self, index: int) -> Layer:
        """Remove and return the layer at `index`."""
        return self.layers.pop(index)

    def move_layer(self, source: int, target: int):
        """
        Move a layer to a new position in the stack.

        Args:
            source: Current index of the layer
            target: Index the layer ends up at
        """
        layer = self.layers.pop(source)
        self.layers.insert(target, layer)

    def composite(self) -> Volume:
        """Fold the visible layers, in order, into a new volume."""
        return compose(self.layers)

    def generate_mesh(self) -> MeshData:
        """Composite the layers and extract the surface mesh."""
        return extract(self.composite())

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)
