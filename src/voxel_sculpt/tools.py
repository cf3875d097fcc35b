"""
Sculpting Tools

The editor offers a small, fixed set of tools. Each variant carries its
own icon, tooltip and keyboard shortcut, and knows how to apply a brush
stroke to a layer's volume.
"""

from enum import Enum
from typing import Tuple

from .volume import Coords, Volume


class Tool(Enum):
    """Brush tools available to the editor."""
    PAINTBRUSH = "paintbrush"
    ERASER = "eraser"

    @property
    def icon(self) -> str:
        """Icon-font glyph shown on the tool button."""
        return {
            Tool.PAINTBRUSH: "\uf1fc",
            Tool.ERASER: "\uf12d",
        }[self]

    @property
    def tooltip(self) -> str:
        return {
            Tool.PAINTBRUSH: "Paintbrush",
            Tool.ERASER: "Eraser",
        }[self]

    @property
    def shortcut(self) -> Tuple[str, str]:
        """(modifiers, key) pair; modifiers is empty for a bare key."""
        return {
            Tool.PAINTBRUSH: ("", "B"),
            Tool.ERASER: ("", "E"),
        }[self]

    @classmethod
    def from_key(cls, key: str) -> "Tool":
        """Look up the tool bound to an unmodified key press."""
        for tool in cls:
            if tool.shortcut == ("", key.upper()):
                return tool
        raise ValueError(f"No tool bound to key {key!r}")

    def apply(self, volume: Volume, center: Coords, radius: float) -> Volume:
        """
        Apply one spherical brush stroke.

        Strokes near the volume's faces are clipped to the volume.

        Args:
            volume: Layer volume to modify
            center: Brush center (x, y, z)
            radius: Brush radius in voxels

        Returns:
            The modified volume
        """
        if self is Tool.PAINTBRUSH:
            return volume.paint_sphere(center, radius, clip=True)

        stroke = Volume().paint_sphere(center, radius, clip=True)
        return volume.difference(stroke)
