"""
Global Constants
================

Fixed sizes shared by the volume, the mesher and the upload staging.

Exports:
    VOLUME_SIZE (int): Edge length of every volume, in voxels.
    UPLOAD_BUFFER_SIZE (int): Capacity of each renderer upload buffer, in bytes.
    VERTEX_DTYPE (np.dtype): Interleaved GPU vertex record (position, normal).
    INDEX_DTYPE (np.dtype): Triangle index type.
"""

import numpy as np

# One uint64 word per (y, z) column, so the edge cannot exceed 64
VOLUME_SIZE: int = 64
WORD_BITS: int = 64

# 1 MiB per buffer, matching the renderer's allocation
UPLOAD_BUFFER_SIZE: int = 1024 * 1024

VERTEX_DTYPE = np.dtype([
    ("position", "<f4", (3,)),
    ("normal", "<f4", (3,)),
])
VERTEX_STRIDE: int = VERTEX_DTYPE.itemsize  # 24 bytes

INDEX_DTYPE = np.dtype("<u4")

if VOLUME_SIZE > WORD_BITS:
    raise RuntimeError(
        f"VOLUME_SIZE ({VOLUME_SIZE}) exceeds the column word width ({WORD_BITS})"
    )
