# img2mc/constants.py
"""
Global tunables and format constants used across the project.

- Run defaults (chunk resolution, grid height, dithering)
- Dithering kernels
- Air variant
- Structure document constants (field values the game-side loader checks)
"""
from __future__ import annotations

from typing import Dict, Tuple

# =========================
# Run defaults
# =========================

# Native block texture edge in pixels. Chunk resolutions must divide this.
TEXTURE_SIZE = 16

# Sub-cells per axis each tile is split into for matching. Higher = slower.
DEFAULT_CHUNK_RESOLUTION = 4

# Output height in blocks when the caller gives none.
DEFAULT_BLOCK_HEIGHT = 32

DEFAULT_DITHERING = "JarvisJudiceNinke"

# Seconds before a network fetch of the source image gives up.
HTTP_TIMEOUT = 30

# =========================
# Dithering kernels
# =========================
# Row 0 is the current row. Leading zeros mark the slots at and left of the
# current cell; the current cell is the last leading zero.

DITHER_KERNELS: Dict[str, Tuple[Tuple[int, ...], ...]] = {
    "JarvisJudiceNinke": (
        (0, 0, 0, 7, 5),
        (3, 5, 7, 5, 3),
        (1, 3, 5, 3, 1),
    ),
    "FloydSteinberg": (
        (0, 0, 7),
        (3, 5, 1),
    ),
}

# =========================
# Air
# =========================

AIR_ID = "air"
AIR_BLOCK_ID = "minecraft:air"

# =========================
# Structure document
# =========================

STRUCTURE_EXTENSIONS = (".litematic", ".schematic")

MINECRAFT_DATA_VERSION = 3465
LITEMATIC_SUB_VERSION = 1
LITEMATIC_VERSION = 6

STRUCTURE_AUTHOR = "img2mc"
STRUCTURE_DESCRIPTION = "Generated by img2mc"
STRUCTURE_REGION_NAME = "Unnamed"
STRUCTURE_DEFAULT_NAME = "image"

# Minimum packed index width the loader accepts.
MIN_BITS_PER_ENTRY = 2

WORD_BITS = 64

__all__ = [
    "TEXTURE_SIZE",
    "DEFAULT_CHUNK_RESOLUTION",
    "DEFAULT_BLOCK_HEIGHT",
    "DEFAULT_DITHERING",
    "HTTP_TIMEOUT",
    "DITHER_KERNELS",
    "AIR_ID",
    "AIR_BLOCK_ID",
    "STRUCTURE_EXTENSIONS",
    "MINECRAFT_DATA_VERSION",
    "LITEMATIC_SUB_VERSION",
    "LITEMATIC_VERSION",
    "STRUCTURE_AUTHOR",
    "STRUCTURE_DESCRIPTION",
    "STRUCTURE_REGION_NAME",
    "STRUCTURE_DEFAULT_NAME",
    "MIN_BITS_PER_ENTRY",
    "WORD_BITS",
]
