# img2mc/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and the error taxonomy.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import (
    DEFAULT_BLOCK_HEIGHT,
    DEFAULT_CHUNK_RESOLUTION,
    DEFAULT_DITHERING,
    TEXTURE_SIZE,
)

# Basic aliases

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
Lab = NDArray[np.float32]  # (..., 3) CIE Lab
ErrorGrid = NDArray[np.int64]  # (H, W, 4) signed per-channel deltas
BlockGrid = NDArray[np.object_]  # (H, W) variant identifiers, None where unvisited
Properties = Mapping[str, str]


# Errors


class Img2McError(Exception):
    """Base class for every failure raised by img2mc."""


class ConfigurationError(Img2McError, ValueError):
    """Invalid run configuration: degenerate kernel, bad sizes, bad block table, clock."""


class ConsistencyError(Img2McError, LookupError):
    """Output grid and variant catalog disagree."""


# Value objects


@dataclass(frozen=True)
class Variant:
    """
    One selectable tile.

    texture        : uint8 (16, 16, 4) RGBA tile as blitted by the compositor.
    chunk_colours  : uint8 (R, R, 4) average colour per sub-cell, row-major.
    block_id       : namespaced block identifier, e.g. "minecraft:oak_stairs".
    properties     : block state properties, or None.
    """

    identifier: str
    block_id: str
    properties: Optional[Properties]
    texture: U8Image = field(repr=False, compare=False)
    chunk_colours: U8Image = field(repr=False, compare=False)

    @property
    def chunk_resolution(self) -> int:
        return int(self.chunk_colours.shape[0])


@dataclass(frozen=True)
class DitherKernel:
    """
    Error-diffusion kernel resolved once per run.

    offsets: (dx, dy, weight) for every nonzero cell, relative to the current cell.
    """

    name: str
    weights: Tuple[Tuple[int, ...], ...]
    center_x: int
    total_weight: int
    offsets: Tuple[Tuple[int, int, int], ...]


@dataclass(frozen=True)
class RenderOptions:
    """Everything a single run needs. Populated by the CLI or by library callers."""

    textures_path: Path
    input_image: str
    output_path: Path
    block_width: Optional[int] = None
    block_height: int = DEFAULT_BLOCK_HEIGHT
    chunk_resolution: int = DEFAULT_CHUNK_RESOLUTION
    dithering: str = DEFAULT_DITHERING
    exclude_non_survival: bool = False
    block_palette: Optional[Sequence[str]] = None
    workers: int = 1
    progress: bool = True
    debug: bool = False


# Small helpers


def validate_chunk_resolution(chunk_resolution: int) -> int:
    """Return chunk_resolution if it evenly splits a native tile, else raise."""
    r = int(chunk_resolution)
    if r < 1 or TEXTURE_SIZE % r != 0:
        raise ConfigurationError(
            f"chunk resolution must divide {TEXTURE_SIZE}, got {chunk_resolution}"
        )
    return r


def parse_properties(text: str) -> Dict[str, str]:
    """Parse 'key=value,key=value' into a dict."""
    out: Dict[str, str] = {}
    for definition in text.split(","):
        parts = definition.split("=")
        if len(parts) != 2:
            raise ConfigurationError(f"Invalid property definition '{definition}'.")
        out[parts[0]] = parts[1]
    return out


def new_block_grid(width: int, height: int) -> BlockGrid:
    """Empty (H, W) grid; every cell None until the engine visits it."""
    return np.empty((height, width), dtype=object)


__all__ = [
    # aliases / types
    "U8Image",
    "Lab",
    "ErrorGrid",
    "BlockGrid",
    "Properties",
    # errors
    "Img2McError",
    "ConfigurationError",
    "ConsistencyError",
    # value objects
    "Variant",
    "DitherKernel",
    "RenderOptions",
    # helpers
    "validate_chunk_resolution",
    "parse_properties",
    "new_block_grid",
]
