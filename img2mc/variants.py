# img2mc/variants.py
from __future__ import annotations

"""
Texture-palette construction: block tables -> loaded textures -> tiles.

Exports:
  BlockEntry, Tile, TextureFilter
  parse_block_line(line) -> BlockEntry
  parse_block_table(lines) -> list[BlockEntry]
  texture_filter(block_palette, exclude_non_survival) -> TextureFilter
  load_texture(textures_path, texture_name) -> U8Image | None
  air_tile() -> Tile
  normal_tiles / rotated_tiles / slab_tiles / stair_tiles (entry, texture) -> list[Tile]
  build_tiles(textures_path, tex_filter, ...) -> dict[identifier, Tile]

Tiles are 16x16 RGBA. Partial shapes (slabs, stairs) are expressed by clearing
the uncovered part of the tile to fully transparent.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from .block_lists import (
    NON_SURVIVAL_BLOCKS,
    NORMAL_BLOCKS,
    ROTATE_4_WAY_BLOCKS,
    SLAB_BLOCKS,
    STAIR_BLOCKS,
)
from .constants import AIR_BLOCK_ID, AIR_ID, TEXTURE_SIZE
from .core_types import ConfigurationError, Properties, U8Image, parse_properties
from .utils import warn

HALF = TEXTURE_SIZE // 2

# Index i -> facing for a tile rotated clockwise i quarter turns.
ROTATION_FACINGS = ("east", "north", "west", "south")

# Index i -> (facing, half) for the stair whose i-th quadrant is cleared.
STAIR_STATES = (
    ("east", "bottom"),
    ("west", "bottom"),
    ("east", "top"),
    ("west", "top"),
)


@dataclass(frozen=True)
class BlockEntry:
    texture_name: str
    block_id: str
    properties: Optional[Properties] = None


@dataclass(frozen=True)
class Tile:
    """A derived, not yet chunk-averaged, variant."""

    identifier: str
    block_id: str
    properties: Optional[Properties]
    texture: U8Image = field(repr=False, compare=False)


@dataclass(frozen=True)
class TextureFilter:
    """Allow-list (when set) wins; otherwise anything not deny-listed passes."""

    allow: Optional[FrozenSet[str]] = None
    deny: FrozenSet[str] = frozenset()

    def accepts(self, texture_name: str) -> bool:
        if self.allow is not None:
            return texture_name in self.allow
        return texture_name not in self.deny


# Tables


def parse_block_line(line: str) -> BlockEntry:
    """Parse 'texture|block_id' or 'texture|block_id|k=v,k=v'."""
    parts = line.split("|")
    if len(parts) == 2:
        return BlockEntry(parts[0], parts[1], None)
    if len(parts) == 3:
        return BlockEntry(parts[0], parts[1], parse_properties(parts[2]))
    raise ConfigurationError(f"Invalid texture info line '{line}'.")


def parse_block_table(lines: Iterable[str]) -> List[BlockEntry]:
    """Parse a table, skipping blank lines."""
    return [parse_block_line(ln.strip()) for ln in lines if ln.strip()]


def texture_filter(
    block_palette: Optional[Sequence[str]], exclude_non_survival: bool
) -> TextureFilter:
    """Build the texture filter from the run options."""
    if block_palette is not None:
        return TextureFilter(allow=frozenset(n.strip() for n in block_palette))
    if exclude_non_survival:
        return TextureFilter(deny=frozenset(NON_SURVIVAL_BLOCKS))
    return TextureFilter()


# Textures


def load_texture(textures_path: Path, texture_name: str) -> Optional[U8Image]:
    """
    Load <textures_path>/<texture_name>.png as RGBA cropped to the top-left tile.
    Animated textures are vertical strips; the first frame is used.
    Returns None (with a warning) when the file cannot be read.
    """
    texture_path = Path(textures_path) / f"{texture_name}.png"
    try:
        with Image.open(texture_path) as im:
            tile = im.convert("RGBA").crop((0, 0, TEXTURE_SIZE, TEXTURE_SIZE))
    except (OSError, UnidentifiedImageError) as e:
        warn(f"Unable to find texture '{texture_path}': {e}")
        return None
    return np.array(tile, dtype=np.uint8)


def air_tile() -> Tile:
    """The built-in empty block: fully transparent, no properties."""
    return Tile(
        AIR_ID,
        AIR_BLOCK_ID,
        None,
        np.zeros((TEXTURE_SIZE, TEXTURE_SIZE, 4), dtype=np.uint8),
    )


# Variant derivation


def normal_tiles(entry: BlockEntry, texture: U8Image) -> List[Tile]:
    return [Tile(entry.texture_name, entry.block_id, entry.properties, texture)]


def rotated_tiles(entry: BlockEntry, texture: U8Image) -> List[Tile]:
    """Four facings; tile i is the texture turned clockwise i quarter turns."""
    out: List[Tile] = []
    for i, facing in enumerate(ROTATION_FACINGS):
        out.append(
            Tile(
                f"{entry.texture_name}_{i * 90}",
                entry.block_id,
                {"facing": facing},
                np.ascontiguousarray(np.rot90(texture, k=-i)),
            )
        )
    return out


def slab_tiles(entry: BlockEntry, texture: U8Image) -> List[Tile]:
    """Bottom slab (top half cleared) and top slab (bottom half cleared)."""
    out: List[Tile] = []
    for i, slab_type in enumerate(("bottom", "top")):
        tex = texture.copy()
        tex[i * HALF : (i + 1) * HALF, :, :] = 0
        out.append(
            Tile(
                f"{entry.texture_name}_slab_{i * 180}",
                entry.block_id,
                {"type": slab_type},
                tex,
            )
        )
    return out


def stair_tiles(entry: BlockEntry, texture: U8Image) -> List[Tile]:
    """Four stair silhouettes; tile i clears quadrant (col i % 2, row i // 2)."""
    out: List[Tile] = []
    for i, (facing, half) in enumerate(STAIR_STATES):
        tex = texture.copy()
        x0 = (i % 2) * HALF
        y0 = (i // 2) * HALF
        tex[y0 : y0 + HALF, x0 : x0 + HALF, :] = 0
        out.append(
            Tile(
                f"{entry.texture_name}_stair_{i * 90}",
                entry.block_id,
                {"facing": facing, "half": half},
                tex,
            )
        )
    return out


TileDeriver = Callable[[BlockEntry, U8Image], List[Tile]]


def default_tables() -> List[Tuple[Sequence[str], TileDeriver]]:
    """Built-in tables in override order."""
    return [
        (NORMAL_BLOCKS, normal_tiles),
        (STAIR_BLOCKS, stair_tiles),
        (SLAB_BLOCKS, slab_tiles),
        (ROTATE_4_WAY_BLOCKS, rotated_tiles),
    ]


def build_tiles(
    textures_path: Path,
    tex_filter: TextureFilter,
    tables: Optional[List[Tuple[Sequence[str], TileDeriver]]] = None,
) -> Dict[str, Tile]:
    """
    Load every accepted texture from every table and derive its tiles.
    Air is always present. Later tables override earlier ones on identifier
    collision. Each texture file is read at most once.
    """
    tiles: Dict[str, Tile] = {AIR_ID: air_tile()}
    loaded: Dict[str, Optional[U8Image]] = {}

    for lines, derive in tables if tables is not None else default_tables():
        for entry in parse_block_table(lines):
            if not tex_filter.accepts(entry.texture_name):
                continue
            if entry.texture_name not in loaded:
                loaded[entry.texture_name] = load_texture(
                    textures_path, entry.texture_name
                )
            texture = loaded[entry.texture_name]
            if texture is None:
                continue
            for tile in derive(entry, texture):
                tiles[tile.identifier] = tile
    return tiles


__all__ = [
    "BlockEntry",
    "Tile",
    "TextureFilter",
    "ROTATION_FACINGS",
    "STAIR_STATES",
    "parse_block_line",
    "parse_block_table",
    "texture_filter",
    "load_texture",
    "air_tile",
    "normal_tiles",
    "rotated_tiles",
    "slab_tiles",
    "stair_tiles",
    "default_tables",
    "build_tiles",
]
