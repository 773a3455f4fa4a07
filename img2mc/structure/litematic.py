# img2mc/structure/litematic.py
from __future__ import annotations

"""
Structure document writer/reader.

The document is a single-region voxel structure one block deep:

  - Region size is (W, H, 1); structure y = 0 is the bottom image row.
  - BlockStatePalette starts with air; every other block identifier used in the
    grid follows in order of first appearance, scanning column by column.
  - BlockStates packs each cell's palette index (see bitpack), bottom row first,
    left to right.

Exports:
  build_palette(grid) -> list of identifiers
  build_litematic(grid, catalog, name, now_ms) -> document dict
  litematic_bytes(grid, catalog, name, now_ms) -> gzip bytes
  write_structure(path, grid, catalog, now_ms) -> None
  read_litematic(data) -> document dict
  decode_palette_indices(document) -> (H, W) grid of palette indices
  decode_block_grid(document) -> (H, W) grid of block state strings
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..catalog import VariantCatalog
from ..constants import (
    AIR_BLOCK_ID,
    AIR_ID,
    LITEMATIC_SUB_VERSION,
    LITEMATIC_VERSION,
    MINECRAFT_DATA_VERSION,
    STRUCTURE_AUTHOR,
    STRUCTURE_DESCRIPTION,
    STRUCTURE_DEFAULT_NAME,
    STRUCTURE_REGION_NAME,
)
from ..core_types import BlockGrid, ConfigurationError, ConsistencyError, Properties
from . import nbt
from .bitpack import bits_per_entry, pack_indices, to_signed_words, unpack_indices


def _xyz(x: int, y: int, z: int) -> Dict[str, int]:
    return {"x": int(x), "y": int(y), "z": int(z)}


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def build_palette(grid: BlockGrid) -> List[str]:
    """Air, then each distinct identifier by first appearance (x outer, y inner)."""
    height, width = grid.shape
    palette: List[str] = [AIR_ID]
    seen = {AIR_ID}
    for x in range(width):
        for y in range(height):
            ident = grid[y, x]
            if ident is None:
                raise ConsistencyError(f"cell ({x}, {y}) was never assigned a variant")
            if ident not in seen:
                seen.add(ident)
                palette.append(ident)
    return palette


def block_state(identifier: str, catalog: VariantCatalog) -> Tuple[str, Optional[Properties]]:
    if identifier == AIR_ID:
        return AIR_BLOCK_ID, None
    variant = catalog[identifier]
    return variant.block_id, variant.properties


def _palette_entry(block_id: str, properties: Optional[Properties]) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"Name": block_id}
    if properties is not None:
        entry["Properties"] = {k: str(properties[k]) for k in sorted(properties)}
    return entry


def pack_block_states(grid: BlockGrid, palette: List[str]) -> np.ndarray:
    """Signed 64-bit words for BlockStates."""
    height, width = grid.shape
    index_of = {ident: i for i, ident in enumerate(palette)}
    order = (
        index_of[grid[y, x]] for y in range(height - 1, -1, -1) for x in range(width)
    )
    return to_signed_words(pack_indices(order, bits_per_entry(len(palette))))


def build_litematic(
    grid: BlockGrid,
    catalog: VariantCatalog,
    name: str = STRUCTURE_DEFAULT_NAME,
    now_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """Assemble the structure document for a fully assigned grid."""
    height, width = grid.shape
    if width < 1 or height < 1:
        raise ConfigurationError(f"grid must be at least 1x1, got {width}x{height}")
    if now_ms is None:
        now_ms = _wall_clock_ms()
    if now_ms < 0:
        raise ConfigurationError(f"clock reads before the epoch: {now_ms} ms")

    palette = build_palette(grid)
    states = [_palette_entry(*block_state(ident, catalog)) for ident in palette]
    volume = width * height
    air_cells = int(np.count_nonzero(grid == AIR_ID))

    return {
        "MinecraftDataVersion": MINECRAFT_DATA_VERSION,
        "SubVersion": LITEMATIC_SUB_VERSION,
        "Version": LITEMATIC_VERSION,
        "Metadata": {
            "EnclosingSize": _xyz(width, height, 1),
            "RegionCount": 1,
            "TotalBlocks": volume - air_cells,
            "TotalVolume": volume,
            "TimeCreated": nbt.Long(now_ms),
            "TimeModified": nbt.Long(now_ms),
            "Author": STRUCTURE_AUTHOR,
            "Description": STRUCTURE_DESCRIPTION,
            "Name": name or STRUCTURE_DEFAULT_NAME,
        },
        "Regions": {
            STRUCTURE_REGION_NAME: {
                "Position": _xyz(0, 0, 0),
                "Size": _xyz(width, height, 1),
                "BlockStatePalette": nbt.NbtList(nbt.TAG_COMPOUND, states),
                "Entities": [],
                "PendingBlockTicks": [],
                "PendingFluidTicks": [],
                "TileEntities": [],
                "BlockStates": pack_block_states(grid, palette),
            }
        },
    }


def litematic_bytes(
    grid: BlockGrid,
    catalog: VariantCatalog,
    name: str = STRUCTURE_DEFAULT_NAME,
    now_ms: Optional[int] = None,
) -> bytes:
    # Gzip-wrapped, not a bare NBT stream; read_litematic accepts both.
    return nbt.dumps(build_litematic(grid, catalog, name, now_ms), compress=True)


def write_structure(
    path: Path, grid: BlockGrid, catalog: VariantCatalog, now_ms: Optional[int] = None
) -> None:
    path = Path(path)
    data = litematic_bytes(grid, catalog, path.stem, now_ms)
    path.write_bytes(data)


def read_litematic(data: bytes) -> Dict[str, Any]:
    return nbt.loads(data)


def block_state_string(entry: Dict[str, Any]) -> str:
    """'minecraft:oak_stairs[facing=west,half=bottom]' style key for a palette entry."""
    props = entry.get("Properties")
    if not props:
        return str(entry["Name"])
    inner = ",".join(f"{k}={props[k]}" for k in sorted(props))
    return f"{entry['Name']}[{inner}]"


def _palette_entries(region: Dict[str, Any]) -> List[Dict[str, Any]]:
    palette = region["BlockStatePalette"]
    return list(palette.items if isinstance(palette, nbt.NbtList) else palette)


def decode_palette_indices(document: Dict[str, Any]) -> np.ndarray:
    """
    Rebuild the (H, W) grid of palette indices from a document.

    Image row 0 is the top, matching the grid the engine produced.
    """
    region = document["Regions"][STRUCTURE_REGION_NAME]
    size = region["Size"]
    width, height = int(size["x"]), int(size["y"])
    n = len(_palette_entries(region))

    indices = unpack_indices(region["BlockStates"], bits_per_entry(n), width * height)
    grid = np.empty((height, width), dtype=np.int64)
    it = iter(indices)
    for y in range(height - 1, -1, -1):
        for x in range(width):
            idx = int(next(it))
            if idx >= n:
                raise ConsistencyError(f"packed index {idx} outside palette of {n}")
            grid[y, x] = idx
    return grid


def decode_block_grid(document: Dict[str, Any]) -> np.ndarray:
    """(H, W) grid of block state strings; properties keep rotated variants apart."""
    region = document["Regions"][STRUCTURE_REGION_NAME]
    states = [block_state_string(e) for e in _palette_entries(region)]
    indices = decode_palette_indices(document)
    grid = np.empty(indices.shape, dtype=object)
    for (y, x), idx in np.ndenumerate(indices):
        grid[y, x] = states[idx]
    return grid


__all__ = [
    "build_palette",
    "block_state",
    "block_state_string",
    "pack_block_states",
    "build_litematic",
    "litematic_bytes",
    "write_structure",
    "read_litematic",
    "decode_palette_indices",
    "decode_block_grid",
]
