# img2mc/structure/__init__.py
"""
Structure document output.

Provides:
  write_structure(path, grid, catalog, now_ms=None) -> None
    Gzip-compressed single-region document; Name is the file stem.

  build_litematic(grid, catalog, name="image", now_ms=None) -> dict
  read_litematic(data) -> dict
  decode_palette_indices(document) -> int64 [H,W] palette indices
  decode_block_grid(document) -> object [H,W] block state strings

    Notes:
      - Palette index 0 is always air.
      - Raises ConsistencyError for unassigned cells or unknown identifiers.
"""

from .litematic import (
    build_litematic,
    build_palette,
    decode_block_grid,
    decode_palette_indices,
    litematic_bytes,
    read_litematic,
    write_structure,
)

__all__ = [
    "build_litematic",
    "build_palette",
    "decode_block_grid",
    "decode_palette_indices",
    "litematic_bytes",
    "read_litematic",
    "write_structure",
]
