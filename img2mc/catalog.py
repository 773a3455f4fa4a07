# img2mc/catalog.py
from __future__ import annotations

"""
Variant catalog: every selectable tile with its chunk-resolution colour grid.

Variants are held sorted by identifier so every pass over the catalog (scoring,
tie-breaking, reporting) is deterministic. The engine reads the stacked views:

  colour_stack : int64   [V, R, R, 4]
  lab_stack    : float32 [V, R, R, 3]
  non_opaque   : bool    [V]  any sub-cell alpha < 255
"""

from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from .colour_convert import rgb_to_lab
from .core_types import (
    ConfigurationError,
    ConsistencyError,
    U8Image,
    Variant,
    validate_chunk_resolution,
)
from .utils import log
from .variants import Tile, build_tiles, texture_filter


def chunk_average_colours(texture: U8Image, chunk_resolution: int) -> U8Image:
    """
    Box-filter a tile down to [R, R, 4]. Each output pixel is the alpha-weighted
    mean of its block, so fully transparent pixels do not tint the average.
    """
    r = validate_chunk_resolution(chunk_resolution)
    im = Image.fromarray(np.ascontiguousarray(texture, dtype=np.uint8))
    small = im.resize((r, r), Image.Resampling.BOX)
    return np.array(small, dtype=np.uint8)


def variant_from_tile(tile: Tile, chunk_resolution: int) -> Variant:
    return Variant(
        identifier=tile.identifier,
        block_id=tile.block_id,
        properties=tile.properties,
        texture=tile.texture,
        chunk_colours=chunk_average_colours(tile.texture, chunk_resolution),
    )


class VariantCatalog:
    """Ordered, immutable collection of variants sharing one chunk resolution."""

    def __init__(self, variants: Iterable[Variant]):
        ordered = sorted(variants, key=lambda v: v.identifier)
        if not ordered:
            raise ConfigurationError("variant catalog is empty")

        by_id: Dict[str, Variant] = {}
        for v in ordered:
            if v.identifier in by_id:
                raise ConfigurationError(f"duplicate variant identifier '{v.identifier}'")
            by_id[v.identifier] = v

        resolutions = {v.chunk_resolution for v in ordered}
        if len(resolutions) != 1:
            raise ConfigurationError(
                f"variants disagree on chunk resolution: {sorted(resolutions)}"
            )

        self.variants: Tuple[Variant, ...] = tuple(ordered)
        self._by_id = by_id
        self.chunk_resolution = resolutions.pop()

        self.colour_stack = np.stack([v.chunk_colours for v in ordered]).astype(np.int64)
        self.lab_stack = rgb_to_lab(self.colour_stack)
        self.non_opaque = np.any(self.colour_stack[..., 3] < 255, axis=(1, 2))

    @classmethod
    def from_tiles(
        cls, tiles: Iterable[Tile], chunk_resolution: int
    ) -> "VariantCatalog":
        return cls(variant_from_tile(t, chunk_resolution) for t in tiles)

    @property
    def identifiers(self) -> Tuple[str, ...]:
        return tuple(v.identifier for v in self.variants)

    def __len__(self) -> int:
        return len(self.variants)

    def __iter__(self) -> Iterator[Variant]:
        return iter(self.variants)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_id

    def __getitem__(self, identifier: str) -> Variant:
        try:
            return self._by_id[identifier]
        except KeyError:
            raise ConsistencyError(
                f"variant '{identifier}' is not in the catalog"
            ) from None


def build_catalog(
    textures_path: Path,
    chunk_resolution: int,
    block_palette: Optional[Sequence[str]] = None,
    exclude_non_survival: bool = False,
) -> VariantCatalog:
    """Load the built-in tables from textures_path and build the catalog."""
    r = validate_chunk_resolution(chunk_resolution)
    tex_filter = texture_filter(block_palette, exclude_non_survival)
    tiles = build_tiles(Path(textures_path), tex_filter)
    catalog = VariantCatalog.from_tiles(tiles.values(), r)
    log(
        f"Loaded {len(catalog):,} texture(s) into {len(catalog) * r * r:,} chunks."
    )
    return catalog


__all__ = [
    "chunk_average_colours",
    "variant_from_tile",
    "VariantCatalog",
    "build_catalog",
]
