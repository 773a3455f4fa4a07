# img2mc/dither/engine.py
from __future__ import annotations

"""
Block quantization with error diffusion.

For every output cell, in row-major order, score every catalog variant against
the matching R x R region of the source (plus the error diffused into that cell
so far), pick the lowest score, and push the remaining error to later cells.

Scoring:
  - Opaque pairs: sum of CIEDE2000 over the R x R sub-cells (RGB only).
  - Any alpha < 255 in the error-adjusted source chunk or in the variant:
    sum of squared RGBA differences.
  - Both metrics read the error-adjusted source clamped to 0..255.
  - Ties go to the lexicographically smallest identifier.

Scheduling:
  - Cells are strictly sequential (each reads error written by earlier cells).
  - Variants for one cell are scored in parallel: the catalog stack is split
    into contiguous spans, one ThreadPoolExecutor task per span, and the span
    results are concatenated in order before the argmin.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from ..catalog import VariantCatalog
from ..colour_convert import delta_e2000_vec, rgb_to_lab
from ..constants import DEFAULT_DITHERING
from ..core_types import (
    BlockGrid,
    ConfigurationError,
    DitherKernel,
    ErrorGrid,
    Lab,
    U8Image,
    new_block_grid,
    validate_chunk_resolution,
)
from ..utils import RowProgress, split_into_spans
from .kernel import KernelSpec, resolve_kernel


# Pure helpers


def trunc_div(values: np.ndarray, divisor: int) -> np.ndarray:
    """Integer division rounding toward zero, element-wise."""
    values = np.asarray(values, dtype=np.int64)
    q = np.abs(values) // int(divisor)
    return np.where(values < 0, -q, q)


def variant_distances(
    chunk: np.ndarray,
    chunk_lab: Optional[Lab],
    colours: np.ndarray,
    labs: Lab,
    non_opaque: np.ndarray,
) -> np.ndarray:
    """
    Accumulated distance of every variant in a stack to one source chunk.

    Args:
      chunk      : int [R,R,4] error-adjusted source, already clamped to 0..255
      chunk_lab  : Lab [R,R,3] of chunk, or None when the chunk has alpha < 255
      colours    : int [V,R,R,4] variant sub-cell colours
      labs       : Lab [V,R,R,3] variant sub-cell colours in Lab
      non_opaque : bool [V] variant has any sub-cell alpha < 255
    Returns:
      float64 [V]
    """
    diff = colours.astype(np.int64) - chunk.astype(np.int64)[None]
    squared = (diff * diff).sum(axis=(1, 2, 3)).astype(np.float64)
    if chunk_lab is None:
        return squared

    mixed = np.asarray(non_opaque, dtype=bool)
    out = squared.copy()
    opaque_idx = np.flatnonzero(~mixed)
    if opaque_idx.size:
        de = delta_e2000_vec(labs[opaque_idx], chunk_lab[None])
        out[opaque_idx] = de.sum(axis=(1, 2))
    return out


def chunk_residual(chunk: np.ndarray, variant_colours: np.ndarray) -> np.ndarray:
    """
    Mean per-channel gap between the unclamped error-adjusted chunk and the
    chosen variant, truncated toward zero. Returns int64 [4].
    """
    r = chunk.shape[0]
    gap = (chunk.astype(np.int64) - variant_colours.astype(np.int64)).sum(axis=(0, 1))
    return trunc_div(gap, r * r)


def diffuse_error(
    errors: ErrorGrid, x: int, y: int, residual: np.ndarray, kernel: DitherKernel
) -> None:
    """Add residual * w / total (truncated) to each in-bounds kernel target."""
    height, width = errors.shape[:2]
    residual = np.asarray(residual, dtype=np.int64)
    for dx, dy, w in kernel.offsets:
        nx = x + dx
        ny = y + dy
        if 0 <= nx < width and 0 <= ny < height:
            errors[ny, nx] += trunc_div(residual * w, kernel.total_weight)


# Engine


class BlockDitherer:
    """
    Quantizes a source image to catalog variants.

    The kernel is resolved and validated here, so a degenerate kernel fails
    before any cell is processed.
    """

    def __init__(
        self,
        catalog: VariantCatalog,
        chunk_resolution: Optional[int] = None,
        kernel: KernelSpec = DEFAULT_DITHERING,
        workers: int = 1,
        progress: bool = False,
    ):
        self.kernel = resolve_kernel(kernel)
        r = validate_chunk_resolution(
            catalog.chunk_resolution if chunk_resolution is None else chunk_resolution
        )
        if r != catalog.chunk_resolution:
            raise ConfigurationError(
                f"chunk resolution {r} does not match the catalog ({catalog.chunk_resolution})"
            )
        self.catalog = catalog
        self.chunk_resolution = r
        self.spans: List[Tuple[int, int]] = split_into_spans(len(catalog), workers)
        self.workers = len(self.spans)
        self.progress = progress
        self.last_errors: Optional[ErrorGrid] = None

    def grid_size(self, source: U8Image) -> Tuple[int, int]:
        """(width, height) in cells for a source image."""
        r = self.chunk_resolution
        if source.ndim != 3 or source.shape[2] != 4:
            raise ConfigurationError(f"expected RGBA source, got shape {source.shape}")
        px_h, px_w = source.shape[:2]
        if px_w % r or px_h % r or px_w == 0 or px_h == 0:
            raise ConfigurationError(
                f"source {px_w}x{px_h} is not a whole number of {r}x{r} chunks"
            )
        return px_w // r, px_h // r

    def _select(self, chunk: np.ndarray, pool: ThreadPoolExecutor) -> int:
        """Index into the catalog of the best variant for one adjusted chunk."""
        clamped = np.clip(chunk, 0, 255)
        chunk_lab = None if np.any(clamped[..., 3] < 255) else rgb_to_lab(clamped)
        cat = self.catalog

        def score(span: Tuple[int, int]) -> np.ndarray:
            start, end = span
            return variant_distances(
                clamped,
                chunk_lab,
                cat.colour_stack[start:end],
                cat.lab_stack[start:end],
                cat.non_opaque[start:end],
            )

        if len(self.spans) == 1:
            distances = score(self.spans[0])
        else:
            distances = np.concatenate(list(pool.map(score, self.spans)))
        # argmin keeps the first minimum; the stack is sorted by identifier.
        return int(np.argmin(distances))

    def run(self, source: U8Image) -> BlockGrid:
        """Quantize a [H*R, W*R, 4] uint8 source into an [H, W] block grid."""
        width, height = self.grid_size(source)
        r = self.chunk_resolution
        src = np.asarray(source, dtype=np.int64)

        errors: ErrorGrid = np.zeros((height, width, 4), dtype=np.int64)
        grid = new_block_grid(width, height)
        progress = RowProgress("dither", height, enabled=self.progress)
        identifiers = self.catalog.identifiers
        colour_stack = self.catalog.colour_stack

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            for y in range(height):
                for x in range(width):
                    chunk = src[y * r : (y + 1) * r, x * r : (x + 1) * r] + errors[y, x]
                    best = self._select(chunk, pool)
                    grid[y, x] = identifiers[best]
                    residual = chunk_residual(chunk, colour_stack[best])
                    diffuse_error(errors, x, y, residual, self.kernel)
                progress.row_done()
        progress.finish()

        self.last_errors = errors
        return grid


def quantize_blocks(
    source: U8Image,
    catalog: VariantCatalog,
    kernel: KernelSpec = DEFAULT_DITHERING,
    workers: int = 1,
    progress: bool = False,
) -> BlockGrid:
    """One-shot convenience wrapper around BlockDitherer."""
    return BlockDitherer(catalog, None, kernel, workers, progress).run(source)


__all__ = [
    "trunc_div",
    "variant_distances",
    "chunk_residual",
    "diffuse_error",
    "BlockDitherer",
    "quantize_blocks",
]
