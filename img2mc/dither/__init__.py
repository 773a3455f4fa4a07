# img2mc/dither/__init__.py
"""
Dithering API.

Provides:
  BlockDitherer(catalog, chunk_resolution=None, kernel="JarvisJudiceNinke", workers=1, progress=False)
    .run(source) -> BlockGrid

    Args:
      catalog          : VariantCatalog (sorted, chunk colours precomputed)
      chunk_resolution : int, must match the catalog; None takes the catalog's
      kernel           : kernel name, raw weight matrix, or DitherKernel
      workers          : int, threads scoring variants for one cell
      progress         : bool, print percent + ETA per row

    Returns:
      object [H,W] grid of variant identifiers.

  quantize_blocks(source, catalog, kernel=..., workers=1, progress=False) -> BlockGrid
  resolve_kernel(name | weights) -> DitherKernel

    Notes:
      - Row-major causal scan; error diffusion only reaches later cells.
      - CIEDE2000 for opaque pairs, squared RGBA distance otherwise.
      - Deterministic: ties resolve to the smallest identifier.
"""

from .engine import BlockDitherer, quantize_blocks
from .kernel import kernel_from_matrix, resolve_kernel

__all__ = ["BlockDitherer", "quantize_blocks", "kernel_from_matrix", "resolve_kernel"]
