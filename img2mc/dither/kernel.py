# img2mc/dither/kernel.py
from __future__ import annotations

"""
Error-diffusion kernels.

A kernel is a small weight matrix. Row 0 is the row being scanned; its leading
zeros cover the cells already processed, and the last leading zero is the
current cell. Later rows are the rows below, aligned on the same center column.

Exports:
  kernel_from_matrix(weights, name) -> DitherKernel
  resolve_kernel(name | weights | DitherKernel) -> DitherKernel
"""

from typing import List, Sequence, Tuple, Union

from ..constants import DITHER_KERNELS
from ..core_types import ConfigurationError, DitherKernel

KernelSpec = Union[str, Sequence[Sequence[int]], DitherKernel]


def kernel_from_matrix(
    weights: Sequence[Sequence[int]], name: str = "custom"
) -> DitherKernel:
    """
    Validate a weight matrix and derive center column, total weight and offsets.

    Raises ConfigurationError when the matrix is empty or ragged, holds negative
    weights, or row 0 has no usable center (all zero, or nonzero at column 0).
    """
    rows: Tuple[Tuple[int, ...], ...] = tuple(tuple(int(w) for w in row) for row in weights)
    if not rows or not rows[0]:
        raise ConfigurationError(f"Invalid dithering matrix '{name}': empty")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ConfigurationError(f"Invalid dithering matrix '{name}': ragged rows")
    if any(w < 0 for row in rows for w in row):
        raise ConfigurationError(f"Invalid dithering matrix '{name}': negative weight")

    first_nonzero = next((i for i, w in enumerate(rows[0]) if w != 0), None)
    if first_nonzero is None:
        raise ConfigurationError(
            f"Invalid dithering matrix '{name}': row 0 carries no weight"
        )
    if first_nonzero == 0:
        raise ConfigurationError(
            f"Invalid dithering matrix '{name}': row 0 has no slot for the current cell"
        )
    center_x = first_nonzero - 1

    offsets: List[Tuple[int, int, int]] = []
    for dy, row in enumerate(rows):
        for col, w in enumerate(row):
            if w:
                offsets.append((col - center_x, dy, w))

    return DitherKernel(
        name=name,
        weights=rows,
        center_x=center_x,
        total_weight=sum(w for row in rows for w in row),
        offsets=tuple(offsets),
    )


def resolve_kernel(kernel: KernelSpec) -> DitherKernel:
    """Resolve a kernel name, a raw matrix, or an already resolved kernel."""
    if isinstance(kernel, DitherKernel):
        return kernel
    if isinstance(kernel, str):
        try:
            weights = DITHER_KERNELS[kernel]
        except KeyError:
            options = ", ".join(DITHER_KERNELS)
            raise ConfigurationError(
                f"Invalid dithering algorithm '{kernel}'. Options: {options}"
            ) from None
        return kernel_from_matrix(weights, name=kernel)
    return kernel_from_matrix(kernel)


__all__ = ["KernelSpec", "kernel_from_matrix", "resolve_kernel"]
