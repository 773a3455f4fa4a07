# img2mc/render.py
from __future__ import annotations

"""
End-to-end run: catalog -> source -> dither -> output.

The output kind follows the output path extension: .litematic / .schematic
write a structure document, anything else a composited image.
"""

import time
from pathlib import Path
from typing import Optional, Tuple

from .catalog import VariantCatalog, build_catalog
from .constants import STRUCTURE_EXTENSIONS
from .core_types import BlockGrid, ConfigurationError, RenderOptions, U8Image
from .dither import BlockDitherer
from .image_io import composite_blocks, derive_grid_size, load_source_image, resize_exact, save_image
from .structure import write_structure
from .utils import (
    debug_log,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)


def output_kind(path: Path) -> str:
    """'structure' or 'image'. Raises ConfigurationError when there is no extension."""
    suffix = Path(path).suffix.lower()
    if not suffix:
        raise ConfigurationError(f"Output path '{path}' does not have a file extension.")
    return "structure" if suffix in STRUCTURE_EXTENSIONS else "image"


def prepare_source(
    options: RenderOptions, chunk_resolution: int
) -> Tuple[U8Image, int, int]:
    """Load and resize the source to W*R x H*R. Returns (pixels, W, H)."""
    im = load_source_image(options.input_image)
    width, height = derive_grid_size(im.size, options.block_height, options.block_width)
    pixels = resize_exact(im, width * chunk_resolution, height * chunk_resolution)
    if options.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{im.size[0]}x{im.size[1]}"),
                    ("Grid", f"{width}x{height}"),
                    ("Resized", f"{pixels.shape[1]}x{pixels.shape[0]}"),
                ]
            )
        )
    return pixels, width, height


def write_output(
    path: Path, grid: BlockGrid, catalog: VariantCatalog, now_ms: Optional[int] = None
) -> Path:
    path = Path(path)
    if output_kind(path) == "structure":
        write_structure(path, grid, catalog, now_ms=now_ms)
    else:
        save_image(path, composite_blocks(grid, catalog))
    return path


def render(options: RenderOptions, now_ms: Optional[int] = None) -> BlockGrid:
    """Run a full conversion described by options and return the block grid."""
    t_start = time.perf_counter()
    output_path = Path(options.output_path)
    output_kind(output_path)

    print_banner(output_path.name)
    catalog = build_catalog(
        Path(options.textures_path),
        options.chunk_resolution,
        block_palette=options.block_palette,
        exclude_non_survival=options.exclude_non_survival,
    )

    ditherer = BlockDitherer(
        catalog,
        options.chunk_resolution,
        options.dithering,
        workers=options.workers,
        progress=options.progress,
    )
    source, width, height = prepare_source(options, ditherer.chunk_resolution)
    t_loaded = time.perf_counter()

    print_config_line(
        "dither",
        [
            ("Kernel", ditherer.kernel.name),
            ("Chunk res", ditherer.chunk_resolution),
            ("Grid", f"{width}x{height}"),
            ("Workers", ditherer.workers),
            ("Variants", len(catalog)),
        ],
        debug=False,
    )
    grid = ditherer.run(source)
    t_dithered = time.perf_counter()

    write_output(output_path, grid, catalog, now_ms=now_ms)
    t_saved = time.perf_counter()

    log(f"Saved result to '{output_path}'.")
    if options.debug:
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"dither={format_seconds_compact(t_dithered - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_dithered)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return grid


__all__ = ["output_kind", "prepare_source", "write_output", "render"]
