# img2mc/cli.py
"""
img2mc command line.

Usage:
  img2mc -t TEXTURES -i INPUT -o OUTPUT [-W W] [-H H] [-r R] [--dither NAME]
         [-s] [-p a,b,c] [--workers N] [--no-progress] [--debug]

Output:
  .litematic / .schematic : structure document
  anything else           : composited image (16 px per block)
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List, Optional, Sequence

from .constants import (
    DEFAULT_BLOCK_HEIGHT,
    DEFAULT_CHUNK_RESOLUTION,
    DEFAULT_DITHERING,
    DITHER_KERNELS,
)
from .core_types import Img2McError, RenderOptions
from .render import render
from .utils import (
    debug_log,
    default_workers,
    enable_line_buffered_stdout,
    error,
    key_value_pairs_to_string,
    print_config_line,
)


def _palette_list(text: str) -> List[str]:
    return [name.strip() for name in text.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="img2mc",
        description="Convert an image into Minecraft blocks, as a picture or a structure file.",
    )
    parser.add_argument(
        "-t",
        "--textures",
        type=Path,
        required=True,
        help="Directory holding the block texture PNGs",
    )
    parser.add_argument(
        "-i", "--input", required=True, help="Input image path or http(s) URL"
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Output path. .litematic/.schematic for a structure, anything else is an image.",
    )
    parser.add_argument(
        "-W",
        "--width",
        type=int,
        default=None,
        help="Width in blocks. Omit to follow the source aspect ratio.",
    )
    parser.add_argument(
        "-H",
        "--height",
        type=int,
        default=DEFAULT_BLOCK_HEIGHT,
        help="Height in blocks",
    )
    parser.add_argument(
        "-r",
        "--chunk-resolution",
        type=int,
        default=DEFAULT_CHUNK_RESOLUTION,
        help="Sub-cells per block side used for matching (1, 2, 4, 8 or 16)",
    )
    parser.add_argument(
        "--dither",
        choices=list(DITHER_KERNELS),
        default=DEFAULT_DITHERING,
        help="Error diffusion kernel",
    )
    parser.add_argument(
        "-s",
        "--exclude-non-survival",
        action="store_true",
        help="Skip blocks not obtainable in survival",
    )
    parser.add_argument(
        "-p",
        "--palette",
        type=_palette_list,
        default=None,
        help="Comma separated texture names to use exclusively",
    )
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Internal workers"
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Hide the per-row progress line"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose run details")
    return parser


def options_from_args(args: argparse.Namespace) -> RenderOptions:
    return RenderOptions(
        textures_path=args.textures,
        input_image=args.input,
        output_path=args.output,
        block_width=args.width,
        block_height=args.height,
        chunk_resolution=args.chunk_resolution,
        dithering=args.dither,
        exclude_non_survival=args.exclude_non_survival,
        block_palette=args.palette,
        workers=max(1, args.workers),
        progress=not args.no_progress,
        debug=args.debug,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    enable_line_buffered_stdout()
    args = build_parser().parse_args(argv)
    options = options_from_args(args)

    print_config_line(
        "run",
        [("CPU cores", os.cpu_count() or 1), ("Workers", options.workers)],
        debug=False,
    )
    if options.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Textures", str(options.textures_path)),
                    ("Width", options.block_width or "auto"),
                    ("Height", options.block_height),
                    ("Survival only", options.exclude_non_survival),
                    ("Palette", len(options.block_palette or []) or "all"),
                ]
            )
        )

    try:
        render(options)
    except (Img2McError, OSError) as e:
        error(str(e))
        return 1
    return 0


__all__ = ["build_parser", "options_from_args", "main"]
