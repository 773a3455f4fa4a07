# img2mc/__init__.py
"""
img2mc package.

Purpose:
  Convert images into grids of Minecraft block textures, written either as a
  composited picture or as a structure file. See img2mc.cli for the CLI.

Public API:
  render          : full run from RenderOptions.
  RenderOptions   : run configuration.
  build_catalog   : load textures and build the VariantCatalog.
  BlockDitherer   : error-diffusion block quantizer.
  write_structure : structure document output.
  colour_convert  : sRGB -> Lab, CIEDE2000.
  core_types      : shared aliases, value objects, errors.
  utils           : console logging and formatting helpers.

Quick start:
  from img2mc import RenderOptions, render
  render(RenderOptions(Path("textures"), "in.png", Path("out.litematic")))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import utils

from .catalog import VariantCatalog, build_catalog
from .core_types import (
    ConfigurationError,
    ConsistencyError,
    Img2McError,
    RenderOptions,
)
from .dither import BlockDitherer, quantize_blocks
from .render import render
from .structure import write_structure

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "utils",
    "VariantCatalog",
    "build_catalog",
    "ConfigurationError",
    "ConsistencyError",
    "Img2McError",
    "RenderOptions",
    "BlockDitherer",
    "quantize_blocks",
    "render",
    "write_structure",
]
