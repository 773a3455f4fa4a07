# img2mc/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import requests
from PIL import Image, ImageOps

from .catalog import VariantCatalog
from .constants import HTTP_TIMEOUT, TEXTURE_SIZE
from .core_types import BlockGrid, ConfigurationError, ConsistencyError, U8Image
from .utils import log

"""
Image I/O helpers: source acquisition (path or URL), exact resize, tile
compositing, and saving.
"""

SOURCE_RESAMPLE = Image.Resampling.LANCZOS


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_image_bytes(url: str) -> bytes:
    """GET url and return the body. Network failures surface as OSError."""
    try:
        response = requests.get(url, timeout=HTTP_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise OSError(f"failed to fetch image from '{url}': {e}") from e
    return response.content


def _to_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    return im.convert("RGBA")


def load_source_image(source: str | Path) -> Image.Image:
    """Open a local image or download one, EXIF-oriented and in RGBA mode."""
    text = str(source)
    if is_url(text):
        log(f"Downloading image from '{text}'...")
        data = fetch_image_bytes(text)
        with Image.open(io.BytesIO(data)) as im0:
            return _to_rgba(im0)
    log(f"Loading image from '{text}'...")
    with Image.open(text) as im0:
        return _to_rgba(im0)


def derive_grid_size(
    source_size: Tuple[int, int], block_height: int, block_width: Optional[int] = None
) -> Tuple[int, int]:
    """
    (width, height) of the output grid in blocks.

    Width follows the source aspect ratio when not given.
    """
    src_w, src_h = source_size
    height = int(block_height)
    if height < 1:
        raise ConfigurationError(f"block height must be at least 1, got {block_height}")
    if block_width is None:
        width = max(1, int(height / src_h * src_w))
    else:
        width = int(block_width)
    if width < 1:
        raise ConfigurationError(f"block width must be at least 1, got {block_width}")
    return width, height


def resize_exact(im: Image.Image, width: int, height: int) -> U8Image:
    """Resize to exactly width x height pixels; returns uint8 [H,W,4]."""
    if im.size != (width, height):
        im = im.resize((width, height), resample=SOURCE_RESAMPLE)
    return np.array(im.convert("RGBA"), dtype=np.uint8)


def composite_blocks(grid: BlockGrid, catalog: VariantCatalog) -> U8Image:
    """Blit each cell's 16x16 variant texture; returns uint8 [H*16, W*16, 4]."""
    height, width = grid.shape
    t = TEXTURE_SIZE
    out = np.zeros((height * t, width * t, 4), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            ident = grid[y, x]
            if ident is None:
                raise ConsistencyError(f"cell ({x}, {y}) was never assigned a variant")
            out[y * t : (y + 1) * t, x * t : (x + 1) * t] = catalog[ident].texture
    return out


def save_image(path: Path, rgba: U8Image) -> Path:
    """Save an RGBA array; the format follows the file extension."""
    path = Path(path)
    im = Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8))
    if path.suffix.lower() in (".jpg", ".jpeg", ".bmp"):
        im = im.convert("RGB")
    im.save(path)
    return path


__all__ = [
    "SOURCE_RESAMPLE",
    "is_url",
    "fetch_image_bytes",
    "load_source_image",
    "derive_grid_size",
    "resize_exact",
    "composite_blocks",
    "save_image",
]
