from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from img2mc.catalog import VariantCatalog
from img2mc.core_types import Variant


def make_variant(identifier, colours, block_id=None, properties=None):
    """Variant with explicit chunk colours; colours is one RGBA tuple or an [R,R,4] grid."""
    arr = np.asarray(colours, dtype=np.uint8)
    if arr.ndim == 1:
        arr = arr.reshape(1, 1, 4)
    texture = np.empty((16, 16, 4), dtype=np.uint8)
    texture[...] = arr[0, 0]
    return Variant(
        identifier=identifier,
        block_id=block_id or f"minecraft:{identifier}",
        properties=properties,
        texture=texture,
        chunk_colours=arr,
    )


def make_catalog(spec):
    """spec: {identifier: rgba or [R,R,4] grid}."""
    return VariantCatalog(make_variant(k, v) for k, v in spec.items())


def write_png(path: Path, colour, size=(16, 16)):
    arr = np.empty((size[1], size[0], 4), dtype=np.uint8)
    arr[...] = colour
    Image.fromarray(arr).save(path)
    return path


@pytest.fixture
def texture_dir(tmp_path):
    """A small texture folder with a few solid blocks."""
    d = tmp_path / "textures"
    d.mkdir()
    write_png(d / "stone.png", (128, 128, 128, 255))
    write_png(d / "white_wool.png", (255, 255, 255, 255))
    write_png(d / "black_wool.png", (0, 0, 0, 255))
    return d


@pytest.fixture
def catalog_of():
    return make_catalog


@pytest.fixture
def variant_of():
    return make_variant


@pytest.fixture
def png_writer():
    return write_png
