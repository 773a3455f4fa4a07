import numpy as np
import pytest

from img2mc.colour_convert import rgb_to_lab
from img2mc.core_types import ConfigurationError
from img2mc.dither.engine import (
    BlockDitherer,
    chunk_residual,
    diffuse_error,
    quantize_blocks,
    trunc_div,
    variant_distances,
)
from img2mc.dither.kernel import resolve_kernel

AIR = (0, 0, 0, 0)
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def solid_source(width_px, height_px, rgba):
    src = np.empty((height_px, width_px, 4), dtype=np.uint8)
    src[...] = rgba
    return src


def test_trunc_div_rounds_toward_zero():
    np.testing.assert_array_equal(trunc_div(np.array([-7, 7, -1, 0]), 2), [-3, 3, 0, 0])


def test_transparent_cell_picks_air_without_error(catalog_of):
    catalog = catalog_of({"air": AIR, "stone": (128, 128, 128, 255)})
    ditherer = BlockDitherer(catalog, kernel="FloydSteinberg")
    grid = ditherer.run(solid_source(1, 1, AIR))
    assert grid.shape == (1, 1)
    assert grid[0, 0] == "air"
    np.testing.assert_array_equal(ditherer.last_errors, np.zeros((1, 1, 4)))


def test_exact_match_has_zero_distance_and_wins(catalog_of):
    target = np.array(
        [[[200, 10, 10, 255], [10, 200, 10, 255]], [[10, 10, 200, 255], [90, 90, 90, 255]]],
        dtype=np.uint8,
    )
    catalog = catalog_of(
        {
            "air": np.zeros((2, 2, 4), dtype=np.uint8),
            "near": np.clip(target.astype(int) + [4, 4, 4, 0], 0, 255),
            "target": target,
            "white": np.full((2, 2, 4), 255, dtype=np.uint8),
        }
    )
    d = variant_distances(
        target.astype(np.int64),
        rgb_to_lab(target),
        catalog.colour_stack,
        catalog.lab_stack,
        catalog.non_opaque,
    )
    assert d[catalog.identifiers.index("target")] == 0.0
    grid = quantize_blocks(target, catalog, kernel="JarvisJudiceNinke")
    assert grid[0, 0] == "target"


def test_mixed_transparency_uses_squared_rgba_distance(catalog_of):
    src = np.array(
        [[[200, 0, 0, 255], [200, 0, 0, 255]], [[200, 0, 0, 255], [200, 0, 0, 0]]],
        dtype=np.uint8,
    )
    catalog = catalog_of(
        {
            "a": np.tile(np.array([200, 0, 0, 255], dtype=np.uint8), (2, 2, 1)),
            "b": np.tile(np.array([200, 0, 0, 0], dtype=np.uint8), (2, 2, 1)),
        }
    )
    d = variant_distances(
        src.astype(np.int64), None, catalog.colour_stack, catalog.lab_stack, catalog.non_opaque
    )
    np.testing.assert_array_equal(d, [65025.0, 195075.0])
    assert quantize_blocks(src, catalog, kernel="FloydSteinberg")[0, 0] == "a"


def test_ties_resolve_to_smallest_identifier(catalog_of):
    catalog = catalog_of({"b_tile": (50, 60, 70, 255), "a_tile": (50, 60, 70, 255)})
    grid = quantize_blocks(solid_source(2, 2, (50, 60, 70, 255)), catalog)
    assert list(grid.ravel()) == ["a_tile"] * 4


def test_floyd_steinberg_hand_computed(catalog_of):
    catalog = catalog_of({"air": AIR, "black": BLACK, "white": WHITE})
    ditherer = BlockDitherer(catalog, 1, "FloydSteinberg")
    grid = ditherer.run(solid_source(2, 1, (100, 100, 100, 255)))
    assert list(grid[0]) == ["black", "white"]
    # residual (100, 100, 100, 0) * 7 / 16 lands on the right neighbour
    np.testing.assert_array_equal(ditherer.last_errors[0, 1], [43, 43, 43, 0])
    np.testing.assert_array_equal(ditherer.last_errors[0, 0], [0, 0, 0, 0])


def test_width_and_height_are_independent(catalog_of):
    catalog = catalog_of({"black": BLACK, "white": WHITE})
    grid = quantize_blocks(solid_source(5, 2, WHITE), catalog)
    assert grid.shape == (2, 5)
    assert all(cell == "white" for cell in grid.ravel())


def test_out_of_bounds_diffusion_is_dropped(catalog_of):
    catalog = catalog_of({"black": BLACK})
    ditherer = BlockDitherer(catalog, kernel="JarvisJudiceNinke")
    grid = ditherer.run(solid_source(1, 1, WHITE))
    assert grid[0, 0] == "black"
    np.testing.assert_array_equal(ditherer.last_errors, np.zeros((1, 1, 4)))


def test_diffuse_error_hand_computed():
    errors = np.zeros((2, 3, 4), dtype=np.int64)
    diffuse_error(errors, 2, 0, np.array([16, -16, 32, 0]), resolve_kernel("FloydSteinberg"))
    np.testing.assert_array_equal(errors[1, 1], [3, -3, 6, 0])
    np.testing.assert_array_equal(errors[1, 2], [5, -5, 10, 0])
    assert not errors[0].any()
    assert not errors[1, 0].any()


def test_chunk_residual_truncates_toward_zero():
    chunk = np.zeros((2, 2, 4), dtype=np.int64)
    variant = np.zeros((2, 2, 4), dtype=np.int64)
    variant[0, 0, 0] = 7
    chunk[1, 1, 1] = 7
    np.testing.assert_array_equal(chunk_residual(chunk, variant), [-1, 1, 0, 0])


def test_residual_uses_unclamped_adjusted_chunk():
    chunk = np.full((1, 1, 4), 300, dtype=np.int64)
    variant = np.full((1, 1, 4), 255, dtype=np.uint8)
    np.testing.assert_array_equal(chunk_residual(chunk, variant), [45, 45, 45, 45])


def test_workers_do_not_change_the_result(catalog_of):
    rng = np.random.default_rng(7)
    spec = {f"v{i:02d}": tuple(rng.integers(0, 256, 3).tolist()) + (255,) for i in range(9)}
    spec["air"] = AIR
    catalog = catalog_of(spec)
    src = rng.integers(0, 256, (6, 8, 4), dtype=np.uint8)
    src[..., 3] = 255
    src[0, 0, 3] = 0
    single = quantize_blocks(src, catalog, workers=1)
    pooled = quantize_blocks(src, catalog, workers=3)
    assert single.tolist() == pooled.tolist()


def test_source_must_be_whole_chunks(catalog_of):
    catalog = catalog_of({"a": np.full((2, 2, 4), 255, dtype=np.uint8)})
    with pytest.raises(ConfigurationError):
        quantize_blocks(solid_source(3, 2, WHITE), catalog)


def test_chunk_resolution_must_match_catalog(catalog_of):
    catalog = catalog_of({"a": WHITE})
    with pytest.raises(ConfigurationError):
        BlockDitherer(catalog, 2)
    with pytest.raises(ConfigurationError):
        BlockDitherer(catalog, 3)


def test_degenerate_kernel_fails_before_running(catalog_of):
    with pytest.raises(ConfigurationError):
        BlockDitherer(catalog_of({"a": WHITE}), kernel=[[0, 0], [1, 1]])


def test_air_only_catalog_on_single_transparent_cell(catalog_of):
    ditherer = BlockDitherer(catalog_of({"air": AIR}), kernel="JarvisJudiceNinke")
    grid = ditherer.run(solid_source(1, 1, AIR))
    assert grid.tolist() == [["air"]]
    assert not ditherer.last_errors.any()
