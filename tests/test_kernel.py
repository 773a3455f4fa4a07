import pytest

from img2mc.core_types import ConfigurationError
from img2mc.dither.kernel import kernel_from_matrix, resolve_kernel


def test_jarvis_judice_ninke():
    k = resolve_kernel("JarvisJudiceNinke")
    assert k.center_x == 2
    assert k.total_weight == 48
    assert (1, 0, 7) in k.offsets
    assert (2, 0, 5) in k.offsets
    assert (-2, 1, 3) in k.offsets
    assert (0, 2, 5) in k.offsets
    assert len(k.offsets) == 12


def test_floyd_steinberg():
    k = resolve_kernel("FloydSteinberg")
    assert k.center_x == 1
    assert k.total_weight == 16
    assert k.offsets == ((1, 0, 7), (-1, 1, 3), (0, 1, 5), (1, 1, 1))


def test_row_zero_targets_are_right_of_current_cell():
    for name in ("JarvisJudiceNinke", "FloydSteinberg"):
        k = resolve_kernel(name)
        assert all(dx > 0 for dx, dy, _ in k.offsets if dy == 0)


def test_custom_matrix():
    k = kernel_from_matrix([[0, 1]])
    assert k.name == "custom"
    assert k.center_x == 0
    assert k.offsets == ((1, 0, 1),)


def test_resolve_passes_through_resolved_kernel():
    k = resolve_kernel("FloydSteinberg")
    assert resolve_kernel(k) is k


@pytest.mark.parametrize(
    "weights",
    [
        [[0, 0, 0], [1, 2, 1]],  # row 0 carries no weight
        [[7, 0], [1, 1]],  # no slot for the current cell
        [],
        [[0, 1], [1]],
        [[0, 1], [-1, 1]],
    ],
)
def test_degenerate_matrices_rejected(weights):
    with pytest.raises(ConfigurationError):
        kernel_from_matrix(weights)


def test_unknown_name_lists_options():
    with pytest.raises(ConfigurationError, match="FloydSteinberg"):
        resolve_kernel("Atkinson")
