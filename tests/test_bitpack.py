import numpy as np
import pytest

from img2mc.core_types import ConfigurationError
from img2mc.structure.bitpack import (
    bits_per_entry,
    pack_indices,
    to_signed_words,
    unpack_indices,
    word_count,
)


@pytest.mark.parametrize(
    "size,bits", [(1, 2), (2, 2), (3, 2), (4, 2), (5, 3), (8, 3), (9, 4), (256, 8), (257, 9)]
)
def test_bits_per_entry(size, bits):
    assert bits_per_entry(size) == bits


def test_bits_per_entry_rejects_empty_palette():
    with pytest.raises(ConfigurationError):
        bits_per_entry(0)


def test_word_count_includes_guard_word():
    assert word_count(3, 16) == 2
    assert word_count(2, 32) == 2
    assert word_count(2, 33) == 3
    assert word_count(3, 22) == 3


def test_eight_entry_palette_on_four_by_four():
    indices = list(range(8)) + list(range(7, -1, -1))
    words = pack_indices(indices, 3)
    assert words.dtype == np.uint64
    assert words.tolist() == [0o0123456776543210, 0]


def test_entry_straddling_a_word_boundary():
    # entry 12 occupies bits 60..64: low four bits in word 0, top bit in word 1
    words = pack_indices([0] * 12 + [0b10110], 5)
    assert words.tolist() == [0b0110 << 60, 1, 0]


def test_all_ones_spill_into_next_word():
    words = pack_indices([7] * 22, 3)
    assert words.tolist() == [(1 << 64) - 1, 0b11, 0]
    assert to_signed_words(words).tolist() == [-1, 3, 0]


def test_unpack_inverts_pack_for_signed_words():
    rng = np.random.default_rng(3)
    values = rng.integers(0, 1 << 5, 100).tolist()
    signed = to_signed_words(pack_indices(values, 5))
    assert signed.dtype == np.int64
    assert unpack_indices(signed, 5, len(values)) == values


def test_index_wider_than_entry_rejected():
    with pytest.raises(ConfigurationError):
        pack_indices([4], 2)
