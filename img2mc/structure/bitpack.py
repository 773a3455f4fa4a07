# img2mc/structure/bitpack.py
from __future__ import annotations

"""
Fixed-width index packing into 64-bit words.

Entries are laid out back to back from bit 0 of word 0. An entry that crosses a
word boundary keeps its low bits in the current word and its high bits in the
next one. One guard word is always appended past the exact requirement.
"""

from typing import Iterable, List

import numpy as np

from ..constants import MIN_BITS_PER_ENTRY, WORD_BITS
from ..core_types import ConfigurationError

_WORD_MASK = (1 << WORD_BITS) - 1


def bits_per_entry(palette_size: int) -> int:
    """max(2, ceil(log2(palette_size)))."""
    if palette_size < 1:
        raise ConfigurationError(f"palette size must be positive, got {palette_size}")
    return max(MIN_BITS_PER_ENTRY, (palette_size - 1).bit_length())


def word_count(bits: int, entries: int) -> int:
    return -(-bits * entries // WORD_BITS) + 1


def pack_indices(indices: Iterable[int], bits: int) -> np.ndarray:
    """Pack indices into uint64 words (guard word included)."""
    values: List[int] = [int(v) for v in indices]
    limit = 1 << bits
    words = [0] * word_count(bits, len(values))
    for i, value in enumerate(values):
        if value < 0 or value >= limit:
            raise ConfigurationError(f"index {value} does not fit in {bits} bits")
        start = i * bits
        word, offset = divmod(start, WORD_BITS)
        words[word] |= (value << offset) & _WORD_MASK
        spill = offset + bits - WORD_BITS
        if spill > 0:
            words[word + 1] |= value >> (bits - spill)
    return np.array(words, dtype=np.uint64)


def unpack_indices(words: np.ndarray, bits: int, entries: int) -> List[int]:
    """Inverse of pack_indices. Accepts signed or unsigned words."""
    raw = [int(w) & _WORD_MASK for w in np.asarray(words).view(np.uint64)]
    mask = (1 << bits) - 1
    out: List[int] = []
    for i in range(entries):
        word, offset = divmod(i * bits, WORD_BITS)
        value = raw[word] >> offset
        if offset + bits > WORD_BITS:
            value |= raw[word + 1] << (WORD_BITS - offset)
        out.append(value & mask)
    return out


def to_signed_words(words: np.ndarray) -> np.ndarray:
    """Reinterpret uint64 words as two's complement int64."""
    return np.asarray(words, dtype=np.uint64).view(np.int64)


__all__ = [
    "bits_per_entry",
    "word_count",
    "pack_indices",
    "unpack_indices",
    "to_signed_words",
]
