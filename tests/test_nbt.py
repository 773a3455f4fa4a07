import gzip

import numpy as np
import pytest

from img2mc.structure import nbt


def test_encode_minimal_compound():
    assert nbt.encode_nbt({"a": 1}) == (
        b"\x0a\x00\x00" b"\x03\x00\x01a\x00\x00\x00\x01" b"\x00"
    )


def test_empty_list_uses_end_element_tag():
    assert nbt.encode_nbt({"L": []}) == (
        b"\x0a\x00\x00" b"\x09\x00\x01L\x00\x00\x00\x00\x00" b"\x00"
    )


def test_long_array_is_big_endian_signed():
    words = np.array([(1 << 64) - 1, 1], dtype=np.uint64)
    out = nbt.encode_nbt({"B": words})
    assert out[3:7] == b"\x0c\x00\x01B"
    assert out[7:11] == b"\x00\x00\x00\x02"
    assert out[11:19] == b"\xff" * 8
    assert out[19:27] == b"\x00" * 7 + b"\x01"


def test_round_trip_preserves_types_and_order():
    doc = {
        "Version": 6,
        "Time": nbt.Long(1_700_000_000_000),
        "Flag": True,
        "Scale": 0.5,
        "Name": "img2mc",
        "Nested": {"x": 1, "y": -2, "z": 3},
        "Palette": nbt.NbtList(nbt.TAG_COMPOUND, [{"Name": "minecraft:air"}]),
        "Empty": [],
        "Ints": [1, 2, 3],
        "States": np.array([-1, 5], dtype=np.int64),
    }
    back = nbt.loads(nbt.dumps(doc))
    assert list(back) == list(doc)
    assert isinstance(back["Time"], nbt.Long)
    assert back["Time"] == 1_700_000_000_000
    assert back["Flag"] == 1
    assert back["Scale"] == 0.5
    assert back["Nested"] == {"x": 1, "y": -2, "z": 3}
    assert back["Palette"] == nbt.NbtList(nbt.TAG_COMPOUND, [{"Name": "minecraft:air"}])
    assert back["Empty"] == nbt.NbtList(nbt.TAG_END, [])
    assert back["Ints"].items == [1, 2, 3]
    assert back["States"].tolist() == [-1, 5]


def test_dumps_compresses_and_loads_accepts_both():
    doc = {"k": "v"}
    packed = nbt.dumps(doc)
    assert packed[:2] == b"\x1f\x8b"
    assert gzip.decompress(packed) == nbt.dumps(doc, compress=False)
    assert nbt.loads(packed) == nbt.loads(nbt.dumps(doc, compress=False)) == doc


def test_unsupported_value_rejected():
    with pytest.raises(nbt.NbtError):
        nbt.encode_nbt({"bad": object()})


def test_mixed_list_rejected():
    with pytest.raises(nbt.NbtError):
        nbt.encode_nbt({"bad": [1, "two"]})


def test_truncated_input_rejected():
    raw = nbt.encode_nbt({"a": 1})
    with pytest.raises(nbt.NbtError):
        nbt.decode_nbt(raw[:-3])
