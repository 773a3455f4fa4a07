# img2mc/structure/nbt.py
from __future__ import annotations

"""
Named binary tag codec (big-endian, optionally gzip-wrapped).

Python value -> tag mapping used by the writer:
  bool            -> TAG_BYTE
  Long (int)      -> TAG_LONG
  int             -> TAG_INT
  float           -> TAG_DOUBLE
  str             -> TAG_STRING
  bytes           -> TAG_BYTE_ARRAY
  dict            -> TAG_COMPOUND (insertion order kept)
  list / NbtList  -> TAG_LIST (empty plain list -> element tag TAG_END)
  ndarray int64 / uint64 -> TAG_LONG_ARRAY
  ndarray int32          -> TAG_INT_ARRAY
  ndarray int8 / uint8   -> TAG_BYTE_ARRAY

The reader returns the same shapes (TAG_LONG as Long, arrays as ndarray).
"""

import gzip
import struct
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np

from ..core_types import Img2McError

TAG_END = 0
TAG_BYTE = 1
TAG_SHORT = 2
TAG_INT = 3
TAG_LONG = 4
TAG_FLOAT = 5
TAG_DOUBLE = 6
TAG_BYTE_ARRAY = 7
TAG_STRING = 8
TAG_LIST = 9
TAG_COMPOUND = 10
TAG_INT_ARRAY = 11
TAG_LONG_ARRAY = 12

GZIP_MAGIC = b"\x1f\x8b"


class NbtError(Img2McError, ValueError):
    pass


class Long(int):
    """Marks an int to be written as TAG_LONG."""


@dataclass
class NbtList:
    inner_tag: int
    items: List[Any]


# Writing


def _enc_string(s: str) -> bytes:
    b = s.encode("utf-8", errors="strict")
    if len(b) > 65535:
        raise NbtError("NBT string too long")
    return struct.pack(">H", len(b)) + b


def _array_tag(value: np.ndarray) -> int:
    if value.dtype in (np.int64, np.uint64):
        return TAG_LONG_ARRAY
    if value.dtype == np.int32:
        return TAG_INT_ARRAY
    if value.dtype in (np.int8, np.uint8):
        return TAG_BYTE_ARRAY
    raise NbtError(f"unsupported array dtype for NBT write: {value.dtype}")


def _tag_type(value: Any) -> int:
    if isinstance(value, bool):
        return TAG_BYTE
    if isinstance(value, Long):
        return TAG_LONG
    if isinstance(value, int):
        return TAG_INT
    if isinstance(value, float):
        return TAG_DOUBLE
    if isinstance(value, str):
        return TAG_STRING
    if isinstance(value, bytes):
        return TAG_BYTE_ARRAY
    if isinstance(value, np.ndarray):
        return _array_tag(value)
    if isinstance(value, (NbtList, list)):
        return TAG_LIST
    if isinstance(value, dict):
        return TAG_COMPOUND
    raise NbtError(f"unsupported Python type for NBT write: {type(value)}")


def _write_payload(value: Any) -> Tuple[int, bytes]:
    tag = _tag_type(value)
    if tag == TAG_BYTE:
        return tag, struct.pack(">b", 1 if value else 0)
    if tag == TAG_LONG:
        return tag, struct.pack(">q", int(value))
    if tag == TAG_INT:
        return tag, struct.pack(">i", int(value))
    if tag == TAG_DOUBLE:
        return tag, struct.pack(">d", float(value))
    if tag == TAG_STRING:
        return tag, _enc_string(value)
    if tag == TAG_BYTE_ARRAY:
        raw = value.astype(np.int8).tobytes() if isinstance(value, np.ndarray) else value
        return tag, struct.pack(">i", len(raw)) + raw
    if tag == TAG_INT_ARRAY:
        return tag, struct.pack(">i", value.size) + value.astype(">i4").tobytes()
    if tag == TAG_LONG_ARRAY:
        words = value.view(np.int64) if value.dtype == np.uint64 else value
        return tag, struct.pack(">i", words.size) + words.astype(">i8").tobytes()
    if tag == TAG_COMPOUND:
        pieces: List[bytes] = []
        for k, v in value.items():
            t, p = _write_payload(v)
            pieces.append(bytes([t]) + _enc_string(k) + p)
        pieces.append(bytes([TAG_END]))
        return tag, b"".join(pieces)
    # TAG_LIST
    if isinstance(value, NbtList):
        inner, items = value.inner_tag, value.items
    else:
        items = value
        inner = _tag_type(items[0]) if items else TAG_END
    payloads = []
    for item in items:
        t, p = _write_payload(item)
        if t != inner:
            raise NbtError("NBT list item type mismatch")
        payloads.append(p)
    return tag, bytes([inner]) + struct.pack(">i", len(items)) + b"".join(payloads)


def encode_nbt(root: Dict[str, Any], name: str = "") -> bytes:
    """Serialize a root compound (uncompressed)."""
    tag, payload = _write_payload(root)
    if tag != TAG_COMPOUND:
        raise NbtError("root NBT payload must be compound")
    return bytes([TAG_COMPOUND]) + _enc_string(name) + payload


def dumps(root: Dict[str, Any], compress: bool = True, name: str = "") -> bytes:
    raw = encode_nbt(root, name)
    return gzip.compress(raw) if compress else raw


# Reading


@dataclass
class _Buf:
    b: bytes
    o: int = 0

    def read(self, n: int) -> bytes:
        if self.o + n > len(self.b):
            raise NbtError("unexpected EOF while reading NBT")
        out = self.b[self.o : self.o + n]
        self.o += n
        return out

    def unpack(self, fmt: str) -> Any:
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))[0]

    def read_length(self) -> int:
        ln = self.unpack(">i")
        if ln < 0:
            raise NbtError("negative length in NBT")
        return ln

    def read_string(self) -> str:
        return self.read(self.unpack(">H")).decode("utf-8", errors="strict")


def _read_payload(buf: _Buf, tag: int) -> Any:
    if tag == TAG_BYTE:
        return buf.unpack(">b")
    if tag == TAG_SHORT:
        return buf.unpack(">h")
    if tag == TAG_INT:
        return buf.unpack(">i")
    if tag == TAG_LONG:
        return Long(buf.unpack(">q"))
    if tag == TAG_FLOAT:
        return buf.unpack(">f")
    if tag == TAG_DOUBLE:
        return buf.unpack(">d")
    if tag == TAG_BYTE_ARRAY:
        return buf.read(buf.read_length())
    if tag == TAG_STRING:
        return buf.read_string()
    if tag == TAG_LIST:
        inner = buf.unpack(">B")
        ln = buf.read_length()
        return NbtList(inner, [_read_payload(buf, inner) for _ in range(ln)])
    if tag == TAG_COMPOUND:
        out: Dict[str, Any] = {}
        while True:
            t = buf.unpack(">B")
            if t == TAG_END:
                return out
            key = buf.read_string()
            out[key] = _read_payload(buf, t)
    if tag == TAG_INT_ARRAY:
        ln = buf.read_length()
        return np.frombuffer(buf.read(4 * ln), dtype=">i4").astype(np.int32)
    if tag == TAG_LONG_ARRAY:
        ln = buf.read_length()
        return np.frombuffer(buf.read(8 * ln), dtype=">i8").astype(np.int64)
    raise NbtError(f"unsupported NBT tag: {tag}")


def decode_nbt(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """Parse an uncompressed document into (root name, root compound)."""
    buf = _Buf(raw)
    if buf.unpack(">B") != TAG_COMPOUND:
        raise NbtError("root tag must be TAG_COMPOUND")
    name = buf.read_string()
    return name, _read_payload(buf, TAG_COMPOUND)


def loads(data: bytes) -> Dict[str, Any]:
    """Parse a document, gzip-wrapped or not, and return the root compound."""
    if data[:2] == GZIP_MAGIC:
        data = gzip.decompress(data)
    return decode_nbt(data)[1]


__all__ = [
    "TAG_END",
    "TAG_BYTE",
    "TAG_SHORT",
    "TAG_INT",
    "TAG_LONG",
    "TAG_FLOAT",
    "TAG_DOUBLE",
    "TAG_BYTE_ARRAY",
    "TAG_STRING",
    "TAG_LIST",
    "TAG_COMPOUND",
    "TAG_INT_ARRAY",
    "TAG_LONG_ARRAY",
    "NbtError",
    "Long",
    "NbtList",
    "encode_nbt",
    "dumps",
    "decode_nbt",
    "loads",
]
