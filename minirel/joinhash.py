"""Hash table over outer-relation join attributes, and join value comparison."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Any

from .schema import AttrDesc, Datatype

_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<f")


def _wrap32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _signed_char(byte: int) -> int:
    return byte - 256 if byte > 127 else byte


def _c_string(data: bytes, start: int, limit: int | None = None) -> bytes:
    end = len(data) if limit is None else min(len(data), start + limit)
    return data[start:end].split(b"\0", 1)[0]


@dataclass
class _Entry:
    key: Any
    rid: Any


class JoinHashTable:
    """Maps join-attribute values of outer tuples to their record ids."""

    def __init__(self, size: int, attr: AttrDesc) -> None:
        if size < 1:
            raise ValueError("hash table size must be positive")
        try:
            self._type = Datatype(attr.attr_type)
        except ValueError:
            raise ValueError(f"illegal attribute type {attr.attr_type}") from None
        self._size = size
        self.attr = attr
        self._chains: list[list[_Entry]] = [[] for _ in range(size)]

    def __len__(self) -> int:
        return sum(len(chain) for chain in self._chains)

    def _raw(self, value: Any) -> bytes:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        if self._type is Datatype.INTEGER:
            return _INT.pack(int(value))
        if self._type is Datatype.FLOAT:
            return _FLOAT.pack(float(value))
        return str(value).encode("latin-1")

    def _key(self, raw: bytes) -> Any:
        if self._type is Datatype.INTEGER:
            if len(raw) < _INT.size:
                raise ValueError("integer attribute needs 4 bytes")
            return _INT.unpack_from(raw)[0]
        if self._type is Datatype.FLOAT:
            if len(raw) < _FLOAT.size:
                raise ValueError("float attribute needs 4 bytes")
            return _FLOAT.unpack_from(raw)[0]
        return _c_string(raw, 0, self.attr.attr_len)

    def _index(self, key: Any) -> int:
        if self._type is Datatype.INTEGER:
            value = _wrap32(key * self._size * 31)
        elif self._type is Datatype.FLOAT:
            product = key * self._size * 31
            value = _wrap32(int(product)) if math.isfinite(product) else 0
        else:
            value = 0
            if key:
                for byte in key[1:] + b"\0":
                    value = _wrap32(31 * value + _signed_char(byte))
        return abs(value) % self._size

    def insert(self, rid: Any, tuple_data: bytes) -> None:
        """Record the tuple's join attribute value under its record id."""
        start = self.attr.attr_offset
        raw = bytes(tuple_data)[start:start + self.attr.attr_len]
        key = self._key(raw)
        self._chains[self._index(key)].insert(0, _Entry(key, rid))

    def lookup(self, value: Any) -> list[Any]:
        """Return the record ids whose join value equals the given value.

        The value may be the raw attribute bytes of an inner tuple or a
        plain int, float or str.
        """
        key = self._key(self._raw(value))
        return [e.rid for e in self._chains[self._index(key)] if e.key == key]


def compare_join_values(
    outer: bytes, inner: bytes, attr1: AttrDesc, attr2: AttrDesc
) -> int:
    """Compare the join attributes of two records; the sign gives the order."""
    outer = bytes(outer)
    inner = bytes(inner)
    attr_type = Datatype(attr1.attr_type)
    if attr_type is Datatype.INTEGER:
        first = _INT.unpack_from(outer, attr1.attr_offset)[0]
        second = _INT.unpack_from(inner, attr2.attr_offset)[0]
        return _wrap32(first - second)
    if attr_type is Datatype.FLOAT:
        first = _FLOAT.unpack_from(outer, attr1.attr_offset)[0]
        second = _FLOAT.unpack_from(inner, attr2.attr_offset)[0]
        return int(first - second)
    left = _c_string(outer, attr1.attr_offset)
    right = _c_string(inner, attr2.attr_offset)
    for a, b in zip(left, right):
        if a != b:
            return a - b
    return len(left) - len(right) and (
        left[len(right)] if len(left) > len(right) else -right[len(left)]
    )