"""Catalog record layouts, attribute types and scan operators."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar

from .errors import MinirelError, Status

RELCATNAME = "relcat"
ATTRCATNAME = "attrcat"
MAXNAME = 32
MAXSTRINGLEN = 255
MAXNAMESIZE = 50

_ENCODING = "latin-1"


class Datatype(IntEnum):
    """Attribute data types."""

    STRING = 0
    INTEGER = 1
    FLOAT = 2


class Operator(IntEnum):
    """Comparison operators used by scans and joins."""

    LT = 0
    LTE = 1
    EQ = 2
    GTE = 3
    GT = 4
    NE = 5


def _encode_name(name: str) -> bytes:
    raw = name.encode(_ENCODING)
    if len(raw) >= MAXNAME:
        raise MinirelError(Status.NAMETOOLONG)
    return raw


def _decode_name(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING)


@dataclass
class RelDesc:
    """A relation catalog entry: the relation's name and attribute count."""

    rel_name: str
    attr_cnt: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct(f"<{MAXNAME}si")
    SIZE: ClassVar[int] = _FORMAT.size

    def to_bytes(self) -> bytes:
        """Pack into the fixed on-disk layout, zero-padding the name."""
        return self._FORMAT.pack(_encode_name(self.rel_name), self.attr_cnt)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RelDesc":
        """Unpack a record produced by to_bytes."""
        if len(data) != cls.SIZE:
            raise ValueError(f"relation descriptor must be {cls.SIZE} bytes")
        name, count = cls._FORMAT.unpack(bytes(data))
        return cls(_decode_name(name), count)


@dataclass
class AttrDesc:
    """An attribute catalog entry: name, offset, type and length."""

    rel_name: str
    attr_name: str
    attr_offset: int
    attr_type: int
    attr_len: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct(f"<{MAXNAME}s{MAXNAME}siii")
    SIZE: ClassVar[int] = _FORMAT.size

    def to_bytes(self) -> bytes:
        """Pack into the fixed on-disk layout, zero-padding both names."""
        return self._FORMAT.pack(
            _encode_name(self.rel_name),
            _encode_name(self.attr_name),
            self.attr_offset,
            int(self.attr_type),
            self.attr_len,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "AttrDesc":
        """Unpack a record produced by to_bytes."""
        if len(data) != cls.SIZE:
            raise ValueError(f"attribute descriptor must be {cls.SIZE} bytes")
        rel, attr, offset, attr_type, length = cls._FORMAT.unpack(bytes(data))
        return cls(_decode_name(rel), _decode_name(attr), offset, attr_type, length)


@dataclass
class AttrInfo:
    """An attribute named in a query, with an optional value."""

    rel_name: str
    attr_name: str
    attr_type: int
    attr_len: int
    attr_value: Any = None