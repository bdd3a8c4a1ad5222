import struct

import pytest

from minirel.errors import MinirelError, Status
from minirel.schema import (
    MAXNAME,
    AttrDesc,
    AttrInfo,
    Datatype,
    RelDesc,
)


def test_reldesc_wire_bytes():
    data = RelDesc("relcat", 2).to_bytes()
    assert data == b"relcat" + b"\0" * (MAXNAME - 6) + b"\x02\x00\x00\x00"


def test_reldesc_round_trip():
    desc = RelDesc("soaps", 4)
    data = desc.to_bytes()
    assert len(data) == RelDesc.SIZE
    assert RelDesc.from_bytes(data) == desc


def test_attrdesc_round_trip():
    desc = AttrDesc("attrcat", "attrOffset", 64, int(Datatype.INTEGER), 4)
    data = desc.to_bytes()
    assert len(data) == AttrDesc.SIZE
    assert AttrDesc.from_bytes(data) == desc


def test_attrdesc_layout_places_fields_after_names():
    data = AttrDesc("r", "a", 1, int(Datatype.FLOAT), 3).to_bytes()
    assert data[:1] == b"r"
    assert data[MAXNAME:MAXNAME + 1] == b"a"
    assert data[2 * MAXNAME:] == b"\x01\x00\x00\x00\x02\x00\x00\x00\x03\x00\x00\x00"


def test_name_too_long_rejected():
    with pytest.raises(MinirelError) as info:
        RelDesc("x" * MAXNAME, 1).to_bytes()
    assert info.value.status == Status.NAMETOOLONG


def test_attr_name_too_long_rejected():
    with pytest.raises(MinirelError) as info:
        AttrDesc("rel", "y" * MAXNAME, 0, 0, 4).to_bytes()
    assert info.value.status == Status.NAMETOOLONG


def test_longest_allowed_name_round_trips():
    name = "n" * (MAXNAME - 1)
    assert RelDesc.from_bytes(RelDesc(name, 3).to_bytes()).rel_name == name


@pytest.mark.parametrize("cls", [RelDesc, AttrDesc])
def test_from_bytes_wrong_length(cls):
    with pytest.raises(ValueError):
        cls.from_bytes(b"\0" * (cls.SIZE - 1))


@pytest.mark.parametrize(
    "datatype, code",
    [(Datatype.STRING, 0), (Datatype.INTEGER, 1), (Datatype.FLOAT, 2)],
)
def test_datatype_code_stored_in_attrdesc(datatype, code):
    data = AttrDesc("r", "a", 0, int(datatype), 4).to_bytes()
    assert data[2 * MAXNAME + 4:2 * MAXNAME + 8] == struct.pack("<i", code)


def test_attrinfo_defaults_value_to_none():
    info = AttrInfo("stars", "starid", int(Datatype.INTEGER), 4)
    assert info.attr_value is None
    assert info.attr_len == 4