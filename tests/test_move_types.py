import pytest

from bridge_admin.errors import BcsError
from bridge_admin.types.move import (
    TypeTagKind,
    decode_value,
    encode_pure,
    normalize_address,
    parse_type_tag,
)


def test_normalize_address_pads_and_lowercases():
    assert normalize_address("0x403") == "0x" + "0" * 61 + "403"
    assert normalize_address("0xABC") == normalize_address("abc")
    with pytest.raises(ValueError):
        normalize_address("0xnothex")


def test_parse_nested_struct_type():
    tag = parse_type_tag("0x2::coin::Coin<0xabc::lbtc::LBTC>")
    assert tag.kind == TypeTagKind.STRUCT
    assert tag.struct.module == "coin"
    inner = tag.struct.type_params[0]
    assert inner.struct.name == "LBTC"
    assert str(tag) == f"{normalize_address('0x2')}::coin::Coin<{normalize_address('0xabc')}::lbtc::LBTC>"


def test_parse_vector_and_multiple_params():
    tag = parse_type_tag("vector<vector<u8>>")
    assert tag.kind == TypeTagKind.VECTOR and tag.element.kind == TypeTagKind.VECTOR
    pair = parse_type_tag("0x1::m::Pair<u64, 0x1::m::Box<address, bool>>")
    assert [t.kind for t in pair.struct.type_params] == [TypeTagKind.U64, TypeTagKind.STRUCT]


@pytest.mark.parametrize("bad", ["", "vector<u8", "0x1::m", "0x1::m::Bad-Name", "0x1::m::S<u8>>"])
def test_malformed_types(bad):
    with pytest.raises(BcsError):
        parse_type_tag(bad)


def test_encode_pure_known_values():
    assert encode_pure("u64", 1_000_000_000_000) == (10**12).to_bytes(8, "little")
    assert encode_pure("u16", 2) == b"\x02\x00"
    assert encode_pure("u32", "0x10") == b"\x10\x00\x00\x00"
    assert encode_pure("bool", True) == b"\x01"
    assert encode_pure("address", "0x1") == bytes(31) + b"\x01"
    assert encode_pure("vector<u8>", b"abcd") == b"\x04abcd"
    assert encode_pure("vector<u8>", "0xdead") == b"\x02\xde\xad"
    assert encode_pure("0x1::string::String", "hi") == b"\x02hi"
    assert encode_pure("vector<vector<u8>>", [b"\x01", b"\x02\x03"]) == b"\x02\x01\x01\x02\x02\x03"
    assert encode_pure("0x1::option::Option<u8>", None) == b"\x00"


def test_pure_rejects_bad_values():
    with pytest.raises(BcsError):
        encode_pure("u64", True)
    with pytest.raises(BcsError):
        encode_pure("u8", 256)
    with pytest.raises(BcsError):
        encode_pure("0x2::coin::Coin<0x2::sui::SUI>", 1)


def test_decode_return_values():
    assert decode_value("bool", b"\x01") is True
    assert decode_value("u256", (7).to_bytes(32, "little")) == 7
    assert decode_value("vector<0x1::string::String>", b"\x02\x08AdminCap\x09MinterCap") == ["AdminCap", "MinterCap"]
    with pytest.raises(BcsError):
        decode_value("u8", b"\x01\x02")
