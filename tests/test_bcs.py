import pytest

from bridge_admin.bcs import Deserializer, Serializer
from bridge_admin.errors import BcsError
from bridge_admin.utils.bytes import uleb128_decode, uleb128_encode


def test_integers_are_fixed_width_little_endian():
    out = Serializer().u8(1).u16(0x0203).u32(0x04050607).u64(1_000_000_000_000).output()
    assert out == bytes.fromhex("01" "0302" "07060504" "0010a5d4e8000000")


def test_u256_roundtrip_and_range():
    big = (1 << 255) + 12345
    raw = Serializer().u256(big).output()
    assert len(raw) == 32
    assert Deserializer(raw).u256() == big
    with pytest.raises(BcsError):
        Serializer().u8(256)
    with pytest.raises(BcsError):
        Serializer().u64(-1)


def test_bool_rejects_ints():
    assert Serializer().bool(True).bool(False).output() == b"\x01\x00"
    with pytest.raises(BcsError):
        Serializer().bool(1)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "n,encoded",
    [(0, "00"), (1, "01"), (127, "7f"), (128, "8001"), (300, "ac02"), (16384, "808001")],
)
def test_uleb128_known_values(n, encoded):
    assert uleb128_encode(n).hex() == encoded
    assert uleb128_decode(bytes.fromhex(encoded)) == (n, len(encoded) // 2)


def test_bytes_and_strings_are_length_prefixed():
    assert Serializer().bytes(b"abc").output() == b"\x03abc"
    assert Serializer().str("treasury").output() == b"\x08treasury"


def test_sequence_and_option():
    ser = Serializer()
    ser.sequence([1, 2, 3], lambda s, v: s.u16(v))
    ser.option(None, lambda s, v: s.u8(v))
    ser.option(7, lambda s, v: s.u8(v))
    raw = ser.output()
    assert raw == bytes.fromhex("03" "0100" "0200" "0300" "00" "0107")

    de = Deserializer(raw)
    assert de.sequence(lambda d: d.u16()) == [1, 2, 3]
    assert de.option(lambda d: d.u8()) is None
    assert de.option(lambda d: d.u8()) == 7
    de.assert_finished()


def test_truncated_and_trailing_input():
    with pytest.raises(BcsError):
        Deserializer(b"\x01\x02").u32()
    de = Deserializer(b"\x01\x02")
    de.u8()
    with pytest.raises(BcsError):
        de.assert_finished()


def test_invalid_bool_and_option_tags():
    with pytest.raises(BcsError):
        Deserializer(b"\x02").bool()
    with pytest.raises(BcsError):
        Deserializer(b"\x05").option(lambda d: d.u8())
