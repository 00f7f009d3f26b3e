"""
BCS (Binary Canonical Serialization) encoder/decoder.

BCS is the ledger's canonical wire format: transaction data, multisig
public keys and signatures, pure call arguments and dev-inspect return
values are all BCS. The encoding is fully deterministic:

- unsigned integers u8..u256 are fixed-width little-endian
- bool is a single 0x00/0x01 byte
- sequences and byte strings are prefixed by a ULEB128 length
- fixed-size arrays carry no length
- enums are a ULEB128 variant index followed by the variant payload
- Option<T> is the enum {None = 0, Some(T) = 1}
- structs and tuples are the concatenation of their fields

API
---
- Serializer: incremental writer; `output()` returns the bytes
- Deserializer: cursor reader over bytes; `assert_finished()` checks for trailing data
- BcsError on malformed input or out-of-range values
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .errors import BcsError
from .utils.bytes import BytesLike, ensure_bytes, uleb128_decode, uleb128_encode

T = TypeVar("T")

_INT_WIDTHS = {8: 1, 16: 2, 32: 4, 64: 8, 128: 16, 256: 32}


# -----------------------------------------------------------------------------
# Encoder
# -----------------------------------------------------------------------------

class Serializer:
    def __init__(self) -> None:
        self._buf = bytearray()

    def output(self) -> bytes:
        return bytes(self._buf)

    # --- integers --------------------------------------------------------

    def uint(self, bits: int, value: int) -> "Serializer":
        width = _INT_WIDTHS.get(bits)
        if width is None:
            raise BcsError(f"unsupported integer width u{bits}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise BcsError(f"u{bits} expects an int, got {type(value).__name__}")
        if value < 0 or value >> bits:
            raise BcsError(f"value {value} out of range for u{bits}")
        self._buf += value.to_bytes(width, "little")
        return self

    def u8(self, value: int) -> "Serializer":
        return self.uint(8, value)

    def u16(self, value: int) -> "Serializer":
        return self.uint(16, value)

    def u32(self, value: int) -> "Serializer":
        return self.uint(32, value)

    def u64(self, value: int) -> "Serializer":
        return self.uint(64, value)

    def u128(self, value: int) -> "Serializer":
        return self.uint(128, value)

    def u256(self, value: int) -> "Serializer":
        return self.uint(256, value)

    def uleb128(self, value: int) -> "Serializer":
        try:
            self._buf += uleb128_encode(value)
        except ValueError as e:
            raise BcsError(str(e)) from e
        return self

    # --- scalars ---------------------------------------------------------

    def bool(self, value: bool) -> "Serializer":
        if not isinstance(value, bool):
            raise BcsError(f"bool expects True/False, got {value!r}")
        self._buf.append(1 if value else 0)
        return self

    def fixed_bytes(self, value: BytesLike, length: int) -> "Serializer":
        raw = bytes(value)
        if len(raw) != length:
            raise BcsError(f"expected {length} bytes, got {len(raw)}")
        self._buf += raw
        return self

    def bytes(self, value: BytesLike) -> "Serializer":
        raw = bytes(value)
        self.uleb128(len(raw))
        self._buf += raw
        return self

    def str(self, value: str) -> "Serializer":
        return self.bytes(value.encode("utf-8"))

    def address(self, value: BytesLike) -> "Serializer":
        return self.fixed_bytes(value, 32)

    # --- composites ------------------------------------------------------

    def sequence(self, items: Sequence[T], write: Callable[["Serializer", T], Any]) -> "Serializer":
        self.uleb128(len(items))
        for item in items:
            write(self, item)
        return self

    def option(self, value: Optional[T], write: Callable[["Serializer", T], Any]) -> "Serializer":
        if value is None:
            self._buf.append(0)
        else:
            self._buf.append(1)
            write(self, value)
        return self

    def variant(self, index: int) -> "Serializer":
        return self.uleb128(index)

    def raw(self, data: BytesLike) -> "Serializer":
        """Append pre-encoded BCS bytes."""
        self._buf += bytes(data)
        return self


# -----------------------------------------------------------------------------
# Decoder
# -----------------------------------------------------------------------------

class Deserializer:
    def __init__(self, data: BytesLike) -> None:
        self._buf = ensure_bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def assert_finished(self) -> None:
        if self._pos != len(self._buf):
            raise BcsError(f"trailing bytes after BCS value ({self.remaining} left)")

    def _take(self, n: int) -> bytes:
        if n < 0 or self._pos + n > len(self._buf):
            raise BcsError(f"unexpected end of input at offset {self._pos} (need {n} bytes)")
        out = self._buf[self._pos : self._pos + n]
        self._pos += n
        return out

    def uint(self, bits: int) -> int:
        width = _INT_WIDTHS.get(bits)
        if width is None:
            raise BcsError(f"unsupported integer width u{bits}")
        return int.from_bytes(self._take(width), "little")

    def u8(self) -> int:
        return self.uint(8)

    def u16(self) -> int:
        return self.uint(16)

    def u32(self) -> int:
        return self.uint(32)

    def u64(self) -> int:
        return self.uint(64)

    def u128(self) -> int:
        return self.uint(128)

    def u256(self) -> int:
        return self.uint(256)

    def uleb128(self) -> int:
        try:
            value, used = uleb128_decode(self._buf, offset=self._pos)
        except ValueError as e:
            raise BcsError(f"{e} at offset {self._pos}") from e
        self._pos += used
        return value

    def bool(self) -> bool:
        b = self._take(1)[0]
        if b > 1:
            raise BcsError(f"invalid bool byte 0x{b:02x} at offset {self._pos - 1}")
        return b == 1

    def fixed_bytes(self, length: int) -> bytes:
        return self._take(length)

    def bytes(self) -> bytes:
        return self._take(self.uleb128())

    def str(self) -> str:
        raw = self.bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BcsError(f"invalid utf-8 in BCS string: {e}") from e

    def address(self) -> bytes:
        return self._take(32)

    def sequence(self, read: Callable[["Deserializer"], T]) -> List[T]:
        n = self.uleb128()
        return [read(self) for _ in range(n)]

    def option(self, read: Callable[["Deserializer"], T]) -> Optional[T]:
        tag = self._take(1)[0]
        if tag == 0:
            return None
        if tag == 1:
            return read(self)
        raise BcsError(f"invalid Option tag {tag}")

    def variant(self) -> int:
        return self.uleb128()


__all__ = ["Serializer", "Deserializer", "BcsError"]
