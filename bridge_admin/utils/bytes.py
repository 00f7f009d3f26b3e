"""
Byte helpers shared by the codecs: hex and base64 conversion (the fullnode
speaks base64 for tx bytes and signatures, operators paste hex) and the ULEB128
varint BCS uses for sequence lengths and variant tags.
"""

from __future__ import annotations

import base64
import binascii
from typing import Iterable, Tuple, Union

BytesLike = Union[bytes, bytearray, memoryview]

# BCS lengths and variant indexes are u32
_ULEB128_MAX = 0xFFFFFFFF


def ensure_bytes(data: Union[BytesLike, str, Iterable[int]]) -> bytes:
    """
    Coerce `data` to bytes.

    Strings are parsed as hex (``0x`` optional). Iterables of ints are taken as
    raw byte values, which is how the fullnode renders ``vector<u8>`` in JSON.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return from_hex(data)
    try:
        return bytes(list(data))
    except (TypeError, ValueError) as e:
        raise ValueError(f"cannot convert {type(data)!r} to bytes: {e}") from e


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    body = bytes(b).hex()
    return "0x" + body if prefix else body


def from_hex(s: str) -> bytes:
    if not isinstance(s, str):
        raise TypeError(f"expected a hex string, got {type(s).__name__}")
    body = s[2:] if s[:2] in ("0x", "0X") else s
    if len(body) % 2:
        raise ValueError(f"odd number of hex digits in {s!r}")
    try:
        return bytes.fromhex(body)
    except ValueError as e:
        raise ValueError(f"invalid hex string {s!r}: {e}") from e


def to_b64(b: BytesLike) -> str:
    return base64.b64encode(bytes(b)).decode("ascii")


def from_b64(s: str) -> bytes:
    """Decode standard-alphabet base64, rejecting stray characters."""
    try:
        return base64.b64decode(s.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 string: {e}") from e


def uleb128_encode(n: int) -> bytes:
    """
    ULEB128-encode `n`: seven bits per byte, low group first, high bit set on
    every byte but the last. ``128`` encodes as ``80 01``.
    """
    if not 0 <= n <= _ULEB128_MAX:
        raise ValueError(f"uleb128 value out of range: {n}")
    out = bytearray()
    while n >= 0x80:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.append(n)
    return bytes(out)


def uleb128_decode(b: BytesLike, *, offset: int = 0) -> Tuple[int, int]:
    """
    Read a ULEB128 value at `offset`; returns ``(value, bytes_read)``.

    Truncated input, values above u32 and non-minimal encodings (a trailing
    ``00`` group) raise ValueError.
    """
    value = 0
    for i, byte in enumerate(memoryview(b)[offset:]):
        if i == 5:
            break
        value |= (byte & 0x7F) << (7 * i)
        if byte < 0x80:
            if i and byte == 0:
                raise ValueError("non-canonical uleb128 (trailing zero byte)")
            if value > _ULEB128_MAX:
                break
            return value, i + 1
    else:
        raise ValueError("truncated uleb128 (input ended before termination byte)")
    raise ValueError("uleb128 value exceeds u32")


__all__ = [
    "BytesLike",
    "ensure_bytes",
    "to_hex",
    "from_hex",
    "to_b64",
    "from_b64",
    "uleb128_encode",
    "uleb128_decode",
]
