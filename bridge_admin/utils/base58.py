"""
Base58 (Bitcoin alphabet) codec.

The fullnode renders transaction and object digests as base58 strings of a
32-byte hash; BCS carries them as raw bytes, so both directions are needed.
"""

from __future__ import annotations

from .bytes import BytesLike

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {c: i for i, c in enumerate(_ALPHABET)}


def b58encode(data: BytesLike) -> str:
    raw = bytes(data)
    n = int.from_bytes(raw, "big")
    out = ""
    while n > 0:
        n, r = divmod(n, 58)
        out = _ALPHABET[r] + out
    for byte in raw:
        if byte != 0:
            break
        out = _ALPHABET[0] + out
    return out


def b58decode(s: str) -> bytes:
    if not isinstance(s, str):
        raise TypeError("b58decode expects a string")
    n = 0
    for ch in s:
        try:
            n = n * 58 + _INDEX[ch]
        except KeyError:
            raise ValueError(f"invalid base58 character {ch!r}") from None
    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""
    pad = len(s) - len(s.lstrip(_ALPHABET[0]))
    return b"\x00" * pad + body


def decode_digest(s: str) -> bytes:
    """Decode a base58 digest and check it is 32 bytes long."""
    raw = b58decode(s)
    if len(raw) != 32:
        raise ValueError(f"digest must decode to 32 bytes, got {len(raw)}")
    return raw


__all__ = ["b58encode", "b58decode", "decode_digest"]
