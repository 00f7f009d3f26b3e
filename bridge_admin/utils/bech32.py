"""
Bech32 / Bech32m codec (BIP-0173 / BIP-0350).

Used for the `suiprivkey1...` export format of secret keys: classic Bech32
(constant 1) over `flag || secret_key` with HRP "suiprivkey". Bech32m is kept
for symmetry since the checksum code is shared.

Helpers
-------
- encode(hrp, data5, spec="bech32") -> string (data must be 5-bit ints 0..31)
- decode(s) -> (hrp, data5, spec)
- encode_bytes(hrp, payload, spec="bech32") -> string (8->5 convertbits)
- decode_bytes(s, expected_hrp=None) -> (hrp, payload, spec)
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

__all__ = [
    "encode",
    "decode",
    "encode_bytes",
    "decode_bytes",
    "convertbits",
    "Bech32Error",
    "SUI_PRIVATE_KEY_HRP",
]

SUI_PRIVATE_KEY_HRP = "suiprivkey"

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_REV = {c: i for i, c in enumerate(CHARSET)}

_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3
_GENERATORS = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)

# BIP-173 caps strings at 90 chars; secret key exports are longer, so we only
# bound it loosely.
_MAX_LEN = 1023


class Bech32Error(ValueError):
    pass


def _polymod(values: Sequence[int]) -> int:
    chk = 1
    for v in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i, gen in enumerate(_GENERATORS):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _hrp_expand(hrp: str) -> List[int]:
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _const_for(spec: str) -> int:
    if spec == "bech32":
        return _BECH32_CONST
    if spec == "bech32m":
        return _BECH32M_CONST
    raise Bech32Error(f"unknown bech32 variant {spec!r}")


def encode(hrp: str, data5: Iterable[int], *, spec: str = "bech32") -> str:
    """Encode 5-bit groups under `hrp` with a bech32 or bech32m checksum."""
    if not hrp or any(not ("a" <= c <= "z" or "0" <= c <= "9") for c in hrp):
        raise Bech32Error("invalid HRP (must be lowercase alphanumeric)")
    data = list(data5)
    if any(v < 0 or v > 31 for v in data):
        raise Bech32Error("data5 values must be in 0..31")
    pm = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ _const_for(spec)
    checksum = [(pm >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(CHARSET[d] for d in data + checksum)


def decode(s: str) -> Tuple[str, List[int], str]:
    """Decode a bech32/bech32m string. Returns (hrp, data5, spec)."""
    if len(s) > _MAX_LEN:
        raise Bech32Error("string too long")
    if any(ord(x) < 33 or ord(x) > 126 for x in s):
        raise Bech32Error("invalid characters")
    if s.lower() != s and s.upper() != s:
        raise Bech32Error("mixed case not allowed")
    s = s.lower()
    pos = s.rfind("1")
    if pos < 1 or pos + 7 > len(s):
        raise Bech32Error("invalid separator position")
    hrp, tail = s[:pos], s[pos + 1 :]
    try:
        data = [CHARSET_REV[c] for c in tail]
    except KeyError as e:
        raise Bech32Error(f"invalid data character {e.args[0]!r}") from None
    check = _polymod(_hrp_expand(hrp) + data)
    if check == _BECH32_CONST:
        spec = "bech32"
    elif check == _BECH32M_CONST:
        spec = "bech32m"
    else:
        raise Bech32Error("invalid checksum")
    return hrp, data[:-6], spec


def convertbits(data: Iterable[int], frombits: int, tobits: int, pad: bool = True) -> List[int]:
    """General power-of-2 base conversion (8->5 and 5->8)."""
    acc = 0
    bits = 0
    out: List[int] = []
    maxv = (1 << tobits) - 1
    for value in data:
        if value < 0 or value >> frombits:
            raise Bech32Error("value out of range for convertbits")
        acc = (acc << frombits) | value
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            out.append((acc >> bits) & maxv)
    if pad:
        if bits:
            out.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        raise Bech32Error("invalid padding in convertbits")
    return out


def encode_bytes(hrp: str, payload: bytes, *, spec: str = "bech32") -> str:
    return encode(hrp, convertbits(payload, 8, 5, True), spec=spec)


def decode_bytes(s: str, expected_hrp: Optional[str] = None) -> Tuple[str, bytes, str]:
    hrp, data5, spec = decode(s)
    if expected_hrp is not None and hrp != expected_hrp:
        raise Bech32Error(f"unexpected HRP {hrp!r}, want {expected_hrp!r}")
    return hrp, bytes(convertbits(data5, 5, 8, False)), spec
