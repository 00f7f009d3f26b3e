"""
Move type tags, addresses and pure-value codec.

This module defines:
- address normalization (`0x6` -> 0x000...006, 32 bytes)
- TypeTag / StructTag with a parser for Move type strings
  (`u64`, `vector<vector<u8>>`, `0x2::coin::Coin<0xabc::lbtc::LBTC>`)
- BCS codec for TypeTag (used in MoveCall type arguments)
- encode_pure / decode_value: Python value <-> BCS for a given Move type,
  used for pure call arguments and dev-inspect return values
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional, Tuple, Union

from ..bcs import Deserializer, Serializer
from ..errors import BcsError
from ..utils.bytes import ensure_bytes

ADDRESS_LENGTH = 32

_HEX_ADDR_RE = re.compile(r"^(0x)?[0-9a-fA-F]{1,64}$")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# --- Addresses ---------------------------------------------------------------


def normalize_address(addr: str) -> str:
    """Return the canonical 0x-prefixed, 64-hex-digit lowercase form of an address."""
    if not isinstance(addr, str):
        raise ValueError(f"address must be a string, got {type(addr).__name__}")
    s = addr.strip()
    if not _HEX_ADDR_RE.match(s):
        raise ValueError(f"invalid address {addr!r}")
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    return "0x" + s.lower().rjust(ADDRESS_LENGTH * 2, "0")


def is_valid_address(addr: str) -> bool:
    try:
        normalize_address(addr)
        return True
    except ValueError:
        return False


def address_to_bytes(addr: Union[str, bytes]) -> bytes:
    if isinstance(addr, (bytes, bytearray)):
        if len(addr) != ADDRESS_LENGTH:
            raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(addr)}")
        return bytes(addr)
    return bytes.fromhex(normalize_address(addr)[2:])


def address_from_bytes(raw: bytes) -> str:
    if len(raw) != ADDRESS_LENGTH:
        raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(raw)}")
    return "0x" + raw.hex()


# --- Type tags ---------------------------------------------------------------


class TypeTagKind(IntEnum):
    # BCS variant indexes of the ledger's TypeTag enum
    BOOL = 0
    U8 = 1
    U64 = 2
    U128 = 3
    ADDRESS = 4
    SIGNER = 5
    VECTOR = 6
    STRUCT = 7
    U16 = 8
    U32 = 9
    U256 = 10


_PRIMITIVES = {
    "bool": TypeTagKind.BOOL,
    "u8": TypeTagKind.U8,
    "u16": TypeTagKind.U16,
    "u32": TypeTagKind.U32,
    "u64": TypeTagKind.U64,
    "u128": TypeTagKind.U128,
    "u256": TypeTagKind.U256,
    "address": TypeTagKind.ADDRESS,
    "signer": TypeTagKind.SIGNER,
}
_PRIMITIVE_NAMES = {v: k for k, v in _PRIMITIVES.items()}

_INT_BITS = {
    TypeTagKind.U8: 8,
    TypeTagKind.U16: 16,
    TypeTagKind.U32: 32,
    TypeTagKind.U64: 64,
    TypeTagKind.U128: 128,
    TypeTagKind.U256: 256,
}


@dataclass(frozen=True)
class StructTag:
    address: str
    module: str
    name: str
    type_params: Tuple["TypeTag", ...] = ()

    def __str__(self) -> str:
        base = f"{self.address}::{self.module}::{self.name}"
        if self.type_params:
            base += "<" + ", ".join(str(t) for t in self.type_params) + ">"
        return base

    def is_(self, address: str, module: str, name: str) -> bool:
        return (
            self.address == normalize_address(address)
            and self.module == module
            and self.name == name
        )


@dataclass(frozen=True)
class TypeTag:
    kind: TypeTagKind
    element: Optional["TypeTag"] = None
    struct: Optional[StructTag] = None

    def __str__(self) -> str:
        if self.kind == TypeTagKind.VECTOR:
            return f"vector<{self.element}>"
        if self.kind == TypeTagKind.STRUCT:
            return str(self.struct)
        return _PRIMITIVE_NAMES[self.kind]

    @classmethod
    def vector(cls, element: "TypeTag") -> "TypeTag":
        return cls(TypeTagKind.VECTOR, element=element)


TypeLike = Union[str, TypeTag]


def _split_top_level_commas(s: str) -> List[str]:
    """Split on commas but ignore commas inside nested type parameter lists."""
    out: List[str] = []
    depth = 0
    buf: List[str] = []
    for ch in s:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth < 0:
                raise BcsError("unbalanced '>' in type string")
        if ch == "," and depth == 0:
            out.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
    if depth != 0:
        raise BcsError("unbalanced '<' in type string")
    if buf:
        out.append("".join(buf).strip())
    return out


def parse_type_tag(type_str: str) -> TypeTag:
    """Parse a Move type string into a TypeTag. Raises BcsError on malformed input."""
    s = re.sub(r"\s+", "", type_str or "")
    if not s:
        raise BcsError("empty type string")
    if s in _PRIMITIVES:
        return TypeTag(_PRIMITIVES[s])
    if s.startswith("vector<") and s.endswith(">"):
        return TypeTag.vector(parse_type_tag(s[len("vector<") : -1]))
    return TypeTag(TypeTagKind.STRUCT, struct=parse_struct_tag(s))


def parse_struct_tag(type_str: str) -> StructTag:
    s = re.sub(r"\s+", "", type_str)
    params: Tuple[TypeTag, ...] = ()
    lt = s.find("<")
    if lt != -1:
        if not s.endswith(">"):
            raise BcsError(f"malformed struct type {type_str!r}")
        params = tuple(parse_type_tag(p) for p in _split_top_level_commas(s[lt + 1 : -1]))
        s = s[:lt]
    parts = s.split("::")
    if len(parts) != 3:
        raise BcsError(f"struct type must be address::module::name, got {type_str!r}")
    addr, module, name = parts
    if not (_IDENT_RE.match(module) and _IDENT_RE.match(name)):
        raise BcsError(f"invalid identifier in struct type {type_str!r}")
    try:
        addr = normalize_address(addr)
    except ValueError as e:
        raise BcsError(str(e)) from e
    return StructTag(addr, module, name, params)


def as_type_tag(t: TypeLike) -> TypeTag:
    return t if isinstance(t, TypeTag) else parse_type_tag(t)


# --- TypeTag BCS -------------------------------------------------------------


def write_struct_tag(ser: Serializer, tag: StructTag) -> None:
    ser.address(address_to_bytes(tag.address))
    ser.str(tag.module)
    ser.str(tag.name)
    ser.sequence(tag.type_params, write_type_tag)


def write_type_tag(ser: Serializer, tag: TypeTag) -> None:
    ser.variant(int(tag.kind))
    if tag.kind == TypeTagKind.VECTOR:
        write_type_tag(ser, tag.element)  # type: ignore[arg-type]
    elif tag.kind == TypeTagKind.STRUCT:
        write_struct_tag(ser, tag.struct)  # type: ignore[arg-type]


def read_struct_tag(de: Deserializer) -> StructTag:
    addr = address_from_bytes(de.address())
    module = de.str()
    name = de.str()
    params = tuple(de.sequence(read_type_tag))
    return StructTag(addr, module, name, params)


def read_type_tag(de: Deserializer) -> TypeTag:
    idx = de.variant()
    try:
        kind = TypeTagKind(idx)
    except ValueError:
        raise BcsError(f"unknown TypeTag variant {idx}") from None
    if kind == TypeTagKind.VECTOR:
        return TypeTag.vector(read_type_tag(de))
    if kind == TypeTagKind.STRUCT:
        return TypeTag(kind, struct=read_struct_tag(de))
    return TypeTag(kind)


# --- Pure values ---------------------------------------------------------------

_STRING_TYPES = (("0x1", "string", "String"), ("0x1", "ascii", "String"))
_OPTION = ("0x1", "option", "Option")
_OBJECT_ID = ("0x2", "object", "ID")


def _struct_is(tag: TypeTag, *candidates: Tuple[str, str, str]) -> bool:
    return tag.struct is not None and any(tag.struct.is_(*c) for c in candidates)


def _as_int(value: Any, tag: TypeTag) -> int:
    if isinstance(value, bool):
        raise BcsError(f"{tag} expects an integer, got bool")
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            raise BcsError(f"{tag} expects an integer, got {value!r}") from None
    return value


def write_value(ser: Serializer, tag: TypeTag, value: Any) -> None:
    kind = tag.kind
    if kind == TypeTagKind.BOOL:
        ser.bool(value)
    elif kind in _INT_BITS:
        ser.uint(_INT_BITS[kind], _as_int(value, tag))
    elif kind == TypeTagKind.ADDRESS:
        try:
            ser.address(address_to_bytes(value))
        except ValueError as e:
            raise BcsError(str(e)) from e
    elif kind == TypeTagKind.VECTOR:
        elem = tag.element
        if elem is not None and elem.kind == TypeTagKind.U8 and not isinstance(value, list):
            try:
                ser.bytes(ensure_bytes(value))
            except ValueError as e:
                raise BcsError(str(e)) from e
        else:
            ser.sequence(list(value), lambda s, v: write_value(s, elem, v))  # type: ignore[arg-type]
    elif kind == TypeTagKind.STRUCT and _struct_is(tag, *_STRING_TYPES):
        ser.str(value)
    elif kind == TypeTagKind.STRUCT and _struct_is(tag, _OBJECT_ID):
        write_value(ser, TypeTag(TypeTagKind.ADDRESS), value)
    elif kind == TypeTagKind.STRUCT and _struct_is(tag, _OPTION):
        inner = tag.struct.type_params[0]  # type: ignore[union-attr]
        ser.option(value, lambda s, v: write_value(s, inner, v))
    else:
        raise BcsError(f"type {tag} cannot be passed as a pure argument")


def read_value(de: Deserializer, tag: TypeTag) -> Any:
    kind = tag.kind
    if kind == TypeTagKind.BOOL:
        return de.bool()
    if kind in _INT_BITS:
        return de.uint(_INT_BITS[kind])
    if kind == TypeTagKind.ADDRESS:
        return address_from_bytes(de.address())
    if kind == TypeTagKind.VECTOR:
        elem = tag.element
        if elem is not None and elem.kind == TypeTagKind.U8:
            return de.bytes()
        return de.sequence(lambda d: read_value(d, elem))  # type: ignore[arg-type]
    if kind == TypeTagKind.STRUCT and _struct_is(tag, *_STRING_TYPES):
        return de.str()
    if kind == TypeTagKind.STRUCT and _struct_is(tag, _OBJECT_ID):
        return address_from_bytes(de.address())
    if kind == TypeTagKind.STRUCT and _struct_is(tag, _OPTION):
        inner = tag.struct.type_params[0]  # type: ignore[union-attr]
        return de.option(lambda d: read_value(d, inner))
    raise BcsError(f"no decoder for type {tag}")


def encode_pure(type_: TypeLike, value: Any) -> bytes:
    """Encode `value` as the BCS bytes of a pure argument of Move type `type_`."""
    ser = Serializer()
    write_value(ser, as_type_tag(type_), value)
    return ser.output()


def decode_value(type_: TypeLike, data: bytes) -> Any:
    """Decode BCS `data` holding exactly one value of Move type `type_`."""
    de = Deserializer(data)
    out = read_value(de, as_type_tag(type_))
    de.assert_finished()
    return out


__all__ = [
    "ADDRESS_LENGTH",
    "normalize_address",
    "is_valid_address",
    "address_to_bytes",
    "address_from_bytes",
    "TypeTagKind",
    "TypeTag",
    "StructTag",
    "TypeLike",
    "parse_type_tag",
    "parse_struct_tag",
    "as_type_tag",
    "write_type_tag",
    "read_type_tag",
    "write_struct_tag",
    "read_struct_tag",
    "write_value",
    "read_value",
    "encode_pure",
    "decode_value",
]
