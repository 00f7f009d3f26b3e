"""
bridge_admin.tx.encode
======================

BCS layouts of the transaction the operators sign.

This module provides:
- the programmable-transaction data model (inputs, commands, arguments)
- `TransactionData.to_bytes()` -> canonical bytes participants sign
- `TransactionData.from_bytes(raw)` -> parsed transaction (used by `tx inspect`)
- `ProgrammableTransaction.kind_bytes()` -> TransactionKind bytes for dev-inspect
- `transaction_digest(tx_bytes)` -> base58 digest the fullnode reports

Layout
------
    TransactionData::V1 {
        kind:       TransactionKind::ProgrammableTransaction { inputs, commands },
        sender:     address,
        gas_data:   { payment: vector<ObjectRef>, owner: address, price: u64, budget: u64 },
        expiration: None | Epoch(u64),
    }

Only the programmable-transaction kind is modelled: every admin action is a
sequence of Move calls, and system transaction kinds never need to be built
or inspected by operators.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..bcs import Deserializer, Serializer
from ..errors import BcsError
from ..types.move import (
    TypeTag,
    address_from_bytes,
    address_to_bytes,
    normalize_address,
    read_type_tag,
    write_type_tag,
)
from ..utils.base58 import b58encode, decode_digest
from ..utils.bytes import to_b64, to_hex
from ..utils.hashing import blake2b_256

__all__ = [
    "ArgumentKind",
    "Argument",
    "GAS_COIN",
    "ObjectRef",
    "PureArg",
    "OwnedObjectArg",
    "SharedObjectArg",
    "ReceivingObjectArg",
    "CallArg",
    "MoveCall",
    "TransferObjects",
    "SplitCoins",
    "MergeCoins",
    "Publish",
    "MakeMoveVec",
    "Upgrade",
    "Command",
    "ProgrammableTransaction",
    "GasData",
    "TransactionData",
    "transaction_digest",
]


# -----------------------------------------------------------------------------
# Arguments
# -----------------------------------------------------------------------------

class ArgumentKind(IntEnum):
    GAS_COIN = 0
    INPUT = 1
    RESULT = 2
    NESTED_RESULT = 3


@dataclass(frozen=True)
class Argument:
    """Reference to the gas coin, an input, or the result of an earlier command."""

    kind: ArgumentKind
    index: int = 0
    result_index: int = 0

    def nested(self, i: int) -> "Argument":
        """The i-th value of a multi-value command result."""
        if self.kind != ArgumentKind.RESULT:
            raise BcsError("only a command Result can be indexed")
        return Argument(ArgumentKind.NESTED_RESULT, self.index, i)

    def write(self, ser: Serializer) -> None:
        ser.variant(self.kind)
        if self.kind in (ArgumentKind.INPUT, ArgumentKind.RESULT):
            ser.u16(self.index)
        elif self.kind == ArgumentKind.NESTED_RESULT:
            ser.u16(self.index).u16(self.result_index)

    @classmethod
    def read(cls, de: Deserializer) -> "Argument":
        tag = de.variant()
        if tag == ArgumentKind.GAS_COIN:
            return GAS_COIN
        if tag in (ArgumentKind.INPUT, ArgumentKind.RESULT):
            return cls(ArgumentKind(tag), de.u16())
        if tag == ArgumentKind.NESTED_RESULT:
            return cls(ArgumentKind.NESTED_RESULT, de.u16(), de.u16())
        raise BcsError(f"unknown Argument variant {tag}")

    def to_dict(self) -> Any:
        if self.kind == ArgumentKind.GAS_COIN:
            return "GasCoin"
        if self.kind == ArgumentKind.INPUT:
            return {"Input": self.index}
        if self.kind == ArgumentKind.RESULT:
            return {"Result": self.index}
        return {"NestedResult": [self.index, self.result_index]}


GAS_COIN = Argument(ArgumentKind.GAS_COIN)


def _write_args(ser: Serializer, args: Tuple[Argument, ...]) -> None:
    ser.sequence(args, lambda s, a: a.write(s))


def _read_args(de: Deserializer) -> Tuple[Argument, ...]:
    return tuple(de.sequence(Argument.read))


# -----------------------------------------------------------------------------
# Inputs
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ObjectRef:
    object_id: str
    version: int
    digest: str  # base58

    def write(self, ser: Serializer) -> None:
        ser.address(address_to_bytes(self.object_id))
        ser.u64(self.version)
        try:
            ser.bytes(decode_digest(self.digest))
        except ValueError as e:
            raise BcsError(f"object {self.object_id}: {e}") from e

    @classmethod
    def read(cls, de: Deserializer) -> "ObjectRef":
        oid = address_from_bytes(de.address())
        version = de.u64()
        digest = de.bytes()
        return cls(oid, version, b58encode(digest))

    def to_dict(self) -> Dict[str, Any]:
        return {"objectId": self.object_id, "version": self.version, "digest": self.digest}


@dataclass(frozen=True)
class PureArg:
    data: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {"Pure": to_b64(self.data), "hex": to_hex(self.data)}


@dataclass(frozen=True)
class OwnedObjectArg:
    ref: ObjectRef

    def to_dict(self) -> Dict[str, Any]:
        return {"ImmOrOwnedObject": self.ref.to_dict()}


@dataclass(frozen=True)
class SharedObjectArg:
    object_id: str
    initial_shared_version: int
    mutable: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "SharedObject": {
                "objectId": self.object_id,
                "initialSharedVersion": self.initial_shared_version,
                "mutable": self.mutable,
            }
        }


@dataclass(frozen=True)
class ReceivingObjectArg:
    ref: ObjectRef

    def to_dict(self) -> Dict[str, Any]:
        return {"Receiving": self.ref.to_dict()}


CallArg = Union[PureArg, OwnedObjectArg, SharedObjectArg, ReceivingObjectArg]


def _write_call_arg(ser: Serializer, arg: CallArg) -> None:
    if isinstance(arg, PureArg):
        ser.variant(0).bytes(arg.data)
        return
    ser.variant(1)
    if isinstance(arg, OwnedObjectArg):
        ser.variant(0)
        arg.ref.write(ser)
    elif isinstance(arg, SharedObjectArg):
        ser.variant(1)
        ser.address(address_to_bytes(arg.object_id))
        ser.u64(arg.initial_shared_version)
        ser.bool(arg.mutable)
    elif isinstance(arg, ReceivingObjectArg):
        ser.variant(2)
        arg.ref.write(ser)
    else:
        raise BcsError(f"unresolved or unknown input {arg!r}")


def _read_call_arg(de: Deserializer) -> CallArg:
    tag = de.variant()
    if tag == 0:
        return PureArg(de.bytes())
    if tag != 1:
        raise BcsError(f"unknown CallArg variant {tag}")
    obj_tag = de.variant()
    if obj_tag == 0:
        return OwnedObjectArg(ObjectRef.read(de))
    if obj_tag == 1:
        oid = address_from_bytes(de.address())
        return SharedObjectArg(oid, de.u64(), de.bool())
    if obj_tag == 2:
        return ReceivingObjectArg(ObjectRef.read(de))
    raise BcsError(f"unknown ObjectArg variant {obj_tag}")


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MoveCall:
    package: str
    module: str
    function: str
    type_arguments: Tuple[TypeTag, ...] = ()
    arguments: Tuple[Argument, ...] = ()

    variant = 0

    @property
    def target(self) -> str:
        return f"{self.package}::{self.module}::{self.function}"

    def write(self, ser: Serializer) -> None:
        ser.address(address_to_bytes(self.package))
        ser.str(self.module)
        ser.str(self.function)
        ser.sequence(self.type_arguments, write_type_tag)
        _write_args(ser, self.arguments)

    @classmethod
    def read(cls, de: Deserializer) -> "MoveCall":
        package = address_from_bytes(de.address())
        module = de.str()
        function = de.str()
        type_args = tuple(de.sequence(read_type_tag))
        return cls(package, module, function, type_args, _read_args(de))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "MoveCall": {
                "target": self.target,
                "typeArguments": [str(t) for t in self.type_arguments],
                "arguments": [a.to_dict() for a in self.arguments],
            }
        }


@dataclass(frozen=True)
class TransferObjects:
    objects: Tuple[Argument, ...]
    address: Argument

    variant = 1

    def write(self, ser: Serializer) -> None:
        _write_args(ser, self.objects)
        self.address.write(ser)

    @classmethod
    def read(cls, de: Deserializer) -> "TransferObjects":
        objects = _read_args(de)
        return cls(objects, Argument.read(de))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "TransferObjects": {
                "objects": [a.to_dict() for a in self.objects],
                "address": self.address.to_dict(),
            }
        }


@dataclass(frozen=True)
class SplitCoins:
    coin: Argument
    amounts: Tuple[Argument, ...]

    variant = 2

    def write(self, ser: Serializer) -> None:
        self.coin.write(ser)
        _write_args(ser, self.amounts)

    @classmethod
    def read(cls, de: Deserializer) -> "SplitCoins":
        coin = Argument.read(de)
        return cls(coin, _read_args(de))

    def to_dict(self) -> Dict[str, Any]:
        return {"SplitCoins": {"coin": self.coin.to_dict(), "amounts": [a.to_dict() for a in self.amounts]}}


@dataclass(frozen=True)
class MergeCoins:
    destination: Argument
    sources: Tuple[Argument, ...]

    variant = 3

    def write(self, ser: Serializer) -> None:
        self.destination.write(ser)
        _write_args(ser, self.sources)

    @classmethod
    def read(cls, de: Deserializer) -> "MergeCoins":
        dest = Argument.read(de)
        return cls(dest, _read_args(de))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "MergeCoins": {
                "destination": self.destination.to_dict(),
                "sources": [a.to_dict() for a in self.sources],
            }
        }


@dataclass(frozen=True)
class Publish:
    modules: Tuple[bytes, ...]
    dependencies: Tuple[str, ...]

    variant = 4

    def write(self, ser: Serializer) -> None:
        ser.sequence(self.modules, lambda s, m: s.bytes(m))
        ser.sequence(self.dependencies, lambda s, d: s.address(address_to_bytes(d)))

    @classmethod
    def read(cls, de: Deserializer) -> "Publish":
        modules = tuple(de.sequence(lambda d: d.bytes()))
        deps = tuple(de.sequence(lambda d: address_from_bytes(d.address())))
        return cls(modules, deps)

    def to_dict(self) -> Dict[str, Any]:
        return {"Publish": {"modules": len(self.modules), "dependencies": list(self.dependencies)}}


@dataclass(frozen=True)
class MakeMoveVec:
    type_tag: Optional[TypeTag]
    elements: Tuple[Argument, ...]

    variant = 5

    def write(self, ser: Serializer) -> None:
        ser.option(self.type_tag, write_type_tag)
        _write_args(ser, self.elements)

    @classmethod
    def read(cls, de: Deserializer) -> "MakeMoveVec":
        tag = de.option(read_type_tag)
        return cls(tag, _read_args(de))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "MakeMoveVec": {
                "type": str(self.type_tag) if self.type_tag else None,
                "elements": [a.to_dict() for a in self.elements],
            }
        }


@dataclass(frozen=True)
class Upgrade:
    modules: Tuple[bytes, ...]
    dependencies: Tuple[str, ...]
    package: str
    ticket: Argument

    variant = 6

    def write(self, ser: Serializer) -> None:
        ser.sequence(self.modules, lambda s, m: s.bytes(m))
        ser.sequence(self.dependencies, lambda s, d: s.address(address_to_bytes(d)))
        ser.address(address_to_bytes(self.package))
        self.ticket.write(ser)

    @classmethod
    def read(cls, de: Deserializer) -> "Upgrade":
        modules = tuple(de.sequence(lambda d: d.bytes()))
        deps = tuple(de.sequence(lambda d: address_from_bytes(d.address())))
        package = address_from_bytes(de.address())
        return cls(modules, deps, package, Argument.read(de))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Upgrade": {
                "modules": len(self.modules),
                "dependencies": list(self.dependencies),
                "package": self.package,
                "ticket": self.ticket.to_dict(),
            }
        }


Command = Union[MoveCall, TransferObjects, SplitCoins, MergeCoins, Publish, MakeMoveVec, Upgrade]

_COMMAND_READERS: Dict[int, Callable[[Deserializer], Command]] = {
    cls.variant: cls.read  # type: ignore[attr-defined]
    for cls in (MoveCall, TransferObjects, SplitCoins, MergeCoins, Publish, MakeMoveVec, Upgrade)
}


def _write_command(ser: Serializer, cmd: Command) -> None:
    ser.variant(cmd.variant)
    cmd.write(ser)


def _read_command(de: Deserializer) -> Command:
    tag = de.variant()
    reader = _COMMAND_READERS.get(tag)
    if reader is None:
        raise BcsError(f"unknown Command variant {tag}")
    return reader(de)


# -----------------------------------------------------------------------------
# Transaction
# -----------------------------------------------------------------------------

_PROGRAMMABLE_TRANSACTION = 0
_TRANSACTION_DATA_V1 = 0


@dataclass(frozen=True)
class ProgrammableTransaction:
    inputs: Tuple[CallArg, ...]
    commands: Tuple[Command, ...]

    def write(self, ser: Serializer) -> None:
        ser.sequence(self.inputs, _write_call_arg)
        ser.sequence(self.commands, _write_command)

    @classmethod
    def read(cls, de: Deserializer) -> "ProgrammableTransaction":
        inputs = tuple(de.sequence(_read_call_arg))
        return cls(inputs, tuple(de.sequence(_read_command)))

    def write_kind(self, ser: Serializer) -> None:
        ser.variant(_PROGRAMMABLE_TRANSACTION)
        self.write(ser)

    def kind_bytes(self) -> bytes:
        """TransactionKind bytes (what dev-inspect takes)."""
        ser = Serializer()
        self.write_kind(ser)
        return ser.output()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": [i.to_dict() for i in self.inputs],
            "commands": [c.to_dict() for c in self.commands],
        }


@dataclass(frozen=True)
class GasData:
    payment: Tuple[ObjectRef, ...]
    owner: str
    price: int
    budget: int

    def write(self, ser: Serializer) -> None:
        ser.sequence(self.payment, lambda s, r: r.write(s))
        ser.address(address_to_bytes(self.owner))
        ser.u64(self.price)
        ser.u64(self.budget)

    @classmethod
    def read(cls, de: Deserializer) -> "GasData":
        payment = tuple(de.sequence(ObjectRef.read))
        owner = address_from_bytes(de.address())
        return cls(payment, owner, de.u64(), de.u64())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payment": [r.to_dict() for r in self.payment],
            "owner": self.owner,
            "price": self.price,
            "budget": self.budget,
        }


@dataclass(frozen=True)
class TransactionData:
    kind: ProgrammableTransaction
    sender: str
    gas_data: GasData
    expiration: Optional[int] = None  # epoch, or None for no expiration

    def to_bytes(self) -> bytes:
        ser = Serializer().variant(_TRANSACTION_DATA_V1)
        self.kind.write_kind(ser)
        ser.address(address_to_bytes(self.sender))
        self.gas_data.write(ser)
        if self.expiration is None:
            ser.variant(0)
        else:
            ser.variant(1).u64(self.expiration)
        return ser.output()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "TransactionData":
        de = Deserializer(raw)
        version = de.variant()
        if version != _TRANSACTION_DATA_V1:
            raise BcsError(f"unsupported TransactionData version {version}")
        kind = de.variant()
        if kind != _PROGRAMMABLE_TRANSACTION:
            raise BcsError(f"unsupported transaction kind {kind} (only programmable transactions)")
        ptb = ProgrammableTransaction.read(de)
        sender = address_from_bytes(de.address())
        gas = GasData.read(de)
        exp_tag = de.variant()
        if exp_tag == 0:
            expiration = None
        elif exp_tag == 1:
            expiration = de.u64()
        else:
            raise BcsError(f"unknown TransactionExpiration variant {exp_tag}")
        de.assert_finished()
        return cls(ptb, sender, gas, expiration)

    def digest(self) -> str:
        return transaction_digest(self.to_bytes())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sender": normalize_address(self.sender),
            "gas": self.gas_data.to_dict(),
            "inputs": [i.to_dict() for i in self.kind.inputs],
            "commands": [c.to_dict() for c in self.kind.commands],
            "expiration": None if self.expiration is None else {"Epoch": self.expiration},
        }


def transaction_digest(tx_bytes: bytes) -> str:
    """base58(blake2b-256("TransactionData::" || tx_bytes)), the digest the fullnode reports."""
    return b58encode(blake2b_256(b"TransactionData::" + bytes(tx_bytes)))
