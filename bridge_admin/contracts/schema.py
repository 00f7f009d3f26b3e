"""
bridge_admin.contracts.schema
=============================

Declarative Move function tables and a binding that turns them into calls.

A `ModuleSchema` lists the entry points of one on-chain module with their
ordered parameters and type parameters. `ModuleBinding` pairs a schema with
a package id and:

- `call(tx, fn, args, type_arguments)` encodes each argument by its declared
  kind (shared/owned object, pure BCS value of a Move type, or a result of an
  earlier command) and appends the Move call to the builder;
- `view(ledger, fn, ...)` runs the same call through dev-inspect and decodes
  the first return value.

Argument counts and type-argument counts are checked before anything is
encoded; a mismatch raises ConfigurationError naming the function.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..errors import ConfigurationError
from ..rpc.ledger import LedgerClient
from ..tx.build import TransactionBuilder
from ..tx.encode import Argument
from ..tx.send import DEV_INSPECT_SENDER, dev_inspect
from ..types.move import TypeLike

log = logging.getLogger(__name__)

__all__ = [
    "ParamKind",
    "Param",
    "FunctionSpec",
    "ModuleSchema",
    "ModuleBinding",
    "mut",
    "ref",
    "pure",
    "arg",
    "fn",
]


class ParamKind(Enum):
    OBJECT_MUT = "&mut"
    OBJECT_REF = "&"
    PURE = "pure"
    ARGUMENT = "arg"  # owned value or result of a previous command


@dataclass(frozen=True)
class Param:
    name: str
    kind: ParamKind
    type: Optional[str] = None

    def __str__(self) -> str:
        if self.kind == ParamKind.PURE:
            return f"{self.name}: {self.type}"
        if self.kind == ParamKind.ARGUMENT:
            return f"{self.name}: {self.type or 'T'}"
        if self.kind == ParamKind.OBJECT_MUT:
            return f"{self.name}: &mut {self.type or 'object'}"
        return f"{self.name}: &{self.type or 'object'}"


def mut(name: str, type_: Optional[str] = None) -> Param:
    return Param(name, ParamKind.OBJECT_MUT, type_)


def ref(name: str, type_: Optional[str] = None) -> Param:
    return Param(name, ParamKind.OBJECT_REF, type_)


def pure(name: str, type_: str) -> Param:
    return Param(name, ParamKind.PURE, type_)


def arg(name: str, type_: Optional[str] = None) -> Param:
    return Param(name, ParamKind.ARGUMENT, type_)


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    params: Tuple[Param, ...] = ()
    type_params: Tuple[str, ...] = ()
    returns: Tuple[str, ...] = ()

    def signature(self) -> str:
        tps = f"<{', '.join(self.type_params)}>" if self.type_params else ""
        ret = f": {', '.join(self.returns)}" if self.returns else ""
        return f"{self.name}{tps}({', '.join(str(p) for p in self.params)}){ret}"


def fn(
    name: str,
    *params: Param,
    type_params: Sequence[str] = (),
    returns: Sequence[str] = (),
) -> FunctionSpec:
    return FunctionSpec(name, tuple(params), tuple(type_params), tuple(returns))


@dataclass(frozen=True)
class ModuleSchema:
    name: str
    functions: Mapping[str, FunctionSpec] = field(default_factory=dict)

    @classmethod
    def of(cls, name: str, *functions: FunctionSpec) -> "ModuleSchema":
        return cls(name, {f.name: f for f in functions})

    def function(self, name: str) -> FunctionSpec:
        try:
            return self.functions[name]
        except KeyError:
            raise ConfigurationError(f"{self.name}::{name} is not a known function") from None


ArgValue = Any  # Argument | object id | python value for a pure param


class ModuleBinding:
    """A module schema bound to a deployed package id."""

    def __init__(self, package_id: str, schema: ModuleSchema) -> None:
        self.package_id = package_id
        self.schema = schema

    def target(self, function: str) -> str:
        return f"{self.package_id}::{self.schema.name}::{function}"

    def _encode(self, tx: TransactionBuilder, spec: FunctionSpec, param: Param, value: ArgValue) -> Argument:
        if isinstance(value, Argument):
            return value
        if param.kind == ParamKind.OBJECT_MUT:
            return tx.object(str(value), mutable=True)
        if param.kind == ParamKind.OBJECT_REF:
            return tx.object(str(value), mutable=False)
        if param.kind == ParamKind.PURE:
            return tx.pure(param.type, value)  # type: ignore[arg-type]
        if isinstance(value, str):
            return tx.object(value, mutable=True)
        raise ConfigurationError(
            f"{self.schema.name}::{spec.name}: parameter {param.name} needs an object id or a command result"
        )

    def call(
        self,
        tx: TransactionBuilder,
        function: str,
        args: Sequence[ArgValue] = (),
        type_arguments: Sequence[TypeLike] = (),
    ) -> Argument:
        spec = self.schema.function(function)
        if len(args) != len(spec.params):
            raise ConfigurationError(
                f"{self.schema.name}::{spec.signature()} takes {len(spec.params)} argument(s), got {len(args)}"
            )
        if len(type_arguments) != len(spec.type_params):
            raise ConfigurationError(
                f"{self.schema.name}::{spec.name} takes {len(spec.type_params)} type argument(s), "
                f"got {len(type_arguments)}"
            )
        encoded = [self._encode(tx, spec, p, v) for p, v in zip(spec.params, args)]
        log.debug("contracts: %s", self.target(function))
        return tx.move_call(self.target(function), encoded, type_arguments=type_arguments)

    def view(
        self,
        ledger: LedgerClient,
        function: str,
        args: Sequence[ArgValue] = (),
        type_arguments: Sequence[TypeLike] = (),
        *,
        sender: str = DEV_INSPECT_SENDER,
    ) -> Any:
        """Dev-inspect a single call and decode its first return value."""
        tx = TransactionBuilder()
        self.call(tx, function, args, type_arguments)
        result = dev_inspect(ledger, tx, sender=sender).raise_for_status()
        return result.value()

    def describe(self) -> Dict[str, str]:
        return {name: spec.signature() for name, spec in sorted(self.schema.functions.items())}
