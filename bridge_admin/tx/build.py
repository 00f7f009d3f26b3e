"""
bridge_admin.tx.build
=====================

`TransactionBuilder` assembles a programmable transaction one Move call at a
time and turns it into `TransactionData` bytes ready for signing.

Inputs are added as pure BCS values (`pure`) or object references
(`object`, `shared_object`, `owned_object`). `object(id)` defers the
ownership lookup: when the transaction is built against a ledger the object
is fetched with `sui_multiGetObjects` and becomes a shared or owned input
depending on what the fullnode reports.

Building
--------
    tx = TransactionBuilder()
    cap = tx.move_call(f"{pkg}::treasury::new_minter_cap", [tx.pure("u64", 10**12)])
    tx.move_call(
        f"{pkg}::treasury::add_capability",
        [tx.object(treasury_id), tx.pure("address", target), cap],
        type_arguments=[coin_type, f"{pkg}::treasury::MinterCap"],
    )
    tx.set_sender(multisig_address)
    tx_bytes = tx.build(ledger)

Anything not set explicitly is resolved from the ledger: gas price
(`suix_getReferenceGasPrice`), gas payment (`suix_getCoins` for the sender)
and gas budget (dry run). Building without a ledger requires everything to be
set already and raises ConfigurationError otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..errors import ConfigurationError
from ..rpc.ledger import SUI_COIN_TYPE, LedgerClient
from ..types.move import TypeLike, as_type_tag, encode_pure, normalize_address
from .encode import (
    Argument,
    ArgumentKind,
    CallArg,
    Command,
    GasData,
    MoveCall,
    ObjectRef,
    OwnedObjectArg,
    ProgrammableTransaction,
    PureArg,
    ReceivingObjectArg,
    SharedObjectArg,
    TransactionData,
)

log = logging.getLogger(__name__)

__all__ = ["TransactionBuilder", "MAX_GAS_COINS", "MAX_TX_GAS", "estimate_budget"]

MAX_GAS_COINS = 256
MAX_TX_GAS = 50_000_000_000  # protocol maximum, used as the dry-run budget
_GAS_SAFE_OVERHEAD = 1000  # multiplied by the gas price


@dataclass
class _PendingObject:
    object_id: str
    mutable: bool


_Input = Union[CallArg, _PendingObject]


def estimate_budget(effects: Dict[str, Any], gas_price: int) -> int:
    """
    Budget from dry-run effects: the computation cost plus a safety overhead,
    raised to cover net storage cost when that is larger.
    """
    used = effects.get("gasUsed") or {}
    computation = int(used.get("computationCost", 0))
    storage = int(used.get("storageCost", 0))
    rebate = int(used.get("storageRebate", 0))
    overhead = _GAS_SAFE_OVERHEAD * gas_price
    base = computation + overhead
    return max(base, base + storage - rebate)


def _object_input(obj: Dict[str, Any], mutable: bool) -> CallArg:
    data = obj.get("data")
    if not data:
        err = obj.get("error") or {}
        oid = err.get("object_id") or err.get("objectId") or "?"
        raise ConfigurationError(f"object {oid} not found on the ledger ({err.get('code', 'unknown')})")
    owner = data.get("owner")
    ref = ObjectRef(normalize_address(data["objectId"]), int(data["version"]), str(data["digest"]))
    if isinstance(owner, dict) and "Shared" in owner:
        version = owner["Shared"].get("initial_shared_version")
        return SharedObjectArg(ref.object_id, int(version), mutable)
    return OwnedObjectArg(ref)


class TransactionBuilder:
    """Mutable builder for a single programmable transaction."""

    def __init__(self, sender: Optional[str] = None) -> None:
        self._inputs: List[_Input] = []
        self._object_index: Dict[str, int] = {}
        self._commands: List[Command] = []
        self.sender: Optional[str] = normalize_address(sender) if sender else None
        self.gas_budget: Optional[int] = None
        self.gas_price: Optional[int] = None
        self.gas_payment: Optional[List[ObjectRef]] = None
        self.gas_owner: Optional[str] = None
        self.expiration: Optional[int] = None

    # --- inputs --------------------------------------------------------------

    def _add_input(self, arg: _Input) -> Argument:
        self._inputs.append(arg)
        return Argument(ArgumentKind.INPUT, len(self._inputs) - 1)

    def pure(self, type_: TypeLike, value: Any) -> Argument:
        """BCS-encode `value` as the Move type `type_` and add it as a pure input."""
        return self.pure_bytes(encode_pure(type_, value))

    def pure_bytes(self, data: bytes) -> Argument:
        return self._add_input(PureArg(bytes(data)))

    def object(self, object_id: str, *, mutable: bool = True) -> Argument:
        """
        Reference an object whose ownership is looked up at build time.
        The same object referenced twice shares one input; it stays mutable if
        any reference asked for that.
        """
        oid = normalize_address(object_id)
        idx = self._object_index.get(oid)
        if idx is not None:
            existing = self._inputs[idx]
            if mutable and isinstance(existing, _PendingObject):
                existing.mutable = True
            elif mutable and isinstance(existing, SharedObjectArg) and not existing.mutable:
                self._inputs[idx] = SharedObjectArg(existing.object_id, existing.initial_shared_version, True)
            return Argument(ArgumentKind.INPUT, idx)
        arg = self._add_input(_PendingObject(oid, mutable))
        self._object_index[oid] = arg.index
        return arg

    def shared_object(self, object_id: str, initial_shared_version: int, *, mutable: bool = True) -> Argument:
        oid = normalize_address(object_id)
        arg = self._add_input(SharedObjectArg(oid, int(initial_shared_version), mutable))
        self._object_index[oid] = arg.index
        return arg

    def owned_object(self, ref: ObjectRef) -> Argument:
        arg = self._add_input(OwnedObjectArg(ref))
        self._object_index[normalize_address(ref.object_id)] = arg.index
        return arg

    def receiving_object(self, ref: ObjectRef) -> Argument:
        return self._add_input(ReceivingObjectArg(ref))

    # --- commands ------------------------------------------------------------

    def add(self, command: Command) -> Argument:
        self._commands.append(command)
        return Argument(ArgumentKind.RESULT, len(self._commands) - 1)

    def move_call(
        self,
        target: str,
        arguments: Sequence[Argument] = (),
        *,
        type_arguments: Iterable[TypeLike] = (),
    ) -> Argument:
        """Append `package::module::function(arguments)`; returns the call's Result argument."""
        parts = target.split("::")
        if len(parts) != 3 or not all(parts):
            raise ConfigurationError(f"invalid Move call target {target!r} (want package::module::function)")
        package, module, function = parts
        return self.add(
            MoveCall(
                package=normalize_address(package),
                module=module,
                function=function,
                type_arguments=tuple(as_type_tag(t) for t in type_arguments),
                arguments=tuple(arguments),
            )
        )

    @property
    def commands(self) -> List[Command]:
        return list(self._commands)

    @property
    def inputs(self) -> List[_Input]:
        return list(self._inputs)

    # --- gas / sender --------------------------------------------------------

    def set_sender(self, sender: str) -> "TransactionBuilder":
        self.sender = normalize_address(sender)
        return self

    def set_gas_budget(self, budget: Optional[int]) -> "TransactionBuilder":
        self.gas_budget = int(budget) if budget is not None else None
        return self

    def set_gas_price(self, price: int) -> "TransactionBuilder":
        self.gas_price = int(price)
        return self

    def set_gas_payment(self, payment: Sequence[ObjectRef]) -> "TransactionBuilder":
        if len(payment) > MAX_GAS_COINS:
            raise ConfigurationError(f"at most {MAX_GAS_COINS} gas coins per transaction")
        self.gas_payment = list(payment)
        return self

    def set_gas_owner(self, owner: str) -> "TransactionBuilder":
        self.gas_owner = normalize_address(owner)
        return self

    def set_expiration(self, epoch: Optional[int]) -> "TransactionBuilder":
        self.expiration = epoch
        return self

    # --- resolution ----------------------------------------------------------

    def _resolve_objects(self, ledger: Optional[LedgerClient]) -> None:
        pending = [(i, a) for i, a in enumerate(self._inputs) if isinstance(a, _PendingObject)]
        if not pending:
            return
        if ledger is None:
            ids = ", ".join(a.object_id for _, a in pending)
            raise ConfigurationError(f"object inputs need a ledger to resolve ownership: {ids}")
        objects = ledger.multi_get_objects([a.object_id for _, a in pending])
        if len(objects) != len(pending):
            raise ConfigurationError(f"fullnode returned {len(objects)} objects for {len(pending)} ids")
        for (i, p), obj in zip(pending, objects):
            self._inputs[i] = _object_input(obj, p.mutable)
            log.debug("tx: input %d -> %s", i, type(self._inputs[i]).__name__)

    def _programmable(self) -> ProgrammableTransaction:
        inputs: List[CallArg] = []
        for i, a in enumerate(self._inputs):
            if isinstance(a, _PendingObject):
                raise ConfigurationError(f"input {i} ({a.object_id}) is not resolved")
            inputs.append(a)
        return ProgrammableTransaction(tuple(inputs), tuple(self._commands))

    def _gas_payment(self, ledger: Optional[LedgerClient], owner: str) -> List[ObjectRef]:
        if self.gas_payment is not None:
            return list(self.gas_payment)
        if ledger is None:
            raise ConfigurationError("gas payment must be set when building offline")
        page = ledger.get_coins(owner, SUI_COIN_TYPE, limit=MAX_GAS_COINS)
        used = {a.ref.object_id for a in self._inputs if isinstance(a, OwnedObjectArg)}
        coins = [
            ObjectRef(normalize_address(c["coinObjectId"]), int(c["version"]), str(c["digest"]))
            for c in page.get("data") or []
            if normalize_address(c["coinObjectId"]) not in used
        ]
        if not coins:
            raise ConfigurationError(f"no SUI coins available for gas owned by {owner}")
        return coins

    def build_kind_bytes(self, ledger: Optional[LedgerClient] = None) -> bytes:
        """TransactionKind bytes only, for dev-inspect (no sender or gas needed)."""
        self._resolve_objects(ledger)
        return self._programmable().kind_bytes()

    def build_data(self, ledger: Optional[LedgerClient] = None) -> TransactionData:
        if not self.sender:
            raise ConfigurationError("transaction sender is not set")
        self._resolve_objects(ledger)
        ptb = self._programmable()
        owner = self.gas_owner or self.sender

        price = self.gas_price
        if price is None:
            if ledger is None:
                raise ConfigurationError("gas price must be set when building offline")
            price = ledger.get_reference_gas_price()

        payment = self._gas_payment(ledger, owner)

        budget = self.gas_budget
        if budget is None:
            if ledger is None:
                raise ConfigurationError("gas budget must be set when building offline")
            probe = TransactionData(
                ptb, self.sender, GasData(tuple(payment), owner, price, MAX_TX_GAS), self.expiration
            )
            dry = ledger.dry_run(probe.to_bytes())
            budget = estimate_budget(dry.get("effects") or {}, price)
            log.debug("tx: estimated gas budget %d at price %d", budget, price)

        return TransactionData(ptb, self.sender, GasData(tuple(payment), owner, price, budget), self.expiration)

    def build(self, ledger: Optional[LedgerClient] = None) -> bytes:
        """Canonical `TransactionData` bytes (what participants sign)."""
        return self.build_data(ledger).to_bytes()

