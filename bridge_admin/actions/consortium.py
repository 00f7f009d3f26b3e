"""
Consortium administration: validator sets, admins and payload validation.

`payload` / `proof` / `valset` arguments are raw bytes or hex text; the
contract decodes and checks them on chain.
"""

from __future__ import annotations

from typing import Union

from ..config import AdminConfig
from ..rpc.ledger import LedgerClient
from ..tx.build import TransactionBuilder
from ..tx.send import DEV_INSPECT_SENDER
from ..types.core import ExecutionResult
from .base import Signer, as_bytes, consortium_of, consortium_view, new_transaction, submit

__all__ = [
    "build_add_admin",
    "add_admin",
    "build_remove_admin",
    "remove_admin",
    "build_set_initial_validator_set",
    "set_initial_validator_set",
    "build_set_next_validator_set",
    "set_next_validator_set",
    "build_set_valset_action",
    "set_valset_action",
    "build_validate_payload",
    "validate_payload",
    "get_epoch",
    "is_payload_used",
]

BytesArg = Union[bytes, str]


def _build(config: AdminConfig, function: str, *args) -> TransactionBuilder:  # noqa: ANN002
    c = consortium_of(config)
    tx = new_transaction(config)
    c.call(tx, function, [config.consortium_id, *args])
    return tx


def build_add_admin(config: AdminConfig, admin: str) -> TransactionBuilder:
    return _build(config, "add_admin", admin)


def add_admin(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, admin: str, *, wait: bool = False
) -> ExecutionResult:
    return submit(ledger, build_add_admin(config, admin), signer, action=f"add consortium admin {admin}", wait=wait)


def build_remove_admin(config: AdminConfig, admin: str) -> TransactionBuilder:
    return _build(config, "remove_admin", admin)


def remove_admin(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, admin: str, *, wait: bool = False
) -> ExecutionResult:
    tx = build_remove_admin(config, admin)
    return submit(ledger, tx, signer, action=f"remove consortium admin {admin}", wait=wait)


def build_set_initial_validator_set(config: AdminConfig, valset: BytesArg) -> TransactionBuilder:
    return _build(config, "set_initial_validator_set", as_bytes(valset, "valset"))


def set_initial_validator_set(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, valset: BytesArg, *, wait: bool = False
) -> ExecutionResult:
    tx = build_set_initial_validator_set(config, valset)
    return submit(ledger, tx, signer, action="set initial validator set", wait=wait)


def build_set_next_validator_set(config: AdminConfig, payload: BytesArg, proof: BytesArg) -> TransactionBuilder:
    """Rotate to the validator set in `payload`, signed off by the current set in `proof`."""
    return _build(config, "set_next_validator_set", as_bytes(payload, "payload"), as_bytes(proof, "proof"))


def set_next_validator_set(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    payload: BytesArg,
    proof: BytesArg,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_set_next_validator_set(config, payload, proof)
    return submit(ledger, tx, signer, action="set next validator set", wait=wait)


def build_set_valset_action(config: AdminConfig, action: int) -> TransactionBuilder:
    return _build(config, "set_valset_action", action)


def set_valset_action(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, action: int, *, wait: bool = False
) -> ExecutionResult:
    return submit(ledger, build_set_valset_action(config, action), signer, action="set valset action", wait=wait)


def build_validate_payload(config: AdminConfig, payload: BytesArg, proof: BytesArg) -> TransactionBuilder:
    """Validate `payload` against the current validator set and record its hash as used."""
    return _build(config, "validate_payload", as_bytes(payload, "payload"), as_bytes(proof, "proof"))


def validate_payload(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    payload: BytesArg,
    proof: BytesArg,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_validate_payload(config, payload, proof)
    return submit(ledger, tx, signer, action="validate payload", wait=wait)


def get_epoch(ledger: LedgerClient, config: AdminConfig) -> int:
    return int(consortium_view(ledger, config, "get_epoch"))


def is_payload_used(
    ledger: LedgerClient,
    config: AdminConfig,
    payload_hash: BytesArg,
    *,
    sender: str = DEV_INSPECT_SENDER,
) -> bool:
    """Whether the payload with sha256 `payload_hash` was already consumed. Any `sender` may ask."""
    return bool(
        consortium_view(ledger, config, "is_payload_used", [as_bytes(payload_hash, "payload_hash")], sender=sender)
    )
