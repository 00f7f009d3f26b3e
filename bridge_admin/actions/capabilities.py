"""
Capability management on the controlled treasury.

    add_capability(ledger, config, signer, target, CapabilityType.MINTER, mint_limit=10**12)
    has_cap(ledger, config, target, "AdminCap")  # -> bool
"""

from __future__ import annotations

from typing import List, Optional, Union

from ..config import AdminConfig, CapabilityType
from ..contracts import ModuleBinding
from ..errors import ConfigurationError
from ..rpc.ledger import LedgerClient
from ..tx.build import TransactionBuilder
from ..tx.encode import Argument
from ..types.core import ExecutionResult
from .base import Signer, new_transaction, submit, treasury_of, treasury_view

__all__ = [
    "WITNESS_MINT_GAS_BUDGET",
    "build_add_capability",
    "add_capability",
    "build_remove_capability",
    "remove_capability",
    "has_cap",
    "list_capabilities",
    "build_add_witness_mint_capability",
    "add_witness_mint_capability",
    "witness_has_minter_cap",
    "get_witness_minter_cap_left",
]

WITNESS_MINT_GAS_BUDGET = 5_000_000_000

CapLike = Union[CapabilityType, str]


def _new_cap(tx: TransactionBuilder, t: ModuleBinding, cap: CapabilityType, mint_limit: Optional[int]) -> Argument:
    if cap is CapabilityType.MINTER:
        if mint_limit is None:
            raise ConfigurationError("MinterCap requires a mint limit", field="mint_limit")
        return t.call(tx, "new_minter_cap", [mint_limit])
    if mint_limit is not None:
        raise ConfigurationError(f"{cap.value} does not take a mint limit", field="mint_limit")
    if cap is CapabilityType.PAUSER:
        return t.call(tx, "new_pauser_cap")
    return t.call(tx, "new_admin_cap")


def build_add_capability(
    config: AdminConfig,
    target: str,
    cap_type: CapLike,
    mint_limit: Optional[int] = None,
) -> TransactionBuilder:
    """Create the capability in the same transaction and grant it to `target`."""
    cap = CapabilityType.parse(cap_type)
    t = treasury_of(config)
    tx = new_transaction(config)
    cap_arg = _new_cap(tx, t, cap, mint_limit)
    t.call(
        tx,
        "add_capability",
        [config.treasury_id, target, cap_arg],
        [config.coin_type, config.cap_type(cap)],
    )
    return tx


def add_capability(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    target: str,
    cap_type: CapLike,
    mint_limit: Optional[int] = None,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_add_capability(config, target, cap_type, mint_limit)
    return submit(ledger, tx, signer, action=f"add {CapabilityType.parse(cap_type).value} to {target}", wait=wait)


def build_remove_capability(config: AdminConfig, target: str, cap_type: CapLike) -> TransactionBuilder:
    cap = CapabilityType.parse(cap_type)
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(tx, "remove_capability", [config.treasury_id, target], [config.coin_type, config.cap_type(cap)])
    return tx


def remove_capability(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    target: str,
    cap_type: CapLike,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_remove_capability(config, target, cap_type)
    return submit(ledger, tx, signer, action=f"remove {CapabilityType.parse(cap_type).value} from {target}", wait=wait)


def has_cap(ledger: LedgerClient, config: AdminConfig, target: str, cap_type: CapLike) -> bool:
    cap = CapabilityType.parse(cap_type)
    return bool(treasury_view(ledger, config, "has_cap", [target], [config.coin_type, config.cap_type(cap)]))


def list_capabilities(ledger: LedgerClient, config: AdminConfig, target: str) -> List[str]:
    """Role names held by `target`, as reported by the treasury's `list_roles`."""
    return list(treasury_view(ledger, config, "list_roles", [target]))


# --- witness minting ---------------------------------------------------------

def build_add_witness_mint_capability(config: AdminConfig, owner: str, mint_limit: int) -> TransactionBuilder:
    """Grant a MinterCap with `mint_limit` to the witness type named `owner`."""
    t = treasury_of(config)
    tx = new_transaction(config, gas_budget=WITNESS_MINT_GAS_BUDGET)
    cap = t.call(tx, "new_minter_cap", [mint_limit])
    t.call(tx, "add_witness_mint_capability", [config.treasury_id, owner, cap], [config.coin_type])
    return tx


def add_witness_mint_capability(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    owner: str,
    mint_limit: int,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_add_witness_mint_capability(config, owner, mint_limit)
    return submit(ledger, tx, signer, action=f"add witness MinterCap for {owner}", wait=wait)


def witness_has_minter_cap(ledger: LedgerClient, config: AdminConfig, owner: str) -> bool:
    return bool(treasury_view(ledger, config, "witness_has_minter_cap", [owner]))


def get_witness_minter_cap_left(ledger: LedgerClient, config: AdminConfig, owner: str) -> int:
    return int(treasury_view(ledger, config, "get_witness_minter_cap_left", [owner]))
