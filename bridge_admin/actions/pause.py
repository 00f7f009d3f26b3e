"""
Global pause, withdrawal and Bascule switches.

The global pause lives in the system deny list (`0x403` unless configured
otherwise). `enable_global_pause` / `disable_global_pause` use the v2 entry
points, which authorize through the signer's capability; the `*_multisig`
variants pass the signing policy explicitly like `mint_and_transfer`.
"""

from __future__ import annotations

from typing import Optional

from ..config import AdminConfig
from ..contracts import bind_treasury
from ..multisig import MultisigPublicKey
from ..rpc.ledger import LedgerClient
from ..tx.build import TransactionBuilder
from ..types.core import ExecutionResult
from .base import Signer, new_transaction, policy_arguments, policy_for, submit, treasury_of, treasury_view

__all__ = [
    "build_set_global_pause",
    "enable_global_pause",
    "disable_global_pause",
    "build_set_global_pause_multisig",
    "enable_global_pause_multisig",
    "disable_global_pause_multisig",
    "is_global_pause_enabled",
    "build_toggle_withdrawal",
    "toggle_withdrawal",
    "is_withdrawal_enabled",
    "build_toggle_bascule_check",
    "toggle_bascule_check",
    "is_bascule_check_enabled",
]


def _pause_function(enabled: bool, v2: bool) -> str:
    name = "enable_global_pause" if enabled else "disable_global_pause"
    return name + "_v2" if v2 else name


def build_set_global_pause(config: AdminConfig, enabled: bool) -> TransactionBuilder:
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(tx, _pause_function(enabled, v2=True), [config.treasury_id, config.denylist_id], [config.coin_type])
    return tx


def enable_global_pause(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, *, wait: bool = False
) -> ExecutionResult:
    return submit(ledger, build_set_global_pause(config, True), signer, action="enable global pause", wait=wait)


def disable_global_pause(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, *, wait: bool = False
) -> ExecutionResult:
    return submit(ledger, build_set_global_pause(config, False), signer, action="disable global pause", wait=wait)


def build_set_global_pause_multisig(
    config: AdminConfig, enabled: bool, policy: MultisigPublicKey
) -> TransactionBuilder:
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(
        tx,
        _pause_function(enabled, v2=False),
        [config.treasury_id, config.denylist_id, *policy_arguments(policy)],
        [config.coin_type],
    )
    return tx


def enable_global_pause_multisig(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    *,
    policy: Optional[MultisigPublicKey] = None,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_set_global_pause_multisig(config, True, policy or policy_for(config, signer))
    return submit(ledger, tx, signer, action="enable global pause (multisig)", wait=wait)


def disable_global_pause_multisig(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    *,
    policy: Optional[MultisigPublicKey] = None,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_set_global_pause_multisig(config, False, policy or policy_for(config, signer))
    return submit(ledger, tx, signer, action="disable global pause (multisig)", wait=wait)


def is_global_pause_enabled(ledger: LedgerClient, config: AdminConfig) -> bool:
    """Reads the deny list only; the treasury object is not an argument."""
    config.require("package_id")
    t = bind_treasury(config.package_id)  # type: ignore[arg-type]
    return bool(t.view(ledger, "is_global_pause_enabled", [config.denylist_id], [config.coin_type]))


# --- flags ---------------------------------------------------------------------

def build_toggle_withdrawal(config: AdminConfig) -> TransactionBuilder:
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(tx, "toggle_withdrawal", [config.treasury_id], [config.coin_type])
    return tx


def toggle_withdrawal(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, *, wait: bool = False
) -> ExecutionResult:
    return submit(ledger, build_toggle_withdrawal(config), signer, action="toggle withdrawal", wait=wait)


def is_withdrawal_enabled(ledger: LedgerClient, config: AdminConfig) -> bool:
    return bool(treasury_view(ledger, config, "is_withdrawal_enabled"))


def build_toggle_bascule_check(config: AdminConfig) -> TransactionBuilder:
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(tx, "toggle_bascule_check", [config.treasury_id], [config.coin_type])
    return tx


def toggle_bascule_check(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, *, wait: bool = False
) -> ExecutionResult:
    return submit(ledger, build_toggle_bascule_check(config), signer, action="toggle bascule check", wait=wait)


def is_bascule_check_enabled(ledger: LedgerClient, config: AdminConfig) -> bool:
    return bool(treasury_view(ledger, config, "is_bascule_check_enabled"))
