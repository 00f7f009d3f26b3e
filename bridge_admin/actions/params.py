"""
Treasury parameters: fees, treasury address, chain id and action selectors.

Each parameter has a setter entry point `set_<name>(treasury, value)` and a
view `get_<name>(treasury)`; `PARAMETERS` maps the name to its Move type so
the CLI can parse values and the builders encode them.
"""

from __future__ import annotations

from typing import Any, Dict

from ..config import AdminConfig
from ..errors import ConfigurationError
from ..rpc.ledger import LedgerClient
from ..tx.build import TransactionBuilder
from ..types.core import ExecutionResult
from .base import Signer, new_transaction, submit, treasury_of, treasury_view

__all__ = [
    "PARAMETERS",
    "parameter_type",
    "build_set_parameter",
    "set_parameter",
    "get_parameter",
    "set_mint_fee",
    "get_mint_fee",
    "set_burn_commission",
    "get_burn_commission",
    "set_dust_fee_rate",
    "get_dust_fee_rate",
    "set_treasury_address",
    "get_treasury_address",
    "set_chain_id",
    "get_chain_id",
    "set_action_bytes",
    "get_action_bytes",
    "set_fee_action_bytes",
    "get_fee_action_bytes",
]

PARAMETERS: Dict[str, str] = {
    "mint_fee": "u64",
    "burn_commission": "u64",
    "dust_fee_rate": "u64",
    "treasury_address": "address",
    "chain_id": "u256",
    "action_bytes": "u32",
    "fee_action_bytes": "u32",
}


def parameter_type(name: str) -> str:
    try:
        return PARAMETERS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown treasury parameter {name!r}; expected one of {', '.join(PARAMETERS)}", field="name"
        ) from None


def build_set_parameter(config: AdminConfig, name: str, value: Any) -> TransactionBuilder:
    parameter_type(name)
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(tx, f"set_{name}", [config.treasury_id, value], [config.coin_type])
    return tx


def set_parameter(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    name: str,
    value: Any,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_set_parameter(config, name, value)
    return submit(ledger, tx, signer, action=f"set {name} = {value}", wait=wait)


def get_parameter(ledger: LedgerClient, config: AdminConfig, name: str) -> Any:
    parameter_type(name)
    return treasury_view(ledger, config, f"get_{name}")


# --- named wrappers ------------------------------------------------------------

def set_mint_fee(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, fee: int, *, wait: bool = False
) -> ExecutionResult:
    return set_parameter(ledger, config, signer, "mint_fee", fee, wait=wait)


def get_mint_fee(ledger: LedgerClient, config: AdminConfig) -> int:
    return int(get_parameter(ledger, config, "mint_fee"))


def set_burn_commission(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, commission: int, *, wait: bool = False
) -> ExecutionResult:
    return set_parameter(ledger, config, signer, "burn_commission", commission, wait=wait)


def get_burn_commission(ledger: LedgerClient, config: AdminConfig) -> int:
    return int(get_parameter(ledger, config, "burn_commission"))


def set_dust_fee_rate(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, rate: int, *, wait: bool = False
) -> ExecutionResult:
    return set_parameter(ledger, config, signer, "dust_fee_rate", rate, wait=wait)


def get_dust_fee_rate(ledger: LedgerClient, config: AdminConfig) -> int:
    return int(get_parameter(ledger, config, "dust_fee_rate"))


def set_treasury_address(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, address: str, *, wait: bool = False
) -> ExecutionResult:
    return set_parameter(ledger, config, signer, "treasury_address", address, wait=wait)


def get_treasury_address(ledger: LedgerClient, config: AdminConfig) -> str:
    return str(get_parameter(ledger, config, "treasury_address"))


def set_chain_id(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, chain_id: int, *, wait: bool = False
) -> ExecutionResult:
    return set_parameter(ledger, config, signer, "chain_id", chain_id, wait=wait)


def get_chain_id(ledger: LedgerClient, config: AdminConfig) -> int:
    return int(get_parameter(ledger, config, "chain_id"))


def set_action_bytes(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, action: int, *, wait: bool = False
) -> ExecutionResult:
    return set_parameter(ledger, config, signer, "action_bytes", action, wait=wait)


def get_action_bytes(ledger: LedgerClient, config: AdminConfig) -> int:
    return int(get_parameter(ledger, config, "action_bytes"))


def set_fee_action_bytes(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, action: int, *, wait: bool = False
) -> ExecutionResult:
    return set_parameter(ledger, config, signer, "fee_action_bytes", action, wait=wait)


def get_fee_action_bytes(ledger: LedgerClient, config: AdminConfig) -> int:
    return int(get_parameter(ledger, config, "fee_action_bytes"))
