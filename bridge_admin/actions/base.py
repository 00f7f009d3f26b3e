"""
Shared plumbing for the admin actions.

Every state-mutating action comes in two halves:

- `build_<action>(config, ...) -> TransactionBuilder`: pure, no network
  traffic; the unsigned transaction can be built offline, inspected and
  handed to co-signers.
- `<action>(ledger, config, signer, ...) -> ExecutionResult`: builds, signs
  with the given signer configuration and submits once.

Views (`has_cap`, `get_mint_fee`, ...) take `(ledger, config, ...)` and return
the decoded value of a dev-inspect run.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from ..config import AdminConfig
from ..contracts import ModuleBinding, bind_consortium, bind_treasury
from ..errors import ConfigurationError
from ..multisig import MultisigPublicKey
from ..rpc.ledger import LedgerClient
from ..signers import MultisigSignerConfig, SignerConfig, TransactionSigner
from ..tx.build import TransactionBuilder
from ..tx.send import DEV_INSPECT_SENDER, sign_and_execute
from ..types.core import ExecutionResult
from ..utils.bytes import ensure_bytes

log = logging.getLogger(__name__)

__all__ = [
    "Signer",
    "as_bytes",
    "new_transaction",
    "treasury_of",
    "consortium_of",
    "policy_for",
    "policy_arguments",
    "submit",
    "treasury_view",
    "consortium_view",
]

Signer = Union[SignerConfig, TransactionSigner]


def new_transaction(config: AdminConfig, *, gas_budget: Optional[int] = None) -> TransactionBuilder:
    """Fresh builder carrying the configured gas budget (falls back to `gas_budget`, then to a dry run)."""
    tx = TransactionBuilder()
    tx.set_gas_budget(config.gas_budget if config.gas_budget is not None else gas_budget)
    return tx


def treasury_of(config: AdminConfig) -> ModuleBinding:
    config.require("package_id", "treasury_id")
    return bind_treasury(config.package_id)  # type: ignore[arg-type]


def consortium_of(config: AdminConfig) -> ModuleBinding:
    config.require("package_id", "consortium_id")
    return bind_consortium(config.package_id)  # type: ignore[arg-type]


def policy_for(config: AdminConfig, signer: Optional[Signer] = None) -> MultisigPublicKey:
    """The multisig policy an action embeds: the signer's own when it is a multisig, else the configured one."""
    if isinstance(signer, MultisigSignerConfig):
        return signer.multisig_pk
    return config.multisig_public_key()


def policy_arguments(policy: MultisigPublicKey) -> Sequence[Any]:
    """(pks, weights, threshold) as the contract expects them: flag-prefixed keys, u8 weights, u16 threshold."""
    return [policy.public_keys_sui_bytes(), policy.weights(), policy.threshold]


def submit(
    ledger: LedgerClient,
    tx: TransactionBuilder,
    signer: Signer,
    *,
    action: str,
    wait: bool = False,
) -> ExecutionResult:
    log.info("action: %s", action)
    return sign_and_execute(ledger, tx, signer, wait=wait)


def treasury_view(
    ledger: LedgerClient,
    config: AdminConfig,
    function: str,
    args: Sequence[Any] = (),
    type_arguments: Optional[Sequence[str]] = None,
) -> Any:
    t = treasury_of(config)
    type_args = [config.coin_type] if type_arguments is None else list(type_arguments)
    return t.view(ledger, function, [config.treasury_id, *args], type_args)


def consortium_view(
    ledger: LedgerClient,
    config: AdminConfig,
    function: str,
    args: Sequence[Any] = (),
    *,
    sender: str = DEV_INSPECT_SENDER,
) -> Any:
    c = consortium_of(config)
    return c.view(ledger, function, [config.consortium_id, *args], sender=sender)


def as_bytes(value: Union[bytes, str], name: str) -> bytes:
    """Raw bytes, or hex text (with or without 0x) for byte arguments given on the command line."""
    try:
        return ensure_bytes(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name}: {e}", field=name) from None
