"""
Multi-step operator flows built from the single actions.

Each step is its own transaction. Unless `wait=True`, a step is submitted as
soon as the fullnode answered the previous one, without waiting for it to be
final; a later step that depends on an earlier one can then observe stale
state. This is logged when it happens. A step whose effects report failure
raises TransactionFailedError and nothing after it is submitted.

- ensure_minter_and_mint: the multisig must hold AdminCap; grant it a
  MinterCap when missing; stop if the global pause is on; otherwise mint.
- rotate_validators_and_validate: install the next validator set, validate
  a payload against it, then check the payload is recorded as used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..config import ONE_LBTC, AdminConfig, CapabilityType
from ..errors import ConfigurationError
from ..rpc.ledger import LedgerClient
from ..signers import SignerConfig, resolve_signer
from ..tx.send import wait_for_transaction
from ..types.core import ExecutionResult
from . import capabilities, consortium, pause, supply

log = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_MINT_LIMIT",
    "DEPOSIT_TXID",
    "ScenarioReport",
    "ensure_minter_and_mint",
    "rotate_validators_and_validate",
]

DEFAULT_MINT_LIMIT = 1_000_000_000_000
DEPOSIT_TXID = b"abcd"  # placeholder deposit id for test mints


@dataclass
class ScenarioReport:
    sender: str
    steps: List[str] = field(default_factory=list)
    results: Dict[str, ExecutionResult] = field(default_factory=dict)
    checks: Dict[str, Any] = field(default_factory=dict)
    completed: bool = False

    def record(self, step: str, result: ExecutionResult) -> None:
        self.steps.append(step)
        self.results[step] = result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sender": self.sender,
            "completed": self.completed,
            "steps": list(self.steps),
            "checks": dict(self.checks),
            "results": {k: {"digest": r.digest, "status": r.status} for k, r in self.results.items()},
        }


def _settle(ledger: LedgerClient, result: ExecutionResult, wait: bool, *, next_step: str) -> None:
    # a failed step stops the flow before anything depending on it is submitted
    result.raise_for_status()
    if wait:
        wait_for_transaction(ledger, result.digest)
    else:
        log.warning(
            "scenario: submitting %s without waiting for %s to be final; pass wait=True to serialize",
            next_step,
            result.digest,
        )


def ensure_minter_and_mint(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: SignerConfig,
    recipient: str,
    *,
    amount: int = ONE_LBTC,
    txid: Union[bytes, str] = DEPOSIT_TXID,
    idx: int = 0,
    mint_limit: int = DEFAULT_MINT_LIMIT,
    wait: bool = False,
) -> ScenarioReport:
    sender = resolve_signer(signer).address
    report = ScenarioReport(sender=sender)

    has_admin = capabilities.has_cap(ledger, config, sender, CapabilityType.ADMIN)
    report.checks["admin_cap"] = has_admin
    if not has_admin:
        raise ConfigurationError(f"multisig {sender} does not hold AdminCap; cannot grant MinterCap", field="signer")

    has_minter = capabilities.has_cap(ledger, config, sender, CapabilityType.MINTER)
    report.checks["minter_cap"] = has_minter
    if not has_minter:
        log.info("scenario: %s has no MinterCap, granting limit %d", sender, mint_limit)
        res = capabilities.add_capability(ledger, config, signer, sender, CapabilityType.MINTER, mint_limit)
        report.record("add_minter_cap", res)
        _settle(ledger, res, wait, next_step="mint_and_transfer")

    paused = pause.is_global_pause_enabled(ledger, config)
    report.checks["global_pause"] = paused
    if paused:
        log.warning("scenario: global pause is enabled, mint aborted")
        return report

    res = supply.mint_and_transfer(ledger, config, signer, amount, recipient, txid, idx, wait=wait)
    report.record("mint_and_transfer", res)
    res.raise_for_status()
    report.completed = True
    return report


def rotate_validators_and_validate(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: SignerConfig,
    valset_payload: Union[bytes, str],
    valset_proof: Union[bytes, str],
    payload: Union[bytes, str],
    proof: Union[bytes, str],
    payload_hash: Union[bytes, str],
    *,
    inspect_sender: Optional[str] = None,
    wait: bool = False,
) -> ScenarioReport:
    sender = resolve_signer(signer).address
    report = ScenarioReport(sender=sender)

    res = consortium.set_next_validator_set(ledger, config, signer, valset_payload, valset_proof)
    report.record("set_next_validator_set", res)
    _settle(ledger, res, wait, next_step="validate_payload")

    res = consortium.validate_payload(ledger, config, signer, payload, proof)
    report.record("validate_payload", res)
    _settle(ledger, res, wait, next_step="is_payload_used")

    used = consortium.is_payload_used(ledger, config, payload_hash, sender=inspect_sender or sender)
    report.checks["payload_used"] = used
    report.completed = True
    return report
