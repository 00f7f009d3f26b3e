"""
bridge_admin.tx.send
====================

Submit signed transactions to the fullnode and run read-only simulations.

Primary entry points
--------------------
- execute_transaction(ledger, tx_bytes, signatures) -> ExecutionResult
    One `sui_executeTransactionBlock` round-trip. No retry: whatever the
    fullnode or the transport raises reaches the caller unchanged.

- sign_and_execute(ledger, builder, signer, *, wait=False) -> ExecutionResult
    Sets the sender from the signer, builds the bytes, signs them and submits.

- dev_inspect(ledger, builder, *, sender="0x0") -> DevInspectResult
    Simulates the transaction kind; used by every view.

- wait_for_transaction(ledger, digest, *, timeout_s=60, poll_interval_s=0.5) -> dict
    Opt-in polling of `sui_getTransactionBlock` until the node knows the
    digest or the timeout elapses.

Execution returns once the fullnode answers the execute request. Callers that
chain dependent transactions and need the previous one to be final must ask
for it with `wait=True` (or call `wait_for_transaction` themselves).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Sequence, Union

from ..errors import JsonRpcCode, RpcError, TransportError
from ..rpc.ledger import LedgerClient
from ..signers import MultisigSignerConfig, SignerConfig, SimpleSignerConfig, TransactionSigner, resolve_signer
from ..types.core import DevInspectResult, ExecutionResult
from .build import TransactionBuilder
from .encode import transaction_digest

log = logging.getLogger(__name__)

__all__ = [
    "execute_transaction",
    "sign_and_execute",
    "dev_inspect",
    "get_transaction",
    "wait_for_transaction",
    "DEV_INSPECT_SENDER",
]

DEV_INSPECT_SENDER = "0x0"

SignerLike = Union[TransactionSigner, SignerConfig]


def _as_signer(signer: SignerLike) -> TransactionSigner:
    if isinstance(signer, (SimpleSignerConfig, MultisigSignerConfig)):
        return resolve_signer(signer)
    return signer


# -----------------------------------------------------------------------------
# Submission
# -----------------------------------------------------------------------------

def execute_transaction(
    ledger: LedgerClient,
    tx_bytes: bytes,
    signatures: Sequence[str],
    *,
    options: Optional[Dict[str, bool]] = None,
) -> ExecutionResult:
    """
    Submit signed bytes once and wrap the response.

    Raises:
        RpcError / TransportError exactly as raised by the RPC client.
    """
    log.debug("send: submitting %s with %d signature(s)", transaction_digest(tx_bytes), len(signatures))
    resp = ledger.execute(tx_bytes, signatures, options=options)
    result = ExecutionResult.from_response(resp)
    log.info("send: %s status=%s", result.digest, result.status or "unknown")
    if result.error:
        log.warning("send: %s failed on chain: %s", result.digest, result.error)
    return result


def sign_and_execute(
    ledger: LedgerClient,
    builder: TransactionBuilder,
    signer: SignerLike,
    *,
    wait: bool = False,
    timeout_s: float = 60.0,
) -> ExecutionResult:
    """
    Build `builder` for the signer's address, sign and submit it.

    A multisig signer checks the available weight before anything is sent,
    so an under-threshold configuration fails without network traffic.
    """
    resolved = _as_signer(signer)
    builder.set_sender(resolved.address)
    tx_bytes = builder.build(ledger)
    signature = resolved.sign_transaction(tx_bytes)
    result = execute_transaction(ledger, tx_bytes, [signature])
    if wait:
        wait_for_transaction(ledger, result.digest, timeout_s=timeout_s)
    return result


# -----------------------------------------------------------------------------
# Simulation
# -----------------------------------------------------------------------------

def dev_inspect(
    ledger: LedgerClient,
    builder: TransactionBuilder,
    *,
    sender: str = DEV_INSPECT_SENDER,
) -> DevInspectResult:
    """Run the transaction kind read-only; views decode `result.value()`."""
    kind = builder.build_kind_bytes(ledger)
    return ledger.dev_inspect(sender, kind)


# -----------------------------------------------------------------------------
# Finality polling
# -----------------------------------------------------------------------------

# Fullnode answer for a digest it has not indexed yet; other INVALID_PARAMS errors are real
_NOT_FOUND_MESSAGE = "could not find the referenced transaction"


def _is_not_found(err: RpcError) -> bool:
    return err.code == JsonRpcCode.INVALID_PARAMS and _NOT_FOUND_MESSAGE in (err.message or "").lower()


def get_transaction(ledger: LedgerClient, digest: str) -> Optional[Dict[str, Any]]:
    """The executed transaction, or None while the node does not know it yet."""
    try:
        res = ledger.get_transaction(digest)
    except RpcError as e:
        if _is_not_found(e):
            return None
        raise
    return res or None


def wait_for_transaction(
    ledger: LedgerClient,
    digest: str,
    *,
    timeout_s: float = 60.0,
    poll_interval_s: float = 0.5,
    max_interval_s: float = 2.5,
    backoff: float = 1.25,
) -> Dict[str, Any]:
    """
    Poll until the transaction is known to the fullnode or timeout is reached.

    Raises:
        TransportError when the transaction is still unknown at the deadline
        RpcError / TransportError for anything but "not found yet"
    """
    deadline = time.monotonic() + float(timeout_s)
    interval = float(poll_interval_s)

    while True:
        tx = get_transaction(ledger, digest)
        if tx is not None:
            log.debug("send: %s is final", digest)
            return tx

        if time.monotonic() >= deadline:
            raise TransportError(f"timeout: transaction {digest} not final after {timeout_s}s")

        time.sleep(interval)
        interval = min(interval * float(backoff), float(max_interval_s))
