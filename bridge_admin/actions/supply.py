"""
Minting, burning and redemption of the bridged coin.

`mint_and_transfer` and the multisig pause variants embed the signing policy
(flag-prefixed public keys, weights, threshold) as call arguments so the
contract can check the sender is that multisig.
"""

from __future__ import annotations

from typing import Optional, Union

from ..config import CLOCK_OBJECT_ID, AdminConfig
from ..contracts import bind_witness, witness_type
from ..multisig import MultisigPublicKey
from ..rpc.ledger import LedgerClient
from ..tx.build import TransactionBuilder
from ..types.core import ExecutionResult
from .base import Signer, as_bytes, new_transaction, policy_arguments, policy_for, submit, treasury_of

__all__ = [
    "MINT_GAS_BUDGET",
    "build_mint_and_transfer",
    "mint_and_transfer",
    "build_mint_with_witness",
    "mint_with_witness",
    "build_burn",
    "burn",
    "build_redeem",
    "redeem",
    "build_claim",
    "claim",
    "build_mint_with_fee",
    "mint_with_fee",
]

MINT_GAS_BUDGET = 5_000_000_000

BytesArg = Union[bytes, str]  # raw bytes or hex


def build_mint_and_transfer(
    config: AdminConfig,
    amount: int,
    recipient: str,
    txid: BytesArg,
    idx: int,
    policy: MultisigPublicKey,
) -> TransactionBuilder:
    """Mint `amount` to `recipient` for the deposit (`txid`, `idx`), authorized by `policy`."""
    t = treasury_of(config)
    tx = new_transaction(config, gas_budget=MINT_GAS_BUDGET)
    t.call(
        tx,
        "mint_and_transfer",
        [
            config.treasury_id,
            amount,
            recipient,
            config.denylist_id,
            *policy_arguments(policy),
            as_bytes(txid, "txid"),
            idx,
        ],
        [config.coin_type],
    )
    return tx


def mint_and_transfer(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    amount: int,
    recipient: str,
    txid: BytesArg,
    idx: int,
    *,
    policy: Optional[MultisigPublicKey] = None,
    wait: bool = False,
) -> ExecutionResult:
    policy = policy or policy_for(config, signer)
    tx = build_mint_and_transfer(config, amount, recipient, txid, idx, policy)
    return submit(ledger, tx, signer, action=f"mint {amount} to {recipient}", wait=wait)


def build_mint_with_witness(
    config: AdminConfig,
    amount: int,
    recipient: str,
    witness_package: Optional[str] = None,
) -> TransactionBuilder:
    """Create the test witness and mint under its MinterCap in one transaction."""
    if witness_package is None:
        config.require("test_witness_package_id")
        witness_package = config.test_witness_package_id
    t = treasury_of(config)
    tx = new_transaction(config, gas_budget=MINT_GAS_BUDGET)
    w = bind_witness(witness_package).call(tx, "create_witness")  # type: ignore[arg-type]
    t.call(
        tx,
        "mint_with_witness",
        [w, config.treasury_id, amount, recipient, config.denylist_id],
        [config.coin_type, witness_type(witness_package)],  # type: ignore[arg-type]
    )
    return tx


def mint_with_witness(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    amount: int,
    recipient: str,
    witness_package: Optional[str] = None,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_mint_with_witness(config, amount, recipient, witness_package)
    return submit(ledger, tx, signer, action=f"mint {amount} with witness to {recipient}", wait=wait)


def build_burn(config: AdminConfig, coin_id: str) -> TransactionBuilder:
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(tx, "burn", [config.treasury_id, coin_id], [config.coin_type])
    return tx


def burn(
    ledger: LedgerClient, config: AdminConfig, signer: Signer, coin_id: str, *, wait: bool = False
) -> ExecutionResult:
    return submit(ledger, build_burn(config, coin_id), signer, action=f"burn {coin_id}", wait=wait)


def build_redeem(config: AdminConfig, coin_id: str, script_pubkey: BytesArg) -> TransactionBuilder:
    """Burn `coin_id` and request BTC to the output script `script_pubkey`."""
    t = treasury_of(config)
    tx = new_transaction(config, gas_budget=MINT_GAS_BUDGET)
    t.call(
        tx,
        "redeem",
        [config.treasury_id, coin_id, as_bytes(script_pubkey, "script_pubkey")],
        [config.coin_type],
    )
    return tx


def redeem(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    coin_id: str,
    script_pubkey: BytesArg,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_redeem(config, coin_id, script_pubkey)
    return submit(ledger, tx, signer, action=f"redeem {coin_id}", wait=wait)


def build_claim(config: AdminConfig, payload: BytesArg, proof: BytesArg) -> TransactionBuilder:
    """Manual claim: mint against a notarized deposit payload and its consortium proof."""
    config.require("consortium_id")
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(
        tx,
        "claim",
        [
            config.treasury_id,
            config.consortium_id,
            config.denylist_id,
            as_bytes(payload, "payload"),
            as_bytes(proof, "proof"),
        ],
        [config.coin_type],
    )
    return tx


def claim(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    payload: BytesArg,
    proof: BytesArg,
    *,
    wait: bool = False,
) -> ExecutionResult:
    return submit(ledger, build_claim(config, payload, proof), signer, action="claim", wait=wait)


def build_mint_with_fee(
    config: AdminConfig,
    payload: BytesArg,
    proof: BytesArg,
    fee_payload: BytesArg,
    signature: BytesArg,
    public_key: BytesArg,
) -> TransactionBuilder:
    """Auto-claim: mint on the user's behalf, charging the fee they approved in `fee_payload`."""
    config.require("consortium_id", "bascule_id")
    t = treasury_of(config)
    tx = new_transaction(config)
    t.call(
        tx,
        "mint_with_fee",
        [
            config.treasury_id,
            config.consortium_id,
            config.denylist_id,
            config.bascule_id,
            as_bytes(payload, "payload"),
            as_bytes(proof, "proof"),
            as_bytes(fee_payload, "fee_payload"),
            as_bytes(signature, "signature"),
            as_bytes(public_key, "public_key"),
            CLOCK_OBJECT_ID,
        ],
        [config.coin_type],
    )
    return tx


def mint_with_fee(
    ledger: LedgerClient,
    config: AdminConfig,
    signer: Signer,
    payload: BytesArg,
    proof: BytesArg,
    fee_payload: BytesArg,
    signature: BytesArg,
    public_key: BytesArg,
    *,
    wait: bool = False,
) -> ExecutionResult:
    tx = build_mint_with_fee(config, payload, proof, fee_payload, signature, public_key)
    return submit(ledger, tx, signer, action="mint with fee", wait=wait)
