"""
`bridge-admin scenario`: multi-step operator flows.

Steps are submitted back to back; pass `--wait` to poll for each step to be
final before the next one.
"""

from __future__ import annotations

from typing import Optional

import typer

from ..actions import scenarios
from ..config import ONE_LBTC
from .context import Ctx, print_json, wait_option

app = typer.Typer(help="Multi-step flows (mint setup, validator rotation)", no_args_is_help=True)

__all__ = ["app"]


@app.command("mint")
def mint(
    ctx: typer.Context,
    recipient: str = typer.Argument(...),
    amount: int = typer.Option(ONE_LBTC, "--amount", help="Amount to mint (default 1 LBTC)."),
    txid: str = typer.Option(scenarios.DEPOSIT_TXID.hex(), "--txid", help="Deposit transaction id (hex)."),
    idx: int = typer.Option(0, "--idx"),
    mint_limit: int = typer.Option(scenarios.DEFAULT_MINT_LIMIT, "--mint-limit", help="Limit of a new MinterCap."),
    wait: bool = wait_option(),
) -> None:
    """Check AdminCap, grant a MinterCap if missing, check the pause, then mint."""
    c: Ctx = ctx.obj
    signer = c.signer_config()
    with c.ledger() as ledger:
        report = scenarios.ensure_minter_and_mint(
            ledger, c.config, signer, recipient, amount=amount, txid=txid, idx=idx, mint_limit=mint_limit, wait=wait
        )
    print_json(report.to_dict())
    if not report.completed:
        raise typer.Exit(code=1)


@app.command("rotate")
def rotate(
    ctx: typer.Context,
    valset_payload: str = typer.Option(..., "--valset-payload", help="Next validator set payload (hex)."),
    valset_proof: str = typer.Option(..., "--valset-proof", help="Proof by the current set (hex)."),
    payload: str = typer.Option(..., "--payload", help="Payload to validate (hex)."),
    proof: str = typer.Option(..., "--proof", help="Proof by the new set (hex)."),
    payload_hash: str = typer.Option(..., "--payload-hash", help="sha256 of the payload (hex)."),
    inspect_sender: Optional[str] = typer.Option(
        None, "--inspect-sender", help="Sender of the read-only payload lookup (default: the signer)."
    ),
    wait: bool = wait_option(),
) -> None:
    """Install the next validator set, validate a payload, check it is recorded."""
    c: Ctx = ctx.obj
    signer = c.signer_config()
    with c.ledger() as ledger:
        report = scenarios.rotate_validators_and_validate(
            ledger,
            c.config,
            signer,
            valset_payload,
            valset_proof,
            payload,
            proof,
            payload_hash,
            inspect_sender=inspect_sender,
            wait=wait,
        )
    print_json(report.to_dict())
