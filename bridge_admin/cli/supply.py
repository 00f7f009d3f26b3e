"""
`bridge-admin supply`: mint, burn, redeem and claim.

Byte arguments (txid, payloads, proofs, scripts, keys) are hex, with or
without `0x`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ..actions import supply
from .context import out_option, run_action, wait_option

app = typer.Typer(help="Mint, burn, redeem and claim LBTC", no_args_is_help=True)

__all__ = ["app"]


@app.command("mint")
def mint(
    ctx: typer.Context,
    recipient: str = typer.Argument(..., help="Recipient address."),
    amount: int = typer.Argument(..., help="Amount in the coin's base unit (1 LBTC = 10^8)."),
    txid: str = typer.Option(..., "--txid", help="Deposit transaction id (hex)."),
    idx: int = typer.Option(0, "--idx", help="Deposit output index."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Mint AMOUNT to RECIPIENT, authorized by the configured multisig policy."""
    run_action(
        ctx,
        lambda cfg: supply.build_mint_and_transfer(
            cfg, amount, recipient, txid, idx, cfg.multisig_public_key()
        ),
        action=f"mint {amount} to {recipient}",
        wait=wait,
        out=out,
    )


@app.command("mint-witness")
def mint_witness(
    ctx: typer.Context,
    recipient: str = typer.Argument(...),
    amount: int = typer.Argument(...),
    witness_package: Optional[str] = typer.Option(
        None, "--witness-package", help="Test witness package (default: TEST_WITNESS_PACKAGE_ID)."
    ),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Mint through a witness MinterCap."""
    run_action(
        ctx,
        lambda cfg: supply.build_mint_with_witness(cfg, amount, recipient, witness_package),
        action=f"mint {amount} with witness to {recipient}",
        wait=wait,
        out=out,
    )


@app.command("burn")
def burn(
    ctx: typer.Context,
    coin_id: str = typer.Argument(..., help="LBTC coin object to burn."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    run_action(ctx, lambda cfg: supply.build_burn(cfg, coin_id), action=f"burn {coin_id}", wait=wait, out=out)


@app.command("redeem")
def redeem(
    ctx: typer.Context,
    coin_id: str = typer.Argument(...),
    script_pubkey: str = typer.Argument(..., help="Bitcoin output script (hex)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Burn COIN_ID and request BTC to SCRIPT_PUBKEY."""
    run_action(
        ctx,
        lambda cfg: supply.build_redeem(cfg, coin_id, script_pubkey),
        action=f"redeem {coin_id}",
        wait=wait,
        out=out,
    )


@app.command("claim")
def claim(
    ctx: typer.Context,
    payload: str = typer.Argument(..., help="Notarized deposit payload (hex)."),
    proof: str = typer.Argument(..., help="Consortium proof (hex)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    run_action(ctx, lambda cfg: supply.build_claim(cfg, payload, proof), action="claim", wait=wait, out=out)


@app.command("mint-with-fee")
def mint_with_fee(
    ctx: typer.Context,
    payload: str = typer.Argument(...),
    proof: str = typer.Argument(...),
    fee_payload: str = typer.Argument(..., help="Fee approval payload signed by the user (hex)."),
    signature: str = typer.Argument(..., help="User signature over FEE_PAYLOAD (hex)."),
    public_key: str = typer.Argument(..., help="User public key (hex)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Auto-claim on the user's behalf, charging the approved fee."""
    run_action(
        ctx,
        lambda cfg: supply.build_mint_with_fee(cfg, payload, proof, fee_payload, signature, public_key),
        action="mint with fee",
        wait=wait,
        out=out,
    )
