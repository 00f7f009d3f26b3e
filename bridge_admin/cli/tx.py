"""
`bridge-admin tx`: offline multisig workflow.

1. Any state-mutating command run with `--out tx_bytes` writes the unsigned
   transaction for the multisig sender.
2. Each operator checks it with `tx inspect tx_bytes` and signs it with
   `tx sign tx_bytes --participant N` on their own machine.
3. Someone gathers the partial signatures and runs
   `tx combine tx_bytes SIG...` (or `tx execute tx_bytes SIG... --combine`).

SOURCE arguments are a file holding base64 transaction bytes, or the base64
text itself.
"""

from __future__ import annotations

from typing import Any, List

import typer

from ..multisig import SignatureSet
from ..tx.encode import TransactionData, transaction_digest
from ..tx.send import execute_transaction, get_transaction, wait_for_transaction
from .context import Ctx, print_json, read_tx_bytes, wait_option

app = typer.Typer(help="Inspect, sign, combine and execute transaction bytes", no_args_is_help=True)

__all__ = ["app"]


def _source_argument() -> Any:
    return typer.Argument("tx_bytes", help="File with base64 transaction bytes, or the base64 itself.")


def _collect(ctx: typer.Context, tx_bytes: bytes, signatures: List[str]) -> SignatureSet:
    c: Ctx = ctx.obj
    sigs = SignatureSet(c.config.multisig_public_key(), tx_bytes)
    for s in signatures:
        sigs.add_serialized(s)
    return sigs


@app.command("inspect")
def inspect(source: str = _source_argument()) -> None:
    """Decode transaction bytes: sender, gas, inputs, commands and expiration."""
    tx_bytes = read_tx_bytes(source)
    out = TransactionData.from_bytes(tx_bytes).to_dict()
    out["digest"] = transaction_digest(tx_bytes)
    print_json(out)


@app.command("sign")
def sign(
    ctx: typer.Context,
    source: str = _source_argument(),
    participant: int = typer.Option(1, "--participant", "-p", help="USER_<n> whose secret key signs (1-based)."),
) -> None:
    """Sign the bytes with one participant key; prints the partial signature."""
    c: Ctx = ctx.obj
    parts = c.config.participants
    if not 1 <= participant <= len(parts):
        raise typer.BadParameter(f"participant must be in 1..{len(parts)}, got {participant}")
    keypair = parts[participant - 1].keypair
    if keypair is None:
        raise typer.BadParameter(f"USER_{participant}_SK is not configured")
    tx_bytes = read_tx_bytes(source)
    print_json(
        {
            "participant": participant,
            "address": keypair.address,
            "digest": transaction_digest(tx_bytes),
            "signature": keypair.sign_transaction(tx_bytes),
        }
    )


@app.command("combine")
def combine(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="File with base64 transaction bytes, or the base64 itself."),
    signatures: List[str] = typer.Argument(..., help="Partial signatures from `tx sign`."),
) -> None:
    """Combine partial signatures into the multisig signature."""
    sigs = _collect(ctx, read_tx_bytes(source), signatures)
    print_json(
        {
            "weight": sigs.weight,
            "threshold": sigs.multisig_pk.threshold,
            "signers": [pk.to_sui_address() for pk in sigs.signers()],
            "signature": sigs.combine(),
        }
    )


@app.command("execute")
def execute(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="File with base64 transaction bytes, or the base64 itself."),
    signatures: List[str] = typer.Argument(..., help="Serialized signature(s) to submit."),
    combine_first: bool = typer.Option(
        False, "--combine", help="Treat SIGNATURES as partial signatures and combine them first."
    ),
    wait: bool = wait_option(),
) -> None:
    """Submit signed transaction bytes once."""
    c: Ctx = ctx.obj
    tx_bytes = read_tx_bytes(source)
    final = [_collect(ctx, tx_bytes, signatures).combine()] if combine_first else list(signatures)
    with c.ledger() as ledger:
        result = execute_transaction(ledger, tx_bytes, final)
        if wait:
            wait_for_transaction(ledger, result.digest)
    print_json(result.to_dict())
    result.raise_for_status()


@app.command("status")
def status(
    ctx: typer.Context,
    digest: str = typer.Argument(...),
    wait: bool = wait_option(),
    timeout: float = typer.Option(60.0, "--timeout", help="Seconds to wait with --wait."),
) -> None:
    """Look up an executed transaction by digest."""
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        if wait:
            res = wait_for_transaction(ledger, digest, timeout_s=timeout)
        else:
            res = get_transaction(ledger, digest)
    if res is None:
        print_json({"digest": digest, "found": False})
        raise typer.Exit(code=1)
    print_json(res)
