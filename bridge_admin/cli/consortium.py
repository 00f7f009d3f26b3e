"""`bridge-admin consortium`: validator sets, admins and payload validation."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ..actions import consortium
from .context import Ctx, out_option, print_json, run_action, wait_option

app = typer.Typer(help="Consortium validator sets, admins and payloads", no_args_is_help=True)

__all__ = ["app"]


@app.command("add-admin")
def add_admin(
    ctx: typer.Context,
    admin: str = typer.Argument(...),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    run_action(ctx, lambda cfg: consortium.build_add_admin(cfg, admin), action=f"add admin {admin}", wait=wait, out=out)


@app.command("remove-admin")
def remove_admin(
    ctx: typer.Context,
    admin: str = typer.Argument(...),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    run_action(
        ctx, lambda cfg: consortium.build_remove_admin(cfg, admin), action=f"remove admin {admin}", wait=wait, out=out
    )


@app.command("init-valset")
def init_valset(
    ctx: typer.Context,
    valset: str = typer.Argument(..., help="Initial validator set payload (hex)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Install the first validator set."""
    run_action(
        ctx,
        lambda cfg: consortium.build_set_initial_validator_set(cfg, valset),
        action="set initial validator set",
        wait=wait,
        out=out,
    )


@app.command("next-valset")
def next_valset(
    ctx: typer.Context,
    payload: str = typer.Argument(..., help="Next validator set payload (hex)."),
    proof: str = typer.Argument(..., help="Signatures of the current set (hex)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Rotate to the next validator set."""
    run_action(
        ctx,
        lambda cfg: consortium.build_set_next_validator_set(cfg, payload, proof),
        action="set next validator set",
        wait=wait,
        out=out,
    )


@app.command("valset-action")
def valset_action(
    ctx: typer.Context,
    action: str = typer.Argument(..., help="Action selector (u32, may be 0x-prefixed)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    try:
        selector = int(action, 0)
    except ValueError:
        raise typer.BadParameter(f"action selector must be an integer, got {action!r}") from None
    run_action(
        ctx,
        lambda cfg: consortium.build_set_valset_action(cfg, selector),
        action="set valset action",
        wait=wait,
        out=out,
    )


@app.command("validate")
def validate(
    ctx: typer.Context,
    payload: str = typer.Argument(...),
    proof: str = typer.Argument(...),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Validate PAYLOAD against the current validator set."""
    run_action(
        ctx,
        lambda cfg: consortium.build_validate_payload(cfg, payload, proof),
        action="validate payload",
        wait=wait,
        out=out,
    )


@app.command("epoch")
def epoch(ctx: typer.Context) -> None:
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        print_json({"epoch": consortium.get_epoch(ledger, c.config)})


@app.command("payload-used")
def payload_used(
    ctx: typer.Context,
    payload_hash: str = typer.Argument(..., help="sha256 of the payload (hex)."),
) -> None:
    """Whether a payload was already consumed."""
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        used = consortium.is_payload_used(ledger, c.config, payload_hash)
    print_json({"payload_hash": payload_hash, "used": used})
