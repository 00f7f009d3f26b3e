"""`bridge-admin pause`: global pause, withdrawal and Bascule switches."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from ..actions import pause
from ..config import AdminConfig
from ..tx.build import TransactionBuilder
from .context import Ctx, out_option, print_json, run_action, wait_option

app = typer.Typer(help="Global pause, withdrawal and Bascule switches", no_args_is_help=True)

__all__ = ["app"]


def _multisig_args_option() -> Any:
    return typer.Option(
        False,
        "--multisig-args",
        help="Use the entry point that takes the multisig policy as arguments instead of the v2 one.",
    )


def _set_pause(ctx: typer.Context, enabled: bool, multisig_args: bool, wait: bool, out: Optional[Path]) -> None:
    def build(cfg: AdminConfig) -> TransactionBuilder:
        if multisig_args:
            return pause.build_set_global_pause_multisig(cfg, enabled, cfg.multisig_public_key())
        return pause.build_set_global_pause(cfg, enabled)

    verb = "enable" if enabled else "disable"
    run_action(ctx, build, action=f"{verb} global pause", wait=wait, out=out)


@app.command("enable")
def enable(
    ctx: typer.Context,
    multisig_args: bool = _multisig_args_option(),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Turn the global pause on."""
    _set_pause(ctx, True, multisig_args, wait, out)


@app.command("disable")
def disable(
    ctx: typer.Context,
    multisig_args: bool = _multisig_args_option(),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Turn the global pause off."""
    _set_pause(ctx, False, multisig_args, wait, out)


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Whether the global pause is on."""
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        print_json({"global_pause": pause.is_global_pause_enabled(ledger, c.config)})


@app.command("toggle-withdrawal")
def toggle_withdrawal(
    ctx: typer.Context, wait: bool = wait_option(), out: Optional[Path] = out_option()
) -> None:
    run_action(ctx, pause.build_toggle_withdrawal, action="toggle withdrawal", wait=wait, out=out)


@app.command("withdrawal-status")
def withdrawal_status(ctx: typer.Context) -> None:
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        print_json({"withdrawal_enabled": pause.is_withdrawal_enabled(ledger, c.config)})


@app.command("toggle-bascule")
def toggle_bascule(
    ctx: typer.Context, wait: bool = wait_option(), out: Optional[Path] = out_option()
) -> None:
    run_action(ctx, pause.build_toggle_bascule_check, action="toggle bascule check", wait=wait, out=out)


@app.command("bascule-status")
def bascule_status(ctx: typer.Context) -> None:
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        print_json({"bascule_check_enabled": pause.is_bascule_check_enabled(ledger, c.config)})
