"""
`bridge-admin caps`: grant, revoke and query treasury capabilities.

    $ bridge-admin caps add 0xabc... MinterCap --limit 1000000000000
    $ bridge-admin caps has 0xabc... AdminCap
    $ bridge-admin caps witness-add "0x...::test_witness::TestWitness" --limit 1000
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ..actions import capabilities
from .context import Ctx, out_option, print_json, run_action, wait_option

app = typer.Typer(help="Grant, revoke and query capabilities (AdminCap, MinterCap, PauserCap)", no_args_is_help=True)

__all__ = ["app"]


@app.command("add")
def add(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Address receiving the capability."),
    cap_type: str = typer.Argument(..., help="AdminCap, MinterCap or PauserCap."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Mint limit (MinterCap only)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Create a capability and assign it to TARGET."""
    run_action(
        ctx,
        lambda cfg: capabilities.build_add_capability(cfg, target, cap_type, limit),
        action=f"add {cap_type} to {target}",
        wait=wait,
        out=out,
    )


@app.command("remove")
def remove(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Address losing the capability."),
    cap_type: str = typer.Argument(..., help="AdminCap, MinterCap or PauserCap."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Revoke a capability from TARGET."""
    run_action(
        ctx,
        lambda cfg: capabilities.build_remove_capability(cfg, target, cap_type),
        action=f"remove {cap_type} from {target}",
        wait=wait,
        out=out,
    )


@app.command("has")
def has(
    ctx: typer.Context,
    target: str = typer.Argument(...),
    cap_type: str = typer.Argument(...),
) -> None:
    """Whether TARGET holds CAP_TYPE."""
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        held = capabilities.has_cap(ledger, c.config, target, cap_type)
    print_json({"target": target, "capability": cap_type, "held": held})


@app.command("list")
def list_(ctx: typer.Context, target: str = typer.Argument(...)) -> None:
    """Roles held by TARGET."""
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        roles = capabilities.list_capabilities(ledger, c.config, target)
    print_json({"target": target, "roles": roles})


@app.command("witness-add")
def witness_add(
    ctx: typer.Context,
    owner: str = typer.Argument(..., help="Witness type name, e.g. <pkg>::test_witness::TestWitness."),
    limit: int = typer.Option(..., "--limit", help="Mint limit."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Grant a MinterCap to a witness type."""
    run_action(
        ctx,
        lambda cfg: capabilities.build_add_witness_mint_capability(cfg, owner, limit),
        action=f"add witness MinterCap for {owner}",
        wait=wait,
        out=out,
    )


@app.command("witness-has")
def witness_has(ctx: typer.Context, owner: str = typer.Argument(...)) -> None:
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        held = capabilities.witness_has_minter_cap(ledger, c.config, owner)
    print_json({"owner": owner, "held": held})


@app.command("witness-left")
def witness_left(ctx: typer.Context, owner: str = typer.Argument(...)) -> None:
    """Remaining mint allowance of a witness MinterCap."""
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        left = capabilities.get_witness_minter_cap_left(ledger, c.config, owner)
    print_json({"owner": owner, "left": left})
