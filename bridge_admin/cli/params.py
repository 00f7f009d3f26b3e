"""
`bridge-admin params`: treasury parameters.

    $ bridge-admin params set mint_fee 1000
    $ bridge-admin params set treasury_address 0xabc...
    $ bridge-admin params get chain_id
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from ..actions import params
from ..errors import ConfigurationError
from .context import Ctx, out_option, print_json, run_action, wait_option

app = typer.Typer(help="Treasury parameters: " + ", ".join(params.PARAMETERS), no_args_is_help=True)

__all__ = ["app"]


def _parse_value(name: str, raw: str) -> Any:
    if params.parameter_type(name) == "address":
        return raw
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigurationError(f"{name} expects an integer, got {raw!r}", field=name) from None


@app.command("set")
def set_(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Parameter name."),
    value: str = typer.Argument(..., help="New value (integers may be 0x-prefixed)."),
    wait: bool = wait_option(),
    out: Optional[Path] = out_option(),
) -> None:
    """Set treasury parameter NAME to VALUE."""
    parsed = _parse_value(name, value)
    run_action(
        ctx,
        lambda cfg: params.build_set_parameter(cfg, name, parsed),
        action=f"set {name} = {value}",
        wait=wait,
        out=out,
    )


@app.command("get")
def get(ctx: typer.Context, name: str = typer.Argument(..., help="Parameter name.")) -> None:
    """Read treasury parameter NAME."""
    c: Ctx = ctx.obj
    with c.ledger() as ledger:
        value = params.get_parameter(ledger, c.config, name)
    print_json({"name": name, "value": value})
