"""
`bridge-admin multisig`: the aggregate key and address.

`address` and `info` use the participants configured through USER_<n>_PK /
USER_<n>_WEIGHT and MULTISIG_THRESHOLD; `compose` takes them on the command
line and reads no configuration.

    $ bridge-admin multisig compose <pk1>:1 <pk2>:1 --threshold 2
"""

from __future__ import annotations

from typing import List

import typer

from ..crypto.keys import Ed25519PublicKey
from ..multisig import Participant, compose_multisig
from .context import Ctx, print_json

app = typer.Typer(help="Multisig address and policy", no_args_is_help=True)

__all__ = ["app"]


def _parse_participant(item: str) -> Participant:
    key, sep, weight = item.rpartition(":")
    if not sep:
        return Participant(Ed25519PublicKey.parse(item), 1)
    try:
        return Participant(Ed25519PublicKey.parse(key), int(weight))
    except ValueError:
        raise typer.BadParameter(f"participant must be PK[:WEIGHT], got {item!r}") from None


@app.command("address")
def address(ctx: typer.Context) -> None:
    """The configured multisig address."""
    c: Ctx = ctx.obj
    print_json({"address": c.config.multisig_public_key().address})


@app.command("info")
def info(ctx: typer.Context) -> None:
    """Participants, weights, threshold and address of the configured multisig."""
    c: Ctx = ctx.obj
    pk = c.config.multisig_public_key()
    out = pk.to_dict()
    out["public_key"] = pk.to_base64()
    print_json(out)


@app.command("compose")
def compose(
    participants: List[str] = typer.Argument(..., help="Participant public keys (base64 or 0x-hex), PK[:WEIGHT]."),
    threshold: int = typer.Option(..., "--threshold", "-t", help="Signing threshold."),
) -> None:
    """Compose a multisig from explicit keys. Order matters: it changes the address."""
    pk = compose_multisig([_parse_participant(p) for p in participants], threshold)
    print_json(pk.to_dict())
