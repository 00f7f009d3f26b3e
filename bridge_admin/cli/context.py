"""
Shared state and helpers for the `bridge-admin` command groups.

The root callback stores a `Ctx` in `ctx.obj`. Configuration is loaded on
first use, so `--help` and purely offline commands never touch the
environment files or the network.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer

from ..actions.base import submit
from ..config import AdminConfig
from ..rpc.ledger import LedgerClient
from ..signers import SignerConfig
from ..tx.build import TransactionBuilder
from ..tx.encode import transaction_digest
from ..utils.bytes import from_b64, to_b64, to_hex

log = logging.getLogger(__name__)

__all__ = [
    "Ctx",
    "print_json",
    "run_action",
    "read_tx_bytes",
    "wait_option",
    "out_option",
]

SIGNER_KINDS = ("multisig", "simple")


@dataclass
class Ctx:
    env_files: List[str]
    rpc: Optional[str] = None
    signer: str = "multisig"
    _config: Optional[AdminConfig] = field(default=None, repr=False)

    @property
    def config(self) -> AdminConfig:
        if self._config is None:
            cfg = AdminConfig.from_env(self.env_files)
            if self.rpc:
                cfg = cfg.with_overrides(rpc_url=self.rpc)
            self._config = cfg
        return self._config

    def ledger(self) -> LedgerClient:
        cfg = self.config
        return LedgerClient.connect(cfg.rpc_url, timeout=cfg.request_timeout)

    def signer_config(self) -> SignerConfig:
        return self.config.signer_config(simple=self.signer == "simple")


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return to_hex(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False, default=_json_default))


def wait_option() -> Any:
    return typer.Option(False, "--wait", help="Poll the fullnode until the transaction is final.")


def out_option() -> Any:
    return typer.Option(
        None,
        "--out",
        help="Do not sign: write the unsigned transaction (base64) for the multisig sender to this file.",
        dir_okay=False,
    )


def read_tx_bytes(source: str) -> bytes:
    """Transaction bytes from a file holding base64, or from base64 given inline."""
    text = Path(source).read_text(encoding="utf-8") if os.path.isfile(source) else source
    try:
        return from_b64(text)
    except ValueError as e:
        raise typer.BadParameter(f"{source!r} is neither a file nor base64 transaction bytes ({e})") from None


def run_action(
    ctx: typer.Context,
    build: Callable[[AdminConfig], TransactionBuilder],
    *,
    action: str,
    wait: bool = False,
    out: Optional[Path] = None,
) -> None:
    """
    Build the transaction from the loaded config, then either sign and submit
    it with the selected signer, or (with `out`) write the unsigned bytes for
    the multisig sender so each participant can sign offline.
    """
    c: Ctx = ctx.obj
    cfg = c.config
    tx = build(cfg)

    if out is not None:
        sender = cfg.multisig_public_key().address
        tx.set_sender(sender)
        with c.ledger() as ledger:
            tx_bytes = tx.build(ledger)
        out.write_text(to_b64(tx_bytes) + "\n", encoding="utf-8")
        log.info("cli: wrote unsigned %s to %s", action, out)
        print_json(
            {"action": action, "sender": sender, "digest": transaction_digest(tx_bytes), "file": str(out)}
        )
        return

    signer = c.signer_config()
    with c.ledger() as ledger:
        result = submit(ledger, tx, signer, action=action, wait=wait)
    print_json(result.to_dict())
    result.raise_for_status()
