"""
bridge_admin.cli.main
=====================

`bridge-admin`: operator CLI for the LBTC bridge contracts on Sui.

Command groups
--------------
- `caps`        capability grants and queries
- `supply`      mint, burn, redeem, claim
- `pause`       global pause, withdrawal and Bascule switches
- `params`      treasury parameters
- `consortium`  validator sets, admins, payload validation
- `multisig`    aggregate key and address
- `tx`          offline inspect / sign / combine / execute
- `scenario`    multi-step flows

Examples
--------
    $ bridge-admin env
    $ bridge-admin --env-file .env.testnet caps has 0xabc... AdminCap
    $ bridge-admin pause enable --wait
    $ bridge-admin supply mint 0xabc... 100000000 --txid abcd --out tx_bytes

Configuration
-------------
Deployment ids and participant keys come from the environment and the
dotenv files given with `--env-file` (default: `.env` and
`.test-witness.env`); see `bridge_admin.config`.

- RPC URL   : `--rpc` or env `SUI_NETWORK` (default: fullnode of `SUI_ENV`)
- Log level : `--log-level` or env `LOG_LEVEL` (default: WARNING)
- Signer    : `--signer multisig|simple` (default: multisig)

Exit codes: 0 success, 1 remote or transport failure, 2 configuration or
usage error.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

import click
import typer

from ..config import ENV_FILES
from ..errors import BcsError, ConfigurationError, RemoteRejectionError, TransportError
from ..version import __version__, version_info
from . import caps, consortium, multisig, params, pause, scenario, supply, tx
from .context import SIGNER_KINDS, Ctx, print_json

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REMOTE = 1
EXIT_CONFIG = 2

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# typer releases that vendor click raise their own copies of click's exception classes
USAGE_ERRORS = tuple(
    {click.ClickException, *(c for c in typer.BadParameter.__mro__ if c.__name__ == "ClickException")}
)
ABORTS = tuple({click.exceptions.Abort, typer.Abort})

app = typer.Typer(
    name="bridge-admin",
    help="LBTC bridge admin CLI: capabilities, supply, pause, parameters and consortium on Sui.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise typer.BadParameter(f"unknown log level {level!r}", param_hint="--log-level")
    if not logging.getLogger().handlers:
        logging.basicConfig(level=numeric, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("bridge_admin").setLevel(numeric)


@app.callback()
def _root(
    ctx: typer.Context,
    env_file: Optional[List[str]] = typer.Option(
        None,
        "--env-file",
        help="Dotenv file(s) to load, in order (default: .env and .test-witness.env).",
    ),
    rpc: Optional[str] = typer.Option(
        None,
        "--rpc",
        help="Fullnode JSON-RPC URL.",
        envvar="SUI_NETWORK",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR.",
        envvar="LOG_LEVEL",
    ),
    signer: str = typer.Option(
        "multisig",
        "--signer",
        help="Sign as the configured multisig, or with the first participant key alone (simple).",
    ),
) -> None:
    """
    Record the effective options; configuration itself is loaded lazily by
    the commands that need it.
    """
    _configure_logging(log_level)
    if signer not in SIGNER_KINDS:
        raise typer.BadParameter(f"expected one of {', '.join(SIGNER_KINDS)}", param_hint="--signer")
    ctx.obj = Ctx(env_files=list(env_file) if env_file else list(ENV_FILES), rpc=rpc, signer=signer)


# --- Built-in lightweight commands -------------------------------------------


@app.command("version")
def version() -> None:
    """Print the CLI version."""
    typer.echo(f"bridge-admin {version_info()}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective configuration (secret keys are never printed)."""
    c: Ctx = ctx.obj
    out = c.config.to_dict()
    out["env_files"] = c.env_files
    out["signer"] = c.signer
    out["version"] = __version__
    print_json(out)


app.add_typer(caps.app, name="caps")
app.add_typer(supply.app, name="supply")
app.add_typer(pause.app, name="pause")
app.add_typer(params.app, name="params")
app.add_typer(consortium.app, name="consortium")
app.add_typer(multisig.app, name="multisig")
app.add_typer(tx.app, name="tx")
app.add_typer(scenario.app, name="scenario")


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rv = app(prog_name="bridge-admin", standalone_mode=False, args=argv)
        return int(rv) if isinstance(rv, int) else EXIT_OK
    except typer.Exit as e:
        return int(e.exit_code)
    except ABORTS:
        typer.echo("aborted", err=True)
        return EXIT_REMOTE
    except USAGE_ERRORS as e:
        # usage errors, including typer.BadParameter
        e.show()
        return EXIT_CONFIG
    except (ConfigurationError, BcsError) as e:
        log.debug("configuration error", exc_info=True)
        typer.echo(f"error: {e}", err=True)
        return EXIT_CONFIG
    except (RemoteRejectionError, TransportError) as e:
        log.debug("remote failure", exc_info=True)
        typer.echo(f"error: {e}", err=True)
        return EXIT_REMOTE
    except Exception as e:
        log.debug("unexpected error", exc_info=True)
        typer.echo(f"error: {e}", err=True)
        return EXIT_REMOTE


def run(argv: Optional[List[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
