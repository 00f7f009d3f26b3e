"""
bridge_admin.cli
================

Command-line interface for the bridge admin tooling.

Exposed through the `bridge-admin` console script. Typer and the command
modules are only imported when the CLI is actually used, so plain library
imports of `bridge_admin` stay light.

Quick usage
-----------
- From Python:
    >>> from bridge_admin.cli import run
    >>> run(["multisig", "address"])

- From shell:
    $ bridge-admin --help
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List, Optional

from ..version import __version__

__all__: List[str] = [
    "__version__",
    "run",
    "app",  # Typer app (lazy)
]

_SUBMODULE = "bridge_admin.cli.main"
_EXPOSE = ("app",)


def _load() -> Any:
    return import_module(_SUBMODULE)


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name in _EXPOSE:
        return getattr(_load(), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> List[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))


def run(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its process exit code."""
    return int(_load().main(argv))
