"""
Version helpers for bridge-admin.
We keep a static __version__ (PEP 440) and expose a small structured view of
it together with the installed interpreter, used by `bridge-admin version`.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass

# Bump this when publishing
__version__ = "0.3.0"


@dataclass(frozen=True)
class VersionInfo:
    base: str
    python: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.base} (python {self.python})"


def version_info() -> VersionInfo:
    """Structured version info (package version plus interpreter version)."""
    return VersionInfo(base=__version__, python=platform.python_version())


def version() -> str:
    """Human-friendly string, e.g. '0.3.0 (python 3.12.1)'."""
    return str(version_info())


__all__ = ["__version__", "VersionInfo", "version_info", "version"]
