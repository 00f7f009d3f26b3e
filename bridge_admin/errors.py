"""
Typed error classes for bridge-admin.

Three families are surfaced to operators:

- ConfigurationError: something is wrong locally (environment, multisig
  policy, signer set, capability name). Nothing has been sent.
- RemoteRejectionError: the ledger answered and said no (JSON-RPC error
  object, or an executed transaction whose effects report failure).
- TransportError: the ledger could not be reached or answered garbage.

Every helper in this package raises the first error it meets and never
wraps or retries it, so callers can catch the specific class or the
`BridgeAdminError` base.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

__all__ = [
    "BridgeAdminError",
    "ConfigurationError",
    "InsufficientWeightError",
    "RemoteRejectionError",
    "RpcError",
    "TransactionFailedError",
    "TransportError",
    "BcsError",
    "JsonRpcCode",
    "from_jsonrpc_error",
]


class BridgeAdminError(Exception):
    """Base class for all bridge-admin errors."""


class JsonRpcCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    SERVER_ERROR = -32000
    # Sui fullnode
    TRANSACTION_EXECUTION = -32002
    TRANSIENT = -32050


@dataclass(slots=True, eq=False)
class ConfigurationError(BridgeAdminError):
    """Raised for invalid local configuration: env values, multisig policy, signer sets."""

    message: str
    field: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [{self.field}]" if self.field else ""
        return f"ConfigurationError{where}: {self.message}"


@dataclass(slots=True, eq=False)
class InsufficientWeightError(ConfigurationError):
    """
    Raised when the collected signatures cannot reach the multisig threshold.

    Fields:
      - weight: combined weight of the signatures (or key handles) supplied
      - threshold: weight required by the multisig policy
    """

    weight: int = 0
    threshold: int = 0

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            f"InsufficientWeightError: {self.message} "
            f"(weight={self.weight} threshold={self.threshold})"
        )


@dataclass(slots=True, eq=False)
class RemoteRejectionError(BridgeAdminError):
    """Raised when the ledger rejects a request or a transaction."""

    message: str
    digest: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx={self.digest}" if self.digest else ""
        return f"RemoteRejectionError{suffix}: {self.message}"


@dataclass(slots=True, eq=False)
class RpcError(RemoteRejectionError):
    """Raised when a JSON-RPC call returns an error object."""

    code: int = int(JsonRpcCode.SERVER_ERROR)
    method: Optional[str] = None
    data: Optional[Any] = None
    request_id: Optional[Any] = None
    http_status: Optional[int] = None

    def __str__(self) -> str:
        where = self.method or "rpc"
        text = f"{where} failed ({self.code}): {self.message}"
        if self.http_status is not None and self.http_status != 200:
            text += f" [HTTP {self.http_status}]"
        if self.data is not None:
            text += f" data={self.data!r}"
        return text

    @property
    def code_enum(self) -> Optional[JsonRpcCode]:
        try:
            return JsonRpcCode(self.code)
        except ValueError:
            return None


@dataclass(slots=True, eq=False)
class TransactionFailedError(RemoteRejectionError):
    """
    Raised when a transaction was executed but its effects report failure
    (Move abort, insufficient gas, denied object access).
    """

    effects: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx={self.digest}" if self.digest else ""
        return f"TransactionFailed{suffix}: {self.message}"


@dataclass(slots=True, eq=False)
class TransportError(BridgeAdminError):
    """Raised on network failures, timeouts and non JSON-RPC responses."""

    message: str
    url: Optional[str] = None
    http_status: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        text = f"TransportError: {self.message}"
        if self.url:
            text += f" ({self.url})"
        if self.http_status is not None:
            text += f" [HTTP {self.http_status}]"
        return text


class BcsError(BridgeAdminError, ValueError):
    """Raised when BCS encoding or decoding fails."""


def from_jsonrpc_error(
    err_obj: Dict[str, Any],
    *,
    method: Optional[str] = None,
    request_id: Optional[Any] = None,
    http_status: Optional[int] = None,
) -> RpcError:
    """Build an RpcError from the `error` member of a JSON-RPC response."""
    return RpcError(
        message=str(err_obj.get("message") or "fullnode returned an error without a message"),
        code=int(err_obj.get("code", JsonRpcCode.SERVER_ERROR)),
        method=method,
        data=err_obj.get("data"),
        request_id=request_id,
        http_status=http_status,
    )

