"""
Result types returned by the ledger helpers.

Both wrap the raw JSON-RPC response and expose only what operators act on:
status, digest, object ids, decoded return values. The raw payload is kept
for logging and `--json` output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import TransactionFailedError
from .move import decode_value

__all__ = ["ExecutionResult", "DevInspectResult", "ReturnValue"]

ReturnValue = Tuple[bytes, str]


def _status(effects: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    st = effects.get("status") or {}
    return st.get("status"), st.get("error")


@dataclass
class ExecutionResult:
    """Outcome of `sui_executeTransactionBlock`."""

    digest: str
    status: Optional[str] = None
    error: Optional[str] = None
    effects: Dict[str, Any] = field(default_factory=dict)
    object_changes: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, resp: Dict[str, Any]) -> "ExecutionResult":
        effects = resp.get("effects") or {}
        status, error = _status(effects)
        return cls(
            digest=str(resp.get("digest", "")),
            status=status,
            error=error,
            effects=effects,
            object_changes=list(resp.get("objectChanges") or []),
            raw=resp,
        )

    @property
    def success(self) -> bool:
        return self.status == "success"

    def raise_for_status(self) -> "ExecutionResult":
        """Raise TransactionFailedError when the effects report a failure; return self otherwise."""
        if self.status == "failure":
            raise TransactionFailedError(
                message=self.error or "transaction failed",
                digest=self.digest,
                effects=self.effects,
            )
        return self

    def _changes(self, kind: str, type_contains: Optional[str]) -> List[str]:
        out = []
        for ch in self.object_changes:
            if ch.get("type") != kind:
                continue
            if type_contains and type_contains not in str(ch.get("objectType", "")):
                continue
            if "objectId" in ch:
                out.append(ch["objectId"])
        return out

    def created_ids(self, type_contains: Optional[str] = None) -> List[str]:
        """
        Ids of created objects, optionally filtered by a substring of their type
        (e.g. "::coin::Coin<"). Falls back to effects when object changes were not requested.
        """
        if self.object_changes or type_contains:
            return self._changes("created", type_contains)
        return [
            c["reference"]["objectId"]
            for c in self.effects.get("created") or []
            if "reference" in c
        ]

    def mutated_ids(self, type_contains: Optional[str] = None) -> List[str]:
        if self.object_changes or type_contains:
            return self._changes("mutated", type_contains)
        return [
            c["reference"]["objectId"]
            for c in self.effects.get("mutated") or []
            if "reference" in c
        ]

    def deleted_ids(self) -> List[str]:
        return [d["objectId"] for d in self.effects.get("deleted") or [] if "objectId" in d]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "digest": self.digest,
            "status": self.status,
            "error": self.error,
            "created": self.created_ids(),
            "mutated": self.mutated_ids(),
            "deleted": self.deleted_ids(),
        }


@dataclass
class DevInspectResult:
    """Outcome of `sui_devInspectTransactionBlock`: a read-only simulation."""

    status: Optional[str] = None
    error: Optional[str] = None
    results: List[List[ReturnValue]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, resp: Dict[str, Any]) -> "DevInspectResult":
        status, error = _status(resp.get("effects") or {})
        results: List[List[ReturnValue]] = []
        for cmd in resp.get("results") or []:
            values = []
            for data, type_str in cmd.get("returnValues") or []:
                values.append((bytes(data), str(type_str)))
            results.append(values)
        return cls(status=status, error=resp.get("error") or error, results=results, raw=resp)

    @property
    def success(self) -> bool:
        return self.status == "success" and not self.error

    def raise_for_status(self) -> "DevInspectResult":
        if not self.success:
            raise TransactionFailedError(message=self.error or f"dev-inspect status {self.status}")
        return self

    def return_values(self, command: int = -1) -> List[ReturnValue]:
        if not self.results:
            return []
        return self.results[command]

    def decoded(self, command: int = -1) -> List[Any]:
        """Decode every return value of `command` (default: the last one) using its Move type."""
        return [decode_value(t, data) for data, t in self.return_values(command)]

    def value(self, command: int = -1, index: int = 0) -> Any:
        values = self.return_values(command)
        if index >= len(values):
            raise TransactionFailedError(
                message=f"command {command} returned {len(values)} values, wanted index {index}"
            )
        data, type_str = values[index]
        return decode_value(type_str, data)
