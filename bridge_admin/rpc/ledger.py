"""
Typed wrappers over the fullnode JSON-RPC methods the admin tooling uses.

Every method is a single `RpcClient.call`; errors propagate untouched.
Numbers the fullnode renders as decimal strings (u64 versions, balances,
gas price) are converted to int here.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..types.core import DevInspectResult
from ..types.move import normalize_address
from ..utils.bytes import to_b64
from .http import RpcClient

__all__ = ["LedgerClient", "SUI_COIN_TYPE", "DEFAULT_EXECUTE_OPTIONS"]

SUI_COIN_TYPE = "0x2::sui::SUI"

DEFAULT_EXECUTE_OPTIONS: Dict[str, bool] = {
    "showEffects": True,
    "showObjectChanges": True,
}


class LedgerClient:
    """Remote ledger handle: the only component that talks to the network."""

    def __init__(self, rpc: RpcClient) -> None:
        self.rpc = rpc

    @classmethod
    def connect(cls, url: str, *, timeout: float = 30.0) -> "LedgerClient":
        return cls(RpcClient(url, timeout=timeout))

    def __enter__(self) -> "LedgerClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self.rpc.close()

    # --- reads -------------------------------------------------------------

    def multi_get_objects(self, object_ids: Sequence[str], *, show_owner: bool = True) -> List[Dict[str, Any]]:
        ids = [normalize_address(i) for i in object_ids]
        res = self.rpc.call("sui_multiGetObjects", [ids, {"showOwner": show_owner, "showType": True}])
        return list(res or [])  # type: ignore[arg-type]

    def get_reference_gas_price(self) -> int:
        return int(self.rpc.call("suix_getReferenceGasPrice", []))  # type: ignore[arg-type]

    def get_coins(
        self,
        owner: str,
        coin_type: str = SUI_COIN_TYPE,
        *,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        res = self.rpc.call("suix_getCoins", [normalize_address(owner), coin_type, cursor, limit])
        return dict(res or {})  # type: ignore[arg-type]

    def get_transaction(self, digest: str, *, show_effects: bool = True) -> Dict[str, Any]:
        res = self.rpc.call("sui_getTransactionBlock", [digest, {"showEffects": show_effects}])
        return dict(res or {})  # type: ignore[arg-type]

    # --- simulation --------------------------------------------------------

    def dry_run(self, tx_bytes: bytes) -> Dict[str, Any]:
        res = self.rpc.call("sui_dryRunTransactionBlock", [to_b64(tx_bytes)])
        return dict(res or {})  # type: ignore[arg-type]

    def dev_inspect(
        self,
        sender: str,
        tx_kind_bytes: bytes,
        *,
        gas_price: Optional[int] = None,
        epoch: Optional[int] = None,
    ) -> DevInspectResult:
        params: List[Any] = [normalize_address(sender), to_b64(tx_kind_bytes)]
        if gas_price is not None or epoch is not None:
            params.append(str(gas_price) if gas_price is not None else None)
            params.append(str(epoch) if epoch is not None else None)
        res = self.rpc.call("sui_devInspectTransactionBlock", params)
        return DevInspectResult.from_response(dict(res or {}))  # type: ignore[arg-type]

    # --- writes ------------------------------------------------------------

    def execute(
        self,
        tx_bytes: bytes,
        signatures: Sequence[str],
        *,
        options: Optional[Dict[str, bool]] = None,
        request_type: str = "WaitForLocalExecution",
    ) -> Dict[str, Any]:
        res = self.rpc.call(
            "sui_executeTransactionBlock",
            [to_b64(tx_bytes), list(signatures), dict(options or DEFAULT_EXECUTE_OPTIONS), request_type],
        )
        return dict(res or {})  # type: ignore[arg-type]
