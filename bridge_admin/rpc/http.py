"""
HTTP JSON-RPC client (sync).

- httpx under the hood; one client handle reused for the process lifetime.
- One attempt per request. Transport failures raise TransportError and
  JSON-RPC error objects raise RpcError, both unaltered for the caller to
  decide; nothing is retried here.

Example:
    from bridge_admin.rpc.http import RpcClient
    with RpcClient("https://fullnode.devnet.sui.io:443") as rpc:
        price = rpc.call("suix_getReferenceGasPrice")
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

import httpx

from ..errors import RpcError, TransportError, from_jsonrpc_error
from ..version import __version__

log = logging.getLogger(__name__)

JSON = Union[dict, list, str, int, float, bool, None]
Params = Union[Sequence[Any], Mapping[str, Any], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class RpcClient:
    """Synchronous JSON-RPC 2.0 client over HTTP."""

    url: str
    timeout: float = 30.0
    headers: Optional[Mapping[str, str]] = None
    _id_counter: Iterator[int] = field(default_factory=lambda: count(start=_now_ms()))
    _client: Optional[httpx.Client] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        sent_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "User-Agent": f"bridge-admin/{__version__}",
            "Client-Sdk-Type": "bridge-admin-python",
            "Client-Sdk-Version": __version__,
        }
        sent_headers.update(self.headers or {})
        self._client = httpx.Client(timeout=self.timeout, headers=sent_headers)

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # --- public API ------------------------------------------------------

    def call(self, method: str, params: Params = None, *, id: Optional[Union[int, str]] = None) -> JSON:
        """Perform a single JSON-RPC request and return `result` or raise."""
        payload = self._make_payload(method, params, id)
        started = time.monotonic()
        resp, status = self._post(payload)
        log.debug("rpc: %s id=%s http=%d %.1fms", method, payload["id"], status, (time.monotonic() - started) * 1000)
        return self._handle_response(method, resp, status)

    # --- internals -------------------------------------------------------

    def _make_payload(self, method: str, params: Params, id: Optional[Union[int, str]] = None) -> Dict[str, Any]:
        # Sui methods take positional params; a bare scalar becomes a one-element list
        wire: Any
        if params is None:
            wire = []
        elif isinstance(params, Mapping):
            wire = dict(params)
        elif isinstance(params, (str, bytes, bytearray)) or not isinstance(params, Sequence):
            wire = [params]
        else:
            wire = list(params)
        return {
            "jsonrpc": "2.0",
            "id": next(self._id_counter) if id is None else id,
            "method": method,
            "params": wire,
        }

    def _post(self, payload: Dict[str, Any]) -> Tuple[JSON, int]:
        if self._client is None:
            raise TransportError("client is closed", url=self.url)
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        try:
            r = self._client.post(self.url, content=body)
        except httpx.TimeoutException as e:
            raise TransportError(f"timeout after {self.timeout}s: {e}", url=self.url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"network error: {e}", url=self.url) from e
        # Avoid raise_for_status() so a JSON-RPC error body on 4xx/5xx stays visible
        try:
            return r.json(), r.status_code
        except ValueError as e:
            raise TransportError(
                f"non-JSON response from RPC: {r.text[:256]!r}", url=self.url, http_status=r.status_code
            ) from e

    def _handle_response(self, method: str, resp: JSON, status: int) -> JSON:
        if not isinstance(resp, dict):
            raise TransportError(
                f"invalid JSON-RPC response type {type(resp).__name__}", url=self.url, http_status=status
            )
        if resp.get("error") is not None:
            err = resp["error"] if isinstance(resp["error"], dict) else {"message": str(resp["error"])}
            raise from_jsonrpc_error(err, method=method, request_id=resp.get("id"), http_status=status)
        if "result" not in resp:
            if status >= 400:
                raise TransportError(f"HTTP {status} without JSON-RPC body", url=self.url, http_status=status)
            raise RpcError(message="malformed JSON-RPC response (no result)", method=method, data=resp)
        return resp["result"]


__all__ = ["RpcClient", "JSON", "Params"]
