from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from bridge_admin.config import AdminConfig, ParticipantConfig
from bridge_admin.crypto.keys import Ed25519Keypair
from bridge_admin.errors import RpcError
from bridge_admin.rpc.ledger import LedgerClient
from bridge_admin.tx.encode import transaction_digest
from bridge_admin.types.move import encode_pure
from bridge_admin.utils.base58 import b58encode
from bridge_admin.utils.bytes import from_b64

RPC_URL = "http://fullnode.test"

PACKAGE_ID = "0x" + "a1" * 32
TREASURY_ID = "0x" + "b2" * 32
CONSORTIUM_ID = "0x" + "c3" * 32
BASCULE_ID = "0x" + "d4" * 32
WITNESS_PACKAGE_ID = "0x" + "e5" * 32
GAS_COIN_ID = "0x" + "f6" * 32

DIGEST = b58encode(bytes([7]) * 32)
GAS_PRICE = 1000


def shared_object(object_id: str, initial_shared_version: int = 11) -> Dict[str, Any]:
    return {
        "data": {
            "objectId": object_id,
            "version": "42",
            "digest": DIGEST,
            "owner": {"Shared": {"initial_shared_version": initial_shared_version}},
        }
    }


def owned_object(object_id: str, owner: str, version: int = 9) -> Dict[str, Any]:
    return {
        "data": {
            "objectId": object_id,
            "version": str(version),
            "digest": DIGEST,
            "owner": {"AddressOwner": owner},
        }
    }


def dev_inspect_response(type_str: str, value: Any) -> Dict[str, Any]:
    """A successful dev-inspect whose single command returns `value` of Move type `type_str`."""
    data = list(encode_pure(type_str, value))
    return {
        "effects": {"status": {"status": "success"}},
        "results": [{"returnValues": [[data, type_str]]}],
    }


class RecordingRpc:
    """
    In-memory stand-in for RpcClient: answers from a method -> response table
    and records every call. A response may be a value, a callable taking the
    params, or an exception instance to raise.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.responses: Dict[str, Any] = dict(responses or {})
        self.closed = False

    def call(self, method: str, params: Any = None) -> Any:
        self.calls.append((method, params))
        if method not in self.responses:
            raise AssertionError(f"unexpected RPC call {method}")
        r = self.responses[method]
        if isinstance(r, Exception):
            raise r
        if callable(r):
            return r(params)
        return r

    def close(self) -> None:
        self.closed = True

    def methods(self) -> List[str]:
        return [m for m, _ in self.calls]

    def params_of(self, method: str) -> List[Any]:
        return [p for m, p in self.calls if m == method]


def _execute_ok(params: Any) -> Dict[str, Any]:
    return {
        "digest": transaction_digest(from_b64(params[0])),
        "effects": {"status": {"status": "success"}},
        "objectChanges": [],
    }


def default_responses(owned: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    A fullnode where every object is shared unless listed in `owned`
    (object id -> owner), gas is cheap, and executions succeed.
    """
    owned = dict(owned or {})

    def _objects(params: Any) -> List[Dict[str, Any]]:
        return [owned_object(i, owned[i]) if i in owned else shared_object(i) for i in params[0]]

    return {
        "sui_multiGetObjects": _objects,
        "suix_getReferenceGasPrice": str(GAS_PRICE),
        "suix_getCoins": {
            "data": [{"coinObjectId": GAS_COIN_ID, "version": "5", "digest": DIGEST, "balance": "1000000000"}],
            "hasNextPage": False,
        },
        "sui_dryRunTransactionBlock": {
            "effects": {
                "status": {"status": "success"},
                "gasUsed": {"computationCost": "1000000", "storageCost": "2000000", "storageRebate": "500000"},
            }
        },
        "sui_executeTransactionBlock": _execute_ok,
        "sui_getTransactionBlock": lambda params: {"digest": params[0]},
    }


@pytest.fixture
def rpc() -> RecordingRpc:
    return RecordingRpc(default_responses())


@pytest.fixture
def ledger(rpc: RecordingRpc) -> LedgerClient:
    return LedgerClient(rpc)  # type: ignore[arg-type]


# --- keys & config -----------------------------------------------------------------


def keypair(n: int) -> Ed25519Keypair:
    return Ed25519Keypair.from_secret_key(bytes([n]) * 32)


@pytest.fixture
def alice() -> Ed25519Keypair:
    return keypair(1)


@pytest.fixture
def bob() -> Ed25519Keypair:
    return keypair(2)


@pytest.fixture
def carol() -> Ed25519Keypair:
    return keypair(3)


@pytest.fixture
def config(alice: Ed25519Keypair, bob: Ed25519Keypair) -> AdminConfig:
    """2-of-2 multisig over alice and bob with every deployment id configured."""
    return AdminConfig(
        rpc_url=RPC_URL,
        package_id=PACKAGE_ID,
        treasury_id=TREASURY_ID,
        consortium_id=CONSORTIUM_ID,
        bascule_id=BASCULE_ID,
        test_witness_package_id=WITNESS_PACKAGE_ID,
        threshold=2,
        participants=(
            ParticipantConfig(alice.public_key, 1, alice),
            ParticipantConfig(bob.public_key, 1, bob),
        ),
    )


@pytest.fixture
def env_vars(alice: Ed25519Keypair, bob: Ed25519Keypair) -> Dict[str, str]:
    return {
        "SUI_NETWORK": RPC_URL,
        "PACKAGE_ID": PACKAGE_ID,
        "SHARED_CONTROLLED_TREASURY": TREASURY_ID,
        "SHARED_CONSORTIUM": CONSORTIUM_ID,
        "SHARED_BASCULE": BASCULE_ID,
        "TEST_WITNESS_PACKAGE_ID": WITNESS_PACKAGE_ID,
        "MULTISIG_THRESHOLD": "2",
        "USER_1_SK": alice.export_secret_key(),
        "USER_1_PK": alice.public_key.to_base64(),
        "USER_2_SK": bob.export_secret_key(),
    }


# --- HTTP-level fake for respx ------------------------------------------------------


def jsonrpc_handler(responses: Dict[str, Any], seen: Optional[List[str]] = None) -> Callable[[httpx.Request], httpx.Response]:
    """
    respx side effect answering JSON-RPC requests from a RecordingRpc-style
    table. RpcError responses are sent back as JSON-RPC error objects.
    """
    fake = RecordingRpc(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if seen is not None:
            seen.append(body["method"])
        try:
            result = fake.call(body["method"], body["params"])
        except AssertionError as e:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": str(e)}})
        except RpcError as e:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": e.code, "message": e.message}})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    return handler
