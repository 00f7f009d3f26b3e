import json

import httpx
import pytest
import respx

from conftest import RPC_URL

from bridge_admin.errors import JsonRpcCode, RemoteRejectionError, RpcError, TransportError
from bridge_admin.rpc.http import RpcClient


@respx.mock
def test_call_returns_result_and_sends_envelope():
    route = respx.post(RPC_URL).mock(
        return_value=httpx.Response(200, json={"jsonrpc": "2.0", "id": 7, "result": "1000"})
    )
    with RpcClient(RPC_URL) as rpc:
        assert rpc.call("suix_getReferenceGasPrice", id=7) == "1000"

    body = json.loads(route.calls.last.request.content)
    assert body == {"jsonrpc": "2.0", "id": 7, "method": "suix_getReferenceGasPrice", "params": []}
    assert route.calls.last.request.headers["Client-Sdk-Type"] == "bridge-admin-python"


@respx.mock
def test_scalar_params_are_wrapped():
    route = respx.post(RPC_URL).mock(return_value=httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {}}))
    with RpcClient(RPC_URL) as rpc:
        rpc.call("sui_getTransactionBlock", "digest")
    assert json.loads(route.calls.last.request.content)["params"] == ["digest"]


@respx.mock
def test_error_object_becomes_rpc_error():
    respx.post(RPC_URL).mock(
        return_value=httpx.Response(
            200,
            json={
                "jsonrpc": "2.0",
                "id": 3,
                "error": {"code": -32602, "message": "Could not find the referenced transaction", "data": "x"},
            },
        )
    )
    with RpcClient(RPC_URL) as rpc:
        with pytest.raises(RpcError) as info:
            rpc.call("sui_getTransactionBlock", ["abc"])
    err = info.value
    assert isinstance(err, RemoteRejectionError)
    assert err.code_enum == JsonRpcCode.INVALID_PARAMS
    assert err.method == "sui_getTransactionBlock"
    assert err.request_id == 3
    assert err.data == "x"


@respx.mock
def test_error_body_on_http_500_is_still_rpc_error():
    respx.post(RPC_URL).mock(
        return_value=httpx.Response(500, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "boom"}})
    )
    with RpcClient(RPC_URL) as rpc:
        with pytest.raises(RpcError) as info:
            rpc.call("sui_executeTransactionBlock", [])
    assert info.value.http_status == 500


@respx.mock
def test_non_json_response_is_transport_error():
    respx.post(RPC_URL).mock(return_value=httpx.Response(502, text="<html>bad gateway</html>"))
    with RpcClient(RPC_URL) as rpc:
        with pytest.raises(TransportError) as info:
            rpc.call("suix_getReferenceGasPrice")
    assert info.value.http_status == 502
    assert info.value.url == RPC_URL


@respx.mock
def test_network_failure_is_transport_error_and_not_retried():
    route = respx.post(RPC_URL).mock(side_effect=httpx.ConnectError("refused"))
    with RpcClient(RPC_URL) as rpc:
        with pytest.raises(TransportError):
            rpc.call("suix_getReferenceGasPrice")
    assert route.call_count == 1


@respx.mock
def test_timeout_is_transport_error():
    respx.post(RPC_URL).mock(side_effect=httpx.ReadTimeout("slow"))
    with RpcClient(RPC_URL, timeout=1.5) as rpc:
        with pytest.raises(TransportError, match="timeout"):
            rpc.call("suix_getReferenceGasPrice")


@respx.mock
def test_response_without_result():
    respx.post(RPC_URL).mock(return_value=httpx.Response(200, json={"jsonrpc": "2.0", "id": 1}))
    with RpcClient(RPC_URL) as rpc:
        with pytest.raises(RpcError, match="malformed"):
            rpc.call("suix_getReferenceGasPrice")


def test_closed_client_refuses_calls():
    rpc = RpcClient(RPC_URL)
    rpc.close()
    with pytest.raises(TransportError, match="closed"):
        rpc.call("suix_getReferenceGasPrice")
