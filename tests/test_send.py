import itertools

import pytest

from conftest import DIGEST, PACKAGE_ID, TREASURY_ID, RecordingRpc, default_responses, dev_inspect_response

from bridge_admin.errors import InsufficientWeightError, RpcError, TransactionFailedError, TransportError
from bridge_admin.rpc.ledger import LedgerClient
from bridge_admin.signers import MultisigSignerConfig, SimpleSignerConfig
from bridge_admin.tx import send
from bridge_admin.tx.build import TransactionBuilder
from bridge_admin.tx.encode import TransactionData
from bridge_admin.utils.bytes import from_b64


def _tx() -> TransactionBuilder:
    tx = TransactionBuilder()
    tx.move_call(f"{PACKAGE_ID}::treasury::list_roles", [tx.object(TREASURY_ID)])
    return tx


def test_sign_and_execute_with_multisig(rpc, ledger, alice, bob):
    config = MultisigSignerConfig.from_users([(alice, 1), (bob, 1)], 2)
    result = send.sign_and_execute(ledger, _tx(), config)

    assert result.success
    (params,) = rpc.params_of("sui_executeTransactionBlock")
    tx_bytes = from_b64(params[0])
    assert TransactionData.from_bytes(tx_bytes).sender == config.address
    assert result.digest == TransactionData.from_bytes(tx_bytes).digest()
    (signature,) = params[1]
    assert from_b64(signature)[0] == 0x03
    assert "sui_getTransactionBlock" not in rpc.methods()


def test_under_threshold_fails_before_any_network_call(rpc, ledger, alice, bob):
    config = MultisigSignerConfig.from_users([(alice, 1), (bob, 1)], 2)
    config = MultisigSignerConfig(config.multisig_pk, (alice,))
    with pytest.raises(InsufficientWeightError):
        send.sign_and_execute(ledger, _tx(), config)
    assert rpc.calls == []


@pytest.mark.parametrize(
    "exc",
    [
        RpcError(message="Transaction has non recoverable errors", code=-32002),
        TransportError("network error: refused", url="http://fullnode.test"),
    ],
)
def test_rejections_reach_the_caller_unchanged(rpc, ledger, alice, exc):
    rpc.responses["sui_executeTransactionBlock"] = exc
    with pytest.raises(type(exc)) as info:
        send.sign_and_execute(ledger, _tx(), SimpleSignerConfig(alice))
    assert info.value is exc
    assert rpc.methods().count("sui_executeTransactionBlock") == 1


def test_failed_effects_are_reported_not_raised(rpc, ledger, alice):
    rpc.responses["sui_executeTransactionBlock"] = {
        "digest": DIGEST,
        "effects": {"status": {"status": "failure", "error": "MoveAbort(treasury, 3)"}},
    }
    result = send.sign_and_execute(ledger, _tx(), SimpleSignerConfig(alice))
    assert not result.success
    assert result.error == "MoveAbort(treasury, 3)"
    with pytest.raises(TransactionFailedError) as info:
        result.raise_for_status()
    assert info.value.digest == DIGEST


def test_wait_polls_until_known(monkeypatch, alice):
    monkeypatch.setattr(send.time, "sleep", lambda s: None)
    answers = [RpcError(message="Could not find the referenced transaction", code=-32602), {}, {"digest": DIGEST}]

    def _get(params):
        answer = answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    responses = default_responses()
    responses["sui_getTransactionBlock"] = _get
    rpc = RecordingRpc(responses)
    send.sign_and_execute(LedgerClient(rpc), _tx(), SimpleSignerConfig(alice), wait=True)
    assert rpc.methods().count("sui_getTransactionBlock") == 3


def test_wait_times_out(monkeypatch, ledger, rpc):
    clock = itertools.chain([0.0, 0.0, 5.0], itertools.repeat(11.0))
    monkeypatch.setattr(send.time, "monotonic", lambda: next(clock))
    monkeypatch.setattr(send.time, "sleep", lambda s: None)
    rpc.responses["sui_getTransactionBlock"] = RpcError(
        message=f"Could not find the referenced transaction [TransactionDigest({DIGEST})]", code=-32602
    )
    with pytest.raises(TransportError, match="timeout"):
        send.wait_for_transaction(ledger, DIGEST, timeout_s=10)


def test_wait_propagates_invalid_digest_error(monkeypatch, ledger, rpc):
    monkeypatch.setattr(send.time, "sleep", lambda s: pytest.fail("polled after a non-retryable error"))
    invalid = RpcError(message="invalid base58 digest", code=-32602)
    rpc.responses["sui_getTransactionBlock"] = invalid
    with pytest.raises(RpcError) as info:
        send.wait_for_transaction(ledger, "not-a-digest")
    assert info.value is invalid
    assert rpc.methods().count("sui_getTransactionBlock") == 1


def test_wait_propagates_other_rpc_errors(ledger, rpc):
    boom = RpcError(message="internal", code=-32603)
    rpc.responses["sui_getTransactionBlock"] = boom
    with pytest.raises(RpcError) as info:
        send.wait_for_transaction(ledger, DIGEST)
    assert info.value is boom


def test_dev_inspect_sends_kind_bytes_only(rpc, ledger):
    rpc.responses["sui_devInspectTransactionBlock"] = dev_inspect_response("vector<0x1::string::String>", ["MinterCap"])
    result = send.dev_inspect(ledger, _tx())
    assert result.value() == ["MinterCap"]
    sender, kind_b64 = rpc.params_of("sui_devInspectTransactionBlock")[0]
    assert sender == "0x" + "0" * 64
    assert from_b64(kind_b64)[0] == 0  # ProgrammableTransaction variant
    assert "suix_getCoins" not in rpc.methods()
