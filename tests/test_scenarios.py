import logging

import pytest

from conftest import dev_inspect_response

from bridge_admin.actions import scenarios
from bridge_admin.errors import ConfigurationError, RpcError, TransactionFailedError
from bridge_admin.tx.encode import TransactionData
from bridge_admin.utils.bytes import from_b64

RECIPIENT = "0x" + "42" * 32


def _inspect_sequence(rpc, *answers):
    queue = [dev_inspect_response(t, v) for t, v in answers]
    rpc.responses["sui_devInspectTransactionBlock"] = lambda params: queue.pop(0)
    return queue


def _executed_targets(rpc):
    out = []
    for params in rpc.params_of("sui_executeTransactionBlock"):
        data = TransactionData.from_bytes(from_b64(params[0]))
        out.append([c.function for c in data.kind.commands])
    return out


def test_grants_minter_cap_then_mints(config, rpc, ledger, caplog):
    _inspect_sequence(rpc, ("bool", True), ("bool", False), ("bool", False))
    with caplog.at_level(logging.WARNING, logger="bridge_admin"):
        report = scenarios.ensure_minter_and_mint(ledger, config, config.signer_config(), RECIPIENT)

    assert report.completed
    assert report.steps == ["add_minter_cap", "mint_and_transfer"]
    assert report.checks == {"admin_cap": True, "minter_cap": False, "global_pause": False}
    assert _executed_targets(rpc) == [["new_minter_cap", "add_capability"], ["mint_and_transfer"]]
    assert "without waiting" in caplog.text


def test_existing_minter_cap_skips_grant(config, rpc, ledger):
    _inspect_sequence(rpc, ("bool", True), ("bool", True), ("bool", False))
    report = scenarios.ensure_minter_and_mint(ledger, config, config.signer_config(), RECIPIENT, wait=True)
    assert report.steps == ["mint_and_transfer"]
    assert "sui_getTransactionBlock" in rpc.methods()


def test_global_pause_stops_before_mint(config, rpc, ledger):
    _inspect_sequence(rpc, ("bool", True), ("bool", True), ("bool", True))
    report = scenarios.ensure_minter_and_mint(ledger, config, config.signer_config(), RECIPIENT)
    assert not report.completed
    assert report.results == {}
    assert "sui_executeTransactionBlock" not in rpc.methods()


def test_missing_admin_cap_is_fatal(config, rpc, ledger):
    _inspect_sequence(rpc, ("bool", False))
    with pytest.raises(ConfigurationError, match="AdminCap"):
        scenarios.ensure_minter_and_mint(ledger, config, config.signer_config(), RECIPIENT)
    assert "sui_executeTransactionBlock" not in rpc.methods()


def test_rejection_mid_scenario_propagates(config, rpc, ledger):
    _inspect_sequence(rpc, ("bool", True), ("bool", False))
    rejected = RpcError(message="MoveAbort in add_capability", code=-32002)
    rpc.responses["sui_executeTransactionBlock"] = rejected
    with pytest.raises(RpcError) as info:
        scenarios.ensure_minter_and_mint(ledger, config, config.signer_config(), RECIPIENT)
    assert info.value is rejected


def _failing_execute(params):
    return {"digest": "failed-digest", "effects": {"status": {"status": "failure", "error": "MoveAbort(treasury, 7)"}}}


def test_failed_grant_stops_before_mint(config, rpc, ledger):
    _inspect_sequence(rpc, ("bool", True), ("bool", False))
    rpc.responses["sui_executeTransactionBlock"] = _failing_execute
    with pytest.raises(TransactionFailedError, match="MoveAbort") as info:
        scenarios.ensure_minter_and_mint(ledger, config, config.signer_config(), RECIPIENT)
    assert info.value.digest == "failed-digest"
    assert rpc.methods().count("sui_executeTransactionBlock") == 1
    assert rpc.methods().count("sui_devInspectTransactionBlock") == 2


def test_failed_mint_is_not_reported_complete(config, rpc, ledger):
    _inspect_sequence(rpc, ("bool", True), ("bool", True), ("bool", False))
    rpc.responses["sui_executeTransactionBlock"] = _failing_execute
    with pytest.raises(TransactionFailedError):
        scenarios.ensure_minter_and_mint(ledger, config, config.signer_config(), RECIPIENT)


def test_failed_valset_rotation_stops_before_validation(config, rpc, ledger):
    rpc.responses["sui_executeTransactionBlock"] = _failing_execute
    with pytest.raises(TransactionFailedError):
        scenarios.rotate_validators_and_validate(
            ledger, config, config.signer_config(), "aa", "bb", "cc", "dd", "ee" * 32, wait=True
        )
    assert _executed_targets(rpc) == [["set_next_validator_set"]]
    assert "sui_getTransactionBlock" not in rpc.methods()
    assert "sui_devInspectTransactionBlock" not in rpc.methods()


def test_rotate_validate_and_check(config, rpc, ledger):
    _inspect_sequence(rpc, ("bool", True))
    report = scenarios.rotate_validators_and_validate(
        ledger,
        config,
        config.signer_config(),
        valset_payload="aa",
        valset_proof="bb",
        payload="cc",
        proof="dd",
        payload_hash="ee" * 32,
        wait=True,
    )
    assert report.completed
    assert report.steps == ["set_next_validator_set", "validate_payload"]
    assert report.checks["payload_used"] is True
    assert _executed_targets(rpc) == [["set_next_validator_set"], ["validate_payload"]]
    assert rpc.methods().count("sui_getTransactionBlock") == 2

    inspect_sender = rpc.params_of("sui_devInspectTransactionBlock")[0][0]
    assert inspect_sender == report.sender
    assert report.to_dict()["results"]["validate_payload"]["status"] == "success"
