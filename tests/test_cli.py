import base64
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import respx
import typer
from typer.testing import CliRunner

from conftest import (
    DIGEST,
    GAS_COIN_ID,
    PACKAGE_ID,
    RPC_URL,
    TREASURY_ID,
    default_responses,
    dev_inspect_response,
    jsonrpc_handler,
)

from bridge_admin.cli import main as cli
from bridge_admin.errors import RpcError
from bridge_admin.multisig import Participant, compose_multisig
from bridge_admin.tx.build import TransactionBuilder
from bridge_admin.tx.encode import ObjectRef, TransactionData
from bridge_admin.utils.bytes import from_b64

runner = CliRunner()

TARGET = "0x" + "42" * 32


@pytest.fixture(autouse=True)
def operator_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, env_vars: Dict[str, str]) -> Dict[str, str]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    for k, v in env_vars.items():
        monkeypatch.setenv(k, v)
    return env_vars


def run_cli(args: List[str]) -> Any:
    result = runner.invoke(cli.app, args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def mock_node(extra: Optional[Dict[str, Any]] = None, seen: Optional[List[str]] = None) -> respx.Route:
    responses = default_responses()
    responses.update(extra or {})
    return respx.post(RPC_URL).mock(side_effect=jsonrpc_handler(responses, seen))


def test_version() -> None:
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("bridge-admin ")


def test_env_shows_config_without_secrets(alice) -> None:
    out = run_cli(["env"])
    assert out["package_id"] == PACKAGE_ID
    assert out["signer"] == "multisig"
    assert [p["has_secret"] for p in out["participants"]] == [True, True]
    assert alice.export_secret_key() not in json.dumps(out)


def test_multisig_compose_reads_no_configuration(monkeypatch: pytest.MonkeyPatch, alice, bob) -> None:
    monkeypatch.setenv("SUI_ENV", "not-a-network")
    out = run_cli(
        ["multisig", "compose", alice.public_key.to_base64(), f"{bob.public_key.to_base64()}:2", "-t", "2"]
    )
    expected = compose_multisig([Participant(alice.public_key, 1), Participant(bob.public_key, 2)], 2)
    assert out["address"] == expected.address
    assert [p["weight"] for p in out["participants"]] == [1, 2]


def test_multisig_address_matches_config(config) -> None:
    assert run_cli(["multisig", "address"])["address"] == config.multisig_public_key().address


@respx.mock
def test_caps_has_queries_by_dev_inspect() -> None:
    seen: List[str] = []
    mock_node({"sui_devInspectTransactionBlock": dev_inspect_response("bool", True)}, seen)
    out = run_cli(["caps", "has", TARGET, "AdminCap"])
    assert out == {"target": TARGET, "capability": "AdminCap", "held": True}
    assert "sui_executeTransactionBlock" not in seen


@respx.mock
def test_pause_enable_signs_and_submits(config) -> None:
    seen: List[str] = []
    mock_node(seen=seen)
    out = run_cli(["pause", "enable"])
    assert out["status"] == "success"
    assert seen.count("sui_executeTransactionBlock") == 1


@respx.mock
def test_offline_build_sign_combine_execute(config, tmp_path: Path) -> None:
    seen: List[str] = []
    mock_node(seen=seen)
    tx_file = tmp_path / "tx_bytes"

    built = run_cli(["caps", "add", TARGET, "MinterCap", "--limit", str(10**12), "--out", str(tx_file)])
    multisig_address = config.multisig_public_key().address
    assert built["sender"] == multisig_address
    assert "sui_executeTransactionBlock" not in seen
    tx_bytes = from_b64(tx_file.read_text())
    assert TransactionData.from_bytes(tx_bytes).sender == multisig_address

    view = run_cli(["tx", "inspect", str(tx_file)])
    assert view["digest"] == built["digest"]
    assert [c["MoveCall"]["target"].split("::", 1)[1] for c in view["commands"]] == [
        "treasury::new_minter_cap",
        "treasury::add_capability",
    ]

    sig1 = run_cli(["tx", "sign", str(tx_file), "-p", "1"])["signature"]
    sig2 = run_cli(["tx", "sign", str(tx_file), "--participant", "2"])["signature"]

    combined = run_cli(["tx", "combine", str(tx_file), sig2, sig1])
    assert combined["weight"] == 2 and combined["threshold"] == 2
    assert from_b64(combined["signature"])[0] == 0x03

    result = run_cli(["tx", "execute", str(tx_file), sig1, sig2, "--combine"])
    assert result["digest"] == built["digest"]
    assert seen.count("sui_executeTransactionBlock") == 1


def test_tx_inspect_accepts_inline_base64() -> None:
    tx = TransactionBuilder(TARGET)
    tx.move_call(
        f"{PACKAGE_ID}::treasury::toggle_withdrawal",
        [tx.shared_object(TREASURY_ID, 1)],
        type_arguments=[f"{PACKAGE_ID}::lbtc::LBTC"],
    )
    tx.set_gas_price(1000).set_gas_budget(10**7).set_gas_payment([ObjectRef(GAS_COIN_ID, 1, DIGEST)])
    out = run_cli(["tx", "inspect", base64.b64encode(tx.build()).decode()])
    assert out["sender"] == TARGET
    assert out["inputs"][0]["SharedObject"]["initialSharedVersion"] == 1


def test_combine_rejects_under_threshold(tmp_path: Path, alice) -> None:
    tx_file = tmp_path / "tx_bytes"
    tx_file.write_text(base64.b64encode(b"\x00" * 8).decode())
    sig = alice.sign_transaction(b"\x00" * 8)
    assert cli.main(["tx", "combine", str(tx_file), sig]) == cli.EXIT_CONFIG


@respx.mock
def test_supply_mint_uses_fixed_budget() -> None:
    seen: List[str] = []
    mock_node(seen=seen)
    out = run_cli(["supply", "mint", TARGET, "100000000", "--txid", "0xabcd", "--idx", "1"])
    assert out["status"] == "success"
    assert "sui_dryRunTransactionBlock" not in seen
    assert seen.count("sui_executeTransactionBlock") == 1


@respx.mock
def test_consortium_epoch() -> None:
    mock_node({"sui_devInspectTransactionBlock": dev_inspect_response("u256", 7)})
    assert run_cli(["consortium", "epoch"]) == {"epoch": 7}


@respx.mock
def test_scenario_mint_grants_then_mints() -> None:
    answers = [dev_inspect_response("bool", v) for v in (True, False, False)]
    seen: List[str] = []
    mock_node({"sui_devInspectTransactionBlock": lambda params: answers.pop(0)}, seen)
    out = run_cli(["scenario", "mint", TARGET, "--wait"])
    assert out["completed"] is True
    assert out["steps"] == ["add_minter_cap", "mint_and_transfer"]
    assert seen.count("sui_getTransactionBlock") == 2


@respx.mock
def test_scenario_mint_stops_when_paused(capsys: pytest.CaptureFixture) -> None:
    answers = [dev_inspect_response("bool", v) for v in (True, True, True)]
    seen: List[str] = []
    mock_node({"sui_devInspectTransactionBlock": lambda params: answers.pop(0)}, seen)
    assert cli.main(["scenario", "mint", TARGET]) == cli.EXIT_REMOTE
    assert json.loads(capsys.readouterr().out)["completed"] is False
    assert "sui_executeTransactionBlock" not in seen


# --- exit codes -------------------------------------------------------------------


def test_usage_error_exit_code(capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["caps", "add"]) == cli.EXIT_CONFIG
    assert cli.main(["--signer", "ledger", "version"]) == cli.EXIT_CONFIG
    assert cli.main(["--log-level", "LOUD", "version"]) == cli.EXIT_CONFIG


def test_bad_parameter_in_command_exit_code(capsys: pytest.CaptureFixture) -> None:
    assert issubclass(typer.BadParameter, cli.USAGE_ERRORS)
    assert cli.main(["tx", "inspect", "%%% not base64"]) == cli.EXIT_CONFIG
    assert "neither a file nor base64" in capsys.readouterr().err


@respx.mock
def test_failed_scenario_step_exit_code(capsys: pytest.CaptureFixture) -> None:
    answers = [dev_inspect_response("bool", v) for v in (True, False)]
    seen: List[str] = []
    failure = {"digest": "abc", "effects": {"status": {"status": "failure", "error": "MoveAbort"}}}
    mock_node(
        {"sui_devInspectTransactionBlock": lambda params: answers.pop(0), "sui_executeTransactionBlock": failure}, seen
    )
    assert cli.main(["scenario", "mint", TARGET]) == cli.EXIT_REMOTE
    assert seen.count("sui_executeTransactionBlock") == 1
    assert "MoveAbort" in capsys.readouterr().err


def test_missing_configuration_exit_code(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.delenv("PACKAGE_ID")
    assert cli.main(["caps", "has", TARGET, "AdminCap"]) == cli.EXIT_CONFIG
    assert "PACKAGE_ID" in capsys.readouterr().err


@respx.mock
def test_under_threshold_signer_fails_without_network(monkeypatch: pytest.MonkeyPatch, bob) -> None:
    monkeypatch.delenv("USER_2_SK")
    monkeypatch.setenv("USER_2_PK", bob.public_key.to_base64())
    route = mock_node()
    assert cli.main(["pause", "disable"]) == cli.EXIT_CONFIG
    assert route.call_count == 0


@respx.mock
def test_simple_signer_is_selectable(alice) -> None:
    seen: List[str] = []
    mock_node(seen=seen)
    assert cli.main(["--signer", "simple", "pause", "toggle-withdrawal"]) == cli.EXIT_OK
    assert "sui_executeTransactionBlock" in seen


@respx.mock
def test_remote_rejection_exit_code(capsys: pytest.CaptureFixture) -> None:
    mock_node({"sui_executeTransactionBlock": RpcError(message="Transaction validator signing failed", code=-32002)})
    assert cli.main(["caps", "remove", TARGET, "PauserCap"]) == cli.EXIT_REMOTE
    assert "error:" in capsys.readouterr().err


@respx.mock
def test_failed_effects_exit_code(capsys: pytest.CaptureFixture) -> None:
    mock_node({"sui_executeTransactionBlock": {"digest": "abc", "effects": {"status": {"status": "failure", "error": "MoveAbort"}}}})
    assert cli.main(["params", "set", "mint_fee", "10"]) == cli.EXIT_REMOTE
    captured = capsys.readouterr()
    assert json.loads(captured.out)["status"] == "failure"
    assert "MoveAbort" in captured.err


@respx.mock
def test_status_not_found(capsys: pytest.CaptureFixture) -> None:
    respx.post(RPC_URL).respond(
        json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Could not find the referenced transaction"}}
    )
    assert cli.main(["tx", "status", "abc"]) == 1
    assert json.loads(capsys.readouterr().out) == {"digest": "abc", "found": False}
