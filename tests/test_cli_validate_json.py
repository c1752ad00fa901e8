import json

from typer.testing import CliRunner

from text_unpacker.cli import app

runner = CliRunner()


def test_cli_validate_json_success():
    r = runner.invoke(app, ["validate", "2[3[x]y]", "--format", "json"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["command"] == "validate"
    assert payload["ok"] is True
    assert payload["error_count"] == 0
    assert payload["errors"] == []
    assert payload["summary"] == {"group_count": 2, "max_depth": 2, "input_length": 8}


def test_cli_validate_json_failure_contains_code_and_position():
    r = runner.invoke(app, ["validate", "2[a", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["ok"] is False
    assert payload["summary"] is None
    [err] = payload["errors"]
    assert err["code"] == "E_BRACKET_IMBALANCE"
    assert err["message"] == "invalid bracket positioning"
    assert err["position"] == 3
    assert err["stage"] == "validate"
