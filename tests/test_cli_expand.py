import json

from typer.testing import CliRunner

from text_unpacker.cli import app

runner = CliRunner()


def test_cli_expand_prints_expansion():
    r = runner.invoke(app, ["expand", "a3[bc]4[d]e"])
    assert r.exit_code == 0, r.stdout + r.stderr
    assert r.stdout.strip() == "abcbcbcdddde"


def test_cli_expand_zero_count():
    r = runner.invoke(app, ["expand", "0[a]b"])
    assert r.exit_code == 0
    assert r.stdout.strip() == "b"


def test_cli_expand_invalid_input():
    r = runner.invoke(app, ["expand", "[abc]"])
    assert r.exit_code == 2
    assert "E_ILLEGAL_LEADING_CHARACTER" in r.stderr
    assert r.stdout == ""


def test_cli_expand_json():
    r = runner.invoke(app, ["expand", "2[3[x]y]", "--format", "json"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["command"] == "expand"
    assert payload["ok"] is True
    assert payload["summary"]["output"] == "xxxyxxxy"
    assert payload["summary"]["output_length"] == 8
    assert payload["summary"]["group_count"] == 2


def test_cli_expand_json_from_config_file(tmp_path):
    cfg = tmp_path / "unpacker.yaml"
    cfg.write_text("format: json\n", encoding="utf-8")
    r = runner.invoke(app, ["--config", str(cfg), "expand", "3[a]"])
    assert r.exit_code == 0, r.stdout + r.stderr
    assert json.loads(r.stdout)["summary"]["output"] == "aaa"


def test_cli_format_option_overrides_config(tmp_path):
    cfg = tmp_path / "unpacker.yaml"
    cfg.write_text("format: json\n", encoding="utf-8")
    r = runner.invoke(app, ["--config", str(cfg), "expand", "3[a]", "--format", "text"])
    assert r.exit_code == 0
    assert r.stdout.strip() == "aaa"


def test_cli_config_from_environment(tmp_path):
    cfg = tmp_path / "unpacker.yaml"
    cfg.write_text("format: json\n", encoding="utf-8")
    r = runner.invoke(app, ["expand", "3[a]"], env={"UNPACKER_CONFIG": str(cfg)})
    assert r.exit_code == 0
    assert json.loads(r.stdout)["ok"] is True


def test_cli_missing_config_file(tmp_path):
    r = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "expand", "3[a]"])
    assert r.exit_code == 1
    assert "E_SETTINGS_FILE_NOT_FOUND" in r.stderr


def test_cli_invalid_config_file(tmp_path):
    cfg = tmp_path / "unpacker.yaml"
    cfg.write_text("colour: red\n", encoding="utf-8")
    r = runner.invoke(app, ["--config", str(cfg), "expand", "3[a]"])
    assert r.exit_code == 2
    assert "E_SETTINGS_FILE_INVALID" in r.stderr


def test_cli_expand_deeply_nested_input():
    text = "1[" * 1200 + "a" + "]" * 1200
    r = runner.invoke(app, ["expand", text])
    assert r.exit_code == 0, r.stdout + r.stderr
    assert r.stdout.strip() == "a"
