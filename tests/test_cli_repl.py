from typer.testing import CliRunner

from text_unpacker.cli import app
from text_unpacker.core.settings import DEFAULT_PROMPT

runner = CliRunner()


def test_repl_unpacks_and_reports_until_eof():
    r = runner.invoke(app, ["repl"], input="3[a]\n2a[b]\n")
    assert r.exit_code == 0, r.stdout + r.stderr
    assert r.stdout.count(DEFAULT_PROMPT) == 3
    assert "Unpacked: aaa" in r.stdout
    assert (
        "The provided text is not valid for unpacking. Details:\ninvalid character positioning"
        in r.stdout
    )


def test_repl_empty_line_is_rejected_not_fatal():
    r = runner.invoke(app, ["repl"], input="\na\n")
    assert r.exit_code == 0
    assert "must contain non-whitespace characters" in r.stdout
    assert "Unpacked: a" in r.stdout


def test_repl_quit_word_and_prompt_from_config(tmp_path):
    cfg = tmp_path / "unpacker.yaml"
    cfg.write_text("prompt: 'unpack>'\nquit_word: quit\n", encoding="utf-8")
    r = runner.invoke(app, ["--config", str(cfg), "repl"], input="2[b]\nquit\n3[c]\n")
    assert r.exit_code == 0
    assert "Unpacked: bb" in r.stdout
    assert "ccc" not in r.stdout
    assert r.stdout.count("unpack>") == 2
