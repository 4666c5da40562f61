from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from lineshell.cli import app

runner = CliRunner()


def test_parse_prints_commands_as_json() -> None:
    result = runner.invoke(app, ["parse", "A=1 sort < in; ls >> log &"])

    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {
            "assignments": [{"name": "A", "value": "1"}],
            "arguments": ["sort"],
            "redirections": [{"kind": "INPUT", "target": "in"}],
            "terminator": "NORMAL",
        },
        {
            "assignments": [],
            "arguments": ["ls"],
            "redirections": [{"kind": "APPENDED_OUTPUT", "target": "log"}],
            "terminator": "BACKGROUNDED",
        },
    ]


def test_parse_simple_grammar() -> None:
    result = runner.invoke(app, ["parse", "--simple", "say 'a; b'"])

    assert result.exit_code == 0
    assert json.loads(result.output)[0]["arguments"] == ["say", "a; b"]


def test_parse_reports_error_and_exit_code() -> None:
    result = runner.invoke(app, ["parse", "echo 'abc"])

    assert result.exit_code == 1
    assert "lineshell: syntax error, expecting '\\'' at: <end-of-line>" in result.output


def test_repl_prints_commands_until_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GREETING", raising=False)

    result = runner.invoke(app, ["repl"], input="GREETING=hi echo $GREETING\necho $GREETING\nexit\necho never\n")

    assert result.exit_code == 0
    assert '"GREETING"' in result.output
    assert result.output.count('"echo"') == 2
    assert '"hi"' in result.output
    assert '"never"' not in result.output
