from __future__ import annotations

import pytest

from lineshell.errors import ExpectationFailure, ShellSyntaxError
from lineshell.parser import SimpleParser


def test_quoted_and_bare_arguments() -> None:
    command, end = SimpleParser().parse_one("run \"a b\" 'c d' e\\ f")

    assert command.arguments == ["run", "a b", "c d", "e f"]
    assert end == len("run \"a b\" 'c d' e\\ f")


def test_shell_operators_are_plain_text() -> None:
    command, _ = SimpleParser().parse_one("a;b > $x")

    assert command.arguments == ["a;b", ">", "$x"]
    assert command.redirections == []


def test_blank_line_is_syntax_error() -> None:
    with pytest.raises(ShellSyntaxError):
        SimpleParser().parse_one("   ")


def test_unterminated_quote() -> None:
    with pytest.raises(ExpectationFailure) as exc_info:
        SimpleParser().parse_one('say "open')

    assert exc_info.value.expected == "'\"'"
    assert exc_info.value.location == "<end-of-line>"


def test_parse_line_returns_single_command() -> None:
    commands = SimpleParser().parse_line("  one two  ")

    assert [command.arguments for command in commands] == [["one", "two"]]
