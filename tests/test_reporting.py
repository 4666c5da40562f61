from __future__ import annotations

from lineshell.errors import AmbiguousRedirection, ExpectationFailure, ShellSyntaxError
from lineshell.reporting import END_OF_LINE, describe_location, format_error


def test_describe_location() -> None:
    assert describe_location("abc", (1, 3)) == "bc"
    assert describe_location("abc", (3, 3)) == END_OF_LINE
    assert describe_location("", None) == END_OF_LINE
    assert describe_location("abc", None) == "abc"


def test_format_expectation_failure() -> None:
    error = ExpectationFailure("word", position=(6, 6), line="echo >")

    assert format_error(error, "prog") == "prog: syntax error, expecting word at: <end-of-line>"


def test_format_ambiguous_redirection() -> None:
    error = AmbiguousRedirection(position=(6, 8), line="cmd > f*", candidates=["a", "b"])

    assert format_error(error, "sh") == "sh: ambiguous redirect target, expecting unambiguous redirection at: f*"


def test_plain_syntax_error() -> None:
    error = ShellSyntaxError(position=(2, 2), line="ls")

    assert str(error) == "syntax error"
    assert error.location == END_OF_LINE
    assert format_error(error, "lineshell") == "lineshell: syntax error"
