"""Human-readable rendering of parse failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lineshell.errors import ParseError

END_OF_LINE = "<end-of-line>"


def describe_location(line: str, position: tuple[int, int] | None) -> str:
    """Return the text from the failure point to the end of the span.

    A failure at the very end of the line is rendered as ``<end-of-line>``.
    """

    if position is None:
        return END_OF_LINE if not line else line
    start, end = position
    if start >= len(line) or start >= end:
        return END_OF_LINE
    return line[start:end]


def render_message(error: ParseError) -> str:
    """Build the message shown for one parse error."""

    if error.expected is None:
        return error.message
    return f"{error.message}, expecting {error.expected} at: {error.location}"


def format_error(error: ParseError, program: str) -> str:
    """Prefix one parse error with the program name, as printed on stderr."""

    return f"{program}: {render_message(error)}"
