"""Character classes and operator tables shared by the parsers."""

from __future__ import annotations

from lineshell.types import RedirectionKind, Terminator

DEREFERENCE = "$"
ESCAPE = "\\"
SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
OPEN_BRACE = "{"
CLOSE_BRACE = "}"
ASSIGN = "="

# Longest operator first so ">>" wins over ">".
REDIRECTORS: tuple[tuple[str, RedirectionKind], ...] = (
    (">>", RedirectionKind.APPENDED_OUTPUT),
    (">", RedirectionKind.TRUNCATED_OUTPUT),
    ("<", RedirectionKind.INPUT),
)
TERMINATORS: tuple[tuple[str, Terminator], ...] = (
    (";", Terminator.NORMAL),
    ("&", Terminator.BACKGROUNDED),
)
PIPE = "|"

SPECIAL_CHARACTERS = frozenset(
    DEREFERENCE + "".join(op for op, _ in REDIRECTORS) + "".join(op for op, _ in TERMINATORS) + PIPE
)


def is_space(char: str) -> bool:
    return char.isspace()


def is_special(char: str) -> bool:
    return char in SPECIAL_CHARACTERS


def is_plain(char: str) -> bool:
    """Characters that may appear unquoted inside a word."""
    return not is_space(char) and not is_special(char)


def is_name_start(char: str) -> bool:
    return char.isascii() and char.isalpha()


def is_name_char(char: str) -> bool:
    return char.isascii() and char.isalnum()


def skip_spaces(line: str, pos: int) -> int:
    while pos < len(line) and is_space(line[pos]):
        pos += 1
    return pos


def scan_name(line: str, pos: int) -> int:
    """Return the end of the identifier starting at ``pos``, or ``pos`` if there is none."""

    if pos >= len(line) or not is_name_start(line[pos]):
        return pos
    end = pos + 1
    while end < len(line) and is_name_char(line[end]):
        end += 1
    return end


def match_redirector(line: str, pos: int) -> tuple[str, RedirectionKind] | None:
    for operator, kind in REDIRECTORS:
        if line.startswith(operator, pos):
            return operator, kind
    return None


def match_terminator(line: str, pos: int) -> tuple[str, Terminator] | None:
    for operator, terminator in TERMINATORS:
        if line.startswith(operator, pos):
            return operator, terminator
    return None
