"""Recursive-descent parsers for one line of shell input."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from lineshell.errors import (
    AmbiguousRedirection,
    ExpectationFailure,
    PipeWithoutContinuation,
    ShellSyntaxError,
)
from lineshell.expansion import GlobExpander, PathnameExpander
from lineshell.lexer import (
    ASSIGN,
    CLOSE_BRACE,
    DEREFERENCE,
    DOUBLE_QUOTE,
    ESCAPE,
    OPEN_BRACE,
    PIPE,
    SINGLE_QUOTE,
    is_plain,
    is_space,
    match_redirector,
    match_terminator,
    scan_name,
    skip_spaces,
)
from lineshell.types import Command, Redirection, RedirectionKind, Terminator, VariableAssignment
from lineshell.variables import MappingResolver, VariableResolver

EXPECT_CHARACTER = "character"
EXPECT_NAME = "name"
EXPECT_WORD = "word"
EXPECT_CLOSE_BRACE = "'}'"
EXPECT_SINGLE_QUOTE = "'\\''"
EXPECT_DOUBLE_QUOTE = "'\"'"


class CommandParser(Protocol):
    """Parses the segment of ``line`` that starts at ``start``.

    Returns the command and the position of the first unconsumed character.
    Raises ``ParseError`` when the segment is malformed.
    """

    def parse_one(self, line: str, start: int = 0) -> tuple[Command, int]: ...


class ShellParser:
    """Parser for the shell grammar: assignments, words, redirections and terminators.

    Variable dereferences go through ``resolver`` and every word through
    ``expander``; both are called synchronously while the segment is parsed.
    """

    def __init__(
        self,
        resolver: VariableResolver | None = None,
        expander: PathnameExpander | None = None,
    ) -> None:
        self.resolver: VariableResolver = resolver if resolver is not None else MappingResolver()
        self.expander: PathnameExpander = expander if expander is not None else GlobExpander()

    def parse_one(self, line: str, start: int = 0) -> tuple[Command, int]:
        if start < 0 or start > len(line):
            raise ShellSyntaxError(position=(len(line), len(line)), line=line)
        cursor = _ShellCursor(self, line, start)
        command = cursor.command()
        logger.trace(
            "parser.segment start={} end={} name={!r} terminator={}",
            start,
            cursor.pos,
            command.name,
            command.terminator.name,
        )
        return command, cursor.pos

    def parse_line(self, line: str) -> list[Command]:
        """Parse every segment of ``line`` and return the non-empty commands in order."""

        return parse_line(self, line)


class _ShellCursor:
    """Mutable position over one line, alive for a single ``parse_one`` call."""

    def __init__(self, parser: ShellParser, line: str, pos: int) -> None:
        self.resolver = parser.resolver
        self.expander = parser.expander
        self.line = line
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.line)

    def peek(self) -> str:
        return self.line[self.pos] if self.pos < len(self.line) else ""

    def expectation(self, expected: str, at: int | None = None) -> ExpectationFailure:
        start = self.pos if at is None else at
        return ExpectationFailure(expected, position=(start, len(self.line)), line=self.line)

    def command(self) -> Command:
        command = Command()
        while True:
            self.pos = skip_spaces(self.line, self.pos)
            if self.at_end():
                break
            if not command.arguments:
                assignment = self.assignment()
                if assignment is not None:
                    command.assignments.append(assignment)
                    continue
            redirector = match_redirector(self.line, self.pos)
            if redirector is not None:
                operator, kind = redirector
                command.redirections.append(self.redirection(operator, kind))
                continue
            if self.word_starts():
                command.arguments.extend(self.expanded_word())
                continue
            break
        command.terminator = self.terminator()
        return command

    def word_starts(self) -> bool:
        char = self.peek()
        return bool(char) and (char == DEREFERENCE or is_plain(char))

    def assignment(self) -> VariableAssignment | None:
        name_end = scan_name(self.line, self.pos)
        if name_end == self.pos or not self.line.startswith(ASSIGN, name_end):
            return None
        name = self.line[self.pos : name_end]
        self.pos = name_end + len(ASSIGN)
        value = " ".join(self.expanded_word()) if self.word_starts() else ""
        return VariableAssignment(name=name, value=value)

    def redirection(self, operator: str, kind: RedirectionKind) -> Redirection:
        self.pos = skip_spaces(self.line, self.pos + len(operator))
        if not self.word_starts():
            raise self.expectation(EXPECT_WORD)
        return Redirection(kind=kind, target=self.redirection_target())

    def redirection_target(self) -> str:
        """Expand the word after a redirection operator; it must name exactly one path."""

        word_start = self.pos
        candidates = self.expanded_word()
        if len(candidates) != 1:
            logger.debug("parser.ambiguous_redirect at={} candidates={}", word_start, len(candidates))
            raise AmbiguousRedirection(position=(word_start, len(self.line)), line=self.line, candidates=candidates)
        return candidates[0]

    def terminator(self) -> Terminator:
        if self.at_end():
            return Terminator.NORMAL
        matched = match_terminator(self.line, self.pos)
        if matched is not None:
            operator, terminator = matched
            self.pos = skip_spaces(self.line, self.pos + len(operator))
            return terminator
        if self.peek() == PIPE:
            self.pos = skip_spaces(self.line, self.pos + len(PIPE))
            if self.at_end():
                raise PipeWithoutContinuation(position=(self.pos, len(self.line)), line=self.line)
            return Terminator.PIPED
        raise ShellSyntaxError(position=(self.pos, len(self.line)), line=self.line)

    def expanded_word(self) -> list[str]:
        return list(self.expander.expand(self.word()))

    def word(self) -> str:
        parts: list[str] = []
        while not self.at_end():
            char = self.peek()
            if char == DEREFERENCE:
                # Values stay globbable; only their backslashes are literal.
                parts.append(self.variable().replace(ESCAPE, ESCAPE * 2))
            elif char == SINGLE_QUOTE:
                parts.append(self.expander.escape(self.single_quoted()))
            elif char == DOUBLE_QUOTE:
                parts.append(self.expander.escape(self.double_quoted()))
            elif char == ESCAPE:
                parts.append(self.escaped())
            elif is_plain(char):
                parts.append(char)
                self.pos += 1
            else:
                break
        return "".join(parts)

    def escaped(self) -> str:
        self.pos += len(ESCAPE)
        if self.at_end():
            raise self.expectation(EXPECT_CHARACTER)
        char = self.peek()
        self.pos += 1
        return self.expander.escape(char)

    def variable(self) -> str:
        self.pos += len(DEREFERENCE)
        braced = self.line.startswith(OPEN_BRACE, self.pos)
        if braced:
            self.pos += len(OPEN_BRACE)
        name_end = scan_name(self.line, self.pos)
        if name_end == self.pos:
            raise self.expectation(EXPECT_NAME)
        name = self.line[self.pos : name_end]
        self.pos = name_end
        if braced:
            if not self.line.startswith(CLOSE_BRACE, self.pos):
                raise self.expectation(EXPECT_CLOSE_BRACE)
            self.pos += len(CLOSE_BRACE)
        return self.resolver.lookup(name)

    def single_quoted(self) -> str:
        self.pos += len(SINGLE_QUOTE)
        end = self.line.find(SINGLE_QUOTE, self.pos)
        if end < 0:
            self.pos = len(self.line)
            raise self.expectation(EXPECT_SINGLE_QUOTE)
        text = self.line[self.pos : end]
        self.pos = end + len(SINGLE_QUOTE)
        return text

    def double_quoted(self) -> str:
        self.pos += len(DOUBLE_QUOTE)
        parts: list[str] = []
        while True:
            if self.at_end():
                raise self.expectation(EXPECT_DOUBLE_QUOTE)
            char = self.peek()
            if char == DOUBLE_QUOTE:
                self.pos += len(DOUBLE_QUOTE)
                return "".join(parts)
            if char == DEREFERENCE:
                parts.append(self.variable())
            elif char == SINGLE_QUOTE:
                parts.append(self.inner_single_quoted())
            else:
                parts.append(char)
                self.pos += 1

    def inner_single_quoted(self) -> str:
        # A '...' run inside double quotes is copied verbatim, quotes included.
        # Without its closing quote the ' is an ordinary character.
        end = self.pos + 1
        while end < len(self.line) and self.line[end] not in (SINGLE_QUOTE, DOUBLE_QUOTE):
            end += 1
        if end < len(self.line) and self.line[end] == SINGLE_QUOTE:
            text = self.line[self.pos : end + 1]
            self.pos = end + 1
            return text
        self.pos += 1
        return SINGLE_QUOTE


class SimpleParser:
    """Argument-only grammar: quoted strings and bare words, one command per line.

    No variables, expansion, redirections or terminators.
    """

    def parse_one(self, line: str, start: int = 0) -> tuple[Command, int]:
        pos = skip_spaces(line, max(start, 0))
        if pos >= len(line):
            raise ShellSyntaxError(position=(min(max(start, 0), len(line)), len(line)), line=line)
        arguments: list[str] = []
        while pos < len(line):
            argument, pos = _simple_argument(line, pos)
            arguments.append(argument)
            pos = skip_spaces(line, pos)
        return Command(arguments=arguments), pos

    def parse_line(self, line: str) -> list[Command]:
        return parse_line(self, line)


def _simple_argument(line: str, pos: int) -> tuple[str, int]:
    char = line[pos]
    if char in (SINGLE_QUOTE, DOUBLE_QUOTE):
        end = line.find(char, pos + 1)
        if end < 0:
            expected = EXPECT_SINGLE_QUOTE if char == SINGLE_QUOTE else EXPECT_DOUBLE_QUOTE
            raise ExpectationFailure(expected, position=(len(line), len(line)), line=line)
        return line[pos + 1 : end], end + 1
    chars: list[str] = []
    while pos < len(line) and not is_space(line[pos]):
        if line[pos] == ESCAPE:
            pos += 1
            if pos >= len(line):
                raise ExpectationFailure(EXPECT_CHARACTER, position=(pos, len(line)), line=line)
        chars.append(line[pos])
        pos += 1
    return "".join(chars), pos


def parse_line(parser: CommandParser, line: str) -> list[Command]:
    """Run ``parser`` over every segment of ``line``; empty segments are dropped."""

    commands: list[Command] = []
    pos = 0
    while True:
        command, pos = parser.parse_one(line, pos)
        if not command.is_empty:
            commands.append(command)
        if pos >= len(line):
            return commands
