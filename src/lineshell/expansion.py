"""Pathname expansion collaborators."""

from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger

GLOB_METACHARACTERS = "*?["
# Characters protected by escape(): glob magic, the escape itself, and the
# brace and tilde syntax handled before matching.
ESCAPED_CHARACTERS = "*?[\\{},~"


class PathnameExpander(Protocol):
    """Expands one word into the list of strings it stands for."""

    def expand(self, pattern: str) -> list[str]: ...

    def escape(self, literal: str) -> str: ...


def escape(literal: str) -> str:
    """Backslash-escape every character that expansion would treat specially."""

    return "".join(f"\\{char}" if char in ESCAPED_CHARACTERS else char for char in literal)


def unescape(pattern: str) -> str:
    """Remove backslash escapes, used when a pattern is passed through verbatim."""

    chars: list[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\" and index + 1 < len(pattern):
            index += 1
            char = pattern[index]
        chars.append(char)
        index += 1
    return "".join(chars)


def has_magic(pattern: str) -> bool:
    """Whether the pattern holds an unescaped glob metacharacter."""

    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char in GLOB_METACHARACTERS:
            return True
        index += 1
    return False


def expand_braces(pattern: str) -> list[str]:
    """Expand ``a{b,c}d`` into ``abd``, ``acd``. Braces without a comma stay literal."""

    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            close, commas = _match_brace(pattern, index)
            if close is not None and commas:
                prefix, suffix = pattern[:index], pattern[close + 1 :]
                bounds = [index, *commas, close]
                expanded: list[str] = []
                for start, end in zip(bounds, bounds[1:]):
                    expanded.extend(expand_braces(prefix + pattern[start + 1 : end] + suffix))
                return expanded
        index += 1
    return [pattern]


def _match_brace(pattern: str, open_index: int) -> tuple[int | None, list[int]]:
    depth = 0
    commas: list[int] = []
    index = open_index
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index, commas
        elif char == "," and depth == 1:
            commas.append(index)
        index += 1
    return None, []


def expand_tilde(pattern: str) -> str:
    """Replace a leading unescaped ``~`` or ``~user`` with the home directory."""

    if not pattern.startswith("~"):
        return pattern
    head, sep, tail = pattern.partition("/")
    home = os.path.expanduser(unescape(head))
    if home == unescape(head):
        return pattern
    return escape(home) + sep + tail


@dataclass
class ExpansionContext:
    """Per-call state of one expansion. Collects filesystem errors met during the walk."""

    errors: list[tuple[str, OSError]] = field(default_factory=list)

    def on_error(self, path: str, error: OSError) -> None:
        self.errors.append((path, error))


class GlobExpander:
    """Default pathname expander backed by the filesystem.

    Args:
        braces: Expand ``{a,b}`` alternatives before matching.
        tilde: Expand a leading ``~`` to the home directory.
        nocheck: Return an unmatched pattern unchanged instead of dropping it.
    """

    def __init__(self, *, braces: bool = True, tilde: bool = True, nocheck: bool = True) -> None:
        self.braces = braces
        self.tilde = tilde
        self.nocheck = nocheck

    def escape(self, literal: str) -> str:
        return escape(literal)

    def expand(self, pattern: str) -> list[str]:
        context = ExpansionContext()
        results: list[str] = []
        candidates = expand_braces(pattern) if self.braces else [pattern]
        for candidate in candidates:
            if self.tilde:
                candidate = expand_tilde(candidate)
            results.extend(self._expand_one(candidate, context))
        for path, error in context.errors:
            logger.warning("i/o error at {}: {}", path, error.strerror or error)
        return results

    def _expand_one(self, pattern: str, context: ExpansionContext) -> list[str]:
        literal = unescape(pattern)
        if not has_magic(pattern):
            if self.nocheck or os.path.lexists(literal):
                return [literal]
            return []
        matches = _glob(pattern, context)
        if matches:
            return matches
        return [literal] if self.nocheck else []


def _glob(pattern: str, context: ExpansionContext) -> list[str]:
    parts = [part for part in pattern.split("/") if part]
    paths = ["/" if pattern.startswith("/") else ""]
    for position, part in enumerate(parts):
        last = position == len(parts) - 1
        found: list[str] = []
        for base in paths:
            if not has_magic(part):
                candidate = _join(base, unescape(part))
                if os.path.lexists(candidate) if last else os.path.isdir(candidate):
                    found.append(candidate)
                continue
            directory = base or "."
            try:
                names = os.listdir(directory)
            except OSError as error:
                context.on_error(directory, error)
                continue
            matcher = _compile(part)
            hidden_allowed = part.startswith(".") or part.startswith("\\.")
            for name in sorted(names):
                if name.startswith(".") and not hidden_allowed:
                    continue
                if matcher.match(name) is None:
                    continue
                candidate = _join(base, name)
                if last or os.path.isdir(candidate):
                    found.append(candidate)
        paths = found
    if pattern.endswith("/"):
        paths = [f"{path}/" for path in paths if os.path.isdir(path)]
    return sorted(paths)


def _join(base: str, name: str) -> str:
    if not base:
        return name
    if base.endswith("/"):
        return base + name
    return f"{base}/{name}"


def _compile(part: str) -> re.Pattern[str]:
    # fnmatch has no backslash escapes; escaped metacharacters become one-char classes.
    chars: list[str] = []
    index = 0
    while index < len(part):
        char = part[index]
        if char == "\\" and index + 1 < len(part):
            index += 1
            escaped = part[index]
            chars.append(f"[{escaped}]" if escaped in GLOB_METACHARACTERS else escaped)
        else:
            chars.append(char)
        index += 1
    return re.compile(fnmatch.translate("".join(chars)))
