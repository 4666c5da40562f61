"""Command records produced by the parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RedirectionKind(Enum):
    """Standard stream redirection operators."""

    INPUT = "<"
    TRUNCATED_OUTPUT = ">"
    APPENDED_OUTPUT = ">>"


class Terminator(Enum):
    """How one segment of a line was ended."""

    NORMAL = ";"
    BACKGROUNDED = "&"
    PIPED = "|"


@dataclass(frozen=True)
class VariableAssignment:
    """One `name=value` prefix of a command."""

    name: str
    value: str


@dataclass(frozen=True)
class Redirection:
    """Redirection with its single resolved target path."""

    kind: RedirectionKind
    target: str


@dataclass
class Command:
    """Parse result for one terminator-delimited segment of a line."""

    assignments: list[VariableAssignment] = field(default_factory=list)
    arguments: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    terminator: Terminator = Terminator.NORMAL

    @property
    def name(self) -> str:
        return self.arguments[0] if self.arguments else ""

    @property
    def is_empty(self) -> bool:
        """True when the segment matched nothing: no assignments, arguments or redirections."""
        return not self.assignments and not self.arguments and not self.redirections

    def as_dict(self) -> dict[str, Any]:
        return {
            "assignments": [{"name": item.name, "value": item.value} for item in self.assignments],
            "arguments": list(self.arguments),
            "redirections": [{"kind": item.kind.name, "target": item.target} for item in self.redirections],
            "terminator": self.terminator.name,
        }
