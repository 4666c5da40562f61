"""Variable lookup collaborators."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Protocol


class VariableResolver(Protocol):
    """Name to value lookup used for ``$name`` and ``${name}``."""

    def lookup(self, name: str) -> str: ...


class MappingResolver:
    """Resolve names from a mapping. Unset names resolve to an empty string."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    def lookup(self, name: str) -> str:
        return self._values.get(name, "")

    def assign(self, name: str, value: str) -> None:
        self._values[name] = value


class EnvironmentResolver:
    """Resolve names from the process environment."""

    def lookup(self, name: str) -> str:
        return os.environ.get(name, "")
