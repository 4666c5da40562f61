from __future__ import annotations

import os
from pathlib import Path

import pytest

from lineshell.expansion import escape, unescape


class FakeExpander:
    """Expander with canned matches; everything else passes through unescaped."""

    def __init__(self, matches: dict[str, list[str]] | None = None) -> None:
        self.matches = matches or {}
        self.patterns: list[str] = []

    def escape(self, literal: str) -> str:
        return escape(literal)

    def expand(self, pattern: str) -> list[str]:
        self.patterns.append(pattern)
        return list(self.matches.get(pattern, [unescape(pattern)]))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in [key for key in os.environ if key.upper().startswith("LINESHELL_")]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def expander() -> FakeExpander:
    return FakeExpander()
