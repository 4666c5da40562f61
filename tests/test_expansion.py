from __future__ import annotations

import os
from pathlib import Path

import pytest
from loguru import logger

from lineshell.expansion import GlobExpander, escape, expand_braces, has_magic, unescape


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    for name in ("foo.txt", "bar.txt", ".hidden.txt", "notes.md"):
        (tmp_path / name).write_text("", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "inner.txt").write_text("", encoding="utf-8")
    return tmp_path


def test_glob_matches_sorted_and_skips_hidden(tree: Path) -> None:
    assert GlobExpander().expand("*.txt") == ["bar.txt", "foo.txt"]
    assert GlobExpander().expand(".*.txt") == [".hidden.txt"]


def test_glob_walks_directories(tree: Path) -> None:
    assert GlobExpander().expand("sub/*.txt") == ["sub/inner.txt"]
    assert GlobExpander().expand("*/") == ["sub/"]
    assert GlobExpander().expand(f"{tree}/s?b/inner.*") == [f"{tree}/sub/inner.txt"]


def test_unmatched_pattern_depends_on_nocheck(tree: Path) -> None:
    assert GlobExpander().expand("*.none") == ["*.none"]
    assert GlobExpander(nocheck=False).expand("*.none") == []
    assert GlobExpander(nocheck=False).expand("missing") == []
    assert GlobExpander(nocheck=False).expand("notes.md") == ["notes.md"]


def test_escaped_pattern_is_literal(tree: Path) -> None:
    assert GlobExpander().expand(escape("*.txt")) == ["*.txt"]
    assert GlobExpander().expand(escape("{foo,bar}.txt")) == ["{foo,bar}.txt"]


def test_brace_expansion(tree: Path) -> None:
    assert GlobExpander().expand("{foo,bar}.txt") == ["foo.txt", "bar.txt"]
    assert GlobExpander(braces=False).expand("{foo,bar}.txt") == ["{foo,bar}.txt"]
    assert expand_braces("a{b,{c,d}}e") == ["abe", "ace", "ade"]
    assert expand_braces("a{b}c") == ["a{b}c"]


def test_tilde_expansion(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert GlobExpander().expand("~/x") == [f"{tmp_path}/x"]
    assert GlobExpander(tilde=False).expand("~/x") == ["~/x"]
    assert GlobExpander().expand(escape("~") + "/x") == ["~/x"]


def test_escape_helpers() -> None:
    assert escape("a*b?[c]\\") == "a\\*b\\?\\[c]\\\\"
    assert unescape(escape("a*b?[c]\\{~}")) == "a*b?[c]\\{~}"
    assert has_magic("a*")
    assert not has_magic("a\\*")


def test_io_errors_are_logged(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_listdir(path: str) -> list[str]:
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(os, "listdir", broken_listdir)
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    try:
        assert GlobExpander().expand("*.txt") == ["*.txt"]
    finally:
        logger.remove(sink_id)

    assert messages == ["i/o error at .: Permission denied"]


def test_escaped_comma_keeps_brace_group_whole(tree: Path) -> None:
    assert escape("a,b") == "a\\,b"
    assert expand_braces("{" + escape("a,b") + ",c}") == ["a\\,b", "c"]
    assert GlobExpander().expand("{" + escape("foo,bar") + "}.txt") == ["{foo,bar}.txt"]
