"""Line sources for the interpreter loop."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Protocol, TextIO

from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory


class LineReader(Protocol):
    """Yields one line per call without its newline, or ``None`` at end of input."""

    @property
    def interactive(self) -> bool: ...

    def read_line(self, prompt: str = "") -> str | None: ...


class StreamLineReader:
    """Reads lines from a text stream such as stdin or a script file."""

    def __init__(self, stream: TextIO, out: TextIO | None = None) -> None:
        self._stream = stream
        self._out = out

    @property
    def interactive(self) -> bool:
        isatty = getattr(self._stream, "isatty", None)
        return bool(isatty and isatty())

    def read_line(self, prompt: str = "") -> str | None:
        if prompt and self._out is not None:
            self._out.write(prompt)
            self._out.flush()
        line = self._stream.readline()
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return line


class PromptLineReader:
    """Interactive reader backed by a prompt_toolkit session.

    Ctrl-D ends the input. Ctrl-C abandons the current line and yields an
    empty one, so the interpreter treats it as a blank line.
    """

    interactive = True

    def __init__(
        self,
        history_file: Path | None = None,
        session: PromptSession[str] | None = None,
    ) -> None:
        if session is None:
            history: History = InMemoryHistory()
            if history_file is not None:
                history_file = history_file.expanduser()
                history_file.parent.mkdir(parents=True, exist_ok=True)
                history = FileHistory(str(history_file))
            session = PromptSession(history=history)
        self._session = session

    def read_line(self, prompt: str = "") -> str | None:
        try:
            return self._session.prompt(prompt)
        except EOFError:
            logger.debug("reader.eof")
            return None
        except KeyboardInterrupt:
            logger.debug("reader.interrupted")
            return ""


def create_reader(history_file: Path | None = None, stream: TextIO | None = None) -> LineReader:
    """Pick a prompt_toolkit reader for terminals and a plain stream reader otherwise."""

    stream = sys.stdin if stream is None else stream
    if stream is sys.stdin and stream.isatty() and sys.stdout.isatty():
        return PromptLineReader(history_file=history_file)
    return StreamLineReader(stream)
