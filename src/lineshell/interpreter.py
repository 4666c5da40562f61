"""Hook-driven read-parse-dispatch loop."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO, TypeVar

import pluggy
from loguru import logger

from lineshell.config import Settings
from lineshell.errors import HookRegistrationError, ParseError, ShellSyntaxError
from lineshell.expansion import GlobExpander
from lineshell.hook_runtime import CallbackRegistry, HookRuntime
from lineshell.hookspecs import LINESHELL_HOOK_NAMESPACE, LineShellHookSpecs
from lineshell.parser import CommandParser, ShellParser
from lineshell.reader import LineReader, create_reader
from lineshell.reporting import format_error
from lineshell.types import Command

F = TypeVar("F", bound=Callable[..., Any])

CALLBACKS_PLUGIN_NAME = "callbacks"


class ShellInterpreter:
    """Reads lines, parses them segment by segment and dispatches the commands.

    Behaviour is customised through callbacks (``on_command`` and friends) or
    pluggy plugins implementing :class:`LineShellHookSpecs`. Callbacks set on
    the interpreter run before any plugin.
    """

    def __init__(
        self,
        parser: CommandParser | None = None,
        reader: LineReader | None = None,
        *,
        settings: Settings | None = None,
        err: TextIO | None = None,
        out: TextIO | None = None,
        intro: str | None = None,
        prompt: str | None = None,
        history_file: Path | None = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings()
        self.parser: CommandParser = parser if parser is not None else _default_parser(self.settings)
        self.reader = reader
        self.intro = intro if intro is not None else self.settings.intro
        self.prompt = prompt if prompt is not None else self.settings.prompt
        self.history_file = history_file if history_file is not None else self.settings.history_file
        self._err = err
        self._out = out
        self._last_command = ""

        self._plugin_manager = pluggy.PluginManager(LINESHELL_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(LineShellHookSpecs)
        self._callbacks = CallbackRegistry()
        self._plugin_manager.register(self._callbacks, name=CALLBACKS_PLUGIN_NAME)
        self._hook_runtime = HookRuntime(self._plugin_manager)

    @property
    def last_command(self) -> str:
        """The most recent non-blank line, replayed on an empty line by default."""
        return self._last_command

    # Hooks

    def on_command(self, function: F, name: str | None = None) -> F:
        """Dispatch commands called ``name`` to ``function``, or every command when ``name`` is None."""
        self._callbacks.set_command(function, name)
        return function

    def on_empty_line(self, function: F) -> F:
        self._callbacks.set("empty_line", function)
        return function

    def on_parse_error(self, function: F) -> F:
        self._callbacks.set("parse_error", function)
        return function

    def on_pre_line(self, function: F) -> F:
        self._callbacks.set("pre_line", function)
        return function

    def on_post_dispatch(self, function: F) -> F:
        self._callbacks.set("post_dispatch", function)
        return function

    def on_loop_start(self, function: F) -> F:
        self._callbacks.set("loop_start", function)
        return function

    def on_loop_end(self, function: F) -> F:
        self._callbacks.set("loop_end", function)
        return function

    def on_hook_error(self, function: F) -> F:
        self._callbacks.set("hook_error", function)
        return function

    def register_plugin(self, plugin: Any, name: str | None = None) -> str | None:
        """Register a pluggy plugin implementing any of the interpreter hooks."""

        if self._callbacks.dispatching:
            raise HookRegistrationError("cannot register plugins while a command is dispatched")
        registered = self._plugin_manager.register(plugin, name=name)
        logger.debug("interpreter.plugin_registered name={}", registered)
        return registered

    def hook_report(self) -> dict[str, list[str]]:
        return self._hook_runtime.hook_report()

    # Loop

    def loop(self) -> None:
        """Read and interpret lines until a hook stops the loop or input ends."""

        reader = self.reader if self.reader is not None else create_reader(self.history_file)
        self._hook_runtime.call_many("loop_start")
        try:
            if reader.interactive and self.intro:
                out = self._out or sys.stdout
                out.write(f"{self.intro}\n")
                out.flush()
            while True:
                line = reader.read_line(self.prompt if reader.interactive else "")
                if line is None:
                    logger.debug("interpreter.end_of_input")
                    break
                if self.interpret_one_line(line):
                    logger.debug("interpreter.stopped line={!r}", line)
                    break
        finally:
            self._hook_runtime.call_many("loop_end")

    def interpret_one_line(self, line: str) -> bool:
        """Interpret one line of input. Returns True when the loop should stop."""

        rewritten = self._hook_runtime.call_first("pre_line", line=line)
        if rewritten is not None:
            line = str(rewritten)
        if not line.strip():
            return self._empty_line()

        self._last_command = line
        position = 0
        while True:
            try:
                command, next_position = self.parser.parse_one(line, position)
            except ParseError as error:
                return self._parse_error(error, line)
            if next_position <= position and next_position < len(line):
                # The parser must advance on every segment.
                return self._parse_error(ShellSyntaxError(position=(position, len(line)), line=line), line)
            position = next_position

            if not command.is_empty:
                is_finished = self._dispatch(command)
                is_finished = self._post_dispatch(is_finished, line)
                if is_finished:
                    return True
            if position >= len(line):
                return False

    def _empty_line(self) -> bool:
        result = self._hook_runtime.call_first("empty_line")
        if result is not None:
            return bool(result)
        if not self._last_command:
            return False
        logger.debug("interpreter.replay line={!r}", self._last_command)
        return self.interpret_one_line(self._last_command)

    def _dispatch(self, command: Command) -> bool:
        logger.debug(
            "interpreter.dispatch name={!r} arguments={} terminator={}",
            command.name,
            len(command.arguments),
            command.terminator.name,
        )
        with self._callbacks.dispatch_guard():
            result = self._hook_runtime.call_first("do_command", command=command)
        return bool(result) if result is not None else False

    def _post_dispatch(self, is_finished: bool, line: str) -> bool:
        result = self._hook_runtime.call_first("post_dispatch", is_finished=is_finished, line=line)
        return bool(result) if result is not None else is_finished

    def _parse_error(self, error: ParseError, line: str) -> bool:
        logger.debug("interpreter.parse_error line={!r} error={}", line, error)
        result = self._hook_runtime.call_first("parse_error", error=error, line=line)
        if result is not None:
            return bool(result)
        err = self._err or sys.stderr
        err.write(f"{format_error(error, self.settings.program_name)}\n")
        err.flush()
        return False


def _default_parser(settings: Settings) -> ShellParser:
    expander = GlobExpander(
        braces=settings.expand_braces,
        tilde=settings.expand_tilde,
        nocheck=settings.nocheck,
    )
    return ShellParser(expander=expander)
