"""Hook execution runtime with per-plugin fault isolation."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import pluggy
from loguru import logger

from lineshell.errors import HookRegistrationError, ParseError
from lineshell.hookspecs import hookimpl
from lineshell.types import Command

HOOK_NAMES = (
    "command",
    "empty_line",
    "parse_error",
    "pre_line",
    "post_dispatch",
    "loop_start",
    "loop_end",
    "hook_error",
)


class HookRuntime:
    """Safe wrapper around pluggy hook execution."""

    def __init__(self, plugin_manager: pluggy.PluginManager) -> None:
        self._plugin_manager = plugin_manager

    def call_first(self, hook_name: str, **kwargs: Any) -> Any:
        """Run hook implementations in precedence order and return first non-None value."""

        for impl in self._iter_hookimpls(hook_name):
            value = self._invoke_impl(hook_name=hook_name, impl=impl, kwargs=kwargs)
            if value is _SKIP_VALUE:
                continue
            if value is not None:
                return value
        return None

    def call_many(self, hook_name: str, **kwargs: Any) -> list[Any]:
        """Run all implementations and collect successful return values."""

        results: list[Any] = []
        for impl in self._iter_hookimpls(hook_name):
            value = self._invoke_impl(hook_name=hook_name, impl=impl, kwargs=kwargs)
            if value is _SKIP_VALUE:
                continue
            results.append(value)
        return results

    def notify_error(self, *, stage: str, error: Exception) -> None:
        """Call on_hook_error hooks, swallowing observer failures."""

        for impl in self._iter_hookimpls("on_hook_error"):
            call_kwargs = self._kwargs_for_impl(impl, {"stage": stage, "error": error})
            try:
                impl.function(**call_kwargs)
            except Exception:
                logger.opt(exception=True).warning(
                    "hook.on_hook_error_failed stage={} plugin={}",
                    stage,
                    impl.plugin_name or "<unknown>",
                )

    def hook_report(self) -> dict[str, list[str]]:
        """Build a hook->plugins mapping for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name, hook_caller in sorted(self._plugin_manager.hook.__dict__.items()):
            if hook_name.startswith("_") or not hasattr(hook_caller, "get_hookimpls"):
                continue
            plugin_names = [impl.plugin_name for impl in hook_caller.get_hookimpls()]
            if plugin_names:
                report[hook_name] = plugin_names
        return report

    def _invoke_impl(self, *, hook_name: str, impl: Any, kwargs: dict[str, Any]) -> Any:
        call_kwargs = self._kwargs_for_impl(impl, kwargs)
        try:
            return impl.function(**call_kwargs)
        except HookRegistrationError:
            raise
        except Exception as error:
            stage = f"{hook_name}:{impl.plugin_name or '<unknown>'}"
            logger.opt(exception=True).warning("hook.failed stage={}", stage)
            self.notify_error(stage=stage, error=error)
            return _SKIP_VALUE

    def _iter_hookimpls(self, hook_name: str) -> list[Any]:
        hook = getattr(self._plugin_manager.hook, hook_name, None)
        if hook is None or not hasattr(hook, "get_hookimpls"):
            return []
        return list(reversed(hook.get_hookimpls()))

    @staticmethod
    def _kwargs_for_impl(impl: Any, kwargs: dict[str, Any]) -> dict[str, Any]:
        return {name: kwargs[name] for name in impl.argnames if name in kwargs}


class CallbackRegistry:
    """Plugin holding the callbacks set directly on an interpreter.

    Registered with ``tryfirst`` so explicit callbacks win over other plugins.
    An unset callback answers ``None`` and leaves the decision to the next
    implementation or to the interpreter default.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, Callable[..., Any]] = {}
        self._commands: dict[str, Callable[[Command], Any]] = {}
        self._dispatch_depth = 0

    def set(self, hook: str, function: Callable[..., Any]) -> None:
        if hook not in HOOK_NAMES:
            raise HookRegistrationError(f"unknown hook: {hook}")
        self._check_unlocked(hook)
        self._callbacks[hook] = function

    def set_command(self, function: Callable[[Command], Any], name: str | None = None) -> None:
        self._check_unlocked("command")
        if name is None:
            self._callbacks["command"] = function
        else:
            self._commands[name] = function

    @property
    def dispatching(self) -> bool:
        return self._dispatch_depth > 0

    @contextmanager
    def dispatch_guard(self) -> Iterator[None]:
        """Reject hook changes while a command is being dispatched."""

        self._dispatch_depth += 1
        try:
            yield
        finally:
            self._dispatch_depth -= 1

    def _check_unlocked(self, hook: str) -> None:
        if self.dispatching:
            raise HookRegistrationError(f"cannot set hook {hook} while a command is dispatched")

    @hookimpl(tryfirst=True)
    def do_command(self, command: Command) -> bool | None:
        function = self._commands.get(command.name) or self._callbacks.get("command")
        if function is None:
            return None
        return bool(function(command))

    @hookimpl(tryfirst=True)
    def empty_line(self) -> bool | None:
        function = self._callbacks.get("empty_line")
        return None if function is None else bool(function())

    @hookimpl(tryfirst=True)
    def parse_error(self, error: ParseError, line: str) -> bool | None:
        function = self._callbacks.get("parse_error")
        return None if function is None else bool(function(error, line))

    @hookimpl(tryfirst=True)
    def pre_line(self, line: str) -> str | None:
        function = self._callbacks.get("pre_line")
        return None if function is None else function(line)

    @hookimpl(tryfirst=True)
    def post_dispatch(self, is_finished: bool, line: str) -> bool | None:
        function = self._callbacks.get("post_dispatch")
        return None if function is None else bool(function(is_finished, line))

    @hookimpl(tryfirst=True)
    def loop_start(self) -> None:
        function = self._callbacks.get("loop_start")
        if function is not None:
            function()

    @hookimpl(tryfirst=True)
    def loop_end(self) -> None:
        function = self._callbacks.get("loop_end")
        if function is not None:
            function()

    @hookimpl
    def on_hook_error(self, stage: str, error: Exception) -> None:
        function = self._callbacks.get("hook_error")
        if function is not None:
            function(stage, error)


_SKIP_VALUE = object()
