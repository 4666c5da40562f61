from __future__ import annotations

import pluggy
import pytest

from lineshell.errors import HookRegistrationError
from lineshell.hook_runtime import CallbackRegistry, HookRuntime
from lineshell.hookspecs import LINESHELL_HOOK_NAMESPACE, LineShellHookSpecs, hookimpl
from lineshell.types import Command


def _runtime(*plugins: object) -> HookRuntime:
    manager = pluggy.PluginManager(LINESHELL_HOOK_NAMESPACE)
    manager.add_hookspecs(LineShellHookSpecs)
    for plugin in plugins:
        manager.register(plugin)
    return HookRuntime(manager)


class _Rewriter:
    def __init__(self, suffix: str | None) -> None:
        self.suffix = suffix

    @hookimpl
    def pre_line(self, line: str) -> str | None:
        return None if self.suffix is None else line + self.suffix


class _Observer:
    def __init__(self) -> None:
        self.stages: list[str] = []

    @hookimpl
    def loop_start(self) -> str:
        return "observer"

    @hookimpl
    def on_hook_error(self, stage: str, error: Exception) -> None:
        self.stages.append(stage)


class _Broken:
    @hookimpl
    def loop_start(self) -> None:
        raise ValueError("boom")

    @hookimpl
    def on_hook_error(self, stage: str) -> None:
        raise RuntimeError("observer failed too")


def test_call_first_prefers_latest_registered_plugin() -> None:
    runtime = _runtime(_Rewriter("-early"), _Rewriter(None), _Rewriter("-late"))

    assert runtime.call_first("pre_line", line="ls") == "ls-late"


def test_call_first_skips_none_results() -> None:
    runtime = _runtime(_Rewriter("-early"), _Rewriter(None))

    assert runtime.call_first("pre_line", line="ls") == "ls-early"


def test_call_many_isolates_failures() -> None:
    observer = _Observer()
    runtime = _runtime(observer, _Broken())

    assert runtime.call_many("loop_start") == ["observer"]
    assert len(observer.stages) == 1
    assert observer.stages[0].startswith("loop_start:")


def test_unknown_hook_is_empty() -> None:
    runtime = _runtime()

    assert runtime.call_first("no_such_hook") is None
    assert runtime.call_many("no_such_hook") == []


def test_registry_rejects_unknown_hook() -> None:
    registry = CallbackRegistry()

    with pytest.raises(HookRegistrationError):
        registry.set("bogus", lambda: None)


def test_registry_locked_while_dispatching() -> None:
    registry = CallbackRegistry()

    with registry.dispatch_guard():
        with registry.dispatch_guard():
            pass
        assert registry.dispatching
        with pytest.raises(HookRegistrationError):
            registry.set_command(lambda command: True, "ls")

    assert not registry.dispatching
    registry.set_command(lambda command: True, "ls")
    assert registry.do_command(Command(arguments=["ls"])) is True
    assert registry.do_command(Command(arguments=["cat"])) is None
