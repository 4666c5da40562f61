"""Pluggy hook namespace and interpreter hook specifications."""

from __future__ import annotations

import pluggy

from lineshell.errors import ParseError
from lineshell.types import Command

LINESHELL_HOOK_NAMESPACE = "lineshell"
hookspec = pluggy.HookspecMarker(LINESHELL_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(LINESHELL_HOOK_NAMESPACE)


class LineShellHookSpecs:
    """Hook contract for interpreter extensions.

    Decision hooks return ``True`` to stop the loop, ``False`` to continue and
    ``None`` to leave the decision to the next implementation.
    """

    @hookspec(firstresult=True)
    def do_command(self, command: Command) -> bool | None:
        """Dispatch one parsed command."""

    @hookspec(firstresult=True)
    def empty_line(self) -> bool | None:
        """Handle a blank input line."""

    @hookspec(firstresult=True)
    def parse_error(self, error: ParseError, line: str) -> bool | None:
        """Report a line that failed to parse."""

    @hookspec(firstresult=True)
    def pre_line(self, line: str) -> str | None:
        """Rewrite a line before it is interpreted."""

    @hookspec(firstresult=True)
    def post_dispatch(self, is_finished: bool, line: str) -> bool | None:
        """Override the stop decision taken by a dispatched command."""

    @hookspec
    def loop_start(self) -> None:
        """Called once before the first line is read."""

    @hookspec
    def loop_end(self) -> None:
        """Called once after the loop has finished."""

    @hookspec
    def on_hook_error(self, stage: str, error: Exception) -> None:
        """Observe failures raised by other hook implementations."""
