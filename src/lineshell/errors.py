"""Exception types for lineshell."""

from __future__ import annotations

from lineshell.reporting import describe_location, render_message

AMBIGUOUS_REDIRECT_MESSAGE = "ambiguous redirect target"
SYNTAX_ERROR_MESSAGE = "syntax error"


class LineShellError(Exception):
    """Base exception for lineshell."""


class ConfigurationError(LineShellError):
    """Raised when settings cannot be turned into a working interpreter."""


class HookRegistrationError(LineShellError):
    """Raised when a hook is unknown or is replaced while a command is dispatched."""


class ParseError(LineShellError):
    """A line, or part of it, could not be parsed.

    Args:
        message: Short description of the failure.
        expected: Tag naming the continuation the grammar required, if any.
        position: ``(start, end)`` span into ``line`` where parsing failed.
        line: The text being parsed.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: str | None = None,
        position: tuple[int, int] | None = None,
        line: str = "",
    ) -> None:
        self.message = message
        self.expected = expected
        self.position = position
        self.line = line
        super().__init__(message)

    @property
    def location(self) -> str:
        """Text at the failure point, or ``<end-of-line>``."""
        return describe_location(self.line, self.position)

    def __str__(self) -> str:
        return render_message(self)


class ShellSyntaxError(ParseError):
    """Generic non-match: no grammar rule applied."""

    def __init__(self, *, position: tuple[int, int] | None = None, line: str = "") -> None:
        super().__init__(SYNTAX_ERROR_MESSAGE, position=position, line=line)


class ExpectationFailure(ParseError):
    """A rule matched partially and then required a continuation that was absent."""

    def __init__(
        self,
        expected: str,
        *,
        position: tuple[int, int],
        line: str,
        message: str = SYNTAX_ERROR_MESSAGE,
    ) -> None:
        super().__init__(message, expected=expected, position=position, line=line)


class AmbiguousRedirection(ExpectationFailure):
    """A redirection target expanded to zero or several paths."""

    TAG = "unambiguous redirection"

    def __init__(self, *, position: tuple[int, int], line: str, candidates: list[str] | None = None) -> None:
        super().__init__(self.TAG, position=position, line=line, message=AMBIGUOUS_REDIRECT_MESSAGE)
        self.candidates = list(candidates or [])


class PipeWithoutContinuation(ExpectationFailure):
    """A pipe terminator with nothing after it on the line."""

    TAG = "more characters"

    def __init__(self, *, position: tuple[int, int], line: str) -> None:
        super().__init__(self.TAG, position=position, line=line)
