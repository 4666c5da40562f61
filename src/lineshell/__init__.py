"""lineshell - a line-oriented shell grammar and interpreter loop."""

from lineshell.errors import (
    AmbiguousRedirection,
    ConfigurationError,
    ExpectationFailure,
    HookRegistrationError,
    LineShellError,
    ParseError,
    PipeWithoutContinuation,
    ShellSyntaxError,
)
from lineshell.expansion import GlobExpander
from lineshell.hookspecs import hookimpl
from lineshell.interpreter import ShellInterpreter
from lineshell.parser import ShellParser, SimpleParser, parse_line
from lineshell.reader import PromptLineReader, StreamLineReader
from lineshell.reporting import format_error
from lineshell.types import Command, Redirection, RedirectionKind, Terminator, VariableAssignment
from lineshell.variables import EnvironmentResolver, MappingResolver

__version__ = "0.1.0"

__all__ = [
    "AmbiguousRedirection",
    "Command",
    "ConfigurationError",
    "EnvironmentResolver",
    "ExpectationFailure",
    "GlobExpander",
    "HookRegistrationError",
    "LineShellError",
    "MappingResolver",
    "ParseError",
    "PipeWithoutContinuation",
    "PromptLineReader",
    "Redirection",
    "RedirectionKind",
    "ShellInterpreter",
    "ShellParser",
    "ShellSyntaxError",
    "SimpleParser",
    "StreamLineReader",
    "Terminator",
    "VariableAssignment",
    "format_error",
    "hookimpl",
    "parse_line",
]
