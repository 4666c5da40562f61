"""lineshell command line interface."""

from __future__ import annotations

import json
import os
from pathlib import Path

import typer
from rich.console import Console

from lineshell.config import Settings, get_settings
from lineshell.errors import ParseError
from lineshell.expansion import GlobExpander
from lineshell.interpreter import ShellInterpreter
from lineshell.parser import CommandParser, ShellParser, SimpleParser, parse_line
from lineshell.reporting import format_error
from lineshell.types import Command
from lineshell.variables import MappingResolver

EXIT_COMMAND = "exit"

app = typer.Typer(name="lineshell", help="Parse shell-style command lines", add_completion=False)


def build_parser(settings: Settings, *, resolver: MappingResolver | None = None, simple: bool = False) -> CommandParser:
    if simple:
        return SimpleParser()
    expander = GlobExpander(braces=settings.expand_braces, tilde=settings.expand_tilde, nocheck=settings.nocheck)
    return ShellParser(resolver=resolver, expander=expander)


@app.command()
def repl(
    prompt: str | None = typer.Option(None, "--prompt", help="Prompt text"),
    history_file: Path | None = typer.Option(None, "--history-file", help="Persistent input history"),  # noqa: B008
    simple: bool = typer.Option(False, "--simple", help="Use the argument-only grammar"),
) -> None:
    """Read lines and print every command they parse into; `exit` leaves."""

    settings = get_settings(prompt=prompt, history_file=history_file)
    variables = MappingResolver(os.environ)
    console = Console()
    interpreter = ShellInterpreter(build_parser(settings, resolver=variables, simple=simple), settings=settings)

    @interpreter.on_command
    def show(command: Command) -> bool:
        console.print_json(data=command.as_dict())
        for assignment in command.assignments:
            variables.assign(assignment.name, assignment.value)
        return False

    interpreter.on_command(lambda _command: True, name=EXIT_COMMAND)
    interpreter.loop()


@app.command()
def parse(
    line: str = typer.Argument(..., help="Command line to parse"),
    simple: bool = typer.Option(False, "--simple", help="Use the argument-only grammar"),
) -> None:
    """Parse one line and print its commands as JSON."""

    settings = get_settings()
    parser = build_parser(settings, resolver=MappingResolver(os.environ), simple=simple)
    try:
        commands = parse_line(parser, line)
    except ParseError as error:
        typer.echo(format_error(error, settings.program_name), err=True)
        raise typer.Exit(1) from error
    typer.echo(json.dumps([command.as_dict() for command in commands], indent=2))
