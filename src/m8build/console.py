"""Rich rendering for the command table and final build status."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from .commands.registry import BuildCommand

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the shared console, created on first use."""
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def print_result(ok: bool, message: str) -> None:
    """Print the final status line of a command."""
    if ok:
        get_console().print(Text(f"✓ {message}", style="bold green"))
    else:
        get_console().print(Text(f"✗ {message}", style="bold red"))


def print_command_table(prog: str, commands: Sequence["BuildCommand"]) -> None:
    """Print usage and the table of registered commands."""
    console = get_console()
    console.print("This is your m8. I'm here to build software for you!")
    console.print(f"Usage: {prog} [command] <options>", markup=False)
    console.print("Defaults to the first available command if no command is specified.")

    table = Table(title="Available commands", title_justify="left", show_edge=False, pad_edge=False)
    table.add_column("Command", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    for command in commands:
        table.add_row(command.name, command.description)
    console.print(table)
