"""Command table and dispatch.

Commands are registered in a fixed, ordered list. Dispatch is a lookup by
name over that list:

    no command name   -> first registered command (build)
    "help"            -> print the command table, exit 0
    registered name   -> run its handler, return its exit status
    anything else     -> "Command not found", exit 127
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..config import ProjectConfiguration
from ..console import print_command_table
from ..errors import CommandNotFoundError, ConfigurationError
from ..output import log_error
from ..platform import HostPlatform
from .build import build_project
from .clean import clean_project
from .install import install_project, uninstall_project

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Sequence[str], Sequence[str], ProjectConfiguration], int]

HELP_COMMAND = "help"


@dataclass(frozen=True)
class BuildCommand:
    """A named operation selectable from the command line.

    Attributes:
        name: Command name matched against argv[1]
        description: One-line description shown by help
        handler: Called with (argv, sources, config); returns an exit status
    """

    name: str
    description: str
    handler: CommandHandler


def default_build_commands(host: Optional[HostPlatform] = None) -> list[BuildCommand]:
    """Return the default command table for a host, in registration order."""
    host = host or HostPlatform.current()
    commands = [
        BuildCommand(
            name="build",
            description="Compile and link source files. Add `-j N` or `--jobs N`, where N is a number of threads to utilize.",
            handler=build_project,
        )
    ]
    if host.supports_install:
        commands += [
            BuildCommand(name="install", description="Copy a dist tree to a specified directory.", handler=install_project),
            BuildCommand(name="uninstall", description="Remove all installed files.", handler=uninstall_project),
        ]
    commands.append(BuildCommand(name="clean", description="Remove all temporary build files and dist tree.", handler=clean_project))
    return commands


def find_command(name: str, commands: Sequence[BuildCommand]) -> BuildCommand:
    """Look up a registered command by name.

    Raises:
        CommandNotFoundError: If no command has this name
    """
    for command in commands:
        if command.name == name:
            return command
    raise CommandNotFoundError(name)


def dispatch(
    argv: Sequence[str],
    sources: Sequence[str],
    commands: Sequence[BuildCommand],
    config: ProjectConfiguration,
) -> int:
    """Select and run a command.

    Args:
        argv: Full argument vector; argv[0] is the program, argv[1] the command
        sources: Compilation units
        commands: Ordered command table
        config: Project configuration

    Returns:
        Exit status of the selected handler, 0 for help, 127 if not found
    """
    prog = Path(argv[0]).name if argv else "m8build"
    name = argv[1] if len(argv) > 1 and not argv[1].startswith("-") else None

    if name == HELP_COMMAND:
        print_command_table(prog, commands)
        return 0

    if name is None:
        command = commands[0]
    else:
        try:
            command = find_command(name, commands)
        except CommandNotFoundError as e:
            log_error(f"{e}. Run `{prog} help` to list available commands.")
            return e.exit_code

    logger.debug(f"Dispatching to {command.name}")
    return command.handler(argv, sources, config)


def m8_main(
    argv: Sequence[str],
    sources: Sequence[str],
    config: Optional[ProjectConfiguration] = None,
    commands: Optional[Sequence[BuildCommand]] = None,
) -> int:
    """Entry point for build scripts.

    Example:
        config = ProjectConfiguration(compiler="clang++ -c", linker="clang++", output="test")
        sys.exit(m8_main(sys.argv, ["main.cxx", "test.cxx"], config))

    Args:
        argv: Full argument vector
        sources: Compilation units relative to config.source_dir
        config: Project configuration (defaults to ProjectConfiguration())
        commands: Command table (defaults to default_build_commands())

    Returns:
        Exit status

    Raises:
        ConfigurationError: If sources or commands are empty
    """
    config = config or ProjectConfiguration()
    commands = default_build_commands(config.host) if commands is None else commands
    if not commands:
        raise ConfigurationError("Build commands must be specified")
    if not sources:
        raise ConfigurationError("Source files must be specified")
    return dispatch(argv, sources, commands, config)
