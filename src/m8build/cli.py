"""
Command-line interface for m8build.

This module provides the `m8build` CLI tool, which reads a project file
(m8.ini by default) and dispatches to the registered commands.

Examples:
    m8build                        # Build (first registered command)
    m8build build -j 8             # Build with 8 worker threads
    m8build clean                  # Remove objects and target
    m8build help                   # List commands
    m8build --project lib.ini build --jobs 4
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from m8build import __version__
from m8build.commands.registry import default_build_commands, dispatch
from m8build.config import DEFAULT_PROJECT_FILE, ProjectConfiguration
from m8build.console import print_result
from m8build.errors import M8BuildError
from m8build.output import init_timer, log_error, log_header, set_verbose

PROJECT_ENV_VAR = "M8BUILD_PROJECT"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass
class CliArgs:
    """Global options consumed before dispatch."""

    project: Path
    verbose: bool = False
    quiet: bool = False


def default_project_path() -> Path:
    """Project file path from M8BUILD_PROJECT, else m8.ini in the working directory."""
    return Path(os.environ.get(PROJECT_ENV_VAR, DEFAULT_PROJECT_FILE))


def parse_global_args(argv: list[str]) -> tuple[CliArgs, list[str]]:
    """Split global options from the command and its arguments.

    Args:
        argv: Arguments after the program name

    Returns:
        Tuple of (global options, remaining arguments in original order)
    """
    parser = argparse.ArgumentParser(prog="m8build", add_help=False)
    parser.add_argument("--project", type=Path, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true")
    parser.add_argument("--version", action="version", version=f"m8build {__version__}")
    parsed, remaining = parser.parse_known_args(argv)
    return (
        CliArgs(project=parsed.project or default_project_path(), verbose=parsed.verbose, quiet=parsed.quiet),
        remaining,
    )


def setup_logging(verbose: bool) -> None:
    """Route diagnostic logging to stderr (debug level when verbose)."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def run(argv: list[str], prog: str = "m8build") -> int:
    """Run the CLI and return its exit status.

    Args:
        argv: Arguments after the program name
        prog: Program name shown in help and error messages
    """
    args, remaining = parse_global_args(argv)
    init_timer()
    setup_logging(args.verbose)
    set_verbose(not args.quiet)

    command_argv = [prog, *remaining]
    if remaining[:1] != ["help"]:
        log_header("m8build", __version__)

    try:
        config, sources = load_project(args.project, remaining)
        return dispatch(command_argv, sources, default_build_commands(config.host), config)
    except KeyboardInterrupt:
        print_result(False, "Build interrupted")
        return 130  # Standard exit code for SIGINT
    except M8BuildError as e:
        log_error(str(e))
        return e.exit_code


def load_project(path: Path, remaining: list[str]) -> tuple[ProjectConfiguration, list[str]]:
    """Load the project file.

    A command name that is not a registered build command (`help`, or a
    typo) is resolved without one, so it reports 0 or 127 instead of a
    missing project file.
    """
    name = remaining[0] if remaining and not remaining[0].startswith("-") else None
    if name is not None and not path.is_file():
        registered = {command.name for command in default_build_commands()}
        if name not in registered:
            return ProjectConfiguration(), []
    return ProjectConfiguration.from_ini(path)


def main(argv: Optional[list[str]] = None) -> None:
    """m8build - minimal parallel build orchestrator for C and C++."""
    args = sys.argv[1:] if argv is None else argv
    sys.exit(run(args))


if __name__ == "__main__":
    main()
