"""Command implementations for the m8build CLI.

Each handler takes (argv, sources, config) and returns an exit status.
"""

from m8build.commands.build import build_project, get_jobs
from m8build.commands.clean import clean_project
from m8build.commands.install import install_project, uninstall_project
from m8build.commands.registry import BuildCommand, default_build_commands, dispatch, m8_main

__all__ = [
    "BuildCommand",
    "build_project",
    "clean_project",
    "default_build_commands",
    "dispatch",
    "get_jobs",
    "install_project",
    "m8_main",
    "uninstall_project",
]
