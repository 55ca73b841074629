"""Link/archive step.

Runs exactly one external command over every object artifact, after all
compilation has finished:

    static library:  <archiver> r <target> <objects...>
    otherwise:       <linker> -o <target> <objects...> <linker flags>
"""

import logging
from collections.abc import Sequence
from typing import Optional

from ..config import ProjectConfiguration, ProjectKind
from ..errors import LinkerFailure
from ..output import log_detail
from ..subprocess_utils import CommandRunner, format_command, run_command, split_command

logger = logging.getLogger(__name__)


class Linker:
    """Links executables and shared libraries, archives static libraries."""

    def __init__(self, config: ProjectConfiguration, runner: Optional[CommandRunner] = None):
        """Initialize the linker.

        Args:
            config: Project configuration
            runner: Command execution facility (defaults to run_command)
        """
        self.config = config
        self.runner: CommandRunner = runner or run_command

    @property
    def archives(self) -> bool:
        """True when the output is a static library produced by the archiver."""
        return self.config.kind is ProjectKind.STATIC_LIBRARY

    def build_command(self, objects: Sequence[str]) -> list[str]:
        """Assemble the link or archive command line.

        Args:
            objects: All object artifacts, in unit order

        Returns:
            Command and arguments
        """
        config = self.config
        if self.archives:
            return [*split_command(config.archiver), config.host.archive_mode, config.target_path, *objects]
        return [
            *split_command(config.linker),
            "-o",
            config.target_path,
            *objects,
            *split_command(config.linker_flags),
        ]

    def link(self, objects: Sequence[str]) -> int:
        """Run the link/archive command.

        Returns:
            The external process's exit status (127 if it could not start,
            1 if the configured command line is malformed)
        """
        try:
            command = self.build_command(objects)
            log_detail(f"Executing: {format_command(command)}", verbose_only=True)
            status = self.runner(command)
        except OSError as e:
            logger.error(f"Failed to run link step: {e}")
            return 127
        except ValueError as e:
            logger.error(f"Invalid link command: {e}")
            return 1
        if status != 0:
            logger.debug(f"{'Archiver' if self.archives else 'Linker'} exited with {status}")
        return status

    def link_or_raise(self, objects: Sequence[str]) -> None:
        """Run the link/archive command.

        Raises:
            LinkerFailure: If the command exits with a non-zero status
        """
        status = self.link(objects)
        if status != 0:
            raise LinkerFailure(status)
