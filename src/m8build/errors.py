"""Exception types raised by m8build.

Compiler and linker failures carry the external process's exit status so the
build command can propagate it as the program's own exit code.
"""

from typing import Optional


class M8BuildError(Exception):
    """Base class for all m8build errors."""

    exit_code: int = 1


class ConfigurationError(M8BuildError):
    """Raised when the project configuration or project file is invalid."""

    pass


class CommandNotFoundError(M8BuildError):
    """Raised when a command name matches no registered command."""

    exit_code = 127

    def __init__(self, name: str):
        super().__init__(f"Command not found: `{name}`")
        self.name = name


class CompilerFailure(M8BuildError):
    """Raised when a compiler invocation exits with a non-zero status."""

    def __init__(self, exit_code: int, source: Optional[str] = None):
        where = f" while compiling {source}" if source else ""
        super().__init__(f"Compiler returned non-zero value: {exit_code}{where}")
        self.exit_code = exit_code
        self.source = source


class LinkerFailure(M8BuildError):
    """Raised when the linker or archiver exits with a non-zero status."""

    def __init__(self, exit_code: int):
        super().__init__(f"Linker returned non-zero value: {exit_code}")
        self.exit_code = exit_code


class CopyFailure(M8BuildError):
    """Raised when a single file copy fails. Callers log it and continue."""

    def __init__(self, source: str, destination: str, reason: str = ""):
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to copy {source} -> {destination}{detail}")
        self.source = source
        self.destination = destination
