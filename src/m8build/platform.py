"""Host platform flag sets.

m8build knows exactly two hosts: POSIX and Windows. Everything that differs
between them (path delimiter, artifact suffixes, archiver mode, which
commands exist) lives here so the scheduler and invokers stay host-agnostic.
"""

import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class HostPlatform:
    """Flag set for one host operating system.

    Attributes:
        name: Host identifier ("posix" or "windows")
        path_delim: Separator used when joining build paths
        separators: Characters flattened to "." in object artifact names
        executable_suffix: Suffix appended to executable outputs
        shared_suffix: Suffix appended to shared library outputs
        static_suffix: Suffix appended to static library outputs
        archive_mode: Archiver insert/replace mode flag
        supports_install: Whether install/uninstall commands are registered
    """

    name: str
    path_delim: str
    separators: tuple[str, ...]
    executable_suffix: str
    shared_suffix: str
    static_suffix: str
    archive_mode: str
    supports_install: bool

    def join(self, *parts: str) -> str:
        """Join path parts with this host's delimiter."""
        return self.path_delim.join(parts)

    @classmethod
    def current(cls) -> "HostPlatform":
        """Return the flag set for the running interpreter's host."""
        if sys.platform == "win32":
            return WINDOWS
        return POSIX


POSIX = HostPlatform(
    name="posix",
    path_delim="/",
    separators=("/",),
    executable_suffix="",
    shared_suffix=".so",
    static_suffix=".a",
    archive_mode="r",
    supports_install=True,
)

WINDOWS = HostPlatform(
    name="windows",
    path_delim="\\",
    separators=("\\", "/"),
    executable_suffix=".exe",
    shared_suffix=".dll",
    static_suffix=".lib",
    archive_mode="r",
    supports_install=False,
)
