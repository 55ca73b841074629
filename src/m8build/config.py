"""Project Configuration.

This module defines the immutable configuration value that flows through every
build component.

Design:
    ProjectConfiguration is constructed once by the caller (a build script or
    the CLI reading an m8.ini project file) and passed explicitly to the
    scheduler, the link invoker and the command handlers. It is a frozen
    dataclass, so worker threads can share it without synchronization and no
    component can observe a partially-updated configuration mid-build.

Project file format (m8.ini):

    [project]
    kind = executable
    output = app
    sources =
        main.c
        util/strings.c
    headers = app.h

    [toolchain]
    compiler = clang -c
    compiler_flags = -O2 -Wall
    linker = clang
    linker_flags = -lm
    archiver = ar

    [layout]
    source_dir = src
    build_dir = build
    dist_dir = dist
    objects = o
"""

import configparser
import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from .errors import ConfigurationError
from .platform import HostPlatform

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_FILE = "m8.ini"


class ProjectKind(Enum):
    """Kind of artifact the link step produces."""

    EXECUTABLE = "executable"
    STATIC_LIBRARY = "static"
    SHARED_LIBRARY = "shared"

    def __str__(self) -> str:
        return self.value

    @property
    def install_subdir(self) -> str:
        """Distribution/install subdirectory: bin for executables, lib otherwise."""
        return "bin" if self is ProjectKind.EXECUTABLE else "lib"

    def artifact_suffix(self, host: HostPlatform) -> str:
        """Conventional output suffix for this kind on the given host."""
        if self is ProjectKind.STATIC_LIBRARY:
            return host.static_suffix
        if self is ProjectKind.SHARED_LIBRARY:
            return host.shared_suffix
        return host.executable_suffix

    @classmethod
    def parse(cls, value: str) -> "ProjectKind":
        """Parse a project kind from its name or an accepted alias.

        Raises:
            ConfigurationError: If the value names no project kind
        """
        normalized = value.strip().lower().replace("-", "_")
        aliases = {
            "executable": cls.EXECUTABLE,
            "exe": cls.EXECUTABLE,
            "static": cls.STATIC_LIBRARY,
            "static_library": cls.STATIC_LIBRARY,
            "shared": cls.SHARED_LIBRARY,
            "shared_library": cls.SHARED_LIBRARY,
        }
        if normalized not in aliases:
            raise ConfigurationError(f"Unknown project kind: {value!r}")
        return aliases[normalized]


@dataclass(frozen=True)
class ProjectConfiguration:
    """Immutable configuration for one project build.

    Attributes:
        compiler: Compiler command, may include arguments (e.g. "cc -c")
        compiler_flags: Flags inserted after the compiler command
        linker: Linker command used for executables and shared libraries
        linker_flags: Flags appended after all object files when linking
        archiver: Archiver command used for static libraries
        source_dir: Directory that compilation unit paths are relative to
        build_dir: Flat directory holding all object artifacts
        dist_dir: Distribution tree root (bin/, lib/, include/)
        objects: Object file extension, without the leading dot
        output: Final artifact file name
        kind: Project kind (executable, static or shared library)
        install_prefix: Root directory used by install/uninstall
        headers: Header files (relative to source_dir) exported to dist/include
        host: Host platform flag set
    """

    compiler: str = "cc -c"
    compiler_flags: str = "-O2"
    linker: str = "ld"
    linker_flags: str = ""
    archiver: str = "ar"
    source_dir: str = "src"
    build_dir: str = "build"
    dist_dir: str = "dist"
    objects: str = "o"
    output: str = "output"
    kind: ProjectKind = ProjectKind.EXECUTABLE
    install_prefix: str = "/usr"
    headers: tuple[str, ...] = ()
    host: HostPlatform = field(default_factory=HostPlatform.current)

    def replace(self, **changes: Any) -> "ProjectConfiguration":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @property
    def target_dir(self) -> str:
        """Distribution directory that receives the linked artifact."""
        return self.host.join(self.dist_dir, self.kind.install_subdir)

    @property
    def target_path(self) -> str:
        """Project-relative path of the linked or archived artifact."""
        return self.host.join(self.target_dir, self.output)

    @property
    def include_dir(self) -> str:
        """Distribution directory that receives exported headers."""
        return self.host.join(self.dist_dir, "include")

    @property
    def install_target(self) -> str:
        """Installed location of the final artifact."""
        return self.host.join(self.install_prefix, self.kind.install_subdir, self.output)

    @property
    def install_include_dir(self) -> str:
        """Installed location of exported headers."""
        return self.host.join(self.install_prefix, "include")

    @classmethod
    def from_ini(
        cls, path: Union[str, Path], host: Optional[HostPlatform] = None
    ) -> tuple["ProjectConfiguration", list[str]]:
        """Load a configuration and its source list from an m8.ini file.

        Args:
            path: Path to the project file
            host: Host flag set (defaults to the running host)

        Returns:
            Tuple of (configuration, ordered source list)

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        ini_path = Path(path)
        if not ini_path.is_file():
            raise ConfigurationError(f"Project file not found: {ini_path}")

        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Invalid project file {ini_path}: {e}") from e

        if not parser.has_section("project"):
            raise ConfigurationError(f"Missing [project] section in {ini_path}")

        project = parser["project"]
        sources = project.get("sources", "").split()
        if not sources:
            raise ConfigurationError(f"No sources listed in {ini_path}")

        host = host or HostPlatform.current()
        kind = ProjectKind.parse(project.get("kind", ProjectKind.EXECUTABLE.value))
        output = project.get("output", "output")
        suffix = kind.artifact_suffix(host)
        if suffix and not output.endswith(suffix):
            output += suffix

        defaults = cls(host=host)
        values: dict[str, Any] = {
            "kind": kind,
            "output": output,
            "headers": tuple(project.get("headers", "").split()),
            "install_prefix": project.get("install_prefix", defaults.install_prefix),
            "host": host,
        }
        for section, keys in (
            ("toolchain", ("compiler", "compiler_flags", "linker", "linker_flags", "archiver")),
            ("layout", ("source_dir", "build_dir", "dist_dir", "objects")),
        ):
            if not parser.has_section(section):
                continue
            for key in keys:
                if key in parser[section]:
                    values[key] = parser[section][key].strip()

        config = cls(**values)
        logger.debug(f"Loaded project {config.output} ({config.kind}) with {len(sources)} sources from {ini_path}")
        return config, sources
