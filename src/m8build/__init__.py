"""m8build - a minimal parallel build orchestrator for C and C++.

Build scripts describe a project with ProjectConfiguration and hand their
source list to m8_main():

    import sys
    from m8build import ProjectConfiguration, m8_main

    config = ProjectConfiguration(compiler="clang++ -c", linker="clang++", output="test")
    sys.exit(m8_main(sys.argv, ["main.cxx", "test.cxx"], config))
"""

__version__ = "0.1.0"

from m8build.commands.registry import BuildCommand, default_build_commands, dispatch, m8_main  # noqa: E402
from m8build.config import ProjectConfiguration, ProjectKind  # noqa: E402
from m8build.platform import POSIX, WINDOWS, HostPlatform  # noqa: E402

__all__ = [
    "BuildCommand",
    "HostPlatform",
    "POSIX",
    "ProjectConfiguration",
    "ProjectKind",
    "WINDOWS",
    "__version__",
    "default_build_commands",
    "dispatch",
    "m8_main",
]
