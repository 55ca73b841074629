"""Build command: compile all sources in parallel, then link or archive.

Phases:
    1. Compile every unit (W worker threads plus the remainder on this thread)
    2. Link the executable / shared library, or archive the static library
    3. Export configured headers to dist/include
"""

import logging
import re
import time
from collections.abc import Sequence
from typing import Optional

from ..build.linker import Linker
from ..build.object_paths import object_paths
from ..build.scheduler import compile_sources
from ..build.tree import setup_tree
from ..config import ProjectConfiguration
from ..console import print_result
from ..errors import CompilerFailure, LinkerFailure
from ..output import TimedLogger, log_build_complete, log_error, log_warning
from ..subprocess_utils import CommandRunner
from .files import copy_all

logger = logging.getLogger(__name__)

_JOBS_FLAGS = ("-j", "--jobs")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_jobs_value(value: str) -> int:
    match = _LEADING_INT.match(value)
    if match is None:
        return 1
    jobs = int(match.group(1))
    return jobs if jobs > 0 else 1


def get_jobs(argv: Sequence[str]) -> int:
    """Parse the requested job count from `-j N` / `--jobs N`.

    Also accepts `-jN` and `--jobs=N`. The value is read like C atoi
    (leading digits only); missing, non-numeric or non-positive values give 1.

    Args:
        argv: Full argument vector

    Returns:
        Requested job count, at least 1
    """
    for index, arg in enumerate(argv):
        if arg in _JOBS_FLAGS:
            if index + 1 < len(argv):
                return _parse_jobs_value(argv[index + 1])
            return 1
        if arg.startswith("--jobs="):
            return _parse_jobs_value(arg[len("--jobs=") :])
        if arg.startswith("-j") and len(arg) > 2:
            return _parse_jobs_value(arg[2:])
    return 1


def export_headers(config: ProjectConfiguration) -> int:
    """Copy configured headers from the source tree to dist/include.

    Returns:
        Number of headers that failed to copy
    """
    host = config.host
    pairs = [(host.join(config.source_dir, header), host.join(config.include_dir, header)) for header in config.headers]
    return copy_all(pairs)


def build_project(
    argv: Sequence[str],
    sources: Sequence[str],
    config: ProjectConfiguration,
    runner: Optional[CommandRunner] = None,
) -> int:
    """Compile and link the project.

    Args:
        argv: Full argument vector (scanned for -j/--jobs)
        sources: Compilation units relative to config.source_dir
        config: Project configuration
        runner: Command execution facility (defaults to run_command)

    Returns:
        0 on success, otherwise the failing compiler's or linker's exit status
    """
    start_time = time.time()
    jobs = get_jobs(argv)
    phases = 3 if config.headers else 2

    setup_tree(config)
    objects = object_paths(sources, config.build_dir, config.objects, config.host)

    try:
        with TimedLogger(f"Compiling {len(sources)} sources", phase=(1, phases)):
            compile_sources(config, sources, objects, jobs, runner)

        linker = Linker(config, runner)
        action = "Archiving" if linker.archives else "Linking"
        with TimedLogger(f"{action} {config.target_path}", phase=(2, phases)):
            linker.link_or_raise(objects)
    except (CompilerFailure, LinkerFailure) as e:
        log_error(str(e))
        print_result(False, "Build failed!")
        return e.exit_code

    if config.headers:
        with TimedLogger(f"Exporting {len(config.headers)} headers", phase=(3, phases)):
            failed = export_headers(config)
        if failed:
            log_warning(f"{failed} of {len(config.headers)} headers were not exported")

    print_result(True, "Compiled successfully.")
    log_build_complete(time.time() - start_time)
    return 0
