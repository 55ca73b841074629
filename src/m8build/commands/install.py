"""Install and uninstall commands (POSIX hosts only).

install copies the built artifact to <prefix>/bin or <prefix>/lib and the
exported headers to <prefix>/include. uninstall removes exactly those files.
"""

from collections.abc import Sequence

from ..config import ProjectConfiguration
from ..console import print_result
from ..output import log_phase
from .files import copy_all, remove_logged


def install_project(argv: Sequence[str], sources: Sequence[str], config: ProjectConfiguration) -> int:
    """Copy the dist tree to the install prefix.

    Per-file failures are reported and do not stop the remaining copies.

    Returns:
        0 if every file was installed, 1 otherwise
    """
    del argv, sources  # Unused
    host = config.host
    log_phase(1, 1, f"Installing to {config.install_prefix}...")

    pairs = [(config.target_path, config.install_target)]
    pairs += [(host.join(config.include_dir, header), host.join(config.install_include_dir, header)) for header in config.headers]
    failed = copy_all(pairs)

    if failed:
        print_result(False, f"Installation incomplete: {failed} of {len(pairs)} files failed.")
        return 1
    print_result(True, "Installation complete.")
    return 0


def uninstall_project(argv: Sequence[str], sources: Sequence[str], config: ProjectConfiguration) -> int:
    """Remove every file that install_project copies.

    Returns:
        0 if every file was removed, 1 otherwise
    """
    del argv, sources  # Unused
    host = config.host
    log_phase(1, 1, f"Uninstalling from {config.install_prefix}...")

    paths = [config.install_target] + [host.join(config.install_include_dir, header) for header in config.headers]
    failed = 0
    for position, path in enumerate(paths, start=1):
        if not remove_logged(path, position=position, total=len(paths)):
            failed += 1

    if failed:
        print_result(False, f"Uninstall incomplete: {failed} of {len(paths)} files not removed.")
        return 1
    print_result(True, "Uninstalled.")
    return 0
