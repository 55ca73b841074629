"""Per-file copy/remove steps shared by build, install, uninstall and clean.

Each step logs its own [OK]/[FAILED] line and never aborts the caller.
"""

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from ..errors import CopyFailure
from ..output import log_status

logger = logging.getLogger(__name__)


def copy_file(source: str, destination: str) -> None:
    """Copy one file, creating the destination's parent directory.

    Raises:
        CopyFailure: If the copy fails
    """
    try:
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
    except OSError as e:
        raise CopyFailure(source, destination, str(e)) from e


def copy_logged(source: str, destination: str, position: int = 0, total: int = 0) -> bool:
    """Copy one file and log the outcome.

    Returns:
        True if the copy succeeded
    """
    counter = f" ({position}/{total})" if total else ""
    try:
        copy_file(source, destination)
    except CopyFailure as e:
        logger.debug(str(e))
        log_status(f"Copy {source} -> {destination}{counter}", ok=False)
        return False
    log_status(f"Copy {source} -> {destination}{counter}", ok=True)
    return True


def copy_all(pairs: Sequence[tuple[str, str]]) -> int:
    """Copy every (source, destination) pair, continuing past failures.

    Returns:
        Number of failed copies
    """
    failures = 0
    for position, (source, destination) in enumerate(pairs, start=1):
        if not copy_logged(source, destination, position, len(pairs)):
            failures += 1
    return failures


def remove_logged(path: str, label: str = "", position: int = 0, total: int = 0) -> bool:
    """Remove one file and log the outcome.

    Returns:
        True if the file was removed
    """
    counter = f" ({position}/{total})" if total else ""
    message = f"Remove {label or path}{counter}"
    try:
        Path(path).unlink()
    except OSError as e:
        logger.debug(f"Failed to remove {path}: {e}")
        log_status(message, ok=False)
        return False
    log_status(message, ok=True)
    return True
