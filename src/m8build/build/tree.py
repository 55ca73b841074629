"""Build tree bootstrap.

Creates the only supported layout, idempotently:

    build/
    dist/
      include/
      bin/
      lib/
"""

import logging
from pathlib import Path

from ..config import ProjectConfiguration

logger = logging.getLogger(__name__)


def tree_directories(config: ProjectConfiguration) -> list[str]:
    """Directories created before a build, parents first."""
    host = config.host
    return [
        config.build_dir,
        config.dist_dir,
        host.join(config.dist_dir, "include"),
        host.join(config.dist_dir, "bin"),
        host.join(config.dist_dir, "lib"),
    ]


def setup_tree(config: ProjectConfiguration) -> None:
    """Create the build and distribution directories.

    Failures are tolerated: the common cause is a directory that already
    exists, and anything worse surfaces when the compiler writes its output.
    """
    for directory in tree_directories(config):
        try:
            Path(directory).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug(f"Could not create {directory}: {e}")
