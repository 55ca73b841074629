"""Clean command: remove every object artifact and the built target."""

from collections.abc import Sequence

from ..build.object_paths import object_paths
from ..config import ProjectConfiguration
from ..console import print_result
from ..output import log_phase
from .files import remove_logged


def clean_project(argv: Sequence[str], sources: Sequence[str], config: ProjectConfiguration) -> int:
    """Remove all object files and the target.

    Missing files are reported as [FAILED] but never change the exit status;
    cleaning an already clean tree succeeds.

    Returns:
        Always 0
    """
    del argv  # Unused
    objects = object_paths(sources, config.build_dir, config.objects, config.host)
    log_phase(1, 1, f"Cleaning {len(objects)} objects and target...")

    removed = 0
    for position, obj in enumerate(objects, start=1):
        removed += remove_logged(obj, position=position, total=len(objects))
    removed += remove_logged(config.target_path, label=f"target {config.target_path}")

    print_result(True, f"Cleaned ({removed} files removed).")
    return 0
