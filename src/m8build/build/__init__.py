"""
Build system components for m8build.

This package provides the build core:
- Object path mapping (flattened artifacts in one build directory)
- Static partitioning of units into worker batches
- Parallel compilation with fail-fast cancellation
- Linking / archiving
"""

from .batches import BatchPlan, CompilationBatch, plan_batches
from .linker import Linker
from .object_paths import find_collisions, object_path, object_paths
from .scheduler import CompilationScheduler, compile_sources
from .tree import setup_tree
from .worker_pool import run_workers

__all__ = [
    "BatchPlan",
    "CompilationBatch",
    "CompilationScheduler",
    "Linker",
    "compile_sources",
    "find_collisions",
    "object_path",
    "object_paths",
    "plan_batches",
    "run_workers",
    "setup_tree",
]
