"""Compilation batches.

Defines how the full unit list is statically partitioned across workers:
- CompilationBatch: one worker's contiguous slice of (unit, artifact) pairs
- BatchPlan: the W worker batches plus the trailing remainder slice
- plan_batches(): the partitioning itself

With S units and J requested jobs, W = min(J, S) workers each receive
S // W contiguous units. The trailing S % W units form the remainder, which
the calling thread compiles after all workers have joined.
"""

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class CompilationBatch:
    """A contiguous, ordered slice of units and their artifacts.

    Attributes:
        index: Worker index (-1 for the remainder slice)
        start: Offset of the first unit in the full list
        sources: Compilation units in original order
        objects: Object artifacts, index-aligned with sources
    """

    index: int
    start: int
    sources: tuple[str, ...]
    objects: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.sources) != len(self.objects):
            raise ValueError(f"Batch {self.index}: {len(self.sources)} sources but {len(self.objects)} objects")

    def __len__(self) -> int:
        return len(self.sources)

    @property
    def stop(self) -> int:
        return self.start + len(self.sources)

    @property
    def name(self) -> str:
        return "remainder" if self.index < 0 else f"batch {self.index}"


@dataclass(frozen=True)
class BatchPlan:
    """Static partition of a build's units.

    Attributes:
        workers: Effective worker count W
        batches: W worker batches of equal size
        remainder: Trailing slice compiled on the calling thread (may be empty)
    """

    workers: int
    batches: tuple[CompilationBatch, ...]
    remainder: CompilationBatch

    @property
    def total(self) -> int:
        return sum(len(batch) for batch in self.batches) + len(self.remainder)


def effective_workers(jobs: int, unit_count: int) -> int:
    """Clamp the requested job count to W = min(jobs, units), never below 1."""
    return max(1, min(jobs, unit_count))


def plan_batches(sources: Sequence[str], objects: Sequence[str], jobs: int) -> BatchPlan:
    """Partition units into worker batches and a remainder.

    Args:
        sources: Full ordered unit list
        objects: Artifact list, index-aligned with sources
        jobs: Requested job count

    Returns:
        BatchPlan covering every unit exactly once, in order

    Raises:
        ValueError: If sources and objects differ in length
    """
    if len(sources) != len(objects):
        raise ValueError(f"{len(sources)} sources but {len(objects)} objects")

    count = len(sources)
    workers = effective_workers(jobs, count)
    base, remainder = divmod(count, workers)

    batches = tuple(
        CompilationBatch(
            index=i,
            start=i * base,
            sources=tuple(sources[i * base : (i + 1) * base]),
            objects=tuple(objects[i * base : (i + 1) * base]),
        )
        for i in range(workers)
    )
    tail = count - remainder
    return BatchPlan(
        workers=workers,
        batches=batches,
        remainder=CompilationBatch(index=-1, start=tail, sources=tuple(sources[tail:]), objects=tuple(objects[tail:])),
    )
