"""Tests for static partitioning of compilation units."""

import pytest

from m8build.build.batches import CompilationBatch, effective_workers, plan_batches


def make_units(count: int) -> tuple[list[str], list[str]]:
    sources = [f"u{i}.c" for i in range(count)]
    objects = [f"build/u{i}.c.o" for i in range(count)]
    return sources, objects


class TestEffectiveWorkers:
    """Tests for W = min(J, S) clamping."""

    @pytest.mark.parametrize(
        "jobs,units,expected",
        [
            (1, 10, 1),
            (4, 10, 4),
            (16, 3, 3),
            (3, 3, 3),
            (0, 5, 1),
            (-2, 5, 1),
        ],
    )
    def test_clamp(self, jobs, units, expected):
        assert effective_workers(jobs, units) == expected


class TestPlanBatches:
    """Tests for plan_batches()."""

    def test_five_units_two_jobs(self):
        """S=5, J=2: two batches of two, one unit left for the calling thread."""
        sources, objects = make_units(5)
        plan = plan_batches(sources, objects, jobs=2)

        assert plan.workers == 2
        assert [b.sources for b in plan.batches] == [("u0.c", "u1.c"), ("u2.c", "u3.c")]
        assert [b.start for b in plan.batches] == [0, 2]
        assert plan.remainder.sources == ("u4.c",)
        assert plan.remainder.objects == ("build/u4.c.o",)
        assert plan.remainder.start == 4

    def test_even_split_has_empty_remainder(self):
        sources, objects = make_units(6)
        plan = plan_batches(sources, objects, jobs=3)

        assert [len(b) for b in plan.batches] == [2, 2, 2]
        assert len(plan.remainder) == 0

    def test_more_jobs_than_units(self):
        sources, objects = make_units(3)
        plan = plan_batches(sources, objects, jobs=8)

        assert plan.workers == 3
        assert [b.sources for b in plan.batches] == [("u0.c",), ("u1.c",), ("u2.c",)]
        assert len(plan.remainder) == 0

    def test_single_job_takes_everything(self):
        sources, objects = make_units(4)
        plan = plan_batches(sources, objects, jobs=1)

        assert plan.workers == 1
        assert plan.batches[0].sources == tuple(sources)
        assert len(plan.remainder) == 0

    @pytest.mark.parametrize("count", [1, 2, 5, 7, 13, 32])
    @pytest.mark.parametrize("jobs", [1, 2, 3, 4, 8, 50])
    def test_partition_covers_every_unit_once_in_order(self, count, jobs):
        sources, objects = make_units(count)
        plan = plan_batches(sources, objects, jobs)

        assert plan.workers == min(jobs, count)
        assert plan.total == count

        flattened_sources: list[str] = []
        flattened_objects: list[str] = []
        expected_start = 0
        for batch in (*plan.batches, plan.remainder):
            assert batch.start == expected_start
            expected_start = batch.stop
            flattened_sources.extend(batch.sources)
            flattened_objects.extend(batch.objects)

        assert flattened_sources == sources
        assert flattened_objects == objects

    def test_worker_batches_have_equal_size(self):
        sources, objects = make_units(11)
        plan = plan_batches(sources, objects, jobs=4)

        assert {len(b) for b in plan.batches} == {2}
        assert len(plan.remainder) == 3

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError):
            plan_batches(["a.c", "b.c"], ["build/a.c.o"], jobs=1)


class TestCompilationBatch:
    """Tests for the batch record."""

    def test_misaligned_batch_rejected(self):
        with pytest.raises(ValueError):
            CompilationBatch(index=0, start=0, sources=("a.c",), objects=())

    def test_names(self):
        assert CompilationBatch(index=1, start=0, sources=(), objects=()).name == "batch 1"
        assert CompilationBatch(index=-1, start=0, sources=(), objects=()).name == "remainder"
