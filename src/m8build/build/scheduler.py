"""Compilation Scheduler.

Compiles every unit of a project with a bounded, one-shot pool of worker
threads.

Scheduling:
    1. W = min(jobs, units) workers, each owning S // W contiguous units
    2. Every worker compiles its batch strictly in order, one compiler
       process per unit
    3. Join barrier over all workers
    4. The trailing S % W units compile on the calling thread

Failure handling:
    The first non-zero compiler exit is recorded in a shared error slot and
    sets the build's cancellation event. Workers stop before starting their
    next unit, compiler processes still running are terminated, and the
    scheduler joins every worker before raising the recorded CompilerFailure.
    Nothing is linked after a failure. A unit whose command cannot even be
    assembled or started, and a worker that crashes, count as failures too.
"""

import logging
import threading
from collections.abc import Sequence
from typing import Optional

from ..config import ProjectConfiguration
from ..errors import CompilerFailure
from ..output import log, log_detail, log_error
from ..subprocess_utils import CommandRunner, format_command, run_command, split_command
from .batches import BatchPlan, CompilationBatch, plan_batches
from .error_collector import BuildError, ErrorCollector
from .worker_pool import run_workers

logger = logging.getLogger(__name__)

# Exit status reported when the compiler executable cannot be started
EXIT_COMMAND_NOT_RUNNABLE = 127

# Exit status reported when a unit fails without a compiler exit status
EXIT_INTERNAL_ERROR = 1


class CompilationScheduler:
    """Drives one parallel compilation pass.

    A scheduler instance represents a single build: its cancellation event
    and error slot are never reset, so create a new scheduler per build.
    """

    def __init__(self, config: ProjectConfiguration, runner: Optional[CommandRunner] = None):
        """Initialize the scheduler.

        Args:
            config: Project configuration shared read-only by all workers
            runner: Command execution facility (defaults to run_command)
        """
        self.config = config
        self.runner: CommandRunner = runner or run_command
        self.cancel_event = threading.Event()
        self.errors = ErrorCollector()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        """Ask every worker to stop and terminate in-flight compilers."""
        self.cancel_event.set()

    def compile_command(self, source: str, obj: str) -> list[str]:
        """Build `<compiler> <flags> -o <obj> <source_dir>/<source>`."""
        return [
            *split_command(self.config.compiler),
            *split_command(self.config.compiler_flags),
            "-o",
            obj,
            self.config.host.join(self.config.source_dir, source),
        ]

    def compile_batch(self, batch: CompilationBatch) -> None:
        """Compile one batch in order, stopping at the first failure or cancellation."""
        total = len(batch)
        for position, (source, obj) in enumerate(zip(batch.sources, batch.objects), start=1):
            if self.cancelled:
                logger.debug(f"{batch.name}: cancelled before {source} ({position - 1}/{total} compiled)")
                return

            try:
                command = self.compile_command(source, obj)
                log_detail(f"Executing ({position}/{total}): {format_command(command)}", verbose_only=True)
                status = self.runner(command, self.cancel_event)
            except OSError as e:
                log_error(f"Failed to run compiler for {source}: {e}")
                status = EXIT_COMMAND_NOT_RUNNABLE
            except Exception as e:
                log_error(f"Failed to compile {source}: {e}")
                status = EXIT_INTERNAL_ERROR

            if status != 0:
                self._record_failure(CompilerFailure(status, source))
                return

    def _record_failure(self, failure: CompilerFailure) -> None:
        already_cancelled = self.cancelled
        error = BuildError(phase="compile", file_path=failure.source, error=failure)
        first = self.errors.add_error(error)
        self.cancel()
        if first and not already_cancelled:
            log_error(f"{failure}. Aborting.")
        else:
            logger.debug(f"Ignoring secondary failure after cancellation: {error.format()}")

    def _record_crash(self, exc: Exception) -> None:
        logger.debug(f"Worker crash recorded as a compile failure: {exc!r}")
        self._record_failure(CompilerFailure(EXIT_INTERNAL_ERROR))

    def run(self, sources: Sequence[str], objects: Sequence[str], jobs: int = 1) -> BatchPlan:
        """Compile all units.

        Args:
            sources: Full ordered unit list
            objects: Artifact list, index-aligned with sources
            jobs: Requested parallel job count

        Returns:
            The batch plan that was executed

        Raises:
            CompilerFailure: The first compiler failure, after all workers joined
        """
        plan = plan_batches(sources, objects, jobs)
        log(f"Using {plan.workers} jobs")
        logger.debug(
            f"Partitioned {len(sources)} units: {plan.workers} batches of {len(plan.batches[0]) if plan.batches else 0}, "
            f"remainder {len(plan.remainder)}"
        )

        try:
            run_workers(
                self.compile_batch,
                plan.batches,
                name_prefix="CompileWorker",
                on_error=self._record_crash,
                on_interrupt=self.cancel,
            )
            if len(plan.remainder) and not self.cancelled:
                self.compile_batch(plan.remainder)
        except KeyboardInterrupt:
            self.cancel()
            raise

        first = self.errors.get_first_error()
        if first is not None:
            raise first.error
        return plan


def compile_sources(
    config: ProjectConfiguration,
    sources: Sequence[str],
    objects: Sequence[str],
    jobs: int = 1,
    runner: Optional[CommandRunner] = None,
) -> BatchPlan:
    """Compile all units with a fresh scheduler. See CompilationScheduler.run()."""
    return CompilationScheduler(config, runner).run(sources, objects, jobs)
