"""Worker pool primitive: spawn N threads, wait for all.

A fresh set of threads is created for every call and never reused. There is
no result channel; workers report failures through shared state owned by the
caller (see error_collector.ErrorCollector).
"""

import logging
import threading
from collections.abc import Sequence
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def run_workers(
    worker: Callable[[T], None],
    arguments: Sequence[T],
    name_prefix: str = "Worker",
    on_error: Optional[Callable[[Exception], None]] = None,
    on_interrupt: Optional[Callable[[], None]] = None,
) -> None:
    """Run worker(argument) on its own thread for each argument, then join all.

    Exceptions escaping a worker are logged and passed to on_error; they
    never prevent the remaining threads from being joined.

    Args:
        worker: Function executed by every thread
        arguments: One argument per thread
        name_prefix: Thread name prefix (threads are named "<prefix>-<i>")
        on_error: Called on the crashing worker's thread with its exception
        on_interrupt: Called when KeyboardInterrupt arrives while waiting;
            it must make the workers stop, since they are joined again
            before the interrupt is re-raised
    """

    def _guarded(argument: T) -> None:
        try:
            worker(argument)
        except Exception as e:
            logger.error(f"{threading.current_thread().name} crashed: {e}", exc_info=True)
            if on_error is not None:
                on_error(e)

    threads: list[threading.Thread] = []
    try:
        for i, argument in enumerate(arguments):
            thread = threading.Thread(target=_guarded, args=(argument,), name=f"{name_prefix}-{i}", daemon=True)
            thread.start()
            threads.append(thread)
            logger.debug(f"Started {thread.name}")

        for thread in threads:
            thread.join()
            logger.debug(f"Joined {thread.name}")
    except KeyboardInterrupt:
        logger.debug(f"Interrupted, waiting for {len(threads)} workers to stop")
        if on_interrupt is not None:
            on_interrupt()
        for thread in threads:
            thread.join()
        raise
