"""
Error Collector - first-error slot shared by compilation workers.

Workers record failures here instead of terminating the process. The first
recorded error is what the scheduler surfaces once every worker has joined;
later errors (siblings failing while cancellation propagates) are kept for
diagnostics only.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from ..errors import M8BuildError


@dataclass
class BuildError:
    """Single build error."""

    phase: str  # "compile", "link"
    file_path: Optional[str]
    error: M8BuildError
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)
    timestamp: float = field(default_factory=time.time)

    def format(self) -> str:
        """Format error as human-readable string."""
        lines = [f"[{self.phase}] {self.error}"]
        if self.file_path:
            lines.append(f"  File: {self.file_path}")
        return "\n".join(lines)


class ErrorCollector:
    """Thread-safe collection of build errors, ordered by arrival."""

    def __init__(self):
        self.errors: list[BuildError] = []
        self.lock = threading.Lock()

    def add_error(self, error: BuildError) -> bool:
        """Add error to collection.

        Args:
            error: Build error to add

        Returns:
            True if this is the first error recorded
        """
        with self.lock:
            self.errors.append(error)
            first = len(self.errors) == 1

        logging.debug(f"Recorded {error.phase} error from {error.thread_name}: {error.error} (first={first})")
        return first

    def get_first_error(self) -> Optional[BuildError]:
        """Get the first error recorded, or None."""
        with self.lock:
            return self.errors[0] if self.errors else None
