"""Pytest configuration and fixtures for m8build tests.

Python 3.13 changed how stdout/stderr are handled, which can cause
"I/O operation on closed file" errors during teardown when a test closes a
stream. The stdio fixtures below restore the interpreter's streams.
"""

import sys
import threading
import warnings
from typing import Optional

import pytest

from m8build import output
from m8build.config import ProjectConfiguration
from m8build.platform import POSIX

# Suppress ResourceWarnings from file cleanup in Python 3.13
if sys.version_info >= (3, 13):
    warnings.filterwarnings("ignore", category=ResourceWarning)


class RecordingRunner:
    """Command runner that records every command instead of spawning it.

    Args:
        failures: Map of substring -> exit status; a command containing the
            substring in any argument returns that status
    """

    def __init__(self, failures: Optional[dict[str, int]] = None) -> None:
        self.failures = failures or {}
        self.commands: list[list[str]] = []
        self.threads: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, command: list[str], cancel_event: Optional[threading.Event] = None) -> int:
        with self._lock:
            self.commands.append(list(command))
            self.threads.append(threading.current_thread().name)
        for needle, status in self.failures.items():
            if any(needle in arg for arg in command):
                return status
        return 0

    def sources(self) -> list[str]:
        """Last argument of every recorded command (the source for compiles)."""
        with self._lock:
            return [command[-1] for command in self.commands]


@pytest.fixture
def runner_factory():
    """Return the RecordingRunner class for tests that need custom failures."""
    return RecordingRunner


@pytest.fixture
def posix_config() -> ProjectConfiguration:
    """A default configuration pinned to the POSIX flag set."""
    return ProjectConfiguration(host=POSIX)


@pytest.fixture(autouse=True)
def _reset_output():
    """Reset the output module so each test writes to its own captured stdout."""
    yield
    output._output_stream = None
    output.set_verbose(True)


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr are always restored after each test."""
    yield

    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__


@pytest.hookimpl(hookwrapper=True, trylast=True)
def pytest_runtest_teardown(item):  # noqa: ARG001
    """Ensure streams are restored during teardown phase."""
    yield

    if hasattr(sys.stdout, "closed") and sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if hasattr(sys.stderr, "closed") and sys.stderr.closed:
        sys.stderr = sys.__stderr__
