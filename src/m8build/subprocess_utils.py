"""Subprocess utilities for platform-safe process execution.

This module is the single "run external command, get exit status" facility
used for compiling, linking and archiving. It wraps the subprocess module to
apply platform-specific flags (no console window flashing on Windows, stdin
detached from the terminal) and supports cooperative cancellation: a running
command whose cancellation event is set has its whole process tree
terminated.
"""

import logging
import shlex
import subprocess
import sys
import threading
from typing import Any, Optional, Protocol

import psutil

logger = logging.getLogger(__name__)

# Seconds between cancellation checks while waiting on a child process
_POLL_INTERVAL = 0.1

# Seconds to wait for graceful termination before force killing
_TERMINATE_TIMEOUT = 3.0


class CommandRunner(Protocol):
    """Callable that runs one command line and returns its exit status."""

    def __call__(self, command: list[str], cancel_event: Optional[threading.Event] = None) -> int: ...


def get_subprocess_creation_flags() -> int:
    """Get platform-specific subprocess creation flags.

    Returns:
        - Windows: subprocess.CREATE_NO_WINDOW (prevents console window)
        - Other platforms: 0 (no special flags)
    """
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def _apply_platform_defaults(kwargs: dict[str, Any]) -> dict[str, Any]:
    default_flags = get_subprocess_creation_flags()

    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags

    # Child processes must not steal keystrokes from the parent terminal
    if "stdin" not in kwargs:
        kwargs["stdin"] = subprocess.DEVNULL

    return kwargs


def safe_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """Execute subprocess.run with platform-specific flags.

    Automatically applies:
    - CREATE_NO_WINDOW on Windows (prevents console window)
    - stdin=DEVNULL (prevents console input handle inheritance)

    Args:
        cmd: Command and arguments (same as subprocess.run)
        **kwargs: Additional arguments passed to subprocess.run

    Returns:
        CompletedProcess result from subprocess.run

    Note:
        - If 'creationflags' is explicitly provided in kwargs,
          it will be OR'd with platform defaults to preserve custom flags.
        - If 'stdin' is explicitly provided in kwargs, it will be used as-is.
    """
    return subprocess.run(cmd, **_apply_platform_defaults(kwargs))


def safe_popen(cmd: list[str], **kwargs: Any) -> subprocess.Popen:
    """Execute subprocess.Popen with platform-specific flags.

    Same defaults as safe_run(), for callers that need the process handle.

    Args:
        cmd: Command and arguments (same as subprocess.Popen)
        **kwargs: Additional arguments passed to subprocess.Popen

    Returns:
        Popen process handle
    """
    return subprocess.Popen(cmd, **_apply_platform_defaults(kwargs))


def split_command(command: str) -> list[str]:
    """Split a configured command string (e.g. "cc -c", "-O2 -Wall") into arguments.

    Empty or whitespace-only strings yield an empty list.
    """
    return shlex.split(command, posix=sys.platform != "win32")


def format_command(command: list[str]) -> str:
    """Render an argument list as a single display line."""
    return " ".join(command)


def kill_process_tree(pid: int) -> int:
    """Terminate a process and all of its descendants.

    Children are terminated before their parent. Processes that survive
    graceful termination are force killed.

    Args:
        pid: Root process ID

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(pid)
        processes = root.children(recursive=True)
        processes.reverse()
        processes.append(root)
    except psutil.NoSuchProcess:
        logger.debug(f"Process {pid} already terminated")
        return 0

    killed = 0
    for proc in processes:
        try:
            proc.terminate()
            killed += 1
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass

    _gone, alive = psutil.wait_procs(processes, timeout=_TERMINATE_TIMEOUT)
    for proc in alive:
        try:
            proc.kill()
            logger.warning(f"Force killed stubborn process {proc.pid}")
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass

    logger.debug(f"Process tree {pid} terminated ({killed} processes)")
    return killed


def exit_status(returncode: int) -> int:
    """Convert a Popen return code into a shell-style exit status.

    A child killed by signal N has returncode -N; shells report it as 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def run_command(command: list[str], cancel_event: Optional[threading.Event] = None) -> int:
    """Run a command to completion and return its exit status.

    Output is inherited from the parent so compiler diagnostics reach the
    terminal directly. No timeout is applied.

    Args:
        command: Command and arguments
        cancel_event: If set while the command runs, its process tree is
            terminated and the resulting exit status is returned

    Returns:
        The process exit status (128 + N if it was killed by signal N)

    Raises:
        OSError: If the executable cannot be started
    """
    if cancel_event is None:
        return exit_status(safe_run(command).returncode)

    proc = safe_popen(command)
    while True:
        try:
            return exit_status(proc.wait(timeout=_POLL_INTERVAL))
        except subprocess.TimeoutExpired:
            if cancel_event.is_set():
                logger.debug(f"Cancelling {command[0]} (pid {proc.pid})")
                kill_process_tree(proc.pid)
                return exit_status(proc.wait())
