"""Tests for the first-error slot."""

import threading

from m8build.build.error_collector import BuildError, ErrorCollector
from m8build.errors import CompilerFailure


def test_first_error_wins():
    collector = ErrorCollector()

    assert collector.add_error(BuildError(phase="compile", file_path="a.c", error=CompilerFailure(1, "a.c"))) is True
    assert collector.add_error(BuildError(phase="compile", file_path="b.c", error=CompilerFailure(2, "b.c"))) is False

    first = collector.get_first_error()
    assert first is not None
    assert first.file_path == "a.c"
    assert len(collector.errors) == 2


def test_empty_collector():
    collector = ErrorCollector()
    assert collector.get_first_error() is None
    assert collector.errors == []


def test_exactly_one_first_under_contention():
    collector = ErrorCollector()
    firsts: list[bool] = []
    lock = threading.Lock()

    def record(i: int) -> None:
        result = collector.add_error(BuildError(phase="compile", file_path=f"{i}.c", error=CompilerFailure(i)))
        with lock:
            firsts.append(result)

    threads = [threading.Thread(target=record, args=(i,)) for i in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert firsts.count(True) == 1
    assert len(collector.errors) == 16


def test_format_includes_file():
    error = BuildError(phase="compile", file_path="sub/b.c", error=CompilerFailure(3, "sub/b.c"))
    text = error.format()
    assert "[compile]" in text
    assert "File: sub/b.c" in text
