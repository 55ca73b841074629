"""Tests for the link/archive step."""

import pytest

from m8build.build.linker import Linker
from m8build.config import ProjectKind
from m8build.errors import LinkerFailure

OBJECTS = ["build/a.c.o", "build/sub.b.c.o"]


class TestBuildCommand:
    """Tests for command assembly per project kind."""

    def test_executable_uses_linker(self, posix_config):
        config = posix_config.replace(linker="clang", linker_flags="-lm -lpthread", output="app")
        assert Linker(config).build_command(OBJECTS) == [
            "clang",
            "-o",
            "dist/bin/app",
            "build/a.c.o",
            "build/sub.b.c.o",
            "-lm",
            "-lpthread",
        ]

    def test_shared_library_uses_linker(self, posix_config):
        config = posix_config.replace(linker="cc -shared", kind=ProjectKind.SHARED_LIBRARY, output="libm8.so")
        command = Linker(config).build_command(OBJECTS)

        assert command[:4] == ["cc", "-shared", "-o", "dist/lib/libm8.so"]
        assert "ar" not in command

    def test_static_library_uses_archiver(self, posix_config):
        config = posix_config.replace(archiver="llvm-ar", kind=ProjectKind.STATIC_LIBRARY, output="libm8.a", linker_flags="-lm")
        command = Linker(config).build_command(OBJECTS)

        assert command == ["llvm-ar", "r", "dist/lib/libm8.a", "build/a.c.o", "build/sub.b.c.o"]
        assert config.linker not in command

    def test_objects_in_order(self, posix_config):
        objects = [f"build/u{i}.c.o" for i in range(10)]
        command = Linker(posix_config).build_command(objects)
        start = command.index(objects[0])
        assert command[start : start + 10] == objects


class TestLink:
    """Tests for running the step."""

    def test_success(self, posix_config, runner_factory):
        runner = runner_factory()
        assert Linker(posix_config, runner).link(OBJECTS) == 0
        assert len(runner.commands) == 1

    def test_status_returned(self, posix_config, runner_factory):
        runner = runner_factory({"ld": 4})
        assert Linker(posix_config, runner).link(OBJECTS) == 4

    def test_link_or_raise(self, posix_config, runner_factory):
        runner = runner_factory({"ld": 4})
        with pytest.raises(LinkerFailure) as exc_info:
            Linker(posix_config, runner).link_or_raise(OBJECTS)
        assert exc_info.value.exit_code == 4

    def test_unrunnable_linker(self, posix_config):
        def runner(command, cancel_event=None):
            raise FileNotFoundError(command[0])

        assert Linker(posix_config, runner).link(OBJECTS) == 127

    def test_malformed_linker_flags(self, posix_config, runner_factory):
        runner = runner_factory()
        config = posix_config.replace(linker_flags='-Wl,"unterminated')

        assert Linker(config, runner).link(OBJECTS) == 1
        assert runner.commands == []
