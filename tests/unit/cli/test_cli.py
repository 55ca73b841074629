"""Tests for the m8build command-line entry point."""

import logging
from unittest.mock import patch

import pytest

from m8build import cli


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Working directory with an m8.ini and two sources."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(cli.PROJECT_ENV_VAR, raising=False)
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.c").write_text("int main(void) { return 0; }\n")
    (tmp_path / "src" / "util.c").write_text("int util(void) { return 1; }\n")
    (tmp_path / "m8.ini").write_text("[project]\noutput = app\nsources = main.c util.c\n\n[toolchain]\nlinker = cc\n")
    return tmp_path


class TestParseGlobalArgs:
    """Tests for global option handling."""

    def test_command_arguments_preserved(self, monkeypatch):
        monkeypatch.delenv(cli.PROJECT_ENV_VAR, raising=False)
        args, remaining = cli.parse_global_args(["-v", "build", "-j", "4"])

        assert args.verbose
        assert args.project.name == "m8.ini"
        assert remaining == ["build", "-j", "4"]

    def test_project_option(self):
        args, remaining = cli.parse_global_args(["--project", "lib.ini", "clean"])
        assert str(args.project) == "lib.ini"
        assert remaining == ["clean"]

    def test_project_from_environment(self, monkeypatch):
        monkeypatch.setenv(cli.PROJECT_ENV_VAR, "other.ini")
        args, _ = cli.parse_global_args(["build"])
        assert str(args.project) == "other.ini"


class TestRun:
    """Tests for run()."""

    def test_help_without_project_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(cli.PROJECT_ENV_VAR, raising=False)

        assert cli.run(["help"]) == 0
        assert "Usage: m8build [command] <options>" in capsys.readouterr().out

    def test_missing_project_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(cli.PROJECT_ENV_VAR, raising=False)

        assert cli.run(["build"]) == 1
        assert "Project file not found" in capsys.readouterr().out

    def test_unknown_command_without_project_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(cli.PROJECT_ENV_VAR, raising=False)

        assert cli.run(["frobnicate"]) == 127
        out = capsys.readouterr().out
        assert "Command not found: `frobnicate`" in out
        assert "Project file not found" not in out

    def test_unknown_command(self, project_dir, capsys):
        assert cli.run(["frobnicate"]) == 127
        assert "Command not found: `frobnicate`" in capsys.readouterr().out

    @patch("m8build.build.linker.run_command", return_value=0)
    @patch("m8build.build.scheduler.run_command", return_value=0)
    def test_build(self, mock_compile, mock_link, project_dir):
        assert cli.run(["build", "-j", "2"]) == 0

        compiled = sorted(call.args[0][-1] for call in mock_compile.call_args_list)
        assert compiled == ["src/main.c", "src/util.c"]
        mock_link.assert_called_once()
        assert mock_link.call_args.args[0][:3] == ["cc", "-o", "dist/bin/app"]

    @patch("m8build.build.linker.run_command")
    @patch("m8build.build.scheduler.run_command", return_value=4)
    def test_compile_failure_exit_code(self, _mock_compile, mock_link, project_dir):
        assert cli.run([]) == 4
        mock_link.assert_not_called()

    @patch("m8build.cli.dispatch", side_effect=KeyboardInterrupt)
    def test_interrupt(self, _mock_dispatch, project_dir, capsys):
        assert cli.run(["build"]) == 130
        assert "Build interrupted" in capsys.readouterr().out

    @patch("m8build.build.linker.run_command", return_value=0)
    @patch("m8build.build.scheduler.run_command", return_value=0)
    def test_quiet_hides_commands(self, _mock_compile, _mock_link, project_dir, capsys):
        assert cli.run(["-q", "build"]) == 0
        assert "Executing" not in capsys.readouterr().out

        assert cli.run(["build"]) == 0
        assert "Executing" in capsys.readouterr().out

    def test_main_exits_with_status(self, project_dir):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["frobnicate"])
        assert exc_info.value.code == 127
