"""Tests for the command-line interface."""

import pytest

from timelog.cli import main, normalize_argv


def _run(path, *argv: str) -> int:
    """Run the CLI against a log file and return the exit code."""
    with pytest.raises(SystemExit) as exc_info:
        main(["-f", str(path), *argv])
    return exc_info.value.code


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "timelog.csv"


class TestNormalizeArgv:
    """Tests for the shortcut command forms."""

    def test_no_arguments_lists(self):
        assert normalize_argv([]) == ["list"]

    def test_options_only_lists(self):
        assert normalize_argv(["-v", "-f", "log.csv"]) == ["-v", "-f", "log.csv", "list"]

    def test_file_option_missing_value(self):
        """A trailing -f is not given "list" as its value."""
        assert normalize_argv(["-f"]) == ["-f"]
        assert normalize_argv(["-v", "--file"]) == ["-v", "--file"]

    def test_file_option_missing_value_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-f"])
        assert exc_info.value.code == 2
        assert "expected one argument" in capsys.readouterr().err

    def test_lone_task_name_starts(self):
        assert normalize_argv(["docs"]) == ["start", "docs"]
        assert normalize_argv(["-f", "log.csv", "docs"]) == ["-f", "log.csv", "start", "docs"]

    def test_commands_and_aliases_untouched(self):
        assert normalize_argv(["stop"]) == ["stop"]
        assert normalize_argv(["l"]) == ["l"]
        assert normalize_argv(["status", "docs"]) == ["status", "docs"]

    def test_unknown_command_with_more_args_untouched(self):
        """Only a single lone argument is treated as a task name."""
        assert normalize_argv(["docs", "extra"]) == ["docs", "extra"]


class TestCommands:
    """Tests for running commands end to end."""

    def test_start_and_list(self, log_path, capsys):
        assert _run(log_path, "start", "docs") == 0
        assert "Started tracking docs" in capsys.readouterr().out

        assert _run(log_path) == 0
        out = capsys.readouterr().out
        assert "docs (running)" in out
        assert "Total:" in out

    def test_lone_argument_starts_task(self, log_path, capsys):
        assert _run(log_path, "docs") == 0
        assert "Started tracking docs" in capsys.readouterr().out

    def test_start_switches_task(self, log_path, capsys):
        _run(log_path, "b", "docs")
        capsys.readouterr()

        assert _run(log_path, "begin", "review") == 0
        out = capsys.readouterr().out
        assert "Stopped tracking docs" in out
        assert "Started tracking review" in out

    def test_start_running_task_fails(self, log_path, capsys):
        _run(log_path, "start", "docs")
        capsys.readouterr()

        assert _run(log_path, "start", "docs") == 1
        assert "docs (running)" in capsys.readouterr().err

    def test_invalid_identifier_fails(self, log_path, capsys):
        assert _run(log_path, "start", "bad[name]") == 1
        assert "is invalid" in capsys.readouterr().err
        assert not log_path.exists()

    def test_stop_all(self, log_path, capsys):
        _run(log_path, "start", "docs")
        capsys.readouterr()

        assert _run(log_path, "stop") == 0
        assert "Stopped tracking docs" in capsys.readouterr().out

        _run(log_path, "list")
        out = capsys.readouterr().out
        assert "docs" in out
        assert "(running)" not in out

    def test_status(self, log_path, capsys):
        log_path.write_text(
            "docs,start,2024-03-01T09:00:00+00:00\n"
            "docs,stop,2024-03-01T10:01:01+00:00\n"
        )

        assert _run(log_path, "status", "docs") == 0
        assert "1h:1m:1s    docs" in capsys.readouterr().out

    def test_status_untracked(self, log_path, capsys):
        assert _run(log_path, "status", "docs") == 0
        assert "No time tracked for docs" in capsys.readouterr().out

    def test_list_empty(self, log_path, capsys):
        assert _run(log_path, "list") == 0
        assert "No time tracked yet" in capsys.readouterr().out

    def test_list_report(self, log_path, capsys):
        log_path.write_text(
            "docs,start,2024-03-01T09:00:00+00:00\n"
            "docs,stop,2024-03-01T09:30:00+00:00\n"
            "review,start,2024-03-01T09:30:00+00:00\n"
            "review,stop,2024-03-01T09:45:00+00:00\n"
            "docs,start,2024-03-01T09:45:00+00:00\n"
            "docs,stop,2024-03-01T09:50:00+00:00\n"
        )

        assert _run(log_path, "l") == 0
        out = capsys.readouterr().out
        assert out.count("docs") == 1
        assert "0h:35m:0s    docs" in out
        assert "0h:15m:0s    review" in out
        assert "Total: 0h:50m:0s" in out

    def test_malformed_timestamp_aborts_list(self, log_path, capsys):
        log_path.write_text(
            "docs,start,2024-03-01T09:00:00+00:00\n"
            "docs,stop,2024-03-01T09:30:00+00:00\n"
            "review,start,soon\n"
        )

        assert _run(log_path, "list") == 1
        captured = capsys.readouterr()
        assert "docs" not in captured.out
        assert "Malformed timestamp" in captured.err

    def test_corrupt_log_fails(self, log_path, capsys):
        log_path.write_text("docs,start\n")

        assert _run(log_path, "list") == 1
        assert "expected 3 columns" in capsys.readouterr().err

    def test_clear(self, log_path, capsys):
        _run(log_path, "start", "docs")
        capsys.readouterr()

        assert _run(log_path, "clear", "--yes") == 0
        assert "All tasks deleted" in capsys.readouterr().out
        assert log_path.read_text() == ""

    def test_complete(self, log_path, capsys):
        _run(log_path, "start", "docs")
        _run(log_path, "start", "review")
        _run(log_path, "stop")
        capsys.readouterr()

        assert _run(log_path, "complete") == 0
        assert capsys.readouterr().out.split() == ["docs", "review"]
