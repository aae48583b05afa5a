"""Tests for the pipeloop command line."""

import io
from pathlib import Path

import pytest

from pipeloop_cli import EXIT_BAD_INPUT, EXIT_NO_LOOP, EXIT_OK, build_parser, main


SQUARE = ".....\n.S-7.\n.|.|.\n.L-J.\n.....\n"


def write_grid(tmp_path: Path, text: str) -> str:
    path = tmp_path / "grid.txt"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestBuildParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        """Only the path is required."""
        args = build_parser().parse_args(["grid.txt"])
        assert args.path == "grid.txt"
        assert args.max_steps is None
        assert args.verbose is False

    def test_options(self) -> None:
        """--max-steps and --verbose are parsed."""
        args = build_parser().parse_args(["--max-steps", "50", "-v", "-"])
        assert args.path == "-"
        assert args.max_steps == 50
        assert args.verbose is True


class TestMain:
    """Tests for the main entry point."""

    def test_reports_analysis(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A valid grid prints the loop summary."""
        exit_code = main([write_grid(tmp_path, SQUARE)])

        out = capsys.readouterr().out
        assert exit_code == EXIT_OK
        assert "Loop length: 8" in out
        assert "Furthest distance: 4" in out
        assert "Inside: 1" in out
        assert "Outside: 16" in out
        assert "TOP_LEFT" in out

    def test_reads_stdin(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        """'-' reads the grid from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO(SQUARE))

        exit_code = main(["-"])

        assert exit_code == EXIT_OK
        assert "Inside: 1" in capsys.readouterr().out

    def test_trace_failure(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A grid with two starts exits with EXIT_NO_LOOP."""
        exit_code = main([write_grid(tmp_path, "S-S\n|.|\nL-J\n")])

        out = capsys.readouterr().out
        assert exit_code == EXIT_NO_LOOP
        assert "ambiguous_start" in out

    def test_max_steps(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--max-steps limits the walk."""
        exit_code = main(["--max-steps", "3", write_grid(tmp_path, SQUARE)])

        out = capsys.readouterr().out
        assert exit_code == EXIT_NO_LOOP
        assert "no_loop_found" in out

    def test_invalid_grid(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Unparseable input exits with EXIT_BAD_INPUT."""
        exit_code = main([write_grid(tmp_path, "S-7\n|x|\nL-J\n")])

        assert exit_code == EXIT_BAD_INPUT
        assert "Invalid character" in capsys.readouterr().out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A file that cannot be read exits with EXIT_BAD_INPUT."""
        exit_code = main([str(tmp_path / "missing.txt")])

        assert exit_code == EXIT_BAD_INPUT
        assert "ERROR" in capsys.readouterr().out
