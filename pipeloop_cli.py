"""
Command line entry point: read a pipe grid and report its loop analysis.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from pipe_parser import parse_pipe_grid
from pipeloop import LoopAnalysis, TraceFailure, TraceRules, analyze

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_LOOP = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipeloop",
        description="Trace the pipe loop in a grid and count the cells it encloses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pipeloop puzzle.txt
  pipeloop --max-steps 20000 puzzle.txt
  cat puzzle.txt | pipeloop -
        """,
    )
    parser.add_argument("path", help="Pipe grid file, or '-' to read stdin")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Give up if the loop does not close within this many steps (default: grid size)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def render_analysis(analysis: LoopAnalysis) -> Panel:
    """Summary panel for a successful analysis."""
    loop = analysis.loop
    text = Text()
    text.append("Start: ", style="bold")
    text.append(f"({loop.start.row}, {loop.start.col}) -> {loop.start_kind.name}\n")
    text.append("Loop length: ", style="bold")
    text.append(f"{analysis.loop_length}\n")
    text.append("Furthest distance: ", style="bold")
    text.append(f"{analysis.furthest_distance}\n")
    text.append("Inside: ", style="bold")
    text.append(f"{analysis.interior_count}\n")
    text.append("Outside: ", style="bold")
    text.append(f"{analysis.exterior_count}")
    return Panel(text, title="Pipe Loop", border_style="green")


def render_failure(failure: TraceFailure) -> Panel:
    """Error panel for a failed trace."""
    text = Text()
    text.append(f"✗ {failure.reason.value}", style="bold red")
    if failure.position is not None:
        text.append(f" at ({failure.position.row}, {failure.position.col})")
    if failure.details:
        text.append(f"\n{failure.details}")
    return Panel(text, title="Pipe Loop - Error", border_style="red")


def read_lines(path: str) -> list[str]:
    if path == "-":
        return sys.stdin.read().splitlines()
    return Path(path).read_text(encoding="utf-8").splitlines()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    console = Console()

    try:
        grid = parse_pipe_grid(read_lines(args.path))
    except (OSError, ValueError) as e:
        console.print(Text.assemble(("ERROR: ", "bold red"), str(e)))
        return EXIT_BAD_INPUT

    logger.debug("main: parsed %dx%d grid from %s", grid.rows, grid.cols, args.path)
    result = analyze(grid, rules=TraceRules(max_steps=args.max_steps))

    if isinstance(result, TraceFailure):
        console.print(render_failure(result))
        return EXIT_NO_LOOP

    console.print(render_analysis(result))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
