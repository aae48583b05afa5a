"""
Grid parsing utilities for pipe loops.

One character per cell, one line per row. Canonical symbols are
F 7 L J - | S . and the box-drawing forms ┌ ┐ └ ┘ ─ │ are accepted
as aliases for the corresponding pipes.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pipe_types import PipeGrid, PipeKind

__all__ = ["parse_pipe_grid", "parse_symbol"]

logger = logging.getLogger(__name__)


_SYMBOLS: dict[str, PipeKind] = {kind.value: kind for kind in PipeKind}
_SYMBOLS.update(
    {
        "┌": PipeKind.TOP_LEFT,
        "┐": PipeKind.TOP_RIGHT,
        "└": PipeKind.BOTTOM_LEFT,
        "┘": PipeKind.BOTTOM_RIGHT,
        "─": PipeKind.HORIZONTAL,
        "│": PipeKind.VERTICAL,
    }
)


def parse_symbol(char: str) -> PipeKind:
    """
    Convert a single symbol to its PipeKind.

    Raises:
        ValueError: If the symbol is not a known pipe symbol
    """
    try:
        return _SYMBOLS[char]
    except KeyError:
        raise ValueError(f"Invalid pipe symbol: {char!r}") from None


def parse_pipe_grid(definition: str | Iterable[str]) -> PipeGrid:
    """
    Parse a pipe grid from text.

    Format:
    - One row per line (a string is split on newlines)
    - Each character is a cell:
      * F (┌): top-left corner, connects down and right
      * 7 (┐): top-right corner, connects down and left
      * L (└): bottom-left corner, connects up and right
      * J (┘): bottom-right corner, connects up and left
      * - (─): horizontal pipe
      * | (│): vertical pipe
      * S: start, shape unknown
      * .: empty ground
    - Lines are stripped and blank lines are skipped
    - Short rows are padded with empty cells to the widest row

    Example:
        \"\"\"
        .....
        .S-7.
        .|.|.
        .L-J.
        .....
        \"\"\"

    Args:
        definition: Multi-line string, or an iterable of row strings

    Returns:
        The parsed PipeGrid

    Raises:
        ValueError: If the definition is empty or contains an invalid character
    """
    if isinstance(definition, str):
        definition = definition.split("\n")
    lines = [line.strip() for line in definition if line.strip()]

    if not lines:
        raise ValueError("Empty pipe grid definition")

    rows: list[tuple[PipeKind, ...]] = []
    for row_idx, line in enumerate(lines):
        cells: list[PipeKind] = []
        for col_idx, char in enumerate(line):
            try:
                kind = parse_symbol(char)
            except ValueError as e:
                raise ValueError(
                    f"Invalid character '{char}' in pipe grid\n"
                    f"  Row {row_idx}, column {col_idx}: \"{line}\"\n"
                    f"  Valid characters: {' '.join(_SYMBOLS)}"
                ) from e
            cells.append(kind)
        rows.append(tuple(cells))

    # Pad rows to maximum length with EMPTY cells
    max_cols = max(len(row) for row in rows)
    padded = [row + (PipeKind.EMPTY,) * (max_cols - len(row)) for row in rows]
    if any(len(row) < max_cols for row in rows):
        logger.debug("parse_pipe_grid: padded short rows to width=%d", max_cols)

    return PipeGrid(tuple(padded))
