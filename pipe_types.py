"""
Shared type definitions for the pipe loop system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator


class Direction(Enum):
    """Cardinal direction for traversal."""

    N = "N"  # Up (decreasing row)
    S = "S"  # Down (increasing row)
    E = "E"  # Right (increasing col)
    W = "W"  # Left (decreasing col)

    @property
    def delta(self) -> tuple[int, int]:
        """(row_delta, col_delta) for one step in this direction."""
        return _DELTAS[self]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_DELTAS = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
}

_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}

# Up, Down, Left, Right
SCAN_ORDER: tuple[Direction, ...] = (Direction.N, Direction.S, Direction.W, Direction.E)


@dataclass(frozen=True, order=True)
class Point:
    """A (row, col) position. Ordering is grid-scan order."""

    row: int
    col: int

    def move(self, direction: Direction) -> Point:
        dr, dc = direction.delta
        return Point(self.row + dr, self.col + dc)

    def direction_to(self, other: Point) -> Direction | None:
        """Direction of an orthogonally adjacent point, or None if not adjacent."""
        delta = (other.row - self.row, other.col - self.col)
        for direction, direction_delta in _DELTAS.items():
            if direction_delta == delta:
                return direction
        return None


# =============================================================================
# Pipe Kinds
# =============================================================================


class PipeKind(Enum):
    """A pipe piece. The value is the canonical input symbol."""

    TOP_LEFT = "F"  # ┌
    TOP_RIGHT = "7"  # ┐
    BOTTOM_LEFT = "L"  # └
    BOTTOM_RIGHT = "J"  # ┘
    HORIZONTAL = "-"
    VERTICAL = "|"
    START = "S"  # Shape unknown until the loop is traced
    EMPTY = "."


_CONNECTIONS: dict[PipeKind, frozenset[Direction]] = {
    PipeKind.TOP_LEFT: frozenset({Direction.S, Direction.E}),
    PipeKind.TOP_RIGHT: frozenset({Direction.S, Direction.W}),
    PipeKind.BOTTOM_LEFT: frozenset({Direction.N, Direction.E}),
    PipeKind.BOTTOM_RIGHT: frozenset({Direction.N, Direction.W}),
    PipeKind.HORIZONTAL: frozenset({Direction.W, Direction.E}),
    PipeKind.VERTICAL: frozenset({Direction.N, Direction.S}),
    PipeKind.START: frozenset(SCAN_ORDER),
    PipeKind.EMPTY: frozenset(),
}


def connections(kind: PipeKind) -> frozenset[Direction]:
    """The cardinal directions a pipe kind connects to."""
    return _CONNECTIONS[kind]


def connects(kind: PipeKind, direction: Direction) -> bool:
    return direction in _CONNECTIONS[kind]


# =============================================================================
# Grid
# =============================================================================


# Predicate over (position, kind), used to locate cells such as the start
CellPredicate = Callable[[Point, PipeKind], bool]


@dataclass(frozen=True)
class PipeGrid:
    """A rectangular 2D grid of pipe kinds."""

    cells: tuple[tuple[PipeKind, ...], ...]

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, point: Point) -> bool:
        return 0 <= point.row < self.rows and 0 <= point.col < self.cols

    def at(self, point: Point) -> PipeKind:
        """Kind at a point. Out-of-bounds points read as EMPTY."""
        if not self.in_bounds(point):
            return PipeKind.EMPTY
        return self.cells[point.row][point.col]

    def neighbors(self, point: Point) -> dict[Direction, Point]:
        """The four cardinal neighbours of a point (N, S, W, E), in bounds or not."""
        return {direction: point.move(direction) for direction in SCAN_ORDER}

    def replace(self, point: Point, kind: PipeKind) -> PipeGrid:
        """Return a new grid with the cell at point set to kind."""
        if not self.in_bounds(point):
            raise IndexError(
                f"Cannot replace cell at ({point.row}, {point.col}): "
                f"grid is {self.rows}x{self.cols}"
            )
        row = self.cells[point.row]
        new_row = row[: point.col] + (kind,) + row[point.col + 1 :]
        return PipeGrid(self.cells[: point.row] + (new_row,) + self.cells[point.row + 1 :])

    def points(self) -> Iterator[Point]:
        """All points in scan order (row by row, left to right)."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield Point(r, c)

    def find(self, predicate: CellPredicate) -> list[Point]:
        """All points, in scan order, whose (point, kind) satisfies predicate."""
        return [p for p in self.points() if predicate(p, self.cells[p.row][p.col])]
