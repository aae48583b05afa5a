"""
Pipe loop tracing and containment counting.
Three phases: trace (walks the loop from the start cell) -> resolve the
start shape -> count (scanline parity over the corrected grid).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Collection, Iterator

from pipe_types import (
    CellPredicate,
    Direction,
    PipeGrid,
    PipeKind,
    Point,
    SCAN_ORDER,
    connections,
    connects,
)

logger = logging.getLogger(__name__)


class TraceError(Enum):
    """Reason why a loop could not be traced."""

    AMBIGUOUS_START = "ambiguous_start"  # Zero or several cells match the start predicate
    NO_LOOP_FOUND = "no_loop_found"  # Walk dead-ended, revisited a cell or ran past the step bound
    UNRESOLVABLE_START_SHAPE = "unresolvable_start_shape"  # Start neighbours imply no pipe kind


@dataclass(frozen=True)
class TraceFailure:
    """A failed trace, returned in place of a result."""

    reason: TraceError
    position: Point | None = None  # Where the failure was detected, when known
    details: str = ""


@dataclass(frozen=True)
class TraceRules:
    """Rules governing the loop walk."""

    max_steps: int | None = None  # None = number of cells in the grid


def is_start_kind(point: Point, kind: PipeKind) -> bool:
    """Default start predicate: the cell holding the S symbol."""
    return kind is PipeKind.START


# =============================================================================
# Data Structures: Loop
# =============================================================================


@dataclass(frozen=True)
class Loop:
    """A closed pipe loop.

    path holds every point of the loop once, in walk order, beginning at
    start. The walk closes from path[-1] back to start.
    """

    start: Point
    path: tuple[Point, ...]
    start_kind: PipeKind  # The concrete kind hidden under the start cell

    @property
    def size(self) -> int:
        return len(self.path)

    @cached_property
    def points(self) -> frozenset[Point]:
        return frozenset(self.path)

    @property
    def furthest_distance(self) -> int:
        """Steps along the loop from start to the point furthest from it."""
        return self.size // 2

    def edges(self) -> Iterator[tuple[Point, Point]]:
        """Consecutive point pairs, including the closing pair back to start."""
        for i, point in enumerate(self.path):
            yield point, self.path[(i + 1) % len(self.path)]

    def __len__(self) -> int:
        return len(self.path)

    def __contains__(self, point: object) -> bool:
        return point in self.points


@dataclass(frozen=True)
class LoopAnalysis:
    """Combined result of tracing a loop and counting the cells it encloses."""

    loop: Loop
    resolved_grid: PipeGrid  # The input grid with the start cell replaced
    interior_count: int

    @property
    def loop_length(self) -> int:
        return self.loop.size

    @property
    def exterior_count(self) -> int:
        return self.resolved_grid.size - self.loop_length - self.interior_count

    @property
    def furthest_distance(self) -> int:
        return self.loop.furthest_distance


# =============================================================================
# Phase 1: Trace
# =============================================================================


def _next_point(grid: PipeGrid, start: Point, current: Point, previous: Point) -> Point | None:
    """
    Find the next point of the walk from current, never stepping back to previous.

    Candidate directions come from the kind at current, checked in the fixed
    order N, S, W, E. A neighbour is accepted when its kind connects back
    towards current, or when it is the start point itself. A START cell that
    is not the start point connects nowhere.
    """
    directions = connections(grid.at(current))
    neighbors = grid.neighbors(current)

    for direction in SCAN_ORDER:
        if direction not in directions:
            continue
        candidate = neighbors[direction]
        if candidate == previous:
            continue
        if candidate == start:
            return candidate
        kind = grid.at(candidate)
        if kind is not PipeKind.START and connects(kind, direction.opposite):
            return candidate
    return None


def trace(
    grid: PipeGrid,
    is_start: CellPredicate = is_start_kind,
    rules: TraceRules | None = None,
) -> Loop | TraceFailure:
    """
    Walk the pipe loop that passes through the start cell.

    Starting from the unique cell matching is_start, follow pipe connectivity
    one cell at a time until the walk returns to the start. The grid is not
    modified.

    Args:
        grid: The pipe grid to search
        is_start: Predicate over (point, kind) identifying the start cell
        rules: TraceRules governing the walk (default TraceRules())

    Returns:
        The Loop, with the start shape resolved, or a TraceFailure:
        - AMBIGUOUS_START if zero or several cells match is_start
        - NO_LOOP_FOUND if the walk does not close back on the start
        - UNRESOLVABLE_START_SHAPE if the start neighbours imply no pipe kind
    """
    if rules is None:
        rules = TraceRules()

    starts = grid.find(is_start)
    if len(starts) != 1:
        logger.debug("trace: expected 1 start point, found %d", len(starts))
        return TraceFailure(
            TraceError.AMBIGUOUS_START,
            details=f"Expected 1 point matching the start predicate, found: {len(starts)}",
        )
    start = starts[0]

    max_steps = rules.max_steps if rules.max_steps is not None else grid.size
    path: list[Point] = [start]
    visited: set[Point] = {start}
    current, previous = start, start

    for step in range(1, max_steps + 1):
        next_point = _next_point(grid, start, current, previous)
        if next_point is None:
            logger.debug("trace: dead end at %s after %d steps", current, step - 1)
            return TraceFailure(
                TraceError.NO_LOOP_FOUND,
                position=current,
                details=f"No connecting pipe from {grid.at(current).name} at step {step}",
            )

        if next_point == start:
            start_kind = resolve_start_kind(start, path[1], path[-1])
            if isinstance(start_kind, TraceFailure):
                return start_kind
            logger.debug("trace: start=%s steps=%d start_kind=%s", start, step, start_kind.name)
            return Loop(start, tuple(path), start_kind)

        if next_point in visited:
            logger.debug("trace: revisited %s without returning to start", next_point)
            return TraceFailure(
                TraceError.NO_LOOP_FOUND,
                position=next_point,
                details="Walk revisited a point without returning to the start",
            )

        visited.add(next_point)
        path.append(next_point)
        current, previous = next_point, current

    logger.debug("trace: exceeded max_steps=%d", max_steps)
    return TraceFailure(
        TraceError.NO_LOOP_FOUND,
        position=current,
        details=f"Walk did not close within {max_steps} steps",
    )


# Keyed on the directions (from the start) of its two loop neighbours, in scan order
_START_SHAPES: dict[tuple[Direction, Direction], PipeKind] = {
    (Direction.N, Direction.S): PipeKind.VERTICAL,
    (Direction.N, Direction.W): PipeKind.BOTTOM_RIGHT,
    (Direction.N, Direction.E): PipeKind.BOTTOM_LEFT,
    (Direction.W, Direction.E): PipeKind.HORIZONTAL,
    (Direction.W, Direction.S): PipeKind.TOP_RIGHT,
    (Direction.E, Direction.S): PipeKind.TOP_LEFT,
}


def resolve_start_kind(start: Point, first: Point, second: Point) -> PipeKind | TraceFailure:
    """
    Determine the pipe kind hidden under the start cell.

    The two loop neighbours of the start are put in grid-scan order (top-left
    to bottom-right) and the pair of directions from the start to them picks
    the one pipe kind joining both.

    Args:
        start: The start point
        first: One loop neighbour of the start
        second: The other loop neighbour of the start

    Returns:
        The resolved PipeKind, or a TraceFailure with UNRESOLVABLE_START_SHAPE
    """
    a, b = sorted((first, second))
    key = (start.direction_to(a), start.direction_to(b))
    kind = _START_SHAPES.get(key)  # type: ignore[arg-type]
    if kind is None:
        return TraceFailure(
            TraceError.UNRESOLVABLE_START_SHAPE,
            position=start,
            details=f"Unable to find replacement for connections: {a} and {b}",
        )
    return kind


# =============================================================================
# Phase 2: Count
# =============================================================================


def count_inside(grid: PipeGrid, loop_points: Collection[Point]) -> int:
    """
    Count the cells enclosed by the loop, by scanline parity.

    Each row is scanned left to right with its own inside flag. Vertical
    pipes flip the flag. A corner opens a horizontal run which the closing
    corner resolves:
    - F...J and L...7 cross the row (flip)
    - F...7 and L...J touch it and turn back (no flip)

    Args:
        grid: The pipe grid with the start cell already resolved
        loop_points: Every point on the loop

    Returns:
        Number of non-loop cells inside the loop

    Raises:
        ValueError: If a loop cell holds START or EMPTY
    """
    if not isinstance(loop_points, (set, frozenset)):
        loop_points = frozenset(loop_points)

    inside_count = 0
    for r, row in enumerate(grid.cells):
        inside = False
        pending: PipeKind | None = None  # TOP_LEFT or BOTTOM_LEFT awaiting its closing corner

        for c, kind in enumerate(row):
            if Point(r, c) not in loop_points:
                if inside:
                    inside_count += 1
                continue

            match kind:
                case PipeKind.VERTICAL:
                    inside = not inside
                    pending = None
                case PipeKind.TOP_LEFT | PipeKind.BOTTOM_LEFT:
                    pending = kind
                case PipeKind.BOTTOM_RIGHT:
                    if pending is PipeKind.TOP_LEFT:
                        inside = not inside
                    pending = None
                case PipeKind.TOP_RIGHT:
                    if pending is PipeKind.BOTTOM_LEFT:
                        inside = not inside
                    pending = None
                case PipeKind.HORIZONTAL:
                    pass
                case _:
                    raise ValueError(
                        f"Loop cell ({r}, {c}) holds {kind.name}; "
                        f"resolve the start cell before counting"
                    )

    return inside_count


# =============================================================================
# Orchestration
# =============================================================================


def analyze(
    grid: PipeGrid,
    is_start: CellPredicate = is_start_kind,
    rules: TraceRules | None = None,
) -> LoopAnalysis | TraceFailure:
    """
    Trace the loop, replace the start cell with its resolved kind and count
    the cells the loop encloses.

    Args:
        grid: The pipe grid to analyze
        is_start: Predicate over (point, kind) identifying the start cell
        rules: TraceRules governing the walk

    Returns:
        LoopAnalysis, or the TraceFailure from tracing
    """
    loop = trace(grid, is_start, rules)
    if isinstance(loop, TraceFailure):
        return loop

    resolved_grid = grid.replace(loop.start, loop.start_kind)
    interior_count = count_inside(resolved_grid, loop.points)

    logger.info(
        "analyze: grid=%dx%d, loop_length=%d, start_kind=%s, interior=%d",
        grid.rows,
        grid.cols,
        loop.size,
        loop.start_kind.name,
        interior_count,
    )
    return LoopAnalysis(loop, resolved_grid, interior_count)
