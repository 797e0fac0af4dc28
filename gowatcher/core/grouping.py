from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Tuple

import numpy as np

from .state import COL_MASKS, MAX_BOARD_SIZE, Color, Point, Position

# north, east, south, west
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

Predicate = Callable[[Point, Color], bool]


@dataclass(frozen=True)
class Group:
    color: Color
    members: FrozenSet[Point]
    liberties: int

    @property
    def size(self) -> int:
        return len(self.members)


class _VisitMarks:
    """Visited overlay for a single traversal, never stored on a Position."""

    __slots__ = ("_rows",)

    def __init__(self) -> None:
        self._rows = np.zeros(MAX_BOARD_SIZE, dtype=np.uint32)

    def mark(self, point: Point) -> None:
        self._rows[point.y] |= np.uint32(COL_MASKS[point.x])

    def is_marked(self, point: Point) -> bool:
        return bool(int(self._rows[point.y]) & COL_MASKS[point.x])

    def clear(self) -> None:
        self._rows[:] = 0


def is_on_board(x: int, y: int, board_size: int) -> bool:
    return 0 <= x < board_size and 0 <= y < board_size


def neighbors(point: Point, board_size: int) -> List[Point]:
    result: List[Point] = []
    for dx, dy in DIRECTIONS:
        nx, ny = point.x + dx, point.y + dy
        if is_on_board(nx, ny, board_size):
            result.append(Point(nx, ny))
    return result


def _color(position: Position, point: Point) -> Color:
    if position.black_at(point):
        return Color.BLACK
    if position.white_at(point):
        return Color.WHITE
    return Color.EMPTY


def flood_fill(
    position: Position,
    start: Point,
    board_size: int,
    *,
    enter: Predicate,
    expand: Predicate,
) -> List[Tuple[Point, Color]]:
    """Depth-first walk from ``start`` in north, east, south, west order.

    ``enter`` decides whether a neighbouring point is visited at all and
    ``expand`` whether the walk continues outward from a visited point. Each
    point is visited at most once. Returns the visited points with their colour
    in visiting order.
    """
    if not is_on_board(start.x, start.y, board_size):
        raise ValueError(f"{start} is not on a {board_size}x{board_size} board")
    position.check_valid()

    marks = _VisitMarks()
    visited: List[Tuple[Point, Color]] = []
    stack = [start]
    marks.mark(start)
    while stack:
        point = stack.pop()
        color = _color(position, point)
        visited.append((point, color))
        if not expand(point, color):
            continue
        for neighbor in reversed(neighbors(point, board_size)):
            if marks.is_marked(neighbor):
                continue
            if enter(neighbor, _color(position, neighbor)):
                marks.mark(neighbor)
                stack.append(neighbor)
    marks.clear()
    return visited


def group_and_liberties(point: Point, position: Position, board_size: int) -> Group:
    """The group containing ``point`` and its liberty count.

    An empty point has no members and, by convention, one liberty; callers must
    check for a stone first if that matters to them.
    """
    if not is_on_board(point.x, point.y, board_size):
        raise ValueError(f"{point} is not on a {board_size}x{board_size} board")
    color = position.color_at(point)
    if color == Color.EMPTY:
        return Group(Color.EMPTY, frozenset(), 1)

    visited = flood_fill(
        position,
        point,
        board_size,
        enter=lambda _p, c: c == color or c == Color.EMPTY,
        expand=lambda _p, c: c == color,
    )
    members = frozenset(p for p, c in visited if c == color)
    liberties = sum(1 for _p, c in visited if c == Color.EMPTY)
    return Group(color, members, liberties)


def count_liberties(point: Point, position: Position, board_size: int) -> int:
    return group_and_liberties(point, position, board_size).liberties


def group_members(point: Point, position: Position, board_size: int) -> FrozenSet[Point]:
    return group_and_liberties(point, position, board_size).members
