from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvariantViolation

MAX_BOARD_SIZE = 19
COL_MASKS: Tuple[int, ...] = tuple(1 << i for i in range(MAX_BOARD_SIZE))

RowBits = NDArray[np.uint32]


class Color(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = 2

    @property
    def opponent(self) -> "Color":
        if self == Color.BLACK:
            return Color.WHITE
        if self == Color.WHITE:
            return Color.BLACK
        return Color.EMPTY

    @property
    def letter(self) -> str:
        return {Color.EMPTY: "E", Color.BLACK: "B", Color.WHITE: "W"}[self]


@dataclass(frozen=True)
class Point:
    """An intersection, counted from the lower left corner of the board."""

    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Can't create a negative point ({self.x},{self.y})")

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


PointLike = Union[Point, Tuple[int, int]]


def as_point(value: PointLike) -> Point:
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(int(x), int(y))


def _mask(point: Point) -> int:
    if point.x >= MAX_BOARD_SIZE or point.y >= MAX_BOARD_SIZE:
        raise ValueError(f"Point {point} lies beyond a {MAX_BOARD_SIZE}x{MAX_BOARD_SIZE} board")
    return COL_MASKS[point.x]


def _frozen_rows(rows: Optional[Sequence[int]]) -> RowBits:
    if rows is None:
        array = np.zeros(MAX_BOARD_SIZE, dtype=np.uint32)
    else:
        array = np.array(rows, dtype=np.uint32)
    if array.shape != (MAX_BOARD_SIZE,):
        raise ValueError(f"Expected {MAX_BOARD_SIZE} rows, got shape {array.shape}")
    array.flags.writeable = False
    return array


class Position:
    """Stone occupancy of one board state plus the side to move.

    Each colour is stored as one bit-set per row: bit ``x`` of ``rows[y]`` is on
    when a stone of that colour sits at ``(x, y)``. A point set in both arrays is
    a corrupted position and is refused on construction and on every
    ``color_at`` query. Positions are never mutated; the ``derive_*`` functions
    and :meth:`without` build new ones.
    """

    __slots__ = ("_black", "_white", "_black_to_move", "_move_number")

    def __init__(
        self,
        black: Optional[Sequence[int]] = None,
        white: Optional[Sequence[int]] = None,
        *,
        black_to_move: bool = True,
        move_number: int = 0,
    ) -> None:
        self._black = _frozen_rows(black)
        self._white = _frozen_rows(white)
        self._black_to_move = bool(black_to_move)
        self._move_number = int(move_number)
        self.check_valid()

    @property
    def black_to_move(self) -> bool:
        return self._black_to_move

    @property
    def move_number(self) -> int:
        return self._move_number

    @classmethod
    def empty(cls) -> "Position":
        return cls()

    def check_valid(self) -> None:
        overlap = np.bitwise_and(self._black, self._white)
        if overlap.any():
            rows = np.flatnonzero(overlap).tolist()
            raise InvariantViolation(f"Malformed Go position: rows {rows} mark points both black and white")

    def black_at(self, point: Point) -> bool:
        return bool(int(self._black[point.y]) & _mask(point))

    def white_at(self, point: Point) -> bool:
        return bool(int(self._white[point.y]) & _mask(point))

    def stone_at(self, point: Point) -> bool:
        return self.black_at(point) or self.white_at(point)

    def color_at(self, point: Point) -> Color:
        self.check_valid()
        if self.black_at(point):
            return Color.BLACK
        if self.white_at(point):
            return Color.WHITE
        return Color.EMPTY

    def black_rows(self) -> List[int]:
        return self._black.tolist()

    def white_rows(self) -> List[int]:
        return self._white.tolist()

    def stones(self, color: Color) -> Iterator[Point]:
        rows = self._black if color == Color.BLACK else self._white
        for y, bits in enumerate(rows.tolist()):
            for x in range(MAX_BOARD_SIZE):
                if bits & COL_MASKS[x]:
                    yield Point(x, y)

    def stone_count(self, color: Color) -> int:
        rows = self._black if color == Color.BLACK else self._white
        return sum(bin(bits).count("1") for bits in rows.tolist())

    def without(self, points: Iterable[Point]) -> "Position":
        black = self.black_rows()
        white = self.white_rows()
        for point in points:
            mask = _mask(point)
            black[point.y] &= ~mask
            white[point.y] &= ~mask
        return Position(black, white, black_to_move=self.black_to_move, move_number=self.move_number)

    def copy(self) -> "Position":
        return Position(self._black, self._white, black_to_move=self.black_to_move, move_number=self.move_number)

    def render(self, board_size: int = MAX_BOARD_SIZE) -> str:
        symbols = {Color.EMPTY: ".", Color.BLACK: "X", Color.WHITE: "O"}
        lines = []
        for y in range(board_size - 1, -1, -1):
            row = " ".join(symbols[self.color_at(Point(x, y))] for x in range(board_size))
            lines.append(f"{y:>2}: {row}")
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.black_to_move == other.black_to_move
            and np.array_equal(self._black, other._black)
            and np.array_equal(self._white, other._white)
        )

    def __hash__(self) -> int:
        return hash((self.black_to_move, self._black.tobytes(), self._white.tobytes()))

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"Position(move={self.move_number}, black_to_move={self.black_to_move})\n"
            f"{self.render()}"
        )


def derive_from_play(prior: Position, point: Optional[Point], color: Color) -> Position:
    """Position after ``color`` plays at ``point``; ``None`` is a pass.

    No rules are checked and nothing is captured here.
    """
    if color not in (Color.BLACK, Color.WHITE):
        raise ValueError("Moves must be black or white")
    prior.check_valid()
    black = prior.black_rows()
    white = prior.white_rows()
    if point is not None:
        target = black if color == Color.BLACK else white
        target[point.y] |= _mask(point)
    return Position(
        black,
        white,
        black_to_move=color == Color.WHITE,
        move_number=prior.move_number + 1,
    )


def derive_from_setup(
    prior: Position,
    empty: Iterable[Point] = (),
    black: Iterable[Point] = (),
    white: Iterable[Point] = (),
    *,
    black_to_move: bool,
) -> Position:
    """Position after a batch setup edit. Setup may overwrite existing stones."""
    prior.check_valid()
    black_rows = prior.black_rows()
    white_rows = prior.white_rows()
    for point in empty:
        mask = _mask(point)
        black_rows[point.y] &= ~mask
        white_rows[point.y] &= ~mask
    for point in black:
        mask = _mask(point)
        white_rows[point.y] &= ~mask
        black_rows[point.y] |= mask
    for point in white:
        mask = _mask(point)
        black_rows[point.y] &= ~mask
        white_rows[point.y] |= mask
    return Position(black_rows, white_rows, black_to_move=black_to_move, move_number=prior.move_number)
