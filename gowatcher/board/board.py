from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from gowatcher.core import (
    MAX_BOARD_SIZE,
    Color,
    Group,
    IllegalMove,
    Point,
    PointLike,
    Position,
    Rules,
    as_point,
    derive_from_play,
    derive_from_setup,
    group_and_liberties,
    is_on_board,
    neighbors,
    rules_for_name,
)
from gowatcher.tree import MoveNode, MoveTree

logger = logging.getLogger(__name__)

DEFAULT_KOMI = 5.5
MAX_HANDICAP = 9


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class BoardConfig:
    board_size: int = MAX_BOARD_SIZE
    rule_set: str = "Japanese"
    komi: float = DEFAULT_KOMI
    keep_undone_variations: bool = True
    mark_undone: bool = True


@dataclass
class GameInfo:
    """Per-game metadata an exporter needs alongside the move tree."""

    white_name: str = "White"
    black_name: str = "Black"
    handicap: int = 0
    komi: float = DEFAULT_KOMI
    board_size: int = MAX_BOARD_SIZE
    rule_set: str = "Japanese"
    result: str = "?"
    white_rank: Optional[str] = None
    black_rank: Optional[str] = None
    game_name: str = ""
    event: str = ""
    date: str = field(default_factory=_utc_now)
    place: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        if not self.game_name:
            self.game_name = f"{self.white_name} vs. {self.black_name}"


def clamp_handicap(handicap: int) -> int:
    if handicap <= 1:
        return 0
    return min(handicap, MAX_HANDICAP)


_NO_CAPTURES: Tuple[int, int] = (0, 0)


class Board:
    """A game in progress: rules enforcement, capture bookkeeping and history.

    ``positions[i]`` is the position after the i-th node of the active line,
    with ``positions[0]`` belonging to the root. The cursor always points at the
    last entry. Every mutation is computed in full before any state is touched,
    so a rejected move leaves the board as it was.

    Not thread-safe; feed concurrent sources through
    :class:`gowatcher.feed.FeedWorker`.
    """

    def __init__(self, config: Optional[BoardConfig] = None, rules: Optional[Rules] = None) -> None:
        self.config = config or BoardConfig()
        if not 1 <= self.config.board_size <= MAX_BOARD_SIZE:
            raise ValueError(f"Board size must be between 1 and {MAX_BOARD_SIZE}, got {self.config.board_size}")
        self.rules: Rules = rules if rules is not None else rules_for_name(self.config.rule_set)
        self.new_game()

    def new_game(
        self,
        white_name: str = "White",
        black_name: str = "Black",
        handicap: int = 0,
        komi: Optional[float] = None,
    ) -> None:
        handicap = clamp_handicap(handicap)
        self.game_info = GameInfo(
            white_name=white_name,
            black_name=black_name,
            handicap=handicap,
            komi=self.config.komi if komi is None else komi,
            board_size=self.config.board_size,
            rule_set=self.config.rule_set,
        )
        self.tree = MoveTree()
        self._line: List[int] = [self.tree.root.handle]
        self._positions: List[Position] = [Position.empty()]
        self._gains: List[Tuple[int, int]] = [_NO_CAPTURES]
        self._cursor = 0
        self._prisoners: Dict[Color, int] = {Color.BLACK: 0, Color.WHITE: 0}
        self._handicap_left = handicap
        self._game_over = False

    @property
    def board_size(self) -> int:
        return self.config.board_size

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_game_over(self) -> bool:
        return self._game_over

    @property
    def handicap_left(self) -> int:
        return self._handicap_left

    @property
    def line(self) -> Tuple[int, ...]:
        return tuple(self._line)

    @property
    def current_node(self) -> MoveNode:
        return self.tree.node(self._line[-1])

    def current_position(self) -> Position:
        return self._positions[self._cursor].copy()

    def positions(self) -> Iterator[Position]:
        for position in self._positions:
            yield position.copy()

    def history(self) -> Iterator[Position]:
        """Copies of the positions of the active line, for rules that compare against them."""
        for position in self._positions:
            yield position.copy()

    @property
    def has_started(self) -> bool:
        """True once anything has been recorded since the last :meth:`new_game`."""
        return self._game_over or len(self.tree) > 1 or self.tree.root.has_setup

    def is_black_turn(self) -> bool:
        return self._positions[self._cursor].black_to_move

    def is_white_turn(self) -> bool:
        return not self.is_black_turn()

    def prisoners(self, color: Color) -> int:
        return self._prisoners[color]

    def is_on_board(self, x: int, y: int) -> bool:
        return is_on_board(x, y, self.board_size)

    def count_liberties(self, point: PointLike) -> int:
        return self.rules.count_liberties(as_point(point), self)

    def group_at(self, point: PointLike) -> Group:
        return group_and_liberties(as_point(point), self._positions[self._cursor], self.board_size)

    def __str__(self) -> str:
        return self._positions[self._cursor].render(self.board_size)

    def play_at(self, x: int, y: int) -> bool:
        """Play the side to move at ``(x, y)``.

        Returns ``False`` without touching anything once the game is over.
        Raises :class:`IllegalMove` when the point is off the board or the rules
        refuse it.
        """
        if self._game_over:
            logger.warning("Move at (%d,%d) after end of game ignored", x, y)
            return False
        if not self.is_on_board(x, y):
            raise IllegalMove(x, y, self.current_position(), "off board")
        point = Point(x, y)

        if self._handicap_left > 0 and self._cursor == 0:
            self._place_handicap_stone(point)
            return True

        reason = self.rules.rejection_reason(point, self)
        if reason is not None:
            raise IllegalMove(x, y, self.current_position(), reason)
        self._append_play(point)
        return True

    def play_pass(self) -> bool:
        if self._game_over:
            logger.warning("Pass after end of game ignored")
            return False
        self._append_play(None)
        return True

    def _mover(self) -> Color:
        return Color.BLACK if self.is_black_turn() else Color.WHITE

    def _append_play(self, point: Optional[Point]) -> None:
        mover = self._mover()
        size = self.board_size
        position = derive_from_play(self._positions[self._cursor], point, mover)
        gained = {Color.BLACK: 0, Color.WHITE: 0}

        if point is not None:
            for neighbor in neighbors(point, size):
                if position.color_at(neighbor) != mover.opponent:
                    continue
                group = group_and_liberties(neighbor, position, size)
                if group.liberties == 0:
                    position = position.without(group.members)
                    gained[mover] += group.size
                    logger.debug("%s at %s captures %d stone(s) from %s", mover.name, point, group.size, neighbor)

            if self.rules.is_self_capture_allowed():
                own = group_and_liberties(point, position, size)
                if own.liberties == 0:
                    position = position.without(own.members)
                    gained[mover.opponent] += own.size
                    logger.debug("%s at %s removes its own group of %d", mover.name, point, own.size)

        node = self.tree.add_play(self._line[-1], point, mover)
        self._commit(node, position, (gained[Color.BLACK], gained[Color.WHITE]))

    def _commit(self, node: MoveNode, position: Position, gains: Tuple[int, int]) -> None:
        if self._handicap_left:
            # Stones not placed by now never will be.
            self.game_info.handicap -= self._handicap_left
            logger.info("Play left the root with %d handicap stone(s) unplaced", self._handicap_left)
            self._handicap_left = 0
        self._line.append(node.handle)
        self._positions.append(position)
        self._gains.append(gains)
        self._prisoners[Color.BLACK] += gains[0]
        self._prisoners[Color.WHITE] += gains[1]
        self._cursor += 1

    def _place_handicap_stone(self, point: Point) -> None:
        if self._positions[0].stone_at(point):
            raise IllegalMove(point.x, point.y, self.current_position(), "occupied")
        remaining = self._handicap_left - 1
        to_move = Color.WHITE if remaining == 0 else Color.BLACK
        root = self.tree.edit_setup(self.tree.root.handle, black=[point], color_to_move=to_move)
        self._positions[0] = derive_from_setup(
            Position.empty(),
            root.add_empty,
            root.add_black,
            root.add_white,
            black_to_move=to_move == Color.BLACK,
        )
        self._handicap_left = remaining
        logger.debug("Handicap stone at %s, %d left", point, remaining)

    def place_handicap(self, points: Iterable[PointLike], black_to_move: bool = False) -> None:
        """Put ``points`` on the root as black handicap stones in one step."""
        if self._game_over:
            logger.warning("Handicap placement after end of game ignored")
            return
        if self._cursor != 0 or self.tree.root.has_setup:
            raise ValueError("Handicap stones can only be placed on an empty root")
        stones = self._checked_points(points)
        to_move = Color.BLACK if black_to_move else Color.WHITE
        root = self.tree.edit_setup(self.tree.root.handle, black=stones, color_to_move=to_move)
        self._positions[0] = derive_from_setup(Position.empty(), black=root.add_black, black_to_move=black_to_move)
        self.game_info.handicap = len(root.add_black)
        self._handicap_left = 0

    def undo(self) -> bool:
        if self._game_over:
            logger.warning("Undo after end of game ignored")
            return False
        if self._cursor == 0:
            return False
        handle = self._line.pop()
        self._positions.pop()
        black_gain, white_gain = self._gains.pop()
        self._prisoners[Color.BLACK] -= black_gain
        self._prisoners[Color.WHITE] -= white_gain
        self._cursor -= 1
        self.tree.abandon(
            handle,
            keep=self.config.keep_undone_variations,
            mark=self.config.mark_undone,
        )
        logger.debug("Undid node %d, cursor now %d", handle, self._cursor)
        return True

    def set_up(
        self,
        white: Iterable[PointLike] = (),
        black: Iterable[PointLike] = (),
        empty: Iterable[PointLike] = (),
        black_to_move: bool = True,
    ) -> None:
        """Edit stones directly, bypassing the rules.

        Repeated calls while the current node is already a setup node extend that
        node instead of creating another one.
        """
        if self._game_over:
            logger.warning("Setup after end of game ignored")
            return
        white_points = self._checked_points(white)
        black_points = self._checked_points(black)
        empty_points = self._checked_points(empty)
        to_move = Color.BLACK if black_to_move else Color.WHITE

        initial = self._line[-1]
        node = self.tree.setup(
            initial,
            empty=empty_points,
            black=black_points,
            white=white_points,
            color_to_move=to_move,
        )
        if node.handle == initial:
            position = derive_from_setup(
                self._positions[self._cursor - 1],
                node.add_empty,
                node.add_black,
                node.add_white,
                black_to_move=black_to_move,
            )
            self._positions[self._cursor] = position
            logger.debug("Setup coalesced into node %d", node.handle)
        else:
            position = derive_from_setup(
                self._positions[self._cursor],
                node.add_empty,
                node.add_black,
                node.add_white,
                black_to_move=black_to_move,
            )
            self._commit(node, position, _NO_CAPTURES)

    def _checked_points(self, points: Iterable[PointLike]) -> List[Point]:
        checked = []
        for value in points:
            point = as_point(value)
            if not self.is_on_board(point.x, point.y):
                raise ValueError(f"Setup point {point} is not on a {self.board_size}x{self.board_size} board")
            checked.append(point)
        return checked

    def resign(self) -> None:
        if self._game_over:
            logger.warning("Resignation after end of game ignored")
            return
        self.game_info.result = "B+R" if self.is_white_turn() else "W+R"
        self._game_over = True
        logger.info("Game over: %s", self.game_info.result)
