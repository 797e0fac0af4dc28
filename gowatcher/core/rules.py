from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Type

from .grouping import group_and_liberties, is_on_board, neighbors
from .state import Color, Point, Position, derive_from_play

if TYPE_CHECKING:
    from gowatcher.board import Board


class Rules:
    """Legality policy consulted by :class:`~gowatcher.board.Board` before every move.

    ``point`` is ``None`` for a pass.
    """

    name = "abstract"

    def is_self_capture(self, point: Point, board: "Board") -> bool:
        raise NotImplementedError

    def is_ko(self, point: Point, board: "Board") -> bool:
        raise NotImplementedError

    def is_self_capture_allowed(self) -> bool:
        raise NotImplementedError

    def is_empty(self, point: Point, board: "Board") -> bool:
        return not board.current_position().stone_at(point)

    def count_liberties(self, point: Point, board: "Board") -> int:
        return group_and_liberties(point, board.current_position(), board.board_size).liberties

    def rejection_reason(self, point: Optional[Point], board: "Board") -> Optional[str]:
        if point is None:
            return None
        if not is_on_board(point.x, point.y, board.board_size):
            return "off board"
        if not self.is_empty(point, board):
            return "occupied"
        if not self.is_self_capture_allowed() and self.is_self_capture(point, board):
            return "self-capture"
        if self.is_ko(point, board):
            return "ko"
        return None

    def is_legal_move(self, point: Optional[Point], board: "Board") -> bool:
        return self.rejection_reason(point, board) is None


def _tentative(point: Point, board: "Board") -> Position:
    mover = Color.BLACK if board.is_black_turn() else Color.WHITE
    return derive_from_play(board.current_position(), point, mover)


class QuickRules(Rules):
    """Suicide is forbidden; ko is checked only for single-stone recaptures."""

    name = "quick"

    def is_self_capture_allowed(self) -> bool:
        return False

    def is_self_capture(self, point: Point, board: "Board") -> bool:
        size = board.board_size
        position = _tentative(point, board)
        mover = position.color_at(point)

        # Opponent liberties are read before anything is removed.
        captures_opponent = False
        for neighbor in neighbors(point, size):
            if position.color_at(neighbor) != mover.opponent:
                continue
            if group_and_liberties(neighbor, position, size).liberties == 0:
                captures_opponent = True
        if captures_opponent:
            return False
        return group_and_liberties(point, position, size).liberties == 0

    def is_ko(self, point: Point, board: "Board") -> bool:
        size = board.board_size
        position = _tentative(point, board)
        mover = position.color_at(point)

        stones_removed = 0
        for neighbor in neighbors(point, size):
            if position.color_at(neighbor) != mover.opponent:
                continue
            group = group_and_liberties(neighbor, position, size)
            if group.liberties == 0 and group.size == 1:
                stones_removed += 1
                position = position.without([neighbor])

        if stones_removed != 1:
            return False
        return any(position == earlier for earlier in board.history())


class SelfCaptureRules(QuickRules):
    """Rule sets such as New Zealand that let a player sacrifice their own group."""

    name = "self-capture"

    def is_self_capture_allowed(self) -> bool:
        return True


_RULES_BY_LABEL: Dict[str, Type[Rules]] = {
    "new zealand": SelfCaptureRules,
    "nz": SelfCaptureRules,
    "tromp": SelfCaptureRules,
}


def rules_for_name(label: Optional[str]) -> Rules:
    """Pick a policy for a rule-set label such as ``"Japanese"`` or ``"New Zealand"``."""
    lowered = (label or "").lower()
    for key, rules_cls in _RULES_BY_LABEL.items():
        if key in lowered:
            return rules_cls()
    return QuickRules()
