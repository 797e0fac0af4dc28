from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .state import Point, Position


class InvariantViolation(RuntimeError):
    """A programming error upstream left the board or move tree corrupted."""


class IllegalMove(ValueError):
    """The rules rejected a move. The board is left exactly as it was."""

    def __init__(self, x: int, y: int, position: "Position", reason: str = "illegal") -> None:
        super().__init__(f"Illegal move ({reason}): ({x},{y})\nPosition:\n{position}")
        self.x = x
        self.y = y
        self.position = position
        self.reason = reason

    @property
    def point(self) -> Optional["Point"]:
        from .state import Point

        if self.x < 0 or self.y < 0:
            return None
        return Point(self.x, self.y)


class MalformedFeedInput(ValueError):
    def __init__(self, token: str, detail: str = "cannot decode") -> None:
        super().__init__(f"Malformed feed input {token!r}: {detail}")
        self.token = token
        self.detail = detail
