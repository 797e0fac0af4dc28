from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gowatcher.core import MalformedFeedInput, Point

# autogtp progress output, e.g. " 12 (B D4)" or " 40 (pass)"
MOVE_EVENT = re.compile(r"\s*\d+\s*\((?:[BW]\s)?(\w+)\)\s*")
# any other autogtp event ends the game in progress
GAME_EVENT = re.compile(r"(?:.*(?:sent|set)\.|Game).*", re.DOTALL)
VERTEX = re.compile(r"(?:([a-z])(\d+))|(pass)|(resign)", re.IGNORECASE)


class CommandKind(Enum):
    MOVE = "move"
    PASS = "pass"
    RESIGN = "resign"
    GAME_BOUNDARY = "game-boundary"


@dataclass(frozen=True)
class FeedCommand:
    kind: CommandKind
    point: Optional[Point] = None


def decode_vertex(token: str) -> FeedCommand:
    """Decode ``D4``, ``pass`` or ``resign``.

    Columns are letters with ``I`` skipped, rows are counted from 1. Whether the
    point fits the board is left to the board.
    """
    match = VERTEX.fullmatch(token.strip())
    if match is None:
        raise MalformedFeedInput(token)
    if match.group(3):
        return FeedCommand(CommandKind.PASS)
    if match.group(4):
        return FeedCommand(CommandKind.RESIGN)

    letter = match.group(1).lower()
    if letter == "i":
        raise MalformedFeedInput(token, "column I is not used")
    x = ord(letter) - ord("a")
    if x > 8:
        x -= 1
    row = int(match.group(2))
    if row < 1:
        raise MalformedFeedInput(token, "rows start at 1")
    return FeedCommand(CommandKind.MOVE, Point(x, row - 1))


def decode_line(line: str) -> Optional[FeedCommand]:
    """Decode one feed line; blank lines and ``#`` comments yield ``None``.

    autogtp status lines such as ``Got new job: ... set.`` or ``Game has ended``
    decode to a ``GAME_BOUNDARY`` command.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    event = MOVE_EVENT.fullmatch(line)
    if event is not None:
        return decode_vertex(event.group(1))
    if GAME_EVENT.fullmatch(text):
        return FeedCommand(CommandKind.GAME_BOUNDARY)
    return decode_vertex(text)


def encode_vertex(point: Optional[Point]) -> str:
    """Inverse of :func:`decode_vertex` for moves; ``None`` encodes a pass."""
    if point is None:
        return "pass"
    column = point.x if point.x < 8 else point.x + 1
    return f"{chr(ord('A') + column)}{point.y + 1}"
