"""Go board engine fed by moves from an external program."""

from . import board, core, feed, tree, validation
from .board import Board, BoardConfig, GameInfo
from .config import AppConfig, load_config
from .core import (
    Color,
    IllegalMove,
    InvariantViolation,
    MalformedFeedInput,
    Point,
    Position,
    QuickRules,
    Rules,
    SelfCaptureRules,
)
from .feed import FeedConfig, FeedReport, FeedWorker, MoveFeed, decode_line, decode_vertex
from .tree import MoveNode, MoveTree
from .validation import HistoryError, validate_history

__all__ = [
    "board",
    "core",
    "feed",
    "tree",
    "validation",
    "Board",
    "BoardConfig",
    "GameInfo",
    "AppConfig",
    "load_config",
    "Color",
    "IllegalMove",
    "InvariantViolation",
    "MalformedFeedInput",
    "Point",
    "Position",
    "QuickRules",
    "Rules",
    "SelfCaptureRules",
    "FeedConfig",
    "FeedReport",
    "FeedWorker",
    "MoveFeed",
    "decode_line",
    "decode_vertex",
    "MoveNode",
    "MoveTree",
    "HistoryError",
    "validate_history",
]
