"""Move feed: textual moves from an external program applied to a board."""

from .decoder import CommandKind, FeedCommand, decode_line, decode_vertex, encode_vertex
from .worker import FeedConfig, FeedReport, FeedWorker, MoveFeed

__all__ = [
    "CommandKind",
    "FeedCommand",
    "decode_line",
    "decode_vertex",
    "encode_vertex",
    "FeedConfig",
    "FeedReport",
    "FeedWorker",
    "MoveFeed",
]
