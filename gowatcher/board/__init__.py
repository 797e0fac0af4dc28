"""Game session: positions along the active line, captures, undo and resignation."""

from .board import DEFAULT_KOMI, MAX_HANDICAP, Board, BoardConfig, GameInfo, clamp_handicap

__all__ = ["DEFAULT_KOMI", "MAX_HANDICAP", "Board", "BoardConfig", "GameInfo", "clamp_handicap"]
