"""Branching record of play."""

from .move_tree import UNDO_MARK, MoveNode, MoveTree, NodeKind

__all__ = ["UNDO_MARK", "MoveNode", "MoveTree", "NodeKind"]
