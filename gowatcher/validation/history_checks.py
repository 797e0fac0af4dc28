from __future__ import annotations

from typing import List

from gowatcher.board import Board
from gowatcher.core import Color, IllegalMove, Position
from gowatcher.tree import MoveNode


class HistoryError(RuntimeError):
    pass


def validate_position(position: Position, board_size: int) -> None:
    position.check_valid()
    if board_size >= len(position.black_rows()):
        return
    outside = ~((1 << board_size) - 1)
    for y, (black, white) in enumerate(zip(position.black_rows(), position.white_rows())):
        if y >= board_size and (black or white):
            raise HistoryError(f"stones on row {y} of a {board_size}x{board_size} board")
        if (black | white) & outside:
            raise HistoryError(f"stones beyond column {board_size - 1} on row {y}")


def _check_line(line: List[MoveNode]) -> None:
    if not line or not line[0].is_root:
        raise HistoryError("active line does not start at the root")
    for parent, node in zip(line, line[1:]):
        if node.parent != parent.handle:
            raise HistoryError(f"node {node.handle} is not a child of node {parent.handle}")
        if node.handle not in parent.children:
            raise HistoryError(f"node {node.handle} is missing from its parent's children")
        expected = parent.move_number + 1 if node.is_play else parent.move_number
        if node.move_number != expected:
            raise HistoryError(f"node {node.handle} has move number {node.move_number}, expected {expected}")


def validate_history(board: Board) -> None:
    """Check that the stored positions are exactly what replaying the active line yields."""
    positions = list(board.positions())
    line = [board.tree.node(handle) for handle in board.line]
    if len(positions) != board.cursor + 1:
        raise HistoryError(f"{len(positions)} positions stored for cursor {board.cursor}")
    if len(line) != len(positions):
        raise HistoryError(f"{len(line)} nodes on the active line but {len(positions)} positions")
    _check_line(line)
    for position in positions:
        validate_position(position, board.board_size)

    replay = Board(board.config, board.rules)
    try:
        _replay_line(replay, line)
    except IllegalMove as exc:
        raise HistoryError(f"move tree does not replay: {exc.reason} at ({exc.x},{exc.y})") from exc

    for index, (stored, replayed) in enumerate(zip(positions, replay.positions())):
        if stored != replayed:
            raise HistoryError(f"position {index} differs from replay of the move tree")
    for color in (Color.BLACK, Color.WHITE):
        if board.prisoners(color) != replay.prisoners(color):
            raise HistoryError(
                f"{color.name} prisoners are {board.prisoners(color)}, replay gives {replay.prisoners(color)}"
            )


def _replay_line(replay: Board, line: List[MoveNode]) -> None:
    root = line[0]
    if root.add_black:
        replay.place_handicap(root.add_black, black_to_move=root.color_to_move == Color.BLACK)
    for node in line[1:]:
        if node.is_setup:
            replay.set_up(
                white=node.add_white,
                black=node.add_black,
                empty=node.add_empty,
                black_to_move=node.color_to_move == Color.BLACK,
            )
        elif node.is_pass:
            replay.play_pass()
        else:
            replay.play_at(node.point.x, node.point.y)
