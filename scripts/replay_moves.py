#!/usr/bin/env python3
"""Replay a move feed (autogtp output or a JSON log) onto a Go board, with optional logging."""

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from gowatcher import AppConfig, Board, Color, MoveFeed, Point, load_config
from gowatcher.feed import FeedReport, decode_vertex, encode_vertex
from gowatcher.validation import validate_history

logger = logging.getLogger("replay_moves")


def format_board(board: Board) -> str:
    return str(board)


def board_array(board: Board) -> np.ndarray:
    position = board.current_position()
    size = board.board_size
    cells = np.zeros((size, size), dtype=np.int8)
    for color in (Color.BLACK, Color.WHITE):
        for point in position.stones(color):
            if point.x < size and point.y < size:
                cells[point.y, point.x] = int(color)
    return cells


def read_feed_entries(path: Path) -> Tuple[Dict, List[Dict]]:
    """Root record and move entries of a JSON log, or one entry per line of a text feed."""
    if path.suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        return data.get("root", {}), data.get("moves", [])
    return {}, [{"vertex": line} for line in path.read_text(encoding="utf-8").splitlines()]


def _vertices(points: Iterable[Point]) -> List[str]:
    return [encode_vertex(point) for point in points]


def _points(vertices: Iterable[str]) -> List[Point]:
    return [decode_vertex(vertex).point for vertex in vertices]


def move_log(board: Board) -> Dict[str, object]:
    """Root handicap, setup edits and plays of the active line, enough to replay the board."""
    root = board.tree.root
    root_record: Dict[str, object] = {}
    if root.add_black:
        root_record = {
            "handicap": _vertices(root.add_black),
            "black_to_move": root.color_to_move == Color.BLACK,
        }

    records: List[Dict] = []
    for handle in board.line[1:]:
        node = board.tree.node(handle)
        if node.is_setup:
            records.append(
                {
                    "move_index": node.move_number,
                    "setup": {
                        "black": _vertices(node.add_black),
                        "white": _vertices(node.add_white),
                        "empty": _vertices(node.add_empty),
                    },
                    "black_to_move": node.color_to_move == Color.BLACK,
                }
            )
            continue
        records.append(
            {
                "move_index": node.move_number,
                "color": node.color.letter,
                "vertex": encode_vertex(node.point),
            }
        )
    if board.is_game_over:
        records.append({"move_index": board.cursor + 1, "color": "?", "vertex": "resign"})
    return {"root": root_record, "moves": records}


def _apply_entry(board: Board, feed: MoveFeed, report: FeedReport, entry: Dict) -> bool:
    setup = entry.get("setup")
    if setup is None:
        return feed.feed_line(entry["vertex"], report)
    board.set_up(
        white=_points(setup.get("white", [])),
        black=_points(setup.get("black", [])),
        empty=_points(setup.get("empty", [])),
        black_to_move=entry.get("black_to_move", True),
    )
    return True


def replay_entries(
    root: Dict,
    entries: Iterable[Dict],
    config: Optional[AppConfig] = None,
    *,
    verbose: bool = True,
) -> Dict[str, object]:
    config = config or AppConfig()
    board = Board(config.board)
    if root.get("handicap"):
        board.place_handicap(_points(root["handicap"]), black_to_move=root.get("black_to_move", False))
    feed = MoveFeed(board, config.feed)
    report = FeedReport()
    for entry in entries:
        if _apply_entry(board, feed, report, entry) and verbose:
            print(format_board(board))
            print()
        if report.stopped:
            break
    validate_history(board)

    summary = {
        "result": board.game_info.result,
        "moves": report.applied,
        "malformed": [exc.token for exc in report.malformed],
        "illegal": [encode_vertex(exc.point) for exc in report.illegal],
        "board": board_array(board).tolist(),
        "prisoners": {
            "black": board.prisoners(Color.BLACK),
            "white": board.prisoners(Color.WHITE),
        },
        "log": move_log(board),
    }
    if verbose:
        print(f"Result: {summary['result']}  moves applied: {summary['moves']}")
        print(f"Prisoners: black {summary['prisoners']['black']}, white {summary['prisoners']['white']}")
    return summary


def replay_lines(lines: Iterable[str], config: Optional[AppConfig] = None, *, verbose: bool = True) -> Dict[str, object]:
    return replay_entries({}, ({"vertex": line} for line in lines), config, verbose=verbose)


def replay_move_file(path: Path, config: Optional[AppConfig] = None, *, verbose: bool = True) -> Dict[str, object]:
    root, entries = read_feed_entries(path)
    return replay_entries(root, entries, config, verbose=verbose)


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, ensure_ascii=False, indent=2))
    logger.info("Saved log to %s", path)


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a Go move feed and print the resulting board.")
    parser.add_argument("moves", type=str, help="Text feed (one move per line) or JSON log")
    parser.add_argument("--config", type=str, default="configs/default.yaml")
    parser.add_argument("--board-size", type=int, default=None)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--quiet", action="store_true")
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = load_config(args.config)
    if args.board_size is not None:
        config.board.board_size = args.board_size

    summary = replay_move_file(Path(args.moves), config, verbose=not args.quiet)

    if args.log_file:
        metadata = {
            "source": args.moves,
            "board_size": config.board.board_size,
            "rule_set": config.board.rule_set,
            "komi": config.board.komi,
            "result": summary["result"],
        }
        save_log({"metadata": metadata, **summary["log"]}, Path(args.log_file))


if __name__ == "__main__":
    main()
