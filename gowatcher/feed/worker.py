from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from gowatcher.board import Board
from gowatcher.core import IllegalMove, MalformedFeedInput

from .decoder import CommandKind, FeedCommand, decode_line

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], None]


@dataclass
class FeedConfig:
    stop_on_illegal: bool = False


@dataclass
class FeedReport:
    applied: int = 0
    ignored: int = 0
    new_games: int = 0
    stopped: bool = False
    malformed: List[MalformedFeedInput] = field(default_factory=list)
    illegal: List[IllegalMove] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.malformed and not self.illegal


class MoveFeed:
    """Applies decoded feed commands to a board strictly in the order received."""

    def __init__(
        self,
        board: Board,
        config: Optional[FeedConfig] = None,
        *,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        self.board = board
        self.config = config or FeedConfig()
        self.on_error = on_error
        self.in_progress = True

    def apply(self, command: FeedCommand) -> bool:
        if command.kind is CommandKind.GAME_BOUNDARY:
            if self.in_progress:
                logger.info("Game finished after %d node(s)", self.board.cursor)
            self.in_progress = False
            return False
        if not self.in_progress:
            self.start_game()
        if command.kind is CommandKind.PASS:
            return self.board.play_pass()
        if command.kind is CommandKind.RESIGN:
            if self.board.is_game_over:
                logger.warning("Resignation after end of game ignored")
                return False
            self.board.resign()
            return True
        return self.board.play_at(command.point.x, command.point.y)

    def start_game(self) -> bool:
        """Mark a game as running, clearing the board when it holds a previous one."""
        self.in_progress = True
        if not self.board.has_started:
            return False
        self.board.new_game()
        logger.info("New game started")
        return True

    def feed_line(self, line: str, report: FeedReport) -> bool:
        if report.stopped:
            return False
        try:
            command = decode_line(line)
        except MalformedFeedInput as exc:
            logger.warning("%s", exc)
            report.malformed.append(exc)
            self._notify(exc)
            return False
        if command is None:
            return False
        if command.kind is CommandKind.GAME_BOUNDARY:
            self.apply(command)
            return False
        if not self.in_progress and self.start_game():
            report.new_games += 1

        try:
            applied = self.apply(command)
        except IllegalMove as exc:
            logger.warning("Illegal move attempted: (%d,%d) %s", exc.x, exc.y, exc.reason)
            report.illegal.append(exc)
            if self.config.stop_on_illegal:
                report.stopped = True
            self._notify(exc)
            return False

        if applied:
            report.applied += 1
        else:
            report.ignored += 1
        return applied

    def consume(self, lines: Iterable[str]) -> FeedReport:
        report = FeedReport()
        for line in lines:
            self.feed_line(line, report)
            if report.stopped:
                break
        return report

    def _notify(self, exc: Exception) -> None:
        if self.on_error is not None:
            self.on_error(exc)


class FeedWorker:
    """Single writer for a board fed from another thread.

    Every submitted line runs on one worker thread, so board mutations never
    overlap and are applied in submission order.
    """

    def __init__(self, feed: MoveFeed) -> None:
        self.feed = feed
        self.report = FeedReport()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="move-feed")
        self._reader: Optional[threading.Thread] = None
        self._futures: List["Future[bool]"] = []
        self._lock = threading.Lock()

    def submit(self, line: str) -> "Future[bool]":
        future = self._executor.submit(self.feed.feed_line, line, self.report)
        future.add_done_callback(lambda done: _log_failure(line, done))
        with self._lock:
            self._futures.append(future)
        return future

    def follow(self, stream: Iterable[str]) -> threading.Thread:
        """Read ``stream`` on a background thread and submit each line."""

        def _read() -> None:
            for line in stream:
                self.submit(line)

        self._reader = threading.Thread(target=_read, name="move-feed-reader", daemon=True)
        self._reader.start()
        return self._reader

    def close(self, wait: bool = True) -> FeedReport:
        """Stop the worker. With ``wait`` the first error raised by a line is re-raised."""
        if self._reader is not None and wait:
            self._reader.join()
        self._executor.shutdown(wait=wait)
        if wait:
            with self._lock:
                futures, self._futures = self._futures, []
            for future in futures:
                future.result()
        return self.report

    def __enter__(self) -> "FeedWorker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _log_failure(line: str, future: "Future[bool]") -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Feed line %r failed", line, exc_info=exc)
