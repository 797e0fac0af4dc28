from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from gowatcher.core import Color, InvariantViolation, Point

UNDO_MARK = "UNDO "


class NodeKind(Enum):
    ROOT = "root"
    SETUP = "setup"
    PLAY = "play"


@dataclass
class MoveNode:
    """One node of the game record.

    ``handle`` is the node's index in its :class:`MoveTree` and doubles as its
    id. Only the fields of the node's kind are meaningful: ``point``/``color``
    for PLAY (``point is None`` is a pass), the ``add_*`` lists and
    ``color_to_move`` for ROOT and SETUP.
    """

    handle: int
    kind: NodeKind
    parent: int
    move_number: int
    point: Optional[Point] = None
    color: Optional[Color] = None
    add_empty: List[Point] = field(default_factory=list)
    add_black: List[Point] = field(default_factory=list)
    add_white: List[Point] = field(default_factory=list)
    color_to_move: Optional[Color] = None
    children: List[int] = field(default_factory=list)
    comment: str = ""
    detached: bool = False

    @property
    def is_root(self) -> bool:
        return self.kind is NodeKind.ROOT

    @property
    def is_setup(self) -> bool:
        return self.kind is NodeKind.SETUP

    @property
    def is_play(self) -> bool:
        return self.kind is NodeKind.PLAY

    @property
    def is_pass(self) -> bool:
        return self.kind is NodeKind.PLAY and self.point is None

    @property
    def has_setup(self) -> bool:
        return bool(self.add_empty or self.add_black or self.add_white)


class MoveTree:
    """Arena owning every node of a game record.

    Nodes refer to each other by handle only. The root is its own parent; upward
    walks stop when they reach a ROOT node.
    """

    def __init__(self) -> None:
        self._nodes: List[MoveNode] = []
        self._new_node(NodeKind.ROOT, parent=0, move_number=0, color_to_move=Color.BLACK)

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def root(self) -> MoveNode:
        return self._nodes[0]

    def node(self, handle: int) -> MoveNode:
        if not 0 <= handle < len(self._nodes):
            raise KeyError(f"No move node with handle {handle}")
        return self._nodes[handle]

    def parent(self, handle: int) -> MoveNode:
        return self._nodes[self.node(handle).parent]

    def children(self, handle: int) -> List[MoveNode]:
        return [self._nodes[child] for child in self.node(handle).children]

    def _new_node(self, kind: NodeKind, *, parent: int, move_number: int, **fields) -> MoveNode:
        node = MoveNode(handle=len(self._nodes), kind=kind, parent=parent, move_number=move_number, **fields)
        self._nodes.append(node)
        if kind is not NodeKind.ROOT:
            self._nodes[parent].children.append(node.handle)
        return node

    def ancestors(self, handle: int) -> Iterator[MoveNode]:
        """Nodes above ``handle``, nearest first, ending with the root."""
        node = self.node(handle)
        while not node.is_root:
            node = self._nodes[node.parent]
            yield node

    def nearest_play(self, handle: int) -> Optional[MoveNode]:
        node = self.node(handle)
        if node.is_play:
            return node
        for ancestor in self.ancestors(handle):
            if ancestor.is_play:
                return ancestor
        return None

    def add_play(self, parent: int, point: Optional[Point], color: Color) -> MoveNode:
        if color not in (Color.BLACK, Color.WHITE):
            raise InvariantViolation("Moves must be black or white")
        parent_node = self.node(parent)
        if parent_node.detached:
            raise InvariantViolation(f"Cannot extend detached node {parent}")
        previous = self.nearest_play(parent)
        if previous is not None and previous.color == color:
            raise InvariantViolation(f"Attempted to move {color.name} twice in a row")
        return self._new_node(
            NodeKind.PLAY,
            parent=parent,
            move_number=parent_node.move_number + 1,
            point=point,
            color=color,
        )

    def add_setup(self, parent: int, color_to_move: Optional[Color] = None) -> MoveNode:
        parent_node = self.node(parent)
        if parent_node.detached:
            raise InvariantViolation(f"Cannot extend detached node {parent}")
        if color_to_move is None:
            color_to_move = self._next_color(parent_node)
        return self._new_node(
            NodeKind.SETUP,
            parent=parent,
            move_number=parent_node.move_number,
            color_to_move=color_to_move,
        )

    def _next_color(self, node: MoveNode) -> Color:
        if node.is_play:
            return node.color.opponent
        return node.color_to_move or Color.BLACK

    def edit_setup(
        self,
        handle: int,
        *,
        empty: Iterable[Point] = (),
        black: Iterable[Point] = (),
        white: Iterable[Point] = (),
        color_to_move: Optional[Color] = None,
    ) -> MoveNode:
        """Add points to a ROOT or SETUP node; each point ends up in exactly one list."""
        node = self.node(handle)
        if node.is_play:
            raise InvariantViolation("Setup edits and moves must not be mixed on one node")
        for point in empty:
            _place(point, node.add_empty, node.add_black, node.add_white)
        for point in black:
            _place(point, node.add_black, node.add_white, node.add_empty)
        for point in white:
            _place(point, node.add_white, node.add_black, node.add_empty)
        if color_to_move is not None:
            node.color_to_move = color_to_move
        return node

    def setup(
        self,
        current: int,
        *,
        empty: Iterable[Point] = (),
        black: Iterable[Point] = (),
        white: Iterable[Point] = (),
        color_to_move: Color,
    ) -> MoveNode:
        """Apply a setup batch at ``current``, reusing it when it already is a SETUP node."""
        node = self.node(current)
        if not node.is_setup:
            node = self.add_setup(current, color_to_move)
        return self.edit_setup(node.handle, empty=empty, black=black, white=white, color_to_move=color_to_move)

    def abandon(self, handle: int, *, keep: bool, mark: bool) -> MoveNode:
        """Retire an undone node, either as a marked variation or detached entirely."""
        node = self.node(handle)
        if node.is_root:
            raise InvariantViolation("The root node cannot be undone")
        if mark:
            node.comment = UNDO_MARK + node.comment
        if not keep:
            parent = self._nodes[node.parent]
            parent.children.remove(handle)
            node.detached = True
        return node

    def line_to(self, handle: int) -> List[MoveNode]:
        line = [self.node(handle)]
        line.extend(self.ancestors(handle))
        line.reverse()
        return line

    def main_line(self) -> List[MoveNode]:
        line = [self.root]
        node = self.root
        while node.children:
            node = self._nodes[node.children[0]]
            line.append(node)
        return line

    def variations(self, handle: int) -> List[MoveNode]:
        return self.children(handle)


def _place(point: Point, target: List[Point], *others: List[Point]) -> None:
    for other in others:
        if point in other:
            other.remove(point)
    if point not in target:
        target.append(point)
