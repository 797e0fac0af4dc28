import pytest

from gowatcher.core import Color, InvariantViolation, Point
from gowatcher.tree import UNDO_MARK, MoveTree, NodeKind


def test_root_is_its_own_parent_and_ends_walks():
    tree = MoveTree()
    root = tree.root
    assert root.is_root
    assert tree.parent(root.handle) is root
    assert list(tree.ancestors(root.handle)) == []
    assert root.color_to_move == Color.BLACK


def test_play_nodes_alternate_colours():
    tree = MoveTree()
    black = tree.add_play(tree.root.handle, Point(3, 3), Color.BLACK)
    white = tree.add_play(black.handle, None, Color.WHITE)

    assert white.is_pass
    assert white.move_number == 2
    assert [node.handle for node in tree.line_to(white.handle)] == [0, black.handle, white.handle]
    with pytest.raises(InvariantViolation):
        tree.add_play(white.handle, Point(4, 4), Color.WHITE)


def test_alternation_is_checked_through_setup_nodes():
    tree = MoveTree()
    black = tree.add_play(tree.root.handle, Point(3, 3), Color.BLACK)
    setup = tree.add_setup(black.handle)

    assert setup.color_to_move == Color.WHITE
    assert setup.move_number == 1
    assert tree.nearest_play(setup.handle) is black
    with pytest.raises(InvariantViolation):
        tree.add_play(setup.handle, Point(4, 4), Color.BLACK)


def test_empty_is_not_a_move_colour():
    tree = MoveTree()
    with pytest.raises(InvariantViolation):
        tree.add_play(tree.root.handle, Point(0, 0), Color.EMPTY)


def test_setup_lists_stay_exclusive():
    tree = MoveTree()
    node = tree.add_setup(tree.root.handle)
    tree.edit_setup(node.handle, black=[Point(1, 1), Point(2, 2)])
    tree.edit_setup(node.handle, white=[Point(1, 1)], empty=[Point(2, 2)])

    assert node.add_black == []
    assert node.add_white == [Point(1, 1)]
    assert node.add_empty == [Point(2, 2)]
    assert node.has_setup


def test_setup_edit_on_a_play_node_is_rejected():
    tree = MoveTree()
    play = tree.add_play(tree.root.handle, Point(3, 3), Color.BLACK)
    with pytest.raises(InvariantViolation):
        tree.edit_setup(play.handle, black=[Point(4, 4)])


def test_setup_reuses_a_current_setup_node():
    tree = MoveTree()
    first = tree.setup(tree.root.handle, black=[Point(0, 0)], color_to_move=Color.WHITE)
    second = tree.setup(first.handle, white=[Point(1, 1)], color_to_move=Color.BLACK)

    assert first is second
    assert first.kind is NodeKind.SETUP
    assert first.color_to_move == Color.BLACK
    assert len(tree) == 2


def test_abandon_marks_or_detaches():
    tree = MoveTree()
    kept = tree.add_play(tree.root.handle, Point(3, 3), Color.BLACK)
    tree.abandon(kept.handle, keep=True, mark=True)
    assert kept.comment == UNDO_MARK
    assert tree.root.children == [kept.handle]

    dropped = tree.add_play(tree.root.handle, Point(4, 4), Color.BLACK)
    tree.abandon(dropped.handle, keep=False, mark=False)
    assert dropped.detached
    assert tree.root.children == [kept.handle]
    with pytest.raises(InvariantViolation):
        tree.add_play(dropped.handle, Point(5, 5), Color.WHITE)


def test_root_cannot_be_abandoned():
    tree = MoveTree()
    with pytest.raises(InvariantViolation):
        tree.abandon(tree.root.handle, keep=True, mark=True)


def test_main_line_follows_first_children():
    tree = MoveTree()
    a = tree.add_play(tree.root.handle, Point(3, 3), Color.BLACK)
    tree.add_play(tree.root.handle, Point(15, 15), Color.BLACK)
    b = tree.add_play(a.handle, Point(15, 3), Color.WHITE)

    assert [node.handle for node in tree.main_line()] == [0, a.handle, b.handle]
    assert len(tree.variations(tree.root.handle)) == 2


def test_unknown_handle_raises_key_error():
    tree = MoveTree()
    with pytest.raises(KeyError):
        tree.node(5)
