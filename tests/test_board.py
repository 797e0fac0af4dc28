import pytest

from gowatcher.board import Board, BoardConfig, clamp_handicap
from gowatcher.core import Color, IllegalMove, Point
from gowatcher.tree import UNDO_MARK


def test_new_board_is_empty_with_black_to_move():
    board = Board()
    assert board.board_size == 19
    assert board.cursor == 0
    assert board.is_black_turn()
    assert not board.is_game_over
    assert board.game_info.game_name == "White vs. Black"
    assert board.game_info.komi == 5.5


def test_board_size_is_bounded():
    with pytest.raises(ValueError):
        Board(BoardConfig(board_size=20))
    with pytest.raises(ValueError):
        Board(BoardConfig(board_size=0))


def test_play_alternates_colours():
    board = Board()
    assert board.play_at(3, 3)
    assert board.is_white_turn()
    assert board.play_at(15, 15)
    position = board.current_position()
    assert position.color_at(Point(3, 3)) == Color.BLACK
    assert position.color_at(Point(15, 15)) == Color.WHITE
    assert board.cursor == 2
    assert [node.color for node in board.tree.main_line()[1:]] == [Color.BLACK, Color.WHITE]


def test_off_board_move_is_illegal():
    board = Board(BoardConfig(board_size=9))
    with pytest.raises(IllegalMove) as excinfo:
        board.play_at(9, 0)
    assert excinfo.value.reason == "off board"
    assert board.cursor == 0


def test_rejected_move_leaves_board_unchanged():
    board = Board()
    board.play_at(3, 3)
    before = list(board.positions())
    line = board.line
    with pytest.raises(IllegalMove):
        board.play_at(3, 3)
    assert list(board.positions()) == before
    assert board.line == line
    assert board.is_white_turn()
    assert len(board.tree) == 2


def test_capture_updates_prisoners_and_undo_restores_them():
    board = Board()
    board.set_up(white=[(0, 0)], black=[(1, 0)], black_to_move=True)
    before = board.current_position()

    board.play_at(0, 1)
    assert not board.current_position().stone_at(Point(0, 0))
    assert board.prisoners(Color.BLACK) == 1

    assert board.undo()
    assert board.current_position() == before
    assert board.cursor == 1
    assert board.prisoners(Color.BLACK) == 0


def test_undo_keeps_a_marked_variation_by_default():
    board = Board()
    board.play_at(3, 3)
    undone = board.current_node
    board.undo()

    assert undone.comment.startswith(UNDO_MARK)
    assert board.tree.variations(board.tree.root.handle) == [undone]
    board.play_at(4, 4)
    assert len(board.tree.variations(board.tree.root.handle)) == 2


def test_undo_can_detach_the_node():
    board = Board(BoardConfig(keep_undone_variations=False, mark_undone=False))
    board.play_at(3, 3)
    undone = board.current_node
    board.undo()

    assert undone.detached
    assert undone.comment == ""
    assert board.tree.root.children == []


def test_undo_at_root_does_nothing():
    board = Board()
    assert not board.undo()
    assert board.cursor == 0


def test_returned_positions_are_copies():
    board = Board()
    board.play_at(0, 0)
    position = board.current_position()
    rows = position.black_rows()
    rows[0] = 0
    assert board.current_position().black_at(Point(0, 0))
    assert position is not board.current_position()


def test_setup_calls_coalesce_into_one_node():
    board = Board()
    board.set_up(black=[(3, 3)])
    board.set_up(white=[(4, 4)], black_to_move=False)

    assert board.cursor == 1
    assert len(board.tree) == 2
    node = board.current_node
    assert node.is_setup
    assert node.add_black == [Point(3, 3)]
    assert node.add_white == [Point(4, 4)]
    position = board.current_position()
    assert position.color_at(Point(3, 3)) == Color.BLACK
    assert position.color_at(Point(4, 4)) == Color.WHITE
    assert board.is_white_turn()


def test_setup_after_a_move_creates_a_new_node():
    board = Board()
    board.play_at(3, 3)
    board.set_up(empty=[(3, 3)], black_to_move=False)

    assert board.cursor == 2
    assert not board.current_position().stone_at(Point(3, 3))
    assert board.current_node.move_number == 1


def test_setup_rejects_points_off_the_board():
    board = Board(BoardConfig(board_size=9))
    with pytest.raises(ValueError):
        board.set_up(black=[(9, 9)])
    assert board.cursor == 0


def test_resign_awards_the_player_not_to_move():
    board = Board()
    board.resign()
    assert board.game_info.result == "W+R"

    board = Board()
    board.play_at(3, 3)
    board.resign()
    assert board.game_info.result == "B+R"
    assert board.is_game_over


def test_moves_after_resignation_are_ignored():
    board = Board()
    board.play_at(3, 3)
    board.resign()

    assert not board.play_at(4, 4)
    assert not board.play_pass()
    assert not board.undo()
    board.set_up(black=[(5, 5)])
    assert board.cursor == 1
    assert not board.current_position().stone_at(Point(4, 4))


def test_handicap_stones_go_on_the_root():
    board = Board()
    board.new_game(handicap=2)
    assert board.handicap_left == 2

    board.play_at(3, 3)
    assert board.is_black_turn()
    board.play_at(15, 15)

    assert board.cursor == 0
    assert board.handicap_left == 0
    assert board.tree.root.add_black == [Point(3, 3), Point(15, 15)]
    assert board.is_white_turn()
    board.play_at(3, 15)
    assert board.current_node.color == Color.WHITE


def test_clamp_handicap():
    assert clamp_handicap(1) == 0
    assert clamp_handicap(0) == 0
    assert clamp_handicap(4) == 4
    assert clamp_handicap(12) == 9


def test_group_queries_use_the_current_position():
    board = Board()
    board.play_at(0, 0)
    board.play_at(5, 5)
    board.play_at(1, 0)
    assert board.count_liberties((0, 0)) == 3
    assert board.group_at(Point(1, 0)).members == frozenset({Point(0, 0), Point(1, 0)})
    assert "X" in str(board)


def test_history_hands_out_copies():
    board = Board()
    board.play_at(3, 3)
    for position in board.history():
        with pytest.raises(AttributeError):
            position.black_to_move = True
        position._black.flags.writeable = True
        position._black[:] = 0
    assert board.is_white_turn()
    assert board.current_position().black_at(Point(3, 3))


def test_unplaced_handicap_is_dropped_once_play_leaves_the_root():
    board = Board()
    board.new_game(handicap=3)
    board.play_at(3, 3)
    board.play_pass()

    assert board.handicap_left == 0
    assert board.game_info.handicap == 1
    board.play_at(15, 15)
    assert board.cursor == 2
    assert board.current_node.color == Color.WHITE


def test_place_handicap_sets_the_root_in_one_step():
    board = Board()
    board.place_handicap([(3, 3), (15, 15), (3, 15)])

    assert board.game_info.handicap == 3
    assert board.is_white_turn()
    assert board.cursor == 0
    assert board.current_position().stone_count(Color.BLACK) == 3
    with pytest.raises(ValueError):
        board.place_handicap([(9, 9)])
