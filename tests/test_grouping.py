import pytest

from gowatcher.core import (
    Color,
    Point,
    Position,
    derive_from_setup,
    flood_fill,
    group_and_liberties,
    neighbors,
)


def setup(black=(), white=()) -> Position:
    return derive_from_setup(
        Position.empty(),
        black=[Point(*p) for p in black],
        white=[Point(*p) for p in white],
        black_to_move=True,
    )


def test_single_stone_liberties_depend_on_edges():
    position = setup(black=[(9, 9), (0, 9), (0, 0)])
    assert group_and_liberties(Point(9, 9), position, 19).liberties == 4
    assert group_and_liberties(Point(0, 9), position, 19).liberties == 3
    assert group_and_liberties(Point(0, 0), position, 19).liberties == 2


def test_empty_point_reports_one_liberty():
    group = group_and_liberties(Point(5, 5), Position.empty(), 19)
    assert group.color == Color.EMPTY
    assert group.size == 0
    assert group.liberties == 1


def test_shared_liberties_are_counted_once():
    position = setup(black=[(1, 1), (2, 1), (1, 2)])
    group = group_and_liberties(Point(2, 1), position, 19)
    assert group.members == frozenset({Point(1, 1), Point(2, 1), Point(1, 2)})
    assert group.liberties == 7


def test_opponent_stones_bound_the_group():
    position = setup(black=[(0, 0), (1, 0)], white=[(0, 1), (1, 1)])
    group = group_and_liberties(Point(0, 0), position, 19)
    assert group.size == 2
    assert group.liberties == 1


def test_flood_fill_visits_north_east_south_west():
    start = Point(1, 1)
    visited = flood_fill(
        Position.empty(),
        start,
        3,
        enter=lambda _p, _c: True,
        expand=lambda p, _c: p == start,
    )
    assert [p for p, _c in visited] == [Point(1, 1), Point(1, 2), Point(2, 1), Point(1, 0), Point(0, 1)]


def test_flood_fill_rejects_points_off_the_board():
    with pytest.raises(ValueError):
        group_and_liberties(Point(5, 5), Position.empty(), 5)


def test_neighbors_at_corner_and_centre():
    assert len(neighbors(Point(0, 0), 9)) == 2
    assert len(neighbors(Point(8, 4), 9)) == 3
    assert len(neighbors(Point(4, 4), 9)) == 4
