"""Positions, grouping and rules for the Go board engine."""

from .errors import IllegalMove, InvariantViolation, MalformedFeedInput
from .grouping import (
    DIRECTIONS,
    Group,
    count_liberties,
    flood_fill,
    group_and_liberties,
    group_members,
    is_on_board,
    neighbors,
)
from .rules import QuickRules, Rules, SelfCaptureRules, rules_for_name
from .state import (
    MAX_BOARD_SIZE,
    Color,
    Point,
    PointLike,
    Position,
    as_point,
    derive_from_play,
    derive_from_setup,
)

__all__ = [
    "IllegalMove",
    "InvariantViolation",
    "MalformedFeedInput",
    "DIRECTIONS",
    "Group",
    "count_liberties",
    "flood_fill",
    "group_and_liberties",
    "group_members",
    "is_on_board",
    "neighbors",
    "QuickRules",
    "Rules",
    "SelfCaptureRules",
    "rules_for_name",
    "MAX_BOARD_SIZE",
    "Color",
    "Point",
    "PointLike",
    "Position",
    "as_point",
    "derive_from_play",
    "derive_from_setup",
]
