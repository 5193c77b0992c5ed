"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    ACTIVE = "active"
    FINISHED = "finished"


class Color(StrEnum):
    """Closed set of player colors. Definition order is the default turn order."""

    BLUE = "blue"
    YELLOW = "yellow"
    RED = "red"
    GREEN = "green"


class RejectionReason(StrEnum):
    """Machine-readable codes for a move that was refused. Values go over the wire unchanged."""

    INVALID_PIECE = "invalid_piece"
    INVALID_POSITION = "invalid_position"
    INVALID_TRANSFORM = "invalid_transform"
    NOT_YOUR_TURN = "not_your_turn"
    PIECE_ALREADY_USED = "piece_already_used"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"
    CANNOT_TOUCH_SAME_COLOR_EDGE = "cannot_touch_same_color_edge"
    FIRST_MOVE_MUST_COVER_CORNER = "first_move_must_cover_corner"
    MUST_TOUCH_SAME_COLOR_CORNER = "must_touch_same_color_corner"
    GAME_FINISHED = "game_finished"


DEFAULT_COLORS: tuple[Color, ...] = tuple(Color)
