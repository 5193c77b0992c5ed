"""Final scores. Only meaningful once the game is finished."""

from typing import Sequence

from src.blokus.board import Board
from src.blokus.pieces import MONOMINO_KEY, PIECE_KEYS, PIECES
from src.core.shared_types import Color

COMPLETION_BONUS = 15
MONOMINO_LAST_BONUS = 5


def score(used_pieces: Sequence[str]) -> int:
    """
    Score for one color, given the pieces it placed (in the order it placed them).
    ----

    * minus one point per square still in hand
    * +15 if every piece was placed
    * another +5 if, on top of that, the one-square piece was placed last
    """
    used = set(used_pieces)
    remaining = [key for key in PIECE_KEYS if key not in used]
    points = -sum(PIECES[key].points for key in remaining)
    if not remaining:
        points += COMPLETION_BONUS
        if used_pieces[-1] == MONOMINO_KEY:
            points += MONOMINO_LAST_BONUS
    return points


def score_board(board: Board, colors: Sequence[Color]) -> dict[Color, int]:
    return {color: score(board.used_pieces.get(color, [])) for color in colors}
