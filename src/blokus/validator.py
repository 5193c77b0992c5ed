"""
Legality of a single placement.

`validate` never raises for a well-typed proposal: it returns either Accepted (with the move that can be appended)
or a Rejection that names the first rule that failed.
"""

from dataclasses import dataclass
from typing import Iterable, Union

from src.blokus.board import Board, starting_corner
from src.blokus.cell import Cell
from src.blokus.moves import Move, PlacementProposal
from src.blokus.pieces import is_known_piece
from src.core.shared_types import Color, RejectionReason


@dataclass(frozen=True)
class Accepted:
    move: Move


@dataclass(frozen=True)
class Rejection:
    reason: RejectionReason


Decision = Union[Accepted, Rejection]


def validate(
    proposal: PlacementProposal,
    board: Board,
    turn_color: Color,
    is_first_move: bool,
    turn_number: int = 1,
) -> Decision:
    """
    Run the checks in order, the first one that fails decides the reason.
    ----

    1. the request itself: known piece, integer anchor, integer rotation and boolean flip
    2. it is this color's turn
    3. the color still has this piece in hand
    4. every cell is on the board
    5. no cell is taken already (by any color)
    6. no cell shares an edge with a cell of the same color (also on the first move)
    7. first move: a cell covers the color's starting corner.
       later moves: a cell touches a cell of the same color diagonally.
    """
    if not is_known_piece(proposal.piece_key):
        return Rejection(RejectionReason.INVALID_PIECE)

    if not _is_valid_anchor(proposal.anchor):
        return Rejection(RejectionReason.INVALID_POSITION)

    if not _is_valid_transform(proposal.rotation, proposal.flipped):
        return Rejection(RejectionReason.INVALID_TRANSFORM)

    if proposal.color != turn_color:
        return Rejection(RejectionReason.NOT_YOUR_TURN)

    if proposal.piece_key not in board.remaining_pieces(proposal.color):
        return Rejection(RejectionReason.PIECE_ALREADY_USED)

    cells = proposal.resolve_cells()

    if not all(cell.is_within_bounds(board.size) for cell in cells):
        return Rejection(RejectionReason.OUT_OF_BOUNDS)

    if any(board.is_occupied(cell) for cell in cells):
        return Rejection(RejectionReason.OVERLAP)

    own_cells = board.cells_of(proposal.color)
    if touches_edge(cells, own_cells):
        return Rejection(RejectionReason.CANNOT_TOUCH_SAME_COLOR_EDGE)

    if is_first_move:
        if starting_corner(proposal.color, board.size) not in cells:
            return Rejection(RejectionReason.FIRST_MOVE_MUST_COVER_CORNER)
    elif not touches_corner(cells, own_cells):
        return Rejection(RejectionReason.MUST_TOUCH_SAME_COLOR_CORNER)

    return Accepted(proposal.to_move(turn_number))


def touches_edge(cells: Iterable[Cell], own_cells: set[Cell]) -> bool:
    """Any cell shares a side with one of `own_cells`"""
    return any(
        neighbour in own_cells for cell in cells for neighbour in cell.edge_neighbours()
    )


def touches_corner(cells: Iterable[Cell], own_cells: set[Cell]) -> bool:
    """Any cell touches one of `own_cells` at a corner"""
    return any(
        neighbour in own_cells
        for cell in cells
        for neighbour in cell.corner_neighbours()
    )


# -- WELL-FORMEDNESS HELPERS ---
def _is_integer(value: object) -> bool:
    # bool is an int subclass, but True is not a coordinate
    return isinstance(value, int) and not isinstance(value, bool)


def _is_valid_anchor(anchor: object) -> bool:
    return isinstance(anchor, Cell) and _is_integer(anchor.x) and _is_integer(anchor.y)


def _is_valid_transform(rotation: object, flipped: object) -> bool:
    return _is_integer(rotation) and isinstance(flipped, bool)
