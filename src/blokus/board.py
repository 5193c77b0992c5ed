"""
The Board is never stored. It is rebuilt from the move log every time (see `Board.project`),
so replaying the same log always gives the same occupancy.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Self, Sequence

from src.blokus.cell import BOARD_SIZE, Cell
from src.blokus.moves import Move
from src.blokus.pieces import PIECE_KEYS
from src.core.exceptions import GameStateError
from src.core.shared_types import Color


def starting_corner(color: Color, size: int = BOARD_SIZE) -> Cell:
    """Each color opens from its own corner of the board."""
    far = size - 1
    corners = {
        Color.BLUE: Cell(0, 0),
        Color.YELLOW: Cell(far, 0),
        Color.RED: Cell(0, far),
        Color.GREEN: Cell(far, far),
    }
    return corners[color]


@dataclass
class Board:
    size: int
    occupancy: dict[Cell, Color] = field(default_factory=dict)
    cells_by_color: dict[Color, set[Cell]] = field(default_factory=dict)
    # insertion ordered: the last entry is the last piece the color placed
    used_pieces: dict[Color, list[str]] = field(default_factory=dict)
    last_acted_index: Optional[int] = None

    @classmethod
    def empty(cls, size: int, colors: Iterable[Color]) -> Self:
        colors = list(colors)
        return cls(
            size=size,
            cells_by_color={color: set() for color in colors},
            used_pieces={color: [] for color in colors},
        )

    @classmethod
    def project(
        cls, moves: Iterable[Move], size: int, turn_order: Sequence[Color]
    ) -> Self:
        """
        Fold the move log into a board.
        ----

        * moves are applied in turn-number order, whatever order they are handed in
        * a placement adds its cells to the occupancy and its piece to the color's used pieces
        * a pass adds nothing, but still counts as the color having acted
        """
        board = cls.empty(size, turn_order)
        for move in sorted(moves, key=lambda m: m.turn_number):
            board.apply(move, turn_order)
        return board

    def apply(self, move: Move, turn_order: Sequence[Color]) -> None:
        """Single step of the fold. Raises GameStateError if the log contradicts itself."""
        if move.color not in turn_order:
            raise GameStateError(
                f"Move at turn {move.turn_number} is by {move.color}, who is not playing this game."
            )

        if not move.passed:
            # for the type checker
            assert move.piece_key is not None
            if move.piece_key in self.used_pieces[move.color]:
                raise GameStateError(
                    f"{move.color} placed {move.piece_key} twice (turn {move.turn_number})."
                )
            for cell in move.cells:
                if cell in self.occupancy:
                    raise GameStateError(
                        f"Cell {cell.to_pair()} claimed twice (turn {move.turn_number})."
                    )
                self.occupancy[cell] = move.color
                self.cells_by_color[move.color].add(cell)
            self.used_pieces[move.color].append(move.piece_key)

        self.last_acted_index = turn_order.index(move.color)

    def is_occupied(self, cell: Cell) -> bool:
        return cell in self.occupancy

    def color_at(self, cell: Cell) -> Optional[Color]:
        return self.occupancy.get(cell)

    def cells_of(self, color: Color) -> set[Cell]:
        return self.cells_by_color.get(color, set())

    def has_placed(self, color: Color) -> bool:
        return bool(self.used_pieces.get(color))

    def remaining_pieces(self, color: Color) -> list[str]:
        """Catalog order, minus what this color already put down."""
        used = set(self.used_pieces.get(color, []))
        return [key for key in PIECE_KEYS if key not in used]

    def to_grid(self) -> list[list[Optional[Color]]]:
        """Row by row (y), then column (x). None for an empty cell."""
        return [
            [self.color_at(Cell(x, y)) for x in range(self.size)]
            for y in range(self.size)
        ]
