"""
Move records (the append-only log) and proposed placements.

A Move is what ends up in the log. A PlacementProposal is what a player asks for:
it only becomes a Move after the validator accepted it.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from src.blokus.cell import Cell
from src.blokus.geometry import transform, translate
from src.blokus.pieces import PIECES
from src.core.exceptions import GameStateError
from src.core.models import MoveModel
from src.core.shared_types import Color


class MoveKind(Enum):
    PLACEMENT = auto()
    PASS = auto()


@dataclass(frozen=True)
class Move:
    color: Color
    turn_number: int
    kind: MoveKind
    piece_key: Optional[str] = None
    rotation: Optional[int] = None
    flipped: Optional[bool] = None
    cells: tuple[Cell, ...] = ()

    @classmethod
    def placement(
        cls,
        color: Color,
        turn_number: int,
        piece_key: str,
        rotation: int,
        flipped: bool,
        cells: tuple[Cell, ...],
    ) -> Self:
        return cls(color, turn_number, MoveKind.PLACEMENT, piece_key, rotation, flipped, cells)

    @classmethod
    def pass_turn(cls, color: Color, turn_number: int) -> Self:
        return cls(color, turn_number, MoveKind.PASS)

    @property
    def passed(self) -> bool:
        return self.kind == MoveKind.PASS

    @classmethod
    def from_model(cls, model: MoveModel) -> Self:
        """Parse a stored move. Anything inconsistent means the stored log is broken."""
        try:
            color = Color(model.player_color)
        except ValueError as e:
            raise GameStateError(
                f"Unknown color in move log: {model.player_color!r}"
            ) from e

        if model.passed:
            return cls.pass_turn(color, model.turn_number)

        if model.piece_key is None or not model.cells:
            raise GameStateError(
                f"Placement at turn {model.turn_number} is missing its piece or cells."
            )
        return cls.placement(
            color=color,
            turn_number=model.turn_number,
            piece_key=model.piece_key,
            rotation=model.rotation or 0,
            flipped=bool(model.flipped),
            cells=tuple(Cell.from_pair(pair) for pair in model.cells),
        )

    def to_model(self) -> MoveModel:
        if self.passed:
            return MoveModel(
                player_color=str(self.color),
                turn_number=self.turn_number,
                passed=True,
            )
        return MoveModel(
            player_color=str(self.color),
            turn_number=self.turn_number,
            passed=False,
            piece_key=self.piece_key,
            rotation=self.rotation,
            flipped=self.flipped,
            cells=[cell.to_pair() for cell in self.cells],
        )


@dataclass(frozen=True)
class PlacementProposal:
    """A player's request to put a piece down. Types are not trusted: the validator checks them."""

    color: Color
    piece_key: str
    rotation: int = 0
    flipped: bool = False
    anchor: Optional[Cell] = None

    def resolve_cells(self) -> tuple[Cell, ...]:
        """Absolute cells on the board. Only call once the piece key and anchor are known to be valid."""
        # for the typechecker
        assert self.anchor is not None
        oriented = transform(PIECES[self.piece_key].cells, self.rotation, self.flipped)
        return translate(oriented, self.anchor.x, self.anchor.y)

    def to_move(self, turn_number: int) -> Move:
        return Move.placement(
            color=self.color,
            turn_number=turn_number,
            piece_key=self.piece_key,
            rotation=self.rotation % 4,
            flipped=self.flipped,
            cells=self.resolve_cells(),
        )
