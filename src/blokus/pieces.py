"""Defines the catalog of playable pieces"""

from dataclasses import dataclass, field
from typing import Self

from src.blokus.cell import Cell

# Canonical shapes, each normalized so the bounding box starts at (0, 0).
# Keys: letter for the shape family, digit for the number of squares.
PIECE_SHAPES: dict[str, tuple[tuple[int, int], ...]] = {
    "I1": ((0, 0),),
    "I2": ((0, 0), (1, 0)),
    "I3": ((0, 0), (1, 0), (2, 0)),
    "I4": ((0, 0), (1, 0), (2, 0), (3, 0)),
    "I5": ((0, 0), (1, 0), (2, 0), (3, 0), (4, 0)),
    "V3": ((0, 0), (0, 1), (1, 0)),
    "L4": ((0, 0), (0, 1), (0, 2), (1, 0)),
    "Z4": ((0, 0), (1, 0), (1, 1), (2, 1)),
    "O4": ((0, 0), (1, 0), (0, 1), (1, 1)),
    "T5": ((0, 0), (1, 0), (2, 0), (1, 1), (1, 2)),
    "L5": ((0, 0), (0, 1), (0, 2), (0, 3), (1, 0)),
    "Y5": ((0, 0), (1, 0), (2, 0), (3, 0), (1, 1)),
    "N5": ((0, 0), (1, 0), (1, 1), (2, 1), (3, 1)),
    "Z5": ((0, 0), (1, 0), (2, 0), (2, 1), (3, 1)),
    "U5": ((0, 0), (2, 0), (0, 1), (1, 1), (2, 1)),
    "V5": ((0, 0), (0, 1), (0, 2), (1, 0), (2, 0)),
    "W5": ((0, 0), (1, 0), (1, 1), (2, 1), (2, 2)),
    "X5": ((1, 0), (0, 1), (1, 1), (2, 1), (1, 2)),
    "P5": ((0, 0), (1, 0), (0, 1), (1, 1), (0, 2)),
    "F5": ((1, 0), (0, 1), (1, 1), (1, 2), (2, 2)),
    "T4": ((0, 0), (1, 0), (2, 0), (1, 1)),  # extra tetromino
}


@dataclass(frozen=True)
class Piece:
    key: str
    cells: tuple[Cell, ...]
    points: int = field(init=False)

    def __post_init__(self) -> None:
        # frozen dataclass: go through object.__setattr__
        object.__setattr__(self, "points", len(self.cells))

    @classmethod
    def from_shape(cls, key: str, shape: tuple[tuple[int, int], ...]) -> Self:
        return cls(key, tuple(Cell(x, y) for x, y in shape))


PIECES: dict[str, Piece] = {
    key: Piece.from_shape(key, shape) for key, shape in PIECE_SHAPES.items()
}

PIECE_KEYS: tuple[str, ...] = tuple(PIECES)

# The single one-square piece. Placing it last earns the extra bonus.
MONOMINO_KEY: str = min(PIECES.values(), key=lambda piece: piece.points).key

TOTAL_POINTS: int = sum(piece.points for piece in PIECES.values())


def is_known_piece(key: object) -> bool:
    return isinstance(key, str) and key in PIECES


def piece_catalog() -> dict[str, list[list[int]]]:
    """Untransformed shapes, for clients that draw the pieces."""
    return {
        key: [cell.to_pair() for cell in piece.cells] for key, piece in PIECES.items()
    }
