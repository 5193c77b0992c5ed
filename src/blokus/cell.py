"""
A cell on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

# Classic Blokus board is 20x20. Stored per game: smaller boards are allowed, larger ones are not.
BOARD_SIZE = 20
MAX_BOARD_SIZE = BOARD_SIZE

Vector = tuple[int, int]

EDGE_DIRECTIONS: tuple[Vector, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
CORNER_DIRECTIONS: tuple[Vector, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


@dataclass(frozen=True, order=True)
class Cell:
    x: int
    y: int

    @classmethod
    def from_pair(cls, pair: Sequence[int]) -> Cell:
        """Stored / transported as [x, y]"""
        x, y = pair
        return cls(int(x), int(y))

    def to_pair(self) -> list[int]:
        return [self.x, self.y]

    def shifted(self, dx: int, dy: int) -> Cell:
        return Cell(self.x + dx, self.y + dy)

    def is_within_bounds(self, size: int = BOARD_SIZE) -> bool:
        return (0 <= self.x < size) and (0 <= self.y < size)

    def edge_neighbours(self) -> list[Cell]:
        """N/S/E/W. May fall off the board, callers only use these for lookups."""
        return [self.shifted(dx, dy) for dx, dy in EDGE_DIRECTIONS]

    def corner_neighbours(self) -> list[Cell]:
        """The four diagonal cells."""
        return [self.shifted(dx, dy) for dx, dy in CORNER_DIRECTIONS]
