"""
Geometry of pieces: mirroring, rotating, normalizing and translating cell sets.

Order of operations in `transform` is fixed: flip first, then rotate, then normalize.
Rotating a flipped shape is not the same as flipping a rotated one,
so stored moves only replay correctly if this order never changes.
"""

from typing import Iterable

from src.blokus.cell import Cell


def rotate_cell(cell: Cell, times: int) -> Cell:
    """Rotate 90 degrees clockwise around the origin, `times` times. Any integer is taken mod 4."""
    x, y = cell.x, cell.y
    # python's modulo is never negative, so -1 means three clockwise turns
    for _ in range(times % 4):
        x, y = y, -x
    return Cell(x, y)


def flip_cell(cell: Cell) -> Cell:
    """Mirror in the y-axis"""
    return Cell(-cell.x, cell.y)


def normalize(cells: Iterable[Cell]) -> tuple[Cell, ...]:
    """Shift so that the smallest x and the smallest y both become 0."""
    cells = tuple(cells)
    if not cells:
        return cells
    min_x = min(cell.x for cell in cells)
    min_y = min(cell.y for cell in cells)
    return tuple(cell.shifted(-min_x, -min_y) for cell in cells)


def transform(
    cells: Iterable[Cell], rotation: int = 0, flipped: bool = False
) -> tuple[Cell, ...]:
    """
    Orientation of a piece as it will be placed.
    ----

    1. mirror (if flipped)
    2. rotate `rotation` quarter turns clockwise
    3. normalize

    NOTE: Different (rotation, flipped) pairs can give the same cells for symmetric pieces. That is fine.
    """
    oriented = [flip_cell(cell) if flipped else cell for cell in cells]
    oriented = [rotate_cell(cell, rotation) for cell in oriented]
    return normalize(oriented)


def translate(cells: Iterable[Cell], dx: int, dy: int) -> tuple[Cell, ...]:
    """Move to an anchor on the board. Result can be off the board: the validator catches that."""
    return tuple(cell.shifted(dx, dy) for cell in cells)
