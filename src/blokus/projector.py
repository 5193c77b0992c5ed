"""Replay a stored game into the snapshot callers get to see."""

from dataclasses import dataclass, field
from typing import Optional

from src.blokus.cell import Cell
from src.blokus.game import Game
from src.core.models import GameModel
from src.core.shared_types import Color, Status


@dataclass(frozen=True)
class GameSnapshot:
    board_size: int
    status: Status
    next_player_index: int
    current_color: Color
    grid: list[list[Optional[Color]]]
    cells: dict[Color, list[Cell]]
    remaining: dict[Color, list[str]]
    scores: dict[Color, int] = field(default_factory=dict)

    @property
    def occupied_count(self) -> int:
        return sum(len(cells) for cells in self.cells.values())


def snapshot(game: Game) -> GameSnapshot:
    colors = game.turn_order
    return GameSnapshot(
        board_size=game.board.size,
        status=game.status,
        next_player_index=game.next_player_index,
        current_color=game.current_player.color,
        grid=game.board.to_grid(),
        cells={color: sorted(game.board.cells_of(color)) for color in colors},
        remaining={color: game.remaining_pieces(color) for color in colors},
        scores=game.scores(),
    )


def project(model: GameModel) -> GameSnapshot:
    """Same model in, same snapshot out."""
    return snapshot(Game.from_model(model))
