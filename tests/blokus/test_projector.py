"""Unit tests for src/blokus/projector.py"""

from src.blokus.cell import Cell
from src.blokus.game import Game
from src.blokus.pieces import PIECE_KEYS
from src.blokus.projector import project, snapshot
from src.core.shared_types import Color, Status


def played_model():
    game = Game.new_game(board_size=6)
    game.place_piece(Color.BLUE, "I2", anchor=Cell(0, 0))
    game.place_piece(Color.YELLOW, "I1", anchor=Cell(5, 0))
    game.pass_turn(Color.RED)
    return game.to_model()


def test_snapshot_contents() -> None:
    result = project(played_model())

    assert result.board_size == 6
    assert result.status == Status.ACTIVE
    assert result.next_player_index == 3
    assert result.current_color == Color.GREEN
    assert result.grid[0] == [Color.BLUE, Color.BLUE, None, None, None, Color.YELLOW]
    assert all(cell is None for row in result.grid[1:] for cell in row)
    assert result.cells[Color.BLUE] == [Cell(0, 0), Cell(1, 0)]
    assert result.cells[Color.RED] == []
    assert result.occupied_count == 3
    assert result.remaining[Color.RED] == list(PIECE_KEYS)
    assert len(result.remaining[Color.BLUE]) == 20
    assert result.scores == {}


def test_projection_is_idempotent() -> None:
    model = played_model()
    assert project(model) == project(model)


def test_finished_snapshot_has_scores() -> None:
    game = Game.new_game(colors=[Color.BLUE, Color.YELLOW])
    game.place_piece(Color.BLUE, "I5", anchor=Cell(0, 0))
    game.pass_turn(Color.YELLOW)
    game.pass_turn(Color.BLUE)

    result = snapshot(game)
    assert result.status == Status.FINISHED
    assert result.scores == {Color.BLUE: -84, Color.YELLOW: -89}
