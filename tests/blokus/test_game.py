"""Unit tests for /src/blokus/game.py"""

import random

import pytest

from src.blokus.board import Board
from src.blokus.cell import MAX_BOARD_SIZE, Cell
from src.blokus.game import Game, Player
from src.blokus.pieces import PIECE_KEYS, TOTAL_POINTS
from src.core.exceptions import (
    GameFinishedError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
)
from src.core.models import GameModel, MoveModel, PlayerModel
from src.core.shared_types import Color, RejectionReason, Status

FOUR_PLAYERS = [
    PlayerModel(color="blue", name="Blue", order_index=0),
    PlayerModel(color="yellow", name="Yellow", order_index=1),
    PlayerModel(color="red", name="Red", order_index=2),
    PlayerModel(color="green", name="Green", order_index=3),
]


def passes(first_turn: int, *colors: str) -> list[MoveModel]:
    return [
        MoveModel(player_color=color, turn_number=first_turn + i, passed=True)
        for i, color in enumerate(colors)
    ]


@pytest.fixture
def new_game() -> Game:
    return Game.new_game()


@pytest.fixture
def opened_game() -> Game:
    """Every color put its monomino in its own corner. Blue to move."""
    game = Game.new_game()
    game.place_piece(Color.BLUE, "I1", anchor=Cell(0, 0))
    game.place_piece(Color.YELLOW, "I1", anchor=Cell(19, 0))
    game.place_piece(Color.RED, "I1", anchor=Cell(0, 19))
    game.place_piece(Color.GREEN, "I1", anchor=Cell(19, 19))
    return game


def pass_round(game: Game) -> None:
    for color in game.turn_order:
        game.pass_turn(color)


# -- CREATION LOGIC --
def test_new_game_defaults(new_game: Game) -> None:
    assert new_game.turn_order == [Color.BLUE, Color.YELLOW, Color.RED, Color.GREEN]
    assert [player.name for player in new_game.players] == [
        "Blue",
        "Yellow",
        "Red",
        "Green",
    ]
    assert [player.order_index for player in new_game.players] == [0, 1, 2, 3]
    assert new_game.status == Status.ACTIVE
    assert new_game.next_player_index == 0
    assert new_game.moves == []
    assert new_game.board.size == 20


def test_new_game_with_chosen_colors_and_names() -> None:
    game = Game.new_game(
        colors=[Color.RED, Color.BLUE], names={Color.RED: "Ada"}, board_size=14
    )
    assert game.players == [
        Player(Color.RED, "Ada", 0),
        Player(Color.BLUE, "Blue", 1),
    ]
    assert game.current_player.color == Color.RED
    assert game.board.size == 14


def test_new_game_with_duplicate_colors() -> None:
    with pytest.raises(GameStateError):
        Game.new_game(colors=[Color.RED, Color.RED])


@pytest.mark.parametrize("board_size", [0, MAX_BOARD_SIZE + 1, 3000])
def test_new_game_with_invalid_board_size(board_size: int) -> None:
    with pytest.raises(GameStateError):
        Game.new_game(board_size=board_size)


def test_new_game_on_largest_board() -> None:
    assert Game.new_game(board_size=MAX_BOARD_SIZE).board.size == MAX_BOARD_SIZE


def test_model_roundtrip(opened_game: Game) -> None:
    opened_game.pass_turn(Color.BLUE)
    model = opened_game.to_model()
    assert Game.from_model(model).to_model() == model


def test_from_model_builds_domain_objects() -> None:
    model = GameModel(
        board_size=20,
        status="active",
        next_player_index=1,
        players=FOUR_PLAYERS,
        moves=[
            MoveModel(
                player_color="blue",
                turn_number=1,
                passed=False,
                piece_key="I2",
                rotation=0,
                flipped=False,
                cells=[[0, 0], [1, 0]],
            )
        ],
    )
    game = Game.from_model(model)
    assert isinstance(game.board, Board)
    assert game.board.color_at(Cell(1, 0)) == Color.BLUE
    assert game.current_player == Player(Color.YELLOW, "Yellow", 1)
    assert game.status == Status.ACTIVE


def test_from_model_players_sorted_by_order_index() -> None:
    model = GameModel(
        board_size=20,
        status="active",
        next_player_index=0,
        players=list(reversed(FOUR_PLAYERS)),
    )
    assert Game.from_model(model).turn_order == [
        Color.BLUE,
        Color.YELLOW,
        Color.RED,
        Color.GREEN,
    ]


@pytest.mark.parametrize(
    "model",
    [
        # unknown status
        GameModel(board_size=20, status="paused", next_player_index=0, players=FOUR_PLAYERS),
        # no players
        GameModel(board_size=20, status="active", next_player_index=0, players=[]),
        # turn pointer does not match the number of moves
        GameModel(
            board_size=20,
            status="active",
            next_player_index=0,
            players=FOUR_PLAYERS,
            moves=passes(1, "blue"),
        ),
        # turn numbers repeat
        GameModel(
            board_size=20,
            status="active",
            next_player_index=2,
            players=FOUR_PLAYERS,
            moves=passes(1, "blue") + passes(1, "yellow"),
        ),
        # gap in player order
        GameModel(
            board_size=20,
            status="active",
            next_player_index=0,
            players=[
                PlayerModel(color="blue", name="Blue", order_index=0),
                PlayerModel(color="red", name="Red", order_index=2),
            ],
        ),
        # unknown color
        GameModel(
            board_size=20,
            status="active",
            next_player_index=0,
            players=[PlayerModel(color="purple", name="Purple", order_index=0)],
        ),
    ],
)
def test_from_broken_model(model: GameModel) -> None:
    """Broken records are faults: GameStateError, never a rule rejection."""
    with pytest.raises(GameStateError):
        Game.from_model(model)


# -- TURN ORDER --
def test_placement_advances_turn(new_game: Game) -> None:
    move = new_game.place_piece(Color.BLUE, "I2", anchor=Cell(0, 0))
    assert new_game.next_player_index == 1
    assert new_game.current_player.color == Color.YELLOW
    assert new_game.moves == [move]
    assert move.turn_number == 1
    assert new_game.board.cells_of(Color.BLUE) == {Cell(0, 0), Cell(1, 0)}


def test_pass_advances_turn(new_game: Game) -> None:
    move = new_game.pass_turn(Color.BLUE)
    assert move.passed
    assert new_game.next_player_index == 1
    assert new_game.board.occupancy == {}


def test_turn_wraps_around(opened_game: Game) -> None:
    assert opened_game.next_player_index == 0
    assert [move.turn_number for move in opened_game.moves] == [1, 2, 3, 4]
    assert opened_game.status == Status.ACTIVE


def test_not_your_turn_to_place(new_game: Game) -> None:
    with pytest.raises(NotYourTurnError) as exc_info:
        new_game.place_piece(Color.YELLOW, "I1", anchor=Cell(19, 0))
    assert exc_info.value.reason == RejectionReason.NOT_YOUR_TURN
    assert new_game.moves == []
    assert new_game.next_player_index == 0


def test_not_your_turn_to_pass(new_game: Game) -> None:
    with pytest.raises(NotYourTurnError):
        new_game.pass_turn(Color.GREEN)
    assert new_game.moves == []


def test_rejected_move_changes_nothing(opened_game: Game) -> None:
    before = opened_game.to_model()
    with pytest.raises(IllegalMoveError) as exc_info:
        # edge contact with blue's monomino at (0, 0)
        opened_game.place_piece(Color.BLUE, "I2", anchor=Cell(1, 0))
    assert exc_info.value.reason == RejectionReason.CANNOT_TOUCH_SAME_COLOR_EDGE
    assert exc_info.value.code == "cannot_touch_same_color_edge"
    assert opened_game.to_model() == before


def test_piece_can_only_be_used_once(opened_game: Game) -> None:
    """(1, 1) would be a legal spot, but I1 is no longer in blue's hand."""
    before = opened_game.to_model()
    with pytest.raises(IllegalMoveError) as exc_info:
        opened_game.place_piece(Color.BLUE, "I1", anchor=Cell(1, 1))
    assert exc_info.value.reason == RejectionReason.PIECE_ALREADY_USED
    assert "I1" not in opened_game.remaining_pieces(Color.BLUE)
    assert opened_game.to_model() == before


def test_second_move_uses_corner_rule(opened_game: Game) -> None:
    opened_game.place_piece(Color.BLUE, "I2", anchor=Cell(1, 1))
    with pytest.raises(IllegalMoveError) as exc_info:
        opened_game.place_piece(Color.YELLOW, "I2", anchor=Cell(10, 10))
    assert exc_info.value.reason == RejectionReason.MUST_TOUCH_SAME_COLOR_CORNER


def test_remaining_pieces(opened_game: Game) -> None:
    opened_game.place_piece(Color.BLUE, "F5", anchor=Cell(0, 1))
    assert opened_game.remaining_pieces(Color.BLUE) == [
        key for key in PIECE_KEYS if key not in ("I1", "F5")
    ]


# -- END OF GAME --
def test_everyone_passes_ends_the_game(new_game: Game) -> None:
    pass_round(new_game)
    assert new_game.status == Status.FINISHED
    assert new_game.is_finished


def test_three_passes_do_not_end_a_four_player_game(opened_game: Game) -> None:
    opened_game.place_piece(Color.BLUE, "I2", anchor=Cell(1, 1))
    opened_game.pass_turn(Color.YELLOW)
    opened_game.pass_turn(Color.RED)
    opened_game.pass_turn(Color.GREEN)
    assert opened_game.status == Status.ACTIVE

    opened_game.pass_turn(Color.BLUE)
    assert opened_game.status == Status.FINISHED


def test_finished_regardless_of_history() -> None:
    """Only the trailing passes count, whatever came before."""
    moves = [
        MoveModel(
            player_color="blue",
            turn_number=1,
            passed=False,
            piece_key="I1",
            rotation=0,
            flipped=False,
            cells=[[0, 0]],
        ),
        *passes(2, "yellow", "red", "green", "blue"),
    ]
    model = GameModel(
        board_size=20,
        status="active",
        next_player_index=1,
        players=FOUR_PLAYERS,
        moves=moves,
    )
    assert Game.from_model(model).status == Status.FINISHED


def test_two_player_game_ends_after_two_passes() -> None:
    game = Game.new_game(colors=[Color.BLUE, Color.GREEN])
    game.pass_turn(Color.BLUE)
    game.pass_turn(Color.GREEN)
    assert game.is_finished


def test_no_moves_after_finish(new_game: Game) -> None:
    pass_round(new_game)
    with pytest.raises(GameFinishedError) as exc_info:
        new_game.place_piece(Color.BLUE, "I1", anchor=Cell(0, 0))
    assert exc_info.value.reason == RejectionReason.GAME_FINISHED
    with pytest.raises(GameFinishedError):
        new_game.pass_turn(Color.BLUE)
    assert len(new_game.moves) == 4


# -- SCORES --
def test_no_scores_while_active(opened_game: Game) -> None:
    assert opened_game.scores() == {}


def test_scores_once_finished(opened_game: Game) -> None:
    opened_game.place_piece(Color.BLUE, "I2", anchor=Cell(1, 1))
    opened_game.pass_turn(Color.YELLOW)
    opened_game.pass_turn(Color.RED)
    opened_game.pass_turn(Color.GREEN)
    opened_game.pass_turn(Color.BLUE)
    assert opened_game.scores() == {
        Color.BLUE: -(TOTAL_POINTS - 3),
        Color.YELLOW: -(TOTAL_POINTS - 1),
        Color.RED: -(TOTAL_POINTS - 1),
        Color.GREEN: -(TOTAL_POINTS - 1),
    }


# -- INVARIANTS --
@pytest.mark.parametrize("seed", range(5))
def test_accepted_moves_never_overlap(seed: int) -> None:
    """Throw random placements at the game. Whatever gets accepted, no cell ever has two owners."""
    rng = random.Random(seed)
    game = Game.new_game()
    failures = 0

    for _ in range(3000):
        if game.is_finished:
            break
        color = game.current_player.color
        remaining = game.remaining_pieces(color)
        if not remaining:
            game.pass_turn(color)
            continue
        try:
            game.place_piece(
                color,
                rng.choice(remaining),
                rotation=rng.randrange(4),
                flipped=rng.random() < 0.5,
                anchor=Cell(rng.randrange(-2, 20), rng.randrange(-2, 20)),
            )
            failures = 0
        except IllegalMoveError:
            failures += 1
            if failures > 60:
                game.pass_turn(color)
                failures = 0

    placed_cells = [cell for move in game.moves for cell in move.cells]
    assert len(placed_cells) == len(set(placed_cells)) == len(game.board.occupancy)
    # the replay sees exactly the same board
    assert Game.from_model(game.to_model()).board == game.board
