"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.

State is rebuilt from the move log on every request (`from_model`), a move is checked, appended,
and the turn pointer moves on (`place_piece` / `pass_turn`), and the result is handed back (`to_model`).
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Self

from src.blokus.board import Board
from src.blokus.cell import BOARD_SIZE, MAX_BOARD_SIZE, Cell
from src.blokus.moves import Move, PlacementProposal
from src.blokus.scoring import score_board
from src.blokus.validator import Rejection, validate
from src.core.exceptions import (
    GameFinishedError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
)
from src.core.models import GameModel, MoveModel, PlayerModel
from src.core.shared_types import DEFAULT_COLORS, Color, RejectionReason, Status


@dataclass(frozen=True)
class Player:
    color: Color
    name: str
    order_index: int

    @classmethod
    def from_model(cls, model: PlayerModel) -> Self:
        try:
            color = Color(model.color)
        except ValueError as e:
            raise GameStateError(f"Unknown player color: {model.color!r}") from e
        return cls(color, model.name, model.order_index)

    def to_model(self) -> PlayerModel:
        return PlayerModel(
            color=str(self.color), name=self.name, order_index=self.order_index
        )


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    players: list[Player]
    moves: list[Move]
    next_player_index: int
    status: Status

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Replay a stored game.
        ----

        Anything in the record that could not have been produced by this class raises GameStateError:
        unknown status/colors, a broken player order, turn numbers that do not increase,
        or a turn pointer that does not match the number of moves played.
        """
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        players = cls._players_from_model(model.players)
        turn_order = [player.color for player in players]

        moves = [Move.from_model(move) for move in model.moves]
        moves.sort(key=lambda move: move.turn_number)
        cls._assert_increasing_turn_numbers(moves)

        expected_index = len(moves) % len(players)
        if model.next_player_index != expected_index:
            raise GameStateError(
                f"Stored turn pointer {model.next_player_index} does not match the {len(moves)} moves played (expected {expected_index})."
            )

        board = Board.project(moves, model.board_size, turn_order)
        game = cls(
            board=board,
            players=players,
            moves=moves,
            next_player_index=model.next_player_index,
            status=Status(model.status),
        )
        game._update_game_status()
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            board_size=self.board.size,
            status=str(self.status),
            next_player_index=self.next_player_index,
            players=[player.to_model() for player in self.players],
            moves=[move.to_model() for move in self.moves],
        )

    @classmethod
    def new_game(
        cls,
        colors: Optional[Iterable[Color]] = None,
        names: Optional[Mapping[Color, str]] = None,
        board_size: int = BOARD_SIZE,
    ) -> Self:
        """Start a game for the given colors (in turn order). Defaults to all four colors."""
        colors = list(colors) if colors else list(DEFAULT_COLORS)
        names = names or {}

        if len(set(colors)) != len(colors):
            raise GameStateError(
                f"Cannot create new game. Colors must be unique: {','.join(colors)}."
            )
        if not 1 <= board_size <= MAX_BOARD_SIZE:
            raise GameStateError(
                f"Cannot create new game. Board size must be between 1 and {MAX_BOARD_SIZE}, got {board_size}."
            )

        players = [
            Player(color, names.get(color) or color.value.capitalize(), index)
            for index, color in enumerate(colors)
        ]
        return cls(
            board=Board.empty(board_size, colors),
            players=players,
            moves=[],
            next_player_index=0,
            status=Status.ACTIVE,
        )

    @property
    def turn_order(self) -> list[Color]:
        return [player.color for player in self.players]

    @property
    def current_player(self) -> Player:
        return self.players[self.next_player_index]

    @property
    def is_finished(self) -> bool:
        return self.status == Status.FINISHED

    def place_piece(
        self,
        color: Color,
        piece_key: str,
        rotation: int = 0,
        flipped: bool = False,
        anchor: Optional[Cell] = None,
    ) -> Move:
        """
        Attempt to place a piece
        -----

        1. the game must still be running
        2. the validator decides (turn, geometry, adjacency, corners)
        3. append the move, pass the turn on, check whether the game ended

        Nothing changes if the move is refused.
        """
        self._assert_in_progress()

        proposal = PlacementProposal(color, piece_key, rotation, flipped, anchor)
        decision = validate(
            proposal,
            self.board,
            turn_color=self.current_player.color,
            is_first_move=not self.board.has_placed(color),
            turn_number=self._next_turn_number(),
        )
        if isinstance(decision, Rejection):
            raise self._rejection_error(decision.reason)

        self._append_move(decision.move)
        return decision.move

    def pass_turn(self, color: Color) -> Move:
        """Skip: claims no cells but uses up the turn."""
        self._assert_in_progress()
        self._assert_your_turn(color)

        move = Move.pass_turn(color, self._next_turn_number())
        self._append_move(move)
        return move

    def remaining_pieces(self, color: Color) -> list[str]:
        return self.board.remaining_pieces(color)

    def scores(self) -> dict[Color, int]:
        """Empty until the game is finished."""
        if not self.is_finished:
            return {}
        return score_board(self.board, self.turn_order)

    def last_move_model(self) -> MoveModel:
        """The newest log entry, in the format the repository appends."""
        return self.moves[-1].to_model()

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.is_finished:
            raise GameFinishedError(
                "Game is finished. No more pieces can be placed or turns skipped."
            )

    def _assert_your_turn(self, color: Color) -> None:
        if color != self.current_player.color:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player.color} to move first."
            )

    def _rejection_error(self, reason: RejectionReason) -> IllegalMoveError:
        if reason == RejectionReason.NOT_YOUR_TURN:
            return NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player.color} to move first."
            )
        return IllegalMoveError(reason)

    def _next_turn_number(self) -> int:
        return self.moves[-1].turn_number + 1 if self.moves else 1

    def _append_move(self, move: Move) -> None:
        """Log the move, fold it into the board, hand the turn to the next player."""
        self.moves.append(move)
        self.board.apply(move, self.turn_order)
        self.next_player_index = (self.next_player_index + 1) % len(self.players)
        self._update_game_status()

    def _update_game_status(self) -> None:
        """The game ends once every player passed in a row."""
        if self._all_players_passed():
            self.status = Status.FINISHED

    def _all_players_passed(self) -> bool:
        player_count = len(self.players)
        recent = self.moves[-player_count:]
        return len(recent) == player_count and all(move.passed for move in recent)

    @staticmethod
    def _players_from_model(models: list[PlayerModel]) -> list[Player]:
        players = sorted(
            (Player.from_model(model) for model in models),
            key=lambda player: player.order_index,
        )
        if not players:
            raise GameStateError("A game needs at least one player.")
        if [player.order_index for player in players] != list(range(len(players))):
            raise GameStateError("Player order indices must run 0, 1, 2, ...")
        if len({player.color for player in players}) != len(players):
            raise GameStateError("Each color can only be played by one player.")
        return players

    @staticmethod
    def _assert_increasing_turn_numbers(moves: list[Move]) -> None:
        turn_numbers = [move.turn_number for move in moves]
        if len(set(turn_numbers)) != len(turn_numbers):
            raise GameStateError(f"Duplicate turn numbers in move log: {turn_numbers}")
