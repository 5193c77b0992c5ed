"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveResponse,
    PiecesResponse,
    PlacePieceRequest,
    PlayerResponse,
    SkipTurnRequest,
)
from src.blokus.cell import Cell
from src.blokus.game import Game
from src.blokus.moves import Move
from src.blokus.pieces import piece_catalog
from src.blokus.projector import project
from src.core.config import Settings, get_settings
from src.core.exceptions import (
    ConcurrentMoveError,
    GameNotFoundError,
    RejectionError,
)
from src.core.models import GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class GameLocks:
    """
    One lock per game.
    ----

    Reading the log, validating and appending must happen as one step per game,
    otherwise two placements could both pass against the same old board and overlap once stored.
    Different games never wait on each other.

    A game's lock is only kept while some request holds it or waits for it, so the registry
    stays as small as the number of games being played right now.
    """

    @dataclass
    class _Entry:
        lock: threading.Lock = field(default_factory=threading.Lock)
        users: int = 0

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[UUID, GameLocks._Entry] = {}

    @contextmanager
    def hold(self, game_id: UUID) -> Iterator[None]:
        with self._guard:
            entry = self._entries.setdefault(game_id, GameLocks._Entry())
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[game_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


# Shared by every service instance in the process (the API creates one service per request)
GAME_LOCKS = GameLocks()


class BlokusService:
    """Orchestration of layers for a game of Blokus."""

    def __init__(
        self,
        repository: GameRepository,
        locks: Optional[GameLocks] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.repo = repository
        self.locks = locks if locks is not None else GAME_LOCKS
        self.settings = settings or get_settings()

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Create the game together with all of its players."""

        new_game = Game.new_game(
            colors=request.players,
            names=request.names,
            board_size=request.board_size or self.settings.board_size,
        )
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info(
            "Created game %s for %s",
            game_id,
            ",".join(player.color for player in stored_game.players),
        )
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def place_piece(self, request: PlacePieceRequest) -> GameResponse:
        """Attempt to put a piece on the board."""

        # position is only left out when the piece key is unknown, the rules refuse that first
        anchor = (
            Cell(request.position.x, request.position.y) if request.position else None
        )

        def _place(game: Game) -> Move:
            return game.place_piece(
                color=request.player_color,
                piece_key=request.piece_key,
                rotation=request.rotation,
                flipped=request.flipped,
                anchor=anchor,
            )

        return self._play_turn(request.game_id, _place)

    def skip_turn(self, request: SkipTurnRequest) -> GameResponse:
        """Pass: the turn goes to the next player without placing anything."""
        return self._play_turn(
            request.game_id, lambda game: game.pass_turn(request.player_color)
        )

    def list_pieces(self) -> PiecesResponse:
        return PiecesResponse(pieces=piece_catalog())

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self.locks.hold(request.game_id):
            deleted = self.repo.delete_game(request.game_id)
        if deleted is None:
            raise GameNotFoundError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _play_turn(
        self, game_id: UUID, action: Callable[[Game], Move]
    ) -> GameResponse:
        """
        Read, validate, append: one unit per game.
        ----

        If the store reports that someone else appended this turn first, start over from a freshly read log
        (never re-use the old board). Gives up after `settings.append_retries` attempts.
        """
        with self.locks.hold(game_id):
            attempt = 1
            while True:
                game = Game.from_model(self._fetch_game(game_id))
                try:
                    move = action(game)
                except RejectionError as e:
                    logger.info("Game %s: move rejected (%s)", game_id, e.code)
                    raise

                try:
                    updated = self.repo.append_move(
                        game_id,
                        game.last_move_model(),
                        next_player_index=game.next_player_index,
                        status=str(game.status),
                    )
                except ConcurrentMoveError:
                    if attempt >= self.settings.append_retries:
                        logger.error(
                            "Game %s: giving up on turn %s after %s attempts",
                            game_id,
                            move.turn_number,
                            attempt,
                        )
                        raise
                    logger.warning(
                        "Game %s: turn %s was taken concurrently, retrying",
                        game_id,
                        move.turn_number,
                    )
                    attempt += 1
                    continue

                if updated is None:
                    raise GameNotFoundError(f"Game with {game_id=} not found.")
                logger.info(
                    "Game %s: turn %s by %s (%s)",
                    game_id,
                    move.turn_number,
                    move.color,
                    "pass" if move.passed else move.piece_key,
                )
                return self._create_game_response(game_id, updated)

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        snapshot = project(model)
        return GameResponse(
            game_id=game_id,
            status=snapshot.status,
            board_size=snapshot.board_size,
            next_player_index=snapshot.next_player_index,
            current_color=snapshot.current_color,
            players=[
                PlayerResponse(
                    color=player.color, name=player.name, order_index=player.order_index
                )
                for player in model.players
            ],
            moves=[
                MoveResponse(
                    player_color=move.player_color,
                    turn_number=move.turn_number,
                    passed=move.passed,
                    piece_key=move.piece_key,
                    rotation=move.rotation,
                    flipped=move.flipped,
                    cells=move.cells,
                )
                for move in model.moves
            ],
            board=snapshot.grid,
            remaining=snapshot.remaining,
            scores=snapshot.scores,
            occupied_count=snapshot.occupied_count,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model
