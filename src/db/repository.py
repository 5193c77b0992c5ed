"""Storage interface the service depends on. The SQL version lives in sql_repository.py, tests use an in-memory one."""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel, MoveModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID (players ordered by turn order, moves by turn number), if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game with its players and return the stored data + newly created game ID."""
        ...

    def append_move(
        self, game_id: UUID, move: MoveModel, next_player_index: int, status: str
    ) -> GameModel | None:
        """
        Add one move to the log and update the turn pointer / status, as a single atomic write.
        Raise ConcurrentMoveError if a move with the same turn number was stored first.
        """
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record (and its players and moves)."""
        ...
