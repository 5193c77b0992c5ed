"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import ConcurrentMoveError, RepositoryError
from src.core.models import GameModel, MoveModel, PlayerModel
from src.db.schema import DBGame, DBMove, DBPlayer

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        try:
            game_db = self._fetch_game(game_id)
            if game_db:
                return self._to_model(game_db)
            return None
        except SQLAlchemyError as e:
            raise RepositoryError(f"Could not read game {game_id}.") from e

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            status=game.status,
            board_size=game.board_size,
            next_player_index=game.next_player_index,
            players=[
                DBPlayer(
                    id=uuid4(),
                    color=player.color,
                    order_index=player.order_index,
                    name=player.name,
                )
                for player in game.players
            ],
            moves=[self._to_db_move(move) for move in game.moves],
        )
        self.db.add(game_db)
        self._commit(f"create game {new_id}")
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def append_move(
        self, game_id: UUID, move: MoveModel, next_player_index: int, status: str
    ) -> GameModel | None:
        """Move, turn pointer and status go in one commit: either all of them are stored or none."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None

        move_db = self._to_db_move(move)
        move_db.game_id = game_id
        self.db.add(move_db)
        game_db.next_player_index = next_player_index
        game_db.status = status
        self._commit(f"append turn {move.turn_number} to game {game_id}")
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self._commit(f"delete game {game_id}")
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _commit(self, action: str) -> None:
        """Commit, or roll back and translate the SQLAlchemy error into one of ours."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Conflict while trying to %s", action)
            raise ConcurrentMoveError(f"Conflict while trying to {action}.") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to %s", action, exc_info=True)
            raise RepositoryError(f"Failed to {action}.") from e

    def _to_db_move(self, move: MoveModel) -> DBMove:
        return DBMove(
            id=uuid4(),
            player_color=move.player_color,
            piece_key=move.piece_key,
            rotation=move.rotation,
            flipped=move.flipped,
            cells=move.cells,
            passed=move.passed,
            turn_number=move.turn_number,
        )

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            board_size=game_db.board_size,
            status=game_db.status,
            next_player_index=game_db.next_player_index,
            players=[
                PlayerModel(
                    color=player.color, name=player.name, order_index=player.order_index
                )
                for player in game_db.players
            ],
            moves=[
                MoveModel(
                    player_color=move.player_color,
                    turn_number=move.turn_number,
                    passed=move.passed,
                    piece_key=move.piece_key,
                    rotation=move.rotation,
                    flipped=move.flipped,
                    cells=move.cells,
                )
                for move in game_db.moves
            ],
        )
