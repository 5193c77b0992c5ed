"""Requests and Response models"""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.blokus.cell import MAX_BOARD_SIZE
from src.blokus.pieces import is_known_piece
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, RejectionReason, Status

PieceKey = str
PlayerName = str
CellPair = list[int]


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    players: Optional[list[Color]] = None
    names: dict[Color, PlayerName] = {}
    board_size: Optional[int] = Field(default=None, ge=1, le=MAX_BOARD_SIZE)

    @field_validator("players")
    @classmethod
    def validate_players(cls, value: Optional[list[Color]]) -> Optional[list[Color]]:
        if value is None:
            return value

        if len(value) == 0:
            raise InvalidRequestError("Pick at least one color, or leave players out.")
        if len(set(value)) != len(value):
            raise InvalidRequestError(
                f"Each color can only be picked once: {','.join(value)}"
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class Position(BaseModel):
    x: int
    y: int


class PlacePieceRequest(BaseModel):
    game_id: UUID
    player_color: Color
    # Checked by the rules, which refuse an unknown key before looking at anything else
    piece_key: Optional[Any] = None
    rotation: int = 0
    flipped: bool = False
    position: Optional[Position] = Field(default=None, validate_default=True)

    @field_validator("position", mode="before")
    @classmethod
    def validate_position(cls, value: Any, info: ValidationInfo) -> Any:
        """Anchor must be there, with whole-number x and y. Ignored when the piece is unknown."""
        if not is_known_piece(info.data.get("piece_key")):
            return None

        def _is_coordinate(coordinate: Any) -> bool:
            return isinstance(coordinate, int) and not isinstance(coordinate, bool)

        if isinstance(value, Position):
            return value

        if not isinstance(value, dict) or not all(
            _is_coordinate(value.get(axis)) for axis in ("x", "y")
        ):
            raise InvalidRequestError(
                f"Cannot interpret position: {value!r} as an {{x, y}} pair of integers.",
                code=RejectionReason.INVALID_POSITION.value,
            )
        return value


class SkipTurnRequest(BaseModel):
    game_id: UUID
    player_color: Color


# --- RESPONSE MODELS ---
class PlayerResponse(BaseModel):
    color: Color
    name: PlayerName
    order_index: int


class MoveResponse(BaseModel):
    player_color: Color
    turn_number: int
    passed: bool
    piece_key: Optional[PieceKey] = None
    rotation: Optional[int] = None
    flipped: Optional[bool] = None
    cells: Optional[list[CellPair]] = None


class GameResponse(BaseModel):
    game_id: UUID
    status: Status
    board_size: int
    next_player_index: int
    current_color: Color
    players: list[PlayerResponse]
    moves: list[MoveResponse]
    board: list[list[Optional[Color]]]
    remaining: dict[Color, list[PieceKey]]
    scores: dict[Color, int]
    occupied_count: int


class PiecesResponse(BaseModel):
    pieces: dict[PieceKey, list[CellPair]]
