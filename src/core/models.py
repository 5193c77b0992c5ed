"""
Plain records passed between the service and the layers around it.

The repository stores and returns these, the game rebuilds itself from them.
Colors and status stay plain strings here: checking them is the game layer's job.
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make the models easier to read
PieceColor = str
PlayerName = str
CellPair = list[int]


@dataclass
class PlayerModel:
    color: PieceColor
    name: PlayerName
    order_index: int


@dataclass
class MoveModel:
    """One entry of the move log. A pass has no piece, transform or cells."""

    player_color: PieceColor
    turn_number: int
    passed: bool
    piece_key: Optional[str] = None
    rotation: Optional[int] = None
    flipped: Optional[bool] = None
    cells: Optional[list[CellPair]] = None


@dataclass
class GameModel:
    """Transport-safe representation of a game used between API, Service, DB, and Game layers."""

    board_size: int
    status: str
    next_player_index: int
    players: list[PlayerModel] = field(default_factory=list)
    moves: list[MoveModel] = field(default_factory=list)
