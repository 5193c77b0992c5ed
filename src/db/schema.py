"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from src.core.shared_types import Status


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    status: Mapped[str] = mapped_column(default=Status.ACTIVE.value)
    board_size: Mapped[int] = mapped_column(default=20)
    next_player_index: Mapped[int] = mapped_column(default=0)

    players: Mapped[list["DBPlayer"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="DBPlayer.order_index",
    )
    moves: Mapped[list["DBMove"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="DBMove.turn_number",
    )


class DBPlayer(Base):
    __tablename__ = "players"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"))
    color: Mapped[str]
    order_index: Mapped[int]
    name: Mapped[str]

    game: Mapped[DBGame] = relationship(back_populates="players")


class DBMove(Base):
    __tablename__ = "moves"
    # two requests appending the same turn of the same game: only one of them gets in
    __table_args__ = (UniqueConstraint("game_id", "turn_number"),)

    id: Mapped[UUID] = mapped_column(primary_key=True)
    game_id: Mapped[UUID] = mapped_column(
        ForeignKey("games.id", ondelete="CASCADE"), index=True
    )
    player_color: Mapped[str]
    piece_key: Mapped[Optional[str]]
    rotation: Mapped[Optional[int]]
    flipped: Mapped[Optional[bool]]
    cells: Mapped[Optional[list[list[int]]]] = mapped_column(JSON, nullable=True)
    passed: Mapped[bool] = mapped_column(default=False)
    turn_number: Mapped[int]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)

    game: Mapped[DBGame] = relationship(back_populates="moves")
