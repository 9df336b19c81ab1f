"""Database models for Shadow Realms."""

import datetime as dt

from sqlmodel import Field, SQLModel, UniqueConstraint

from .engine.loader import DEFAULT_PACK


class Player(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    fingerprint: str = Field(unique=True, index=True)
    content_pack: str = DEFAULT_PACK
    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.UTC)
    )
    last_seen: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.UTC)
    )


class SavedGame(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("player_id", "slot"),)

    id: int | None = Field(default=None, primary_key=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    slot: str
    content_pack: str = DEFAULT_PACK
    record_blob: bytes  # zlib-compressed JSON SaveRecord
    version: int = 1
    room_id: str = ""
    level: int = 1
    day: int = 1
    hour: int = 8
    started_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.UTC)
    )
    last_played: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.UTC)
    )
