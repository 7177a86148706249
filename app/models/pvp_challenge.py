import datetime

import sqlmodel

from app.core.enums import PvPStatus
from app.utils.misc import as_utc

from ._base import BaseModel


class PvPChallenge(BaseModel, table=True):
    __tablename__: str = "pvp_challenges"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    challenger_id: int = sqlmodel.Field(
        foreign_key="players.id", index=True, sa_type=sqlmodel.BigInteger
    )
    opponent_id: int = sqlmodel.Field(
        foreign_key="players.id", index=True, sa_type=sqlmodel.BigInteger
    )
    winner_id: int | None = sqlmodel.Field(
        foreign_key="players.id",
        index=True,
        nullable=True,
        default=None,
        sa_type=sqlmodel.BigInteger,
    )
    status: PvPStatus = PvPStatus.PENDING
    expires_at: datetime.datetime = sqlmodel.Field(
        index=True, sa_type=sqlmodel.DateTime(timezone=True)
    )
    """Answer deadline while pending, deck deadline once accepted"""

    challenger_deck: list[dict] | None = sqlmodel.Field(
        default=None, sa_column=sqlmodel.Column(sqlmodel.JSON, nullable=True)
    )
    opponent_deck: list[dict] | None = sqlmodel.Field(
        default=None, sa_column=sqlmodel.Column(sqlmodel.JSON, nullable=True)
    )
    battle_result: dict | None = sqlmodel.Field(
        default=None, sa_column=sqlmodel.Column(sqlmodel.JSON, nullable=True)
    )
    """Stored on first resolve so both players see the same battle"""

    @property
    def decks_ready(self) -> bool:
        return self.challenger_deck is not None and self.opponent_deck is not None

    def is_expired(self, now: datetime.datetime) -> bool:
        return as_utc(self.expires_at) <= now

    def is_open(self, now: datetime.datetime) -> bool:
        """Whether the challenge still blocks a new one between the same players."""
        if self.status not in {PvPStatus.PENDING, PvPStatus.ACCEPTED}:
            return False
        return self.decks_ready or not self.is_expired(now)
