import datetime

import sqlmodel

from app.core.enums import LuckBoostType
from app.game.rarity import ActiveLuckBoost
from app.utils.misc import as_utc

from ._base import BaseModel


class LuckBoost(BaseModel, table=True):
    __tablename__: str = "luck_boosts"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    player_id: int = sqlmodel.Field(
        foreign_key="players.id", index=True, sa_type=sqlmodel.BigInteger
    )
    type: LuckBoostType
    multiplier: float = sqlmodel.Field(gt=1)
    expires_at: datetime.datetime = sqlmodel.Field(
        index=True, sa_type=sqlmodel.DateTime(timezone=True)
    )

    def to_active(self) -> ActiveLuckBoost:
        return ActiveLuckBoost(multiplier=self.multiplier, expires_at=as_utc(self.expires_at))
