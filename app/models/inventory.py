import datetime
from typing import TYPE_CHECKING

import sqlmodel

from app.utils.misc import get_utc_now

from ._base import BaseModel

if TYPE_CHECKING:
    from app.models.card import Card


class Inventory(BaseModel, table=True):
    __tablename__: str = "inventories"
    __table_args__ = (
        sqlmodel.UniqueConstraint("player_id", "card_id", name="inventory_player_card_unique"),
    )

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    player_id: int = sqlmodel.Field(
        foreign_key="players.id", index=True, sa_type=sqlmodel.BigInteger
    )
    card_id: int = sqlmodel.Field(foreign_key="cards.id", index=True)
    quantity: int = sqlmodel.Field(default=0, ge=0)
    acquired_at: datetime.datetime = sqlmodel.Field(
        default_factory=get_utc_now, sa_type=sqlmodel.DateTime(timezone=True)
    )
    """Seeds the per-instance sell price"""
    sold_indices: list[int] = sqlmodel.Field(
        default_factory=list, sa_column=sqlmodel.Column(sqlmodel.JSON, nullable=False)
    )
    """Instance indices already sold, so the remaining copies keep their price"""

    def live_instances(self) -> list[int]:
        sold = set(self.sold_indices)
        return [i for i in range(self.quantity + len(sold)) if i not in sold]

    card: "Card" = sqlmodel.Relationship()
