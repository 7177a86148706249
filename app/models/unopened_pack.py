import sqlmodel

from app.core.enums import PackTier

from ._base import BaseModel


class UnopenedPack(BaseModel, table=True):
    __tablename__: str = "unopened_packs"
    __table_args__ = (
        sqlmodel.UniqueConstraint("player_id", "tier", name="unopened_pack_player_tier_unique"),
    )

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    player_id: int = sqlmodel.Field(
        foreign_key="players.id", index=True, sa_type=sqlmodel.BigInteger
    )
    tier: PackTier
    quantity: int = sqlmodel.Field(default=0, ge=0)
