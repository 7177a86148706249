import sqlmodel

from app.core.enums import BattleStatus

from ._base import BaseModel


class Battle(BaseModel, table=True):
    """An NPC battle, stored at start and resolved at most once."""

    __tablename__: str = "battles"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    player_id: int = sqlmodel.Field(
        foreign_key="players.id", index=True, sa_type=sqlmodel.BigInteger
    )
    player_deck: list[dict] = sqlmodel.Field(sa_column=sqlmodel.Column(sqlmodel.JSON))
    npc_deck: list[dict] = sqlmodel.Field(sa_column=sqlmodel.Column(sqlmodel.JSON))
    status: BattleStatus = BattleStatus.PENDING
    result: dict | None = sqlmodel.Field(
        default=None, sa_column=sqlmodel.Column(sqlmodel.JSON, nullable=True)
    )
