import sqlmodel

from app.core.enums import EventType

from ._base import BaseModel


class EventLog(BaseModel, table=True):
    """Economy audit trail and quest-progress notifications."""

    __tablename__: str = "event_logs"

    id: int = sqlmodel.Field(primary_key=True, index=True, default=None)
    player_id: int = sqlmodel.Field(
        foreign_key="players.id", index=True, sa_type=sqlmodel.BigInteger
    )
    event_type: EventType = sqlmodel.Field(index=True)
    amount: int = 0
    """Currency delta, negative when the player paid"""
    context: dict = sqlmodel.Field(sa_column=sqlmodel.Column(sqlmodel.JSON))
