from collections.abc import Sequence
from typing import Annotated, Any

from fastapi import Depends
from sqlmodel import col, desc, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db import get_db
from app.core.enums import EventType, QuestType
from app.models.event_log import EventLog
from app.schemas.common import PaginationData


class PlayerEventSink:
    """Records events for one player in the caller's session.

    Nothing is flushed here; the events commit together with the mutation that
    produced them.
    """

    def __init__(self, db: AsyncSession, player_id: int) -> None:
        self.db = db
        self.player_id = player_id

    def emit(self, event_type: EventType, payload: dict[str, Any]) -> None:
        self.db.add(
            EventLog(
                player_id=self.player_id,
                event_type=event_type,
                amount=int(payload.get("amount", 0)),
                context=payload,
            )
        )

    def quest_progress(self, quest_type: QuestType, progress: int = 1) -> None:
        self.emit(EventType.QUEST_PROGRESS, {"quest_type": quest_type, "progress": progress})


class EventLogService:
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db)]) -> None:
        self.db = db

    def sink(self, player_id: int) -> PlayerEventSink:
        return PlayerEventSink(self.db, player_id)

    async def get_event_logs(
        self,
        *,
        page: int,
        page_size: int,
        player_id: int | None = None,
        event_type: EventType | None = None,
    ) -> tuple[Sequence[EventLog], PaginationData]:
        offset = (page - 1) * page_size

        query = select(EventLog)
        if player_id is not None:
            query = query.where(col(EventLog.player_id) == player_id)
        if event_type is not None:
            query = query.where(col(EventLog.event_type) == event_type)

        total_items_result = await self.db.exec(query)
        total_items = len(total_items_result.all())

        result = await self.db.exec(
            query.order_by(desc(col(EventLog.id))).offset(offset).limit(page_size)
        )
        event_logs = result.all()

        pagination = PaginationData.from_total(
            page=page, page_size=page_size, total_items=total_items
        )

        return event_logs, pagination
