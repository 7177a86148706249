from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.core.enums import EventType
from app.core.security import get_current_player, require_admin
from app.models.event_log import EventLog
from app.models.player import Player
from app.schemas.common import PaginatedResponse
from app.services.event_log import EventLogService

router = APIRouter(prefix="/event-logs", tags=["event-logs"])


@router.get("/")
async def get_event_logs(  # noqa: PLR0913, PLR0917
    service: Annotated[EventLogService, Depends()],
    _admin: Annotated[Player, Depends(require_admin)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1)] = 10,
    player_id: Annotated[int | None, Query(description="Filter by player ID")] = None,
    event_type: Annotated[EventType | None, Query(description="Filter by event type")] = None,
) -> PaginatedResponse[Sequence[EventLog]]:
    event_logs, pagination = await service.get_event_logs(
        page=page, page_size=page_size, player_id=player_id, event_type=event_type
    )
    return PaginatedResponse(data=event_logs, pagination=pagination)


@router.get("/me")
async def get_my_event_logs(
    service: Annotated[EventLogService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1)] = 10,
    event_type: Annotated[EventType | None, Query(description="Filter by event type")] = None,
) -> PaginatedResponse[Sequence[EventLog]]:
    event_logs, pagination = await service.get_event_logs(
        page=page, page_size=page_size, player_id=player.id, event_type=event_type
    )
    return PaginatedResponse(data=event_logs, pagination=pagination)
