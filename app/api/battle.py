from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.security import get_current_player
from app.models.player import Player
from app.schemas.battle import (
    BattleResultResponse,
    CanBattleResponse,
    StartBattleRequest,
    StartBattleResponse,
)
from app.schemas.common import APIResponse
from app.services.battle import BattleService

router = APIRouter(prefix="/battles", tags=["battles"])


@router.get("/can-battle")
async def can_battle(
    service: Annotated[BattleService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[CanBattleResponse]:
    return APIResponse(data=await service.can_battle(player))


@router.post("/")
async def start_battle(
    request: StartBattleRequest,
    service: Annotated[BattleService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[StartBattleResponse]:
    result = await service.start_battle(player, [slot.to_slot() for slot in request.cards])
    return APIResponse(data=result, message="Battle started")


@router.post("/{battle_id}/resolve")
async def resolve_battle(
    battle_id: int,
    service: Annotated[BattleService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[BattleResultResponse]:
    result = await service.resolve_battle(player, battle_id)
    return APIResponse(data=result, message="Victory" if result.player_won else "Defeat")
