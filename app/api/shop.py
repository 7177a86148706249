from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.security import get_current_player
from app.models.player import Player
from app.schemas.common import APIResponse
from app.schemas.shop import (
    ActiveLuckBoostResponse,
    LuckBoostResponse,
    PackResponse,
    PurchaseLuckBoostRequest,
    PurchaseLuckBoostResponse,
    PurchasePackRequest,
    PurchasePackResponse,
)
from app.services.shop import ShopService

router = APIRouter(prefix="/shop", tags=["shop"])


@router.get("/packs")
async def get_packs() -> APIResponse[list[PackResponse]]:
    return APIResponse(data=ShopService.get_packs())


@router.get("/luck-boosts")
async def get_luck_boosts() -> APIResponse[list[LuckBoostResponse]]:
    return APIResponse(data=ShopService.get_luck_boosts())


@router.get("/luck-boosts/active")
async def get_active_luck_boosts(
    service: Annotated[ShopService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[list[ActiveLuckBoostResponse]]:
    return APIResponse(data=await service.get_active_luck_boosts(player.id))


@router.post("/packs/purchase")
async def purchase_pack(
    request: PurchasePackRequest,
    service: Annotated[ShopService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PurchasePackResponse]:
    result = await service.purchase_pack(player, request.tier, auto_open=request.auto_open)
    message = (
        "Pack saved to inventory"
        if result.saved_to_inventory
        else f"Opened pack and received {len(result.cards)} cards"
    )
    return APIResponse(data=result, message=message)


@router.post("/luck-boosts/purchase")
async def purchase_luck_boost(
    request: PurchaseLuckBoostRequest,
    service: Annotated[ShopService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PurchaseLuckBoostResponse]:
    result = await service.purchase_luck_boost(player, request.type)
    return APIResponse(data=result, message="Luck boost activated")
