from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.core.enums import CardRarity
from app.core.security import get_current_player
from app.models.player import Player
from app.schemas.common import APIResponse
from app.schemas.inventory import (
    AppraisedCard,
    InventoryCard,
    OpenPackRequest,
    OpenPackResponse,
    SellCardsRequest,
    SellCardsResponse,
    UnopenedPackResponse,
)
from app.services.inventory import InventoryService

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/")
async def get_my_cards(
    service: Annotated[InventoryService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
    rarity: Annotated[CardRarity | None, Query(description="Filter by rarity")] = None,
) -> APIResponse[list[InventoryCard]]:
    return APIResponse(data=await service.get_player_cards(player.id, rarity=rarity))


@router.get("/appraisal")
async def appraise_cards(
    service: Annotated[InventoryService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[list[AppraisedCard]]:
    """Sell price of every card copy the player owns."""
    return APIResponse(data=await service.appraise(player.id))


@router.post("/sell")
async def sell_cards(
    request: SellCardsRequest,
    service: Annotated[InventoryService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[SellCardsResponse]:
    result = await service.sell_cards(player, request.instances)
    return APIResponse(
        data=result, message=f"Sold {result.quantity_sold} cards for {result.total_value} coins"
    )


@router.get("/packs")
async def get_unopened_packs(
    service: Annotated[InventoryService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[list[UnopenedPackResponse]]:
    return APIResponse(data=await service.get_unopened_packs(player.id))


@router.post("/packs/open")
async def open_pack(
    request: OpenPackRequest,
    service: Annotated[InventoryService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[OpenPackResponse]:
    result = await service.open_pack(player.id, request.tier)
    return APIResponse(data=result, message=f"Opened pack and received {len(result.cards)} cards")
