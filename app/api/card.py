from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.enums import CardRarity, CardSortField, SortOrder
from app.core.security import require_admin
from app.models.card import Card
from app.models.player import Player
from app.schemas.card import CardCreate, CardListParams, CardUpdate, SeedCardsResponse
from app.schemas.common import APIResponse, PaginatedResponse
from app.services.card import CardService

router = APIRouter(prefix="/cards", tags=["cards"])


@router.get("/")
async def get_cards(  # noqa: PLR0913, PLR0917
    service: Annotated[CardService, Depends()],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1)] = 10,
    search_name: Annotated[
        str | None, Query(description="Search cards by name (partial match)")
    ] = None,
    rarity: Annotated[CardRarity | None, Query(description="Filter by rarity")] = None,
    sort_by: Annotated[CardSortField, Query(description="Field to sort by")] = CardSortField.ID,
    sort_order: Annotated[SortOrder, Query(description="Sort order")] = SortOrder.ASC,
) -> PaginatedResponse[Sequence[Card]]:
    params = CardListParams(
        search_name=search_name, rarity=rarity, sort_by=sort_by, sort_order=sort_order
    )
    cards, pagination = await service.get_cards(page=page, page_size=page_size, params=params)
    return PaginatedResponse(data=cards, pagination=pagination)


@router.post("/seed")
async def seed_cards(
    service: Annotated[CardService, Depends()],
    _admin: Annotated[Player, Depends(require_admin)],
) -> APIResponse[SeedCardsResponse]:
    """Load the starter catalog into an empty card table (admin only)."""
    seeded = await service.seed_cards()
    message = f"Seeded {seeded.count} cards" if seeded.seeded else "Cards already exist"
    return APIResponse(data=seeded, message=message)


@router.get("/{card_id}")
async def get_card(card_id: int, service: Annotated[CardService, Depends()]) -> APIResponse[Card]:
    card = await service.get_card(card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    return APIResponse(data=card)


@router.post("/")
async def create_card(
    card: CardCreate,
    service: Annotated[CardService, Depends()],
    _admin: Annotated[Player, Depends(require_admin)],
) -> APIResponse[Card]:
    created_card = await service.create_card(card)
    return APIResponse(data=created_card, message="Card created successfully")


@router.put("/{card_id}")
async def update_card(
    card_id: int,
    card: CardUpdate,
    service: Annotated[CardService, Depends()],
    _admin: Annotated[Player, Depends(require_admin)],
) -> APIResponse[Card]:
    updated_card = await service.update_card(card_id, card)
    if not updated_card:
        raise HTTPException(status_code=404, detail="Card not found")
    return APIResponse(data=updated_card, message="Card updated successfully")


@router.delete("/{card_id}")
async def delete_card(
    card_id: int,
    service: Annotated[CardService, Depends()],
    _admin: Annotated[Player, Depends(require_admin)],
) -> APIResponse[None]:
    deleted = await service.delete_card(card_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Card not found")
    return APIResponse(message="Card deleted successfully")
