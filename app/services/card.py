from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends, HTTPException
from loguru import logger
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.card_seed import SAMPLE_CARDS
from app.core.db import get_db
from app.core.enums import SortOrder
from app.game.catalog import InMemoryCardCatalog
from app.models.card import Card
from app.schemas.card import CardCreate, CardListParams, CardUpdate, SeedCardsResponse
from app.schemas.common import PaginationData


class CardService:
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db)]) -> None:
        self.db = db

    async def get_cards(
        self, *, page: int, page_size: int, params: CardListParams
    ) -> tuple[Sequence[Card], PaginationData]:
        offset = (page - 1) * page_size

        # Build base query with filters
        query = select(Card)

        if params.search_name:
            query = query.where(col(Card.name).ilike(f"%{params.search_name}%"))
        if params.rarity is not None:
            query = query.where(Card.rarity == params.rarity)

        total_items_result = await self.db.exec(query)
        total_items = len(total_items_result.all())

        sort_column = getattr(Card, params.sort_by.value)
        if params.sort_order == SortOrder.DESC:
            query = query.order_by(sort_column.desc())
        else:
            query = query.order_by(sort_column.asc())

        query = query.offset(offset).limit(page_size)
        result = await self.db.exec(query)
        cards = result.all()

        pagination = PaginationData.from_total(
            page=page, page_size=page_size, total_items=total_items
        )

        return cards, pagination

    async def get_card(self, card_id: int) -> Card | None:
        result = await self.db.exec(select(Card).where(Card.id == card_id))
        return result.first()

    async def get_catalog(self) -> InMemoryCardCatalog:
        """Snapshot the whole catalog, grouped by rarity, for one request."""
        result = await self.db.exec(select(Card).order_by(col(Card.id)))
        return InMemoryCardCatalog(card.to_definition() for card in result.all())

    async def create_card(self, card_data: CardCreate) -> Card:
        existing = await self.db.exec(select(Card).where(Card.name == card_data.name))
        if existing.first():
            raise HTTPException(status_code=400, detail=f"Card '{card_data.name}' already exists")

        card = Card.model_validate(card_data)
        self.db.add(card)
        await self.db.commit()
        await self.db.refresh(card)
        return card

    async def update_card(self, card_id: int, card_data: CardUpdate) -> Card | None:
        existing_card = await self.get_card(card_id)
        if not existing_card:
            return None

        existing_card.sqlmodel_update(card_data.model_dump(exclude_unset=True))
        self.db.add(existing_card)
        await self.db.commit()
        await self.db.refresh(existing_card)
        return existing_card

    async def delete_card(self, card_id: int) -> bool:
        card = await self.get_card(card_id)
        if not card:
            return False

        await self.db.delete(card)
        await self.db.commit()
        return True

    async def seed_cards(self) -> SeedCardsResponse:
        """Insert the starter catalog unless cards already exist."""
        existing = await self.db.exec(select(Card).limit(1))
        if existing.first():
            return SeedCardsResponse(seeded=False, count=0)

        for card_data in SAMPLE_CARDS:
            self.db.add(Card.model_validate(card_data))
        await self.db.commit()

        logger.info(f"Seeded {len(SAMPLE_CARDS)} cards")
        return SeedCardsResponse(seeded=True, count=len(SAMPLE_CARDS))
