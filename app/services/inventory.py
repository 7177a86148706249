from collections import Counter, defaultdict
from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends, HTTPException
from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db import get_db
from app.core.enums import CardRarity, EventType, PackTier, QuestType
from app.game.rarity import sell_price
from app.models.card import Card
from app.models.inventory import Inventory
from app.models.player import Player
from app.schemas.inventory import (
    AppraisedCard,
    CardInstance,
    InventoryCard,
    OpenPackResponse,
    SellCardsResponse,
    UnopenedPackResponse,
)
from app.schemas.shop import AwardedCard
from app.services.event_log import EventLogService
from app.services.pack import PackService
from app.services.player import lock_player
from app.utils.misc import to_epoch_ms


def instance_seed(inventory: Inventory, instance_index: int) -> int:
    return to_epoch_ms(inventory.acquired_at) + instance_index


class InventoryService:
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db)],
        pack_service: Annotated[PackService, Depends()],
        event_log_service: Annotated[EventLogService, Depends()],
    ) -> None:
        self.db = db
        self.pack_service = pack_service
        self.event_log_service = event_log_service

    async def _get_player_rows(
        self, player_id: int, *, rarity: CardRarity | None = None
    ) -> Sequence[tuple[Inventory, Card]]:
        stmt = (
            select(Inventory, Card)
            .join(Card, col(Card.id) == Inventory.card_id)
            .where(Inventory.player_id == player_id, col(Inventory.quantity) > 0)
            .order_by(col(Card.id))
        )
        if rarity is not None:
            stmt = stmt.where(Card.rarity == rarity)

        result = await self.db.exec(stmt)
        return result.all()

    async def get_player_cards(
        self, player_id: int, *, rarity: CardRarity | None = None
    ) -> list[InventoryCard]:
        rows = await self._get_player_rows(player_id, rarity=rarity)
        return [
            InventoryCard(
                inventory_id=inventory.id,
                card_id=card.id,
                name=card.name,
                rarity=card.rarity,
                attack=card.attack,
                defense=card.defense,
                quantity=inventory.quantity,
                acquired_at=inventory.acquired_at,
            )
            for inventory, card in rows
        ]

    async def count_cards(self, player_id: int) -> int:
        result = await self.db.exec(
            select(func.coalesce(func.sum(Inventory.quantity), 0)).where(
                Inventory.player_id == player_id
            )
        )
        return int(result.one())

    async def ensure_owns(self, player_id: int, card_ids: Sequence[int]) -> None:
        """Check the player holds at least as many copies as ``card_ids`` lists.

        Raises:
            HTTPException: If any card is missing or short on copies
        """
        needed = Counter(card_ids)
        result = await self.db.exec(
            select(Inventory).where(
                Inventory.player_id == player_id, col(Inventory.card_id).in_(needed.keys())
            )
        )
        owned = {inventory.card_id: inventory.quantity for inventory in result.all()}

        for card_id, count in needed.items():
            if owned.get(card_id, 0) < count:
                raise HTTPException(
                    status_code=400,
                    detail=f"Not enough copies of card {card_id}. "
                    f"Owned: {owned.get(card_id, 0)}, needed: {count}",
                )

    async def appraise(self, player_id: int) -> list[AppraisedCard]:
        """Sell value of every card instance the player owns.

        Instance indices stay fixed once issued: selling one copy never moves
        the index, and therefore the price, of another.
        """
        rows = await self._get_player_rows(player_id)
        return [
            AppraisedCard(
                inventory_id=inventory.id,
                instance_index=index,
                card_id=card.id,
                name=card.name,
                rarity=card.rarity,
                sell_price=sell_price(card.rarity, instance_seed(inventory, index)),
            )
            for inventory, card in rows
            for index in inventory.live_instances()
        ]

    async def sell_cards(self, player: Player, instances: Sequence[CardInstance]) -> SellCardsResponse:
        """Sell specific card instances at their appraised price.

        Raises:
            HTTPException: If an instance is unknown, not owned, or listed twice
        """
        if len({(i.inventory_id, i.instance_index) for i in instances}) != len(instances):
            raise HTTPException(status_code=400, detail="A card instance is listed twice")

        by_inventory: defaultdict[int, list[int]] = defaultdict(list)
        for instance in instances:
            by_inventory[instance.inventory_id].append(instance.instance_index)

        result = await self.db.exec(
            select(Inventory, Card)
            .join(Card, col(Card.id) == Inventory.card_id)
            .where(col(Inventory.id).in_(by_inventory.keys()))
            .with_for_update()
        )
        rows = {inventory.id: (inventory, card) for inventory, card in result.all()}

        total_value = 0
        sold: list[dict[str, int]] = []
        for inventory_id, indices in by_inventory.items():
            row = rows.get(inventory_id)
            if row is None or row[0].player_id != player.id:
                raise HTTPException(status_code=404, detail=f"Inventory {inventory_id} not found")

            inventory, card = row
            live = set(inventory.live_instances())
            if not live.issuperset(indices):
                raise HTTPException(
                    status_code=400,
                    detail=f"Unknown or already sold copy of {card.name}",
                )

            value = sum(sell_price(card.rarity, instance_seed(inventory, i)) for i in indices)
            total_value += value
            sold.append({"card_id": card.id, "quantity": len(indices), "value": value})

            inventory.quantity -= len(indices)
            if inventory.quantity == 0:
                await self.db.delete(inventory)
            else:
                # reassigned, not appended, so the JSON column is marked dirty
                inventory.sold_indices = sorted([*inventory.sold_indices, *indices])
                self.db.add(inventory)

        player = await lock_player(self.db, player.id)
        player.currency += total_value
        self.db.add(player)

        sink = self.event_log_service.sink(player.id)
        sink.emit(EventType.CARD_SELL, {"amount": total_value, "cards": sold})
        sink.quest_progress(QuestType.SELL_CARDS, len(instances))

        await self.db.commit()
        await self.db.refresh(player)

        return SellCardsResponse(
            quantity_sold=len(instances),
            total_value=total_value,
            new_currency_balance=player.currency,
        )

    async def get_unopened_packs(self, player_id: int) -> list[UnopenedPackResponse]:
        packs = await self.pack_service.get_unopened_packs(player_id)
        return [UnopenedPackResponse(tier=pack.tier, quantity=pack.quantity) for pack in packs]

    async def open_pack(self, player_id: int, tier: PackTier) -> OpenPackResponse:
        cards, luck_multiplier, remaining = await self.pack_service.open_stored_pack(
            player_id, tier
        )
        await self.db.commit()

        return OpenPackResponse(
            cards=[AwardedCard.model_validate(card) for card in cards],
            luck_multiplier=luck_multiplier,
            remaining=remaining,
        )
