import datetime
from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends, HTTPException
from loguru import logger
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db import get_db
from app.core.enums import EventType, PackTier, QuestType
from app.game.catalog import CardDefinition
from app.game.packs import PackOpener, aggregate_awards
from app.game.random_source import RandomSource, get_random_source
from app.game.rarity import active_luck_multiplier, get_pack
from app.models.inventory import Inventory
from app.models.luck_boost import LuckBoost
from app.models.unopened_pack import UnopenedPack
from app.services.card import CardService
from app.services.event_log import EventLogService
from app.utils.misc import as_utc, get_utc_now


class PackService:
    """Pack rolling and the inventory mutations that follow from it.

    Methods here never commit; the calling service owns the transaction.
    """

    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db)],
        card_service: Annotated[CardService, Depends()],
        event_log_service: Annotated[EventLogService, Depends()],
        rng: Annotated[RandomSource, Depends(get_random_source)],
    ) -> None:
        self.db = db
        self.card_service = card_service
        self.event_log_service = event_log_service
        self.rng = rng

    async def get_active_boosts(
        self, player_id: int, now: datetime.datetime | None = None
    ) -> Sequence[LuckBoost]:
        now = now or get_utc_now()
        result = await self.db.exec(select(LuckBoost).where(LuckBoost.player_id == player_id))
        return [boost for boost in result.all() if as_utc(boost.expires_at) > now]

    async def prune_expired_boosts(self, player_id: int, now: datetime.datetime) -> int:
        result = await self.db.exec(
            select(LuckBoost).where(
                LuckBoost.player_id == player_id, col(LuckBoost.expires_at) <= now
            )
        )
        expired = result.all()
        for boost in expired:
            await self.db.delete(boost)
        return len(expired)

    async def get_luck_multiplier(
        self, player_id: int, now: datetime.datetime | None = None
    ) -> float:
        now = now or get_utc_now()
        boosts = await self.get_active_boosts(player_id, now)
        return active_luck_multiplier((b.to_active() for b in boosts), now)

    async def roll_pack(
        self, player_id: int, tier: PackTier
    ) -> tuple[list[CardDefinition], float]:
        """Open one pack of ``tier`` and add the cards to the player's inventory.

        Returns:
            Tuple of (awarded cards, luck multiplier applied)
        """
        pack = get_pack(tier)
        luck_multiplier = await self.get_luck_multiplier(player_id)
        catalog = await self.card_service.get_catalog()

        opener = PackOpener(catalog, self.rng)
        cards = opener.open_pack(pack.tier, pack.card_count, pack.weights, luck_multiplier)
        await self.add_cards(player_id, aggregate_awards(cards))

        sink = self.event_log_service.sink(player_id)
        sink.emit(
            EventType.PACK_OPEN,
            {
                "tier": pack.tier,
                "card_ids": [card.id for card in cards],
                "luck_multiplier": luck_multiplier,
            },
        )
        sink.quest_progress(QuestType.OPEN_PACK)

        logger.info(
            f"Player {player_id} opened a {pack.tier} pack: {len(cards)}/{pack.card_count} cards"
            f" (luck x{luck_multiplier})"
        )
        return cards, luck_multiplier

    async def add_cards(self, player_id: int, deltas: dict[int, int]) -> None:
        """Apply one quantity increment per card id."""
        if not deltas:
            return

        result = await self.db.exec(
            select(Inventory).where(
                Inventory.player_id == player_id, col(Inventory.card_id).in_(deltas.keys())
            )
        )
        existing = {inventory.card_id: inventory for inventory in result.all()}

        for card_id, quantity in deltas.items():
            inventory = existing.get(card_id)
            if inventory:
                inventory.quantity += quantity
            else:
                inventory = Inventory(player_id=player_id, card_id=card_id, quantity=quantity)
            self.db.add(inventory)
        await self.db.flush()

    async def get_unopened_packs(self, player_id: int) -> Sequence[UnopenedPack]:
        result = await self.db.exec(
            select(UnopenedPack).where(
                UnopenedPack.player_id == player_id, col(UnopenedPack.quantity) > 0
            )
        )
        return result.all()

    async def _get_unopened_pack(self, player_id: int, tier: PackTier) -> UnopenedPack | None:
        result = await self.db.exec(
            select(UnopenedPack).where(
                UnopenedPack.player_id == player_id, UnopenedPack.tier == tier
            )
        )
        return result.first()

    async def store_pack(self, player_id: int, tier: PackTier, quantity: int = 1) -> UnopenedPack:
        pack = await self._get_unopened_pack(player_id, tier)
        if pack:
            pack.quantity += quantity
        else:
            pack = UnopenedPack(player_id=player_id, tier=tier, quantity=quantity)
        self.db.add(pack)
        await self.db.flush()
        return pack

    async def open_stored_pack(
        self, player_id: int, tier: PackTier
    ) -> tuple[list[CardDefinition], float, int]:
        """Consume one unopened pack and roll it.

        Returns:
            Tuple of (awarded cards, luck multiplier applied, packs of this tier left)

        Raises:
            HTTPException: If the player has no unopened pack of this tier
        """
        pack = await self._get_unopened_pack(player_id, tier)
        if not pack or pack.quantity < 1:
            raise HTTPException(status_code=404, detail=f"No unopened {tier} pack")

        pack.quantity -= 1
        remaining = pack.quantity
        if remaining == 0:
            await self.db.delete(pack)
        else:
            self.db.add(pack)

        cards, luck_multiplier = await self.roll_pack(player_id, tier)
        return cards, luck_multiplier, remaining
