from typing import Annotated

from fastapi import Depends, HTTPException
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db import get_db
from app.core.enums import EventType, LuckBoostType, PackTier
from app.game.catalog import CardDefinition
from app.game.rarity import LUCK_BOOSTS, PACKS, get_pack
from app.models.luck_boost import LuckBoost
from app.models.player import Player
from app.schemas.shop import (
    ActiveLuckBoostResponse,
    AwardedCard,
    LuckBoostResponse,
    PackResponse,
    PurchaseLuckBoostResponse,
    PurchasePackResponse,
)
from app.services.event_log import EventLogService
from app.services.pack import PackService
from app.services.player import lock_player
from app.utils.misc import as_utc, get_utc_now


class ShopService:
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db)],
        pack_service: Annotated[PackService, Depends()],
        event_log_service: Annotated[EventLogService, Depends()],
    ) -> None:
        self.db = db
        self.pack_service = pack_service
        self.event_log_service = event_log_service

    @staticmethod
    def get_packs() -> list[PackResponse]:
        return [
            PackResponse(
                tier=pack.tier,
                name=pack.name,
                description=pack.description,
                cost=pack.cost,
                card_count=pack.card_count,
                weights=dict(pack.weights),
            )
            for pack in PACKS.values()
        ]

    @staticmethod
    def get_luck_boosts() -> list[LuckBoostResponse]:
        return [
            LuckBoostResponse(
                type=boost.type,
                name=boost.name,
                description=boost.description,
                cost=boost.cost,
                multiplier=boost.multiplier,
                duration_minutes=int(boost.duration.total_seconds() // 60),
            )
            for boost in LUCK_BOOSTS.values()
        ]

    async def get_active_luck_boosts(self, player_id: int) -> list[ActiveLuckBoostResponse]:
        boosts = await self.pack_service.get_active_boosts(player_id)
        return [
            ActiveLuckBoostResponse(
                type=boost.type, multiplier=boost.multiplier, expires_at=as_utc(boost.expires_at)
            )
            for boost in boosts
        ]

    @staticmethod
    def _charge(player: Player, cost: int) -> None:
        if player.currency < cost:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient currency. Have: {player.currency}, need: {cost}",
            )
        player.currency -= cost

    async def purchase_pack(
        self, player: Player, tier: PackTier, *, auto_open: bool = True
    ) -> PurchasePackResponse:
        """Buy a pack and either open it right away or keep it for later.

        Raises:
            HTTPException: If the player cannot afford the pack
        """
        pack = get_pack(tier)
        player = await lock_player(self.db, player.id)
        self._charge(player, pack.cost)
        self.db.add(player)

        sink = self.event_log_service.sink(player.id)
        luck_multiplier = 1.0
        cards: list[CardDefinition] = []
        if auto_open:
            cards, luck_multiplier = await self.pack_service.roll_pack(player.id, pack.tier)
        else:
            await self.pack_service.store_pack(player.id, pack.tier)

        sink.emit(
            EventType.PACK_PURCHASE,
            {
                "amount": -pack.cost,
                "tier": pack.tier,
                "saved_to_inventory": not auto_open,
                "cards_received": len(cards),
            },
        )

        await self.db.commit()
        await self.db.refresh(player)

        return PurchasePackResponse(
            saved_to_inventory=not auto_open,
            cards=[AwardedCard.model_validate(card) for card in cards],
            luck_multiplier=luck_multiplier,
            new_balance=player.currency,
        )

    async def purchase_luck_boost(
        self, player: Player, boost_type: LuckBoostType
    ) -> PurchaseLuckBoostResponse:
        """Buy a luck boost; expired boosts of the player are pruned on the way."""
        boost = LUCK_BOOSTS[boost_type]
        player = await lock_player(self.db, player.id)
        self._charge(player, boost.cost)
        self.db.add(player)

        now = get_utc_now()
        await self.pack_service.prune_expired_boosts(player.id, now)

        expires_at = now + boost.duration
        self.db.add(
            LuckBoost(
                player_id=player.id,
                type=boost.type,
                multiplier=boost.multiplier,
                expires_at=expires_at,
            )
        )
        self.event_log_service.sink(player.id).emit(
            EventType.LUCK_BOOST_PURCHASE,
            {"amount": -boost.cost, "boost": boost.type, "expires_at": expires_at.isoformat()},
        )

        await self.db.commit()
        await self.db.refresh(player)

        return PurchaseLuckBoostResponse(new_balance=player.currency, expires_at=expires_at)
