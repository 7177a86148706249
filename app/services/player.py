from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends, HTTPException
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.game.rewards import Reward, RewardConfig
from app.models.player import Player
from app.schemas.common import PaginationData
from app.schemas.player import PlayerUpdate
from app.services.pack import PackService


def get_reward_config() -> RewardConfig:
    return RewardConfig(
        reward_min=settings.reward_min,
        reward_max=settings.reward_max,
        base_pack_chance=settings.base_pack_chance,
        pack_chance_per_win=settings.pack_chance_per_win,
        max_pack_chance=settings.max_pack_chance,
    )


async def lock_player(db: AsyncSession, player_id: int) -> Player:
    """Re-read a player row under a row lock before its balance changes.

    The player loaded for the request may be stale; ``populate_existing``
    refreshes the instance already in the session so callers keep using it.
    """
    result = await db.exec(
        select(Player)
        .where(Player.id == player_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.one()


class PlayerService:
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db)],
        pack_service: Annotated[PackService, Depends()],
    ) -> None:
        self.db = db
        self.pack_service = pack_service

    async def get_players(
        self, *, page: int, page_size: int
    ) -> tuple[Sequence[Player], PaginationData]:
        offset = (page - 1) * page_size

        total_items_result = await self.db.exec(select(Player))
        total_items = len(total_items_result.all())

        result = await self.db.exec(select(Player).offset(offset).limit(page_size))
        players = result.all()

        pagination = PaginationData.from_total(
            page=page, page_size=page_size, total_items=total_items
        )

        return players, pagination

    async def get_player(self, player_id: int) -> Player | None:
        result = await self.db.exec(select(Player).where(Player.id == player_id))
        return result.first()

    async def get_player_or_404(self, player_id: int) -> Player:
        player = await self.get_player(player_id)
        if not player:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    async def create_player(self, player: Player) -> Player:
        if await self.get_player(player.id):
            raise HTTPException(status_code=400, detail="Player already exists")

        self.db.add(player)
        await self.db.commit()
        await self.db.refresh(player)
        return player

    async def update_player(self, player_id: int, player: PlayerUpdate) -> Player | None:
        existing_player = await self.get_player(player_id)
        if not existing_player:
            return None

        existing_player.sqlmodel_update(player.model_dump(exclude_unset=True))
        self.db.add(existing_player)
        await self.db.commit()
        await self.db.refresh(existing_player)
        return existing_player

    async def record_win(self, player: Player, reward: Reward) -> None:
        """Pay out a battle reward. Caller commits."""
        player.currency += reward.coins
        player.battle_wins += 1
        self.db.add(player)

        if reward.pack_tier is not None:
            await self.pack_service.store_pack(player.id, reward.pack_tier)

    def record_loss(self, player: Player) -> None:
        """Count a battle loss. Caller commits."""
        player.battle_losses += 1
        self.db.add(player)
