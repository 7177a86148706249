from typing import Annotated

from fastapi import Depends, HTTPException
from loguru import logger
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.core.enums import BattleSide, BattleStatus, EventType, QuestType
from app.game.battle import BattleEngine, BattleOutcome, DeckSlot, build_combat_deck
from app.game.errors import BattleInvariantError, DeckValidationError
from app.game.npc import NpcDeckGenerator
from app.game.random_source import RandomSource, get_random_source
from app.game.rewards import RewardCalculator
from app.models.battle import Battle
from app.models.player import Player
from app.schemas.battle import (
    BattleOutcomeSchema,
    BattleResultResponse,
    CanBattleResponse,
    CombatCardSchema,
    RewardSchema,
    StartBattleResponse,
    dump_deck,
    load_deck,
)
from app.services.card import CardService
from app.services.event_log import EventLogService
from app.services.inventory import InventoryService
from app.services.player import PlayerService, get_reward_config, lock_player


def outcome_summary(outcome: BattleOutcome) -> dict[str, object]:
    return {
        "winner": outcome.winner,
        "wins_a": outcome.wins_a,
        "wins_b": outcome.wins_b,
        "coin_flip": outcome.coin_flip,
    }


class BattleService:
    """NPC battles: the player is always side A, the NPC side B."""

    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db)],
        rng: Annotated[RandomSource, Depends(get_random_source)],
        card_service: Annotated[CardService, Depends()],
        inventory_service: Annotated[InventoryService, Depends()],
        player_service: Annotated[PlayerService, Depends()],
        event_log_service: Annotated[EventLogService, Depends()],
    ) -> None:
        self.db = db
        self.rng = rng
        self.card_service = card_service
        self.inventory_service = inventory_service
        self.player_service = player_service
        self.event_log_service = event_log_service

    async def can_battle(self, player: Player) -> CanBattleResponse:
        total_cards = await self.inventory_service.count_cards(player.id)

        reason = None
        if total_cards < settings.battle_min_cards:
            reason = f"You need at least {settings.battle_min_cards} cards to battle"
        elif player.currency < settings.battle_entry_cost:
            reason = f"You need at least {settings.battle_entry_cost} coins to battle"

        return CanBattleResponse(
            can_battle=reason is None,
            reason=reason,
            currency=player.currency,
            total_cards=total_cards,
            battle_wins=player.battle_wins,
            battle_losses=player.battle_losses,
            pack_chance=RewardCalculator(self.rng, get_reward_config()).pack_chance(
                player.battle_wins
            ),
        )

    async def start_battle(self, player: Player, slots: list[DeckSlot]) -> StartBattleResponse:
        """Validate the player's deck, charge the entry fee and draw an NPC deck.

        Raises:
            HTTPException: On an invalid deck, missing copies or insufficient currency
        """
        catalog = await self.card_service.get_catalog()
        try:
            player_deck = build_combat_deck(slots, catalog)
        except DeckValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        await self.inventory_service.ensure_owns(player.id, [slot.card_id for slot in slots])

        player = await lock_player(self.db, player.id)
        if player.currency < settings.battle_entry_cost:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient currency. Have: {player.currency}, "
                f"need: {settings.battle_entry_cost}",
            )

        try:
            npc_deck = NpcDeckGenerator(self.rng).generate(catalog.all_cards(), player.battle_wins)
        except DeckValidationError as e:
            raise HTTPException(status_code=503, detail=str(e)) from e

        player.currency -= settings.battle_entry_cost
        self.db.add(player)

        battle = Battle(
            player_id=player.id, player_deck=dump_deck(player_deck), npc_deck=dump_deck(npc_deck)
        )
        self.db.add(battle)
        await self.db.commit()
        await self.db.refresh(battle)

        logger.info(f"Player {player.id} started battle {battle.id}")
        return StartBattleResponse(
            battle_id=battle.id,
            player_cards=[CombatCardSchema.model_validate(card) for card in player_deck],
            npc_cards=[CombatCardSchema.model_validate(card) for card in npc_deck],
        )

    async def get_battle(self, battle_id: int, *, for_update: bool = False) -> Battle | None:
        stmt = select(Battle).where(Battle.id == battle_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.exec(stmt)
        return result.first()

    async def resolve_battle(self, player: Player, battle_id: int) -> BattleResultResponse:
        """Fight a started battle and settle its reward.

        Resolving is idempotent: the first result is stored on the battle and
        returned as-is on later calls.

        Raises:
            HTTPException: If the battle does not exist or belongs to someone else
        """
        battle = await self.get_battle(battle_id, for_update=True)
        if not battle or battle.player_id != player.id:
            raise HTTPException(status_code=404, detail="Battle not found")

        if battle.status == BattleStatus.RESOLVED and battle.result is not None:
            return BattleResultResponse.model_validate(battle.result)

        try:
            outcome = BattleEngine(self.rng).resolve_battle(
                load_deck(battle.player_deck), load_deck(battle.npc_deck)
            )
        except BattleInvariantError:
            logger.exception(f"Battle {battle.id} could not be resolved")
            raise

        player = await lock_player(self.db, player.id)
        sink = self.event_log_service.sink(player.id)
        player_won = outcome.winner is BattleSide.A
        reward = None
        if player_won:
            reward = RewardCalculator(self.rng, get_reward_config()).compute_reward(
                player.battle_wins
            )
            await self.player_service.record_win(player, reward)
            sink.emit(
                EventType.BATTLE_REWARD,
                {
                    "amount": reward.coins,
                    "pack_tier": reward.pack_tier,
                    "battle_id": battle.id,
                    **outcome_summary(outcome),
                },
            )
            sink.quest_progress(QuestType.WIN_BATTLE)
        else:
            self.player_service.record_loss(player)
            sink.emit(
                EventType.BATTLE_LOSS,
                {
                    "amount": -settings.battle_entry_cost,
                    "battle_id": battle.id,
                    **outcome_summary(outcome),
                },
            )

        response = BattleResultResponse(
            battle_id=battle.id,
            outcome=BattleOutcomeSchema.model_validate(outcome),
            player_won=player_won,
            reward=RewardSchema.model_validate(reward) if reward else None,
            new_balance=player.currency,
        )
        battle.result = response.model_dump(mode="json")
        battle.status = BattleStatus.RESOLVED
        self.db.add(battle)
        await self.db.commit()

        logger.info(
            f"Battle {battle.id} resolved: player {player.id} "
            f"{'won' if player_won else 'lost'} {outcome.wins_a}-{outcome.wins_b}"
            f"{' (coin flip)' if outcome.coin_flip else ''}"
        )
        return response
