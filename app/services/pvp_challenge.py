import datetime
from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends, HTTPException
from loguru import logger
from sqlmodel import and_, col, or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.core.enums import BattleSide, EventType, PvPStatus, QuestType
from app.game.battle import BattleEngine, DeckSlot, build_combat_deck
from app.game.errors import BattleInvariantError, DeckValidationError
from app.game.random_source import RandomSource, get_random_source
from app.game.rewards import RewardCalculator
from app.models.player import Player
from app.models.pvp_challenge import PvPChallenge
from app.schemas.battle import BattleOutcomeSchema, RewardSchema, dump_deck, load_deck
from app.schemas.common import PaginationData
from app.schemas.pvp_challenge import PvPBattleResult, SubmitDeckResponse
from app.services.battle import outcome_summary
from app.services.card import CardService
from app.services.event_log import EventLogService
from app.services.inventory import InventoryService
from app.services.player import PlayerService, get_reward_config, lock_player
from app.utils.misc import get_utc_now


class PvPChallengeService:
    """Player versus player battles: the challenger is side A, the opponent side B."""

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

    async def get_pvp_challenges(
        self, *, page: int, page_size: int, player_id: int, status: PvPStatus | None = None
    ) -> tuple[Sequence[PvPChallenge], PaginationData]:
        offset = (page - 1) * page_size

        query = select(PvPChallenge).where(
            or_(PvPChallenge.challenger_id == player_id, PvPChallenge.opponent_id == player_id)
        )
        if status is not None:
            query = query.where(PvPChallenge.status == status)

        total_items_result = await self.db.exec(query)
        total_items = len(total_items_result.all())

        result = await self.db.exec(
            query.order_by(col(PvPChallenge.id).desc()).offset(offset).limit(page_size)
        )
        pvp_challenges = result.all()

        pagination = PaginationData.from_total(
            page=page, page_size=page_size, total_items=total_items
        )

        return pvp_challenges, pagination

    async def get_pvp_challenge(
        self, pvp_challenge_id: int, *, for_update: bool = False
    ) -> PvPChallenge | None:
        stmt = select(PvPChallenge).where(PvPChallenge.id == pvp_challenge_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.exec(stmt)
        return result.first()

    async def get_participant_challenge(
        self, pvp_challenge_id: int, player_id: int, *, for_update: bool = False
    ) -> PvPChallenge:
        challenge = await self.get_pvp_challenge(pvp_challenge_id, for_update=for_update)
        if not challenge or player_id not in {challenge.challenger_id, challenge.opponent_id}:
            raise HTTPException(status_code=404, detail="Challenge not found")
        return challenge

    async def _ensure_min_cards(self, player_id: int, who: str) -> None:
        if await self.inventory_service.count_cards(player_id) < settings.battle_min_cards:
            raise HTTPException(
                status_code=400,
                detail=f"{who} needs at least {settings.battle_min_cards} cards to battle",
            )

    async def create_challenge(self, challenger: Player, opponent_id: int) -> PvPChallenge:
        """Challenge another player.

        Raises:
            HTTPException: On a self challenge, an unknown opponent, too few cards,
                or an already open challenge between the two players
        """
        if challenger.id == opponent_id:
            raise HTTPException(status_code=400, detail="You cannot challenge yourself")

        await self.player_service.get_player_or_404(opponent_id)
        await self._ensure_min_cards(challenger.id, "You")
        await self._ensure_min_cards(opponent_id, "Opponent")

        now = get_utc_now()
        existing = await self.db.exec(
            select(PvPChallenge).where(
                col(PvPChallenge.status).in_((PvPStatus.PENDING, PvPStatus.ACCEPTED)),
                or_(
                    and_(
                        PvPChallenge.challenger_id == challenger.id,
                        PvPChallenge.opponent_id == opponent_id,
                    ),
                    and_(
                        PvPChallenge.challenger_id == opponent_id,
                        PvPChallenge.opponent_id == challenger.id,
                    ),
                ),
            )
        )
        if any(challenge.is_open(now) for challenge in existing.all()):
            raise HTTPException(
                status_code=400, detail="An open challenge between you already exists"
            )

        challenge = PvPChallenge(
            challenger_id=challenger.id,
            opponent_id=opponent_id,
            expires_at=now + datetime.timedelta(seconds=settings.pvp_request_expiry_seconds),
        )
        self.db.add(challenge)
        await self.db.commit()
        await self.db.refresh(challenge)

        logger.info(f"Player {challenger.id} challenged player {opponent_id} ({challenge.id})")
        return challenge

    async def respond(self, player: Player, pvp_challenge_id: int, *, accept: bool) -> PvPChallenge:
        challenge = await self.get_participant_challenge(
            pvp_challenge_id, player.id, for_update=True
        )
        if challenge.opponent_id != player.id:
            raise HTTPException(
                status_code=403, detail="Only the challenged player can respond"
            )
        if challenge.status != PvPStatus.PENDING:
            raise HTTPException(
                status_code=400, detail=f"Challenge is already {challenge.status}"
            )

        now = get_utc_now()
        if accept:
            if challenge.is_expired(now):
                raise HTTPException(status_code=400, detail="Challenge has expired")
            challenge.status = PvPStatus.ACCEPTED
            challenge.expires_at = now + datetime.timedelta(
                seconds=settings.pvp_deck_window_seconds
            )
        else:
            challenge.status = PvPStatus.DECLINED
        self.db.add(challenge)
        await self.db.commit()
        await self.db.refresh(challenge)
        return challenge

    async def cancel(self, player: Player, pvp_challenge_id: int) -> PvPChallenge:
        """Withdraw a challenge that has not been fought yet.

        Raises:
            HTTPException: If the caller is not the challenger or the challenge is closed
        """
        challenge = await self.get_participant_challenge(
            pvp_challenge_id, player.id, for_update=True
        )
        if challenge.challenger_id != player.id:
            raise HTTPException(
                status_code=403, detail="Only the challenger can cancel a challenge"
            )
        if challenge.status not in {PvPStatus.PENDING, PvPStatus.ACCEPTED}:
            raise HTTPException(
                status_code=400, detail=f"Challenge is already {challenge.status}"
            )

        challenge.status = PvPStatus.CANCELLED
        self.db.add(challenge)
        await self.db.commit()
        await self.db.refresh(challenge)

        logger.info(f"Player {player.id} cancelled challenge {challenge.id}")
        return challenge

    async def submit_deck(
        self, player: Player, pvp_challenge_id: int, slots: list[DeckSlot]
    ) -> SubmitDeckResponse:
        """Lock in one side's deck for an accepted challenge.

        Raises:
            HTTPException: If the challenge is not accepted, the deck window has
                closed, the deck is invalid, or the player lacks the copies
        """
        challenge = await self.get_participant_challenge(
            pvp_challenge_id, player.id, for_update=True
        )
        if challenge.status != PvPStatus.ACCEPTED:
            raise HTTPException(status_code=400, detail="Challenge has not been accepted")
        if challenge.is_expired(get_utc_now()):
            raise HTTPException(status_code=400, detail="Deck submission window has closed")

        catalog = await self.card_service.get_catalog()
        try:
            deck = build_combat_deck(slots, catalog)
        except DeckValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        await self.inventory_service.ensure_owns(player.id, [slot.card_id for slot in slots])

        if player.id == challenge.challenger_id:
            challenge.challenger_deck = dump_deck(deck)
        else:
            challenge.opponent_deck = dump_deck(deck)
        self.db.add(challenge)
        await self.db.commit()
        await self.db.refresh(challenge)

        return SubmitDeckResponse(both_ready=challenge.decks_ready)

    async def resolve(self, player: Player, pvp_challenge_id: int) -> PvPBattleResult:
        """Fight an accepted challenge once both decks are in.

        The first result is stored on the challenge; either participant resolving
        again gets the same battle back.
        """
        challenge = await self.get_participant_challenge(
            pvp_challenge_id, player.id, for_update=True
        )
        if challenge.status == PvPStatus.COMPLETED and challenge.battle_result is not None:
            return PvPBattleResult.model_validate(challenge.battle_result)
        if challenge.status != PvPStatus.ACCEPTED:
            raise HTTPException(status_code=400, detail="Challenge has not been accepted")
        if not challenge.decks_ready:
            raise HTTPException(status_code=400, detail="Both players must submit a deck first")

        try:
            outcome = BattleEngine(self.rng).resolve_battle(
                load_deck(challenge.challenger_deck), load_deck(challenge.opponent_deck)
            )
        except BattleInvariantError:
            logger.exception(f"PvP challenge {challenge.id} could not be resolved")
            raise

        if outcome.winner is BattleSide.A:
            winner_id, loser_id = challenge.challenger_id, challenge.opponent_id
        else:
            winner_id, loser_id = challenge.opponent_id, challenge.challenger_id
        winner = await lock_player(self.db, winner_id)
        loser = await lock_player(self.db, loser_id)

        reward = RewardCalculator(self.rng, get_reward_config()).compute_reward(winner.battle_wins)
        await self.player_service.record_win(winner, reward)
        self.player_service.record_loss(loser)

        summary = {"challenge_id": challenge.id, **outcome_summary(outcome)}
        winner_sink = self.event_log_service.sink(winner.id)
        winner_sink.emit(
            EventType.PVP_BATTLE,
            {"amount": reward.coins, "won": True, "pack_tier": reward.pack_tier, **summary},
        )
        loser_sink = self.event_log_service.sink(loser.id)
        loser_sink.emit(EventType.PVP_BATTLE, {"won": False, **summary})
        winner_sink.quest_progress(QuestType.PVP_BATTLE)
        loser_sink.quest_progress(QuestType.PVP_BATTLE)

        result = PvPBattleResult(
            challenge_id=challenge.id,
            winner_id=winner.id,
            loser_id=loser.id,
            winner_side=outcome.winner,
            outcome=BattleOutcomeSchema.model_validate(outcome),
            reward=RewardSchema.model_validate(reward),
            winner_new_balance=winner.currency,
        )
        challenge.battle_result = result.model_dump(mode="json")
        challenge.winner_id = winner.id
        challenge.status = PvPStatus.COMPLETED
        self.db.add(challenge)
        await self.db.commit()

        logger.info(
            f"PvP challenge {challenge.id} resolved: {winner.id} beat {loser.id} "
            f"{outcome.wins_for(outcome.winner)}-{outcome.wins_for(outcome.winner.opponent)}"
        )
        return result
