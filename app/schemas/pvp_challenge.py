from pydantic import BaseModel, Field

from app.core.enums import BattleSide
from app.schemas.battle import BattleOutcomeSchema, DeckSlotRequest, RewardSchema


class PvPChallengeCreate(BaseModel):
    opponent_id: int


class SubmitDeckRequest(BaseModel):
    cards: list[DeckSlotRequest] = Field(min_length=3, max_length=3)


class SubmitDeckResponse(BaseModel):
    both_ready: bool


class PvPBattleResult(BaseModel):
    """PvP battle result; side A is the challenger, side B the opponent."""

    challenge_id: int
    winner_id: int
    loser_id: int
    winner_side: BattleSide
    outcome: BattleOutcomeSchema
    reward: RewardSchema
    winner_new_balance: int
