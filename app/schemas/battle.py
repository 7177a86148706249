from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import BattleSide, CardRarity, PackTier
from app.game.battle import CombatCard, DeckSlot


class DeckSlotRequest(BaseModel):
    card_id: int
    position: int = Field(ge=1, le=3)

    def to_slot(self) -> DeckSlot:
        return DeckSlot(card_id=self.card_id, position=self.position)


class StartBattleRequest(BaseModel):
    cards: list[DeckSlotRequest] = Field(min_length=3, max_length=3)


class CombatCardSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    card_id: int
    name: str
    rarity: CardRarity
    attack: int
    defense: int
    position: int
    current_defense: int
    starting_defense: int
    is_survivor: bool = False

    def to_combat_card(self) -> CombatCard:
        return CombatCard(**self.model_dump())


class RoundResultSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    round: int
    card_a: CombatCardSchema
    card_b: CombatCardSchema
    winner: BattleSide
    damage: int
    coin_flip: bool


class BattleOutcomeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rounds: list[RoundResultSchema]
    wins_a: int
    wins_b: int
    winner: BattleSide
    coin_flip: bool


class RewardSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    coins: int
    pack_tier: PackTier | None


class CanBattleResponse(BaseModel):
    can_battle: bool
    reason: str | None = None
    currency: int
    total_cards: int
    battle_wins: int
    battle_losses: int
    pack_chance: float


class StartBattleResponse(BaseModel):
    battle_id: int
    player_cards: list[CombatCardSchema]
    npc_cards: list[CombatCardSchema]


class BattleResultResponse(BaseModel):
    """NPC battle result; side A is the player, side B the NPC."""

    battle_id: int
    outcome: BattleOutcomeSchema
    player_won: bool
    reward: RewardSchema | None
    new_balance: int


def dump_deck(deck: list[CombatCard]) -> list[dict[str, Any]]:
    return [CombatCardSchema.model_validate(card).model_dump(mode="json") for card in deck]


def load_deck(data: list[dict[str, Any]]) -> list[CombatCard]:
    return [CombatCardSchema.model_validate(card).to_combat_card() for card in data]
