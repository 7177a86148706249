"""Opponent deck generation for NPC battles.

NPC decks get stronger as the player racks up wins: every three wins shifts
weight away from common/uncommon cards towards the rarer tiers, and commons
disappear entirely from the third win on.
"""

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from app.core.enums import CardRarity
from app.game.battle import DECK_SIZE, CombatCard
from app.game.catalog import CardDefinition
from app.game.errors import DeckValidationError
from app.game.random_source import RandomSource

NPC_BASE_WEIGHTS: Mapping[CardRarity, float] = MappingProxyType(
    {
        CardRarity.COMMON: 100,
        CardRarity.UNCOMMON: 50,
        CardRarity.RARE: 25,
        CardRarity.LEGENDARY: 10,
        CardRarity.MYTHICAL: 5,
        CardRarity.DIVINE: 3,
        CardRarity.PRISMATIC: 2,
        CardRarity.TRANSCENDENT: 1,
        CardRarity.SECRET: 0.5,
        CardRarity.EXCLUSIVE: 0,
    }
)

COMMON_EXCLUDED_AT_WINS = 3
WINS_PER_BONUS = 3
MIN_LOW_TIER_WEIGHT = 10


def npc_rarity_weight(rarity: CardRarity, prior_wins: int) -> float:
    base = NPC_BASE_WEIGHTS[rarity]
    if base <= 0:
        return 0
    bonus = prior_wins // WINS_PER_BONUS

    if rarity is CardRarity.COMMON:
        if prior_wins >= COMMON_EXCLUDED_AT_WINS:
            return 0
        return max(MIN_LOW_TIER_WEIGHT, base - bonus * 15)
    if rarity is CardRarity.UNCOMMON:
        return max(MIN_LOW_TIER_WEIGHT, base - bonus * 5)
    return base + bonus * NPC_BASE_WEIGHTS[CardRarity.COMMON] / base


class NpcDeckGenerator:
    def __init__(self, rng: RandomSource) -> None:
        self.rng = rng

    def generate(self, cards: Sequence[CardDefinition], prior_wins: int) -> list[CombatCard]:
        """Draw a deck of distinctly named cards, weighted by rarity.

        Raises:
            DeckValidationError: If the catalog cannot supply enough distinct cards.
        """
        weighted = [
            (card, weight)
            for card in cards
            if (weight := npc_rarity_weight(card.rarity, prior_wins)) > 0
        ]
        used_names: set[str] = set()
        deck: list[CombatCard] = []

        while len(deck) < DECK_SIZE:
            available = [(card, w) for card, w in weighted if card.name not in used_names]
            if not available:
                msg = f"Not enough distinct cards for an NPC deck ({len(deck)}/{DECK_SIZE})"
                raise DeckValidationError(msg)

            card = self._select(available)
            used_names.add(card.name)
            deck.append(CombatCard.from_definition(card, position=len(deck) + 1))

        return deck

    def _select(self, available: Sequence[tuple[CardDefinition, float]]) -> CardDefinition:
        remaining = self.rng.random() * sum(w for _, w in available)
        for card, weight in available:
            remaining -= weight
            if remaining <= 0:
                return card
        return available[-1][0]
