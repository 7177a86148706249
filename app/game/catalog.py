from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from app.core.enums import CardRarity


@dataclass(frozen=True, slots=True)
class CardDefinition:
    """Immutable catalog entry as seen by the game core."""

    id: int
    name: str
    rarity: CardRarity
    attack: int
    defense: int
    cost: int = 0


class CardCatalog(Protocol):
    def get_cards_by_rarity(self, rarity: CardRarity) -> Sequence[CardDefinition]: ...

    def get_card(self, card_id: int) -> CardDefinition | None: ...


class InMemoryCardCatalog:
    """Catalog snapshot grouped by rarity, built once per request."""

    def __init__(self, cards: Iterable[CardDefinition]) -> None:
        self._cards: dict[int, CardDefinition] = {}
        self._by_rarity: defaultdict[CardRarity, list[CardDefinition]] = defaultdict(list)
        for card in cards:
            self._cards[card.id] = card
            self._by_rarity[card.rarity].append(card)

    def __len__(self) -> int:
        return len(self._cards)

    def all_cards(self) -> list[CardDefinition]:
        return list(self._cards.values())

    def get_cards_by_rarity(self, rarity: CardRarity) -> Sequence[CardDefinition]:
        return self._by_rarity.get(rarity, [])

    def get_card(self, card_id: int) -> CardDefinition | None:
        return self._cards.get(card_id)
