from collections.abc import Iterable

from app.core.enums import CardRarity
from app.game.battle import CombatCard
from app.game.catalog import CardDefinition


class ScriptedRandom:
    """Replays a fixed sequence of draws, cycling when it runs out."""

    def __init__(self, values: Iterable[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


def make_card(
    card_id: int,
    rarity: CardRarity = CardRarity.COMMON,
    attack: int = 2,
    defense: int = 2,
    name: str | None = None,
) -> CardDefinition:
    return CardDefinition(
        id=card_id,
        name=name or f"Card {card_id}",
        rarity=rarity,
        attack=attack,
        defense=defense,
    )


def make_deck(*stats: tuple[int, int]) -> list[CombatCard]:
    """Combat deck from (attack, defense) pairs, positions in order."""
    return [
        CombatCard.from_definition(make_card(i, attack=attack, defense=defense), position=i)
        for i, (attack, defense) in enumerate(stats, start=1)
    ]
