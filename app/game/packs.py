from collections import Counter
from collections.abc import Iterable

from loguru import logger

from app.core.enums import PackTier
from app.game.catalog import CardCatalog, CardDefinition
from app.game.random_source import RandomSource, pick
from app.game.rarity import RarityRoller, WeightTable


class PackOpener:
    """Turns a pack's rarity rolls into concrete catalog cards."""

    def __init__(self, catalog: CardCatalog, rng: RandomSource) -> None:
        self.catalog = catalog
        self.rng = rng
        self.roller = RarityRoller(rng)

    def open_pack(
        self, tier: PackTier, card_count: int, weights: WeightTable, luck_multiplier: float = 1.0
    ) -> list[CardDefinition]:
        """Roll ``card_count`` cards.

        A slot whose rolled rarity has no cards in the catalog is skipped, so the
        result may hold fewer than ``card_count`` cards.
        """
        awarded: list[CardDefinition] = []
        for slot in range(card_count):
            rarity = self.roller.roll(weights, luck_multiplier)
            pool = self.catalog.get_cards_by_rarity(rarity)
            if not pool:
                logger.debug(f"{tier} pack slot {slot} rolled {rarity} with an empty pool")
                continue
            awarded.append(pick(self.rng, pool))
        return awarded


def aggregate_awards(cards: Iterable[CardDefinition]) -> dict[int, int]:
    """Fold awarded cards into one quantity delta per card id."""
    return dict(Counter(card.id for card in cards))
