from app.core.enums import CardRarity, PackTier
from app.game.catalog import InMemoryCardCatalog
from app.game.packs import PackOpener, aggregate_awards
from app.game.rarity import PACKS
from tests.helpers import ScriptedRandom, make_card


class TestPackOpener:
    def test_empty_rarity_pool_skips_slot(self):
        catalog = InMemoryCardCatalog([make_card(1, CardRarity.COMMON)])
        weights = {CardRarity.COMMON: 1, CardRarity.RARE: 1}
        # roll common, pick, roll rare (no rare cards), repeat
        opener = PackOpener(catalog, ScriptedRandom([0.0, 0.0, 0.99]))

        cards = opener.open_pack(PackTier.NORMAL, 5, weights)

        assert len(cards) == 3
        assert {card.id for card in cards} == {1}

    def test_empty_catalog_awards_nothing(self, seeded_rng):
        opener = PackOpener(InMemoryCardCatalog([]), seeded_rng)
        pack = PACKS[PackTier.SMALL]
        assert opener.open_pack(pack.tier, pack.card_count, pack.weights) == []

    def test_full_pack_from_populated_catalog(self, catalog, seeded_rng):
        pack = PACKS[PackTier.SMALL]
        cards = PackOpener(catalog, seeded_rng).open_pack(
            pack.tier, pack.card_count, pack.weights, luck_multiplier=2
        )

        assert len(cards) == pack.card_count
        assert all(pack.weights[card.rarity] > 0 for card in cards)

    def test_picks_uniformly_inside_pool(self):
        catalog = InMemoryCardCatalog([make_card(i) for i in range(1, 5)])
        opener = PackOpener(catalog, ScriptedRandom([0.0, 0.75]))

        cards = opener.open_pack(PackTier.SMALL, 1, {CardRarity.COMMON: 1})

        assert cards[0].id == 4


def test_aggregate_awards_merges_duplicates():
    a, b = make_card(1), make_card(2)
    assert aggregate_awards([a, b, a, a]) == {1: 3, 2: 1}
    assert aggregate_awards([]) == {}
