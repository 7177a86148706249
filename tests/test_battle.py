import random

import pytest

from app.core.enums import BattleSide
from app.game.battle import DECK_SIZE, BattleEngine, DeckSlot, SideState, build_combat_deck
from app.game.errors import BattleInvariantError, DeckValidationError
from app.schemas.battle import BattleOutcomeSchema, dump_deck, load_deck
from tests.helpers import ScriptedRandom, make_deck


class TestRoundRules:
    def test_stalemate_trace(self, first_option_rng):
        deck_a = make_deck((10, 5), (8, 8), (6, 10))
        deck_b = make_deck((5, 10), (8, 8), (10, 5))

        outcome = BattleEngine(first_option_rng).resolve_battle(deck_a, deck_b)

        first = outcome.rounds[0]
        assert first.winner is BattleSide.A
        assert first.coin_flip is True
        assert first.damage == 10
        assert first.card_a.current_defense == 0
        assert first.card_b.current_defense == 0

        second = outcome.rounds[1]
        assert (second.card_a.position, second.card_b.position) == (2, 2)
        assert second.winner is BattleSide.A
        assert second.coin_flip is True

        third = outcome.rounds[2]
        assert third.winner is BattleSide.A
        assert third.coin_flip is False
        assert third.damage == 6
        assert third.card_a.current_defense == 0

        assert (outcome.wins_a, outcome.wins_b) == (3, 0)
        assert outcome.winner is BattleSide.A
        assert outcome.coin_flip is False

    def test_mutual_lethal_decided_by_attack_on_equal_defense(self, first_option_rng):
        deck_a = make_deck((10, 8), (1, 1), (1, 1))
        deck_b = make_deck((9, 8), (1, 1), (1, 1))

        first = BattleEngine(first_option_rng).resolve_battle(deck_a, deck_b).rounds[0]

        assert first.winner is BattleSide.A
        assert first.coin_flip is False
        assert first.damage == 10
        assert first.card_a.current_defense == 0
        assert first.card_b.current_defense == 0

    def test_mutual_lethal_decided_by_defense_first(self, first_option_rng):
        deck_a = make_deck((9, 6), (1, 1), (1, 1))
        deck_b = make_deck((10, 5), (1, 1), (1, 1))

        first = BattleEngine(first_option_rng).resolve_battle(deck_a, deck_b).rounds[0]

        assert first.winner is BattleSide.A
        assert first.damage == 10

    def test_mutual_lethal_full_tie_flips(self):
        deck = make_deck((5, 3), (1, 1), (1, 1))
        # Second side wins the flip
        first = BattleEngine(ScriptedRandom([0.7])).resolve_battle(deck, deck).rounds[0]

        assert first.winner is BattleSide.B
        assert first.coin_flip is True

    def test_survivor_carries_into_next_round(self, first_option_rng):
        deck_a = make_deck((10, 10), (1, 1), (1, 1))
        deck_b = make_deck((3, 3), (3, 3), (3, 3))

        outcome = BattleEngine(first_option_rng).resolve_battle(deck_a, deck_b)

        cards_a = [r.card_a for r in outcome.rounds]
        assert [c.position for c in cards_a] == [1, 1, 1]
        assert [c.is_survivor for c in cards_a] == [False, True, True]
        assert [c.starting_defense for c in cards_a] == [10, 7, 4]
        assert [c.current_defense for c in cards_a] == [7, 4, 1]
        assert [r.card_b.position for r in outcome.rounds] == [1, 2, 3]
        assert outcome.wins_a == 3

    def test_card_without_defense_loses_outright(self, first_option_rng):
        deck_a = make_deck((5, 0), (5, 0), (5, 0))
        deck_b = make_deck((3, 3), (1, 1), (1, 1))

        outcome = BattleEngine(first_option_rng).resolve_battle(deck_a, deck_b)

        assert [r.winner for r in outcome.rounds] == [BattleSide.B] * 3
        assert [r.damage for r in outcome.rounds] == [3, 3, 3]
        assert [r.card_b.position for r in outcome.rounds] == [1, 1, 1]
        assert outcome.winner is BattleSide.B

    def test_both_without_defense_flip(self, first_option_rng):
        deck = make_deck((1, 0), (1, 0), (1, 0))

        outcome = BattleEngine(first_option_rng).resolve_battle(deck, deck)

        assert all(r.coin_flip and r.damage == 0 for r in outcome.rounds)
        assert outcome.winner is BattleSide.A


class TestDeckCursor:
    def test_fresh_card_advances_cursor(self):
        deck = make_deck((1, 1), (2, 2), (3, 3))
        card, cursor = BattleEngine._next_card(deck, SideState(next_fresh_index=1), BattleSide.A)
        assert card.attack == 2
        assert cursor == 2

    def test_exhausted_deck_raises(self):
        deck = make_deck((1, 1), (2, 2), (3, 3))
        with pytest.raises(BattleInvariantError):
            BattleEngine._next_card(deck, SideState(next_fresh_index=3), BattleSide.A)

    def test_defeated_survivor_does_not_hide_exhaustion(self):
        deck = make_deck((1, 1), (2, 2), (3, 3))
        fallen = deck[2].with_defense(0)
        with pytest.raises(BattleInvariantError):
            BattleEngine._next_card(
                deck, SideState(survivor=fallen, next_fresh_index=3), BattleSide.B
            )


class TestBattleProperties:
    @staticmethod
    def random_deck(rng: random.Random):
        return make_deck(*((rng.randint(0, 12), rng.randint(0, 12)) for _ in range(DECK_SIZE)))

    def test_always_three_rounds_and_a_winner(self):
        rng = random.Random(99)
        engine = BattleEngine(rng)
        for _ in range(500):
            outcome = engine.resolve_battle(self.random_deck(rng), self.random_deck(rng))

            assert len(outcome.rounds) == 3
            assert outcome.wins_a + outcome.wins_b == 3
            assert outcome.winner in {BattleSide.A, BattleSide.B}
            for result in outcome.rounds:
                assert result.card_a.current_defense >= 0
                assert result.card_b.current_defense >= 0
                assert result.damage >= 0

    def test_same_seed_same_battle(self):
        deck_rng = random.Random(3)
        deck_a, deck_b = self.random_deck(deck_rng), self.random_deck(deck_rng)

        first = BattleEngine(random.Random(42)).resolve_battle(deck_a, deck_b)
        second = BattleEngine(random.Random(42)).resolve_battle(deck_a, deck_b)

        assert (
            BattleOutcomeSchema.model_validate(first).model_dump_json()
            == BattleOutcomeSchema.model_validate(second).model_dump_json()
        )

    def test_odd_round_count_needs_no_final_flip(self):
        deck = make_deck((1, 0), (1, 0), (1, 0))
        outcome = BattleEngine(ScriptedRandom([0.0, 0.9, 0.9])).resolve_battle(deck, deck)

        assert (outcome.wins_a, outcome.wins_b) == (1, 2)
        assert outcome.coin_flip is False

    def test_deck_roundtrip_through_storage(self):
        deck = make_deck((10, 5), (8, 8), (6, 10))
        assert load_deck(dump_deck(deck)) == deck


class TestBuildCombatDeck:
    def test_orders_by_position(self, catalog):
        deck = build_combat_deck(
            [DeckSlot(card_id=6, position=3), DeckSlot(1, 1), DeckSlot(4, 2)], catalog
        )
        assert [(c.card_id, c.position) for c in deck] == [(1, 1), (4, 2), (6, 3)]
        assert all(c.current_defense == c.defense for c in deck)

    def test_allows_duplicate_cards(self, catalog):
        deck = build_combat_deck([DeckSlot(1, 1), DeckSlot(1, 2), DeckSlot(1, 3)], catalog)
        assert [c.card_id for c in deck] == [1, 1, 1]

    @pytest.mark.parametrize(
        "slots",
        [
            [DeckSlot(1, 1), DeckSlot(2, 2)],
            [DeckSlot(1, 1), DeckSlot(2, 1), DeckSlot(3, 2)],
            [DeckSlot(1, 1), DeckSlot(2, 2), DeckSlot(3, 4)],
            [DeckSlot(1, 1), DeckSlot(2, 2), DeckSlot(999, 3)],
        ],
        ids=["too-small", "duplicate-position", "bad-position", "unknown-card"],
    )
    def test_rejects_invalid_decks(self, catalog, slots):
        with pytest.raises(DeckValidationError):
            build_combat_deck(slots, catalog)

    def test_engine_rejects_short_decks(self, first_option_rng):
        with pytest.raises(DeckValidationError):
            BattleEngine(first_option_rng).resolve_battle(make_deck((1, 1)), make_deck((1, 1)))
