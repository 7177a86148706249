"""Three-round card battle resolution.

Each side plays one card per round. A card that wins its round with defense
left over carries into the next round as a survivor and the side does not
draw a fresh card from its deck.
"""

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass

from app.core.enums import BattleSide, CardRarity
from app.game.catalog import CardCatalog, CardDefinition
from app.game.errors import BattleInvariantError, DeckValidationError
from app.game.random_source import RandomSource, coin_flip

DECK_SIZE = 3
ROUNDS = 3


@dataclass(frozen=True, slots=True)
class DeckSlot:
    card_id: int
    position: int


@dataclass(frozen=True, slots=True)
class CombatCard:
    card_id: int
    name: str
    rarity: CardRarity
    attack: int
    defense: int
    position: int
    current_defense: int
    starting_defense: int
    is_survivor: bool = False

    @classmethod
    def from_definition(cls, card: CardDefinition, position: int) -> "CombatCard":
        return cls(
            card_id=card.id,
            name=card.name,
            rarity=card.rarity,
            attack=card.attack,
            defense=card.defense,
            position=position,
            current_defense=card.defense,
            starting_defense=card.defense,
        )

    def with_defense(self, value: int) -> "CombatCard":
        return dataclasses.replace(self, current_defense=max(0, value))


@dataclass(frozen=True, slots=True)
class SideState:
    survivor: CombatCard | None = None
    next_fresh_index: int = 0


@dataclass(frozen=True, slots=True)
class RoundResult:
    round: int
    card_a: CombatCard
    card_b: CombatCard
    winner: BattleSide
    damage: int
    coin_flip: bool


@dataclass(frozen=True, slots=True)
class BattleOutcome:
    rounds: tuple[RoundResult, ...]
    wins_a: int
    wins_b: int
    winner: BattleSide
    coin_flip: bool
    """Whether equal round wins were settled by a coin flip"""

    def wins_for(self, side: BattleSide) -> int:
        return self.wins_a if side is BattleSide.A else self.wins_b


@dataclass(frozen=True, slots=True)
class _Resolution:
    card_a: CombatCard
    card_b: CombatCard
    winner: BattleSide
    damage: int
    coin_flip: bool
    survivor_a: bool
    survivor_b: bool


def build_combat_deck(slots: Sequence[DeckSlot], catalog: CardCatalog) -> list[CombatCard]:
    """Validate a deck selection and turn it into position-ordered combat cards.

    Raises:
        DeckValidationError: On a wrong deck size, bad or duplicate positions, or
            unknown cards.
    """
    if len(slots) != DECK_SIZE:
        msg = f"A deck must contain exactly {DECK_SIZE} cards, got {len(slots)}"
        raise DeckValidationError(msg)

    positions = sorted(slot.position for slot in slots)
    if positions != list(range(1, DECK_SIZE + 1)):
        msg = f"Deck positions must be exactly 1..{DECK_SIZE}, got {positions}"
        raise DeckValidationError(msg)

    deck: list[CombatCard] = []
    for slot in sorted(slots, key=lambda s: s.position):
        card = catalog.get_card(slot.card_id)
        if card is None:
            msg = f"Card {slot.card_id} does not exist"
            raise DeckValidationError(msg)
        deck.append(CombatCard.from_definition(card, slot.position))
    return deck


class BattleEngine:
    def __init__(self, rng: RandomSource) -> None:
        self.rng = rng

    def resolve_battle(
        self, deck_a: Sequence[CombatCard], deck_b: Sequence[CombatCard]
    ) -> BattleOutcome:
        """Play three rounds between two position-sorted decks."""
        if len(deck_a) != DECK_SIZE or len(deck_b) != DECK_SIZE:
            msg = f"Both decks must hold {DECK_SIZE} cards"
            raise DeckValidationError(msg)

        state_a, state_b = SideState(), SideState()
        rounds: list[RoundResult] = []
        wins = {BattleSide.A: 0, BattleSide.B: 0}

        for round_number in range(1, ROUNDS + 1):
            card_a, cursor_a = self._next_card(deck_a, state_a, BattleSide.A)
            card_b, cursor_b = self._next_card(deck_b, state_b, BattleSide.B)

            resolution = self._resolve_round(card_a, card_b)
            wins[resolution.winner] += 1
            rounds.append(
                RoundResult(
                    round=round_number,
                    card_a=resolution.card_a,
                    card_b=resolution.card_b,
                    winner=resolution.winner,
                    damage=resolution.damage,
                    coin_flip=resolution.coin_flip,
                )
            )

            state_a = SideState(
                survivor=resolution.card_a if resolution.survivor_a else None,
                next_fresh_index=cursor_a,
            )
            state_b = SideState(
                survivor=resolution.card_b if resolution.survivor_b else None,
                next_fresh_index=cursor_b,
            )

        decided_by_flip = wins[BattleSide.A] == wins[BattleSide.B]
        if decided_by_flip:
            winner = BattleSide.A if coin_flip(self.rng) else BattleSide.B
        else:
            winner = BattleSide.A if wins[BattleSide.A] > wins[BattleSide.B] else BattleSide.B

        return BattleOutcome(
            rounds=tuple(rounds),
            wins_a=wins[BattleSide.A],
            wins_b=wins[BattleSide.B],
            winner=winner,
            coin_flip=decided_by_flip,
        )

    @staticmethod
    def _next_card(
        deck: Sequence[CombatCard], state: SideState, side: BattleSide
    ) -> tuple[CombatCard, int]:
        """Return the card entering this round and the side's updated deck cursor."""
        if state.survivor is not None and state.survivor.current_defense > 0:
            survivor = dataclasses.replace(
                state.survivor,
                starting_defense=state.survivor.current_defense,
                is_survivor=True,
            )
            return survivor, state.next_fresh_index

        if state.next_fresh_index >= len(deck):
            msg = f"Side {side} exhausted its deck without a surviving card"
            raise BattleInvariantError(msg)

        fresh = deck[state.next_fresh_index]
        card = dataclasses.replace(
            fresh,
            current_defense=fresh.defense,
            starting_defense=fresh.defense,
            is_survivor=False,
        )
        return card, state.next_fresh_index + 1

    def _resolve_round(self, a: CombatCard, b: CombatCard) -> _Resolution:  # noqa: PLR0911
        a_down = a.current_defense <= 0
        b_down = b.current_defense <= 0

        # A card entering with no defense is knocked out instantly
        if a_down and b_down:
            winner = BattleSide.A if coin_flip(self.rng) else BattleSide.B
            return _Resolution(
                card_a=a.with_defense(0),
                card_b=b.with_defense(0),
                winner=winner,
                damage=0,
                coin_flip=True,
                survivor_a=False,
                survivor_b=False,
            )
        if a_down:
            return _Resolution(
                card_a=a.with_defense(0),
                card_b=b,
                winner=BattleSide.B,
                damage=b.attack,
                coin_flip=False,
                survivor_a=False,
                survivor_b=True,
            )
        if b_down:
            return _Resolution(
                card_a=a,
                card_b=b.with_defense(0),
                winner=BattleSide.A,
                damage=a.attack,
                coin_flip=False,
                survivor_a=True,
                survivor_b=False,
            )

        a_breaks = a.attack > b.current_defense
        b_breaks = b.attack > a.current_defense

        if a_breaks and not b_breaks:
            card_a = a.with_defense(a.current_defense - b.attack)
            return _Resolution(
                card_a=card_a,
                card_b=b.with_defense(0),
                winner=BattleSide.A,
                damage=a.attack,
                coin_flip=False,
                survivor_a=card_a.current_defense > 0,
                survivor_b=False,
            )
        if b_breaks and not a_breaks:
            card_b = b.with_defense(b.current_defense - a.attack)
            return _Resolution(
                card_a=a.with_defense(0),
                card_b=card_b,
                winner=BattleSide.B,
                damage=b.attack,
                coin_flip=False,
                survivor_a=False,
                survivor_b=card_b.current_defense > 0,
            )

        if a_breaks and b_breaks:
            # Mutual lethal: defense decides, then attack, then a coin flip
            flipped = False
            if a.current_defense != b.current_defense:
                winner = BattleSide.A if a.current_defense > b.current_defense else BattleSide.B
            elif a.attack != b.attack:
                winner = BattleSide.A if a.attack > b.attack else BattleSide.B
            else:
                flipped = True
                winner = BattleSide.A if coin_flip(self.rng) else BattleSide.B
            return _Resolution(
                card_a=a.with_defense(0),
                card_b=b.with_defense(0),
                winner=winner,
                damage=max(a.attack, b.attack),
                coin_flip=flipped,
                survivor_a=False,
                survivor_b=False,
            )

        # Stalemate: neither attack breaks through
        if coin_flip(self.rng):
            card_a = a.with_defense(a.current_defense - b.attack)
            return _Resolution(
                card_a=card_a,
                card_b=b.with_defense(b.current_defense - a.attack),
                winner=BattleSide.A,
                damage=a.attack,
                coin_flip=True,
                survivor_a=card_a.current_defense > 0,
                survivor_b=False,
            )
        card_b = b.with_defense(b.current_defense - a.attack)
        return _Resolution(
            card_a=a.with_defense(a.current_defense - b.attack),
            card_b=card_b,
            winner=BattleSide.B,
            damage=b.attack,
            coin_flip=True,
            survivor_a=False,
            survivor_b=card_b.current_defense > 0,
        )
