import datetime
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from loguru import logger

from app.core.enums import CardRarity, LuckBoostType, PackTier
from app.game.random_source import RandomSource

type WeightTable = Mapping[CardRarity, float]

# Every tier except common/uncommon is scaled by an active luck boost
LUCK_AFFECTED_RARITIES = frozenset(CardRarity) - {CardRarity.COMMON, CardRarity.UNCOMMON}

FALLBACK_RARITY = CardRarity.COMMON


def _weights(
    common: float = 0,
    uncommon: float = 0,
    rare: float = 0,
    legendary: float = 0,
    mythical: float = 0,
    divine: float = 0,
    prismatic: float = 0,
    transcendent: float = 0,
    secret: float = 0,
    exclusive: float = 0,
) -> WeightTable:
    # Authored in rarity order, which is the order the roller walks
    return MappingProxyType(
        {
            CardRarity.COMMON: common,
            CardRarity.UNCOMMON: uncommon,
            CardRarity.RARE: rare,
            CardRarity.LEGENDARY: legendary,
            CardRarity.MYTHICAL: mythical,
            CardRarity.DIVINE: divine,
            CardRarity.PRISMATIC: prismatic,
            CardRarity.TRANSCENDENT: transcendent,
            CardRarity.SECRET: secret,
            CardRarity.EXCLUSIVE: exclusive,
        }
    )


@dataclass(frozen=True, slots=True)
class PackDefinition:
    tier: PackTier
    name: str
    description: str
    cost: int
    card_count: int
    weights: WeightTable


@dataclass(frozen=True, slots=True)
class LuckBoostDefinition:
    type: LuckBoostType
    name: str
    description: str
    cost: int
    multiplier: float
    duration: datetime.timedelta


@dataclass(frozen=True, slots=True)
class ActiveLuckBoost:
    multiplier: float
    expires_at: datetime.datetime


PACKS: Mapping[PackTier, PackDefinition] = MappingProxyType(
    {
        PackTier.SMALL: PackDefinition(
            tier=PackTier.SMALL,
            name="Small Pack",
            description="Contains 3 cards with basic rarities",
            cost=30,
            card_count=3,
            weights=_weights(common=70, uncommon=25, rare=5),
        ),
        PackTier.NORMAL: PackDefinition(
            tier=PackTier.NORMAL,
            name="Normal Pack",
            description="Contains 5 cards with better odds",
            cost=60,
            card_count=5,
            weights=_weights(common=55, uncommon=30, rare=12, legendary=3),
        ),
        PackTier.BIG: PackDefinition(
            tier=PackTier.BIG,
            name="Big Pack",
            description="Contains 7 cards with good odds",
            cost=90,
            card_count=7,
            weights=_weights(common=45, uncommon=30, rare=15, legendary=8, mythical=2),
        ),
        PackTier.PREMIUM: PackDefinition(
            tier=PackTier.PREMIUM,
            name="Premium Pack",
            description="Contains 10 cards with great odds",
            cost=120,
            card_count=10,
            weights=_weights(
                common=35, uncommon=30, rare=18, legendary=10, mythical=5, divine=2
            ),
        ),
        PackTier.DELUXE: PackDefinition(
            tier=PackTier.DELUXE,
            name="Deluxe Pack",
            description="Contains 15 cards with amazing odds!",
            cost=150,
            card_count=15,
            weights=_weights(
                common=25,
                uncommon=25,
                rare=20,
                legendary=15,
                mythical=8,
                divine=4,
                prismatic=2,
                transcendent=1,
            ),
        ),
    }
)

LUCK_BOOSTS: Mapping[LuckBoostType, LuckBoostDefinition] = MappingProxyType(
    {
        LuckBoostType.LUCKY_CHARM: LuckBoostDefinition(
            type=LuckBoostType.LUCKY_CHARM,
            name="Lucky Charm",
            description="1.5x better odds for rare+ cards for 1 hour",
            cost=50,
            multiplier=1.5,
            duration=datetime.timedelta(hours=1),
        ),
        LuckBoostType.FORTUNE_COOKIE: LuckBoostDefinition(
            type=LuckBoostType.FORTUNE_COOKIE,
            name="Fortune Cookie",
            description="2x better odds for rare+ cards for 30 minutes",
            cost=75,
            multiplier=2,
            duration=datetime.timedelta(minutes=30),
        ),
        LuckBoostType.GOLDEN_HORSESHOE: LuckBoostDefinition(
            type=LuckBoostType.GOLDEN_HORSESHOE,
            name="Golden Horseshoe",
            description="3x better odds for rare+ cards for 15 minutes",
            cost=100,
            multiplier=3,
            duration=datetime.timedelta(minutes=15),
        ),
    }
)

# (min, max) coins per card instance, max exclusive
SELL_PRICES: Mapping[CardRarity, tuple[int, int]] = MappingProxyType(
    {
        CardRarity.COMMON: (10, 30),
        CardRarity.UNCOMMON: (30, 60),
        CardRarity.RARE: (60, 90),
        CardRarity.LEGENDARY: (90, 120),
        CardRarity.MYTHICAL: (120, 150),
        CardRarity.DIVINE: (150, 180),
        CardRarity.PRISMATIC: (180, 210),
        CardRarity.TRANSCENDENT: (210, 240),
        CardRarity.SECRET: (240, 270),
        CardRarity.EXCLUSIVE: (270, 300),
    }
)


def get_pack(tier: PackTier | str) -> PackDefinition:
    """Look up a pack definition.

    Raises:
        ValueError: If the tier is unknown.
    """
    return PACKS[PackTier(tier)]


def active_luck_multiplier(
    boosts: Iterable[ActiveLuckBoost], now: datetime.datetime
) -> float:
    """Return the highest multiplier among boosts that have not expired.

    Boosts never stack; with no active boost the multiplier is 1.
    """
    return max((b.multiplier for b in boosts if b.expires_at > now), default=1.0)


def sell_price(rarity: CardRarity, seed: int) -> int:
    """Deterministic sell price of one card instance.

    The same ``seed`` (acquisition timestamp plus instance index) always yields
    the same price, so an appraisal matches the later sale.
    """
    low, high = SELL_PRICES.get(rarity, SELL_PRICES[CardRarity.COMMON])
    fraction = abs(math.sin(seed * 9999)) % 1
    return math.floor(low + fraction * (high - low))


def adjust_weights(weights: WeightTable, luck_multiplier: float) -> dict[CardRarity, float]:
    """Scale rare-and-above weights by the luck multiplier, flooring the result."""
    if luck_multiplier < 1:
        msg = f"luck multiplier must be >= 1, got {luck_multiplier}"
        raise ValueError(msg)

    adjusted = dict(weights)
    if luck_multiplier > 1:
        for rarity, weight in adjusted.items():
            if rarity in LUCK_AFFECTED_RARITIES:
                adjusted[rarity] = math.floor(weight * luck_multiplier)
    return adjusted


class RarityRoller:
    """Weighted rarity draw against a pack weight table."""

    def __init__(self, rng: RandomSource) -> None:
        self.rng = rng

    def roll(self, weights: WeightTable, luck_multiplier: float = 1.0) -> CardRarity:
        adjusted = adjust_weights(weights, luck_multiplier)
        total = sum(adjusted.values())
        if total <= 0:
            logger.debug(f"Degenerate weight table, falling back to {FALLBACK_RARITY}")
            return FALLBACK_RARITY

        remaining = self.rng.random() * total
        last_positive = FALLBACK_RARITY
        for rarity, weight in adjusted.items():
            if weight <= 0:
                continue
            last_positive = rarity
            remaining -= weight
            if remaining <= 0:
                return rarity

        # Float remainder left after the walk lands on the last weighted entry
        return last_positive
