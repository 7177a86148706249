from dataclasses import dataclass

from app.core.enums import PackTier
from app.game.random_source import RandomSource, pick, randint_inclusive


@dataclass(frozen=True, slots=True)
class RewardConfig:
    reward_min: int = 30
    reward_max: int = 50
    base_pack_chance: float = 0.15
    pack_chance_per_win: float = 0.02
    max_pack_chance: float = 0.50
    pack_tiers: tuple[PackTier, ...] = (PackTier.SMALL, PackTier.NORMAL, PackTier.BIG)


@dataclass(frozen=True, slots=True)
class Reward:
    coins: int
    pack_tier: PackTier | None


class RewardCalculator:
    def __init__(self, rng: RandomSource, config: RewardConfig | None = None) -> None:
        self.rng = rng
        self.config = config or RewardConfig()

    def pack_chance(self, winner_prior_wins: int) -> float:
        """Pack drop probability, growing with the winner's win count up to a cap."""
        return min(
            self.config.max_pack_chance,
            self.config.base_pack_chance + winner_prior_wins * self.config.pack_chance_per_win,
        )

    def compute_reward(self, winner_prior_wins: int) -> Reward:
        coins = randint_inclusive(self.rng, self.config.reward_min, self.config.reward_max)

        pack_tier = None
        if self.rng.random() < self.pack_chance(winner_prior_wins):
            pack_tier = pick(self.rng, self.config.pack_tiers)

        return Reward(coins=coins, pack_tier=pack_tier)
