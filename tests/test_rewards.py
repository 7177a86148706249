import pytest

from app.core.enums import PackTier
from app.game.rewards import RewardCalculator, RewardConfig
from tests.helpers import ScriptedRandom


class TestPackChance:
    def test_grows_with_prior_wins(self, seeded_rng):
        calculator = RewardCalculator(seeded_rng)
        assert calculator.pack_chance(0) == pytest.approx(0.15)
        assert calculator.pack_chance(5) == pytest.approx(0.25)

    def test_capped(self, seeded_rng):
        calculator = RewardCalculator(seeded_rng)
        assert calculator.pack_chance(20) == pytest.approx(0.5)
        assert calculator.pack_chance(1_000) == pytest.approx(0.5)

    def test_custom_config(self, seeded_rng):
        config = RewardConfig(base_pack_chance=0.0, pack_chance_per_win=0.1, max_pack_chance=0.3)
        assert RewardCalculator(seeded_rng, config).pack_chance(2) == pytest.approx(0.2)


class TestComputeReward:
    def test_coins_within_range(self, seeded_rng):
        calculator = RewardCalculator(seeded_rng)
        coins = {calculator.compute_reward(5).coins for _ in range(5_000)}
        assert min(coins) == 30
        assert max(coins) == 50

    def test_lowest_draws_give_min_coins_and_small_pack(self):
        reward = RewardCalculator(ScriptedRandom([0.0])).compute_reward(0)
        assert reward.coins == 30
        assert reward.pack_tier is PackTier.SMALL

    def test_high_draws_give_max_coins_and_no_pack(self):
        reward = RewardCalculator(ScriptedRandom([0.9999, 0.9])).compute_reward(5)
        assert reward.coins == 50
        assert reward.pack_tier is None

    def test_pack_tier_drawn_from_low_tiers(self):
        # coins, pack trial (0.1 < 0.25), tier pick
        reward = RewardCalculator(ScriptedRandom([0.5, 0.1, 0.9])).compute_reward(5)
        assert reward.coins == 40
        assert reward.pack_tier is PackTier.BIG

    def test_pack_rate_tracks_chance(self, seeded_rng):
        calculator = RewardCalculator(seeded_rng)
        trials = 20_000
        packs = sum(calculator.compute_reward(5).pack_tier is not None for _ in range(trials))
        assert packs / trials == pytest.approx(0.25, abs=0.02)
