import math
import random
from collections.abc import Sequence
from typing import Protocol


class RandomSource(Protocol):
    """Uniform float source in ``[0, 1)``.

    Any ``random.Random`` instance satisfies this; tests pass a seeded one or a
    scripted sequence.
    """

    def random(self) -> float: ...


def get_random_source() -> RandomSource:
    """Unseeded source for production requests."""
    return random.Random()  # noqa: S311


def coin_flip(rng: RandomSource) -> bool:
    """Unweighted coin flip, ``True`` selects the first option."""
    return rng.random() < 0.5


def randint_inclusive(rng: RandomSource, low: int, high: int) -> int:
    return math.floor(low + rng.random() * (high - low + 1))


def pick[T](rng: RandomSource, items: Sequence[T]) -> T:
    """Pick one item uniformly. ``items`` must not be empty."""
    return items[math.floor(rng.random() * len(items))]
