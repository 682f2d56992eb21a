"""
Injected randomness for mystery rolls

Every randomized engine function takes a RandomSource explicitly, so tests
can replay fixed sequences and callers choose per-request or per-process
seeding.
"""

import random
from itertools import cycle
from typing import Iterable, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Uniform random floats in [0, 1)"""

    def next(self) -> float:
        ...


class SystemRandomSource:
    """RandomSource backed by random.Random (seedable)"""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def next(self) -> float:
        return self._random.random()


class SequenceRandomSource:
    """Replays fixed values in order, cycling when exhausted"""

    def __init__(self, values: Iterable[float]):
        values = list(values)
        if not values:
            raise ValueError("SequenceRandomSource needs at least one value")
        if any(not 0 <= v < 1 for v in values):
            raise ValueError("Random values must be in [0, 1)")
        self.values = values
        self._values = cycle(values)
        self.calls = 0

    def next(self) -> float:
        self.calls += 1
        return next(self._values)


def default_random_source() -> RandomSource:
    """Fresh unseeded source for callers that do not need reproducibility"""
    return SystemRandomSource()


def choose(rng: RandomSource, options: Sequence[T]) -> T:
    """Uniform choice among options using one draw"""
    return options[min(int(rng.next() * len(options)), len(options) - 1)]


def randint_inclusive(rng: RandomSource, low: int, high: int) -> int:
    """Uniform integer in [low, high] using one draw"""
    return min(int(rng.next() * (high - low + 1)) + low, high)
