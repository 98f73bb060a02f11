# src/pathrank/utils/seeded_random.py

"""
Seeded pseudo-randomness for planting, baselines and resampling.

Every random decision in pathrank goes through SeededRandom, and every
per-trial seed comes from derive_seed(), so a run is fully determined by its
top-level seed and never by wall-clock time or call order across trials.
"""

from __future__ import annotations

import random
from typing import List, MutableSequence, Sequence, TypeVar

T = TypeVar("T")

_MASK64 = (1 << 64) - 1


def derive_seed(base_seed: int, index: int) -> int:
    """
    Derive an independent 31-bit seed for trial ``index`` from ``base_seed``.

    Uses the SplitMix64 finaliser so neighbouring indices give unrelated
    streams. Pure function of its inputs.
    """
    z = (int(base_seed) * 0x9E3779B97F4A7C15 + (int(index) + 1) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    z ^= z >> 31
    return z & 0x7FFFFFFF


class SeededRandom:
    """Thin wrapper over random.Random with the handful of draws we need."""

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._rng = random.Random(self.seed)

    def next_double(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def uniform(self, lo: float, hi: float) -> float:
        return self._rng.uniform(lo, hi)

    def randint(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi], both inclusive."""
        return self._rng.randint(lo, hi)

    def choice(self, items: Sequence[T]) -> T:
        return items[self._rng.randrange(len(items))]

    def sample(self, items: Sequence[T], k: int) -> List[T]:
        return self._rng.sample(list(items), k)

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Shuffled copy of ``items`` (Fisher-Yates); the input is untouched."""
        result: MutableSequence[T] = list(items)
        self._rng.shuffle(result)
        return list(result)

    def resample(self, items: Sequence[T]) -> List[T]:
        """Bootstrap resample: len(items) draws with replacement."""
        n = len(items)
        return [items[self._rng.randrange(n)] for _ in range(n)]

    def spawn(self, index: int) -> "SeededRandom":
        """Child generator seeded with derive_seed(self.seed, index)."""
        return SeededRandom(derive_seed(self.seed, index))
