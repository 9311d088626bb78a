"""Random index sources for sequence generation."""

import random
from abc import ABC, abstractmethod
from typing import Iterable, Optional


class RandomSource(ABC):
    """Produces indices uniformly distributed over an alphabet."""

    @abstractmethod
    def next_index(self, size: int) -> int:
        """Return an index in [0, size)."""
        pass


class SeededRandomSource(RandomSource):
    """RandomSource backed by random.Random; reproducible when seeded."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def next_index(self, size: int) -> int:
        return self._random.randrange(size)


class ScriptedRandomSource(RandomSource):
    """
    Replays a fixed list of indices, cycling when exhausted.

    Values are reduced modulo the requested size so a script written for one
    alphabet stays valid for a smaller one.
    """

    def __init__(self, values: Iterable[int]):
        self.values = list(values)
        if not self.values:
            raise ValueError("ScriptedRandomSource needs at least one value")
        self._position = 0

    @property
    def draws(self) -> int:
        """Number of indices handed out so far."""
        return self._position

    def next_index(self, size: int) -> int:
        value = self.values[self._position % len(self.values)]
        self._position += 1
        return value % size
