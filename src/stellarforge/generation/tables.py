from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class WeightedTable(Generic[T]):
    """Ordered (weight, value) pairs sampled by cumulative-weight roulette.

    Integer weights draw with ``randrange(total)`` so every roll lands in exactly
    one bucket; float weights draw a uniform value in ``[0, total)`` and walk
    the entries subtracting weights until the draw is exhausted.
    """

    entries: tuple[tuple[float, T], ...]

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError("weighted table must contain at least one entry")
        for index, (weight, _) in enumerate(self.entries):
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                raise ValueError(f"entries[{index}] weight must be numeric")
            if weight <= 0:
                raise ValueError(f"entries[{index}] weight must be > 0")

    @classmethod
    def of(cls, *entries: tuple[float, T]) -> "WeightedTable[T]":
        return cls(entries=tuple(entries))

    @property
    def total_weight(self) -> float:
        return sum(weight for weight, _ in self.entries)

    @property
    def is_integral(self) -> bool:
        return all(isinstance(weight, int) for weight, _ in self.entries)

    def values(self) -> tuple[T, ...]:
        return tuple(value for _, value in self.entries)

    def select(self, roll: float) -> T:
        remaining = roll
        for weight, value in self.entries:
            if remaining < weight:
                return value
            remaining -= weight
        # float rounding can leave a sliver past the final bucket
        return self.entries[-1][1]

    def choose(self, rng: random.Random) -> T:
        total = self.total_weight
        if self.is_integral:
            return self.select(rng.randrange(int(total)))
        return self.select(rng.random() * total)


@dataclass(frozen=True)
class BucketTable(Generic[T]):
    """Fixed table over ``size`` discrete rolls keyed by inclusive upper bounds."""

    size: int
    bounds: tuple[tuple[int, T], ...]

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError("bucket table size must be > 0")
        if not self.bounds:
            raise ValueError("bucket table must contain at least one bound")
        previous = -1
        for index, (upper, _) in enumerate(self.bounds):
            if upper <= previous:
                raise ValueError(f"bounds[{index}] must be strictly increasing")
            previous = upper
        if previous != self.size - 1:
            raise ValueError("final bucket bound must cover the whole roll range")

    @classmethod
    def from_bounds(cls, size: int, bounds: Sequence[tuple[int, T]]) -> "BucketTable[T]":
        return cls(size=size, bounds=tuple(bounds))

    def lookup(self, roll: int) -> T:
        for upper, value in self.bounds:
            if roll <= upper:
                return value
        return self.bounds[-1][1]

    def choose(self, rng: random.Random) -> T:
        return self.lookup(rng.randrange(self.size))

    def probability(self, value: T) -> float:
        lower = 0
        hits = 0
        for upper, bucket_value in self.bounds:
            if bucket_value == value:
                hits += upper - lower + 1
            lower = upper + 1
        return hits / self.size
