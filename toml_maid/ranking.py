"""Priority ordering of keys from a configured list of important keys."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

SortKey = tuple[int, int, str]


@dataclass(slots=True)
class KeyRanking:
    """Maps configured keys to their zero-based priority.

    Configured keys sort first, by rank. Every other key sorts after them,
    lexicographically.
    """

    ranks: dict[str, int] = field(default_factory=dict)
    duplicates: list[str] = field(default_factory=list)

    @classmethod
    def from_keys(cls, keys: Iterable[str]) -> KeyRanking:
        keys = list(keys)
        # A key listed twice keeps the rank of its last occurrence.
        ranks = {key: index for index, key in enumerate(keys)}
        duplicates = sorted(key for key, count in Counter(keys).items() if count > 1)
        return cls(ranks=ranks, duplicates=duplicates)

    def rank(self, key: str) -> int | None:
        return self.ranks.get(key)

    def sort_key(self, key: str) -> SortKey:
        rank = self.ranks.get(key)
        if rank is None:
            return (1, 0, key)
        return (0, rank, "")


__all__ = ["KeyRanking", "SortKey"]
