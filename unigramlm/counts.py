"""Token frequency accumulation.

`FrequencyAccumulator` is the mutable token -> count table owned by a
`UnigramModel`. Keys are only created by incrementing, so every stored count
is at least one. The class is not thread-safe: parallel fits build one
accumulator per task on the worker threads and fold them into the model's table
with `merge` on the calling thread only.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Iterator


class FrequencyAccumulator:
    """Mapping from token to positive occurrence count."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def increment(self, token: str) -> None:
        """Add one occurrence of ``token``."""

        self._counts[token] += 1

    def update(self, tokens: Iterable[str]) -> None:
        """Add one occurrence for every token in ``tokens``."""

        counts = self._counts
        for token in tokens:
            counts[token] += 1

    def merge(self, other: "FrequencyAccumulator") -> None:
        """Add every count of ``other`` into this accumulator."""

        self._counts.update(other._counts)

    def snapshot(self) -> dict[str, int]:
        """Return an unordered copy of the current counts."""

        return dict(self._counts)

    def total(self) -> int:
        """Total number of token occurrences recorded."""

        return sum(self._counts.values())

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, token: object) -> bool:
        return token in self._counts

    def __getitem__(self, token: str) -> int:
        return self._counts.get(token, 0)

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __repr__(self) -> str:
        return f"FrequencyAccumulator(vocabulary={len(self)}, total={self.total()})"
