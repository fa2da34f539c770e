"""
Frequency table of sufficient-statistic pairs.

Counts how often each distinct (SD, d) pair occurs across realizations.
Only realized pairs are stored; unobserved pairs have implicit probability 0.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
from numpy.typing import ArrayLike


Pair = tuple[int, int]


class FrequencyTable:
    """
    Mapping from distinct (SD, d) pairs to occurrence counts.

    Keys are compared by exact integer equality. Each pair has exactly one
    entry no matter how many times it is added.

    Usage:
        table = FrequencyTable()
        table.update(sd, d)            # arrays of statistics
        table.add(3, 7)                # one realization
        probs = table.probabilities()  # {(SD, d): count / n_total}
    """

    def __init__(self) -> None:
        self._counts: dict[Pair, int] = {}
        self._n_total = 0

    def add(self, sd: int, d: int, count: int = 1) -> None:
        """Record count realizations of the pair (sd, d)."""
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        sd, d = int(sd), int(d)
        if sd < 0 or d < sd or (d > 0 and sd == 0):
            raise ValueError(
                f"inconsistent sufficient statistics: SD={sd}, d={d}"
            )
        key = (sd, d)
        self._counts[key] = self._counts.get(key, 0) + int(count)
        self._n_total += int(count)

    def update(self, sd: ArrayLike, d: ArrayLike) -> None:
        """Consume a stream of (SD, d) realizations."""
        sd = np.asarray(sd, dtype=np.int64).ravel()
        d = np.asarray(d, dtype=np.int64).ravel()
        if sd.shape != d.shape:
            raise ValueError(
                f"sd and d must have the same length, got {sd.size} and {d.size}"
            )
        if sd.size == 0:
            return

        pairs, counts = np.unique(
            np.column_stack([sd, d]), axis=0, return_counts=True
        )
        for (cell_sd, cell_d), count in zip(pairs, counts):
            self.add(cell_sd, cell_d, int(count))

    @property
    def n_total(self) -> int:
        """Number of realizations consumed."""
        return self._n_total

    def count(self, pair: Pair) -> int:
        return self._counts.get((int(pair[0]), int(pair[1])), 0)

    def pairs(self) -> list[Pair]:
        """Distinct pairs, sorted by (SD, d)."""
        return sorted(self._counts)

    def items(self) -> Iterator[tuple[Pair, int]]:
        for pair in self.pairs():
            yield pair, self._counts[pair]

    def probabilities(self) -> dict[Pair, float]:
        """Empirical probability of each observed pair."""
        if self._n_total == 0:
            raise ValueError("probabilities() called on an empty table")
        return {
            pair: count / self._n_total for pair, count in self.items()
        }

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, pair) -> bool:
        return (int(pair[0]), int(pair[1])) in self._counts

    def __repr__(self) -> str:
        return f"FrequencyTable(cells={len(self)}, n_total={self.n_total})"
