"""
Design class for occupancy-design simulation.

OccupancyDesign encapsulates all inputs needed by backends to evaluate
one sampling design. Immutable, validated at construction.
"""

from __future__ import annotations

from dataclasses import dataclass

from occusim.core.validation import (
    check_nonnegative_int,
    check_positive_int,
    check_probability,
)


@dataclass(frozen=True)
class OccupancyDesign:
    """
    Frozen design for a Monte Carlo occupancy-design evaluation.

    Attributes:
        psi: Assumed true occupancy probability, in (0, 1].
        p: Assumed per-replicate detection probability, in (0, 1).
        s: Number of sites.
        k: Number of replicate samples per site.
        nits: Number of Monte Carlo realizations.
        seed: Random seed for reproducibility.
    """
    psi: float
    p: float
    s: int
    k: int
    nits: int
    seed: int | None

    @classmethod
    def for_simulation(
        cls,
        psi: float,
        p: float,
        s: int,
        k: int,
        nits: int = 10000,
        *,
        seed: int | None = None,
    ) -> OccupancyDesign:
        """
        Create an occupancy design with validation.

        Args:
            psi: Occupancy probability. Must satisfy 0 < psi <= 1.
            p: Detection probability. Must satisfy 0 < p < 1.
            s: Number of sites. Must be >= 1.
            k: Replicates per site. Must be >= 1.
            nits: Number of realizations. Must be >= 1.
            seed: Random seed, or None for fresh entropy.

        Returns:
            Validated OccupancyDesign.

        Raises:
            ValidationError: If any parameter is out of range.
        """
        psi = check_probability(psi, "psi", allow_one=True)
        p = check_probability(p, "p")
        s = check_positive_int(s, "s")
        k = check_positive_int(k, "k")
        nits = check_positive_int(nits, "nits")
        if seed is not None:
            seed = check_nonnegative_int(seed, "seed")

        return cls(psi=psi, p=p, s=s, k=k, nits=nits, seed=seed)

    @property
    def n_trials(self) -> int:
        """Total replicate samples per history, s * k."""
        return self.s * self.k

    @property
    def metadata(self) -> dict[str, float | int | None]:
        return {
            'psi': self.psi,
            'p': self.p,
            's': self.s,
            'k': self.k,
            'nits': self.nits,
            'seed': self.seed,
        }
