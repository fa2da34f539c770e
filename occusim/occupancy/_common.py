"""
Common data structures for occupancy-design simulation.

CellFit, FittedTable, EstimatorProperties and DesignParams are the
parameter payloads wrapped by Result[P] and exposed through Solution classes.
NaN plays the role of NA throughout: an empty or failed cell has NaN
estimates, and an aggregate over zero probability mass is NaN.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


# Cell status labels
EMPTY = "empty"            # SD = 0, nothing to estimate from
BOUNDARY = "boundary"      # closed-form psihat = 1
OPTIMIZED = "optimized"    # numerical MLE
FAILED = "failed"          # optimizer did not converge

CELL_STATUSES = (EMPTY, BOUNDARY, OPTIMIZED, FAILED)


@dataclass(frozen=True)
class CellFit:
    """Estimates for one distinct (SD, d) pair."""
    sd: int
    d: int
    count: int
    probability: float
    psihat: float
    phat: float
    status: str

    @property
    def has_estimate(self) -> bool:
        return self.status in (BOUNDARY, OPTIMIZED)


@dataclass(frozen=True)
class FittedTable:
    """
    Frequency table of observed (SD, d) pairs with per-cell estimates.

    Parallel arrays, one entry per distinct pair, sorted by (SD, d).
    """
    sd: NDArray[np.int64]                     # (m,) sites with a detection
    d: NDArray[np.int64]                      # (m,) total detections
    count: NDArray[np.int64]                  # (m,) realizations in the cell
    probability: NDArray[np.floating[Any]]    # (m,) count / nits
    psihat: NDArray[np.floating[Any]]         # (m,) NaN if empty/failed
    phat: NDArray[np.floating[Any]]           # (m,) NaN if empty/failed
    status: NDArray[np.str_]                  # (m,) one of CELL_STATUSES

    @classmethod
    def from_cells(cls, cells: list[CellFit]) -> FittedTable:
        """Assemble a table from per-cell fits."""
        cells = sorted(cells, key=lambda c: (c.sd, c.d))
        return cls(
            sd=np.array([c.sd for c in cells], dtype=np.int64),
            d=np.array([c.d for c in cells], dtype=np.int64),
            count=np.array([c.count for c in cells], dtype=np.int64),
            probability=np.array([c.probability for c in cells], dtype=np.float64),
            psihat=np.array([c.psihat for c in cells], dtype=np.float64),
            phat=np.array([c.phat for c in cells], dtype=np.float64),
            status=np.array([c.status for c in cells], dtype=str),
        )

    def __len__(self) -> int:
        return len(self.sd)

    def cells(self) -> list[CellFit]:
        """Per-cell records, in table order."""
        return [
            CellFit(
                sd=int(self.sd[i]),
                d=int(self.d[i]),
                count=int(self.count[i]),
                probability=float(self.probability[i]),
                psihat=float(self.psihat[i]),
                phat=float(self.phat[i]),
                status=str(self.status[i]),
            )
            for i in range(len(self))
        ]

    def cell(self, sd: int, d: int) -> CellFit:
        """Look up the record for one (SD, d) pair."""
        idx = np.flatnonzero((self.sd == sd) & (self.d == d))
        if idx.size == 0:
            raise KeyError(f"(SD={sd}, d={d}) was never observed")
        return self.cells()[int(idx[0])]

    def mask(self, status: str) -> NDArray[np.bool_]:
        """Boolean mask of cells with the given status."""
        return self.status == status


@dataclass(frozen=True)
class EstimatorProperties:
    """
    Frequency-weighted properties of (psihat, phat) over a set of cells.

    mass is the raw empirical probability the set carried before
    renormalization; every statistic is NaN when mass is zero.
    """
    psi_mean: float
    psi_bias: float
    psi_var: float
    psi_mse: float
    p_mean: float
    p_bias: float
    p_var: float
    p_mse: float
    cov: float
    crit_a: float                # psi_mse + p_mse
    crit_d: float                # psi_mse * p_mse - cov**2
    n_cells: int
    mass: float

    @property
    def defined(self) -> bool:
        return self.n_cells > 0 and self.mass > 0


@dataclass(frozen=True)
class DesignParams:
    """
    Parameter payload for an occupancy-design evaluation.

    - all_histories: properties over every non-empty, fitted history
    - boundary_excluded: same, additionally excluding psihat = 1
    - pempty / pbound / pfailed: percentage of realizations landing in the
      empty cell, in psihat = 1 cells, and in failed cells
    """
    all_histories: EstimatorProperties
    boundary_excluded: EstimatorProperties
    pempty: float
    pbound: float
    pfailed: float
    table: FittedTable
