"""
Solution wrappers for occupancy-design results.

DesignSolution wraps Result[DesignParams] and provides convenient accessors
and a human-readable summary. DesignGridSolution collects solutions over a
grid of (sites, replicates) designs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from occusim.core.result import Result
from occusim.occupancy._common import DesignParams, EstimatorProperties, FittedTable

if TYPE_CHECKING:
    from occusim.occupancy.design import OccupancyDesign


# Quantities a design can be selected on.
CRITERIA = (
    "psi_mse", "p_mse", "crit_a", "crit_d",
    "psi_mse_b", "p_mse_b", "crit_a_b", "crit_d_b",
)


def _fmt(value: float, spec: str = ".5f") -> str:
    return "NA" if math.isnan(value) else format(value, spec)


@dataclass
class DesignSolution:
    """
    User-facing results of one occupancy-design evaluation.

    Unsuffixed properties describe all non-empty histories; properties with
    a _b suffix exclude boundary estimates (psihat = 1) as well.
    """
    _result: Result[DesignParams]
    _design: 'OccupancyDesign'
    _figure: Any = field(default=None, repr=False)

    # --- Design ---

    @property
    def psi(self) -> float:
        """True occupancy probability used in the simulation."""
        return self._design.psi

    @property
    def p(self) -> float:
        """True detection probability used in the simulation."""
        return self._design.p

    @property
    def s(self) -> int:
        return self._design.s

    @property
    def k(self) -> int:
        return self._design.k

    @property
    def nits(self) -> int:
        return self._design.nits

    @property
    def seed(self) -> int | None:
        return self._design.seed

    # --- Pass 1: all non-empty histories ---

    @property
    def all_histories(self) -> EstimatorProperties:
        return self._result.params.all_histories

    @property
    def psi_mean(self) -> float:
        return self.all_histories.psi_mean

    @property
    def psi_bias(self) -> float:
        return self.all_histories.psi_bias

    @property
    def psi_var(self) -> float:
        return self.all_histories.psi_var

    @property
    def psi_mse(self) -> float:
        return self.all_histories.psi_mse

    @property
    def p_mean(self) -> float:
        return self.all_histories.p_mean

    @property
    def p_bias(self) -> float:
        return self.all_histories.p_bias

    @property
    def p_var(self) -> float:
        return self.all_histories.p_var

    @property
    def p_mse(self) -> float:
        return self.all_histories.p_mse

    @property
    def cov(self) -> float:
        """Weighted covariance of (psihat, phat)."""
        return self.all_histories.cov

    @property
    def crit_a(self) -> float:
        """psi_mse + p_mse."""
        return self.all_histories.crit_a

    @property
    def crit_d(self) -> float:
        """psi_mse * p_mse - cov**2."""
        return self.all_histories.crit_d

    # --- Pass 2: boundary estimates excluded ---

    @property
    def boundary_excluded(self) -> EstimatorProperties:
        return self._result.params.boundary_excluded

    @property
    def psi_mean_b(self) -> float:
        return self.boundary_excluded.psi_mean

    @property
    def psi_bias_b(self) -> float:
        return self.boundary_excluded.psi_bias

    @property
    def psi_var_b(self) -> float:
        return self.boundary_excluded.psi_var

    @property
    def psi_mse_b(self) -> float:
        return self.boundary_excluded.psi_mse

    @property
    def p_mean_b(self) -> float:
        return self.boundary_excluded.p_mean

    @property
    def p_bias_b(self) -> float:
        return self.boundary_excluded.p_bias

    @property
    def p_var_b(self) -> float:
        return self.boundary_excluded.p_var

    @property
    def p_mse_b(self) -> float:
        return self.boundary_excluded.p_mse

    @property
    def cov_b(self) -> float:
        return self.boundary_excluded.cov

    @property
    def crit_a_b(self) -> float:
        return self.boundary_excluded.crit_a

    @property
    def crit_d_b(self) -> float:
        return self.boundary_excluded.crit_d

    # --- Percentages ---

    @property
    def pempty(self) -> float:
        """Percentage of realizations with no detections at all."""
        return self._result.params.pempty

    @property
    def pbound(self) -> float:
        """Percentage of realizations with a boundary estimate psihat = 1."""
        return self._result.params.pbound

    @property
    def pfailed(self) -> float:
        """Percentage of realizations in cells whose fit did not converge."""
        return self._result.params.pfailed

    @property
    def table(self) -> FittedTable:
        """Completed frequency table with per-cell estimates."""
        return self._result.params.table

    def criterion(self, name: str) -> float:
        """Look up a selection criterion by name (see CRITERIA)."""
        if name not in CRITERIA:
            raise ValueError(
                f"criterion must be one of {', '.join(CRITERIA)}, got {name!r}"
            )
        return getattr(self, name)

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def elapsed(self) -> float | None:
        """Wall-clock seconds for the whole run."""
        if self.timing is None:
            return None
        return self.timing['total_seconds']

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Display ---

    @property
    def figure(self):
        """Diagnostic figure drawn by evaluate_design(plot=True), or None."""
        return self._figure

    def plot(self, ax=None):
        """Draw the phat vs psihat diagnostic scatter; returns the Axes."""
        from occusim.occupancy._plot import plot_estimates

        ax = plot_estimates(self.table, self.psi, self.p, ax=ax)
        self._figure = ax.figure
        return ax

    def summary(self) -> str:
        """
        Human-readable report.

        Produces:
            OCCUPANCY DESIGN SIMULATION

            psi = 1, p = 0.97, S = 2, K = 2, nits = 10000

                              psi          p
            all histories
              mean        0.99912    0.96987
              bias       -0.00088   -0.00013
              ...
        """
        lines = ["\nOCCUPANCY DESIGN SIMULATION\n"]
        lines.append(
            f"psi = {self.psi:g}, p = {self.p:g}, S = {self.s}, "
            f"K = {self.k}, nits = {self.nits}"
        )
        lines.append("")
        lines.append(f"{'':14s} {'psi':>10s} {'p':>10s}")

        for title, props in (
            ("all histories", self.all_histories),
            ("excl. boundary", self.boundary_excluded),
        ):
            lines.append(title)
            for label, psi_val, p_val in (
                ("mean", props.psi_mean, props.p_mean),
                ("bias", props.psi_bias, props.p_bias),
                ("var", props.psi_var, props.p_var),
                ("MSE", props.psi_mse, props.p_mse),
            ):
                lines.append(
                    f"  {label:12s} {_fmt(psi_val):>10s} {_fmt(p_val):>10s}"
                )
            lines.append(
                f"  cov = {_fmt(props.cov)}, critA = {_fmt(props.crit_a)}, "
                f"critD = {_fmt(props.crit_d, '.3g')}"
            )

        lines.append("")
        lines.append(f"empty histories:     {self.pempty:6.2f} %")
        lines.append(f"boundary estimates:  {self.pbound:6.2f} %")
        if self.pfailed > 0:
            lines.append(f"failed fits:         {self.pfailed:6.2f} %")
        if self.elapsed is not None:
            lines.append(f"elapsed: {self.elapsed:.3f} s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"DesignSolution(psi={self.psi:g}, p={self.p:g}, s={self.s}, "
            f"k={self.k}, nits={self.nits}, psi_mse={_fmt(self.psi_mse, '.4g')})"
        )


@dataclass
class DesignGridSolution:
    """
    Evaluations over a grid of (sites, replicates) designs.

    Indexing with an (s, k) pair returns that design's DesignSolution.
    """
    sites: tuple[int, ...]
    replicates: tuple[int, ...]
    solutions: dict[tuple[int, int], DesignSolution]

    @property
    def psi(self) -> float:
        return next(iter(self.solutions.values())).psi

    @property
    def p(self) -> float:
        return next(iter(self.solutions.values())).p

    def __getitem__(self, design: tuple[int, int]) -> DesignSolution:
        return self.solutions[design]

    def __len__(self) -> int:
        return len(self.solutions)

    def mse(self, criterion: str = "psi_mse") -> NDArray[np.floating[Any]]:
        """Criterion values, shape (len(sites), len(replicates))."""
        out = np.empty((len(self.sites), len(self.replicates)), dtype=np.float64)
        for i, s in enumerate(self.sites):
            for j, k in enumerate(self.replicates):
                out[i, j] = self.solutions[(s, k)].criterion(criterion)
        return out

    def summary(self, criterion: str = "psi_mse") -> str:
        """Table of one criterion with sites as rows and replicates as columns."""
        values = self.mse(criterion)
        lines = [f"\n{criterion} (psi = {self.psi:g}, p = {self.p:g})\n"]
        corner = "S/K"
        lines.append(
            f"{corner:>6s} " + " ".join(f"{k:>9d}" for k in self.replicates)
        )
        for i, s in enumerate(self.sites):
            row = " ".join(f"{_fmt(v, '.4f'):>9s}" for v in values[i])
            lines.append(f"{s:>6d} {row}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"DesignGridSolution(sites={list(self.sites)}, "
            f"replicates={list(self.replicates)})"
        )
