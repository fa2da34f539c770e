"""
Frequency-weighted estimator properties.

Summarizes a FittedTable into bias, variance and MSE of psihat and phat in
two passes:
    1. every non-empty history with a usable estimate
    2. the same, additionally excluding psihat = 1 boundary estimates

Cells without an estimate (empty or failed) are removed by an explicit
filter before weighting; weights are the empirical probabilities of the
remaining cells, renormalized to sum to 1.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from occusim.occupancy._common import (
    EMPTY,
    FAILED,
    DesignParams,
    EstimatorProperties,
    FittedTable,
)


def _undefined(n_cells: int = 0, mass: float = 0.0) -> EstimatorProperties:
    nan = float('nan')
    return EstimatorProperties(
        psi_mean=nan, psi_bias=nan, psi_var=nan, psi_mse=nan,
        p_mean=nan, p_bias=nan, p_var=nan, p_mse=nan,
        cov=nan, crit_a=nan, crit_d=nan,
        n_cells=n_cells, mass=mass,
    )


def weighted_properties(
    psihat: NDArray,
    phat: NDArray,
    probability: NDArray,
    psi: float,
    p: float,
) -> EstimatorProperties:
    """
    Bias, variance, MSE and covariance of the estimates.

    All inputs must already be filtered to cells with finite estimates.
    """
    mass = float(np.sum(probability))
    if len(probability) == 0 or mass <= 0.0:
        return _undefined(len(probability), mass)

    w = probability / mass

    psi_mean = float(np.sum(w * psihat))
    p_mean = float(np.sum(w * phat))
    psi_dev = psihat - psi_mean
    p_dev = phat - p_mean

    psi_var = float(np.sum(w * psi_dev ** 2))
    p_var = float(np.sum(w * p_dev ** 2))
    cov = float(np.sum(w * psi_dev * p_dev))

    psi_bias = psi_mean - psi
    p_bias = p_mean - p
    psi_mse = psi_var + psi_bias ** 2
    p_mse = p_var + p_bias ** 2

    return EstimatorProperties(
        psi_mean=psi_mean,
        psi_bias=psi_bias,
        psi_var=psi_var,
        psi_mse=psi_mse,
        p_mean=p_mean,
        p_bias=p_bias,
        p_var=p_var,
        p_mse=p_mse,
        cov=cov,
        crit_a=psi_mse + p_mse,
        crit_d=psi_mse * p_mse - cov ** 2,
        n_cells=len(probability),
        mass=mass,
    )


def summarize_table(table: FittedTable, psi: float, p: float) -> DesignParams:
    """Compute both passes and the empty/boundary/failed percentages."""
    usable = (
        ~table.mask(EMPTY)
        & ~table.mask(FAILED)
        & np.isfinite(table.psihat)
        & np.isfinite(table.phat)
    )
    on_boundary = usable & (table.psihat == 1.0)
    interior = usable & ~on_boundary

    all_histories = weighted_properties(
        table.psihat[usable], table.phat[usable],
        table.probability[usable], psi, p,
    )
    boundary_excluded = weighted_properties(
        table.psihat[interior], table.phat[interior],
        table.probability[interior], psi, p,
    )

    pempty = 100.0 * float(np.sum(table.probability[table.mask(EMPTY)]))
    pbound = 100.0 * float(np.sum(table.probability[on_boundary]))
    pfailed = 100.0 * float(np.sum(table.probability[table.mask(FAILED)]))

    return DesignParams(
        all_histories=all_histories,
        boundary_excluded=boundary_excluded,
        pempty=pempty,
        pbound=pbound,
        pfailed=pfailed,
        table=table,
    )
