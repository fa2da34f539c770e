"""
Per-cell maximum likelihood estimates of (psi, p).

Each distinct (SD, d) cell is fitted once:
    - SD = 0: empty history, no estimate (NaN, NaN)
    - boundary rule holds: closed form psihat = 1, phat = d / (s k)
    - otherwise: numerical minimization of the logit-space NLL

Practical limitation: for p very close to 1 the likelihood surface in logit
space becomes extremely flat in y and the fits lose precision; simulations
are reliable up to about p = 0.97. Nothing is clamped to hide this.
"""

from __future__ import annotations

import numpy as np
from scipy.optimize import minimize

from occusim.core.exceptions import ConvergenceError
from occusim.core.compute.tolerances import (
    BFGS_DEFAULT,
    GRADIENT_METHODS,
    OptimizerSettings,
)
from occusim.occupancy._common import (
    BOUNDARY,
    EMPTY,
    FAILED,
    OPTIMIZED,
    CellFit,
)
from occusim.occupancy._likelihood import (
    from_logit,
    negative_loglik,
    negative_loglik_gradient,
    to_logit,
)


# psi = 1 has no finite logit; starting values are clipped into this range.
START_CLIP = 0.01


def boundary_rule(sd: int, d: int, s: int, k: int) -> bool:
    """
    True when the likelihood is maximized on the psi = 1 boundary.

    (s - SD) / s < (1 - d / (s k))^k
    """
    return (s - sd) / s < (1.0 - d / (s * k)) ** k


def boundary_estimates(sd: int, d: int, s: int, k: int) -> tuple[float, float]:
    """Closed-form estimates on the boundary: (psihat, phat) = (1, d / (s k))."""
    return 1.0, d / (s * k)


def starting_values(psi: float, p: float) -> np.ndarray:
    """Logit-space starting point for the optimizer."""
    return to_logit(
        float(np.clip(psi, START_CLIP, 1.0 - START_CLIP)),
        float(np.clip(p, START_CLIP, 1.0 - START_CLIP)),
    )


def optimize_cell(
    sd: int,
    d: int,
    s: int,
    k: int,
    theta0: np.ndarray,
    settings: OptimizerSettings = BFGS_DEFAULT,
) -> tuple[float, float]:
    """
    Minimize the negative log-likelihood for one cell.

    A run counts as converged when the optimizer reports success, or when it
    stops at a stationary point (max |gradient| <= settings.stationary_tol).

    Returns:
        (psihat, phat)

    Raises:
        ConvergenceError: If the optimizer stops away from a stationary point
            or produces non-finite values.
    """
    args = (sd, d, s, k)
    jac = negative_loglik_gradient if settings.method in GRADIENT_METHODS else None

    with np.errstate(over='ignore', under='ignore'):
        opt_result = minimize(
            negative_loglik,
            theta0,
            args=args,
            jac=jac,
            method=settings.method,
            options=settings.as_options(),
        )

    n_iter = int(getattr(opt_result, 'nit', 0))
    message = str(getattr(opt_result, 'message', ''))

    if not (np.all(np.isfinite(opt_result.x)) and np.isfinite(opt_result.fun)):
        raise ConvergenceError(
            f"Optimizer produced non-finite values for SD={sd}, d={d}",
            iterations=n_iter,
            reason=message,
            threshold=settings.stationary_tol,
        )

    grad_norm = float(np.max(np.abs(negative_loglik_gradient(opt_result.x, *args))))
    if not opt_result.success and grad_norm > settings.stationary_tol:
        raise ConvergenceError(
            f"Optimizer did not converge for SD={sd}, d={d}: {message}",
            iterations=n_iter,
            final_change=grad_norm,
            reason=message,
            threshold=settings.stationary_tol,
        )

    return from_logit(opt_result.x)


def fit_cell(
    sd: int,
    d: int,
    count: int,
    nits: int,
    psi: float,
    p: float,
    s: int,
    k: int,
    settings: OptimizerSettings = BFGS_DEFAULT,
) -> CellFit:
    """
    Estimate (psi, p) for one frequency-table cell.

    psi and p are the design values; they seed the optimizer.

    Raises:
        ValueError: If (sd, d) cannot arise from an s x k history.
        ConvergenceError: Propagated from optimize_cell.
    """
    if not (0 <= sd <= s and sd <= d <= k * sd):
        raise ValueError(
            f"inconsistent sufficient statistics: SD={sd}, d={d} "
            f"for s={s}, k={k}"
        )

    probability = count / nits

    if sd == 0:
        return CellFit(sd, d, count, probability, np.nan, np.nan, EMPTY)

    if boundary_rule(sd, d, s, k):
        psihat, phat = boundary_estimates(sd, d, s, k)
        return CellFit(sd, d, count, probability, psihat, phat, BOUNDARY)

    psihat, phat = optimize_cell(sd, d, s, k, starting_values(psi, p), settings)
    return CellFit(sd, d, count, probability, psihat, phat, OPTIMIZED)


def failed_cell(sd: int, d: int, count: int, nits: int) -> CellFit:
    """Record for a cell whose optimization did not converge."""
    return CellFit(sd, d, count, count / nits, np.nan, np.nan, FAILED)
