"""
Occupancy-model log-likelihood in terms of the sufficient statistics.

For s sites with k replicates each, SD sites with a detection and d total
detections:

    LL(psi, p) = SD log(psi) + d log(p) + (k SD - d) log(1 - p)
                 + (s - SD) log((1 - psi) + psi (1 - p)^k)

The optimizer works on unconstrained logits x, y with psi = expit(x) and
p = expit(y). Everything is evaluated in log space so very large or very
small logits do not overflow.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.special import expit, log_expit, logit


def loglik(
    psi: float,
    p: float,
    sd: int,
    d: int,
    s: int,
    k: int,
) -> float:
    """Log-likelihood on the probability scale. Returns -inf outside (0, 1]."""
    if not (0.0 < psi <= 1.0 and 0.0 < p < 1.0):
        return -np.inf

    value = sd * np.log(psi) + d * np.log(p) + (k * sd - d) * np.log1p(-p)
    if s > sd:
        value += (s - sd) * np.log((1.0 - psi) + psi * (1.0 - p) ** k)
    return float(value)


def _log_terms(theta: NDArray, k: int):
    x, y = theta
    log_psi = log_expit(x)
    log_1m_psi = log_expit(-x)
    log_p = log_expit(y)
    log_1m_p = log_expit(-y)
    # log((1 - psi) + psi (1 - p)^k)
    log_q = np.logaddexp(log_1m_psi, log_psi + k * log_1m_p)
    return log_psi, log_1m_psi, log_p, log_1m_p, log_q


def negative_loglik(
    theta: NDArray,
    sd: int,
    d: int,
    s: int,
    k: int,
) -> float:
    """Negative log-likelihood at logits theta = (x, y)."""
    log_psi, _, log_p, log_1m_p, log_q = _log_terms(theta, k)
    value = sd * log_psi + d * log_p + (k * sd - d) * log_1m_p + (s - sd) * log_q
    return float(-value)


def negative_loglik_gradient(
    theta: NDArray,
    sd: int,
    d: int,
    s: int,
    k: int,
) -> NDArray[np.float64]:
    """
    Gradient of negative_loglik with respect to (x, y).

    With Q = (1 - psi) + psi (1 - p)^k, w_absent = (1 - psi) / Q and
    w_missed = psi (1 - p)^k / Q (so w_absent + w_missed = 1):

        dLL/dx = SD (1 - psi) + (s - SD) (w_missed (1 - psi) - psi w_absent)
        dLL/dy = d - k SD p - (s - SD) k p w_missed
    """
    log_psi, log_1m_psi, _, log_1m_p, log_q = _log_terms(theta, k)
    psi = expit(theta[0])
    p = expit(theta[1])
    w_absent = np.exp(log_1m_psi - log_q)
    w_missed = np.exp(log_psi + k * log_1m_p - log_q)

    n_blank = s - sd
    dx = sd * (1.0 - psi) + n_blank * (w_missed * (1.0 - psi) - psi * w_absent)
    dy = d - k * sd * p - n_blank * k * p * w_missed
    return -np.array([dx, dy], dtype=np.float64)


def to_logit(psi: float, p: float) -> NDArray[np.float64]:
    """Map (psi, p) to unconstrained logits."""
    return np.array([logit(psi), logit(p)], dtype=np.float64)


def from_logit(theta: NDArray) -> tuple[float, float]:
    """Map logits back to (psi, p)."""
    return float(expit(theta[0])), float(expit(theta[1]))
