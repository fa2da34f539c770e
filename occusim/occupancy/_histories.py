"""
Synthetic detection histories under the single-season occupancy model.

A history is an (s, k) binary matrix. Sp ~ Binomial(s, psi) sites are
occupied and their replicates are i.i.d. Bernoulli(p); the other sites are
all zero. Each history is reduced to the sufficient statistics
(SD, d): sites with at least one detection and total detections.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from occusim.occupancy.design import OccupancyDesign


# Upper bound on uniform draws held in memory at once.
_MAX_DRAWS_PER_CHUNK = 4_000_000


def draw_history(
    psi: float,
    p: float,
    s: int,
    k: int,
    rng: np.random.Generator,
) -> NDArray[np.int8]:
    """
    Draw one full detection history.

    Occupied sites come first; row order carries no meaning.

    Returns:
        int8 array of shape (s, k) with entries 0 or 1.
    """
    n_occupied = rng.binomial(s, psi)
    history = np.zeros((s, k), dtype=np.int8)
    history[:n_occupied] = rng.random((n_occupied, k)) < p
    return history


def reduce_history(history: NDArray) -> tuple[int, int]:
    """Reduce an (s, k) history to (SD, d)."""
    history = np.asarray(history)
    if history.ndim != 2:
        raise ValueError(
            f"history must be a 2D (sites, replicates) array, "
            f"got {history.ndim}D"
        )
    sd = int(np.count_nonzero(history.sum(axis=1) > 0))
    d = int(history.sum())
    return sd, d


def simulate_statistics(
    design: OccupancyDesign,
    rng: np.random.Generator,
) -> tuple[NDArray[np.int64], NDArray[np.int64]]:
    """
    Draw design.nits histories and return their (SD, d) statistics.

    Histories are generated in chunks so that at most
    _MAX_DRAWS_PER_CHUNK uniforms are alive at once. Rows beyond the
    occupied count are masked out rather than treated as informative.

    Returns:
        (sd, d), each an int64 array of shape (nits,).
    """
    s, k, nits = design.s, design.k, design.nits
    chunk = max(1, _MAX_DRAWS_PER_CHUNK // (s * k))

    sd = np.empty(nits, dtype=np.int64)
    d = np.empty(nits, dtype=np.int64)
    site_index = np.arange(s)

    for start in range(0, nits, chunk):
        stop = min(start + chunk, nits)
        n = stop - start

        n_occupied = rng.binomial(s, design.psi, size=n)
        occupied = site_index[np.newaxis, :] < n_occupied[:, np.newaxis]

        detections = rng.random((n, s, k)) < design.p
        detections &= occupied[:, :, np.newaxis]

        per_site = detections.sum(axis=2)
        sd[start:stop] = np.count_nonzero(per_site, axis=1)
        d[start:stop] = per_site.sum(axis=1)

    return sd, d
