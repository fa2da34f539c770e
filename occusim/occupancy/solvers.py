"""
Public API for occupancy-design evaluation.

    evaluate_design(psi, p, s, k) -> DesignSolution
    evaluate_grid(psi, p, sites, replicates) -> DesignGridSolution
    minimum_sites(psi, p, k) -> int | None

Each function validates inputs, creates an OccupancyDesign, dispatches to
the CPU backend, and wraps the Result in a Solution.
"""

from __future__ import annotations

import math
import warnings
from collections.abc import Sequence
from typing import Literal

import numpy as np

from occusim.core.compute.tolerances import SUPPORTED_METHODS
from occusim.core.validation import check_choice, check_positive_int
from occusim.occupancy.backends.cpu import CPUOccupancyBackend
from occusim.occupancy.design import OccupancyDesign
from occusim.occupancy.solution import CRITERIA, DesignGridSolution, DesignSolution


MethodChoice = Literal['BFGS', 'Nelder-Mead', 'Powell', 'L-BFGS-B']


def evaluate_design(
    psi: float,
    p: float,
    s: int,
    k: int,
    nits: int = 10000,
    report: bool = True,
    plot: bool = True,
    *,
    seed: int | None = None,
    method: MethodChoice = 'BFGS',
    ax=None,
) -> DesignSolution:
    """
    Monte Carlo evaluation of an occupancy sampling design.

    Simulates nits detection histories for s sites with k replicates,
    fits (psihat, phat) by maximum likelihood for each distinct
    (sites detected, total detections) pair, and reports bias, variance
    and MSE of the estimators.

    Parameters
    ----------
    psi : float
        Assumed occupancy probability, 0 < psi <= 1.
    p : float
        Assumed per-replicate detection probability, 0 < p < 1.
        Values above about 0.97 make the fits imprecise.
    s : int
        Number of sites.
    k : int
        Number of replicates per site.
    nits : int
        Number of Monte Carlo realizations (default 10000).
    report : bool
        Print the summary report.
    plot : bool
        Draw the phat vs psihat diagnostic scatter (available as
        ``solution.figure``). Without ``ax`` a new pyplot figure is
        opened on every call and stays open until the caller closes it
        with ``plt.close(solution.figure)``; pass ``plot=False`` in loops.
    seed : int or None
        Random seed for reproducibility.
    method : str
        scipy.optimize.minimize method for the per-cell fits:
        'BFGS' (default), 'Nelder-Mead', 'Powell' or 'L-BFGS-B'.
    ax : matplotlib Axes or None
        Axes to draw the scatter on instead of a new figure. Ignored
        when ``plot`` is False.

    Returns
    -------
    DesignSolution

    Raises
    ------
    ValidationError
        If any parameter is out of range. Nothing is simulated.

    Examples
    --------
    >>> from occusim import evaluate_design
    >>> sol = evaluate_design(1.0, 0.97, 2, 2, seed=1, plot=False)
    >>> sol.psi_mse < 0.01
    True
    """
    design = OccupancyDesign.for_simulation(psi, p, s, k, nits, seed=seed)
    method = check_choice(method, SUPPORTED_METHODS, "method")

    backend = CPUOccupancyBackend(method=method)
    result = backend.solve(design)
    solution = DesignSolution(_result=result, _design=design)

    if report:
        print(solution.summary())

    if plot:
        solution.plot(ax=ax)

    return solution


def _child_seeds(seed: int | None, n: int) -> list[int | None]:
    """Independent per-design seeds derived from one parent seed."""
    if seed is None:
        return [None] * n
    children = np.random.SeedSequence(seed).spawn(n)
    return [int(child.generate_state(1)[0]) for child in children]


def _check_counts(values: Sequence[int], name: str) -> tuple[int, ...]:
    values = tuple(values)
    if len(values) == 0:
        raise ValueError(f"{name} must contain at least one value")
    return tuple(check_positive_int(v, name) for v in values)


def evaluate_grid(
    psi: float,
    p: float,
    sites: Sequence[int],
    replicates: Sequence[int],
    nits: int = 10000,
    *,
    seed: int | None = None,
    method: MethodChoice = 'BFGS',
    verbose: bool = False,
) -> DesignGridSolution:
    """
    Evaluate every (s, k) combination of a design grid.

    Parameters
    ----------
    psi, p : float
        Assumed occupancy and detection probabilities.
    sites : sequence of int
        Site counts to evaluate.
    replicates : sequence of int
        Replicate counts to evaluate.
    nits : int
        Realizations per design.
    seed : int or None
        Parent seed; each design gets an independent child seed.
    method : str
        Optimizer method, as in evaluate_design().
    verbose : bool
        Print one line per evaluated design.

    Returns
    -------
    DesignGridSolution
    """
    sites = _check_counts(sites, "sites")
    replicates = _check_counts(replicates, "replicates")

    grid = [(s, k) for s in sites for k in replicates]
    seeds = _child_seeds(seed, len(grid))

    solutions: dict[tuple[int, int], DesignSolution] = {}
    for (s, k), child_seed in zip(grid, seeds):
        sol = evaluate_design(
            psi, p, s, k, nits,
            report=False, plot=False,
            seed=child_seed, method=method,
        )
        solutions[(s, k)] = sol
        if verbose:
            print(f"S={s:3d} K={k:3d}  psi_mse={sol.psi_mse:.4f}  "
                  f"pempty={sol.pempty:.2f}%")

    return DesignGridSolution(sites=sites, replicates=replicates, solutions=solutions)


def minimum_sites(
    psi: float,
    p: float,
    k: int,
    *,
    threshold: float = 0.05,
    criterion: str = "psi_mse",
    s_max: int = 100,
    nits: int = 10000,
    seed: int | None = None,
    method: MethodChoice = 'BFGS',
    verbose: bool = False,
) -> int | None:
    """
    Smallest number of sites whose criterion falls below a threshold.

    Site counts 1, 2, ..., s_max are evaluated in turn with k replicates
    each. An undefined (NaN) criterion never qualifies.

    With psi = 1 the all-histories psi-MSE is close to 0 already at s = 1:
    every non-empty history is a boundary cell or fits to psihat near 1,
    so the search returns 1 for any p. That answer says nothing about
    precision. For full occupancy search on 'p_mse', 'crit_a' or a
    boundary-excluded criterion such as 'psi_mse_b' instead.

    Parameters
    ----------
    psi, p : float
        Assumed occupancy and detection probabilities.
    k : int
        Replicates per site.
    threshold : float
        Upper bound the criterion must fall strictly below.
    criterion : str
        One of 'psi_mse', 'p_mse', 'crit_a', 'crit_d' or their
        boundary-excluded '_b' variants.
    s_max : int
        Largest site count tried.
    nits, seed, method
        As in evaluate_grid().
    verbose : bool
        Print the criterion for every site count tried.

    Returns
    -------
    int or None
        None (with a warning) when no s <= s_max qualifies.
    """
    criterion = check_choice(criterion, CRITERIA, "criterion")
    s_max = check_positive_int(s_max, "s_max")
    if not (threshold > 0 and math.isfinite(threshold)):
        raise ValueError(f"threshold must be positive and finite, got {threshold}")

    seeds = _child_seeds(seed, s_max)
    for s, child_seed in zip(range(1, s_max + 1), seeds):
        sol = evaluate_design(
            psi, p, s, k, nits,
            report=False, plot=False,
            seed=child_seed, method=method,
        )
        value = sol.criterion(criterion)
        if verbose:
            print(f"S={s:3d} K={k:3d}  {criterion}={value:.4f}")
        if not math.isnan(value) and value < threshold:
            return s

    warnings.warn(
        f"No design with s <= {s_max} reached {criterion} < {threshold} "
        f"(psi={psi:g}, p={p:g}, k={k})",
        stacklevel=2,
    )
    return None
