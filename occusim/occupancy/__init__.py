"""
Occupancy-design simulation.

Monte Carlo evaluation of site-occupancy sampling designs: how well do
maximum-likelihood estimates of occupancy (psi) and detection probability
(p) perform for a given number of sites and replicates?

Usage:
    from occusim.occupancy import evaluate_design, minimum_sites

    sol = evaluate_design(psi=1.0, p=0.97, s=2, k=2, seed=1, plot=False)
    sol.psi_mse, sol.pempty

    s = minimum_sites(psi=1.0, p=0.5, k=3, threshold=0.05)
"""

from occusim.occupancy.solvers import evaluate_design, evaluate_grid, minimum_sites
from occusim.occupancy.design import OccupancyDesign
from occusim.occupancy.solution import DesignGridSolution, DesignSolution

__all__ = [
    "evaluate_design",
    "evaluate_grid",
    "minimum_sites",
    "OccupancyDesign",
    "DesignSolution",
    "DesignGridSolution",
]
