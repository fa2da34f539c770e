"""
occusim: Monte Carlo evaluation of occupancy sampling designs.

Supports eDNA survey planning: given an assumed occupancy probability and
per-replicate detection probability, how many sites and replicates are
needed for reliable maximum-likelihood estimates?

Submodules:
    occupancy: Design simulation, per-cell MLE fits, estimator properties
    core: Result envelope, exceptions, validation, timing
"""

__version__ = "0.1.0"

from occusim import occupancy
from occusim.occupancy import evaluate_design, evaluate_grid, minimum_sites

__all__ = [
    "__version__",
    "occupancy",
    "evaluate_design",
    "evaluate_grid",
    "minimum_sites",
]
