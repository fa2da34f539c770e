"""
pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def high_detection_design():
    """Design for a high-detection lake: full occupancy, p = 0.97."""
    from occusim.occupancy.design import OccupancyDesign
    return OccupancyDesign.for_simulation(1.0, 0.97, 2, 2, 10000, seed=7)


@pytest.fixture
def low_detection_design():
    """Worst-case design: p = 0.07 with 20 sites and 8 replicates."""
    from occusim.occupancy.design import OccupancyDesign
    return OccupancyDesign.for_simulation(1.0, 0.07, 20, 8, 10000, seed=11)
