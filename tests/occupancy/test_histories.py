"""
Tests for detection-history generation and sufficient-statistic reduction.
"""

import numpy as np
import pytest

from occusim.occupancy import _histories
from occusim.occupancy._histories import (
    draw_history,
    reduce_history,
    simulate_statistics,
)
from occusim.occupancy.design import OccupancyDesign


# ---------------------------------------------------------------------------
# Single histories
# ---------------------------------------------------------------------------

class TestDrawHistory:

    def test_shape_and_values(self, rng):
        history = draw_history(0.7, 0.4, 6, 3, rng)
        assert history.shape == (6, 3)
        assert set(np.unique(history)) <= {0, 1}

    def test_unoccupied_rows_are_zero(self, rng):
        # Occupied rows come first, so once a row is all zero with p close to 1
        # every later row must be all zero as well.
        for _ in range(50):
            history = draw_history(0.5, 0.999, 8, 4, rng)
            row_hits = history.sum(axis=1)
            first_blank = np.argmax(row_hits == 0) if np.any(row_hits == 0) else 8
            assert np.all(row_hits[first_blank:] == 0)

    def test_full_occupancy_can_still_miss_sites(self, rng):
        # (1 - p)^k per site: with p = 0.2, k = 1 most sites are missed
        history = draw_history(1.0, 0.2, 50, 1, rng)
        sd, _ = reduce_history(history)
        assert sd < 50


class TestReduceHistory:

    def test_known_history(self):
        history = np.array([
            [1, 0, 1],
            [0, 0, 0],
            [0, 1, 0],
            [0, 0, 0],
        ])
        assert reduce_history(history) == (2, 3)

    def test_empty_history(self):
        assert reduce_history(np.zeros((5, 2), dtype=int)) == (0, 0)

    def test_rejects_1d(self):
        with pytest.raises(ValueError, match="2D"):
            reduce_history(np.array([1, 0, 1]))


# ---------------------------------------------------------------------------
# Batched simulation
# ---------------------------------------------------------------------------

class TestSimulateStatistics:

    @pytest.mark.parametrize("psi, p, s, k", [
        (1.0, 0.9, 5, 2),
        (0.5, 0.3, 10, 4),
        (0.2, 0.07, 20, 8),
        (0.9, 0.5, 1, 1),
    ])
    def test_statistic_bounds(self, rng, psi, p, s, k):
        design = OccupancyDesign.for_simulation(psi, p, s, k, 2000)
        sd, d = simulate_statistics(design, rng)

        assert sd.shape == d.shape == (2000,)
        assert np.all(sd >= 0) and np.all(sd <= s)
        assert np.all(d >= sd) and np.all(d <= s * k)
        np.testing.assert_array_equal(d == 0, sd == 0)

    def test_expected_detections(self, rng):
        design = OccupancyDesign.for_simulation(0.6, 0.3, 10, 4, 20000)
        _, d = simulate_statistics(design, rng)
        expected = design.s * design.k * design.psi * design.p
        assert d.mean() == pytest.approx(expected, rel=0.02)

    def test_expected_sites_detected(self, rng):
        psi, p, s, k = 0.8, 0.4, 12, 3
        design = OccupancyDesign.for_simulation(psi, p, s, k, 20000)
        sd, _ = simulate_statistics(design, rng)
        expected = s * psi * (1 - (1 - p) ** k)
        assert sd.mean() == pytest.approx(expected, rel=0.02)

    def test_chunked_generation(self, rng, monkeypatch):
        monkeypatch.setattr(_histories, "_MAX_DRAWS_PER_CHUNK", 7)
        design = OccupancyDesign.for_simulation(0.7, 0.5, 3, 2, 101)
        sd, d = simulate_statistics(design, rng)
        assert sd.shape == (101,)
        assert np.all(d >= sd)

    def test_seeded_reproducibility(self):
        design = OccupancyDesign.for_simulation(0.7, 0.5, 6, 3, 500)
        a = simulate_statistics(design, np.random.default_rng(3))
        b = simulate_statistics(design, np.random.default_rng(3))
        np.testing.assert_array_equal(a[0], b[0])
        np.testing.assert_array_equal(a[1], b[1])

    def test_low_detection_design(self, rng, low_detection_design):
        sd, d = simulate_statistics(low_detection_design, rng)
        # 160 site-visits at p = 0.07
        assert d.mean() == pytest.approx(160 * 0.07, rel=0.02)
        assert np.count_nonzero(sd == 0) <= 5

    def test_high_detection_design(self, rng, high_detection_design):
        sd, d = simulate_statistics(high_detection_design, rng)
        # Both sites are detected unless a site misses twice (p = 0.0009)
        assert np.mean(sd == 2) > 0.99
        assert np.all(d <= 4)
