"""
Tests for the per-cell MLE fitter: boundary rule, numerical fits,
empty cells, and convergence failures.
"""

import math

import numpy as np
import pytest

from occusim.core.exceptions import ConvergenceError
from occusim.core.compute.tolerances import OptimizerSettings, select_settings
from occusim.occupancy._common import BOUNDARY, EMPTY, FAILED, OPTIMIZED
from occusim.occupancy._fit import (
    boundary_estimates,
    boundary_rule,
    failed_cell,
    fit_cell,
    optimize_cell,
    starting_values,
)
from occusim.occupancy._likelihood import negative_loglik_gradient, to_logit


# ---------------------------------------------------------------------------
# Boundary rule
# ---------------------------------------------------------------------------

class TestBoundaryRule:

    def test_all_sites_detected(self):
        # (s - SD)/s = 0 < (1 - d/(sk))^k unless every replicate was positive
        assert boundary_rule(5, 7, 5, 3)
        assert not boundary_rule(5, 15, 5, 3)

    def test_interior_cell(self):
        # 0.5 < (1 - 10/30)^3 = 0.296 is false
        assert not boundary_rule(5, 10, 10, 3)

    def test_single_detections(self):
        # 0.5 < (1 - 1/4)^2 = 0.5625
        assert boundary_rule(1, 1, 2, 2)
        # 0.5 < (1 - 2/4)^2 = 0.25 is false
        assert not boundary_rule(1, 2, 2, 2)

    def test_deterministic(self):
        decisions = {boundary_rule(7, 9, 20, 8) for _ in range(100)}
        assert len(decisions) == 1

    def test_boundary_estimates_exact(self):
        psihat, phat = boundary_estimates(3, 7, 5, 3)
        assert psihat == 1.0
        assert phat == 7 / 15


# ---------------------------------------------------------------------------
# fit_cell dispatch
# ---------------------------------------------------------------------------

class TestFitCell:

    def test_empty_cell(self):
        cell = fit_cell(0, 0, 40, 100, 0.8, 0.5, 10, 3)
        assert cell.status == EMPTY
        assert math.isnan(cell.psihat) and math.isnan(cell.phat)
        assert cell.probability == 0.4
        assert not cell.has_estimate

    def test_boundary_cell(self):
        cell = fit_cell(5, 7, 10, 100, 1.0, 0.5, 5, 3)
        assert cell.status == BOUNDARY
        assert cell.psihat == 1.0
        assert cell.phat == 7 / 15
        assert cell.has_estimate

    def test_optimized_cell_reaches_mle(self):
        # Interior optimum: psihat (1 - (1 - phat)^3) = 0.5 and
        # phat / (1 - (1 - phat)^3) = 10 / 15
        cell = fit_cell(5, 10, 25, 100, 0.8, 0.5, 10, 3)
        assert cell.status == OPTIMIZED
        assert cell.phat == pytest.approx(0.6347, abs=2e-3)
        assert cell.psihat == pytest.approx(0.5 / (1 - (1 - cell.phat) ** 3), abs=1e-4)

        grad = negative_loglik_gradient(to_logit(cell.psihat, cell.phat), 5, 10, 10, 3)
        assert np.max(np.abs(grad)) < 1e-3

    def test_optimized_from_psi_one_start(self):
        cell = fit_cell(5, 10, 25, 100, 1.0, 0.5, 10, 3)
        assert cell.psihat == pytest.approx(0.5 / (1 - (1 - 0.6347) ** 3), abs=5e-3)

    def test_every_replicate_positive(self):
        # d = s k: likelihood increases towards psi = p = 1
        cell = fit_cell(4, 8, 90, 100, 1.0, 0.97, 4, 2)
        assert cell.status == OPTIMIZED
        assert cell.psihat > 0.99
        assert cell.phat > 0.99
        assert cell.psihat <= 1.0 and cell.phat <= 1.0

    @pytest.mark.parametrize("method", ["BFGS", "Nelder-Mead", "Powell", "L-BFGS-B"])
    def test_methods_agree(self, method):
        settings = select_settings(method)
        cell = fit_cell(6, 11, 1, 10, 0.7, 0.4, 15, 4, settings)
        reference = fit_cell(6, 11, 1, 10, 0.7, 0.4, 15, 4)
        assert cell.psihat == pytest.approx(reference.psihat, abs=1e-3)
        assert cell.phat == pytest.approx(reference.phat, abs=1e-3)

    def test_estimates_in_unit_interval(self):
        # Every reachable cell: 1 <= SD <= s, SD <= d <= k SD
        s, k = 6, 3
        for sd in range(1, s + 1):
            for d in range(sd, sd * k + 1):
                cell = fit_cell(sd, d, 1, 1, 0.6, 0.3, s, k)
                assert cell.status in (BOUNDARY, OPTIMIZED)
                assert 0.0 <= cell.psihat <= 1.0
                assert 0.0 <= cell.phat <= 1.0

    @pytest.mark.parametrize("sd, d", [(2, 7), (0, 3), (3, 2), (7, 7)])
    def test_impossible_pair_rejected(self, sd, d):
        # s = 6, k = 3: d > k SD, d > 0 with SD = 0, d < SD, SD > s
        with pytest.raises(ValueError, match="inconsistent sufficient statistics"):
            fit_cell(sd, d, 1, 1, 0.6, 0.3, 6, 3)

    def test_impossible_pair_skips_optimizer(self, monkeypatch):
        from occusim.occupancy import _fit

        def fail(*args, **kwargs):
            raise AssertionError("optimizer should not run")

        monkeypatch.setattr(_fit, "optimize_cell", fail)
        with pytest.raises(ValueError):
            fit_cell(2, 7, 1, 1, 0.6, 0.3, 6, 3)


# ---------------------------------------------------------------------------
# Optimizer failures
# ---------------------------------------------------------------------------

class TestConvergenceFailure:

    @pytest.fixture
    def starved(self):
        """Settings that stop BFGS after one iteration."""
        return OptimizerSettings(
            method='BFGS',
            options=(('maxiter', 1),),
            stationary_tol=1e-12,
            name='starved',
            description='one iteration only',
        )

    def test_raises_convergence_error(self, starved):
        with pytest.raises(ConvergenceError) as excinfo:
            optimize_cell(5, 10, 10, 3, np.zeros(2), starved)
        err = excinfo.value
        assert err.iterations <= 1
        assert err.final_change > err.threshold
        assert "SD=5, d=10" in str(err)

    def test_fit_cell_propagates(self, starved):
        with pytest.raises(ConvergenceError):
            fit_cell(5, 10, 1, 10, 0.5, 0.5, 10, 3, starved)

    def test_failed_cell_record(self):
        cell = failed_cell(5, 10, 3, 10)
        assert cell.status == FAILED
        assert cell.probability == 0.3
        assert math.isnan(cell.psihat) and math.isnan(cell.phat)
        assert not cell.has_estimate


class TestStartingValues:

    def test_psi_one_is_clipped(self):
        theta = starting_values(1.0, 0.5)
        assert np.all(np.isfinite(theta))
        assert theta[1] == 0.0

    def test_interior_values_unchanged(self):
        np.testing.assert_allclose(starting_values(0.3, 0.6), to_logit(0.3, 0.6))
