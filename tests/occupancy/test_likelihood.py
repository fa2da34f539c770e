"""
Tests for the occupancy log-likelihood and its logit-space gradient.
"""

import numpy as np
import pytest

from occusim.occupancy._likelihood import (
    from_logit,
    loglik,
    negative_loglik,
    negative_loglik_gradient,
    to_logit,
)


def _direct_loglik(psi, p, sd, d, s, k):
    """Straight transcription of the occupancy log-likelihood."""
    return (
        sd * np.log(psi)
        + d * np.log(p)
        + (k * sd - d) * np.log(1 - p)
        + (s - sd) * np.log((1 - psi) + psi * (1 - p) ** k)
    )


class TestLoglik:

    @pytest.mark.parametrize("psi, p, sd, d, s, k", [
        (0.6, 0.4, 5, 9, 10, 3),
        (0.3, 0.1, 1, 1, 20, 8),
        (0.9, 0.8, 4, 8, 4, 2),
    ])
    def test_matches_formula(self, psi, p, sd, d, s, k):
        assert loglik(psi, p, sd, d, s, k) == pytest.approx(
            _direct_loglik(psi, p, sd, d, s, k), rel=1e-12
        )

    def test_psi_one(self):
        # (s - SD) sites contribute log((1 - p)^k)
        value = loglik(1.0, 0.5, 1, 1, 2, 2)
        expected = np.log(0.5) + np.log(0.5) + 2 * np.log(0.5)
        assert value == pytest.approx(expected)

    def test_outside_domain(self):
        assert loglik(0.0, 0.5, 1, 1, 2, 2) == -np.inf
        assert loglik(0.5, 1.0, 1, 1, 2, 2) == -np.inf

    def test_logit_form_agrees(self):
        psi, p = 0.35, 0.62
        theta = to_logit(psi, p)
        assert -negative_loglik(theta, 3, 7, 9, 4) == pytest.approx(
            loglik(psi, p, 3, 7, 9, 4), rel=1e-12
        )


class TestGradient:

    @pytest.mark.parametrize("theta, sd, d, s, k", [
        ((0.3, -0.5), 5, 9, 10, 3),
        ((2.0, -2.5), 3, 4, 20, 8),
        ((-1.0, 1.0), 2, 5, 6, 4),
        ((4.0, 3.0), 8, 30, 8, 4),
    ])
    def test_matches_finite_differences(self, theta, sd, d, s, k):
        theta = np.array(theta, dtype=float)
        h = 1e-6
        numeric = np.empty(2)
        for i in range(2):
            step = np.zeros(2)
            step[i] = h
            numeric[i] = (
                negative_loglik(theta + step, sd, d, s, k)
                - negative_loglik(theta - step, sd, d, s, k)
            ) / (2 * h)

        analytic = negative_loglik_gradient(theta, sd, d, s, k)
        np.testing.assert_allclose(analytic, numeric, rtol=1e-5, atol=1e-6)

    def test_extreme_logits_stay_finite(self):
        for theta in ([60.0, 60.0], [-60.0, 60.0], [60.0, -60.0], [800.0, 800.0]):
            theta = np.array(theta)
            assert np.isfinite(negative_loglik(theta, 3, 5, 10, 2))
            assert np.all(np.isfinite(negative_loglik_gradient(theta, 3, 5, 10, 2)))


class TestTransforms:

    def test_round_trip(self):
        psi, p = from_logit(to_logit(0.25, 0.8))
        assert psi == pytest.approx(0.25)
        assert p == pytest.approx(0.8)

    def test_zero_logit_is_half(self):
        assert from_logit(np.zeros(2)) == (0.5, 0.5)
