"""
Optimizer settings and tolerance tiers.

Defines the convergence settings used by the per-cell likelihood optimizer
and the precision expectations used when comparing Monte Carlo output:
- BFGS (default): gradient-based, analytic gradient of the logit-space NLL
- Nelder-Mead: derivative-free simplex search
- MONTE_CARLO: agreement expected between two unseeded runs with large nits

Used by the occupancy backend and the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class OptimizerSettings:
    """Convergence settings for scipy.optimize.minimize."""
    method: str
    options: tuple[tuple[str, float], ...]
    stationary_tol: float
    name: str
    description: str

    def as_options(self) -> dict[str, float]:
        """Options dict for scipy.optimize.minimize."""
        return dict(self.options)


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Gradient tolerance in logit space. A stop with max |grad| below
# stationary_tol still counts as converged (flat ridges towards psi = 1).
BFGS_DEFAULT = OptimizerSettings(
    method='BFGS',
    options=(('gtol', 1e-6), ('maxiter', 500)),
    stationary_tol=1e-3,
    name='bfgs',
    description='BFGS with analytic gradient of the logit-space NLL',
)

NELDER_MEAD_DEFAULT = OptimizerSettings(
    method='Nelder-Mead',
    options=(('xatol', 1e-8), ('fatol', 1e-10), ('maxiter', 2000)),
    stationary_tol=1e-3,
    name='nelder_mead',
    description='Derivative-free simplex search',
)

POWELL_DEFAULT = OptimizerSettings(
    method='Powell',
    options=(('xtol', 1e-8), ('ftol', 1e-10), ('maxiter', 2000)),
    stationary_tol=1e-3,
    name='powell',
    description='Derivative-free conjugate direction search',
)

L_BFGS_B_DEFAULT = OptimizerSettings(
    method='L-BFGS-B',
    options=(('gtol', 1e-6), ('maxiter', 500)),
    stationary_tol=1e-3,
    name='l_bfgs_b',
    description='Limited-memory BFGS (unbounded) with analytic gradient',
)

# Methods that receive the analytic gradient.
GRADIENT_METHODS = ('BFGS', 'L-BFGS-B')

SUPPORTED_METHODS = ('BFGS', 'Nelder-Mead', 'Powell', 'L-BFGS-B')

# Two runs of the same design with nits >= 10,000 should agree on the
# weighted means and MSEs to about this precision.
MONTE_CARLO = ToleranceTier(
    rtol=0.0,
    atol=0.02,
    name='monte_carlo',
    description='Sampling noise between independent runs, nits >= 10,000',
)


def select_settings(method: str) -> OptimizerSettings:
    """Select optimizer settings for a scipy minimize method name."""
    settings = {
        'BFGS': BFGS_DEFAULT,
        'Nelder-Mead': NELDER_MEAD_DEFAULT,
        'Powell': POWELL_DEFAULT,
        'L-BFGS-B': L_BFGS_B_DEFAULT,
    }
    if method not in settings:
        raise ValueError(
            f"Unknown optimizer method: {method!r}. "
            f"Use one of {', '.join(SUPPORTED_METHODS)}."
        )
    return settings[method]
