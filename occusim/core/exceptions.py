"""
Exception hierarchy for occusim.

All exceptions inherit from OccuSimError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class OccuSimError(Exception):
    """Base exception for all occusim errors."""
    pass


class ValidationError(OccuSimError):
    """
    Input validation failed.

    Raised when user-provided design parameters fail validation checks,
    before any simulation is run.
    """
    pass


class NumericalError(OccuSimError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class ConvergenceError(NumericalError):
    """
    Iterative optimizer failed to converge.

    Raised when the likelihood optimizer for a single (SD, d) cell stops
    without reaching a stationary point. Backends absorb this error and
    record the cell as failed instead of aborting the run.

    Attributes:
        iterations: Number of iterations completed
        final_change: Largest absolute gradient component at the stopping point
        reason: Optimizer message explaining the stop
        threshold: The stationarity threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class DegenerateAggregateWarning(UserWarning):
    """
    Estimator properties are undefined for a run.

    Emitted when no realization produced a usable estimate (every history
    was empty, or every non-empty cell failed to fit), so bias, variance
    and MSE would require dividing by zero probability mass.
    """
    pass
