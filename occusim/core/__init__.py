"""
Core infrastructure for occusim.

This module provides shared abstractions and utilities used by the
domain-specific submodules.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and optimizer settings
"""

from occusim.core.result import Result
from occusim.core.exceptions import (
    OccuSimError,
    ValidationError,
    NumericalError,
    ConvergenceError,
    DegenerateAggregateWarning,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "OccuSimError",
    "ValidationError",
    "NumericalError",
    "ConvergenceError",
    "DegenerateAggregateWarning",
]
