"""
Input validation utilities for occusim.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (a float 3.0 is not a site count)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import math
import numbers

from occusim.core.exceptions import ValidationError


def check_probability(
    value,
    name: str,
    *,
    allow_zero: bool = False,
    allow_one: bool = False,
) -> float:
    """
    Validate a probability and return it as a float.

    Args:
        value: Candidate probability
        name: Parameter name for error messages
        allow_zero: Accept exactly 0
        allow_one: Accept exactly 1

    Returns:
        The value as a Python float

    Raises:
        ValidationError: If value is not a finite real number in the
            requested interval
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(
            f"{name}: expected a real number, got {type(value).__name__}"
        )

    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{name}: must be finite, got {value}")

    lower_ok = value >= 0.0 if allow_zero else value > 0.0
    upper_ok = value <= 1.0 if allow_one else value < 1.0
    if not (lower_ok and upper_ok):
        interval = (
            f"{'[' if allow_zero else '('}0, 1{']' if allow_one else ')'}"
        )
        raise ValidationError(f"{name}: must lie in {interval}, got {value}")

    return value


def check_positive_int(value, name: str) -> int:
    """
    Validate a strictly positive integer count.

    Args:
        value: Candidate count
        name: Parameter name for error messages

    Returns:
        The value as a Python int

    Raises:
        ValidationError: If value is not an integer or is < 1
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__} ({value!r})"
        )

    value = int(value)
    if value < 1:
        raise ValidationError(f"{name}: must be >= 1, got {value}")

    return value


def check_nonnegative_int(value, name: str) -> int:
    """
    Validate a non-negative integer (e.g. a random seed).

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__} ({value!r})"
        )

    value = int(value)
    if value < 0:
        raise ValidationError(f"{name}: must be >= 0, got {value}")

    return value


def check_choice(value, choices: tuple[str, ...], name: str) -> str:
    """
    Verify a string option is one of the allowed choices.

    Args:
        value: Candidate option
        choices: Allowed values
        name: Parameter name for error messages

    Raises:
        ValidationError: If value is not one of choices
    """
    if value not in choices:
        allowed = ", ".join(repr(c) for c in choices)
        raise ValidationError(f"{name}: must be one of {allowed}, got {value!r}")
    return value
