"""
Shared compute infrastructure for occusim.

This module provides timing utilities and optimizer settings that are
shared across domain-specific backends.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/.

Submodules:
    timing: Execution timing utilities
    tolerances: Optimizer settings and Monte Carlo tolerance tiers
"""

from occusim.core.compute.timing import Timer, timed
from occusim.core.compute.tolerances import (
    OptimizerSettings,
    ToleranceTier,
    select_settings,
)

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Settings
    "OptimizerSettings",
    "ToleranceTier",
    "select_settings",
]
