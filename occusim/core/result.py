"""
Backend output envelope.

Every backend returns a Result whose ``params`` holds its own payload
(DesignParams for occupancy runs). The Solution classes read design
metadata from ``info``, stage timings from ``timing`` and per-run
diagnostics such as failed cell fits from ``warnings``.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Frozen output of one backend run.

    Attributes:
        params: Backend payload, e.g. DesignParams.
        info: Design values plus run facts ('method', 'n_cells', 'n_failed').
        timing: Seconds per stage from Timer.result(), or None when the
            caller did not time the run.
        backend_name: Backend and optimizer, e.g. 'cpu_occupancy_bfgs'.
        warnings: One message per non-fatal problem, in the order met.

    Example:
        >>> result = CPUOccupancyBackend().solve(design)
        >>> result.info['n_cells'], result.params.pempty
        (14, 0.0)
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """True if some warning message contains ``substring``."""
        return any(substring in message for message in self.warnings)
