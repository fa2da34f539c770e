"""
Wall-clock timing for simulation runs.

A design evaluation spends its time in four stages: drawing histories,
tabulating (SD, d) pairs, fitting the distinct cells and weighting the
fits. The backend wraps each stage in a Timer section so that
``solution.timing`` shows where a slow design loses its time (usually the
fitting stage, which grows with the number of distinct cells rather than
with nits).
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Run timer with named, accumulating stages.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('simulation'):
            sd, d = simulate_statistics(design, rng)
        with timer.section('fitting'):
            cells = fit_all(frequencies)
        timer.stop()
        timer.result()
        # {'total_seconds': 0.41, 'simulation': 0.03, 'fitting': 0.37}

    Entering the same stage twice adds to its total. Stage times are not
    required to sum to total_seconds.
    """

    def __init__(self):
        self._t0: float | None = None
        self._total: float | None = None
        self._stages: dict[str, float] = {}

    def start(self) -> None:
        self._t0 = time.perf_counter()

    def stop(self) -> None:
        if self._t0 is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._t0

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent inside the block to stage ``name``."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._stages[name] = self._stages.get(name, 0.0) + (time.perf_counter() - t0)

    def result(self) -> dict[str, float]:
        """
        Timings in seconds, keyed 'total_seconds' plus one key per stage.

        Raises:
            RuntimeError: If the timer has not been stopped.
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._stages}


@contextmanager
def timed() -> Iterator[Timer]:
    """
    Time a block of calls, e.g. a batch of designs.

        with timed() as timer:
            evaluate_grid(0.8, 0.5, sites=[10, 20], replicates=[3, 5])
        timer.result()['total_seconds']
    """
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
