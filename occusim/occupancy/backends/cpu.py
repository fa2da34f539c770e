"""
CPU backend for occupancy-design evaluation.

CPUOccupancyBackend: simulate histories, tabulate (SD, d) frequencies,
fit each distinct cell, and summarize estimator properties.
"""

from __future__ import annotations

import warnings

import numpy as np

from occusim.core.result import Result
from occusim.core.exceptions import ConvergenceError, DegenerateAggregateWarning
from occusim.core.compute.timing import Timer
from occusim.core.compute.tolerances import OptimizerSettings, select_settings
from occusim.occupancy._common import FAILED, CellFit, DesignParams, FittedTable
from occusim.occupancy._fit import failed_cell, fit_cell
from occusim.occupancy._frequency import FrequencyTable
from occusim.occupancy._histories import simulate_statistics
from occusim.occupancy._properties import summarize_table
from occusim.occupancy.design import OccupancyDesign


class CPUOccupancyBackend:
    """
    CPU backend for Monte Carlo occupancy-design evaluation.

    One optimizer call per distinct (SD, d) cell, not per realization.
    """

    def __init__(self, method: str = 'BFGS'):
        self._settings: OptimizerSettings = select_settings(method)

    @property
    def name(self) -> str:
        return f'cpu_occupancy_{self._settings.name}'

    def solve(self, design: OccupancyDesign) -> Result[DesignParams]:
        """Run the simulation and return Result[DesignParams]."""
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        rng = np.random.default_rng(design.seed)

        with timer.section('simulation'):
            sd, d = simulate_statistics(design, rng)

        with timer.section('aggregation'):
            frequencies = FrequencyTable()
            frequencies.update(sd, d)

        with timer.section('fitting'):
            cells = self._fit_cells(frequencies, design, warnings_list)
            table = FittedTable.from_cells(cells)

        with timer.section('summary_statistics'):
            params = summarize_table(table, design.psi, design.p)

        if not params.all_histories.defined:
            if params.pempty >= 100.0:
                msg = (
                    "All realizations produced empty histories; "
                    "estimator properties are undefined"
                )
            else:
                msg = (
                    "No realization produced a usable estimate; "
                    "estimator properties are undefined"
                )
            warnings_list.append(msg)
            warnings.warn(msg, DegenerateAggregateWarning, stacklevel=3)

        timer.stop()

        return Result(
            params=params,
            info={
                **design.metadata,
                'method': self._settings.method,
                'n_cells': len(table),
                'n_failed': int(np.count_nonzero(table.mask(FAILED))),
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _fit_cells(
        self,
        frequencies: FrequencyTable,
        design: OccupancyDesign,
        warnings_list: list[str],
    ) -> list[CellFit]:
        """Fit every cell, recording optimizer failures instead of raising."""
        n_total = frequencies.n_total
        cells = []
        for (cell_sd, cell_d), count in frequencies.items():
            try:
                cell = fit_cell(
                    cell_sd, cell_d, count, n_total,
                    design.psi, design.p, design.s, design.k,
                    self._settings,
                )
            except ConvergenceError as e:
                warnings_list.append(f"{e} (cell marked as failed)")
                cell = failed_cell(cell_sd, cell_d, count, n_total)
            cells.append(cell)
        return cells
