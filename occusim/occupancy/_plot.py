"""
Diagnostic scatter of per-cell estimates.

Plots phat against psihat for every non-empty fitted cell, coloured by the
cell's empirical probability, with reference lines at the true values.
"""

from __future__ import annotations

import numpy as np

from occusim.occupancy._common import FittedTable


# Ordered low-to-high probability density.
PALETTE = (
    "#ffffcc", "#ffeda0", "#fed976", "#feb24c",
    "#fd8d3c", "#fc4e2a", "#e31a1c", "#bd0026", "#800026",
)


def plot_estimates(table: FittedTable, psi: float, p: float, ax=None):
    """
    Scatter phat vs psihat for the non-empty cells of a fitted table.

    Args:
        table: Completed frequency table with estimates.
        psi: True occupancy probability (vertical reference line).
        p: True detection probability (horizontal reference line).
        ax: Existing matplotlib Axes, or None to create a new figure.

    Returns:
        The matplotlib Axes drawn on.
    """
    import matplotlib.pyplot as plt
    from matplotlib.colors import ListedColormap

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 5))

    keep = np.isfinite(table.psihat) & np.isfinite(table.phat)
    psihat = table.psihat[keep]
    phat = table.phat[keep]
    prob = table.probability[keep]

    # Draw dense cells last so they stay visible
    order = np.argsort(prob, kind="stable")

    points = ax.scatter(
        psihat[order],
        phat[order],
        c=prob[order],
        cmap=ListedColormap(PALETTE, name="occusim_density"),
        edgecolors="0.3",
        linewidths=0.4,
        s=36,
    )
    ax.axvline(psi, color="0.2", linestyle="--", linewidth=1.0)
    ax.axhline(p, color="0.2", linestyle="--", linewidth=1.0)

    ax.set_xlim(-0.02, 1.02)
    ax.set_ylim(-0.02, 1.02)
    ax.set_xlabel(r"$\hat{\psi}$")
    ax.set_ylabel(r"$\hat{p}$")
    ax.set_title(f"psi={psi:g}, p={p:g}")
    if prob.size:
        ax.figure.colorbar(points, ax=ax, label="probability")

    return ax
