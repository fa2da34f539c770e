"""
Occupancy-design backends.

Available backends:
    CPUOccupancyBackend: CPU reference implementation (numpy + scipy.optimize)
"""

from occusim.occupancy.backends.cpu import CPUOccupancyBackend

__all__ = [
    "CPUOccupancyBackend",
]
