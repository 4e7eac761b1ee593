# terrain_generator/erosion.py

"""
================================================================================
THERMAL EROSION
================================================================================
Iterative slope relaxation. Each pass removes material from cells that stand
well above one or more of their eight neighbours.

Data Contract:
---------------
- Inputs:
    - elevation: Normalized [0, 1] height field.
    - iterations, strength: Number of passes and erosion strength.
- Outputs:
    - A new height field, never higher than the input at any cell.
- Side Effects: None.
- Invariants: Every pass reads from a snapshot of the previous pass, so the
  visiting order of cells does not affect the result. Border cells are kept.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS


@njit
def _erosion_pass(source, strength, threshold, rate):
    """One erosion pass. Reads only from source and writes a fresh grid."""
    rows, cols = source.shape
    result = source.copy()

    for z in range(1, rows - 1):
        for x in range(1, cols - 1):
            current = source[z, x]
            total_diff = 0.0
            steep_neighbors = 0

            for dz in range(-1, 2):
                for dx in range(-1, 2):
                    if dz == 0 and dx == 0:
                        continue
                    diff = current - source[z + dz, x + dx]
                    if diff > threshold:
                        total_diff += diff
                        steep_neighbors += 1

            if steep_neighbors > 0:
                amount = (total_diff / steep_neighbors) * strength * rate
                result[z, x] = max(0.0, current - amount)

    return result


def thermal_erosion(elevation: np.ndarray, iterations: int, strength: float) -> np.ndarray:
    """Runs the given number of erosion passes and returns the eroded field."""
    eroded = np.nan_to_num(np.asarray(elevation, dtype=np.float64), nan=0.0)
    eroded = eroded.copy()
    strength = max(0.0, float(strength))

    for _ in range(max(0, int(iterations))):
        eroded = _erosion_pass(eroded, strength, DEFAULTS.EROSION_TALUS_THRESHOLD, DEFAULTS.EROSION_RATE)

    return eroded
