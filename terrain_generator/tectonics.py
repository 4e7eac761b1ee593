# terrain_generator/tectonics.py

"""
================================================================================
TECTONIC SHAPING
================================================================================
This module perturbs the base elevation with plate-boundary features. A low
frequency "plate boundary" noise field stands in for the distance to a plate
edge: high values raise convergent mountain ranges, low values sink rift
valleys. Optional volcanism raises isolated cones.

Data Contract:
---------------
- Inputs:
    - elevation: Normalized [0, 1] height field.
    - x, z: Coordinate grids matching the elevation shape.
    - seed, volcanic_activity.
- Outputs:
    - A new normalized [0, 1] height field.
- Side Effects: None.
================================================================================
"""

import numpy as np

from . import config as DEFAULTS
from . import noise


def plate_boundary_field(x_coords: np.ndarray, z_coords: np.ndarray, seed: int) -> np.ndarray:
    """Absolute boundary noise in [0, 1]. 1 = convergent edge, 0 = rift."""
    scale = DEFAULTS.PLATE_BOUNDARY_SCALE
    return np.abs(noise.noise_grid(x_coords / scale, z_coords / scale, seed))


def volcanic_field(x_coords: np.ndarray, z_coords: np.ndarray, seed: int) -> np.ndarray:
    """Signed volcanic noise in [-1, 1]. Cones form where it exceeds the threshold."""
    scale = DEFAULTS.VOLCANIC_SCALE
    return noise.noise_grid(x_coords / scale, z_coords / scale, seed)


def volcanic_mask(x_coords: np.ndarray, z_coords: np.ndarray, seed: int) -> np.ndarray:
    """Boolean mask of the cells that sit on a volcanic cone."""
    return volcanic_field(x_coords, z_coords, seed) > DEFAULTS.VOLCANIC_THRESHOLD


def apply_tectonics(elevation: np.ndarray, x_coords: np.ndarray, z_coords: np.ndarray,
                    seed: int, volcanic_activity: bool = False) -> np.ndarray:
    """
    Raises convergent ranges and lowers rift valleys quadratically with the
    distance past each threshold, then optionally adds volcanic cones.
    """
    boundary = plate_boundary_field(x_coords, z_coords, seed)

    # 1. Convergent boundaries push up mountain ranges.
    uplift = np.where(
        boundary > DEFAULTS.CONVERGENT_THRESHOLD,
        np.power(boundary - DEFAULTS.CONVERGENT_THRESHOLD, 2) * DEFAULTS.CONVERGENT_UPLIFT,
        0.0
    )

    # 2. Divergent boundaries open rift valleys.
    rift = np.where(
        boundary < DEFAULTS.DIVERGENT_THRESHOLD,
        np.power(DEFAULTS.DIVERGENT_THRESHOLD - boundary, 2) * DEFAULTS.RIFT_DEPTH,
        0.0
    )

    shaped = elevation + uplift - rift

    # 3. Volcanic cones on top of everything else.
    if volcanic_activity:
        volcanic = volcanic_field(x_coords, z_coords, seed)
        cones = np.where(
            volcanic > DEFAULTS.VOLCANIC_THRESHOLD,
            np.power(volcanic - DEFAULTS.VOLCANIC_THRESHOLD, 2) * DEFAULTS.VOLCANIC_UPLIFT,
            0.0
        )
        shaped = shaped + cones

    return np.clip(shaped, 0.0, 1.0)
