# terrain_generator/weathering.py

"""
================================================================================
SURFACE WEATHERING
================================================================================
Removes a thin, spatially varying layer of material from the biome-modified
surface: broad chemical weathering plus patchier physical weathering.

Data Contract:
---------------
- Inputs:
    - elevation: Normalized [0, 1] height field.
    - x, z: Coordinate grids matching the elevation shape.
    - seed, intensity ([0, 1]).
- Outputs:
    - A new height field, never higher than the input, floored at 0.
- Side Effects: None.
================================================================================
"""

import numpy as np

from . import config as DEFAULTS
from . import noise


def apply_weathering(elevation: np.ndarray, x_coords: np.ndarray, z_coords: np.ndarray,
                     seed: int, intensity: float) -> np.ndarray:
    elevation = np.nan_to_num(elevation, nan=0.0)
    if intensity <= 0.0:
        return elevation.copy()

    chemical_scale = DEFAULTS.CHEMICAL_WEATHERING_SCALE
    chemical = (noise.noise_grid(x_coords / chemical_scale, z_coords / chemical_scale, seed) + 1.0) * 0.5
    chemical *= intensity * DEFAULTS.CHEMICAL_WEATHERING_RATE

    physical_scale = DEFAULTS.PHYSICAL_WEATHERING_SCALE
    physical = np.abs(noise.noise_grid(x_coords / physical_scale, z_coords / physical_scale, seed))
    physical *= intensity * DEFAULTS.PHYSICAL_WEATHERING_RATE

    return np.maximum(0.0, elevation - chemical - physical)
