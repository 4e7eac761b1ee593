# terrain_generator/elevation.py

"""
================================================================================
ELEVATION SYNTHESIS
================================================================================
Layers continental, mountain, hill and detail noise into the normalized base
height field, and provides the optional ridge and terrace shaping passes.

Data Contract:
---------------
- Inputs:
    - x, z: 2D coordinate grids of shape (depth, width), in cells.
    - seed: Integer noise seed.
- Outputs:
    - NumPy arrays of normalized elevation in [0, 1], same shape as x.
- Side Effects: None.
- Invariants: Given the same seed and coordinates, the output is deterministic.
================================================================================
"""

import numpy as np

from . import config as DEFAULTS
from . import noise


def base_elevation(x_coords: np.ndarray, z_coords: np.ndarray, seed: int) -> np.ndarray:
    """
    Sums four noise bands at decreasing feature sizes and applies a power
    curve that biases the histogram toward plains with sparser peaks.
    """
    continental = noise.noise_grid(x_coords / DEFAULTS.CONTINENTAL_SCALE, z_coords / DEFAULTS.CONTINENTAL_SCALE, seed)
    mountains = np.abs(noise.noise_grid(x_coords / DEFAULTS.MOUNTAIN_SCALE, z_coords / DEFAULTS.MOUNTAIN_SCALE, seed))
    hills = noise.noise_grid(x_coords / DEFAULTS.HILL_SCALE, z_coords / DEFAULTS.HILL_SCALE, seed)
    detail = noise.noise_grid(x_coords / DEFAULTS.DETAIL_SCALE, z_coords / DEFAULTS.DETAIL_SCALE, seed)

    combined = (
        continental * DEFAULTS.CONTINENTAL_WEIGHT
        + mountains * DEFAULTS.MOUNTAIN_WEIGHT
        + hills * DEFAULTS.HILL_WEIGHT
        + detail * DEFAULTS.DETAIL_WEIGHT
    )

    redistributed = np.power(
        np.maximum(0.0, combined + DEFAULTS.ELEVATION_CURVE_SHIFT),
        DEFAULTS.ELEVATION_CURVE_EXPONENT
    ) - DEFAULTS.ELEVATION_CURVE_DROP

    return np.clip(redistributed, 0.0, 1.0)


def ridge_map(x_coords: np.ndarray, z_coords: np.ndarray, seed: int, scale: float) -> np.ndarray:
    """Sharp ridge lines where the noise crosses zero, capped at 1."""
    coarse = np.abs(noise.noise_grid(x_coords / (scale * 0.5), z_coords / (scale * 0.5), seed))
    fine = np.abs(noise.noise_grid(x_coords / (scale * 0.25), z_coords / (scale * 0.25), seed)) * 0.5
    ridges = np.power(1.0 - coarse, 2) + np.power(1.0 - fine, 3)
    return np.minimum(ridges, 1.0)


def apply_ridges(elevation: np.ndarray, x_coords: np.ndarray, z_coords: np.ndarray,
                 seed: int, ridge_strength: float, scale: float) -> np.ndarray:
    """Raises ridge lines in proportion to ridge_strength. Identity at strength 0."""
    if ridge_strength <= 0.0:
        return elevation.copy()
    ridges = ridge_map(x_coords, z_coords, seed, scale)
    raised = elevation + ridges * ridge_strength * DEFAULTS.RIDGE_HEIGHT_FACTOR
    return np.clip(raised, 0.0, 1.0)


def apply_terraces(elevation: np.ndarray, terrace_strength: float) -> np.ndarray:
    """
    Quantizes elevation into smooth-edged plateaus and blends the result with
    the input height by terrace_strength. Identity at strength 0.
    """
    if terrace_strength <= 0.0:
        return elevation.copy()

    levels = DEFAULTS.TERRACE_LEVELS
    scaled = elevation * levels
    floor = np.floor(scaled)
    blend = scaled - floor
    smooth_blend = blend * blend * (3.0 - 2.0 * blend)
    terraced = (floor + smooth_blend) / levels

    result = elevation + (terraced - elevation) * terrace_strength
    return np.clip(result, 0.0, 1.0)
