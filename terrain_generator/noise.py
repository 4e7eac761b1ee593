# terrain_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides the seeded 2D noise used by every terrain stage. It is
designed to be a pure, stateless utility: no randomness is ever drawn from a
global generator, every sample is a function of (seed, x, y) only.

Data Contract:
---------------
- Inputs:
    - seed: An integer seed (see string_to_seed for string seeds).
    - x, y: Scalars or 2D NumPy arrays of coordinates.
    - scale, octaves, persistence, lacunarity: Standard fractal parameters.
- Outputs:
    - noise_2d / noise_grid: values in [-1, 1].
    - hash_unit: values in [0, 1].
    - fractal_noise_grid: values in [0, 1].
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and y.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS

# Layer tables are frozen into the compiled functions as constants.
_LAYER_FREQUENCIES = np.array(DEFAULTS.NOISE_LAYER_FREQUENCIES, dtype=np.float64)
_LAYER_WEIGHTS = np.array(DEFAULTS.NOISE_LAYER_WEIGHTS, dtype=np.float64)
_LAYER_SEED_OFFSETS = np.array(DEFAULTS.NOISE_LAYER_SEED_OFFSETS, dtype=np.int64)

_MASK_32 = 0xFFFFFFFF


def string_to_seed(seed: str) -> int:
    """
    Hashes a string seed to an unsigned 32-bit integer.
    The same string always produces the same integer on every platform.
    """
    text = str(seed)
    h = (1779033703 ^ len(text)) & _MASK_32
    for char in text:
        h = ((h ^ ord(char)) * 3432918353) & _MASK_32
        h = ((h << 13) | (h >> 19)) & _MASK_32
    return h


@njit
def hash_unit(ix, iy, seed):
    """Hashes an integer lattice coordinate to a pseudo-random value in [0, 1]."""
    h = (seed + ix * 374761393 + iy * 668265263) & 0xFFFFFFFF
    h = ((h ^ (h >> 13)) * 1274126177) & 0xFFFFFFFF
    h = h ^ (h >> 16)
    return h / 4294967295.0


@njit
def _smoothstep(t):
    "3t^2 - 2t^3"
    return t * t * (3.0 - 2.0 * t)


@njit
def improved_noise(x, y, seed):
    """Value noise with smoothstep bilinear interpolation between lattice points."""
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    xf = x - xi
    yf = y - yi

    a = hash_unit(xi, yi, seed) * 2.0 - 1.0
    b = hash_unit(xi + 1, yi, seed) * 2.0 - 1.0
    c = hash_unit(xi, yi + 1, seed) * 2.0 - 1.0
    d = hash_unit(xi + 1, yi + 1, seed) * 2.0 - 1.0

    u = _smoothstep(xf)
    v = _smoothstep(yf)

    top = a * (1.0 - u) + b * u
    bottom = c * (1.0 - u) + d * u
    return top * (1.0 - v) + bottom * v


@njit
def noise_2d(x, y, seed):
    """
    Layered noise sample in [-1, 1]. Sums four fixed frequency layers so call
    sites get fractal detail without an explicit octave loop. The raw sum spans
    +-1.875 and is clamped to [-1, 1] rather than rescaled.
    """
    total = 0.0
    for k in range(_LAYER_FREQUENCIES.shape[0]):
        frequency = _LAYER_FREQUENCIES[k]
        total += improved_noise(x * frequency, y * frequency, seed + _LAYER_SEED_OFFSETS[k]) * _LAYER_WEIGHTS[k]
    return max(-1.0, min(1.0, total))


@njit
def noise_grid(x, y, seed):
    """Evaluates noise_2d over 2D coordinate arrays."""
    rows, cols = x.shape
    result = np.empty((rows, cols))
    for i in range(rows):
        for j in range(cols):
            result[i, j] = noise_2d(x[i, j], y[i, j], seed)
    return result


@njit
def fractal_noise_grid(x, y, seed, scale, octaves, persistence, lacunarity):
    """
    Multi-octave noise over 2D coordinate arrays, normalized to [0, 1].
    Each octave multiplies amplitude by persistence and frequency by lacunarity.
    """
    rows, cols = x.shape
    result = np.empty((rows, cols))

    total_amplitude = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        total_amplitude += amplitude
        amplitude *= persistence

    for i in range(rows):
        for j in range(cols):
            value = 0.0
            amplitude = 1.0
            frequency = 1.0

            for _ in range(octaves):
                sample_x = (x[i, j] / scale) * frequency
                sample_y = (y[i, j] / scale) * frequency
                value += noise_2d(sample_x, sample_y, seed) * amplitude
                amplitude *= persistence
                frequency *= lacunarity

            if total_amplitude > 0.0:
                value /= total_amplitude
            result[i, j] = (value + 1.0) * 0.5

    return result


def coordinate_grid(width: int, depth: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Generates the integer cell coordinate grids for a width x depth map.
    Both arrays have shape (depth, width); x varies along columns, z along rows.
    """
    x_coords = np.arange(width, dtype=np.float64)
    z_coords = np.arange(depth, dtype=np.float64)
    return np.meshgrid(x_coords, z_coords)
