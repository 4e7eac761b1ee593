# terrain_generator/hydrology.py

"""
================================================================================
HYDROLOGY: RIVERS & COASTLINES
================================================================================
This module traces rivers downhill from local high points, carves their
channels and banks into the height field, and shapes the shoreline with wave
erosion and beach leveling.

Data Contract:
---------------
- Inputs:
    - elevation: Normalized [0, 1] height field (after weathering).
    - seed, water_level, river_meandering and the coastline toggles.
- Outputs:
    - river_map: float array of river strengths, >= 0, zero off-channel.
    - Carved and coast-shaped height fields in [0, 1].
- Side Effects: None.
- Invariants:
    - Source cells come from the coordinate hash; no stateful RNG is used.
    - Strength along a single trace never increases.
    - Carving only removes material, and never takes a cell that starts above
      the channel floor (water_level - 0.1) below it.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS
from . import noise


def river_source_count(width: int, depth: int) -> int:
    """One source per CELLS_PER_RIVER_SOURCE cells, rounded down."""
    return (int(width) * int(depth)) // DEFAULTS.CELLS_PER_RIVER_SOURCE


def pick_river_sources(elevation: np.ndarray, count: int, seed: int) -> list[tuple[int, int]]:
    """
    Picks `count` river origins as (z, x) cells. Each starts from a hashed cell
    and climbs to the highest cell within RIVER_SOURCE_SEARCH_RADIUS.
    """
    rows, cols = elevation.shape
    radius = DEFAULTS.RIVER_SOURCE_SEARCH_RADIUS
    source_seed = seed + DEFAULTS.RIVER_SOURCE_SEED_OFFSET
    sources = []

    for i in range(count):
        x = min(int(noise.hash_unit(i, 0, source_seed) * cols), cols - 1)
        z = min(int(noise.hash_unit(i, 1, source_seed) * rows), rows - 1)

        z0, z1 = max(0, z - radius), min(rows, z + radius + 1)
        x0, x1 = max(0, x - radius), min(cols, x + radius + 1)
        window = elevation[z0:z1, x0:x1]
        dz, dx = np.unravel_index(np.argmax(window), window.shape)
        sources.append((z0 + int(dz), x0 + int(dx)))

    return sources


@njit
def _trace_river(elevation, meander, start_z, start_x, meandering, meander_weight,
                 max_steps, initial_strength, decay, min_strength):
    rows, cols = elevation.shape
    zs = np.empty(max_steps, dtype=np.int64)
    xs = np.empty(max_steps, dtype=np.int64)
    strengths = np.empty(max_steps, dtype=np.float64)

    z = start_z
    x = start_x
    strength = initial_strength
    count = 0

    while count < max_steps and strength > min_strength:
        zs[count] = z
        xs[count] = x
        strengths[count] = strength
        count += 1

        current = elevation[z, x]
        best_score = 0.0
        best_z = -1
        best_x = -1
        for dz in range(-1, 2):
            for dx in range(-1, 2):
                if dz == 0 and dx == 0:
                    continue
                nz = z + dz
                nx = x + dx
                if nz < 0 or nz >= rows or nx < 0 or nx >= cols:
                    continue
                score = current - elevation[nz, nx] + meander[nz, nx] * meandering * meander_weight
                if score > best_score:
                    best_score = score
                    best_z = nz
                    best_x = nx

        # Local minimum: nothing improves on staying put.
        if best_z < 0:
            break

        z = best_z
        x = best_x
        strength *= decay

    return zs[:count], xs[:count], strengths[:count]


def trace_river(elevation: np.ndarray, meander: np.ndarray, start_z: int, start_x: int,
                meandering: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Follows the steepest meander-adjusted descent from a source cell.
    Returns the visited rows, columns and the strength at each step.
    """
    return _trace_river(
        np.ascontiguousarray(elevation, dtype=np.float64),
        np.ascontiguousarray(meander, dtype=np.float64),
        int(start_z), int(start_x), float(meandering), DEFAULTS.MEANDER_WEIGHT,
        DEFAULTS.RIVER_MAX_STEPS, DEFAULTS.RIVER_INITIAL_STRENGTH,
        DEFAULTS.RIVER_STRENGTH_DECAY, DEFAULTS.RIVER_MIN_STRENGTH
    )


def meander_field(shape: tuple[int, int], seed: int) -> np.ndarray:
    rows, cols = shape
    x_coords, z_coords = noise.coordinate_grid(cols, rows)
    scale = DEFAULTS.MEANDER_SCALE
    return noise.noise_grid(x_coords / scale, z_coords / scale, seed)


def generate_river_map(elevation: np.ndarray, seed: int, meandering: float) -> np.ndarray:
    """
    Traces every river and records, per cell, the strongest river that passed
    through it.
    """
    elevation = np.nan_to_num(elevation, nan=0.0)
    rows, cols = elevation.shape
    river_map = np.zeros((rows, cols), dtype=np.float64)

    count = river_source_count(cols, rows)
    if count == 0:
        return river_map

    meander = meander_field(elevation.shape, seed)
    for start_z, start_x in pick_river_sources(elevation, count, seed):
        zs, xs, strengths = trace_river(elevation, meander, start_z, start_x, meandering)
        np.maximum.at(river_map, (zs, xs), strengths)

    return river_map


def _shifted(grid: np.ndarray, dz: int, dx: int, pad: int) -> np.ndarray:
    """grid[z + dz, x + dx], reading zero outside the grid."""
    rows, cols = grid.shape
    padded = np.pad(grid, pad)
    return padded[pad + dz:pad + dz + rows, pad + dx:pad + dx + cols]


def carve_rivers(elevation: np.ndarray, river_map: np.ndarray, water_level: float) -> np.ndarray:
    """
    Lowers river cells by strength * RIVER_CHANNEL_DEPTH and their banks by a
    distance-weighted share of the strongest nearby river.
    """
    elevation = np.nan_to_num(elevation, nan=0.0)
    channel_loss = river_map * DEFAULTS.RIVER_CHANNEL_DEPTH

    radius = DEFAULTS.RIVER_BANK_RADIUS
    bank_loss = np.zeros_like(elevation)
    for dz in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            distance = np.hypot(dz, dx)
            if distance == 0 or distance >= radius:
                continue
            falloff = (radius - distance) / radius
            neighbour_strength = _shifted(river_map, dz, dx, radius)
            bank_loss = np.maximum(bank_loss, falloff * neighbour_strength * DEFAULTS.RIVER_BANK_DEPTH)

    floor = np.minimum(elevation, water_level - DEFAULTS.RIVER_MAX_DEPTH_BELOW_WATER)
    carved = np.maximum(elevation - channel_loss - bank_loss, floor)
    return np.clip(carved, 0.0, 1.0)


def shape_coastline(elevation: np.ndarray, x_coords: np.ndarray, z_coords: np.ndarray, seed: int,
                    water_level: float, coastal_erosion: bool = True,
                    beach_generation: bool = True) -> np.ndarray:
    """Wave erosion along the shoreline, then flattening of the beach band."""
    shaped = np.nan_to_num(elevation, nan=0.0).copy()

    # 1. Wave erosion, strongest right at the waterline.
    if coastal_erosion:
        band = DEFAULTS.COASTAL_BAND
        proximity = np.maximum(0.0, (band - np.abs(shaped - water_level)) / band)
        waves = np.abs(noise.noise_grid(x_coords / DEFAULTS.WAVE_SCALE, z_coords / DEFAULTS.WAVE_SCALE, seed))
        shaped = np.where(shaped < water_level + band, shaped - waves * proximity * DEFAULTS.WAVE_EROSION, shaped)

    # 2. Beaches: compress the band just above the water into a gentle slope.
    if beach_generation:
        beach_mask = (shaped >= water_level) & (shaped < water_level + DEFAULTS.BEACH_BAND)
        shaped = np.where(beach_mask, water_level + (shaped - water_level) * DEFAULTS.BEACH_FLATTENING, shaped)

    return np.clip(shaped, 0.0, 1.0)
