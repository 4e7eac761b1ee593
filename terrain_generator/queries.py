# terrain_generator/queries.py

"""
================================================================================
HOST-SIDE TERRAIN QUERIES
================================================================================
Read-only lookups a game host performs against a generated terrain: ground
height under a world position, the biome at a position, and a flat, dry spawn
point near the centre of the map.

Data Contract:
---------------
- Inputs:
    - height_field: World-space heights, shape (depth, width).
    - biome_map: Biome IDs, same shape.
    - World (x, z) positions; the map is centered on the origin, so grid
      cell (gx, gz) sits at (gx - width / 2, gz - depth / 2).
- Outputs: Plain Python floats, Biome values and SpawnPoint records.
- Side Effects: None.
================================================================================
"""

from dataclasses import dataclass

import numpy as np
from scipy import ndimage

from . import config as DEFAULTS
from .biomes import Biome


@dataclass(frozen=True)
class SpawnPoint:
    grid_x: int
    grid_z: int
    x: float
    y: float
    z: float
    flatness: float


def _to_grid(shape: tuple[int, int], world_x: float, world_z: float) -> tuple[float, float]:
    depth, width = shape
    return world_x + width / 2, world_z + depth / 2


def height_at(height_field: np.ndarray, world_x: float, world_z: float) -> float:
    """Bilinearly interpolated ground height. Positions off the map are clamped to its edge."""
    depth, width = height_field.shape
    grid_x, grid_z = _to_grid(height_field.shape, world_x, world_z)
    grid_x = min(max(grid_x, 0.0), width - 1.0)
    grid_z = min(max(grid_z, 0.0), depth - 1.0)

    x0, z0 = int(np.floor(grid_x)), int(np.floor(grid_z))
    x1, z1 = min(x0 + 1, width - 1), min(z0 + 1, depth - 1)
    fx, fz = grid_x - x0, grid_z - z0

    near = height_field[z0, x0] * (1 - fx) + height_field[z0, x1] * fx
    far = height_field[z1, x0] * (1 - fx) + height_field[z1, x1] * fx
    return float(near * (1 - fz) + far * fz)


def biome_at(biome_map: np.ndarray, world_x: float, world_z: float) -> Biome:
    """The biome of the cell under a world position, or Plains off the map."""
    depth, width = biome_map.shape
    grid_x, grid_z = _to_grid(biome_map.shape, world_x, world_z)
    x, z = int(np.floor(grid_x)), int(np.floor(grid_z))
    if x < 0 or x >= width or z < 0 or z >= depth:
        return Biome.PLAINS
    return Biome(int(biome_map[z, x]))


def flatness_map(height_field: np.ndarray) -> np.ndarray:
    """Largest absolute height difference between each cell and its 3x3 neighbourhood."""
    highest = ndimage.maximum_filter(height_field, size=3, mode='nearest')
    lowest = ndimage.minimum_filter(height_field, size=3, mode='nearest')
    return np.maximum(highest - height_field, height_field - lowest)


def _ring_offsets(radius: int) -> np.ndarray:
    """(dx, dz) offsets ordered ring by ring outward from (0, 0)."""
    offsets = []
    for r in range(radius + 1):
        for dx in range(-r, r + 1):
            for dz in range(-r, r + 1):
                if abs(dx) < r and abs(dz) < r:
                    continue
                offsets.append((dx, dz))
    return np.array(offsets, dtype=np.int64)


def find_spawn_point(height_field: np.ndarray, water_height: float,
                     search_radius: int = DEFAULTS.SPAWN_SEARCH_RADIUS,
                     player_height: float = DEFAULTS.PLAYER_HEIGHT,
                     spawn_offset: float = DEFAULTS.SPAWN_OFFSET) -> SpawnPoint:
    """
    Searches outward from the map centre for the flattest cell above the
    water. Ties go to the cell closest to the centre. Falls back to the centre
    cell when every candidate is underwater.
    """
    depth, width = height_field.shape
    center_x, center_z = width // 2, depth // 2
    flatness = flatness_map(height_field)

    offsets = _ring_offsets(max(0, int(search_radius)))
    xs = center_x + offsets[:, 0]
    zs = center_z + offsets[:, 1]
    in_bounds = (xs >= 0) & (xs < width) & (zs >= 0) & (zs < depth)
    xs, zs = xs[in_bounds], zs[in_bounds]

    dry = height_field[zs, xs] > water_height
    if np.any(dry):
        candidates = np.flatnonzero(dry)
        best = candidates[np.argmin(flatness[zs[candidates], xs[candidates]])]
        best_x, best_z = int(xs[best]), int(zs[best])
    else:
        best_x, best_z = center_x, center_z

    ground = float(height_field[best_z, best_x])
    return SpawnPoint(
        grid_x=best_x,
        grid_z=best_z,
        x=best_x - width / 2,
        y=ground + player_height + spawn_offset,
        z=best_z - depth / 2,
        flatness=float(flatness[best_z, best_x]),
    )
