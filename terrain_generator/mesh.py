# terrain_generator/mesh.py

"""
================================================================================
MESH & HEIGHT-FIELD ASSEMBLY
================================================================================
Converts the final normalized surface into the world-space height field used
for collision and queries, and into a closed, renderable triangle mesh.

Data Contract:
---------------
- Inputs:
    - surface: Final normalized [0, 1] height field, shape (depth, width).
    - biome_map: Biome IDs, same shape.
    - params: TerrainParams (height, height_offset, water_level, ...).
- Outputs:
    - world heights: surface * height + height_offset.
    - SurfaceMesh: float32 vertex buffers and uint32 triangle indices.
    - WaterPlane: a single quad at the water height.
- Side Effects: None.
- Invariants:
    - Top triangles wind counter-clockwise seen from above (+Y); the bottom
      and side skirts wind outward. No normal-flip pass is needed.
    - After welding coincident vertices, every edge is shared by exactly two
      triangles, in opposite directions.
    - Vertex layout: [top grid | bottom grid | north | south | east | west].
================================================================================
"""

from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import noise
from .color_maps import COLOR_ROCK, Material, determine_materials, get_vertex_colors, material_tile_scales


@dataclass
class SurfaceMesh:
    positions: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    colors: np.ndarray
    material_ids: np.ndarray
    indices: np.ndarray

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.shape[0])

    def _welded_triangles(self) -> np.ndarray:
        """Triangles re-indexed so that vertices sharing a position share an index."""
        _, welded = np.unique(self.positions, axis=0, return_inverse=True)
        return welded.reshape(-1)[self.indices]

    def boundary_edges(self) -> np.ndarray:
        """
        Undirected edges (pairs of welded vertex indices) that are not shared
        by exactly two triangles. Empty for a closed mesh.
        """
        triangles = self._welded_triangles()
        edges = np.concatenate([triangles[:, [0, 1]], triangles[:, [1, 2]], triangles[:, [2, 0]]])
        edges = np.sort(edges, axis=1)
        unique_edges, counts = np.unique(edges, axis=0, return_counts=True)
        return unique_edges[counts != 2]

    def orientation_conflicts(self) -> np.ndarray:
        """Directed edges used more than once. Empty when winding is consistent."""
        triangles = self._welded_triangles()
        edges = np.concatenate([triangles[:, [0, 1]], triangles[:, [1, 2]], triangles[:, [2, 0]]])
        unique_edges, counts = np.unique(edges, axis=0, return_counts=True)
        return unique_edges[counts > 1]


@dataclass
class WaterPlane:
    width: float
    depth: float
    y: float
    positions: np.ndarray
    normals: np.ndarray
    indices: np.ndarray


# --- Height Fields ---
def world_heights(surface: np.ndarray, height: float, height_offset: float) -> np.ndarray:
    """Scales a normalized surface into world units."""
    return np.nan_to_num(surface, nan=0.0) * height + height_offset


def legacy_collision_heights(params, seed: int) -> np.ndarray:
    """
    The older collision field: a fractal noise map sampled once row-major and
    once column-major, averaged, then flattened with pow(avg, 1.5) * 0.7.
    Kept for hosts that still expect it; see collision_mode.
    """
    x_coords, z_coords = noise.coordinate_grid(params.width, params.depth)
    fractal_args = (seed, params.scale, params.octaves, params.persistence, params.lacunarity)

    by_row = noise.fractal_noise_grid(x_coords, z_coords, *fractal_args)
    by_column = noise.fractal_noise_grid(
        np.ascontiguousarray(x_coords.T), np.ascontiguousarray(z_coords.T), *fractal_args
    ).T

    average = np.clip((by_row + by_column) / 2.0, 0.0, 1.0)
    combined = np.power(average, DEFAULTS.COLLISION_EXPONENT) * DEFAULTS.COLLISION_FLATTENING
    return combined * params.height + params.height_offset


# --- Finite Differences ---
def _neighbours(grid: np.ndarray):
    """Left, right, down (z - 1) and up (z + 1) neighbours with edge-replicated borders."""
    padded = np.pad(grid, 1, mode='edge')
    return padded[1:-1, :-2], padded[1:-1, 2:], padded[:-2, 1:-1], padded[2:, 1:-1]


def compute_slope(surface: np.ndarray) -> np.ndarray:
    """Central-difference gradient magnitude of the normalized surface."""
    left, right, down, up = _neighbours(np.nan_to_num(surface, nan=0.0))
    return np.sqrt((right - left) ** 2 + (up - down) ** 2)


def compute_normals(world: np.ndarray) -> np.ndarray:
    """Unit upward normals (hL - hR, 2, hD - hU) from world-space heights."""
    left, right, down, up = _neighbours(np.nan_to_num(world, nan=0.0))
    normals = np.stack([left - right, np.full_like(world, 2.0, dtype=np.float64), down - up], axis=-1)
    return normals / np.linalg.norm(normals, axis=-1, keepdims=True)


# --- Mesh Assembly ---
def _grid_triangles(width: int, depth: int, base: int, upward: bool) -> np.ndarray:
    zz, xx = np.meshgrid(np.arange(depth - 1), np.arange(width - 1), indexing='ij')
    a = (base + zz * width + xx).ravel()
    b = a + 1
    c = a + width
    d = c + 1
    if upward:
        pair = (np.stack([a, c, b], axis=-1), np.stack([b, c, d], axis=-1))
    else:
        pair = (np.stack([a, b, c], axis=-1), np.stack([b, d, c], axis=-1))
    return np.stack(pair, axis=1).reshape(-1, 3)


def _skirt(top_positions: np.ndarray, bottom_y: float, outward: tuple, base: int, reverse: bool):
    """
    One side wall hanging from an ordered run of top-edge positions.
    Returns (positions, normals, uvs, triangles).
    """
    count = top_positions.shape[0]
    bottom_positions = top_positions.copy()
    bottom_positions[:, 1] = bottom_y
    positions = np.concatenate([top_positions, bottom_positions])

    normals = np.tile(np.array(outward, dtype=np.float64), (2 * count, 1))
    t = np.arange(count) / max(count - 1, 1)
    uvs = np.concatenate([np.stack([t, np.ones(count)], axis=-1), np.stack([t, np.zeros(count)], axis=-1)])

    top0 = base + np.arange(count - 1)
    top1 = top0 + 1
    bottom0 = top0 + count
    bottom1 = top1 + count
    if reverse:
        pair = (np.stack([top1, top0, bottom1], axis=-1), np.stack([bottom1, top0, bottom0], axis=-1))
    else:
        pair = (np.stack([top0, top1, bottom0], axis=-1), np.stack([bottom0, top1, bottom1], axis=-1))
    triangles = np.stack(pair, axis=1).reshape(-1, 3)

    return positions, normals, uvs, triangles


def build_surface_mesh(surface: np.ndarray, biome_map: np.ndarray, params) -> SurfaceMesh:
    """
    Builds the renderable terrain: one vertex per cell for the top surface,
    a flat bottom grid and four side skirts closing the volume.
    """
    surface = np.nan_to_num(surface, nan=0.0)
    depth, width = surface.shape
    world = world_heights(surface, params.height, params.height_offset)
    bottom_y = params.height_offset - DEFAULTS.SKIRT_DEPTH

    # 1. Top surface.
    x_coords, z_coords = noise.coordinate_grid(width, depth)
    top_positions = np.stack([x_coords - width / 2, world, z_coords - depth / 2], axis=-1)
    slope = compute_slope(surface)
    materials = determine_materials(surface, biome_map, slope, params.water_level)
    tile = material_tile_scales(materials)
    top_uvs = np.stack([x_coords / width * tile, z_coords / depth * tile], axis=-1)

    positions = [top_positions.reshape(-1, 3)]
    normals = [compute_normals(world).reshape(-1, 3)]
    uvs = [top_uvs.reshape(-1, 2)]
    colors = [get_vertex_colors(biome_map, surface, slope).reshape(-1, 3)]
    material_ids = [materials.reshape(-1)]
    triangles = [_grid_triangles(width, depth, 0, upward=True)]
    vertex_total = width * depth

    # 2. Bottom grid.
    bottom_positions = top_positions.copy()
    bottom_positions[..., 1] = bottom_y
    positions.append(bottom_positions.reshape(-1, 3))
    normals.append(np.tile([0.0, -1.0, 0.0], (vertex_total, 1)))
    uvs.append(np.stack([x_coords / width, z_coords / depth], axis=-1).reshape(-1, 2))
    triangles.append(_grid_triangles(width, depth, vertex_total, upward=False))
    vertex_total *= 2

    # 3. Side skirts: north (z = 0), south (z = depth - 1), east (x = width - 1), west (x = 0).
    sides = (
        (top_positions[0, :], (0.0, 0.0, -1.0), False),
        (top_positions[-1, :], (0.0, 0.0, 1.0), True),
        (top_positions[:, -1], (1.0, 0.0, 0.0), False),
        (top_positions[:, 0], (-1.0, 0.0, 0.0), True),
    )
    for edge_positions, outward, reverse in sides:
        side_positions, side_normals, side_uvs, side_triangles = _skirt(
            edge_positions, bottom_y, outward, vertex_total, reverse
        )
        positions.append(side_positions)
        normals.append(side_normals)
        uvs.append(side_uvs)
        triangles.append(side_triangles)
        vertex_total += side_positions.shape[0]

    # Bottom and skirts are plain rock.
    skirt_count = vertex_total - width * depth
    colors.append(np.tile(np.array(COLOR_ROCK, dtype=np.float64), (skirt_count, 1)))
    material_ids.append(np.full(skirt_count, Material.ROCK, dtype=np.uint8))

    return SurfaceMesh(
        positions=np.concatenate(positions).astype(np.float32),
        normals=np.concatenate(normals).astype(np.float32),
        uvs=np.concatenate(uvs).astype(np.float32),
        colors=np.concatenate(colors).astype(np.float32),
        material_ids=np.concatenate(material_ids).astype(np.uint8),
        indices=np.concatenate(triangles).astype(np.uint32),
    )


def build_water_plane(params) -> WaterPlane:
    """A single upward-facing quad covering the map at the water height."""
    half_width = params.width / 2
    half_depth = params.depth / 2
    y = params.water_level * params.height + params.height_offset

    positions = np.array([
        [-half_width, y, -half_depth],
        [half_width, y, -half_depth],
        [-half_width, y, half_depth],
        [half_width, y, half_depth],
    ], dtype=np.float32)
    normals = np.tile(np.array([0.0, 1.0, 0.0], dtype=np.float32), (4, 1))
    indices = np.array([[0, 2, 1], [1, 2, 3]], dtype=np.uint32)

    return WaterPlane(width=float(params.width), depth=float(params.depth), y=float(y),
                      positions=positions, normals=normals, indices=indices)
