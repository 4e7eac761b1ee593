# terrain_generator/color_maps.py

"""
================================================================================
SHARED COLOR & MATERIAL MAPPING UTILITIES
================================================================================
This module contains the material and color mapping constants and functions for
converting terrain data (elevation, biome, slope, rivers) into per-vertex
materials, vertex colors and RGB preview arrays.

It is designed to be a pure, stateless utility with no dependencies on Pygame,
allowing it to be used by both the mesh assembler, the viewer and the offline
baker script.
================================================================================
"""
from enum import IntEnum

import numpy as np

from . import config as DEFAULTS
from .biomes import Biome


class Material(IntEnum):
    WATER = 0
    SAND = 1
    GRASS = 2
    DIRT = 3
    ROCK = 4
    STONE = 5
    SNOW = 6
    MUD = 7
    CLAY = 8
    GRAVEL = 9


# --- Material assignment by biome, before the water/slope/snow overrides ---
BIOME_MATERIALS = {
    Biome.OCEAN: Material.SAND,
    Biome.BEACH: Material.SAND,
    Biome.PLAINS: Material.GRASS,
    Biome.GRASSLAND: Material.GRASS,
    Biome.FOREST: Material.GRASS,
    Biome.RAINFOREST: Material.GRASS,
    Biome.MOUNTAINS: Material.ROCK,
    Biome.HILLS: Material.GRAVEL,
    Biome.DESERT: Material.SAND,
    Biome.SAVANNA: Material.DIRT,
    Biome.SWAMP: Material.MUD,
    Biome.MARSH: Material.CLAY,
    Biome.TUNDRA: Material.SNOW,
    Biome.TAIGA: Material.DIRT,
    Biome.ALPINE: Material.ROCK,
    Biome.VOLCANIC: Material.STONE,
}

# Texture repeats per cell. Materials missing here use DEFAULTS.DEFAULT_TILE_SCALE.
MATERIAL_TILE_SCALES = {
    Material.WATER: 1.0,
    Material.SAND: 8.0,
    Material.GRASS: 4.0,
    Material.ROCK: 2.0,
    Material.SNOW: 6.0,
    Material.MUD: 3.0,
}

# --- Vertex Color Palette (linear RGB, [0, 1]) ---
# Each biome has a base color plus a gradient scaled by the height factor.
BIOME_BASE_COLORS = {
    Biome.OCEAN: (0.1, 0.3, 0.8),
    Biome.BEACH: (0.9, 0.8, 0.6),
    Biome.PLAINS: (0.4, 0.6, 0.3),
    Biome.GRASSLAND: (0.45, 0.65, 0.3),
    Biome.FOREST: (0.2, 0.5, 0.2),
    Biome.RAINFOREST: (0.1, 0.45, 0.15),
    Biome.MOUNTAINS: (0.6, 0.6, 0.7),
    Biome.HILLS: (0.45, 0.55, 0.3),
    Biome.DESERT: (0.9, 0.7, 0.4),
    Biome.SAVANNA: (0.75, 0.7, 0.35),
    Biome.SWAMP: (0.3, 0.4, 0.2),
    Biome.MARSH: (0.35, 0.45, 0.3),
    Biome.TUNDRA: (0.7, 0.8, 0.9),
    Biome.TAIGA: (0.25, 0.4, 0.3),
    Biome.ALPINE: (0.8, 0.9, 1.0),
    Biome.VOLCANIC: (0.4, 0.2, 0.1),
}

BIOME_HEIGHT_GRADIENTS = {
    Biome.PLAINS: (0.0, 0.1, 0.0),
    Biome.GRASSLAND: (0.0, 0.1, 0.0),
    Biome.FOREST: (0.0, 0.1, 0.0),
    Biome.RAINFOREST: (0.0, 0.1, 0.0),
    Biome.MOUNTAINS: (0.2, 0.2, 0.1),
    Biome.HILLS: (0.1, 0.1, 0.05),
    Biome.DESERT: (-0.2, -0.1, 0.0),
    Biome.SAVANNA: (-0.1, -0.05, 0.0),
    Biome.TAIGA: (0.0, 0.1, 0.05),
}

COLOR_ROCK = (0.5, 0.5, 0.5)

# --- Preview Palette (8-bit RGB) ---
COLOR_MAP_HEIGHT = {
    "low": (20, 40, 120),
    "high": (240, 240, 240)
}

COLOR_MAP_RIVER = {
    "dry": (30, 30, 30),
    "river": (60, 160, 255)
}

MATERIAL_PREVIEW_COLORS = {
    Material.WATER: (26, 102, 255),
    Material.SAND: (240, 230, 140),
    Material.GRASS: (34, 139, 34),
    Material.DIRT: (139, 69, 19),
    Material.ROCK: (112, 128, 144),
    Material.STONE: (70, 60, 60),
    Material.SNOW: (255, 255, 255),
    Material.MUD: (90, 75, 50),
    Material.CLAY: (180, 110, 80),
    Material.GRAVEL: (150, 145, 135),
}


def _biome_table(table: dict, default) -> np.ndarray:
    """Expands a {Biome: rgb} table into an array indexed by Biome ID."""
    return np.array([table.get(biome, default) for biome in Biome], dtype=np.float64)


_BASE_COLOR_TABLE = _biome_table(BIOME_BASE_COLORS, BIOME_BASE_COLORS[Biome.PLAINS])
_GRADIENT_TABLE = _biome_table(BIOME_HEIGHT_GRADIENTS, (0.0, 0.0, 0.0))
_MATERIAL_TABLE = np.array([BIOME_MATERIALS[biome] for biome in Biome], dtype=np.uint8)
_TILE_SCALE_TABLE = np.array(
    [MATERIAL_TILE_SCALES.get(material, DEFAULTS.DEFAULT_TILE_SCALE) for material in Material],
    dtype=np.float64
)


# --- Material & Vertex Color Functions ---
def determine_materials(elevation: np.ndarray, biome_map: np.ndarray, slope: np.ndarray,
                        water_level: float) -> np.ndarray:
    """
    Picks a material per cell. Underwater cells are water; steep cells expose
    rock; high mountain and alpine cells are snow-capped; everything else
    takes the biome's material.
    """
    materials = _MATERIAL_TABLE[biome_map]

    snow_capped = (
        ((biome_map == Biome.MOUNTAINS) | (biome_map == Biome.ALPINE))
        & (elevation > DEFAULTS.SNOW_MIN_ELEVATION)
    )
    materials = np.where(snow_capped, np.uint8(Material.SNOW), materials)
    materials = np.where(slope > DEFAULTS.ROCK_SLOPE_THRESHOLD, np.uint8(Material.ROCK), materials)
    materials = np.where(elevation < water_level, np.uint8(Material.WATER), materials)

    return materials.astype(np.uint8)


def get_vertex_colors(biome_map: np.ndarray, elevation: np.ndarray, slope: np.ndarray) -> np.ndarray:
    """
    Per-cell RGB in [0, 1]: the biome's base color plus its height gradient,
    replaced by rock grey on steep slopes.
    """
    height_factor = np.minimum(1.0, elevation * 2.0)[..., np.newaxis]
    colors = _BASE_COLOR_TABLE[biome_map] + _GRADIENT_TABLE[biome_map] * height_factor
    colors = np.where((slope > DEFAULTS.ROCK_SLOPE_THRESHOLD)[..., np.newaxis], np.array(COLOR_ROCK), colors)
    return np.clip(colors, 0.0, 1.0)


def material_tile_scales(material_ids: np.ndarray) -> np.ndarray:
    """Texture tiling factor for each material ID."""
    return _TILE_SCALE_TABLE[material_ids]


# --- Color Lookup Table (LUT) Generation ---
def create_biome_color_lut() -> np.ndarray:
    """Creates a LUT where the index is the Biome ID and the value is the RGB color."""
    return (_BASE_COLOR_TABLE * 255).round().astype(np.uint8)


def create_material_color_lut() -> np.ndarray:
    """Creates a LUT where the index is the Material ID and the value is the RGB color."""
    return np.array([MATERIAL_PREVIEW_COLORS[material] for material in Material], dtype=np.uint8)


# --- Preview Color Array Functions ---
# All preview arrays are returned transposed to (width, depth, 3) for pygame's
# surfarray. Transpose back before handing them to Pillow.
def get_biome_color_array(biome_map: np.ndarray, biome_lut: np.ndarray) -> np.ndarray:
    """
    Converts a biome map into an RGB color array using a pre-computed lookup
    table. This is a very fast operation.
    """
    colors = biome_lut[biome_map]
    return np.transpose(colors, (1, 0, 2))


def get_height_color_array(elevation_values: np.ndarray) -> np.ndarray:
    """Converts normalized elevation [0, 1] into a low-to-high color ramp."""
    t = np.clip(np.nan_to_num(elevation_values, nan=0.0), 0.0, 1.0)[..., np.newaxis]
    colors = (1 - t) * np.array(COLOR_MAP_HEIGHT["low"]) + t * np.array(COLOR_MAP_HEIGHT["high"])
    return np.transpose(colors.astype(np.uint8), (1, 0, 2))


def get_river_color_array(river_map: np.ndarray) -> np.ndarray:
    """River strength [0, 1] blended over a dark background."""
    t = np.clip(river_map, 0.0, 1.0)[..., np.newaxis]
    colors = (1 - t) * np.array(COLOR_MAP_RIVER["dry"]) + t * np.array(COLOR_MAP_RIVER["river"])
    return np.transpose(colors.astype(np.uint8), (1, 0, 2))


def get_material_color_array(material_map: np.ndarray, material_lut: np.ndarray) -> np.ndarray:
    colors = material_lut[material_map]
    return np.transpose(colors, (1, 0, 2))
