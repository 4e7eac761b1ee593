# terrain_generator/biomes.py

"""
================================================================================
CLIMATE & BIOME CLASSIFICATION
================================================================================
This module derives temperature and moisture from dedicated noise samples,
classifies every cell into a biome, and applies the biome-specific height
modifications.

Data Contract:
---------------
- Inputs:
    - elevation: Normalized [0, 1] height field after erosion.
    - x, z: Coordinate grids matching the elevation shape.
    - seed and the climate coefficients from TerrainParams.
- Outputs:
    - temperature, moisture: float arrays in [0, 1].
    - biome_map: uint8 array of Biome values.
    - A biome-modified height field in [0, 1].
- Side Effects: None.
- Invariants: A cell is Ocean if and only if its elevation is below the water
  level. Land biomes are never modified below the water level. Once the
  surface is final, flood_submerged_cells restores the same rule against it.
================================================================================
"""

from enum import IntEnum

import numpy as np

from . import config as DEFAULTS
from . import noise


class Biome(IntEnum):
    OCEAN = 0
    BEACH = 1
    PLAINS = 2
    GRASSLAND = 3
    FOREST = 4
    RAINFOREST = 5
    MOUNTAINS = 6
    HILLS = 7
    DESERT = 8
    SAVANNA = 9
    SWAMP = 10
    MARSH = 11
    TUNDRA = 12
    TAIGA = 13
    ALPINE = 14
    VOLCANIC = 15


BIOME_COUNT = len(Biome)


def climate_fields(elevation: np.ndarray, x_coords: np.ndarray, z_coords: np.ndarray, seed: int,
                   biome_scale: float, temperature_variation: float,
                   moisture_variation: float) -> tuple[np.ndarray, np.ndarray]:
    """
    Generates the temperature and moisture fields, both normalized to [0, 1].
    Temperature drops above mid elevation; moisture gains an orographic boost
    that grows with elevation up to a cap.
    """
    elevation = np.nan_to_num(elevation, nan=0.0)

    # 1. Temperature: base noise, reduced by elevation cooling.
    base_temp = (noise.noise_grid(x_coords / biome_scale, z_coords / biome_scale, seed) + 1.0) * 0.5
    elevation_cooling = np.maximum(0.0, elevation - DEFAULTS.ELEVATION_COOLING_START) * DEFAULTS.ELEVATION_COOLING_RATE
    temperature = np.clip(base_temp * temperature_variation - elevation_cooling, 0.0, 1.0)

    # 2. Moisture: an offset noise sample plus the orographic effect.
    offset = DEFAULTS.MOISTURE_COORD_OFFSET
    base_moisture = (noise.noise_grid((x_coords + offset) / biome_scale, (z_coords + offset) / biome_scale, seed) + 1.0) * 0.5
    orographic = np.minimum(DEFAULTS.OROGRAPHIC_CAP, elevation * DEFAULTS.OROGRAPHIC_RATE)
    moisture = np.clip(base_moisture * moisture_variation + orographic, 0.0, 1.0)

    return temperature, moisture


def classify_biomes(elevation: np.ndarray, temperature: np.ndarray, moisture: np.ndarray,
                    water_level: float, volcanic_mask: np.ndarray = None) -> np.ndarray:
    """
    Performs the biome classification and returns an integer array of Biome
    values. The first matching condition wins.
    """
    elevation = np.nan_to_num(elevation, nan=0.0)
    temperature = np.nan_to_num(temperature, nan=0.0)
    moisture = np.nan_to_num(moisture, nan=0.0)
    thresholds = DEFAULTS.BIOME_THRESHOLDS

    if volcanic_mask is None:
        volcanic_mask = np.zeros(elevation.shape, dtype=bool)

    wet = moisture > thresholds["wet_min_moisture"]
    conditions = [
        elevation < water_level,
        elevation < water_level + thresholds["beach_band"],
        volcanic_mask,
        elevation > thresholds["alpine_min_elevation"],
        elevation > thresholds["mountain_min_elevation"],
        # --- Climate decision table for the remaining lowland cells ---
        temperature < thresholds["tundra_max_temp"],
        (temperature > thresholds["desert_min_temp"]) & (moisture < thresholds["desert_max_moisture"]),
        wet & (temperature > thresholds["swamp_min_temp"]),
        wet,
        np.abs(temperature - 0.5) > thresholds["mountain_temp_deviation"],
    ]
    choices = [
        Biome.OCEAN,
        Biome.BEACH,
        Biome.VOLCANIC,
        Biome.ALPINE,
        Biome.MOUNTAINS,
        Biome.TUNDRA,
        Biome.DESERT,
        Biome.SWAMP,
        Biome.FOREST,
        Biome.MOUNTAINS,
    ]
    biome_map = np.select(conditions, [int(choice) for choice in choices], default=int(Biome.PLAINS))
    return biome_map.astype(np.uint8)


def height_modifier_lut(modifiers: dict = None) -> np.ndarray:
    """Creates a LUT where the index is the Biome ID and the value is its relief multiplier."""
    modifiers = DEFAULTS.BIOME_HEIGHT_MODIFIERS if modifiers is None else modifiers
    lut = np.ones(BIOME_COUNT, dtype=np.float64)
    for biome in Biome:
        lut[biome] = float(modifiers.get(biome.name.lower(), 1.0))
    lut[Biome.OCEAN] = 1.0
    return lut


def apply_biome_modifications(elevation: np.ndarray, biome_map: np.ndarray,
                              x_coords: np.ndarray, z_coords: np.ndarray, seed: int,
                              water_level: float, modifiers: dict = None) -> np.ndarray:
    """
    Applies the per-biome relief multiplier around the water level, then the
    biome-specific surface features (desert dunes, volcanic cones).
    """
    elevation = np.nan_to_num(elevation, nan=0.0)
    land_mask = biome_map != Biome.OCEAN

    # 1. Relief multiplier: scales height above the water line.
    multiplier = height_modifier_lut(modifiers)[biome_map]
    modified = np.where(land_mask, water_level + (elevation - water_level) * multiplier, elevation)

    # 2. Sand dunes.
    desert_mask = biome_map == Biome.DESERT
    if np.any(desert_mask):
        dunes = noise.noise_grid(x_coords / DEFAULTS.DUNE_SCALE, z_coords / DEFAULTS.DUNE_SCALE, seed) * DEFAULTS.DUNE_HEIGHT
        modified = np.where(desert_mask, modified + dunes, modified)

    # 3. Volcanic cones.
    volcanic_mask = biome_map == Biome.VOLCANIC
    if np.any(volcanic_mask):
        cone_noise = np.abs(noise.noise_grid(
            x_coords / DEFAULTS.VOLCANIC_CONE_SCALE, z_coords / DEFAULTS.VOLCANIC_CONE_SCALE, seed
        ))
        cones = np.where(
            cone_noise > DEFAULTS.VOLCANIC_CONE_THRESHOLD,
            np.power(cone_noise - DEFAULTS.VOLCANIC_CONE_THRESHOLD, 2) * DEFAULTS.VOLCANIC_CONE_HEIGHT,
            0.0
        )
        modified = np.where(volcanic_mask, modified + cones, modified)

    modified = np.clip(modified, 0.0, 1.0)

    # 4. Land stays land.
    return np.where(land_mask, np.maximum(modified, water_level), modified)


def flood_submerged_cells(biome_map: np.ndarray, elevation: np.ndarray, water_level: float) -> np.ndarray:
    """
    Reclassifies as Ocean every cell that the later shaping stages (weathering,
    river carving, coastal erosion) lowered below the water level.
    """
    submerged = np.nan_to_num(elevation, nan=0.0) < water_level
    return np.where(submerged, int(Biome.OCEAN), biome_map).astype(np.uint8)
