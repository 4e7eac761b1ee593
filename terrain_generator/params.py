# terrain_generator/params.py

"""
================================================================================
TERRAIN PARAMETERS
================================================================================
This module defines the immutable TerrainParams value consumed by every stage
of the pipeline, and the consolidation step that merges a user configuration
dictionary with the internal defaults.

Data Contract:
---------------
- Inputs:
    - config (dict): User-defined parameters. Missing keys fall back to the
      defaults in config.py.
- Outputs:
    - A frozen TerrainParams instance.
- Side Effects: Logs ignored keys at DEBUG level when a logger is given.
- Invariants: Every numeric field is finite and clamped to a range in which
  no stage can divide by zero or index outside the grid.
================================================================================
"""

import dataclasses
import logging
import math
from dataclasses import dataclass

from . import config as DEFAULTS


def _as_float(value, default: float, low: float = -math.inf, high: float = math.inf) -> float:
    """Coerces a value to a finite float inside [low, high], or returns the default."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return float(default)
    if not math.isfinite(number):
        return float(default)
    return min(max(number, low), high)


def _as_int(value, default: int, low: int, high: int = None) -> int:
    number = _as_float(value, default)
    number = max(int(number), low)
    if high is not None:
        number = min(number, high)
    return number


def _as_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class TerrainParams:
    """Immutable configuration for a single terrain generation run."""
    seed: str = DEFAULTS.DEFAULT_SEED
    width: int = DEFAULTS.DEFAULT_WIDTH
    depth: int = DEFAULTS.DEFAULT_DEPTH
    height: float = DEFAULTS.DEFAULT_HEIGHT
    height_offset: float = DEFAULTS.DEFAULT_HEIGHT_OFFSET
    scale: float = DEFAULTS.DEFAULT_NOISE_SCALE
    octaves: int = DEFAULTS.DEFAULT_OCTAVES
    persistence: float = DEFAULTS.DEFAULT_PERSISTENCE
    lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY
    water_level: float = DEFAULTS.DEFAULT_WATER_LEVEL
    biome_scale: float = DEFAULTS.DEFAULT_BIOME_SCALE
    temperature_variation: float = DEFAULTS.DEFAULT_TEMPERATURE_VARIATION
    moisture_variation: float = DEFAULTS.DEFAULT_MOISTURE_VARIATION
    erosion_strength: float = DEFAULTS.DEFAULT_EROSION_STRENGTH
    erosion_iterations: int = DEFAULTS.DEFAULT_EROSION_ITERATIONS
    ridge_strength: float = DEFAULTS.DEFAULT_RIDGE_STRENGTH
    terrace_strength: float = DEFAULTS.DEFAULT_TERRACE_STRENGTH
    weathering_intensity: float = DEFAULTS.DEFAULT_WEATHERING_INTENSITY
    river_meandering: float = DEFAULTS.DEFAULT_RIVER_MEANDERING
    rivers_enabled: bool = DEFAULTS.DEFAULT_RIVERS_ENABLED
    coastal_erosion: bool = DEFAULTS.DEFAULT_COASTAL_EROSION
    beach_generation: bool = DEFAULTS.DEFAULT_BEACH_GENERATION
    volcanic_activity: bool = DEFAULTS.DEFAULT_VOLCANIC_ACTIVITY
    tectonic_activity: bool = DEFAULTS.DEFAULT_TECTONIC_ACTIVITY
    collision_mode: str = DEFAULTS.DEFAULT_COLLISION_MODE

    @classmethod
    def from_config(cls, config: dict = None, logger: logging.Logger = None) -> "TerrainParams":
        """
        Consolidates a user configuration with the internal defaults.

        Out-of-range or malformed values are clamped or replaced by their
        default rather than rejected.
        """
        user_config = config or {}

        if logger is not None:
            known = {field.name for field in dataclasses.fields(cls)}
            for key in user_config:
                if key not in known:
                    logger.debug(f"Ignoring unknown terrain parameter '{key}'.")

        seed = user_config.get('seed', DEFAULTS.DEFAULT_SEED)
        seed = DEFAULTS.DEFAULT_SEED if seed is None or seed == "" else str(seed)

        collision_mode = str(user_config.get('collision_mode', DEFAULTS.DEFAULT_COLLISION_MODE)).lower()
        if collision_mode not in DEFAULTS.COLLISION_MODES:
            collision_mode = DEFAULTS.DEFAULT_COLLISION_MODE

        return cls(
            seed=seed,
            width=_as_int(user_config.get('width', DEFAULTS.DEFAULT_WIDTH), DEFAULTS.DEFAULT_WIDTH, DEFAULTS.MIN_GRID_SIZE),
            depth=_as_int(user_config.get('depth', DEFAULTS.DEFAULT_DEPTH), DEFAULTS.DEFAULT_DEPTH, DEFAULTS.MIN_GRID_SIZE),
            height=_as_float(user_config.get('height', DEFAULTS.DEFAULT_HEIGHT), DEFAULTS.DEFAULT_HEIGHT, 0.0),
            height_offset=_as_float(user_config.get('height_offset', DEFAULTS.DEFAULT_HEIGHT_OFFSET), DEFAULTS.DEFAULT_HEIGHT_OFFSET),
            scale=_as_float(user_config.get('scale', DEFAULTS.DEFAULT_NOISE_SCALE), DEFAULTS.DEFAULT_NOISE_SCALE, 1e-6),
            octaves=_as_int(user_config.get('octaves', DEFAULTS.DEFAULT_OCTAVES), DEFAULTS.DEFAULT_OCTAVES, 0, DEFAULTS.MAX_OCTAVES),
            persistence=_as_float(user_config.get('persistence', DEFAULTS.DEFAULT_PERSISTENCE), DEFAULTS.DEFAULT_PERSISTENCE, 0.0, 1.0),
            lacunarity=_as_float(user_config.get('lacunarity', DEFAULTS.DEFAULT_LACUNARITY), DEFAULTS.DEFAULT_LACUNARITY, 1e-6),
            water_level=_as_float(user_config.get('water_level', DEFAULTS.DEFAULT_WATER_LEVEL), DEFAULTS.DEFAULT_WATER_LEVEL, 0.0, 1.0),
            biome_scale=_as_float(user_config.get('biome_scale', DEFAULTS.DEFAULT_BIOME_SCALE), DEFAULTS.DEFAULT_BIOME_SCALE, 1e-6),
            temperature_variation=_as_float(user_config.get('temperature_variation', DEFAULTS.DEFAULT_TEMPERATURE_VARIATION), DEFAULTS.DEFAULT_TEMPERATURE_VARIATION, 0.0, 2.0),
            moisture_variation=_as_float(user_config.get('moisture_variation', DEFAULTS.DEFAULT_MOISTURE_VARIATION), DEFAULTS.DEFAULT_MOISTURE_VARIATION, 0.0, 2.0),
            erosion_strength=_as_float(user_config.get('erosion_strength', DEFAULTS.DEFAULT_EROSION_STRENGTH), DEFAULTS.DEFAULT_EROSION_STRENGTH, 0.0, 10.0),
            erosion_iterations=_as_int(user_config.get('erosion_iterations', DEFAULTS.DEFAULT_EROSION_ITERATIONS), DEFAULTS.DEFAULT_EROSION_ITERATIONS, 0, DEFAULTS.MAX_EROSION_ITERATIONS),
            ridge_strength=_as_float(user_config.get('ridge_strength', DEFAULTS.DEFAULT_RIDGE_STRENGTH), DEFAULTS.DEFAULT_RIDGE_STRENGTH, 0.0, 1.0),
            terrace_strength=_as_float(user_config.get('terrace_strength', DEFAULTS.DEFAULT_TERRACE_STRENGTH), DEFAULTS.DEFAULT_TERRACE_STRENGTH, 0.0, 1.0),
            weathering_intensity=_as_float(user_config.get('weathering_intensity', DEFAULTS.DEFAULT_WEATHERING_INTENSITY), DEFAULTS.DEFAULT_WEATHERING_INTENSITY, 0.0, 1.0),
            river_meandering=_as_float(user_config.get('river_meandering', DEFAULTS.DEFAULT_RIVER_MEANDERING), DEFAULTS.DEFAULT_RIVER_MEANDERING, 0.0, 1.0),
            rivers_enabled=_as_bool(user_config.get('rivers_enabled'), DEFAULTS.DEFAULT_RIVERS_ENABLED),
            coastal_erosion=_as_bool(user_config.get('coastal_erosion'), DEFAULTS.DEFAULT_COASTAL_EROSION),
            beach_generation=_as_bool(user_config.get('beach_generation'), DEFAULTS.DEFAULT_BEACH_GENERATION),
            volcanic_activity=_as_bool(user_config.get('volcanic_activity'), DEFAULTS.DEFAULT_VOLCANIC_ACTIVITY),
            tectonic_activity=_as_bool(user_config.get('tectonic_activity'), DEFAULTS.DEFAULT_TECTONIC_ACTIVITY),
            collision_mode=collision_mode,
        )

    @property
    def shape(self) -> tuple[int, int]:
        """Grid shape as (rows, cols) = (depth, width)."""
        return (self.depth, self.width)

    @property
    def water_height(self) -> float:
        """The water plane's height in world units."""
        return self.water_level * self.height + self.height_offset

    def to_dict(self) -> dict:
        """A JSON-serialisable copy of the parameters."""
        return dataclasses.asdict(self)
