# terrain_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC MAP.
Instead, pass a configuration dictionary to the TerrainGenerator instance.
================================================================================
"""

# --- Seed & Grid ---
DEFAULT_SEED = "default-seed"
DEFAULT_WIDTH = 100
DEFAULT_DEPTH = 100
# The smallest grid that still produces a closed mesh (one quad).
MIN_GRID_SIZE = 2

# --- Vertical Scale (world units) ---
DEFAULT_HEIGHT = 20.0
DEFAULT_HEIGHT_OFFSET = 0.0

# --- Fractal Noise (used by the legacy collision map) ---
DEFAULT_NOISE_SCALE = 50.0
DEFAULT_OCTAVES = 6
DEFAULT_PERSISTENCE = 0.5
DEFAULT_LACUNARITY = 2.0
MAX_OCTAVES = 16

# --- Water ---
# Normalized [0, 1] fraction of the vertical scale.
DEFAULT_WATER_LEVEL = 0.3

# --- Climate ---
DEFAULT_BIOME_SCALE = 200.0
DEFAULT_TEMPERATURE_VARIATION = 0.9
DEFAULT_MOISTURE_VARIATION = 0.8

# --- Erosion ---
DEFAULT_EROSION_STRENGTH = 0.5
DEFAULT_EROSION_ITERATIONS = 10
MAX_EROSION_ITERATIONS = 500
# A neighbour must be this much lower (normalized units) to count as "steep".
EROSION_TALUS_THRESHOLD = 0.1
EROSION_RATE = 0.1

# --- Elevation Shaping ---
DEFAULT_RIDGE_STRENGTH = 0.0
DEFAULT_TERRACE_STRENGTH = 0.0
DEFAULT_WEATHERING_INTENSITY = 0.4
DEFAULT_RIVER_MEANDERING = 0.7

# --- Feature Toggles ---
DEFAULT_RIVERS_ENABLED = True
DEFAULT_COASTAL_EROSION = True
DEFAULT_BEACH_GENERATION = True
DEFAULT_VOLCANIC_ACTIVITY = False
DEFAULT_TECTONIC_ACTIVITY = True

# 'surface': collision uses the same height field as the rendered mesh.
# 'orthogonal': legacy averaged row/column fractal map.
DEFAULT_COLLISION_MODE = "surface"
COLLISION_MODES = ("surface", "orthogonal")

# --- Noise Engine ---
# Relative frequency, weight and seed offset of each layer summed by noise_2d.
NOISE_LAYER_FREQUENCIES = (0.1, 0.05, 0.025, 0.2)
NOISE_LAYER_WEIGHTS = (1.0, 0.5, 0.25, 0.125)
NOISE_LAYER_SEED_OFFSETS = (0, 1000, 2000, 3000)

# --- Base Elevation Bands (feature size in cells, weight) ---
CONTINENTAL_SCALE = 800.0
CONTINENTAL_WEIGHT = 0.8
MOUNTAIN_SCALE = 200.0
MOUNTAIN_WEIGHT = 0.6
HILL_SCALE = 150.0
HILL_WEIGHT = 0.3
DETAIL_SCALE = 50.0
DETAIL_WEIGHT = 0.1
# Power-curve redistribution: pow(max(0, h + shift), exponent) - drop
ELEVATION_CURVE_SHIFT = 0.5
ELEVATION_CURVE_EXPONENT = 1.8
ELEVATION_CURVE_DROP = 0.2

# --- Ridges & Terraces ---
RIDGE_HEIGHT_FACTOR = 0.1
TERRACE_LEVELS = 8

# --- Tectonics ---
PLATE_BOUNDARY_SCALE = 300.0
CONVERGENT_THRESHOLD = 0.7
CONVERGENT_UPLIFT = 3.0
DIVERGENT_THRESHOLD = 0.3
RIFT_DEPTH = 0.5
VOLCANIC_SCALE = 100.0
VOLCANIC_THRESHOLD = 0.8
VOLCANIC_UPLIFT = 5.0

# --- Climate Model ---
# Offset applied to coordinates for the moisture sample.
MOISTURE_COORD_OFFSET = 1000.0
# Elevation above which the air cools, and the cooling rate.
ELEVATION_COOLING_START = 0.5
ELEVATION_COOLING_RATE = 0.8
# Orographic moisture boost: min(cap, elevation * rate)
OROGRAPHIC_RATE = 0.5
OROGRAPHIC_CAP = 0.3

# --- Biome Classification Thresholds ---
BIOME_THRESHOLDS = {
    "beach_band": 0.05,
    "alpine_min_elevation": 0.8,
    "mountain_min_elevation": 0.6,
    "tundra_max_temp": 0.3,
    "desert_min_temp": 0.7,
    "desert_max_moisture": 0.3,
    "wet_min_moisture": 0.6,
    "swamp_min_temp": 0.4,
    "mountain_temp_deviation": 0.3,
}

# Relief multiplier around the water level for each biome (by name).
# Biomes missing from this table keep their relief unchanged.
BIOME_HEIGHT_MODIFIERS = {
    "mountains": 1.8,
    "alpine": 1.8,
    "forest": 1.2,
    "desert": 0.8,
    "swamp": 0.4,
    "marsh": 0.5,
    "tundra": 0.9,
}

DUNE_SCALE = 30.0
DUNE_HEIGHT = 0.05
VOLCANIC_CONE_SCALE = 50.0
VOLCANIC_CONE_THRESHOLD = 0.7
VOLCANIC_CONE_HEIGHT = 0.8

# --- Weathering ---
CHEMICAL_WEATHERING_SCALE = 200.0
CHEMICAL_WEATHERING_RATE = 0.02
PHYSICAL_WEATHERING_SCALE = 150.0
PHYSICAL_WEATHERING_RATE = 0.01

# --- Hydrology ---
# One river source per this many grid cells.
CELLS_PER_RIVER_SOURCE = 10000
RIVER_SOURCE_SEARCH_RADIUS = 5
RIVER_SOURCE_SEED_OFFSET = 7919
RIVER_MAX_STEPS = 200
RIVER_INITIAL_STRENGTH = 1.0
RIVER_STRENGTH_DECAY = 0.98
RIVER_MIN_STRENGTH = 0.1
MEANDER_SCALE = 20.0
MEANDER_WEIGHT = 0.1
RIVER_CHANNEL_DEPTH = 0.1
RIVER_BANK_RADIUS = 2
RIVER_BANK_DEPTH = 0.05
# Carved channels never drop more than this below the water level.
RIVER_MAX_DEPTH_BELOW_WATER = 0.1

# --- Coastline ---
COASTAL_BAND = 0.2
WAVE_SCALE = 50.0
WAVE_EROSION = 0.05
BEACH_BAND = 0.1
BEACH_FLATTENING = 0.3

# --- Mesh Assembly ---
SKIRT_DEPTH = 5.0
# Slope (normalized height units per two cells) above which rock is exposed.
ROCK_SLOPE_THRESHOLD = 0.3
SNOW_MIN_ELEVATION = 0.7
DEFAULT_TILE_SCALE = 4.0

# --- Legacy Collision Map ---
COLLISION_EXPONENT = 1.5
COLLISION_FLATTENING = 0.7

# --- Spawn Search ---
SPAWN_SEARCH_RADIUS = 20
PLAYER_HEIGHT = 1.8
SPAWN_OFFSET = 0.5
