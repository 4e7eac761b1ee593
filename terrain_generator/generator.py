# terrain_generator/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the main TerrainGenerator class, which runs every terrain
stage in order and bundles the results.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict or TerrainParams): Parameters which override the internal
      defaults. Expected keys include 'seed', 'width', 'depth', 'height', etc.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - TerrainData: every intermediate grid, the world height field, the
      surface mesh, the water plane and per-stage timings.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is deterministic.
  Every grid shares the (depth, width) shape of the configuration.
================================================================================
"""

import logging
import time
from dataclasses import dataclass, field

import numpy as np

from . import noise
from . import elevation
from . import tectonics
from . import erosion
from . import biomes
from . import weathering
from . import hydrology
from . import mesh
from . import queries
from .biomes import Biome
from .params import TerrainParams


@dataclass
class TerrainData:
    """Everything produced by one generation run."""
    params: TerrainParams
    seed: int
    base_elevation: np.ndarray
    tectonic_elevation: np.ndarray
    eroded_elevation: np.ndarray
    temperature: np.ndarray
    moisture: np.ndarray
    classified_biome_map: np.ndarray
    biome_map: np.ndarray
    biome_elevation: np.ndarray
    weathered_elevation: np.ndarray
    river_map: np.ndarray
    carved_elevation: np.ndarray
    surface: np.ndarray
    height_field: np.ndarray
    collision_heights: np.ndarray
    mesh: mesh.SurfaceMesh
    water_plane: mesh.WaterPlane
    timings: dict = field(default_factory=dict)

    @property
    def material_map(self) -> np.ndarray:
        """Material IDs of the top surface, shape (depth, width)."""
        depth, width = self.params.shape
        return self.mesh.material_ids[:width * depth].reshape(depth, width)

    @property
    def water_height(self) -> float:
        return self.params.water_height


class TerrainGenerator:
    """
    Generates the terrain for one parameter set. The class holds no grid
    state between stages; each stage is a pure function of the previous one.
    """
    def __init__(self, config, logger: logging.Logger):
        """
        Initializes the terrain generator.

        Args:
            config (dict | TerrainParams): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.logger.info("TerrainGenerator initializing...")

        # --- Consolidate Configuration ---
        if isinstance(config, TerrainParams):
            self.params = config
        else:
            self.params = TerrainParams.from_config(config, logger=self.logger)

        # --- Public Properties for easy access ---
        self.seed = noise.string_to_seed(self.params.seed)
        self.width = self.params.width
        self.depth = self.params.depth
        self.x_coords, self.z_coords = noise.coordinate_grid(self.width, self.depth)
        self.terrain = None

        self.logger.info(f"TerrainGenerator initialized with seed: '{self.params.seed}' ({self.seed})")
        self.logger.info(
            f"Terrain dimensions: {self.width}x{self.depth} cells, "
            f"height {self.params.height:.1f} (offset {self.params.height_offset:.1f}), "
            f"water level {self.params.water_level:.2f}"
        )
        self.logger.debug(f"Full parameter set: {self.params.to_dict()}")

    def _run_stage(self, name: str, timings: dict, on_stage, func, *args, **kwargs):
        """Runs one stage, records its wall time and reports it."""
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time
        timings[name] = elapsed
        self.logger.info(f"  - Stage '{name}' finished in {elapsed:.3f}s")
        if on_stage is not None:
            on_stage(name)
        return result

    def _shape_elevation(self) -> np.ndarray:
        base = elevation.base_elevation(self.x_coords, self.z_coords, self.seed)
        ridged = elevation.apply_ridges(
            base, self.x_coords, self.z_coords, self.seed, self.params.ridge_strength, self.params.scale
        )
        return elevation.apply_terraces(ridged, self.params.terrace_strength)

    def _classify(self, eroded: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        p = self.params
        temperature, moisture = biomes.climate_fields(
            eroded, self.x_coords, self.z_coords, self.seed,
            p.biome_scale, p.temperature_variation, p.moisture_variation
        )
        volcanic = None
        if p.volcanic_activity:
            volcanic = tectonics.volcanic_mask(self.x_coords, self.z_coords, self.seed)
        biome_map = biomes.classify_biomes(eroded, temperature, moisture, p.water_level, volcanic)
        return temperature, moisture, biome_map

    def _rivers(self, weathered: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        if not self.params.rivers_enabled:
            return np.zeros_like(weathered), weathered.copy()
        river_map = hydrology.generate_river_map(weathered, self.seed, self.params.river_meandering)
        carved = hydrology.carve_rivers(weathered, river_map, self.params.water_level)
        return river_map, carved

    def _collision_heights(self, height_field: np.ndarray) -> np.ndarray:
        if self.params.collision_mode == "orthogonal":
            return mesh.legacy_collision_heights(self.params, self.seed)
        return height_field

    def generate(self, on_stage=None) -> TerrainData:
        """
        Runs every stage in order and returns the TerrainData bundle.

        Args:
            on_stage (callable, optional): Called with each stage name as it
                finishes. Used by the baker for progress reporting.
        """
        p = self.params
        timings = {}
        total_start = time.perf_counter()
        self.logger.info(f"Generating {self.width}x{self.depth} terrain...")

        base = self._run_stage("elevation", timings, on_stage, self._shape_elevation)

        if p.tectonic_activity:
            tectonic = self._run_stage(
                "tectonics", timings, on_stage, tectonics.apply_tectonics,
                base, self.x_coords, self.z_coords, self.seed, p.volcanic_activity
            )
        else:
            tectonic = base.copy()

        eroded = self._run_stage(
            "erosion", timings, on_stage, erosion.thermal_erosion,
            tectonic, p.erosion_iterations, p.erosion_strength
        )
        temperature, moisture, biome_map = self._run_stage("biomes", timings, on_stage, self._classify, eroded)
        biome_elevation = self._run_stage(
            "biome_modifications", timings, on_stage, biomes.apply_biome_modifications,
            eroded, biome_map, self.x_coords, self.z_coords, self.seed, p.water_level
        )
        weathered = self._run_stage(
            "weathering", timings, on_stage, weathering.apply_weathering,
            biome_elevation, self.x_coords, self.z_coords, self.seed, p.weathering_intensity
        )
        river_map, carved = self._run_stage("rivers", timings, on_stage, self._rivers, weathered)
        surface = self._run_stage(
            "coastline", timings, on_stage, hydrology.shape_coastline,
            carved, self.x_coords, self.z_coords, self.seed, p.water_level,
            p.coastal_erosion, p.beach_generation
        )
        final_biomes = biomes.flood_submerged_cells(biome_map, surface, p.water_level)
        flooded = int(np.count_nonzero(final_biomes != biome_map))
        if flooded:
            self.logger.debug(f"  - {flooded} land cells ended below the water level and became Ocean")
        if not np.any(surface >= p.water_level):
            self.logger.warning(
                f"Seed '{p.seed}' produced no land above water level {p.water_level:.2f}; "
                f"the terrain is entirely ocean. Try another seed."
            )

        height_field = mesh.world_heights(surface, p.height, p.height_offset)
        collision_heights = self._run_stage("collision", timings, on_stage, self._collision_heights, height_field)
        surface_mesh = self._run_stage("mesh", timings, on_stage, mesh.build_surface_mesh, surface, final_biomes, p)
        water_plane = mesh.build_water_plane(p)

        total = time.perf_counter() - total_start
        timings["total"] = total
        self.logger.info(
            f"Terrain generated in {total:.2f}s: {surface_mesh.vertex_count} vertices, "
            f"{surface_mesh.triangle_count} triangles, "
            f"{int(np.count_nonzero(river_map))} river cells."
        )

        self.terrain = TerrainData(
            params=p,
            seed=self.seed,
            base_elevation=base,
            tectonic_elevation=tectonic,
            eroded_elevation=eroded,
            temperature=temperature,
            moisture=moisture,
            classified_biome_map=biome_map,
            biome_map=final_biomes,
            biome_elevation=biome_elevation,
            weathered_elevation=weathered,
            river_map=river_map,
            carved_elevation=carved,
            surface=surface,
            height_field=height_field,
            collision_heights=collision_heights,
            mesh=surface_mesh,
            water_plane=water_plane,
            timings=timings,
        )
        return self.terrain

    def _ensure_generated(self) -> TerrainData:
        if self.terrain is None:
            self.generate()
        return self.terrain

    def generate_height_field(self) -> np.ndarray:
        """The world-space collision/query height field, shape (depth, width)."""
        if self.params.collision_mode == "orthogonal":
            return mesh.legacy_collision_heights(self.params, self.seed)
        return self._ensure_generated().height_field

    def generate_water_plane(self) -> mesh.WaterPlane:
        return mesh.build_water_plane(self.params)

    def get_biome_at(self, world_x: float, world_z: float) -> Biome:
        """The biome under a world position. Plains off the map."""
        return queries.biome_at(self._ensure_generated().biome_map, world_x, world_z)

    def find_spawn_point(self) -> queries.SpawnPoint:
        """A flat, dry spawn point near the map centre on the collision field."""
        terrain = self._ensure_generated()
        spawn = queries.find_spawn_point(terrain.collision_heights, self.params.water_height)
        self.logger.info(
            f"Spawn point set at ({spawn.x:.2f}, {spawn.y:.2f}, {spawn.z:.2f}), "
            f"flatness {spawn.flatness:.3f}"
        )
        return spawn
