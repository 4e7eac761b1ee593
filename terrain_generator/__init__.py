# terrain_generator/__init__.py

# This file makes the 'terrain_generator' directory a Python package.
# We also use it to define the public API of the package.

from .biomes import Biome
from .color_maps import Material
from .generator import TerrainData, TerrainGenerator
from .mesh import SurfaceMesh, WaterPlane
from .params import TerrainParams
from .queries import SpawnPoint, biome_at, find_spawn_point, height_at

__all__ = [
    "Biome",
    "Material",
    "SpawnPoint",
    "SurfaceMesh",
    "TerrainData",
    "TerrainGenerator",
    "TerrainParams",
    "WaterPlane",
    "biome_at",
    "find_spawn_point",
    "height_at",
]
