import logging

import numpy as np
import pytest

from terrain_generator.generator import TerrainGenerator


@pytest.fixture
def logger():
    return logging.getLogger("TerrainTests")


@pytest.fixture(scope="session")
def small_terrain():
    """A 32x32 terrain with every optional stage switched on."""
    config = {
        "seed": "fixture-seed",
        "width": 32,
        "depth": 32,
        "ridge_strength": 0.5,
        "terrace_strength": 0.3,
        "volcanic_activity": True,
    }
    return TerrainGenerator(config, logging.getLogger("TerrainTests")).generate()


@pytest.fixture(scope="session")
def river_terrain():
    """100x100 is the smallest square map that gets a river source."""
    config = {"seed": "river-seed", "width": 100, "depth": 100, "erosion_iterations": 2}
    return TerrainGenerator(config, logging.getLogger("TerrainTests")).generate()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
