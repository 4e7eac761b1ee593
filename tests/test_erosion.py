import logging

import numpy as np
import pytest

from terrain_generator.erosion import thermal_erosion
from terrain_generator.generator import TerrainGenerator


def test_erosion_never_adds_material(rng):
    field = rng.random((24, 24))
    eroded = thermal_erosion(field, 15, 1.0)
    assert np.all(eroded <= field)
    assert eroded.min() >= 0.0


def test_zero_iterations_returns_a_copy(rng):
    field = rng.random((8, 8))
    eroded = thermal_erosion(field, 0, 1.0)
    np.testing.assert_array_equal(eroded, field)
    assert eroded is not field


def test_border_cells_are_untouched(rng):
    field = rng.random((10, 12))
    eroded = thermal_erosion(field, 5, 1.0)
    np.testing.assert_array_equal(eroded[0, :], field[0, :])
    np.testing.assert_array_equal(eroded[-1, :], field[-1, :])
    np.testing.assert_array_equal(eroded[:, 0], field[:, 0])
    np.testing.assert_array_equal(eroded[:, -1], field[:, -1])


def test_single_spike():
    field = np.zeros((3, 3))
    field[1, 1] = 1.0
    eroded = thermal_erosion(field, 1, 1.0)
    # Every neighbour is 1.0 lower: mean difference 1.0, times strength and rate 0.1.
    assert eroded[1, 1] == pytest.approx(0.9)


def test_gentle_slopes_are_left_alone():
    field = np.tile(np.linspace(0.0, 0.5, 10), (10, 1))
    np.testing.assert_array_equal(thermal_erosion(field, 10, 1.0), field)


def test_nan_cells_become_flat_ground():
    field = np.full((4, 4), np.nan)
    eroded = thermal_erosion(field, 3, 0.5)
    np.testing.assert_array_equal(eroded, np.zeros((4, 4)))


def test_erosion_lowers_the_peak_of_a_generated_map():
    logger = logging.getLogger("ErosionTest")
    base_config = {"seed": "erosion-scenario", "width": 64, "depth": 64, "erosion_strength": 1.0}
    eroded = TerrainGenerator({**base_config, "erosion_iterations": 20}, logger).generate()
    uneroded = TerrainGenerator({**base_config, "erosion_iterations": 0}, logger).generate()

    np.testing.assert_array_equal(eroded.tectonic_elevation, uneroded.tectonic_elevation)
    assert eroded.eroded_elevation.max() <= uneroded.eroded_elevation.max()
    assert np.all(eroded.eroded_elevation <= uneroded.eroded_elevation)
