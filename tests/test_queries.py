import numpy as np
import pytest

from terrain_generator import queries
from terrain_generator.biomes import Biome


def test_height_at_grid_points_and_between():
    heights = np.arange(12, dtype=np.float64).reshape(3, 4)
    # Cell (gx, gz) sits at world (gx - 2, gz - 1.5).
    assert queries.height_at(heights, 1 - 2, 2 - 1.5) == pytest.approx(heights[2, 1])
    assert queries.height_at(heights, 0.5 - 2, 0 - 1.5) == pytest.approx(0.5)
    assert queries.height_at(heights, 0 - 2, 0.5 - 1.5) == pytest.approx(2.0)


def test_height_at_clamps_off_the_map():
    heights = np.arange(12, dtype=np.float64).reshape(3, 4)
    assert queries.height_at(heights, -100.0, -100.0) == pytest.approx(heights[0, 0])
    assert queries.height_at(heights, 100.0, 100.0) == pytest.approx(heights[2, 3])


def test_biome_at():
    biome_map = np.full((4, 4), Biome.DESERT, dtype=np.uint8)
    assert queries.biome_at(biome_map, 0.0, 0.0) == Biome.DESERT
    assert queries.biome_at(biome_map, 10.0, 0.0) == Biome.PLAINS
    assert queries.biome_at(biome_map, 0.0, -2.5) == Biome.PLAINS


def test_flatness_map():
    ramp = np.tile(np.arange(5, dtype=np.float64), (5, 1))
    flatness = queries.flatness_map(ramp)
    assert flatness[2, 2] == pytest.approx(1.0)
    np.testing.assert_array_equal(queries.flatness_map(np.ones((3, 3))), np.zeros((3, 3)))


def test_spawn_prefers_the_flattest_dry_cell():
    heights = np.where(np.indices((20, 20)).sum(axis=0) % 2 == 0, 10.0, 20.0)
    heights[12:15, 14:17] = 15.0
    spawn = queries.find_spawn_point(heights, water_height=0.0)
    assert (spawn.grid_x, spawn.grid_z) == (15, 13)
    assert spawn.flatness == pytest.approx(0.0)
    assert spawn.x == pytest.approx(15 - 10)
    assert spawn.z == pytest.approx(13 - 10)
    assert spawn.y == pytest.approx(15.0 + 1.8 + 0.5)


def test_spawn_ties_go_to_the_centre():
    spawn = queries.find_spawn_point(np.full((11, 9), 5.0), water_height=0.0)
    assert (spawn.grid_x, spawn.grid_z) == (4, 5)


def test_spawn_skips_water():
    heights = np.zeros((9, 9))
    heights[0, 0] = 3.0
    heights[0, 1] = 3.0
    spawn = queries.find_spawn_point(heights, water_height=1.0)
    assert heights[spawn.grid_z, spawn.grid_x] > 1.0


def test_spawn_falls_back_to_the_centre_when_flooded():
    spawn = queries.find_spawn_point(np.zeros((8, 8)), water_height=1.0)
    assert (spawn.grid_x, spawn.grid_z) == (4, 4)
    assert spawn.y == pytest.approx(0.0 + 1.8 + 0.5)
