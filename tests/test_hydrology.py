import numpy as np
import pytest

from terrain_generator import hydrology, noise


@pytest.mark.parametrize("width, depth, expected", [
    (100, 100, 1),
    (99, 100, 0),
    (400, 400, 16),
    (16, 16, 0),
])
def test_river_source_count(width, depth, expected):
    assert hydrology.river_source_count(width, depth) == expected


def test_sources_are_deterministic_local_highs(rng):
    elevation = rng.random((60, 80))
    sources = hydrology.pick_river_sources(elevation, 5, 1234)
    assert sources == hydrology.pick_river_sources(elevation, 5, 1234)
    assert len(sources) == 5

    radius = 5
    for z, x in sources:
        assert 0 <= z < 60 and 0 <= x < 80
        window = elevation[max(0, z - radius):z + radius + 1, max(0, x - radius):x + radius + 1]
        assert elevation[z, x] == window.max()


def test_trace_runs_downhill_with_decaying_strength():
    # A plane sloping down towards +x.
    elevation = np.tile(1.0 - np.arange(20) / 100.0, (30, 1))
    meander = np.zeros_like(elevation)
    zs, xs, strengths = hydrology.trace_river(elevation, meander, 10, 0, 0.7)

    np.testing.assert_array_equal(xs, np.arange(20))
    assert strengths[0] == pytest.approx(1.0)
    np.testing.assert_allclose(strengths, 0.98 ** np.arange(20))
    assert np.all(np.diff(strengths) <= 0.0)
    assert np.all((zs >= 0) & (zs < 30))


def test_trace_stops_when_strength_fades():
    elevation = np.tile(1.0 - np.arange(300) / 1000.0, (5, 1))
    zs, xs, strengths = hydrology.trace_river(elevation, np.zeros_like(elevation), 2, 0, 0.0)
    assert len(strengths) < 200
    assert strengths[-1] > 0.1
    assert strengths[-1] * 0.98 <= 0.1


def test_trace_stops_in_a_pit():
    elevation = np.ones((5, 5))
    elevation[2, 2] = 0.0
    zs, xs, strengths = hydrology.trace_river(elevation, np.zeros_like(elevation), 2, 2, 0.7)
    assert list(zip(zs, xs)) == [(2, 2)]


def test_small_maps_have_no_rivers():
    elevation = np.random.default_rng(0).random((40, 40))
    np.testing.assert_array_equal(hydrology.generate_river_map(elevation, 5, 0.7), np.zeros((40, 40)))


def test_river_map_is_non_negative_and_bounded(river_terrain):
    river_map = river_terrain.river_map
    assert river_map.shape == (100, 100)
    assert river_map.min() >= 0.0
    assert river_map.max() == pytest.approx(1.0)


def test_carving_without_rivers_is_identity(rng):
    elevation = rng.random((20, 20))
    carved = hydrology.carve_rivers(elevation, np.zeros_like(elevation), 0.3)
    np.testing.assert_array_equal(carved, elevation)


def test_carving_channel_and_banks():
    elevation = np.full((7, 7), 0.8)
    river_map = np.zeros((7, 7))
    river_map[3, 3] = 1.0
    carved = hydrology.carve_rivers(elevation, river_map, 0.3)

    assert carved[3, 3] == pytest.approx(0.7)
    assert carved[3, 4] == pytest.approx(0.8 - 0.025)
    assert carved[4, 4] == pytest.approx(0.8 - (2 - np.sqrt(2)) / 2 * 0.05)
    assert carved[3, 5] == pytest.approx(0.8)
    assert np.all(carved <= elevation)


def test_carving_respects_the_channel_floor():
    elevation = np.array([[0.25, 0.1]])
    river_map = np.array([[1.0, 1.0]])
    carved = hydrology.carve_rivers(elevation, river_map, 0.3)
    assert carved[0, 0] == pytest.approx(0.2)
    assert carved[0, 1] == pytest.approx(0.1)


def test_coastline_disabled_is_identity(rng):
    elevation = rng.random((16, 16))
    x, z = noise.coordinate_grid(16, 16)
    shaped = hydrology.shape_coastline(elevation, x, z, 3, 0.3, coastal_erosion=False, beach_generation=False)
    np.testing.assert_array_equal(shaped, elevation)


def test_beach_leveling():
    elevation = np.array([[0.35, 0.45, 0.2]])
    x, z = noise.coordinate_grid(3, 1)
    shaped = hydrology.shape_coastline(elevation, x, z, 3, 0.3, coastal_erosion=False, beach_generation=True)
    np.testing.assert_allclose(shaped, [[0.3 + 0.05 * 0.3, 0.45, 0.2]])


def test_coastal_erosion_only_lowers(rng):
    elevation = rng.random((32, 32))
    x, z = noise.coordinate_grid(32, 32)
    shaped = hydrology.shape_coastline(elevation, x, z, 3, 0.3)
    assert np.all(shaped <= elevation)
    assert shaped.min() >= 0.0
    far_inland = elevation >= 0.5
    np.testing.assert_array_equal(shaped[far_inland], elevation[far_inland])
