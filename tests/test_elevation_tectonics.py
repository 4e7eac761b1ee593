import numpy as np

from terrain_generator import elevation, noise, tectonics

SEED = noise.string_to_seed("elevation-tests")


def grid(width=48, depth=40):
    return noise.coordinate_grid(width, depth)


def test_base_elevation_bounds_shape_determinism():
    x, z = grid()
    first = elevation.base_elevation(x, z, SEED)
    second = elevation.base_elevation(x, z, SEED)
    assert first.shape == (40, 48)
    assert first.min() >= 0.0 and first.max() <= 1.0
    np.testing.assert_array_equal(first, second)


def test_ridges_are_identity_at_zero_strength():
    x, z = grid()
    base = elevation.base_elevation(x, z, SEED)
    ridged = elevation.apply_ridges(base, x, z, SEED, 0.0, 50.0)
    np.testing.assert_array_equal(ridged, base)
    assert ridged is not base


def test_ridges_only_raise():
    x, z = grid()
    base = elevation.base_elevation(x, z, SEED)
    ridged = elevation.apply_ridges(base, x, z, SEED, 1.0, 50.0)
    assert np.all(ridged >= base)
    assert ridged.max() <= 1.0


def test_ridge_map_is_capped():
    x, z = grid()
    ridges = elevation.ridge_map(x, z, SEED, 50.0)
    assert ridges.min() >= 0.0 and ridges.max() <= 1.0


def test_terraces():
    heights = np.linspace(0.0, 1.0, 101).reshape(1, -1)
    np.testing.assert_array_equal(elevation.apply_terraces(heights, 0.0), heights)

    terraced = elevation.apply_terraces(heights, 1.0)
    assert terraced.min() >= 0.0 and terraced.max() <= 1.0
    # Terrace levels are fixed points.
    np.testing.assert_allclose(elevation.apply_terraces(np.array([[0.5, 0.25]]), 1.0), [[0.5, 0.25]])
    # Terracing keeps the ordering of heights.
    assert np.all(np.diff(terraced[0]) >= 0.0)


def test_tectonics_bounds_and_determinism():
    x, z = grid()
    base = elevation.base_elevation(x, z, SEED)
    shaped = tectonics.apply_tectonics(base, x, z, SEED)
    assert shaped.shape == base.shape
    assert shaped.min() >= 0.0 and shaped.max() <= 1.0
    np.testing.assert_array_equal(shaped, tectonics.apply_tectonics(base, x, z, SEED))


def stretched_grid(width=64, depth=64, spacing=997.0):
    """Cells spaced far apart so one small grid crosses many noise features."""
    x, z = noise.coordinate_grid(width, depth)
    return x * spacing, z * spacing


def test_convergent_uplift_and_rift_deltas():
    x, z = stretched_grid()
    boundary = tectonics.plate_boundary_field(x, z, SEED)
    assert np.count_nonzero(boundary > 0.7) > 0
    assert np.count_nonzero(boundary < 0.3) > 0

    base = np.full(x.shape, 0.4)
    shaped = tectonics.apply_tectonics(base, x, z, SEED)
    uplift = np.where(boundary > 0.7, (boundary - 0.7) ** 2 * 3.0, 0.0)
    rift = np.where(boundary < 0.3, (0.3 - boundary) ** 2 * 0.5, 0.0)
    np.testing.assert_allclose(shaped, 0.4 + uplift - rift)
    assert shaped.max() > 0.4
    assert shaped.min() < 0.4


def test_volcanism_adds_cone_height():
    x, z = stretched_grid()
    volcanic = tectonics.volcanic_field(x, z, SEED)
    assert np.count_nonzero(volcanic > 0.8) > 0

    base = np.full(x.shape, 0.4)
    calm = tectonics.apply_tectonics(base, x, z, SEED, volcanic_activity=False)
    active = tectonics.apply_tectonics(base, x, z, SEED, volcanic_activity=True)
    cones = np.where(volcanic > 0.8, (volcanic - 0.8) ** 2 * 5.0, 0.0)
    np.testing.assert_allclose(active - calm, cones, atol=1e-12)
    assert np.count_nonzero(active > calm) > 0


def test_volcanic_mask_matches_field():
    x, z = grid()
    field = tectonics.volcanic_field(x, z, SEED)
    np.testing.assert_array_equal(tectonics.volcanic_mask(x, z, SEED), field > 0.8)
