import numpy as np
import pytest
from scipy import stats

from accretion import SimulationParams, generate_initial_conditions
from accretion.distribution import keplerian_velocities, sample_uniform_sphere


def make_params(**overrides):
    return SimulationParams.from_dict(particle_count=2000, **overrides)


def test_protostar_slots_collapsed_at_origin():
    store = generate_initial_conditions(make_params(), seed=1)
    p = store.protostar_count

    assert p == 100
    np.testing.assert_array_equal(store.positions[:p], 0.0)
    np.testing.assert_array_equal(store.velocities[:p], 0.0)
    np.testing.assert_array_equal(store.sizes[:p], 3.0)
    np.testing.assert_array_equal(store.sizes[p:], 0.5)
    np.testing.assert_array_equal(store.merge_counts, 1)
    assert store.alive.all()
    assert store.total_mass == 2000


def test_disk_inside_max_radius():
    store = generate_initial_conditions(make_params(max_radius=50.0), seed=2)
    radii = np.linalg.norm(store.positions[store.disk_slice], axis=1)
    assert radii.max() <= 50.0
    assert radii.min() > 0.0


def test_seed_is_reproducible():
    a = generate_initial_conditions(make_params(), seed=42)
    b = generate_initial_conditions(make_params(), seed=42)
    c = generate_initial_conditions(make_params(), seed=43)

    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(a.velocities, b.velocities)
    assert not np.array_equal(a.positions, c.positions)


def test_params_seed_used_when_no_seed_given():
    a = generate_initial_conditions(make_params(seed=5))
    b = generate_initial_conditions(make_params(seed=5))
    np.testing.assert_array_equal(a.positions, b.positions)


def test_radial_density_is_uniform_by_volume():
    rng = np.random.default_rng(0)
    R = 200.0
    points = sample_uniform_sphere(100_000, R, rng)
    x = np.linalg.norm(points, axis=1) / R

    # Uniform by volume: P(r <= x) = x^3
    assert stats.kstest(x, lambda v: np.clip(v, 0, 1) ** 3).pvalue > 1e-3
    # A uniform-in-radius cloud would look nothing like it
    assert stats.kstest(x, "uniform").pvalue < 1e-6
    assert np.median(x) == pytest.approx(0.5 ** (1 / 3), abs=0.01)

    # Shell counts grow like r^2
    counts, _ = np.histogram(x, bins=[0.0, 0.5, 1.0])
    assert counts[1] / counts[0] == pytest.approx(7.0, rel=0.05)


def test_directions_are_isotropic():
    rng = np.random.default_rng(3)
    points = sample_uniform_sphere(50_000, 1.0, rng)
    np.testing.assert_allclose(points.mean(axis=0), 0.0, atol=0.01)


def test_keplerian_velocities():
    G, M = 10.0, 8000.0
    store = generate_initial_conditions(make_params(), seed=4)
    pos = store.positions[store.disk_slice]
    vel = store.velocities[store.disk_slice]

    rho = np.hypot(pos[:, 0], pos[:, 1])
    expected_speed = np.sqrt(G * M / rho)
    planar_speed = np.hypot(vel[:, 0], vel[:, 1])
    np.testing.assert_allclose(planar_speed, expected_speed, rtol=1e-12)

    # Tangential: perpendicular to the planar radius vector
    radial = pos[:, 0] * vel[:, 0] + pos[:, 1] * vel[:, 1]
    np.testing.assert_allclose(radial / (rho * planar_speed), 0.0, atol=1e-12)

    # Counter-clockwise around +z
    cross_z = pos[:, 0] * vel[:, 1] - pos[:, 1] * vel[:, 0]
    assert (cross_z > 0).all()

    # Out-of-plane jitter stays tiny
    assert (np.abs(vel[:, 2]) <= 0.5 * expected_speed * 1e-4).all()


def test_keplerian_zero_planar_radius_has_no_velocity():
    rng = np.random.default_rng(0)
    positions = np.array([[0.0, 0.0, 5.0], [0.0, 0.0, 0.0], [3.0, 4.0, 0.0]])
    vel = keplerian_velocities(positions, 10.0, 8000.0, 1e-4, rng)

    np.testing.assert_array_equal(vel[0], 0.0)
    np.testing.assert_array_equal(vel[1], 0.0)
    assert np.hypot(vel[2, 0], vel[2, 1]) == pytest.approx(np.sqrt(80000.0 / 5.0))
