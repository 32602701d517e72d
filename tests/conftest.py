import pytest

from accretion import AccretionSimulation, ParticleStore


@pytest.fixture
def make_sim():
    """Build a simulation around hand-placed particles."""
    def _make(positions, velocities=None, protostar_count=0, sizes=None, **overrides):
        store = ParticleStore.from_arrays(
            positions, velocities, protostar_count=protostar_count, sizes=sizes
        )
        return AccretionSimulation.from_store(store, **overrides)
    return _make

@pytest.fixture
def dense_cloud():
    """A small, dense, seeded cloud where merges happen every few frames."""
    def _make(backend="brute", seed=7, count=800):
        return AccretionSimulation(
            particle_count=count,
            max_radius=60.0,
            seed=seed,
            collision_backend=backend,
            warmup=False,
        )
    return _make
