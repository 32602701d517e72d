import pytest

from accretion import AccretionSimulation, InvalidConfigError, ParticleStore, SimulationParams
from config import protostar as config


def test_defaults_match_config():
    params = SimulationParams.from_dict(config.PROTOSTAR)
    assert params.particle_count == 9000
    assert params.G == 10.0
    assert params.central_mass == 8000.0
    assert params.time_step == 0.1
    assert params.collision_distance == 7.0
    assert params.max_radius == 200.0
    assert params.protostar_count == 450


def test_protostar_count_floors():
    assert SimulationParams.from_dict(particle_count=99).protostar_count == 4
    assert SimulationParams.from_dict(particle_count=10, protostar_fraction=0.0).protostar_count == 0
    assert SimulationParams.from_dict(particle_count=10, protostar_fraction=1.0).protostar_count == 10


@pytest.mark.parametrize("overrides", [
    {"particle_count": 0},
    {"particle_count": -5},
    {"particle_count": 10.5},
    {"particle_count": True},
    {"protostar_fraction": 1.5},
    {"protostar_fraction": -0.1},
    {"time_step": 0.0},
    {"collision_distance": -1.0},
    {"max_radius": 0.0},
    {"size_cap": 0.0},
    {"G": -1.0},
    {"central_mass": float("nan")},
    {"collision_backend": "octree"},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(InvalidConfigError):
        SimulationParams.from_dict(config.PROTOSTAR, **overrides)


def test_unknown_key_rejected():
    with pytest.raises(InvalidConfigError, match="particles"):
        SimulationParams.from_dict({"particles": 10})


def test_invalid_config_is_a_value_error():
    assert issubclass(InvalidConfigError, ValueError)


def test_simulation_fails_fast_on_bad_config():
    with pytest.raises(InvalidConfigError):
        AccretionSimulation(particle_count=-1, warmup=False)
    with pytest.raises(InvalidConfigError):
        AccretionSimulation(particle_count=100, protostar_fraction=2.0, warmup=False)


def test_store_size_mismatch_rejected():
    store = ParticleStore(4)
    params = SimulationParams.from_dict(particle_count=5)
    with pytest.raises(InvalidConfigError):
        AccretionSimulation(params, store=store, warmup=False)
