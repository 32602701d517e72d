"""Protostar accretion simulation core."""

from .params import InvalidConfigError, SimulationParams
from .store import ParticleStore, size_for_mass
from .distribution import generate_initial_conditions
from .simulation import AccretionSimulation

__all__ = [
    "AccretionSimulation",
    "InvalidConfigError",
    "ParticleStore",
    "SimulationParams",
    "generate_initial_conditions",
    "size_for_mass",
]
