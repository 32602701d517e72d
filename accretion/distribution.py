"""Initial conditions: collapsed proto-mass plus a Keplerian cloud."""

import numpy as np

from .params import SimulationParams
from .store import ParticleStore


def sample_uniform_sphere(n: int, max_radius: float, rng: np.random.Generator) -> np.ndarray:
    """
    Sample n points uniformly by volume inside a sphere.

    The cube root on the radius is what makes the density uniform by volume;
    a linear radius would pile points up near the center.
    """
    u = rng.uniform(0.0, 1.0, n)
    v = rng.uniform(0.0, 1.0, n)
    theta = 2.0 * np.pi * u          # Angle in xy-plane
    phi = np.arccos(2.0 * v - 1.0)   # Angle from z-axis
    r = np.cbrt(rng.uniform(0.0, 1.0, n)) * max_radius

    points = np.empty((n, 3), dtype=np.float64)
    points[:, 0] = r * np.sin(phi) * np.cos(theta)
    points[:, 1] = r * np.sin(phi) * np.sin(theta)
    points[:, 2] = r * np.cos(phi)
    return points


def keplerian_velocities(positions: np.ndarray, G: float, central_mass: float,
                         thickness_jitter: float, rng: np.random.Generator) -> np.ndarray:
    """
    Circular-orbit velocities around the z-axis for the given positions.

    Particles on the z-axis (zero planar radius) get zero velocity.
    """
    n = len(positions)
    x = positions[:, 0]
    y = positions[:, 1]
    rho = np.sqrt(x * x + y * y)

    velocities = np.zeros((n, 3), dtype=np.float64)
    # Jitter is drawn for every particle so the stream does not depend on geometry
    jitter = rng.uniform(0.0, 1.0, n) - 0.5

    orbiting = rho > 0
    rho_o = rho[orbiting]
    speed = np.sqrt(G * central_mass / rho_o)

    velocities[orbiting, 0] = -y[orbiting] * speed / rho_o
    velocities[orbiting, 1] = x[orbiting] * speed / rho_o
    # Small out-of-plane kick for disk thickness
    velocities[orbiting, 2] = jitter[orbiting] * speed * thickness_jitter
    return velocities


def generate_initial_conditions(params: SimulationParams, seed=None) -> ParticleStore:
    """
    Allocate and fill the particle store for a fresh run.

    Args:
        params: validated simulation parameters
        seed: optional RNG seed; falls back to params.seed, then to fresh entropy

    Returns:
        A ParticleStore with the proto-mass in [0, protostar_count) and the
        orbiting cloud in the remaining slots.
    """
    if seed is None:
        seed = params.seed
    rng = np.random.default_rng(seed)

    n = params.particle_count
    protostar_count = params.protostar_count
    store = ParticleStore(n, protostar_count)

    # Proto-mass: collapsed at the origin, at rest
    store.positions[:protostar_count] = 0.0
    store.velocities[:protostar_count] = 0.0
    store.sizes[:protostar_count] = params.protostar_initial_size

    # Disk: uniform sphere with Keplerian rotation
    disk_count = n - protostar_count
    if disk_count > 0:
        disk_positions = sample_uniform_sphere(disk_count, params.max_radius, rng)
        store.positions[protostar_count:] = disk_positions
        store.velocities[protostar_count:] = keplerian_velocities(
            disk_positions, params.G, params.central_mass, params.thickness_jitter, rng
        )
        store.sizes[protostar_count:] = params.disk_initial_size

    store.merge_counts[:] = 1
    store.alive[:] = True
    return store
