"""
Numba-compiled physics kernels for the accretion simulation.

All state lives in flat NumPy arrays owned by ParticleStore; the kernels
mutate them in place. Arithmetic is float64 without fastmath so results
match a plain Python evaluation of the same formulas.
"""

import math
import numpy as np
from numba import njit, prange


# ============================================================================
# PER-BODY HELPERS
# ============================================================================

@njit(cache=True)
def merge_size(merge_count: int, scale: float, cap: float) -> float:
    """Display radius for a merge count: scale * log2(count + 1), capped."""
    size = scale * math.log2(merge_count + 1.0)
    if size > cap:
        return cap
    return size


@njit(cache=True)
def advance_body(
    positions: np.ndarray,
    velocities: np.ndarray,
    i: int,
    px: float, py: float, pz: float,
    GM: float,
    dt: float
):
    """
    Semi-implicit Euler step for body i under the central mass.

    The force is evaluated at (px, py, pz), then the stored position is
    advanced with the updated velocity. A body exactly at the origin feels
    no force.
    """
    dist = math.sqrt(px * px + py * py + pz * pz)
    if dist > 0.0:
        force = -GM / (dist * dist)
        velocities[i, 0] += (px / dist) * force * dt
        velocities[i, 1] += (py / dist) * force * dt
        velocities[i, 2] += (pz / dist) * force * dt

    positions[i, 0] += velocities[i, 0] * dt
    positions[i, 1] += velocities[i, 1] * dt
    positions[i, 2] += velocities[i, 2] * dt


@njit(cache=True)
def absorb(
    positions: np.ndarray,
    velocities: np.ndarray,
    merge_counts: np.ndarray,
    i: int,
    j: int,
    px: float, py: float, pz: float
):
    """
    Merge body j into body i.

    Position becomes the midpoint of i's start-of-pass position and j, so a
    later merge into i overwrites an earlier one. Velocity averages against
    i's current velocity and compounds across merges. The mass units of j
    move to i.
    """
    positions[i, 0] = (px + positions[j, 0]) / 2
    positions[i, 1] = (py + positions[j, 1]) / 2
    positions[i, 2] = (pz + positions[j, 2]) / 2

    velocities[i, 0] = (velocities[i, 0] + velocities[j, 0]) / 2
    velocities[i, 1] = (velocities[i, 1] + velocities[j, 1]) / 2
    velocities[i, 2] = (velocities[i, 2] + velocities[j, 2]) / 2

    merge_counts[i] += merge_counts[j]
    merge_counts[j] = 0


# ============================================================================
# STEP KERNELS
# ============================================================================

@njit(cache=True)
def resolve_step(
    positions: np.ndarray,
    velocities: np.ndarray,
    merge_counts: np.ndarray,
    sizes: np.ndarray,
    alive: np.ndarray,
    merged: np.ndarray,
    protostar_count: int,
    num_particles: int,
    GM: float,
    dt: float,
    collision_distance: float,
    size_scale: float,
    size_cap: float
) -> int:
    """
    One full brute-force step: merge close pairs, then integrate survivors.

    Bodies are visited in ascending index order and each absorbs every later
    live body closer than collision_distance, also in ascending order. The
    merged mask is filled for this step only; the caller clears it.

    Returns the number of bodies that survived the step.
    """
    survivors = 0

    for i in range(protostar_count, num_particles):
        if merged[i] or not alive[i]:
            continue

        x1 = positions[i, 0]
        y1 = positions[i, 1]
        z1 = positions[i, 2]

        for j in range(i + 1, num_particles):
            if merged[j] or not alive[j]:
                continue

            dx = positions[j, 0] - x1
            dy = positions[j, 1] - y1
            dz = positions[j, 2] - z1
            distance = math.sqrt(dx * dx + dy * dy + dz * dz)

            if distance < collision_distance:
                absorb(positions, velocities, merge_counts, i, j, x1, y1, z1)
                merged[j] = True

        advance_body(positions, velocities, i, x1, y1, z1, GM, dt)
        sizes[i] = merge_size(merge_counts[i], size_scale, size_cap)
        survivors += 1

    return survivors


@njit(parallel=True, cache=True)
def integrate_gravity(
    positions: np.ndarray,
    velocities: np.ndarray,
    alive: np.ndarray,
    protostar_count: int,
    num_particles: int,
    GM: float,
    dt: float
):
    """Gravity-only pass over live disk bodies. No merging, safe to parallelize."""
    for i in prange(protostar_count, num_particles):
        if alive[i]:
            advance_body(
                positions, velocities, i,
                positions[i, 0], positions[i, 1], positions[i, 2],
                GM, dt
            )


@njit(cache=True)
def park_merged(
    positions: np.ndarray,
    velocities: np.ndarray,
    sizes: np.ndarray,
    alive: np.ndarray,
    merged: np.ndarray,
    num_particles: int,
    sentinel_x: float,
    sentinel_y: float,
    sentinel_z: float
):
    """
    Retire bodies merged this step and re-park every dead body.

    Runs over all slots every frame, so hiding is idempotent.
    """
    for i in range(num_particles):
        if merged[i]:
            alive[i] = False
        if not alive[i]:
            positions[i, 0] = sentinel_x
            positions[i, 1] = sentinel_y
            positions[i, 2] = sentinel_z
            velocities[i, 0] = 0.0
            velocities[i, 1] = 0.0
            velocities[i, 2] = 0.0
            sizes[i] = 0.0
