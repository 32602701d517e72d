"""
Uniform spatial grid for collision candidates.

Drop-in replacement for the brute-force pair scan in kernels.resolve_step.
The grid is rebuilt every step from start-of-step positions with cells at
least collision_distance wide, so every pair closer than the threshold sits
in the same or an adjacent cell. Candidates for a body are merged in
ascending index order, which keeps results identical to the brute-force
resolver.
"""

import math
import numpy as np
from numba import njit

from .kernels import absorb, advance_body, merge_size


MAX_GRID_DIM = 64  # Cells per axis; cell size grows past this instead


# ============================================================================
# NUMBA JIT-COMPILED GRID FUNCTIONS
# ============================================================================

@njit(cache=True)
def compute_extent(positions: np.ndarray, alive: np.ndarray,
                   start: int, num_particles: int) -> float:
    """Largest absolute coordinate among live bodies."""
    max_extent = 0.0
    for i in range(start, num_particles):
        if not alive[i]:
            continue
        for dim in range(3):
            ext = abs(positions[i, dim])
            if ext > max_extent:
                max_extent = ext
    return max_extent


@njit(cache=True)
def get_cell_coord(v: float, cell_size: float, grid_dim: int, offset: float) -> int:
    """Clamp a coordinate into a cell column."""
    c = int((v + offset) / cell_size)
    return max(0, min(c, grid_dim - 1))


@njit(cache=True)
def assign_cells(
    positions: np.ndarray,
    alive: np.ndarray,
    cell_indices: np.ndarray,
    start: int,
    num_particles: int,
    cell_size: float,
    grid_dim: int,
    offset: float
):
    """Assign each live body to a cell. Everything else goes to the overflow bucket."""
    num_cells = grid_dim * grid_dim * grid_dim
    for i in range(num_particles):
        if i < start or not alive[i]:
            cell_indices[i] = num_cells
            continue
        cx = get_cell_coord(positions[i, 0], cell_size, grid_dim, offset)
        cy = get_cell_coord(positions[i, 1], cell_size, grid_dim, offset)
        cz = get_cell_coord(positions[i, 2], cell_size, grid_dim, offset)
        cell_indices[i] = cx + cy * grid_dim + cz * grid_dim * grid_dim


@njit(cache=True)
def build_cell_lists(
    cell_indices: np.ndarray,
    sorted_indices: np.ndarray,
    cell_starts: np.ndarray,
    cell_counts: np.ndarray,
    num_particles: int,
    num_cells: int
):
    """Build cell start indices and counts after sorting."""
    for i in range(num_cells):
        cell_starts[i] = -1
        cell_counts[i] = 0

    for i in range(num_particles):
        cell = cell_indices[sorted_indices[i]]
        if cell_starts[cell] == -1:
            cell_starts[cell] = i
        cell_counts[cell] += 1


@njit(cache=True)
def resolve_step_grid(
    positions: np.ndarray,
    velocities: np.ndarray,
    merge_counts: np.ndarray,
    sizes: np.ndarray,
    alive: np.ndarray,
    merged: np.ndarray,
    sorted_indices: np.ndarray,
    cell_starts: np.ndarray,
    cell_counts: np.ndarray,
    cell_size: float,
    grid_dim: int,
    offset: float,
    protostar_count: int,
    num_particles: int,
    GM: float,
    dt: float,
    collision_distance: float,
    size_scale: float,
    size_cap: float
) -> int:
    """Grid-accelerated equivalent of kernels.resolve_step."""
    hits = np.empty(num_particles, dtype=np.int64)
    survivors = 0

    for i in range(protostar_count, num_particles):
        if merged[i] or not alive[i]:
            continue

        x1 = positions[i, 0]
        y1 = positions[i, 1]
        z1 = positions[i, 2]

        cx = get_cell_coord(x1, cell_size, grid_dim, offset)
        cy = get_cell_coord(y1, cell_size, grid_dim, offset)
        cz = get_cell_coord(z1, cell_size, grid_dim, offset)

        num_hits = 0
        for dcx in range(-1, 2):
            ncx = cx + dcx
            if ncx < 0 or ncx >= grid_dim:
                continue

            for dcy in range(-1, 2):
                ncy = cy + dcy
                if ncy < 0 or ncy >= grid_dim:
                    continue

                for dcz in range(-1, 2):
                    ncz = cz + dcz
                    if ncz < 0 or ncz >= grid_dim:
                        continue

                    cell_idx = ncx + ncy * grid_dim + ncz * grid_dim * grid_dim
                    start = cell_starts[cell_idx]
                    if start == -1:
                        continue

                    for k in range(cell_counts[cell_idx]):
                        j = sorted_indices[start + k]
                        if j <= i or merged[j]:
                            continue

                        dx = positions[j, 0] - x1
                        dy = positions[j, 1] - y1
                        dz = positions[j, 2] - z1
                        distance = math.sqrt(dx * dx + dy * dy + dz * dz)

                        if distance < collision_distance:
                            hits[num_hits] = j
                            num_hits += 1

        if num_hits > 0:
            ordered = np.sort(hits[:num_hits])
            for k in range(num_hits):
                j = ordered[k]
                absorb(positions, velocities, merge_counts, i, j, x1, y1, z1)
                merged[j] = True

        advance_body(positions, velocities, i, x1, y1, z1, GM, dt)
        sizes[i] = merge_size(merge_counts[i], size_scale, size_cap)
        survivors += 1

    return survivors


class CollisionGrid:
    """Per-step spatial grid over the live disk bodies."""

    def __init__(self, num_particles: int, collision_distance: float):
        self.num_particles = num_particles
        self.collision_distance = float(collision_distance)
        self._cell_indices = np.zeros(num_particles, dtype=np.int64)

        self.cell_size = self.collision_distance
        self.grid_dim = 1
        self.offset = 0.0
        self.sorted_indices = np.arange(num_particles, dtype=np.int64)
        self.cell_starts = np.full(2, -1, dtype=np.int64)
        self.cell_counts = np.zeros(2, dtype=np.int64)

    def rebuild(self, positions: np.ndarray, alive: np.ndarray, start: int):
        """Re-bucket bodies from their current positions."""
        extent = compute_extent(positions, alive, start, self.num_particles)
        span = 2.0 * extent

        self.cell_size = max(self.collision_distance, span / (MAX_GRID_DIM - 1))
        self.grid_dim = min(int(span / self.cell_size) + 1, MAX_GRID_DIM)
        self.offset = extent
        num_cells = self.grid_dim ** 3

        assign_cells(
            positions, alive, self._cell_indices, start, self.num_particles,
            self.cell_size, self.grid_dim, self.offset
        )
        # Stable sort keeps ascending body order inside each cell
        self.sorted_indices = np.argsort(self._cell_indices, kind="stable")

        # One extra bucket collects the bodies left out of the grid
        if len(self.cell_starts) != num_cells + 1:
            self.cell_starts = np.empty(num_cells + 1, dtype=np.int64)
            self.cell_counts = np.empty(num_cells + 1, dtype=np.int64)
        build_cell_lists(
            self._cell_indices, self.sorted_indices, self.cell_starts,
            self.cell_counts, self.num_particles, num_cells + 1
        )
