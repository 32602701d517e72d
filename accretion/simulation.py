"""
Protostar accretion simulation.

A fixed central mass pulls a cloud of unit-mass particles inward; particles
that come within the collision distance of each other merge into one,
accumulating mass and display size. The particle set only ever shrinks.

Per-frame pipeline (one update() call):
- Merge pass over live disk bodies in ascending index order
- Central gravity + semi-implicit Euler for each survivor
- Size refresh from merge count
- Retire and park merged bodies at the sentinel position
"""

import numpy as np

from config import protostar as config
from .distribution import generate_initial_conditions
from .grid import CollisionGrid, resolve_step_grid
from .kernels import integrate_gravity, park_merged, resolve_step
from .params import InvalidConfigError, SimulationParams
from .store import SENTINEL, ParticleStore


class AccretionSimulation:
    """
    Owns the particle store and advances it one fixed time step per update.

    Exposes the three outputs a renderer needs: positions, sizes and the
    active-particle count.
    """

    def __init__(self, params: SimulationParams = None, store: ParticleStore = None,
                 warmup: bool = True, **overrides):
        if params is None:
            params = SimulationParams.from_dict(config.PROTOSTAR, **overrides)
        elif overrides:
            params = SimulationParams.from_dict(vars(params), **overrides)
        else:
            params.validate()
        self.params = params

        self.G = float(params.G)
        self.central_mass = float(params.central_mass)
        self.dt = float(params.time_step)
        self.collision_distance = float(params.collision_distance)
        self.size_scale = float(config.SIZES["merge_scale"])
        self.size_cap = float(params.size_cap)

        # Initialize particle state
        if store is None:
            store = generate_initial_conditions(params)
        elif store.capacity != params.particle_count:
            raise InvalidConfigError(
                f"store holds {store.capacity} particles, "
                f"particle_count is {params.particle_count}"
            )
        self.store = store
        self.num_particles = store.capacity

        # Transient per-step merge mask, cleared at the start of every step
        self._merged = np.zeros(self.num_particles, dtype=np.bool_)

        self._grid = None
        if params.collision_backend == "grid":
            self._grid = CollisionGrid(self.num_particles, self.collision_distance)

        self.frame = 0
        self._active_count = store.count_active()

        if warmup:
            self._warmup_numba()

        print(f"[Accretion] Initialized {self.num_particles:,} particles "
              f"({store.protostar_count:,} in protostar, backend: {params.collision_backend})")

    @classmethod
    def from_store(cls, store: ParticleStore, warmup: bool = False, **overrides):
        """Wrap hand-built state, e.g. a two-body scenario."""
        overrides.setdefault("particle_count", store.capacity)
        params = SimulationParams.from_dict(config.PROTOSTAR, **overrides)
        return cls(params, store=store, warmup=warmup)

    def _warmup_numba(self):
        """Pre-compile Numba functions with small arrays."""
        n = 8
        pos = np.random.rand(n, 3).astype(np.float64) * 10
        vel = np.zeros((n, 3), dtype=np.float64)
        counts = np.ones(n, dtype=np.int64)
        sizes = np.zeros(n, dtype=np.float64)
        alive = np.ones(n, dtype=np.bool_)
        merged = np.zeros(n, dtype=np.bool_)

        resolve_step(pos, vel, counts, sizes, alive, merged, 1, n,
                     1.0, 0.01, 1.0, 5.0, 2000.0)
        park_merged(pos, vel, sizes, alive, merged, n, *SENTINEL)
        integrate_gravity(pos, vel, alive, 1, n, 1.0, 0.01)

        if self._grid is not None:
            grid = CollisionGrid(n, 1.0)
            grid.rebuild(pos, alive, 1)
            self._resolve_grid(grid, pos, vel, counts, sizes, alive, merged, 1, n,
                               1.0, 0.01, 1.0, 5.0, 2000.0)

    # ------------------------------------------------------------------
    # Outputs for the renderer
    # ------------------------------------------------------------------

    @property
    def positions(self) -> np.ndarray:
        return self.store.positions

    @property
    def positions_flat(self) -> np.ndarray:
        return self.store.positions_flat

    @property
    def sizes(self) -> np.ndarray:
        return self.store.sizes

    @property
    def active_count(self) -> int:
        """Live disk particles after the last update."""
        return self._active_count

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def update(self) -> int:
        """Advance one time step. Returns the new active-particle count."""
        s = self.store
        GM = self.G * self.central_mass
        self._merged.fill(False)

        if self._grid is None:
            survivors = resolve_step(
                s.positions, s.velocities, s.merge_counts, s.sizes,
                s.alive, self._merged, s.protostar_count, self.num_particles,
                GM, self.dt, self.collision_distance, self.size_scale, self.size_cap
            )
        else:
            self._grid.rebuild(s.positions, s.alive, s.protostar_count)
            survivors = self._resolve_grid(
                self._grid, s.positions, s.velocities, s.merge_counts, s.sizes,
                s.alive, self._merged, s.protostar_count, self.num_particles,
                GM, self.dt, self.collision_distance, self.size_scale, self.size_cap
            )

        park_merged(
            s.positions, s.velocities, s.sizes, s.alive, self._merged,
            self.num_particles, *SENTINEL
        )

        self._active_count = int(survivors)
        self.frame += 1
        return self._active_count

    def run(self, frames: int) -> int:
        """Advance several steps. Returns the final active count."""
        for _ in range(frames):
            self.update()
        return self._active_count

    @staticmethod
    def _resolve_grid(grid, positions, velocities, merge_counts, sizes, alive, merged,
                      protostar_count, num_particles, GM, dt, collision_distance,
                      size_scale, size_cap):
        return resolve_step_grid(
            positions, velocities, merge_counts, sizes, alive, merged,
            grid.sorted_indices, grid.cell_starts, grid.cell_counts,
            grid.cell_size, grid.grid_dim, grid.offset,
            protostar_count, num_particles, GM, dt, collision_distance,
            size_scale, size_cap
        )

    @property
    def merged_this_step(self) -> np.ndarray:
        """Read-only copy of the last step's merge mask."""
        return self._merged.copy()

    def stats(self) -> dict:
        """Summary numbers for progress reporting."""
        s = self.store
        live = s.alive.copy()
        live[:s.protostar_count] = False
        masses = s.merge_counts[live]
        speeds_sq = np.einsum("ij,ij->i", s.velocities[live], s.velocities[live])
        return {
            "frame": self.frame,
            "active": self._active_count,
            "largest_mass": int(masses.max()) if len(masses) else 0,
            "total_mass": s.total_mass,
            "kinetic_energy": float(0.5 * np.sum(masses * speeds_sq)),
        }
