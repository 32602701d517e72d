"""Fixed-capacity particle storage (structure of arrays)."""

import numpy as np

from config import protostar as config


SENTINEL = np.array(config.SENTINEL, dtype=np.float64)


def size_for_mass(merge_counts, scale: float = config.SIZES["merge_scale"],
                  cap: float = config.SIZES["cap"]):
    """Display radius for a merge count: logarithmic growth, capped."""
    return np.minimum(scale * np.log2(np.asarray(merge_counts, dtype=np.float64) + 1.0), cap)


class ParticleStore:
    """
    Physical state of every particle slot for the lifetime of a run.

    Attributes:
        positions: (N, 3) float64 world coordinates
        velocities: (N, 3) float64 velocities
        merge_counts: (N,) int64 unit masses represented by each slot
        sizes: (N,) float64 display radius, 0 means hidden
        alive: (N,) bool, False once a slot has been merged away
        protostar_count: slots [0, protostar_count) form the fixed proto-mass
    """

    def __init__(self, capacity: int, protostar_count: int = 0):
        if not 0 <= protostar_count <= capacity:
            raise ValueError(
                f"protostar_count {protostar_count} outside [0, {capacity}]"
            )
        self.capacity = capacity
        self.protostar_count = protostar_count

        self.positions = np.zeros((capacity, 3), dtype=np.float64)
        self.velocities = np.zeros((capacity, 3), dtype=np.float64)
        self.merge_counts = np.ones(capacity, dtype=np.int64)
        self.sizes = np.zeros(capacity, dtype=np.float64)
        self.alive = np.ones(capacity, dtype=np.bool_)

    def __len__(self):
        return self.capacity

    @classmethod
    def from_arrays(cls, positions, velocities=None, protostar_count: int = 0,
                    merge_counts=None, sizes=None) -> "ParticleStore":
        """Build a store from explicit state, mostly for hand-made scenarios."""
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        store = cls(len(positions), protostar_count)
        store.positions[:] = positions
        if velocities is not None:
            store.velocities[:] = np.asarray(velocities, dtype=np.float64).reshape(-1, 3)
        if merge_counts is not None:
            store.merge_counts[:] = merge_counts
        if sizes is not None:
            store.sizes[:] = sizes
        else:
            store.sizes[:] = size_for_mass(store.merge_counts)
        return store

    @property
    def disk_slice(self) -> slice:
        return slice(self.protostar_count, self.capacity)

    @property
    def positions_flat(self) -> np.ndarray:
        """Length-3N view of the positions, shared with the (N, 3) array."""
        return self.positions.reshape(-1)

    @property
    def total_mass(self) -> int:
        return int(self.merge_counts.sum())

    def count_active(self) -> int:
        """Number of disk slots that have not been merged away."""
        return int(np.count_nonzero(self.alive[self.protostar_count:]))
