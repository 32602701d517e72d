"""Simulation parameters and their validation."""

import math
from dataclasses import dataclass, fields
from typing import Optional

from config import protostar as config


COLLISION_BACKENDS = ("brute", "grid")


class InvalidConfigError(ValueError):
    """Raised when simulation parameters violate the caller contract."""


@dataclass
class SimulationParams:
    """Construction-time parameters for an accretion run."""
    # Physics
    particle_count: int = config.PROTOSTAR["particle_count"]
    G: float = config.PROTOSTAR["G"]
    central_mass: float = config.PROTOSTAR["central_mass"]
    time_step: float = config.PROTOSTAR["time_step"]
    collision_distance: float = config.PROTOSTAR["collision_distance"]
    max_radius: float = config.PROTOSTAR["max_radius"]
    protostar_fraction: float = config.PROTOSTAR["protostar_fraction"]
    thickness_jitter: float = config.PROTOSTAR["thickness_jitter"]

    # Display sizes
    protostar_initial_size: float = config.SIZES["protostar_initial"]
    disk_initial_size: float = config.SIZES["disk_initial"]
    size_cap: float = config.SIZES["cap"]

    # Engine
    collision_backend: str = config.PROTOSTAR["collision_backend"]
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, values: dict = None, **overrides) -> "SimulationParams":
        """
        Build parameters from a config-style dict plus keyword overrides.

        Unknown keys raise InvalidConfigError rather than being ignored.
        """
        merged = dict(values or {})
        merged.update(overrides)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(merged) - known)
        if unknown:
            raise InvalidConfigError(f"Unknown parameter(s): {', '.join(unknown)}")

        params = cls(**merged)
        params.validate()
        return params

    @property
    def protostar_count(self) -> int:
        return int(math.floor(self.particle_count * self.protostar_fraction))

    def validate(self):
        """Check every parameter, raising InvalidConfigError on the first violation."""
        n = self.particle_count
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidConfigError(f"particle_count must be an integer, got {n!r}")
        if n <= 0:
            raise InvalidConfigError(f"particle_count must be positive, got {n}")

        if not 0.0 <= self.protostar_fraction <= 1.0:
            raise InvalidConfigError(
                f"protostar_fraction must be in [0, 1], got {self.protostar_fraction}"
            )

        for name in ("time_step", "collision_distance", "max_radius", "size_cap"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidConfigError(f"{name} must be positive, got {value}")

        for name in ("G", "central_mass", "thickness_jitter",
                     "protostar_initial_size", "disk_initial_size"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigError(f"{name} must be non-negative, got {value}")

        if self.collision_backend not in COLLISION_BACKENDS:
            raise InvalidConfigError(
                f"collision_backend must be one of {COLLISION_BACKENDS}, "
                f"got {self.collision_backend!r}"
            )
