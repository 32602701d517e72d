"""
Simulation Presets Library
==========================

Pre-configured accretion runs organized by category. Each preset holds
parameter overrides on top of config/protostar.py plus a frame count.

Categories:
- TINY: Very small clouds for testing on slow machines
- CLASSIC: The reference 9K-particle protostar cloud
- DENSE: Larger clouds, grid collision backend
- CHAOS: Unusual physics for fun
"""

from typing import List, Tuple

PRESETS = {}

# -----------------------------------------------------------------------------
# TINY PRESETS
# -----------------------------------------------------------------------------

PRESETS["tiny_cloud"] = {
    "name": "Tiny Cloud",
    "description": "Very small cloud for testing",
    "category": "TINY",
    "particle_count": 500,
    "total_frames": 100,
}

PRESETS["tiny_grid"] = {
    "name": "Tiny Cloud (grid)",
    "description": "Tiny cloud on the spatial-grid collision backend",
    "category": "TINY",
    "particle_count": 500,
    "collision_backend": "grid",
    "total_frames": 100,
}

# -----------------------------------------------------------------------------
# CLASSIC PRESETS
# -----------------------------------------------------------------------------

PRESETS["classic"] = {
    "name": "Classic Protostar",
    "description": "9K particles, 5% pre-collapsed, strong central pull",
    "category": "CLASSIC",
    "particle_count": 9000,
    "G": 10.0,
    "central_mass": 8000.0,
    "time_step": 0.1,
    "collision_distance": 7.0,
    "max_radius": 200.0,
    "protostar_fraction": 0.05,
    "total_frames": 300,
}

PRESETS["thick_disk"] = {
    "name": "Thick Disk",
    "description": "Classic cloud with strong out-of-plane velocity jitter",
    "category": "CLASSIC",
    "particle_count": 9000,
    "thickness_jitter": 0.2,
    "total_frames": 300,
}

# -----------------------------------------------------------------------------
# DENSE PRESETS
# -----------------------------------------------------------------------------

PRESETS["dense_20k"] = {
    "name": "Dense 20K",
    "description": "20K particles, grid backend keeps the pair scan near-linear",
    "category": "DENSE",
    "particle_count": 20_000,
    "collision_backend": "grid",
    "total_frames": 300,
}

PRESETS["dense_50k"] = {
    "name": "Dense 50K",
    "description": "50K particles in a wider cloud",
    "category": "DENSE",
    "particle_count": 50_000,
    "max_radius": 400.0,
    "collision_backend": "grid",
    "total_frames": 200,
}

# -----------------------------------------------------------------------------
# CHAOS PRESETS
# -----------------------------------------------------------------------------

PRESETS["sticky"] = {
    "name": "Sticky Dust",
    "description": "Huge collision distance, runaway merging",
    "category": "CHAOS",
    "particle_count": 5000,
    "collision_distance": 20.0,
    "total_frames": 150,
}

PRESETS["weak_star"] = {
    "name": "Weak Star",
    "description": "Light central mass, the cloud barely collapses",
    "category": "CHAOS",
    "particle_count": 5000,
    "central_mass": 500.0,
    "total_frames": 300,
}

# Keys that are run settings rather than simulation parameters
RUN_KEYS = ("name", "description", "category", "total_frames", "session_name")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def get_preset_list() -> List[Tuple[str, dict]]:
    """Get list of all presets sorted by category."""
    category_order = ["TINY", "CLASSIC", "DENSE", "CHAOS"]

    sorted_presets = sorted(
        PRESETS.items(),
        key=lambda x: (category_order.index(x[1]["category"]) if x[1]["category"] in category_order else 99, x[0])
    )
    return sorted_presets


def print_preset_menu():
    """Print formatted preset list."""
    presets = get_preset_list()
    current_category = None

    print("\n" + "=" * 70)
    print("  ACCRETION SIMULATION PRESETS")
    print("=" * 70)

    for idx, (key, preset) in enumerate(presets):
        if preset["category"] != current_category:
            current_category = preset["category"]
            print(f"\n{'─' * 70}")
            print(f"  {current_category}")
            print(f"{'─' * 70}")

        count = preset["particle_count"]
        count_str = f"{count / 1000:.1f}K" if count >= 1000 else str(count)
        frames = preset["total_frames"]

        print(f"  [{idx:2d}] {key:<12} {preset['name']:<20} {count_str:>6} particles | {frames:>4} frames")
        print(f"       {preset['description']}")

    print(f"\n{'=' * 70}")


def get_preset_by_index(index: int) -> Tuple[str, dict]:
    """Get preset by menu index."""
    presets = get_preset_list()
    if 0 <= index < len(presets):
        return presets[index]
    return None, None


def get_preset_config(key: str) -> dict:
    """Get a preset configuration by key, adding session_name."""
    if key not in PRESETS:
        return None

    preset = PRESETS[key].copy()
    preset["session_name"] = key
    return preset


def split_preset(preset: dict) -> Tuple[dict, dict]:
    """Separate simulation parameters from run settings."""
    params = {k: v for k, v in preset.items() if k not in RUN_KEYS}
    run = {k: v for k, v in preset.items() if k in RUN_KEYS}
    return params, run


def parse_number(value: str) -> int:
    """Parse number with optional suffix (k, m, K, M)."""
    value = value.strip().lower()
    multipliers = {'k': 1_000, 'm': 1_000_000}

    for suffix, mult in multipliers.items():
        if value.endswith(suffix):
            return int(float(value[:-1]) * mult)

    return int(value)
