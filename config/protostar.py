"""Configuration for the protostar accretion simulation."""

# =============================================================================
# PERFORMANCE PRESETS - Choose one by uncommenting
# =============================================================================

# PRESET: DENSE (20K particles, slow) - brute force gets expensive here
# PARTICLE_COUNT = 20_000
# COLLISION_BACKEND = "grid"

# PRESET: CLASSIC (9K particles) - the reference cloud
PARTICLE_COUNT = 9000
COLLISION_BACKEND = "brute"

# PRESET: LIGHT (2K particles, fast) - quick checks
# PARTICLE_COUNT = 2000
# COLLISION_BACKEND = "brute"

# =============================================================================

# Physics parameters
PROTOSTAR = {
    "particle_count": PARTICLE_COUNT,   # Total slots, fixed for the run
    "G": 10.0,                          # Gravitational constant (strong, for visible infall)
    "central_mass": 8000.0,             # Mass of the fixed central protostar
    "time_step": 0.1,                   # Fixed integration dt
    "collision_distance": 7.0,          # Particles closer than this merge
    "max_radius": 200.0,                # Radius of the initial cloud
    "protostar_fraction": 0.05,         # Fraction pre-collapsed at the origin
    "thickness_jitter": 1e-4,           # Out-of-plane velocity, relative to orbital speed
    "collision_backend": COLLISION_BACKEND,  # "brute" or "grid"
}

# Display sizes
SIZES = {
    "protostar_initial": 3.0,
    "disk_initial": 0.5,
    "merge_scale": 5.0,     # size = scale * log2(merge_count + 1)
    "cap": 2000.0,
}

# Parking spot for merged-away particles (outside any interaction range)
SENTINEL = (10000.0, 10000.0, 10000.0)

# Headless runner defaults
RUN = {
    "total_frames": 300,
    "report_every": 10,
}
