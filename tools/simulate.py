"""
Headless Accretion Runner
=========================

Steps the simulation without a renderer and prints how the cloud collapses:
active-particle count, largest merged mass and frame time.

Usage:
    python -m tools.simulate                        # Classic preset
    python -m tools.simulate --preset tiny_cloud    # Named preset
    python -m tools.simulate --list                 # List presets
    python -m tools.simulate --preset-id 0          # Preset by menu index
    python -m tools.simulate --bodies 20k --backend grid --frames 500
    python -m tools.simulate --seed 42              # Reproducible cloud
"""

import argparse
import sys
import time

from config import protostar as config
from tools.presets import (
    PRESETS, get_preset_by_index, get_preset_config, parse_number,
    print_preset_menu, split_preset
)


def format_time(seconds: float, short: bool = False) -> str:
    """Format seconds as human-readable time.

    Args:
        seconds: Time in seconds
        short: If True, format for frame time (show ms for <1s)
    """
    if short and seconds < 1.0:
        return f"{seconds*1000:.0f}ms"
    if seconds < 90:
        return f"{seconds:.1f}s" if short else f"{seconds:.0f}s"
    elif seconds < 3600:
        return f"{seconds/60:.1f}m"
    else:
        return f"{seconds/3600:.1f}h"


def print_progress(stats: dict, total: int, frame_time: float, elapsed: float):
    """Print one progress line."""
    frame = stats["frame"]
    pct = frame / total * 100 if total else 100.0
    print(f"[Simulate] {pct:5.1f}% | Frame {frame:4d}/{total} | "
          f"Particles: {stats['active']:,} | Largest: {stats['largest_mass']:,} | "
          f"Time: {format_time(frame_time, short=True):>6s} | "
          f"Elapsed: {format_time(elapsed):>6s}")


def simulate(params: dict, total_frames: int, report_every: int = 10):
    """Run a simulation headless and return the final stats dict."""
    # Import here so --list does not trigger numba compilation
    from accretion import AccretionSimulation, SimulationParams

    sim = AccretionSimulation(SimulationParams.from_dict(params))
    start = time.perf_counter()
    initial = sim.active_count

    for _ in range(total_frames):
        frame_start = time.perf_counter()
        sim.update()
        frame_time = time.perf_counter() - frame_start

        if report_every and (sim.frame % report_every == 0 or sim.frame == total_frames):
            print_progress(sim.stats(), total_frames, frame_time, time.perf_counter() - start)

    stats = sim.stats()
    elapsed = time.perf_counter() - start
    print(f"[Simulate] Done: {initial:,} -> {stats['active']:,} particles in "
          f"{stats['frame']} frames ({format_time(elapsed)})")
    print(f"[Simulate] Largest body: {stats['largest_mass']:,} units | "
          f"Total mass: {stats['total_mass']:,} | KE: {stats['kinetic_energy']:.4g}")
    return stats


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Headless protostar accretion runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--list", action="store_true", help="List presets")
    parser.add_argument("--preset", type=str, help="Use preset by name (e.g., 'tiny_cloud')")
    parser.add_argument("--preset-id", type=int, help="Use preset by index number (see --list)")
    parser.add_argument("--bodies", "-n", type=str, help="Override particle count (e.g., 9000, 20k)")
    parser.add_argument("--frames", "-f", type=int, help="Override number of frames")
    parser.add_argument("--dt", type=float, help="Override time step")
    parser.add_argument("--seed", type=int, help="Seed the initial distribution")
    parser.add_argument("--backend", choices=["brute", "grid"], help="Collision backend")
    parser.add_argument("--report-every", type=int, default=config.RUN["report_every"],
                        help="Print progress every N frames (0 = summary only)")
    args = parser.parse_args(argv)

    if args.list:
        print_preset_menu()
        return 0

    if args.preset_id is not None:
        key, preset = get_preset_by_index(args.preset_id)
        if key is None:
            print(f"[Simulate] Invalid preset index: {args.preset_id}")
            return 2
        preset = get_preset_config(key)
        print(f"[Simulate] Using preset [{args.preset_id}]: {preset['name']}")
    elif args.preset:
        preset = get_preset_config(args.preset)
        if preset is None:
            print(f"[Simulate] Unknown preset: {args.preset}")
            print("[Simulate] Available presets:")
            for key in sorted(PRESETS.keys()):
                print(f"  - {key}")
            return 2
        print(f"[Simulate] Using preset: {preset['name']}")
    else:
        preset = {**config.PROTOSTAR, "total_frames": config.RUN["total_frames"]}

    params, run = split_preset(preset)
    total_frames = run.get("total_frames", config.RUN["total_frames"])

    # Apply overrides from command line
    if args.bodies:
        try:
            params["particle_count"] = parse_number(args.bodies)
        except ValueError:
            print(f"[Simulate] Invalid bodies value: {args.bodies}")
            return 2
        print(f"[Simulate] Override: {params['particle_count']:,} particles")

    if args.frames is not None:
        total_frames = args.frames
        print(f"[Simulate] Override: {total_frames} frames")

    if args.dt is not None:
        params["time_step"] = args.dt
        print(f"[Simulate] Override: dt={args.dt}")

    if args.seed is not None:
        params["seed"] = args.seed

    if args.backend:
        params["collision_backend"] = args.backend

    from accretion import InvalidConfigError

    try:
        simulate(params, total_frames, args.report_every)
    except InvalidConfigError as e:
        print(f"[Simulate] Error: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
