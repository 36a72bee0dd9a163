#!/usr/bin/env python3
"""
Batch Growth Runner

Builds an engine from a preset or a parameter file, issues a fixed number of
step commands and reports the result. Optionally renders the crystal.
"""

import argparse
import sys
import time
from pathlib import Path

SRC = Path(__file__).resolve().parents[1]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from snowflake_sim import EngineConfig, GrowthEngine, PRESETS, analysis, load_config, utils


def main():
    parser = argparse.ArgumentParser(
        description="Run a fixed number of snow-crystal growth steps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="classic",
        help="Engine preset (default: classic)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON/TOML parameter file; takes precedence over --preset",
    )
    parser.add_argument(
        "--steps",
        type=int,
        required=True,
        help="Number of growth steps to run",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Save a PNG of the crystal (auto-named if 'auto')",
    )
    parser.add_argument("--verbose", action="store_true", help="Print every step")

    args = parser.parse_args()

    config = load_config(args.config) if args.config else EngineConfig.from_preset(args.preset)
    config.verbose = config.verbose or args.verbose
    engine = GrowthEngine(config)

    print(f"Running growth: N={engine.size}, margin={engine.margin}, steps={args.steps}")
    start_time = time.time()
    counts = engine.run(args.steps)
    elapsed_time = time.time() - start_time

    stalled = sum(1 for c in counts if c == 0)
    snapshot = engine.snapshot()

    print(f"\nGrowth completed in {elapsed_time:.2f} seconds")
    print(f"   Frozen cells: {engine.frozen_count()}")
    print(f"   Steps without growth: {stalled}/{args.steps}")
    print(f"   Radius of gyration: {analysis.radius_of_gyration(snapshot.frozen):.2f}")
    print(f"   Arm extents: {analysis.arm_extent(snapshot.frozen, engine.center, engine.topology)}")

    if args.plot is not None:
        import plot_crystal

        out = args.plot
        if out == "auto":
            out = str(Path("results") / f"crystal_N{engine.size}_T{args.steps}_{utils.now_str()}.png")
        plot_crystal.render(snapshot, output=out)

    return 0


if __name__ == "__main__":
    sys.exit(main())
