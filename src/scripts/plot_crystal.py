# src/scripts/plot_crystal.py
import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

SRC = Path(__file__).resolve().parents[1]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from snowflake_sim import EngineConfig, GrowthEngine, PRESETS, utils  # type: ignore[import]


def axial_to_plane(coords: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Map axial (x, y) lattice coordinates to hexagon centers in the plane."""
    q = coords[:, 0].astype(np.float64)
    r = coords[:, 1].astype(np.float64)
    px = q + 0.5 * r
    py = -r * np.sqrt(3.0) / 2.0
    return px, py


def format_title(meta, step):
    if not meta:
        return None
    parts = [
        f"N={meta.get('size', '?')}",
        f"step={step}",
        f"alpha={meta.get('alpha', float('nan')):.2f}",
        f"beta={meta.get('beta', float('nan')):.2f}",
        f"gamma={meta.get('gamma', float('nan')):.4f}",
    ]
    return " | ".join(parts)


def render(snapshot: utils.GrowthSnapshot, output=None, cmap="Blues", dpi=200):
    """
    Draw frozen cells as hexagons colored by accumulated vapor s.

    Args:
        snapshot: GrowthSnapshot taken from an engine
        output: Output file path (None to show interactively)
        cmap: Matplotlib colormap name
        dpi: DPI for output
    """
    coords = snapshot.frozen_coords()
    if len(coords) == 0:
        print("No frozen cells to render")
        return

    px, py = axial_to_plane(coords)
    values = snapshot.s[coords[:, 0], coords[:, 1]]

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.scatter(px, py, c=values, cmap=cmap, marker="h", s=40, edgecolors="none")
    ax.set_aspect("equal")
    ax.axis("off")
    title = format_title(snapshot.meta, snapshot.step)
    if title:
        ax.set_title(title, fontsize=9)

    if output is not None:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output, dpi=dpi, bbox_inches="tight")
        print(f"Saved {len(coords):,} frozen cells to {output}")
        plt.close(fig)
    else:
        plt.show()


def main():
    parser = argparse.ArgumentParser(description="Grow a crystal and plot it")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="compact")
    parser.add_argument("--steps", type=int, default=200, help="number of growth steps")
    parser.add_argument("--out", default=None, help="output image (shows window if omitted)")
    parser.add_argument("--cmap", default="Blues")
    args = parser.parse_args()

    engine = GrowthEngine(EngineConfig.from_preset(args.preset))
    engine.run(args.steps)
    render(engine.snapshot(), output=args.out, cmap=args.cmap)


if __name__ == "__main__":
    main()
