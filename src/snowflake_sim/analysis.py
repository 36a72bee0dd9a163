"""
Shape measurements for a grown crystal.

1. Radius of gyration of the frozen set.
2. Mass-radius dimension: M(<R) ~ R^D fitted on log-log axes.
3. Arm extent along each of the six lattice directions.
"""
from __future__ import annotations

from typing import List, Tuple

import numpy as np
from scipy.stats import linregress

from .topology import HexTopology


def radius_of_gyration(frozen: np.ndarray) -> float:
    coords = np.argwhere(frozen).astype(np.float64)
    if len(coords) == 0:
        raise ValueError("Crystal has no frozen cells.")
    centroid = coords.mean(axis=0)
    return float(np.sqrt(np.mean(np.sum((coords - centroid) ** 2, axis=1))))


def mass_radius_dimension(
    frozen: np.ndarray, center: Tuple[int, int]
) -> tuple[float, float]:
    """
    Estimate the mass-radius dimension of the frozen set.

    Counts frozen cells within each integer radius from 1 to the crystal's
    extent and fits ``log M = D log R + C``.

    Returns:
        Tuple of (D, r_squared)

    Raises:
        ValueError: If fewer than three radii are available for the fit
    """
    coords = np.argwhere(frozen).astype(np.float64)
    offsets = coords - np.asarray(center, dtype=np.float64)
    distances = np.sqrt(np.sum(offsets**2, axis=1))
    max_distance = float(distances.max()) if len(distances) else 0.0

    radii = np.arange(1, int(np.floor(max_distance)) + 1, dtype=np.float64)
    if len(radii) < 3:
        raise ValueError(
            f"Crystal extent ({max_distance:.2f} cells) is too small for a "
            "mass-radius fit; need at least 3 radii."
        )
    masses = np.array([np.count_nonzero(distances <= r) for r in radii], dtype=np.float64)

    result = linregress(np.log(radii), np.log(masses))
    return float(result.slope), float(result.rvalue**2)


def arm_extent(
    frozen: np.ndarray, center: Tuple[int, int], topology: HexTopology | None = None
) -> List[int]:
    """Frozen cells reached walking straight out of `center` in each direction."""
    topology = topology or HexTopology()
    size = frozen.shape[0]
    extents = []
    for k in range(6):
        x, y = center
        length = 0
        while True:
            dx, dy = topology.directions(x, y)[k]
            x, y = x + int(dx), y + int(dy)
            if not (0 <= x < size and 0 <= y < size) or not frozen[x, y]:
                break
            length += 1
        extents.append(length)
    return extents


__all__ = ["arm_extent", "mass_radius_dimension", "radius_of_gyration"]
