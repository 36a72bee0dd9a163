"""
Receptive-cell classification.

A cell is receptive when it is frozen, or when it is a boundary cell: not
frozen, not in the margin, and adjacent (in-bounds) to at least one frozen
cell. Classification reads only the pre-step frozen set.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from .lattice import Lattice
from .topology import HexTopology


@njit(cache=True)
def classify_kernel(
    frozen: np.ndarray,
    margin: np.ndarray,
    neighbors: np.ndarray,
    receptive: np.ndarray,
) -> int:
    """
    Fill `receptive` from the flat `frozen` snapshot.

    Returns the number of boundary cells found.
    """
    n_boundary = 0
    for i in range(frozen.shape[0]):
        if frozen[i]:
            receptive[i] = True
            continue
        if margin[i]:
            receptive[i] = False
            continue
        touching = False
        for k in range(neighbors.shape[1]):
            j = neighbors[i, k]
            if j >= 0 and frozen[j]:
                touching = True
                break
        receptive[i] = touching
        if touching:
            n_boundary += 1
    return n_boundary


def classify(lattice: Lattice, neighbors: np.ndarray) -> int:
    """Write the receptive mask of `lattice` in place; return the boundary count."""
    return classify_kernel(
        lattice.frozen_flat, lattice.margin_flat, neighbors, lattice.receptive_flat
    )


def is_boundary(lattice: Lattice, topology: HexTopology, x: int, y: int) -> bool:
    lattice.check_bounds(x, y)
    if lattice.frozen[x, y] or lattice.margin_mask[x, y]:
        return False
    for nx, ny in topology.neighbors(x, y):
        if lattice.in_bounds(nx, ny) and lattice.frozen[nx, ny]:
            return True
    return False


def is_receptive(lattice: Lattice, topology: HexTopology, x: int, y: int) -> bool:
    lattice.check_bounds(x, y)
    return bool(lattice.frozen[x, y]) or is_boundary(lattice, topology, x, y)


__all__ = ["classify", "classify_kernel", "is_boundary", "is_receptive"]
