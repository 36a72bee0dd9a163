"""
Explicit relaxation of the vapor field.

Each step first rebuilds the transient field ``u`` (zero on receptive cells,
``s`` elsewhere), then relaxes every non-margin cell toward the mean of its
in-bounds neighbors:

    u_new = u + (alpha / 2) * (mean(u[neighbors]) - u)

Every read comes from ``u`` and every write goes to ``u_next``, so the result
does not depend on scan order. Margin cells are pinned to ``beta``.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from .lattice import Lattice


@njit(cache=True)
def prepare_kernel(s: np.ndarray, receptive: np.ndarray, u: np.ndarray) -> None:
    for i in range(s.shape[0]):
        if receptive[i]:
            u[i] = 0.0
        else:
            u[i] = s[i]


@njit(cache=True)
def diffuse_kernel(
    u: np.ndarray,
    margin: np.ndarray,
    neighbors: np.ndarray,
    alpha: float,
    beta: float,
    u_next: np.ndarray,
) -> None:
    half_alpha = 0.5 * alpha
    for i in range(u.shape[0]):
        if margin[i]:
            u_next[i] = beta
            continue
        total = 0.0
        count = 0
        for k in range(neighbors.shape[1]):
            j = neighbors[i, k]
            if j >= 0:
                total += u[j]
                count += 1
        if count == 0:
            # isolated cell: no diffusion this step
            u_next[i] = u[i]
        else:
            u_next[i] = u[i] + half_alpha * (total / count - u[i])


def diffuse(lattice: Lattice, neighbors: np.ndarray, alpha: float, beta: float) -> None:
    """Run one diffusion step; the relaxed field lands in ``lattice.u_next``."""
    prepare_kernel(lattice.s_flat, lattice.receptive_flat, lattice.u_flat)
    diffuse_kernel(
        lattice.u_flat,
        lattice.margin_flat,
        neighbors,
        float(alpha),
        float(beta),
        lattice.u_next_flat,
    )


__all__ = ["diffuse", "diffuse_kernel", "prepare_kernel"]
