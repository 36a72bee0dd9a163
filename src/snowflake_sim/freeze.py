from __future__ import annotations

import numpy as np
from numba import njit

from .lattice import Lattice

FREEZING_THRESHOLD = 1.0


@njit(cache=True)
def freeze_kernel(
    u_diffused: np.ndarray,
    s: np.ndarray,
    frozen: np.ndarray,
    receptive: np.ndarray,
    margin: np.ndarray,
    beta: float,
    gamma: float,
    threshold: float,
    s_next: np.ndarray,
    frozen_next: np.ndarray,
) -> int:
    """
    Compute next-step ``s`` and ``frozen`` from the pre-step snapshot.

    Receptive cells accumulate ``u + s + gamma``; everything else takes the
    diffused value. Only the ``*_next`` buffers are written, so a cell that
    freezes here is invisible to every other cell until the commit.

    Returns the number of cells that crossed `threshold` this step.
    """
    newly_frozen = 0
    for i in range(s.shape[0]):
        if margin[i]:
            s_next[i] = beta
            frozen_next[i] = False
        elif receptive[i]:
            value = u_diffused[i] + s[i] + gamma
            s_next[i] = value
            if frozen[i]:
                frozen_next[i] = True
            elif value >= threshold:
                frozen_next[i] = True
                newly_frozen += 1
            else:
                frozen_next[i] = False
        else:
            s_next[i] = u_diffused[i]
            frozen_next[i] = frozen[i]
    return newly_frozen


def update(lattice: Lattice, beta: float, gamma: float) -> int:
    """Evaluate the freezing rule into the next-state buffers (no commit)."""
    return freeze_kernel(
        lattice.u_next_flat,
        lattice.s_flat,
        lattice.frozen_flat,
        lattice.receptive_flat,
        lattice.margin_flat,
        float(beta),
        float(gamma),
        FREEZING_THRESHOLD,
        lattice.s_next_flat,
        lattice.frozen_next_flat,
    )


__all__ = ["FREEZING_THRESHOLD", "freeze_kernel", "update"]
