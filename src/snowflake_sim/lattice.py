from __future__ import annotations

from dataclasses import dataclass

import numpy as np


class OutOfBoundsError(IndexError):
    """Raised when a cell coordinate lies outside [0, N)."""


OutOfBounds = OutOfBoundsError


@dataclass(frozen=True)
class CellState:
    frozen: bool
    s: float


def make_margin_mask(size: int, margin: int) -> np.ndarray:
    """Boolean mask of cells within `margin` cells of any lattice edge."""
    idx = np.arange(size)
    edge = (idx < margin) | (idx >= size - margin)
    return edge[:, None] | edge[None, :]


class Lattice:
    """
    Per-cell storage for a square N x N grid, indexed ``[x, y]``.

    State buffers:
        frozen  permanently frozen flag
        s       accumulated vapor/water content
        u       diffusing vapor, rewritten on every step

    Step scratch (reused across steps, allocated with the state):
        u_next, s_next, frozen_next, receptive

    All buffers are C-contiguous so that ``*_flat`` attributes are views that
    the numba kernels can write through.
    """

    def __init__(self, size: int, margin: int) -> None:
        self.size = int(size)
        self.margin = int(margin)
        shape = (self.size, self.size)
        try:
            self.frozen = np.zeros(shape, dtype=bool)
            self.s = np.zeros(shape, dtype=np.float64)
            self.u = np.zeros(shape, dtype=np.float64)
            self.u_next = np.zeros(shape, dtype=np.float64)
            self.s_next = np.zeros(shape, dtype=np.float64)
            self.frozen_next = np.zeros(shape, dtype=bool)
            self.receptive = np.zeros(shape, dtype=bool)
            self.margin_mask = make_margin_mask(self.size, self.margin)
        except MemoryError as exc:
            raise MemoryError(
                f"Cannot allocate lattice buffers for a {self.size}x{self.size} grid"
            ) from exc

        self.frozen_flat = self.frozen.reshape(-1)
        self.s_flat = self.s.reshape(-1)
        self.u_flat = self.u.reshape(-1)
        self.u_next_flat = self.u_next.reshape(-1)
        self.s_next_flat = self.s_next.reshape(-1)
        self.frozen_next_flat = self.frozen_next.reshape(-1)
        self.receptive_flat = self.receptive.reshape(-1)
        self.margin_flat = self.margin_mask.reshape(-1)

    @property
    def center(self) -> tuple[int, int]:
        c = (self.size - 1) // 2
        return c, c

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(
                f"Cell ({x}, {y}) is outside the {self.size}x{self.size} lattice"
            )

    def is_margin(self, x: int, y: int) -> bool:
        self.check_bounds(x, y)
        return bool(self.margin_mask[x, y])

    def get_cell(self, x: int, y: int) -> CellState:
        self.check_bounds(x, y)
        return CellState(frozen=bool(self.frozen[x, y]), s=float(self.s[x, y]))

    def seed(self, beta: float) -> None:
        """Reset every cell to background vapor and freeze the center."""
        self.frozen.fill(False)
        self.s.fill(beta)
        self.u.fill(0.0)
        self.u[self.margin_mask] = beta
        self.u_next.fill(0.0)
        self.s_next.fill(0.0)
        self.frozen_next.fill(False)
        self.receptive.fill(False)

        cx, cy = self.center
        self.frozen[cx, cy] = True
        self.s[cx, cy] = 1.0

    def commit(self) -> None:
        """Publish the next-state buffers computed by the last step."""
        np.copyto(self.s, self.s_next)
        np.copyto(self.frozen, self.frozen_next)
        np.copyto(self.u, self.u_next)


__all__ = [
    "CellState",
    "Lattice",
    "OutOfBounds",
    "OutOfBoundsError",
    "make_margin_mask",
]
