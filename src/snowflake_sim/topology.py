"""
Hexagonal neighbor topologies on a square lattice.

The growth kernels never call into a topology per cell. Instead the topology
is compiled once into a flat neighbor-index table of shape (N*N, 6), where
entry ``[i, k]`` is the flat index of the k-th neighbor of cell ``i`` or -1
when that candidate falls outside the grid.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

# 0, 60, 120, 180, 240, 300 degrees in axial coordinates
HEX_DIRECTIONS = np.array(
    [
        [1, 0],
        [1, -1],
        [0, -1],
        [-1, 0],
        [-1, 1],
        [0, 1],
    ],
    dtype=np.int64,
)

# odd-q offset layout: odd columns sit half a cell lower
ODDQ_EVEN_COLUMN = np.array(
    [[1, 0], [1, -1], [0, -1], [-1, -1], [-1, 0], [0, 1]], dtype=np.int64
)
ODDQ_ODD_COLUMN = np.array(
    [[1, 1], [1, 0], [0, -1], [-1, 0], [-1, 1], [0, 1]], dtype=np.int64
)

NO_NEIGHBOR = -1


def flat_index(x: int, y: int, size: int) -> int:
    return x * size + y


class HexTopology:
    """Fixed axial offsets, independent of grid position."""

    name = "hex"

    def directions(self, x: int, y: int) -> np.ndarray:
        return HEX_DIRECTIONS

    def neighbors(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Return the six candidate neighbors of (x, y).

        Candidates are not bounds-checked; callers filter against [0, N).
        """
        return [(x + int(dx), y + int(dy)) for dx, dy in self.directions(x, y)]

    def offset_grid(self, size: int) -> np.ndarray:
        """Per-cell direction offsets, shape (size, size, 6, 2)."""
        return np.broadcast_to(HEX_DIRECTIONS, (size, size, 6, 2))

    def neighbor_table(self, size: int) -> np.ndarray:
        """Build the (size*size, 6) flat neighbor-index table."""
        xs, ys = np.indices((size, size), dtype=np.int64)
        offsets = self.offset_grid(size)
        nx = xs[..., None] + offsets[..., 0]
        ny = ys[..., None] + offsets[..., 1]
        valid = (nx >= 0) & (nx < size) & (ny >= 0) & (ny < size)
        table = np.where(valid, nx * size + ny, NO_NEIGHBOR)
        return table.reshape(size * size, 6).astype(np.int64)


class OddQTopology(HexTopology):
    """Parity-dependent offsets matching a pixel layout with shifted odd columns."""

    name = "odd-q"

    def directions(self, x: int, y: int) -> np.ndarray:
        return ODDQ_ODD_COLUMN if x & 1 else ODDQ_EVEN_COLUMN

    def offset_grid(self, size: int) -> np.ndarray:
        odd = (np.arange(size) & 1).astype(bool)[:, None, None, None]
        offsets = np.where(odd, ODDQ_ODD_COLUMN, ODDQ_EVEN_COLUMN)
        return np.broadcast_to(offsets, (size, size, 6, 2))


TOPOLOGIES = {
    HexTopology.name: HexTopology,
    OddQTopology.name: OddQTopology,
}


def get_topology(name: str) -> HexTopology:
    try:
        return TOPOLOGIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown topology '{name}', expected one of {sorted(TOPOLOGIES)}"
        ) from None


__all__ = [
    "HEX_DIRECTIONS",
    "NO_NEIGHBOR",
    "HexTopology",
    "OddQTopology",
    "flat_index",
    "get_topology",
]
