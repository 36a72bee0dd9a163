"""
Command-driven Reiter snow-crystal growth engine.

This module ties the lattice, topology and per-step kernels together. One
call to :meth:`GrowthEngine.step` performs exactly one growth step:

1.  **Classify:** mark frozen cells and their unfrozen, non-margin neighbors
    as receptive, using the frozen set as it stood before the step.
2.  **Diffuse:** zero ``u`` on receptive cells, copy ``s`` elsewhere, and relax
    the field toward the neighbor mean; the margin is pinned at ``beta``.
3.  **Freeze:** receptive cells accumulate ``u + s + gamma`` and freeze at 1.0;
    other cells take the diffused value. Results go to next-state buffers.
4.  **Commit:** the next-state buffers replace ``s``, ``frozen`` and ``u``.

Nothing advances on its own; the caller drives every step.
"""

from __future__ import annotations

import copy
import math
from typing import Dict, List

import numpy as np

from . import classifier, diffusion, freeze, utils
from .config import EngineConfig, Parameter, validate_geometry
from .lattice import CellState, Lattice
from .topology import get_topology


class GrowthEngine:
    """
    The owned simulation state.

    Responsibilities:
    1. Allocate the lattice and the neighbor table as a unit.
    2. Hold the clamped growth constants.
    3. Run the classify / diffuse / freeze / commit pipeline.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = copy.deepcopy(config) if config is not None else EngineConfig()
        self.topology = get_topology(self.config.topology)
        self.step_count = 0
        self._allocate(self.config.size)
        self.reset()

    def _allocate(self, size: int) -> None:
        lattice = Lattice(size, self.config.margin)
        neighbors = self.topology.neighbor_table(size)
        self.lattice = lattice
        self.neighbors = neighbors

    # ------------------------------------------------------------------ geometry
    @property
    def size(self) -> int:
        return self.lattice.size

    @property
    def margin(self) -> int:
        return self.lattice.margin

    @property
    def center(self) -> tuple[int, int]:
        return self.lattice.center

    # ------------------------------------------------------------------ lifecycle
    def reset(self) -> None:
        """Return to the single-seed state; parameters are left untouched."""
        self.lattice.seed(self.config.beta.value)
        self.step_count = 0
        if self.config.verbose:
            cx, cy = self.center
            print(
                f"Reset {self.size}x{self.size} lattice (margin={self.margin}), "
                f"seed at ({cx}, {cy})"
            )

    def resize(self, size: int) -> None:
        """Reallocate every buffer for a new lattice side and reseed."""
        validate_geometry(size, self.margin)
        self._allocate(size)
        self.config.size = size
        self.reset()

    def step(self) -> int:
        """Advance one growth step; return the number of newly frozen cells."""
        lattice = self.lattice
        alpha = self.config.alpha.value
        beta = self.config.beta.value
        gamma = self.config.gamma.value

        classifier.classify(lattice, self.neighbors)
        diffusion.diffuse(lattice, self.neighbors, alpha, beta)
        newly_frozen = int(freeze.update(lattice, beta, gamma))
        lattice.commit()
        self.step_count += 1

        if self.config.verbose:
            if newly_frozen > 0:
                print(f"Step {self.step_count} complete: froze {newly_frozen} cells")
            else:
                print(f"Step {self.step_count}: no cells frozen, growth may have stalled")
        return newly_frozen

    def run(self, num_steps: int) -> List[int]:
        """Issue `num_steps` consecutive step commands."""
        return [self.step() for _ in range(num_steps)]

    # ------------------------------------------------------------------ parameters
    def set_parameter(self, which: Parameter | str, delta: float) -> float:
        """
        Add `delta` to a growth constant, clamped to its range.

        Takes effect from the next step. Returns the new value. A non-finite
        `delta` leaves the parameter unchanged.
        """
        spec = self.config.spec(which)
        if not math.isfinite(delta):
            return spec.value
        spec.value = spec.clamp(spec.value + float(delta))
        return spec.value

    def nudge_parameter(self, which: Parameter | str, direction: int = 1) -> float:
        """Move a parameter by `direction` whole adjustment steps."""
        spec = self.config.spec(which)
        return self.set_parameter(which, direction * spec.step)

    def parameters(self) -> Dict[str, float]:
        return {p.value: self.config.spec(p).value for p in Parameter}

    # ------------------------------------------------------------------ queries
    def get_cell(self, x: int, y: int) -> CellState:
        return self.lattice.get_cell(x, y)

    def frozen_count(self) -> int:
        return int(np.count_nonzero(self.lattice.frozen))

    def margin_mask(self) -> np.ndarray:
        view = self.lattice.margin_mask.view()
        view.flags.writeable = False
        return view

    def receptive_mask(self) -> np.ndarray:
        """Receptive set used by the most recent step (all False after reset)."""
        view = self.lattice.receptive.view()
        view.flags.writeable = False
        return view

    def snapshot(self) -> utils.GrowthSnapshot:
        meta = {
            "model": "reiter",
            "size": self.size,
            "margin": self.margin,
            "topology": self.topology.name,
            "center": self.center,
        }
        meta.update(self.parameters())
        return utils.GrowthSnapshot(
            frozen=self.lattice.frozen.copy(),
            s=self.lattice.s.copy(),
            step=self.step_count,
            meta=meta,
        )


__all__ = ["GrowthEngine"]
