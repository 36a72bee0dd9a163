"""
Snowflake Simulation Library - Reiter Growth Engine

This package provides a step-driven snow-crystal growth model:
- GrowthEngine: owned lattice state plus the classify/diffuse/freeze pipeline
- EngineConfig: lattice geometry and clamped growth constants (alpha, beta, gamma)
- HexTopology / OddQTopology: six-neighbor layouts on a square grid
"""

from .config import EngineConfig, Parameter, ParameterSpec, PRESETS, load_config
from .engine import GrowthEngine
from .lattice import CellState, Lattice, OutOfBounds, OutOfBoundsError
from .topology import HexTopology, OddQTopology
from . import analysis, utils

__all__ = [
    # Engine
    "GrowthEngine",
    "Lattice",
    "CellState",
    # Configuration classes
    "EngineConfig",
    "Parameter",
    "ParameterSpec",
    "PRESETS",
    "load_config",
    # Topologies
    "HexTopology",
    "OddQTopology",
    # Errors
    "OutOfBounds",
    "OutOfBoundsError",
    # Utilities
    "analysis",
    "utils",
]
