# src/snowflake_sim/utils.py
from __future__ import annotations

import json
import os
import time
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import numpy as np


@dataclass
class GrowthSnapshot:
    """Detached copy of an engine's observable state."""

    frozen: np.ndarray
    s: np.ndarray
    step: int = 0
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def frozen_count(self) -> int:
        return int(np.count_nonzero(self.frozen))

    def frozen_coords(self) -> np.ndarray:
        """Return an (M, 2) integer array of frozen (x, y) coordinates."""
        return np.argwhere(self.frozen)


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load engine parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")
