from __future__ import annotations

import copy
import enum
import math
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from . import utils
from .topology import TOPOLOGIES


class Parameter(str, enum.Enum):
    ALPHA = "alpha"
    BETA = "beta"
    GAMMA = "gamma"

    @classmethod
    def parse(cls, which: "Parameter | str") -> "Parameter":
        if isinstance(which, cls):
            return which
        try:
            return cls(str(which).lower())
        except ValueError:
            names = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown parameter '{which}', expected one of {names}") from None


@dataclass
class ParameterSpec:
    """A tunable scalar with a closed range and a button step."""

    value: float
    minimum: float
    maximum: float
    step: float

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError(
                f"Parameter range is empty: min={self.minimum} > max={self.maximum}"
            )
        if self.step <= 0.0:
            raise ValueError(f"Parameter step must be positive, got {self.step}")
        if not math.isfinite(self.value):
            raise ValueError(f"Parameter value must be finite, got {self.value}")
        self.value = self.clamp(self.value)

    def clamp(self, value: float) -> float:
        return min(max(float(value), self.minimum), self.maximum)


def default_alpha() -> ParameterSpec:
    return ParameterSpec(value=1.0, minimum=0.0, maximum=2.0, step=0.1)


def default_beta() -> ParameterSpec:
    return ParameterSpec(value=0.4, minimum=0.0, maximum=1.0, step=0.05)


def default_gamma() -> ParameterSpec:
    return ParameterSpec(value=0.001, minimum=0.0, maximum=0.1, step=0.001)


_DEFAULTS = {
    Parameter.ALPHA: default_alpha,
    Parameter.BETA: default_beta,
    Parameter.GAMMA: default_gamma,
}


@dataclass
class EngineConfig:
    """Geometry, growth constants and reporting for one engine."""

    size: int = 64
    margin: int = 1
    alpha: ParameterSpec = field(default_factory=default_alpha)
    beta: ParameterSpec = field(default_factory=default_beta)
    gamma: ParameterSpec = field(default_factory=default_gamma)
    topology: str = "hex"
    verbose: bool = False

    def __post_init__(self) -> None:
        validate_geometry(self.size, self.margin)
        if self.topology not in TOPOLOGIES:
            raise ValueError(
                f"Unknown topology '{self.topology}', expected one of {sorted(TOPOLOGIES)}"
            )

    def spec(self, which: Parameter | str) -> ParameterSpec:
        return getattr(self, Parameter.parse(which).value)

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "EngineConfig":
        if name not in PRESETS:
            raise KeyError(f"Unknown preset '{name}', expected one of {sorted(PRESETS)}")
        data = copy.deepcopy(PRESETS[name])
        data.update(overrides)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> "EngineConfig":
        """
        Build a config from a flat mapping.

        A ``preset`` key selects the base values. Each of ``alpha``, ``beta``
        and ``gamma`` is either a number (initial value, default bounds) or a
        mapping with any of ``value``, ``min``, ``max`` and ``step``.
        """
        params = dict(params)
        preset = params.pop("preset", None)
        if preset is not None:
            if preset not in PRESETS:
                raise KeyError(f"Unknown preset '{preset}', expected one of {sorted(PRESETS)}")
            base = copy.deepcopy(PRESETS[preset])
            base.update(params)
            params = base

        kwargs: Dict[str, Any] = {}
        for key in ("size", "margin"):
            if key in params:
                kwargs[key] = int(params[key])
        if "topology" in params:
            kwargs["topology"] = str(params["topology"])
        if "verbose" in params:
            kwargs["verbose"] = bool(params["verbose"])
        for which in Parameter:
            if which.value in params:
                kwargs[which.value] = _parse_spec(which, params[which.value])
        return cls(**kwargs)


def _parse_spec(which: Parameter, raw: Any) -> ParameterSpec:
    spec = _DEFAULTS[which]()
    if isinstance(raw, Mapping):
        return ParameterSpec(
            value=float(raw.get("value", spec.value)),
            minimum=float(raw.get("min", spec.minimum)),
            maximum=float(raw.get("max", spec.maximum)),
            step=float(raw.get("step", spec.step)),
        )
    return ParameterSpec(
        value=float(raw), minimum=spec.minimum, maximum=spec.maximum, step=spec.step
    )


def validate_geometry(size: int, margin: int) -> None:
    if margin < 1:
        raise ValueError(f"Margin must be at least 1 cell, got {margin}")
    if size < 2 * margin + 1:
        raise ValueError(
            f"Lattice size {size} leaves no interior inside a margin of {margin}"
        )


# Tuned variants of the device app, unified as configurations of one engine.
PRESETS: Dict[str, Dict[str, Any]] = {
    "classic": {"size": 64, "margin": 2, "alpha": 1.0, "beta": 0.4, "gamma": 0.001},
    "dendrite": {"size": 64, "margin": 1, "alpha": 1.0, "beta": 0.35, "gamma": 0.0005},
    "plate": {"size": 48, "margin": 2, "alpha": 1.0, "beta": 0.8, "gamma": 0.002},
    "compact": {"size": 32, "margin": 1, "alpha": 1.0, "beta": 0.6, "gamma": 0.01},
    "tiny": {"size": 16, "margin": 1, "alpha": 2.0, "beta": 0.6, "gamma": 0.05},
}


def load_config(path: str | os.PathLike[str]) -> EngineConfig:
    """Read a JSON/TOML parameter file into an EngineConfig."""
    return EngineConfig.from_dict(utils.load_params(path))


__all__ = [
    "EngineConfig",
    "PRESETS",
    "Parameter",
    "ParameterSpec",
    "load_config",
    "validate_geometry",
]
