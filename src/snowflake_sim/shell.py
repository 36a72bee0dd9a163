"""
Line-oriented command shell around a GrowthEngine.

Commands follow the buttons of the handheld app:
    ok / grow      advance one step
    left / reset   reseed the crystal
    right / select cycle the selected parameter (alpha -> beta -> gamma)
    up / down      nudge the selected parameter by one step
    back / quit    exit

The selected parameter lives here, not in the engine.
"""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, List, TextIO

from .config import EngineConfig, Parameter, PRESETS, load_config
from .engine import GrowthEngine

FROZEN_CHAR = "*"
VAPOR_CHAR = "."
MARGIN_CHAR = " "

_CYCLE: List[Parameter] = [Parameter.ALPHA, Parameter.BETA, Parameter.GAMMA]


def render_text(engine: GrowthEngine) -> str:
    """Render rows of the lattice (row = y) followed by a status line."""
    lattice = engine.lattice
    rows = []
    for y in range(engine.size):
        chars = []
        for x in range(engine.size):
            if lattice.frozen[x, y]:
                chars.append(FROZEN_CHAR)
            elif lattice.margin_mask[x, y]:
                chars.append(MARGIN_CHAR)
            else:
                chars.append(VAPOR_CHAR)
        rows.append("".join(chars))
    params = engine.parameters()
    rows.append(
        f"step={engine.step_count} frozen={engine.frozen_count()} "
        f"alpha={params['alpha']:.3f} beta={params['beta']:.3f} gamma={params['gamma']:.4f}"
    )
    return "\n".join(rows)


class SnowflakeShell:
    def __init__(self, engine: GrowthEngine, out: TextIO | None = None) -> None:
        self.engine = engine
        self.out = out if out is not None else sys.stdout
        self.selected = Parameter.ALPHA
        self.last_frozen = 0

    def emit(self, text: str) -> None:
        print(text, file=self.out)

    def handle(self, command: str) -> bool:
        """Dispatch one command; return False when the shell should exit."""
        cmd = command.strip().lower()
        if not cmd:
            return True
        if cmd in ("back", "quit", "exit"):
            return False
        if cmd in ("ok", "grow"):
            self.last_frozen = self.engine.step()
            if self.last_frozen == 0:
                self.emit("Snowflake growth stalled this step")
            self.emit(render_text(self.engine))
        elif cmd in ("left", "reset"):
            self.engine.reset()
            self.last_frozen = 0
            self.emit(render_text(self.engine))
        elif cmd in ("right", "select"):
            idx = (_CYCLE.index(self.selected) + 1) % len(_CYCLE)
            self.selected = _CYCLE[idx]
            self.emit(f"selected {self.selected.value}")
        elif cmd in ("up", "down"):
            direction = 1 if cmd == "up" else -1
            value = self.engine.nudge_parameter(self.selected, direction)
            self.emit(f"{self.selected.value} = {value:.4f}")
        else:
            self.emit(
                f"Unknown command '{cmd}' (ok, left, right, up, down, back)"
            )
        return True

    def run(self, lines: Iterable[str]) -> int:
        """Feed commands until input ends or a quit command; return commands handled."""
        handled = 0
        for line in lines:
            handled += 1
            if not self.handle(line):
                break
        return handled


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive snow-crystal growth shell")
    parser.add_argument(
        "--preset", choices=sorted(PRESETS), default="tiny", help="engine preset"
    )
    parser.add_argument(
        "--config", default=None, help="JSON/TOML parameter file (overrides --preset)"
    )
    parser.add_argument("--verbose", action="store_true", help="print engine progress")
    args = parser.parse_args(argv)

    if args.config is not None:
        config = load_config(args.config)
    else:
        config = EngineConfig.from_preset(args.preset)
    config.verbose = config.verbose or args.verbose

    engine = GrowthEngine(config)
    shell = SnowflakeShell(engine)
    shell.emit(render_text(engine))
    shell.run(sys.stdin)
    return 0


__all__ = ["SnowflakeShell", "main", "render_text"]
