"""
Tests for the step-driven growth engine.
"""

import numpy as np
import pytest

from snowflake_sim import (
    EngineConfig,
    GrowthEngine,
    OutOfBounds,
    Parameter,
    ParameterSpec,
)


def scenario_config(**kwargs):
    """N=5, M=1, alpha=2.0, beta=0.6, gamma=0.05."""
    return EngineConfig(
        size=5,
        margin=1,
        alpha=ParameterSpec(value=2.0, minimum=0.0, maximum=2.0, step=0.1),
        beta=ParameterSpec(value=0.6, minimum=0.0, maximum=1.0, step=0.05),
        gamma=ParameterSpec(value=0.05, minimum=0.0, maximum=0.1, step=0.001),
        **kwargs,
    )


SEED_NEIGHBORS = [(3, 2), (3, 1), (2, 1), (1, 2), (1, 3), (2, 3)]


def test_scenario_after_reset():
    engine = GrowthEngine(scenario_config())
    assert engine.center == (2, 2)
    assert engine.frozen_count() == 1
    center = engine.get_cell(2, 2)
    assert center.frozen and center.s == 1.0

    for x in range(5):
        for y in range(5):
            if (x, y) == (2, 2):
                continue
            cell = engine.get_cell(x, y)
            assert not cell.frozen
            assert cell.s == pytest.approx(0.6)
            if x in (0, 4) or y in (0, 4):
                assert engine.lattice.u[x, y] == pytest.approx(0.6)
            else:
                assert engine.lattice.u[x, y] == 0.0


def test_scenario_first_step_freezes_nothing():
    """Six seed neighbors become receptive but none reaches 1.0 in one step."""
    engine = GrowthEngine(scenario_config())
    assert engine.step() == 0
    assert engine.frozen_count() == 1
    assert engine.step_count == 1

    receptive = engine.receptive_mask()
    assert receptive[2, 2]
    for x, y in SEED_NEIGHBORS:
        assert receptive[x, y]
        # u = 0 + (2.0 / 2) * (1.8 / 6) ; s = u + 0.6 + 0.05
        assert engine.get_cell(x, y).s == pytest.approx(0.95)
    assert np.count_nonzero(receptive) == 7


def test_scenario_accumulation_crosses_threshold():
    engine = GrowthEngine(scenario_config())
    engine.step()
    newly = engine.step()
    assert newly == 6
    assert engine.frozen_count() == 7
    for x, y in SEED_NEIGHBORS:
        assert engine.get_cell(x, y).frozen


def test_growth_eventually_freezes_cells():
    engine = GrowthEngine(EngineConfig.from_preset("tiny"))
    counts = engine.run(40)
    assert len(counts) == 40
    assert sum(counts) > 0
    assert engine.frozen_count() == 1 + sum(counts)


def test_monotone_freezing_and_margin_invariance():
    engine = GrowthEngine(EngineConfig.from_preset("compact"))
    beta = engine.parameters()["beta"]
    margin = engine.margin_mask()
    previous = engine.lattice.frozen.copy()
    for _ in range(60):
        before = engine.frozen_count()
        engine.step()
        current = engine.lattice.frozen.copy()
        assert engine.frozen_count() >= before
        assert not np.any(previous & ~current), "a frozen cell thawed"
        assert not current[margin].any()
        assert np.all(engine.lattice.s[margin] == beta)
        previous = current


def test_determinism():
    a = GrowthEngine(EngineConfig.from_preset("compact"))
    b = GrowthEngine(EngineConfig.from_preset("compact"))
    for _ in range(30):
        assert a.step() == b.step()
        assert np.array_equal(a.lattice.frozen, b.lattice.frozen)
        assert np.array_equal(a.lattice.s, b.lattice.s)
    assert a.get_cell(10, 12) == b.get_cell(10, 12)


def test_reset_idempotence():
    engine = GrowthEngine(EngineConfig.from_preset("tiny"))
    engine.run(25)
    engine.set_parameter("gamma", -0.01)
    engine.reset()
    engine.reset()

    beta = engine.parameters()["beta"]
    assert engine.step_count == 0
    assert engine.frozen_count() == 1
    cx, cy = engine.center
    assert engine.get_cell(cx, cy).s == 1.0

    interior = ~engine.margin_mask()
    interior[cx, cy] = False
    assert np.all(engine.lattice.s[interior] == beta)
    assert np.all(engine.lattice.u[interior] == 0.0)
    assert not engine.lattice.frozen[interior].any()
    # reset keeps the adjusted parameter
    assert engine.parameters()["gamma"] == pytest.approx(0.04)


def test_stall_is_not_failure():
    """With no vapor anywhere, nothing can ever freeze."""
    config = EngineConfig(
        size=9,
        margin=1,
        beta=ParameterSpec(value=0.0, minimum=0.0, maximum=1.0, step=0.05),
        gamma=ParameterSpec(value=0.0, minimum=0.0, maximum=0.1, step=0.001),
    )
    engine = GrowthEngine(config)
    for _ in range(10):
        assert engine.step() == 0
    assert engine.frozen_count() == 1
    assert engine.step_count == 10


def test_set_parameter_clamps():
    engine = GrowthEngine(scenario_config())
    assert engine.set_parameter("alpha", 100.0) == 2.0
    assert engine.set_parameter(Parameter.ALPHA, -100.0) == 0.0
    assert engine.set_parameter("beta", 0.1) == pytest.approx(0.7)
    assert engine.parameters() == {"alpha": 0.0, "beta": pytest.approx(0.7), "gamma": 0.05}
    with pytest.raises(ValueError):
        engine.set_parameter("delta", 1.0)


def test_nudge_parameter_uses_step():
    engine = GrowthEngine(scenario_config())
    assert engine.nudge_parameter("gamma", 1) == pytest.approx(0.051)
    assert engine.nudge_parameter("gamma", -2) == pytest.approx(0.049)
    assert engine.nudge_parameter("alpha", 1) == 2.0


def test_parameter_change_is_not_retroactive():
    engine = GrowthEngine(scenario_config())
    engine.step()
    s_before = engine.lattice.s.copy()
    u_before = engine.lattice.u.copy()
    engine.set_parameter("beta", -0.2)
    assert np.array_equal(engine.lattice.s, s_before)
    assert np.array_equal(engine.lattice.u, u_before)

    engine.step()
    margin = engine.margin_mask()
    assert np.allclose(engine.lattice.s[margin], 0.4)


@pytest.mark.parametrize("x, y", [(-1, 0), (5, 0), (0, 5), (2, -3)])
def test_get_cell_out_of_bounds(x, y):
    engine = GrowthEngine(scenario_config())
    with pytest.raises(OutOfBounds):
        engine.get_cell(x, y)


def test_resize_reallocates_and_resets():
    engine = GrowthEngine(scenario_config())
    engine.run(3)
    engine.resize(16)
    assert engine.size == 16
    assert engine.lattice.frozen.shape == (16, 16)
    assert engine.neighbors.shape == (256, 6)
    assert engine.center == (7, 7)
    assert engine.frozen_count() == 1
    assert engine.step_count == 0
    assert engine.parameters()["alpha"] == 2.0


def test_resize_rejects_bad_geometry():
    engine = GrowthEngine(scenario_config())
    with pytest.raises(ValueError):
        engine.resize(2)
    assert engine.size == 5
    assert engine.frozen_count() == 1


def test_invalid_config_fails_construction():
    with pytest.raises(ValueError):
        GrowthEngine(EngineConfig(size=2, margin=1))


def test_snapshot_is_detached():
    engine = GrowthEngine(scenario_config())
    snap = engine.snapshot()
    engine.run(3)
    assert snap.frozen_count == 1
    assert snap.step == 0
    assert snap.meta["size"] == 5
    assert snap.meta["beta"] == 0.6
    assert snap.frozen_coords().tolist() == [[2, 2]]


def test_read_only_masks():
    engine = GrowthEngine(scenario_config())
    with pytest.raises(ValueError):
        engine.margin_mask()[0, 0] = False


def test_verbose_reporting(capsys):
    engine = GrowthEngine(scenario_config(verbose=True))
    engine.step()
    engine.step()
    out = capsys.readouterr().out
    assert "Reset 5x5 lattice" in out
    assert "Step 1: no cells frozen" in out
    assert "Step 2 complete: froze 6 cells" in out


def test_oddq_topology_grows():
    engine = GrowthEngine(EngineConfig.from_preset("tiny", topology="odd-q"))
    engine.run(40)
    assert engine.topology.name == "odd-q"
    assert engine.frozen_count() > 1
    assert not engine.lattice.frozen[engine.margin_mask()].any()


def test_engines_built_from_one_config_are_independent():
    config = EngineConfig.from_preset("compact")
    a = GrowthEngine(config)
    b = GrowthEngine(config)

    a.set_parameter("beta", 0.3)
    a.resize(20)
    assert b.parameters()["beta"] == 0.6
    assert config.beta.value == 0.6
    assert b.config.size == 32
    assert config.size == 32
    assert b.size == 32


def test_non_finite_delta_leaves_parameter_unchanged():
    engine = GrowthEngine(scenario_config())
    assert engine.set_parameter("alpha", float("nan")) == 2.0
    assert engine.set_parameter("beta", float("inf")) == 0.6
    assert engine.set_parameter("gamma", float("-inf")) == 0.05
    engine.step()
    assert np.all(np.isfinite(engine.lattice.s))
