import io

from snowflake_sim import EngineConfig, GrowthEngine, Parameter, ParameterSpec
from snowflake_sim.shell import SnowflakeShell, render_text


def _engine():
    return GrowthEngine(
        EngineConfig(
            size=5,
            margin=1,
            alpha=ParameterSpec(value=2.0, minimum=0.0, maximum=2.0, step=0.1),
            beta=ParameterSpec(value=0.6, minimum=0.0, maximum=1.0, step=0.05),
            gamma=ParameterSpec(value=0.05, minimum=0.0, maximum=0.1, step=0.001),
        )
    )


def test_render_text_after_reset():
    rows = render_text(_engine()).splitlines()
    assert rows[0] == "     "
    assert rows[1] == " ... "
    assert rows[2] == " .*. "
    assert rows[4] == "     "
    assert rows[5].startswith("step=0 frozen=1")


def test_grow_and_reset_commands():
    out = io.StringIO()
    shell = SnowflakeShell(_engine(), out=out)
    assert shell.handle("ok")
    assert shell.engine.step_count == 1
    assert "stalled" in out.getvalue()
    assert shell.handle("grow")
    assert shell.last_frozen == 6
    assert shell.handle("left")
    assert shell.engine.frozen_count() == 1
    assert shell.engine.step_count == 0


def test_select_and_nudge():
    out = io.StringIO()
    shell = SnowflakeShell(_engine(), out=out)
    assert shell.selected is Parameter.ALPHA
    shell.handle("down")
    assert abs(shell.engine.parameters()["alpha"] - 1.9) < 1e-12
    shell.handle("right")
    shell.handle("right")
    assert shell.selected is Parameter.GAMMA
    shell.handle("up")
    assert abs(shell.engine.parameters()["gamma"] - 0.051) < 1e-12
    shell.handle("right")
    assert shell.selected is Parameter.ALPHA
    assert "gamma = 0.0510" in out.getvalue()


def test_unknown_and_quit():
    out = io.StringIO()
    shell = SnowflakeShell(_engine(), out=out)
    assert shell.handle("jump")
    assert "Unknown command 'jump'" in out.getvalue()
    assert shell.handle("   ")
    assert not shell.handle("back")


def test_run_stops_at_quit():
    shell = SnowflakeShell(_engine(), out=io.StringIO())
    handled = shell.run(["ok\n", "back\n", "ok\n"])
    assert handled == 2
    assert shell.engine.step_count == 1


def test_emit_writes_to_output():
    out = io.StringIO()
    shell = SnowflakeShell(_engine(), out=out)
    shell.emit(render_text(shell.engine))
    assert out.getvalue().splitlines()[2] == " .*. "
