import pytest

from symeq import writer
from symeq.demo import run_demo
from symeq.snippets import SCENARIOS

from .helpers import normalized


# ===== Pass Tracing =====
def test_passes_are_silent_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    normalized("a * (b + c)")
    assert capsys.readouterr().out == ""


def test_debug_traces_every_pass(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(writer, "DEBUG", True)
    normalized("x - y")
    output = capsys.readouterr().out

    for name in ("Input", "ExpandSub", "Distributive", "ReduceAddNegates", "Normalize"):
        assert f"{name} =>" in output


def test_nested_traces_are_indented(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(writer, "DEBUG", True)
    normalized("a + b")
    lines = capsys.readouterr().out.splitlines()

    assert any(line.startswith("   Flatten =>") for line in lines)
    assert any(line.startswith("ExpandSub =>") for line in lines)


def test_trace_does_not_render_when_silent() -> None:
    class Unprintable:
        def __str__(self) -> str:
            raise AssertionError("rendered while debug output is off")

    writer.IndentingWriter().trace("Label", Unprintable())


# ===== Demo =====
def test_demo_prints_a_verdict_per_scenario(capsys: pytest.CaptureFixture[str]) -> None:
    run_demo()
    output = capsys.readouterr().out

    assert "ALGEBRAIC EQUIVALENCE" in output
    assert output.count("->") == len(SCENARIOS) + 1
