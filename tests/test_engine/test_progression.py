"""Tests for progression interpolation."""

import pytest

from simplex.engine.progression import Interp, Progression
from simplex.engine.shapes import Shape

FROWN = Shape("Frown", 0)
SMILE = Shape("Smile", 1)
A, B, C, D = (Shape(name, i) for i, name in enumerate("ABCD"))


def _as_dict(output):
    return {shape.name: w for shape, w in output}


def test_linear_smile_frown():
    prog = Progression("p", [(FROWN, -1.0), (None, 0.0), (SMILE, 1.0)], Interp.LINEAR)
    assert prog.get_output(1.0) == [(SMILE, 1.0)]
    assert _as_dict(prog.get_output(-0.5)) == {"Frown": pytest.approx(0.5)}
    # The placeholder rest pose never shows up in the output
    assert prog.get_output(0.0) == []


def test_linear_clamps_outside_domain():
    prog = Progression("p", [(FROWN, -1.0), (None, 0.0), (SMILE, 1.0)], "linear")
    assert prog.get_output(3.0) == [(SMILE, 1.0)]
    assert prog.get_output(-3.0) == [(FROWN, 1.0)]


def test_linear_exact_position_is_single_shape():
    prog = Progression("p", [(A, 0.0), (B, 0.5), (C, 1.0)], Interp.LINEAR)
    assert prog.get_output(0.5) == [(B, 1.0)]


def test_linear_between_positions():
    prog = Progression("p", [(A, 0.0), (B, 0.5), (C, 1.0)], Interp.LINEAR)
    out = _as_dict(prog.get_output(0.75))
    assert out == {"B": pytest.approx(0.5), "C": pytest.approx(0.5)}


def test_multiplier_scales_weights():
    prog = Progression("p", [(A, 0.0), (B, 1.0)], Interp.LINEAR)
    out = _as_dict(prog.get_output(0.25, 0.5))
    assert out == {"A": pytest.approx(0.375), "B": pytest.approx(0.125)}


def test_pairs_sorted_by_position():
    prog = Progression("p", [(C, 1.0), (A, -1.0), (B, 0.0)], Interp.LINEAR)
    assert prog.times == [-1.0, 0.0, 1.0]
    assert [s for s, _ in prog.pairs] == [A, B, C]


def test_duplicate_position_rejected():
    with pytest.raises(ValueError):
        Progression("p", [(A, 0.0), (B, 0.0)], Interp.LINEAR)


def test_empty_progression():
    assert Progression("p", [], Interp.SPLINE).get_output(0.3) == []


@pytest.mark.parametrize("interp", [Interp.LINEAR, Interp.SPLINE])
@pytest.mark.parametrize("t", [-5.0, 0.0, 0.4, 7.0])
def test_single_pair_is_constant(interp, t):
    prog = Progression("p", [(A, 0.5)], interp)
    assert prog.get_output(t) == [(A, 1.0)]
    assert prog.get_output(t, 0.25) == [(A, 0.25)]


@pytest.mark.parametrize("interp", [Interp.LINEAR, Interp.SPLINE])
def test_weights_sum_to_one_inside_domain(interp):
    prog = Progression("p", [(A, -1.0), (B, 0.0), (C, 0.5), (D, 1.0)], interp)
    for i in range(41):
        t = -1.0 + i * 0.05
        total = sum(w for _, w in prog.get_output(t, 1.0))
        assert total == pytest.approx(1.0, abs=1e-6)


def test_spline_golden_values():
    # Endpoint duplicated past the start: points (A, A, B, C) around t=0.25
    prog = Progression("p", [(A, 0.0), (B, 0.5), (C, 1.0)], Interp.SPLINE)
    out = _as_dict(prog.get_output(0.25))
    assert out == {
        "A": pytest.approx(0.5),
        "B": pytest.approx(0.5625),
        "C": pytest.approx(-0.0625),
    }


def test_spline_hits_control_points():
    prog = Progression("p", [(A, 0.0), (B, 0.5), (C, 1.0)], Interp.SPLINE)
    assert prog.get_output(0.0) == [(A, 1.0)]
    assert prog.get_output(0.5) == [(B, 1.0)]
    assert prog.get_output(1.0) == [(C, 1.0)]
    assert prog.get_output(4.0) == [(C, 1.0)]


def test_spline_emits_four_shapes_in_the_middle():
    prog = Progression("p", [(A, 0.0), (B, 1.0), (C, 2.0), (D, 3.0)], Interp.SPLINE)
    out = _as_dict(prog.get_output(1.5))
    assert set(out) == {"A", "B", "C", "D"}
    assert out["B"] == pytest.approx(out["C"])
    assert out["A"] < 0.0
