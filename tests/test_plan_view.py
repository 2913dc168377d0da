import math

import pytest
from ezdxf.math import Vec2

from planview_checker.checks import ContinuityCheck
from planview_checker.geometry import (
    Arc,
    ArcCurve,
    DiscontinuousReferenceLine,
    GeometryPrimitive,
    Length,
    LengthMismatch,
    Line,
    NonMonotonicArcLength,
    PlanViewAssembler,
    PlanViewValidationError,
    ReferenceLine,
    Road,
    Spiral,
    ValidationTolerances,
    evaluate,
)


def _line(s, x, y, length, hdg=0.0):
    return GeometryPrimitive.create(s=s, x=x, y=y, hdg=hdg, length=length, shape=Line())


def _following(curve, shape, length):
    """Primitive starting exactly at the end of ``curve``."""
    return GeometryPrimitive(
        s=curve.primitive.s_end,
        start_pose=curve.end_pose(),
        length=Length(length),
        shape=shape,
    )


@pytest.fixture
def assembler():
    return PlanViewAssembler()


def test_line_spiral_arc_chain_assembles(assembler):
    line = evaluate(_line(0.0, 0.0, 0.0, 10.0))
    spiral = evaluate(_following(line, Spiral(0.0, 0.02), 20.0))
    arc = _following(spiral, Arc(0.02), 15.0)

    reference_line = assembler.assemble([line.primitive, spiral.primitive, arc], 45.0)

    assert isinstance(reference_line, ReferenceLine)
    assert len(reference_line) == 3
    assert reference_line.total_length == Length(45.0)
    assert reference_line.start_pose().position == Vec2(0.0, 0.0)
    # heading grows by the area under the curvature profile
    expected_heading = 0.5 * 0.02 * 20.0 + 0.02 * 15.0
    assert reference_line.end_pose().heading.radians == pytest.approx(expected_heading)


def test_s_going_backwards_is_reported_at_the_later_geometry(assembler):
    plan_view = [
        _line(0.0, 0.0, 0.0, 5.0),
        _line(5.0, 5.0, 0.0, 5.0),
        _line(3.0, 10.0, 0.0, 5.0),
    ]
    with pytest.raises(NonMonotonicArcLength) as excinfo:
        assembler.assemble(plan_view, 15.0)

    assert excinfo.value.index == 2
    assert excinfo.value.s_previous == 5.0
    assert excinfo.value.s_current == 3.0
    assert "not monotonic" in str(excinfo.value)


def test_runs_of_equal_s_and_zero_length_geometries_are_legal(assembler):
    plan_view = [
        _line(0.0, 0.0, 0.0, 10.0),
        GeometryPrimitive.create(s=10.0, x=10.0, y=0.0, hdg=0.0, length=0.0, shape=Arc(0.1)),
        _line(10.0, 10.0, 0.0, 5.0),
    ]
    reference_line = assembler.assemble(plan_view, 15.0)

    assert reference_line.end_pose().position.isclose(Vec2(15.0, 0.0), abs_tol=1e-12)


def test_single_zero_length_spiral_is_a_valid_plan_view(assembler):
    only = GeometryPrimitive.create(s=0.0, x=3.0, y=-1.0, hdg=0.7, length=0.0, shape=Spiral(0.0, 0.5))
    reference_line = assembler.assemble([only], 0.0)

    assert len(reference_line) == 1
    assert reference_line.total_length == Length(0.0)
    assert reference_line.end_pose() == only.start_pose


def test_single_zero_length_arc_is_a_valid_plan_view(assembler):
    only = GeometryPrimitive.create(s=0.0, x=3.0, y=-1.0, hdg=0.7, length=0.0, shape=Arc(0.2))
    report = assembler.validate([only], 0.0)

    assert report.is_valid
    end = report.curves[0].end_pose()
    assert end.position.isclose(only.start_pose.position, abs_tol=1e-15)
    assert end.heading == only.start_pose.heading


def test_position_gap_is_reported_exactly(assembler):
    plan_view = [_line(0.0, 0.0, 0.0, 10.0), _line(10.0, 10.5, 0.0, 10.0)]
    with pytest.raises(DiscontinuousReferenceLine) as excinfo:
        assembler.assemble(plan_view, 20.0)

    assert excinfo.value.index == 1
    assert excinfo.value.position_gap == pytest.approx(0.5)
    assert excinfo.value.heading_gap == pytest.approx(0.0)


def test_heading_gap_alone_breaks_continuity(assembler):
    plan_view = [_line(0.0, 0.0, 0.0, 10.0), _line(10.0, 10.0, 0.0, 10.0, hdg=0.01)]
    report = assembler.validate(plan_view, 20.0)

    assert not report.is_valid
    violation = report.first_violation
    assert isinstance(violation, DiscontinuousReferenceLine)
    assert violation.position_gap == pytest.approx(0.0, abs=1e-12)
    assert violation.heading_gap == pytest.approx(0.01)


def test_full_turn_in_heading_is_continuous(assembler):
    plan_view = [_line(0.0, 0.0, 0.0, 10.0), _line(10.0, 10.0, 0.0, 10.0, hdg=2 * math.pi)]
    assert assembler.validate(plan_view, 20.0).is_valid


def test_tolerances_are_configurable():
    plan_view = [_line(0.0, 0.0, 0.0, 10.0), _line(10.0, 10.5, 0.0, 10.0)]
    loose = PlanViewAssembler(tolerances=ValidationTolerances(position_tolerance=1.0))

    assert loose.validate(plan_view, 20.0).is_valid


def test_length_within_tolerance_is_accepted(assembler):
    plan_view = [_line(0.0, 0.0, 0.0, 50.0), _line(50.0, 50.0, 0.0, 49.99999)]
    reference_line = assembler.assemble(plan_view, 100.0)

    assert reference_line.total_length.meters == pytest.approx(99.99999)


def test_length_mismatch_carries_both_lengths(assembler):
    plan_view = [_line(0.0, 0.0, 0.0, 50.0), _line(50.0, 50.0, 0.0, 45.0)]
    with pytest.raises(LengthMismatch) as excinfo:
        assembler.assemble(plan_view, 100.0)

    assert excinfo.value.declared == 100.0
    assert excinfo.value.computed == 95.0
    assert excinfo.value.index is None


def test_empty_plan_view(assembler):
    reference_line = assembler.assemble([], 0.0)
    assert len(reference_line) == 0
    with pytest.raises(ValueError):
        reference_line.start_pose()

    with pytest.raises(LengthMismatch):
        assembler.assemble([], 5.0)


def _broken_plan_view():
    return [
        _line(0.0, 0.0, 0.0, 10.0),
        _line(20.0, 10.0, 0.0, 10.0),
        _line(15.0, 30.0, 0.0, 10.0),
    ]


def test_collect_all_reports_every_violation_in_check_order():
    report = PlanViewAssembler(early_exit=False).validate(_broken_plan_view(), 50.0)

    assert [v.kind for v in report.violations] == [
        "NonMonotonicArcLength",
        "DiscontinuousReferenceLine",
        "LengthMismatch",
    ]
    assert report.violations[1].index == 2
    assert report.violations[1].position_gap == pytest.approx(10.0)


def test_early_exit_stops_at_the_same_first_violation():
    early = PlanViewAssembler().validate(_broken_plan_view(), 50.0)
    collected = PlanViewAssembler(early_exit=False).validate(_broken_plan_view(), 50.0)

    assert len(early.violations) == 1
    assert early.first_violation.as_dict() == collected.first_violation.as_dict()


def test_violations_are_value_errors(assembler):
    with pytest.raises(ValueError):
        assembler.assemble(_broken_plan_view(), 50.0)
    assert issubclass(PlanViewValidationError, ValueError)


def test_custom_check_list():
    plan_view = [_line(5.0, 0.0, 0.0, 10.0), _line(0.0, 10.0, 0.0, 10.0)]
    continuity_only = PlanViewAssembler(checks=[ContinuityCheck()])

    assert continuity_only.validate(plan_view, 99.0).is_valid


def test_pose_lookup_along_the_reference_line(assembler):
    line = evaluate(_line(0.0, 0.0, 0.0, 10.0))
    arc = _following(line, Arc(0.05), 20.0)
    reference_line = assembler.assemble([line.primitive, arc], 30.0)

    assert reference_line.pose_at(5.0).position.isclose(Vec2(5.0, 0.0), abs_tol=1e-12)
    assert isinstance(reference_line.curve_at(10.0), ArcCurve)
    assert reference_line.pose_at(Length(30.0)).position.isclose(
        reference_line.end_pose().position, abs_tol=1e-12
    )
    with pytest.raises(ValueError):
        reference_line.pose_at(-1.0)


def test_road_record_sums_and_validates():
    plan_view = [_line(0.0, 0.0, 0.0, 10.0), _line(10.0, 10.0, 0.0, 5.0)]
    road = Road(id="7", length=15.0, plan_view=plan_view, name="Main", junction="3")

    assert road.length == Length(15.0)
    assert road.sum_length() == Length(15.0)
    assert road.is_connecting_road
    assert len(road.validate()) == 2
    assert not Road(id="8", length=0.0).is_connecting_road
