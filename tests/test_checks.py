import logging
from pathlib import Path

import pytest

from planview_checker import config
from planview_checker.checks import ArcLengthOrderCheck, ContinuityCheck, LengthCheck
from planview_checker.geometry import GeometryPrimitive, Length, Line, PlanViewAssembler, evaluate
from planview_checker.main import create_output_doc
from planview_checker.utils import get_output_path, load_checks


def _line(s, x, y, length):
    return GeometryPrimitive.create(s=s, x=x, y=y, hdg=0.0, length=length, shape=Line())


def _curves(*primitives):
    return [evaluate(p) for p in primitives]


@pytest.fixture
def msp():
    return create_output_doc().modelspace()


def test_output_doc_has_error_layers_and_appid():
    doc = create_output_doc()
    assert config.XDATA_APPID in doc.appids
    for layer in config.ERROR_LAYERS.values():
        assert layer in doc.layers
    assert config.DEFAULT_ERROR_LAYER in doc.layers


def test_discontinuity_is_marked_at_the_start_of_the_later_geometry(msp):
    plan_view = [_line(0.0, 0.0, 0.0, 10.0), _line(10.0, 10.5, 0.0, 10.0)]
    PlanViewAssembler().validate(plan_view, 20.0, output_msp=msp)

    points = msp.query("POINT")
    assert len(points) == 1
    marker = points[0]
    assert marker.dxf.layer == "ERROR_DISCONTINUITY"
    assert marker.dxf.color == 1
    assert marker.dxf.location.x == pytest.approx(10.5)
    assert marker.dxf.location.y == pytest.approx(0.0)

    tags = marker.get_xdata(config.XDATA_APPID)
    assert tags[0].value == "ERR_DISCONTINUOUSREFERENCELINE_0001"
    assert "does not start where" in tags[1].value


def test_each_violation_gets_its_own_layer(msp):
    plan_view = [
        _line(0.0, 0.0, 0.0, 10.0),
        _line(20.0, 10.0, 0.0, 10.0),
        _line(15.0, 30.0, 0.0, 10.0),
    ]
    PlanViewAssembler(early_exit=False).validate(plan_view, 50.0, output_msp=msp)

    layers = sorted(p.dxf.layer for p in msp.query("POINT"))
    assert layers == ["ERROR_DISCONTINUITY", "ERROR_LENGTH_MISMATCH", "ERROR_S_ORDER"]


def test_no_markers_without_modelspace_or_location(msp):
    check = LengthCheck()
    found = check.run([], Length(5.0), output_msp=msp)

    assert [v.kind for v in found] == ["LengthMismatch"]
    assert len(msp.query("POINT")) == 0


def test_length_marker_sits_at_the_end_of_the_last_geometry(msp):
    check = LengthCheck()
    check.run(_curves(_line(0.0, 0.0, 0.0, 10.0)), Length(12.0), output_msp=msp)

    marker = msp.query("POINT")[0]
    assert marker.dxf.layer == "ERROR_LENGTH_MISMATCH"
    assert marker.dxf.location.x == pytest.approx(10.0)


def test_arc_length_check_counts_every_backwards_step():
    curves = _curves(
        _line(10.0, 0.0, 0.0, 1.0),
        _line(5.0, 1.0, 0.0, 1.0),
        _line(2.0, 2.0, 0.0, 1.0),
    )
    check = ArcLengthOrderCheck()

    assert [v.index for v in check.run(curves, Length(3.0), early_exit=False)] == [1, 2]
    assert check.get_error_count() == 2
    assert len(check.run(curves, Length(3.0))) == 1


def test_continuity_check_tolerances():
    curves = _curves(_line(0.0, 0.0, 0.0, 10.0), _line(10.0, 10.001, 0.0, 10.0))

    assert ContinuityCheck().run(curves, Length(20.0))
    assert not ContinuityCheck(position_tolerance=0.01).run(curves, Length(20.0))


def test_failed_marker_metadata_is_logged(caplog):
    class _Marker:
        def set_xdata(self, appid, tags):
            raise RuntimeError("no appid table")

    class _Modelspace:
        def __init__(self):
            self.points = []

        def add_point(self, location, dxfattribs=None):
            self.points.append((location, dxfattribs))
            return _Marker()

    fake_msp = _Modelspace()
    with caplog.at_level(logging.WARNING, logger="planview_checker"):
        LengthCheck().run(_curves(_line(0.0, 0.0, 0.0, 1.0)), Length(2.0), output_msp=fake_msp)

    assert len(fake_msp.points) == 1
    assert "Could not set extended data" in caplog.text


def test_load_checks_keeps_the_requested_order():
    checks = load_checks(["length", "arc_length"])
    assert [type(c) for c in checks] == [LengthCheck, ArcLengthOrderCheck]


def test_load_checks_skips_unknown_names(caplog):
    with caplog.at_level(logging.ERROR, logger="planview_checker"):
        checks = load_checks(["bogus", "continuity"])

    assert [type(c) for c in checks] == [ContinuityCheck]
    assert "Unknown check 'bogus'" in caplog.text


def test_load_checks_passes_tolerances():
    continuity, length = load_checks(
        ["continuity", "length"],
        {"position_tolerance": 0.1, "heading_tolerance": 0.2, "length_tolerance": 0.3},
    )
    assert continuity.position_tolerance == 0.1
    assert continuity.heading_tolerance == 0.2
    assert length.tolerance == 0.3


def test_default_output_path():
    assert get_output_path(Path("data/roads.json")) == Path("data/roads_errors.dxf")
