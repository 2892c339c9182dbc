from datetime import timedelta

import pytest

from cifpy.constants import PATH_TERMINATION, PROC_TYPE
from cifpy.exceptions import RestrictionViolation
from cifpy.geo import Coordinate, MagneticCourse, TrueCourse, mk180
from cifpy.record import parse
from cifpy.airspace import register, ProcedureStep, SID, STAR, Approach
from cifpy.airspace import Fix, Direct, Radial, Arc, Racetrack, UnresolvedWaypoint, UnresolvedRadial

from conftest import vor_line, airport_line, procedure_line


@pytest.fixture
def registries():
    fixes = {}
    navaids = {}
    register(fixes, "FIXA", Coordinate(0.0, 0.1))
    register(fixes, "FIXB", Coordinate(0.1, 0.1))
    register(fixes, "CTR", Coordinate(0.1, 0.0))
    abc = parse(vor_line("ABC", 0.0, 0.2, variation="W0050"))
    register(navaids, "ABC", abc)
    register(fixes, "ABC", abc.position)
    aerodromes = {"KAAA": parse(airport_line("KAAA", 0.0, 0.0, variation="W0100"))}
    return fixes, navaids, aerodromes


def lines(*args):
    return [parse(procedure_line(*a[:6], **a[6])) for a in args]


def test_step_from_line():
    line = parse(procedure_line("E", "KAAA", "ARR1", 10, "FIXA", "TF", alt_desc="+", alt1="05000", speed="250", speed_desc="-"))
    step = ProcedureStep.from_line(line, -10.0)
    assert isinstance(step.endpoint, UnresolvedWaypoint)
    assert step.via is None
    assert step.termination == PATH_TERMINATION.UNTIL_CROSSING
    assert step.altitude.minimum == 5000
    assert step.speed.maximum == 250
    assert not step.resolved

    line = parse(procedure_line("D", "KAAA", "DEP1", 20, None, "VR", navaid="ABC ", theta="0900"))
    step = ProcedureStep.from_line(line)
    assert isinstance(step.endpoint, UnresolvedRadial)
    assert step.termination == PATH_TERMINATION.UNTIL_CROSSING

    line = parse(procedure_line("D", "KAAA", "DEP1", 30, None, "VM"))
    assert ProcedureStep.from_line(line).termination == PATH_TERMINATION.UNTIL_MANUAL

    line = parse(procedure_line("D", "KAAA", "DEP1", 40, "FIXA", "PI"))
    step = ProcedureStep.from_line(line)
    assert PATH_TERMINATION.PROCEDURE_TURN in step.termination


def test_step_restriction_violation():
    line = parse(procedure_line("E", "KAAA", "ARR1", 10, "FIXA", "TF", alt_desc="B", alt1="05000"))
    with pytest.raises(RestrictionViolation):
        ProcedureStep.from_line(line)


def test_star(registries):
    fixes, navaids, aerodromes = registries
    star = STAR(lines(
        ("E", "KAAA", "ARR1", 10, "FIXA", "IF", {"transition": "FIXA"}),
        ("E", "KAAA", "ARR1", 20, "FIXB", "TF", {"transition": "FIXA"}),
        ("E", "KAAA", "ARR1", 30, "FIXB", "IF", {}),
        ("E", "KAAA", "ARR1", 40, "FIXA", "RF", {"arc_radius": "008485", "center_fix": "CTR  ", "turn": "R"}),
        ("E", "KAAA", "ARR1", 50, "FIXA", "HM", {"course": "3420", "distance": "T010", "turn": "L"}),
    ), fixes, navaids, aerodromes)

    assert star.PROC_TYPE == PROC_TYPE.STAR
    assert star.getKey() == ("KAAA", "ARR1")
    assert star.is_resolved()
    assert list(star.transitions().keys()) == ["FIXA", None]
    assert star.runways() == []

    tf = star.steps[1]
    assert isinstance(tf.endpoint, Fix)
    assert tf.endpoint.name == "FIXB"
    assert isinstance(tf.via, Direct)
    assert tf.point().name == "FIXB"

    rf = star.steps[3]
    assert isinstance(rf.via, Arc)
    assert (rf.via.center.latitude, rf.via.center.longitude) == (0.1, 0.0)
    assert rf.via.radius == pytest.approx(8.485)
    assert abs(mk180(rf.via.arc_to.to_true().degrees - 135)) < 0.5

    hm = star.steps[4]
    assert isinstance(hm.via, Racetrack)
    assert hm.endpoint is None
    assert hm.termination == PATH_TERMINATION.HOLD | PATH_TERMINATION.UNTIL_MANUAL
    assert hm.via.inbound_course == MagneticCourse(342.0, -10.0)
    assert hm.via.time == timedelta(minutes=1)
    assert hm.via.left_turns
    assert (hm.via.point.latitude, hm.via.point.longitude) == (0.0, 0.1)


def test_sid(registries):
    fixes, navaids, aerodromes = registries
    sid = SID(lines(
        ("D", "KAAA", "DEP1", 10, None, "CA", {"transition": "RW16L", "course": "1620", "alt_desc": "+", "alt1": "01000"}),
        ("D", "KAAA", "DEP1", 20, None, "CR", {"transition": "RW16L", "navaid": "ABC ", "theta": "0900", "course": "0450"}),
        ("D", "KAAA", "DEP1", 30, "FIXB", "AF", {"transition": "RW16L", "navaid": "ABC ", "rho": "0100", "theta": "0450", "turn": "L"}),
    ), fixes, navaids, aerodromes)

    assert sid.runways() == ["RW16L"]
    assert sid.is_resolved()

    ca = sid.steps[0]
    assert ca.termination == PATH_TERMINATION.UNTIL_ALTITUDE
    assert ca.altitude.minimum == 1000
    assert ca.endpoint is None and ca.via is None
    assert ca.course == MagneticCourse(162.0, -10.0)
    assert ca.course.to_true() == TrueCourse(152.0)

    cr = sid.steps[1]
    assert isinstance(cr.endpoint, Radial)
    assert cr.endpoint.station.identifier == "ABC"
    assert cr.endpoint.course().to_true() == TrueCourse(85.0)
    assert cr.course == MagneticCourse(45.0, -10.0)

    af = sid.steps[2]
    assert isinstance(af.via, Arc)
    assert af.via.radius == 10.0
    assert af.via.center.longitude == pytest.approx(0.2)
    assert af.via.arc_to == MagneticCourse(45.0, -5.0)
    assert af.endpoint.name == "FIXB"


def test_approach(registries):
    fixes, navaids, aerodromes = registries
    approach = Approach(lines(
        ("F", "KAAA", "R16L", 10, "FIXA", "IF", {"description": "E  F"}),
        ("F", "KAAA", "R16L", 20, "FIXB", "TF", {"description": "E  M"}),
        ("F", "KAAA", "R16L", 30, None, "CA", {"course": "1620", "alt1": "02000"}),
        ("F", "KAAA", "R16L", 40, "FIXA", "FD", {"navaid": "ABC ", "theta": "0900", "distance": "0050"}),
    ), fixes, navaids, aerodromes)

    assert approach.is_final_fix_point(approach.steps[0])
    assert not approach.is_final_fix_point(approach.steps[2])
    missed = approach.missed_approach()
    assert [s.sequence for s in missed] == [30, 40]

    fd = approach.steps[3]
    assert fd.termination == PATH_TERMINATION.UNTIL_DISTANCE
    assert isinstance(fd.endpoint, Fix)
    assert fd.endpoint.name == "ABC090005"
    assert isinstance(fd.via, Direct)


def test_unresolved_step_is_kept(registries):
    fixes, navaids, aerodromes = registries
    star = STAR(lines(
        ("E", "KAAA", "ARR2", 10, "FIXA", "IF", {}),
        ("E", "KAAA", "ARR2", 20, "NOPE", "TF", {}),
        ("E", "KAAA", "ARR2", 30, "FIXB", "TF", {}),
    ), fixes, navaids, aerodromes)
    assert len(star.steps) == 3
    assert not star.is_resolved()
    assert not star.steps[1].resolved
    assert isinstance(star.steps[1].endpoint, UnresolvedWaypoint)
    assert star.steps[2].resolved


def test_procedure_needs_lines(registries):
    with pytest.raises(ValueError):
        SID([], *registries)


def test_procedure_info(registries):
    fixes, navaids, aerodromes = registries
    sid = SID(lines(("D", "KAAA", "DEP2", 10, "FIXA", "IF", {"transition": "RW16L"})), fixes, navaids, aerodromes)
    info = sid.getInfo()
    assert info["type"] == "SID"
    assert info["transitions"] == ["RW16L"]
    assert info["steps"][0]["endpoint"]["type"] == "Fix"
