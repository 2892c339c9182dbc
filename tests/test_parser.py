from datetime import timedelta

import pytest

from cifpy.exceptions import FormatViolation
from cifpy.geo import MagneticCourse
from cifpy.record import parse, try_parse, parse_lines
from cifpy.record import Waypoint, AirwayFixLine, HoldingLine, SIDLine, ApproachLine, VOR, VORDME, DME
from cifpy.record import Airport, Runway, GridMORA, ControlledAirspace

from conftest import CYCLE, make_line, waypoint_line, airway_line, vor_line, dme_line, airport_line, runway_line
from conftest import procedure_line, holding_line, airspace_line, mora_line


def test_waypoint():
    w = parse(waypoint_line("FIXA", 40.5, -80.25, variation="W0100", record_number=42))
    assert isinstance(w, Waypoint)
    assert w.identifier == "FIXA"
    assert w.region == "ENRT"
    assert w.position.latitude == pytest.approx(40.5)
    assert w.position.longitude == pytest.approx(-80.25)
    assert w.magnetic_variation == -10.0
    assert not w.terminal
    assert w.file_record_number == 42
    assert w.cycle == CYCLE


def test_terminal_waypoint():
    w = parse(waypoint_line("TERMA", 40.0, -80.0, airport="KAAA"))
    assert isinstance(w, Waypoint)
    assert w.terminal
    assert w.region == "KAAA"


def test_airway_fix():
    a = parse(airway_line("V1", 10, "FIXA"))
    assert isinstance(a, AirwayFixLine)
    assert a.airway_identifier == "V1"
    assert a.sequence_number == 10
    assert a.fix == "FIXA"
    assert a.level == "B"
    assert a.minimum_altitude == 3000
    assert a.maximum_altitude is None


def test_navaids():
    v = parse(vor_line("ABC", 10.0, 20.0, variation="E0050"))
    assert isinstance(v, VORDME)
    assert isinstance(v, VOR)
    assert v.identifier == "ABC"
    assert v.frequency == pytest.approx(113.7)
    assert v.magnetic_variation == 5.0
    assert v.dme_identifier == "ABC"
    assert v.has_variation()

    plain = parse(vor_line("DEF", 10.0, 20.0, dme=False))
    assert type(plain) is VOR

    d = parse(dme_line("XYZ", 1.0, 2.0))
    assert isinstance(d, DME)
    assert d.magnetic_variation is None
    assert d.position.latitude == pytest.approx(1.0)


def test_airport_and_runway():
    a = parse(airport_line("KAAA", 40.0, -80.0, variation="W0100"))
    assert isinstance(a, Airport)
    assert a.identifier == "KAAA"
    assert a.iata == "AAA"
    assert a.magnetic_variation == -10.0
    assert a.transition_altitude == 18000

    r = parse(runway_line("KAAA", "16L", 40.01, -80.0))
    assert isinstance(r, Runway)
    assert r.airport == "KAAA"
    assert r.identifier == "16L"
    assert r.magnetic_bearing == MagneticCourse(162.0)
    assert r.length == 12000


def test_procedure_line():
    p = parse(procedure_line("D", "KAAA", "DEP1", 20, "FIXA", "TF", transition="RW16L",
                             alt_desc="+", alt1="05000", speed="250", speed_desc="-", course="1620", distance="0125"))
    assert isinstance(p, SIDLine)
    assert p.airport == "KAAA"
    assert p.name == "DEP1"
    assert p.transition == "RW16L"
    assert p.sequence_number == 20
    assert p.path_terminator == "TF"
    assert p.altitude_description == "+"
    assert p.altitude1 == 5000
    assert p.altitude2 is None
    assert p.speed == 250
    assert p.course == MagneticCourse(162.0)
    assert p.distance == 12.5
    assert p.hold_time is None


def test_procedure_hold_time_and_flight_level():
    p = parse(procedure_line("F", "KAAA", "I16L", 90, "FIXA", "HM", course="3420", distance="T010", alt1="FL180"))
    assert isinstance(p, ApproachLine)
    assert p.hold_time == timedelta(minutes=1)
    assert p.distance is None
    assert p.altitude1 == 18000


def test_holding_line():
    h = parse(holding_line("FIXA", course="0900", turn="L", time="15"))
    assert isinstance(h, HoldingLine)
    assert h.fix == "FIXA"
    assert h.inbound_course == MagneticCourse(90.0)
    assert h.turn_direction == "L"
    assert h.leg_time == timedelta(minutes=1.5)
    assert h.leg_length is None
    assert h.minimum_altitude == 5000


def test_grid_mora():
    m = parse(mora_line())
    assert isinstance(m, GridMORA)
    assert m.start_latitude == 40
    assert m.start_longitude == -80
    assert len(m.moras) == 30
    assert m.moras[0] is None
    assert m.moras[1] == 5000


def test_controlled_airspace():
    c = parse(airspace_line("KAAA", 10, 40.0, -80.0, via="GE"))
    assert isinstance(c, ControlledAirspace)
    assert c.center == "KAAA"
    assert c.airspace_class == "B"
    assert c.lower_limit == 0
    assert c.upper_limit == 10000
    assert c.ends_region()


def test_format_violation_column():
    line = waypoint_line("FIXA", 40.0, -80.0)
    bad = line[:21] + "X" + line[22:]
    with pytest.raises(FormatViolation) as e:
        parse(bad)
    assert e.value.column == 21
    assert "failed on character 21" in str(e.value)


def test_bad_latitude():
    line = waypoint_line("FIXA", 40.0, -80.0)
    bad = line[:32] + "X" + line[33:]
    with pytest.raises(FormatViolation) as e:
        parse(bad)
    assert e.value.column == 32


def test_short_line():
    with pytest.raises(FormatViolation):
        parse("SUSAEA")


def test_unknown_category():
    assert parse(make_line({4: "Z "})) is None


def test_try_parse_drops_bad_lines():
    line = airway_line("V1", 10, "FIXA")
    assert try_parse(line[:38] + "9" + line[39:]) is None
    assert try_parse(line) is not None


def test_parse_is_pure():
    for line in [waypoint_line("FIXA", 40.0, -80.0), airway_line("V1", 10, "FIXA"), vor_line("ABC", 1.0, 2.0),
                 procedure_line("E", "KAAA", "ARR1", 10, "FIXA", "IF"), airspace_line("KAAA", 10, 40.0, -80.0)]:
        assert parse(line) == parse(line)


def test_parse_lines_keeps_order():
    good = [waypoint_line(f"FIX{i}", 40.0 + i / 10, -80.0, record_number=i) for i in range(1, 6)]
    bad = waypoint_line("BAD", 40.0, -80.0)
    bad = bad[:21] + "X" + bad[22:]
    lines = ["HDR01 FAACIFP18", "HDR02 header"] + good[:2] + [bad] + good[2:]
    records = parse_lines(lines, workers=1)
    assert [r.identifier for r in records] == ["FIX1", "FIX2", "FIX3", "FIX4", "FIX5"]
    assert [r.file_record_number for r in records] == [1, 2, 3, 4, 5]


def test_non_ascii_digit():
    line = airway_line("V1", 10, "FIXA")
    bad = line[:25] + "001²" + line[29:]
    with pytest.raises(FormatViolation) as e:
        parse(bad)
    assert e.value.column == 25
    assert parse_lines([airway_line("V1", 10, "FIXA"), bad, airway_line("V1", 20, "FIXB")], workers=1)[1].fix == "FIXB"


def test_parse_lines_in_processes(monkeypatch):
    monkeypatch.setattr("cifpy.record.parser.PARALLEL_MIN_LINES", 1)
    good = [waypoint_line(f"FIX{i}", 40.0 + i / 10, -80.0, record_number=i) for i in range(1, 9)]
    bad = waypoint_line("BAD", 40.0, -80.0)
    bad = bad[:21] + "X" + bad[22:]
    lines = ["HDR01 FAACIFP18"] + good[:3] + [bad] + good[3:]
    records = parse_lines(lines, workers=2)
    assert [r.identifier for r in records] == [f"FIX{i}" for i in range(1, 9)]
    assert [r.file_record_number for r in records] == list(range(1, 9))
