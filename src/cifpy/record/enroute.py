# Enroute lines: waypoints (EA, PC), airway fixes (ER), holding patterns (EP),
# and the procedure lines (PD, PE, PF) and path points (PP) that share their structure.
#
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from cifpy.constants import SECTION, ENROUTE_WAYPOINT, ENROUTE_AIRWAY, ENROUTE_HOLDING
from cifpy.constants import AERODROME_SID, AERODROME_STAR, AERODROME_APPROACH, AERODROME_TERMINAL_WAYPOINT, AERODROME_PATH_POINT
from cifpy.geo import Coordinate, Course
from cifpy.record.recordline import RecordLine

PRIMARY_RECORD = ("0", "1")


@dataclass(frozen=True, kw_only=True)
class EnrouteLine(RecordLine):

    @staticmethod
    def parse(line: str) -> EnrouteLine:
        if line[4] != SECTION.ENROUTE.value:
            RecordLine.fail(4)
        if line[5] == ENROUTE_WAYPOINT:
            return Waypoint.parse(line)
        if line[5] == ENROUTE_AIRWAY:
            return AirwayFixLine.parse(line)
        if line[5] == ENROUTE_HOLDING:
            return HoldingLine.parse(line)
        RecordLine.fail(5)


@dataclass(frozen=True, kw_only=True)
class Waypoint(EnrouteLine):
    """
    Enroute (EA) or terminal (PC) waypoint.
    """
    identifier: str
    region: str  # ENRT or airport
    icao: str
    waypoint_type: str
    position: Coordinate
    magnetic_variation: float | None
    name: str | None
    terminal: bool

    @staticmethod
    def parse(line: str) -> Waypoint:
        common = RecordLine.common(line)
        terminal = line[4] != SECTION.ENROUTE.value
        if terminal:
            RecordLine.check(line, 12, 13, AERODROME_TERMINAL_WAYPOINT)
        else:
            RecordLine.check_empty(line, 12, 13)
        RecordLine.check_empty(line, 18, 19)
        RecordLine.check(line, 21, 22, *PRIMARY_RECORD)
        return Waypoint(
            identifier=line[13:18].strip(),
            region=line[6:10].strip(),
            icao=line[19:21],
            waypoint_type=line[26:29],
            position=RecordLine.coordinate(line, slice(32, 41), slice(41, 51)),
            magnetic_variation=RecordLine.variation(line, 74, 79),
            name=RecordLine.text(line, 98, 123),
            terminal=terminal,
            **common
        )


@dataclass(frozen=True, kw_only=True)
class AirwayFixLine(EnrouteLine):
    """
    One fix of an airway. Airways are sequences of fixes with increasing sequence numbers.
    """
    airway_identifier: str
    sequence_number: int
    fix: str
    icao: str
    fix_section: str
    description: str
    route_type: str
    level: str
    direction: str
    recommended_navaid: str | None
    outbound_course: Course | None
    distance: float | None
    inbound_course: Course | None
    minimum_altitude: int | None
    maximum_altitude: int | None

    @staticmethod
    def parse(line: str) -> AirwayFixLine:
        common = RecordLine.common(line)
        RecordLine.check_empty(line, 6, 13)
        RecordLine.check(line, 38, 39, *PRIMARY_RECORD)
        RecordLine.check(line, 45, 46, "B", "H", "L", " ")
        RecordLine.check(line, 46, 47, "F", "B", " ")
        return AirwayFixLine(
            airway_identifier=line[13:18].strip(),
            sequence_number=RecordLine.integer(line, 25, 29),
            fix=line[29:34].strip(),
            icao=line[34:36],
            fix_section=line[36:38],
            description=line[39:43],
            route_type=line[44],
            level=line[45],
            direction=line[46],
            recommended_navaid=RecordLine.text(line, 50, 54),
            outbound_course=RecordLine.course(line, 70, 74),
            distance=RecordLine.tenths(line, 74, 78),
            inbound_course=RecordLine.course(line, 78, 82),
            minimum_altitude=AirwayFixLine.altitude_or_unknown(line, 83, 88),
            maximum_altitude=AirwayFixLine.altitude_or_unknown(line, 93, 98),
            **common
        )

    @staticmethod
    def altitude_or_unknown(line: str, start: int, end: int) -> int | None:
        if line[start:end] in ("UNKNN", "NESTB"):
            return None
        return RecordLine.altitude(line, start, end)


@dataclass(frozen=True, kw_only=True)
class HoldingLine(EnrouteLine):
    """
    Holding pattern at an enroute or terminal fix.
    """
    region: str
    fix: str
    icao: str
    fix_section: str
    inbound_course: Course
    turn_direction: str
    leg_length: float | None
    leg_time: timedelta | None
    minimum_altitude: int | None
    maximum_altitude: int | None
    speed: int | None
    name: str | None

    @staticmethod
    def parse(line: str) -> HoldingLine:
        common = RecordLine.common(line)
        RecordLine.check(line, 38, 39, *PRIMARY_RECORD)
        RecordLine.check(line, 43, 44, "L", "R")
        course = RecordLine.course(line, 39, 43)
        if course is None:
            RecordLine.fail(39)
        leg_time = RecordLine.tenths(line, 47, 49)
        return HoldingLine(
            region=line[6:10].strip(),
            fix=line[29:34].strip(),
            icao=line[34:36],
            fix_section=line[36:38],
            inbound_course=course,
            turn_direction=line[43],
            leg_length=RecordLine.tenths(line, 44, 47),
            leg_time=timedelta(minutes=leg_time) if leg_time is not None else None,
            minimum_altitude=RecordLine.altitude(line, 49, 54),
            maximum_altitude=RecordLine.altitude(line, 54, 59),
            speed=RecordLine.integer(line, 59, 62, optional=True),
            name=RecordLine.text(line, 98, 123),
            **common
        )


@dataclass(frozen=True, kw_only=True)
class ProcedureLine(EnrouteLine):
    """
    One leg of a SID, STAR, or approach. All transitions of a procedure share
    the airport and the procedure name.
    """
    airport: str
    name: str
    route_type: str
    transition: str | None
    sequence_number: int
    fix: str | None
    fix_section: str
    description: str
    turn_direction: str | None
    path_terminator: str
    recommended_navaid: str | None
    arc_radius: float | None
    theta: float | None
    rho: float | None
    course: Course | None
    distance: float | None
    hold_time: timedelta | None
    altitude_description: str
    altitude1: int | None
    altitude2: int | None
    transition_altitude: int | None
    speed: int | None
    speed_description: str
    vertical_angle: float | None
    center_fix: str | None

    SUBSECTION = None

    @classmethod
    def parse(cls, line: str) -> ProcedureLine:
        common = RecordLine.common(line)
        RecordLine.check(line, 12, 13, cls.SUBSECTION)
        RecordLine.check(line, 38, 39, *PRIMARY_RECORD)
        RecordLine.check(line, 43, 44, "L", "R", "E", " ")
        RecordLine.check(line, 117, 118, " ", "@", "+", "-")

        arc = RecordLine.integer(line, 56, 62, optional=True)
        distance = None
        hold_time = None
        if line[74] == "T":
            t = RecordLine.tenths(line, 75, 78)
            hold_time = timedelta(minutes=t) if t is not None else None
        else:
            distance = RecordLine.tenths(line, 74, 78)
        angle = RecordLine.integer(line, 102, 106, optional=True)

        return cls(
            airport=line[6:10].strip(),
            name=line[13:19].strip(),
            route_type=line[19],
            transition=RecordLine.text(line, 20, 25),
            sequence_number=RecordLine.integer(line, 26, 29),
            fix=RecordLine.text(line, 29, 34),
            fix_section=line[36:38],
            description=line[39:43],
            turn_direction=RecordLine.text(line, 43, 44),
            path_terminator=line[47:49],
            recommended_navaid=RecordLine.text(line, 50, 54),
            arc_radius=arc / 1000 if arc is not None else None,
            theta=RecordLine.tenths(line, 62, 66),
            rho=RecordLine.tenths(line, 66, 70),
            course=RecordLine.course(line, 70, 74),
            distance=distance,
            hold_time=hold_time,
            altitude_description=line[82],
            altitude1=RecordLine.altitude(line, 84, 89),
            altitude2=RecordLine.altitude(line, 89, 94),
            transition_altitude=RecordLine.altitude(line, 94, 99),
            speed=RecordLine.integer(line, 99, 102, optional=True),
            speed_description=line[117],
            vertical_angle=angle / 100 if angle is not None else None,
            center_fix=RecordLine.text(line, 106, 111),
            **common
        )


@dataclass(frozen=True, kw_only=True)
class SIDLine(ProcedureLine):
    SUBSECTION = AERODROME_SID


@dataclass(frozen=True, kw_only=True)
class STARLine(ProcedureLine):
    SUBSECTION = AERODROME_STAR


@dataclass(frozen=True, kw_only=True)
class ApproachLine(ProcedureLine):
    SUBSECTION = AERODROME_APPROACH


@dataclass(frozen=True, kw_only=True)
class PathPoint(EnrouteLine):
    """
    Landing threshold point of an RNAV approach. Registered as a fix under its runway name.
    """
    airport: str
    approach: str
    runway: str
    position: Coordinate

    @staticmethod
    def parse(line: str) -> PathPoint:
        common = RecordLine.common(line)
        RecordLine.check(line, 12, 13, AERODROME_PATH_POINT)
        RecordLine.check(line, 19, 21, "RW")
        return PathPoint(
            airport=line[6:10].strip(),
            approach=line[13:19].strip(),
            runway=line[19:24].strip(),
            position=RecordLine.coordinate(line, slice(40, 51), slice(51, 63)),
            **common
        )
