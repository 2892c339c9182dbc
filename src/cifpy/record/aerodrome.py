# Airport (P) and heliport (H) section records.
# The subsection is in column 12 for this section.
#
from __future__ import annotations

from dataclasses import dataclass

from cifpy.constants import SECTION
from cifpy.constants import AERODROME_REFERENCE, AERODROME_RUNWAY, AERODROME_TERMINAL_WAYPOINT, AERODROME_SID, AERODROME_STAR
from cifpy.constants import AERODROME_APPROACH, AERODROME_LOCALIZER, AERODROME_PATH_POINT, AERODROME_MSA
from cifpy.geo import Coordinate, Course
from cifpy.record.recordline import RecordLine
from cifpy.record.navaid import Localizer
from cifpy.record.enroute import Waypoint, SIDLine, STARLine, ApproachLine, PathPoint


@dataclass(frozen=True, kw_only=True)
class Aerodrome(RecordLine):
    """
    Airport or heliport reference point.
    """
    identifier: str
    icao: str
    iata: str | None
    name: str | None
    location: Coordinate
    magnetic_variation: float | None
    elevation: int | None
    transition_altitude: int | None
    transition_level: int | None
    usage: str  # Civil, Military, Private, Joint

    @staticmethod
    def parse(line: str):
        if line[4] not in (SECTION.AIRPORT.value, SECTION.HELIPORT.value):
            RecordLine.fail(4)
        RecordLine.check_empty(line, 5, 6)

        subsection = line[12]
        if subsection == AERODROME_REFERENCE:
            return Airport.parse_reference(line) if line[4] == SECTION.AIRPORT.value else Heliport.parse_reference(line)
        if subsection == AERODROME_RUNWAY:
            return Runway.parse(line)
        if subsection == AERODROME_TERMINAL_WAYPOINT:
            return Waypoint.parse(line)
        if subsection == AERODROME_SID:
            return SIDLine.parse(line)
        if subsection == AERODROME_STAR:
            return STARLine.parse(line)
        if subsection == AERODROME_APPROACH:
            return ApproachLine.parse(line)
        if subsection == AERODROME_PATH_POINT:
            return PathPoint.parse(line)
        if subsection == AERODROME_LOCALIZER:
            return Localizer.parse(line)
        if subsection == AERODROME_MSA:
            return AirportMSA.parse(line)
        RecordLine.fail(12)

    @classmethod
    def parse_reference(cls, line: str):
        common = RecordLine.common(line)
        RecordLine.check(line, 21, 22, "0", "1")
        RecordLine.check(line, 80, 81, "C", "M", "P", "J", " ")
        return cls(
            identifier=line[6:10].strip(),
            icao=line[10:12],
            iata=RecordLine.text(line, 13, 16),
            name=RecordLine.text(line, 93, 123),
            location=RecordLine.coordinate(line, slice(32, 41), slice(41, 51)),
            magnetic_variation=RecordLine.variation(line, 51, 56),
            elevation=RecordLine.integer(line, 56, 61, optional=True),
            transition_altitude=RecordLine.integer(line, 70, 75, optional=True),
            transition_level=RecordLine.integer(line, 75, 80, optional=True),
            usage=line[80],
            **common
        )


@dataclass(frozen=True, kw_only=True)
class Airport(Aerodrome):
    pass


@dataclass(frozen=True, kw_only=True)
class Heliport(Aerodrome):
    pass


@dataclass(frozen=True, kw_only=True)
class Runway(RecordLine):
    """
    Runway threshold. Registered as a fix as RW<id> and <airport>/<id>.
    """
    airport: str
    identifier: str
    length: int | None  # ft
    magnetic_bearing: Course | None
    endpoint: Coordinate
    threshold_elevation: int | None
    displaced_threshold: int | None
    threshold_crossing_height: int | None
    width: int | None  # ft
    localizer: str | None

    @staticmethod
    def parse(line: str) -> Runway:
        common = RecordLine.common(line)
        RecordLine.check(line, 13, 15, "RW")
        RecordLine.check(line, 21, 22, "0", "1")
        return Runway(
            airport=line[6:10].strip(),
            identifier=line[15:18].strip(),
            length=RecordLine.integer(line, 22, 27, optional=True),
            magnetic_bearing=RecordLine.course(line, 27, 31),
            endpoint=RecordLine.coordinate(line, slice(32, 41), slice(41, 51)),
            threshold_elevation=RecordLine.integer(line, 66, 71, optional=True),
            displaced_threshold=RecordLine.integer(line, 71, 75, optional=True),
            threshold_crossing_height=RecordLine.integer(line, 75, 77, optional=True),
            width=RecordLine.integer(line, 77, 80, optional=True),
            localizer=RecordLine.text(line, 81, 85),
            **common
        )


@dataclass(frozen=True, kw_only=True)
class AirportMSA(RecordLine):
    """
    Minimum sector altitude, recognized but not used.
    """
    airport: str
    center: str

    @staticmethod
    def parse(line: str) -> AirportMSA:
        common = RecordLine.common(line)
        return AirportMSA(airport=line[6:10].strip(), center=line[13:18].strip(), **common)
