# Airspace records: grid MORA (AS), controlled airspace (UC) and restrictive airspace (UR).
#
from __future__ import annotations

from dataclasses import dataclass

from cifpy.constants import SECTION, MORA_GRID, AIRSPACE_CONTROLLED, AIRSPACE_RESTRICTIVE
from cifpy.geo import Coordinate
from cifpy.record.recordline import RecordLine

BOUNDARY_VIAS = "ACGHLR"  # Arc by edge, Circle, Great circle, rHumb line, Left arc, Right arc
END_OF_DESCRIPTION = "E"


class AirspaceLine(RecordLine):
    """
    Dispatches airspace section lines.
    """

    @staticmethod
    def parse(line: str) -> GridMORA | ControlledAirspace | RestrictiveAirspace:
        if line[4] == SECTION.MORA.value and line[5] == MORA_GRID:
            return GridMORA.parse(line)
        if line[4] == SECTION.AIRSPACE.value:
            if line[5] == AIRSPACE_CONTROLLED:
                return ControlledAirspace.parse(line)
            if line[5] == AIRSPACE_RESTRICTIVE:
                return RestrictiveAirspace.parse(line)
        RecordLine.fail(5)


@dataclass(frozen=True, kw_only=True)
class GridMORA(RecordLine):
    """
    Minimum off-route altitudes for 30 one degree cells east of the starting point.
    Altitudes are in feet, None when unknown.
    """
    start_latitude: int
    start_longitude: int
    moras: tuple

    @staticmethod
    def parse(line: str) -> GridMORA:
        common = RecordLine.common(line)
        RecordLine.check_empty(line, 6, 13)
        RecordLine.check(line, 13, 14, "N", "S")
        RecordLine.check(line, 16, 17, "E", "W")
        RecordLine.check_empty(line, 20, 30)
        RecordLine.check_empty(line, 120, 123)

        lat = RecordLine.integer(line, 14, 16)
        lon = RecordLine.integer(line, 17, 20)
        moras = []
        for i in range(30, 120, 3):
            v = line[i:i + 3]
            if v == "UNK":
                moras.append(None)
            else:
                moras.append(RecordLine.integer(line, i, i + 3) * 100)

        return GridMORA(
            start_latitude=lat if line[13] == "N" else -lat,
            start_longitude=lon if line[16] == "E" else -lon,
            moras=tuple(moras),
            **common
        )


@dataclass(frozen=True, kw_only=True)
class ControlledAirspace(RecordLine):
    """
    One boundary point of a controlled airspace (class B, C, D, TRSA...).
    Consecutive lines with the same center and multiple code describe one airspace.
    """
    icao: str
    airspace_type: str
    center: str
    airspace_class: str | None
    multiple_code: str
    sequence_number: int
    boundary_via: str
    position: Coordinate | None
    arc_origin: Coordinate | None
    arc_distance: float | None
    arc_bearing: float | None
    lower_limit: int | None
    lower_unit: str | None
    upper_limit: int | None
    upper_unit: str | None
    name: str | None

    @staticmethod
    def limit(line: str, start: int, end: int) -> int | None:
        s = line[start:end].strip()
        if s == "GND":
            return 0
        if s in ("UNLTD", "NOTSP", ""):
            return None
        return RecordLine.altitude(line, start, end)

    @staticmethod
    def parse(line: str) -> ControlledAirspace:
        common = RecordLine.common(line)
        RecordLine.check(line, 16, 17, " ", "A", "B", "C", "D", "E", "G")
        RecordLine.check_empty(line, 17, 19)
        RecordLine.check(line, 24, 25, "0", "1")
        RecordLine.check(line, 30, 31, *BOUNDARY_VIAS)
        RecordLine.check(line, 31, 32, " ", END_OF_DESCRIPTION)
        RecordLine.check(line, 86, 87, " ", "M", "A")
        RecordLine.check(line, 92, 93, " ", "M", "A")

        return ControlledAirspace(
            icao=line[6:8],
            airspace_type=line[8],
            center=line[9:14].strip(),
            airspace_class=RecordLine.text(line, 16, 17),
            multiple_code=line[19],
            sequence_number=RecordLine.integer(line, 20, 24),
            boundary_via=line[30:32],
            position=RecordLine.coordinate(line, slice(32, 41), slice(41, 51), optional=True),
            arc_origin=RecordLine.coordinate(line, slice(51, 60), slice(60, 70), optional=True),
            arc_distance=RecordLine.tenths(line, 70, 74),
            arc_bearing=RecordLine.tenths(line, 74, 78),
            lower_limit=ControlledAirspace.limit(line, 81, 86),
            lower_unit=RecordLine.text(line, 86, 87),
            upper_limit=ControlledAirspace.limit(line, 87, 92),
            upper_unit=RecordLine.text(line, 92, 93),
            name=RecordLine.text(line, 93, 123),
            **common
        )

    def ends_region(self) -> bool:
        return self.boundary_via[1] == END_OF_DESCRIPTION


@dataclass(frozen=True, kw_only=True)
class RestrictiveAirspace(RecordLine):
    """
    Restrictive airspace lines are recognized but not used.
    """
    icao: str
    restrictive_type: str
    designation: str

    @staticmethod
    def parse(line: str) -> RestrictiveAirspace:
        common = RecordLine.common(line)
        return RestrictiveAirspace(icao=line[6:8], restrictive_type=line[8], designation=line[9:19].strip(), **common)
