# Navigation aid records.
# VHF navaids (D) and NDB (DB) from the navaid section, localizers (PI) from the airport section.
# Navaids are both records and entities: they are kept as parsed in the navaid registry.
#
from __future__ import annotations

from dataclasses import dataclass

from cifpy.constants import SECTION
from cifpy.geo import Coordinate, Course
from cifpy.record.recordline import RecordLine


@dataclass(frozen=True, kw_only=True)
class Navaid(RecordLine):
    """
    Base class for all navigational aids.
    A navaid without magnetic variation (station declination) cannot anchor a magnetic radial.
    """
    identifier: str
    icao: str
    airport: str | None
    name: str | None
    position: Coordinate
    magnetic_variation: float | None
    frequency: float | None
    navaid_class: str
    elevation: int | None

    @staticmethod
    def parse(line: str) -> Navaid:
        if line[4] != SECTION.NAVAID.value:
            RecordLine.fail(4)
        if line[5] == " ":
            return Navaid.parse_vhf(line)
        if line[5] == "B":
            return Navaid.parse_ndb(line)
        RecordLine.fail(5)

    @staticmethod
    def parse_vhf(line: str) -> Navaid:
        common = RecordLine.common(line)
        RecordLine.check_empty(line, 12, 13)
        RecordLine.check_empty(line, 17, 19)
        RecordLine.check(line, 21, 22, "0", "1")
        RecordLine.check(line, 27, 28, "V", " ")
        RecordLine.check(line, 28, 29, "D", "T", "M", "I", "N", " ")

        vor = line[27] == "V"
        dme = line[28]
        position = RecordLine.coordinate(line, slice(32, 41), slice(41, 51), optional=True)
        dme_position = RecordLine.coordinate(line, slice(55, 64), slice(64, 74), optional=True)
        if position is None:
            position = dme_position
        if position is None:
            RecordLine.fail(32)

        freq = RecordLine.integer(line, 22, 27, optional=True)
        params = {
            "identifier": line[13:17].strip(),
            "icao": line[19:21],
            "airport": RecordLine.text(line, 6, 10),
            "name": RecordLine.text(line, 93, 123),
            "position": position,
            "magnetic_variation": RecordLine.variation(line, 74, 79),
            "frequency": freq / 100 if freq is not None else None,
            "navaid_class": line[27:32],
            "elevation": RecordLine.integer(line, 79, 84, optional=True),
        }
        params.update(common)

        if vor and dme == " ":
            return VOR(**params)
        if vor and dme == "D":
            return VORDME(dme_identifier=RecordLine.text(line, 51, 55), dme_position=dme_position, **params)
        if vor:
            return VORTAC(dme_identifier=RecordLine.text(line, 51, 55), dme_position=dme_position, **params)
        if dme in "TM":
            return TACAN(dme_identifier=RecordLine.text(line, 51, 55), dme_position=dme_position, **params)
        if dme == " ":
            RecordLine.fail(27)
        return DME(dme_identifier=RecordLine.text(line, 51, 55), dme_position=dme_position, **params)

    @staticmethod
    def parse_ndb(line: str) -> NDB:
        common = RecordLine.common(line)
        RecordLine.check_empty(line, 12, 13)
        RecordLine.check_empty(line, 17, 19)
        RecordLine.check(line, 21, 22, "0", "1")
        freq = RecordLine.integer(line, 22, 27, optional=True)
        return NDB(
            identifier=line[13:17].strip(),
            icao=line[19:21],
            airport=RecordLine.text(line, 6, 10),
            name=RecordLine.text(line, 93, 123),
            position=RecordLine.coordinate(line, slice(32, 41), slice(41, 51)),
            magnetic_variation=RecordLine.variation(line, 74, 79),
            frequency=freq / 10 if freq is not None else None,
            navaid_class=line[27:32],
            elevation=None,
            **common
        )

    def has_variation(self) -> bool:
        return self.magnetic_variation is not None


@dataclass(frozen=True, kw_only=True)
class VOR(Navaid):
    """
    VHF Omnidirectional Range
    """
    pass


@dataclass(frozen=True, kw_only=True)
class DME(Navaid):
    """
    Distance Measuring Equipment, also ILS/DME
    """
    dme_identifier: str | None
    dme_position: Coordinate | None


@dataclass(frozen=True, kw_only=True)
class VORDME(VOR):
    dme_identifier: str | None
    dme_position: Coordinate | None


@dataclass(frozen=True, kw_only=True)
class VORTAC(VOR):
    dme_identifier: str | None
    dme_position: Coordinate | None


@dataclass(frozen=True, kw_only=True)
class TACAN(DME):
    pass


@dataclass(frozen=True, kw_only=True)
class NDB(Navaid):
    """
    Non Directional Beacon
    """
    pass


@dataclass(frozen=True, kw_only=True)
class Localizer(Navaid):
    """
    ILS, LOC, LDA, or SDF localizer. Found in the airport section (PI).
    """
    runway: str | None
    category: str
    bearing: Course | None

    @staticmethod
    def parse(line: str) -> Localizer:
        common = RecordLine.common(line)
        RecordLine.check(line, 12, 13, "I")
        RecordLine.check(line, 21, 22, "0", "1")
        freq = RecordLine.integer(line, 22, 27, optional=True)
        airport = line[6:10].strip()
        runway = RecordLine.text(line, 27, 32)
        return Localizer(
            identifier=line[13:17].strip(),
            icao=line[10:12],
            airport=airport,
            name=f"{airport} {runway}" if runway is not None else airport,
            position=RecordLine.coordinate(line, slice(32, 41), slice(41, 51)),
            magnetic_variation=RecordLine.variation(line, 90, 95),
            frequency=freq / 100 if freq is not None else None,
            navaid_class="ILS",
            elevation=None,
            runway=runway,
            category=line[17],
            bearing=RecordLine.course(line, 51, 55),
            **common
        )
