# Base class for all CIFP record lines and fixed-column field helpers.
# A record is one 132 column line of the FAA CIFP file (ARINC 424-18).
# Records are immutable. Each record class has a parse(line) static method
# that raises FormatViolation with the failing column if the line does not match.
#
from __future__ import annotations

from dataclasses import dataclass, fields

from cifpy.constants import RECORD_LENGTH, FILE_RECORD_NUMBER, CYCLE
from cifpy.exceptions import FormatViolation
from cifpy.geo import Coordinate, MagneticCourse, TrueCourse
from cifpy.utils import ArincLatitude, ArincLongitude, ArincVariation, ArincAltitude, ArincTenths


@dataclass(frozen=True, kw_only=True)
class RecordLine:
    record_type: str  # S(tandard) or T(ailored)
    area: str  # customer/area code, USA, CAN, PAC, LAM...
    file_record_number: int
    cycle: int

    @staticmethod
    def fail(column: int):
        raise FormatViolation(column)

    @staticmethod
    def check(line: str, start: int, end: int, *expected: str):
        if line[start:end] not in expected:
            RecordLine.fail(start)

    @staticmethod
    def check_empty(line: str, start: int, end: int):
        RecordLine.check(line, start, end, " " * (end - start))

    @staticmethod
    def common(line: str) -> dict:
        """
        Fields present on every record.
        """
        if len(line) < RECORD_LENGTH:
            RecordLine.fail(len(line))
        RecordLine.check(line, 0, 1, "S", "T")
        return {
            "record_type": line[0],
            "area": line[1:4].strip(),
            "file_record_number": RecordLine.integer(line, FILE_RECORD_NUMBER.start, FILE_RECORD_NUMBER.stop),
            "cycle": RecordLine.integer(line, CYCLE.start, CYCLE.stop),
        }

    @staticmethod
    def text(line: str, start: int, end: int) -> str | None:
        s = line[start:end].strip()
        return s if s != "" else None

    @staticmethod
    def integer(line: str, start: int, end: int, optional: bool = False) -> int | None:
        s = line[start:end].strip()
        if s == "" and optional:
            return None
        if not s.lstrip("-").isdecimal():
            RecordLine.fail(start)
        return int(s)

    @staticmethod
    def tenths(line: str, start: int, end: int) -> float | None:
        try:
            return ArincTenths(line[start:end])
        except ValueError:
            RecordLine.fail(start)

    @staticmethod
    def coordinate(line: str, lat: slice, lon: slice, optional: bool = False) -> Coordinate | None:
        if optional and line[lat].strip() == "" and line[lon].strip() == "":
            return None
        try:
            latitude = ArincLatitude(line[lat])
        except ValueError:
            RecordLine.fail(lat.start)
        try:
            longitude = ArincLongitude(line[lon])
        except ValueError:
            RecordLine.fail(lon.start)
        return Coordinate(latitude=latitude, longitude=longitude)

    @staticmethod
    def variation(line: str, start: int, end: int) -> float | None:
        try:
            return ArincVariation(line[start:end])
        except ValueError:
            RecordLine.fail(start)

    @staticmethod
    def altitude(line: str, start: int, end: int) -> int | None:
        try:
            return ArincAltitude(line[start:end])
        except ValueError:
            RecordLine.fail(start)

    @staticmethod
    def course(line: str, start: int, end: int) -> MagneticCourse | TrueCourse | None:
        """
        Course in tenths of degrees (1620 is 162.0°M) or whole true degrees (162T).
        Magnetic courses are returned without variation.
        """
        s = line[start:end]
        if s.strip() == "":
            return None
        if s.endswith("T") and s[:-1].isdecimal():
            return TrueCourse(int(s[:-1]))
        if not s.isdecimal():
            RecordLine.fail(start)
        return MagneticCourse(int(s) / 10)

    def getInfo(self):
        """
        Plain dictionary of all record fields.
        """
        def plain(v):
            if callable(getattr(v, "getInfo", None)):
                return v.getInfo()
            return v

        return {"class": type(self).__name__} | {f.name: plain(getattr(self, f.name)) for f in fields(self)}
