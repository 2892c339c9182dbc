# Line dispatch and parallel, order preserving parsing of a CIFP file.
#
import os
import logging
from concurrent.futures import ProcessPoolExecutor
from itertools import dropwhile

from cifpy.constants import SECTION, HEADER_PREFIX, RECORD_LENGTH
from cifpy.exceptions import FormatViolation
from cifpy.parameters import PARSE_WORKERS, PARSE_CHUNKSIZE, PARALLEL_MIN_LINES
from cifpy.record.recordline import RecordLine
from cifpy.record.airspace import AirspaceLine
from cifpy.record.navaid import Navaid
from cifpy.record.enroute import EnrouteLine
from cifpy.record.aerodrome import Aerodrome

logger = logging.getLogger("Parser")


def parse(line: str) -> RecordLine | None:
    """
    Parses one CIFP line.
    Returns None for record categories that are not handled.

    :param      line:  The line
    :type       line:  str

    :raises     FormatViolation: the line does not match its record format
    """
    line = line.rstrip("\r\n")
    if len(line) < RECORD_LENGTH:
        raise FormatViolation(len(line))

    category = line[4]
    if category in (SECTION.MORA.value, SECTION.AIRSPACE.value):
        return AirspaceLine.parse(line)
    if category == SECTION.NAVAID.value:
        return Navaid.parse(line)
    if category == SECTION.ENROUTE.value:
        return EnrouteLine.parse(line)
    if category in (SECTION.AIRPORT.value, SECTION.HELIPORT.value):
        return Aerodrome.parse(line)
    return None


def try_parse(line: str) -> RecordLine | None:
    # Unparseable lines are absent lines.
    try:
        return parse(line)
    except FormatViolation as e:
        logger.debug(f":try_parse: {e}: {line.rstrip()}")
        return None


def parse_lines(lines, workers: int | None = None) -> list:
    """
    Parses all lines of a CIFP file, skipping leading header lines.
    Lines are parsed in parallel but records are returned in file order.
    Lines that cannot be parsed are dropped.

    :param      lines:    The lines
    :type       lines:    iterable of str
    :param      workers:  Number of processes, 1 to parse in this process
    :type       workers:  int

    :returns:   The records
    :rtype:     list[RecordLine]
    """
    data = list(dropwhile(lambda l: l.startswith(HEADER_PREFIX), lines))
    if workers is None:
        workers = PARSE_WORKERS if PARSE_WORKERS > 0 else (os.cpu_count() or 1)

    if workers <= 1 or len(data) < PARALLEL_MIN_LINES:
        results = list(map(try_parse, data))
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(try_parse, data, chunksize=PARSE_CHUNKSIZE))

    records = [r for r in results if r is not None]
    logger.info(f":parse_lines: {len(records)}/{len(data)} lines parsed ({len(data) - len(records)} dropped)")
    return records
