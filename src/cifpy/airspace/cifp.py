"""
The CIFP entity graph: all navigation entities of a FAA CIFP file,
cross referenced and ready for lookup.

Lines are parsed in parallel, then consumed in file order. Point entities
(navaids, waypoints, aerodromes, runways...) go straight into registries.
Multi-line entities are grouped from contiguous lines and assembled once
all points are known: airways, SIDs, STARs, and approaches are assembled
in four concurrent passes.
"""
from __future__ import annotations

import os
import copy
import logging
from concurrent.futures import ThreadPoolExecutor

from cifpy.constants import ID_SEP, AIRSPACE_CLASS
from cifpy.exceptions import CIFPError, ResolutionError, RestrictionViolation
from cifpy.parameters import DATA_DIR, CIFP_FILE, ASSEMBLY_WORKERS
from cifpy.record import parse_lines
from cifpy.record import GridMORA, ControlledAirspace, RestrictiveAirspace, Navaid
from cifpy.record import Waypoint, AirwayFixLine, HoldingLine, SIDLine, STARLine, ApproachLine, PathPoint
from cifpy.record import Aerodrome, Airport, Runway, AirportMSA
from cifpy.geo import Coordinate, MagneticCourse
from cifpy.airspace.resolver import register, concretize, try_concretize, concretize_navaid, try_concretize_navaid
from cifpy.airspace.controlledairspace import Airspace
from cifpy.airspace.airway import Airway, airway_network, route
from cifpy.airspace.procedure import Procedure, SID, STAR, Approach
from cifpy.airspace.hold import Racetrack

logger = logging.getLogger("CIFP")


def same_airway(prev: AirwayFixLine, line: AirwayFixLine) -> bool:
    return line.airway_identifier == prev.airway_identifier and line.sequence_number > prev.sequence_number


def same_procedure(prev, line) -> bool:
    return (line.airport, line.name) == (prev.airport, prev.name)


def same_airspace(prev: ControlledAirspace, line: ControlledAirspace) -> bool:
    return (line.center, line.multiple_code) == (prev.center, prev.multiple_code)


# Multi-line entities: record type and test for a line continuing the open run.
GROUPED = {
    ControlledAirspace: same_airspace,
    AirwayFixLine: same_airway,
    SIDLine: same_procedure,
    STARLine: same_procedure,
    ApproachLine: same_procedure
}


def grouping(record):
    for kind in GROUPED:
        if isinstance(record, kind):
            return kind
    return None


class CIFP:
    """
    Loads all navigation entities of a CIFP file.
    """

    def __init__(self, lines=None, workers: int | None = None):
        """
        Builds the entity graph from CIFP lines. Lines that cannot be parsed are dropped.

        :param      lines:    The lines of the CIFP file, with or without header lines
        :type       lines:    iterable of str
        :param      workers:  Number of processes used to parse lines
        :type       workers:  int
        """
        self.moras: list[GridMORA] = []
        self.airspaces: list[Airspace] = []
        self.aerodromes: dict[str, Airport] = {}
        self.fixes: dict[str, list[Coordinate]] = {}
        self.navaids: dict[str, list[Navaid]] = {}
        self.airways: dict[str, list[Airway]] = {}
        self.procedures: dict[str, list[Procedure]] = {}
        self.runways: dict[str, list[Runway]] = {}
        self.holds: dict[str, list[Racetrack]] = {}
        self._variations: dict[str, list] = {}  # name: [(position, magnetic variation)]

        if lines is not None:
            self.load(lines, workers=workers)

    @classmethod
    def from_file(cls, filename: str | None = None, workers: int | None = None) -> CIFP:
        """
        Builds the entity graph from a CIFP file.

        :raises     CIFPError: the file cannot be read
        """
        cifp = cls()
        ret = cifp.loadFromFile(filename, workers=workers)
        if not ret[0]:
            raise CIFPError(ret[1])
        return cifp

    def loadFromFile(self, filename: str | None = None, workers: int | None = None):
        """
        Loads a CIFP file, by default FAACIFP18 in the data directory.

        :returns:   [status, message]
        :rtype:     list
        """
        if filename is None:
            filename = os.path.join(DATA_DIR, CIFP_FILE)
        if not os.path.exists(filename):
            logger.warning(f":loadFromFile: file not found {filename}")
            return [False, f"CIFP::loadFromFile: file not found {filename}"]

        with open(filename, "r", encoding="ascii", errors="replace") as fp:
            lines = fp.readlines()
        logger.debug(f":loadFromFile: {filename}: {len(lines)} lines")
        self.load(lines, workers=workers)
        return [True, f"CIFP::loadFromFile: {filename} loaded"]

    def load(self, lines, workers: int | None = None):
        """
        Consumes records in file order. Any record that does not continue the open run closes it.
        """
        records = parse_lines(lines, workers=workers)

        groups = dict([(kind, []) for kind in GROUPED])
        holding_lines = []
        run = []
        run_kind = None

        for record in records:
            kind = grouping(record)
            if len(run) > 0 and (kind is not run_kind or not GROUPED[kind](run[-1], record)):
                groups[run_kind].append(run)
                run = []
            if kind is not None:
                run_kind = kind
                run.append(record)
            elif isinstance(record, HoldingLine):
                holding_lines.append(record)
            elif isinstance(record, (RestrictiveAirspace, AirportMSA)):
                continue
            else:
                self.absorb(record)
        if len(run) > 0:
            groups[run_kind].append(run)

        for run in groups[ControlledAirspace]:
            self.airspaces.append(Airspace(run))

        for line in holding_lines:
            self.add_hold(line)

        self.assemble(groups[AirwayFixLine], groups[SIDLine], groups[STARLine], groups[ApproachLine])

        logger.info(f":load: {len(self.fixes)} fixes, {len(self.navaids)} navaids, {len(self.aerodromes)} aerodromes, "
                    + f"{len(self.airways)} airways, {sum(len(p) for p in self.procedures.values())} procedures, "
                    + f"{len(self.airspaces)} airspaces")

    def absorb(self, record):
        """
        Adds a record that needs no grouping to the registries.
        """
        if isinstance(record, GridMORA):
            self.moras.append(record)
        elif isinstance(record, Navaid):  # includes localizers
            register(self.navaids, record.identifier, record)
            register(self.fixes, record.identifier, record.position)
            if record.magnetic_variation is not None:
                register(self._variations, record.identifier, (record.position, record.magnetic_variation))
        elif isinstance(record, Waypoint):
            register(self.fixes, record.identifier, record.position)
            if record.magnetic_variation is not None:
                register(self._variations, record.identifier, (record.position, record.magnetic_variation))
        elif isinstance(record, PathPoint):
            register(self.fixes, record.runway, record.position)
            register(self.fixes, record.airport + ID_SEP + record.runway, record.position)
        elif isinstance(record, Aerodrome):
            # heliports are only named points
            if isinstance(record, Airport):
                self.aerodromes[record.identifier] = record
            register(self.fixes, record.identifier, record.location)
        elif isinstance(record, Runway):
            name = "RW" + record.identifier
            register(self.fixes, name, record.endpoint)
            register(self.fixes, record.airport + ID_SEP + record.identifier, record.endpoint)
            self.runways.setdefault(record.airport, []).append(record)
        else:
            logger.debug(f":absorb: {type(record).__name__} ignored")

    def add_hold(self, line: HoldingLine):
        aerodrome = self.aerodromes.get(line.region)
        ref_coord = aerodrome.location if aerodrome is not None else None
        hold = Racetrack(None, line.inbound_course, distance=line.leg_length, time=line.leg_time,
                         left_turns=line.turn_direction == "L", waypoint=line.fix)
        try:
            hold = hold.resolve(self.fixes, ref_coord=ref_coord)
        except ResolutionError as e:
            logger.warning(f":add_hold: hold at {line.fix}: {e}")
            return
        if isinstance(hold.inbound_course, MagneticCourse) and not hold.inbound_course.is_anchored():
            variation = self.variation_at(line.fix, hold.point)
            if variation is not None:
                hold = Racetrack(hold.point, hold.inbound_course.resolve(variation), hold.distance, hold.time,
                                 hold.left_turns, waypoint=hold.waypoint)
            else:
                logger.debug(f":add_hold: hold at {line.fix}: no magnetic variation")
        register(self.holds, line.fix, hold)

    def variation_at(self, name: str, point: Coordinate) -> float | None:
        """
        Magnetic variation recorded for the named fix closest to point.
        """
        candidates = self._variations.get(name)
        if candidates is None:
            return None
        p, v = min(candidates, key=lambda c: c[0].distance_to(point))
        return v

    # #################
    #
    # ASSEMBLY
    #
    #
    def assemble_airways(self, runs: list) -> dict:
        airways = {}
        for run in runs:
            if len(run) < 2:
                logger.debug(f":assemble_airways: single point airway {run[0].airway_identifier} ignored")
                continue
            try:
                aw = Airway(run[0].airway_identifier, run, self.fixes)
            except ResolutionError as e:
                logger.warning(f":assemble_airways: airway {run[0].airway_identifier}: {e}")
                continue
            airways.setdefault(aw.identifier, []).append(aw)
        return airways

    def assemble_procedures(self, cls, runs: list) -> dict:
        procedures = {}
        for run in runs:
            try:
                proc = cls(run, self.fixes, self.navaids, self.aerodromes)
            except RestrictionViolation as e:
                logger.warning(f":assemble_procedures: {cls.__name__} {run[0].airport} {run[0].name}: {e}")
                continue
            procedures.setdefault(proc.name, []).append(proc)
        return procedures

    def assemble(self, airway_runs: list, sid_runs: list, star_runs: list, approach_runs: list):
        # Each pass only reads the registries and returns its own dictionary.
        with ThreadPoolExecutor(max_workers=ASSEMBLY_WORKERS) as executor:
            airways = executor.submit(self.assemble_airways, airway_runs)
            passes = [executor.submit(self.assemble_procedures, cls, runs)
                      for cls, runs in [(SID, sid_runs), (STAR, star_runs), (Approach, approach_runs)]]
            for identifier, aws in airways.result().items():
                self.airways.setdefault(identifier, []).extend(aws)
            for p in passes:
                for name, procs in p.result().items():
                    self.procedures.setdefault(name, []).extend(procs)

    # #################
    #
    # LOOKUP
    #
    #
    @property
    def cycle(self) -> int | None:
        """
        Data cycle, the most recent of all aerodromes.
        """
        if len(self.aerodromes) == 0:
            return None
        return max(a.cycle for a in self.aerodromes.values())

    def procedure(self, airport: str, name: str) -> Procedure | None:
        for p in self.procedures.get(name, []):
            if p.airport == airport:
                return p
        return None

    def airport_procedures(self, airport: str) -> list:
        return [p for procs in self.procedures.values() for p in procs if p.airport == airport]

    def concretize(self, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None):
        return concretize(self.fixes, name, ref_coord=ref_coord, ref_name=ref_name)

    def try_concretize(self, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None):
        return try_concretize(self.fixes, name, ref_coord=ref_coord, ref_name=ref_name)

    def concretize_navaid(self, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None):
        return concretize_navaid(self.navaids, name, ref_coord=ref_coord, ref_name=ref_name)

    def try_concretize_navaid(self, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None):
        return try_concretize_navaid(self.navaids, name, ref_coord=ref_coord, ref_name=ref_name)

    def airway_network(self):
        return airway_network(self.airways)

    def route(self, src: str, dst: str) -> list | None:
        return route(self.airway_network(), src, dst)

    def reduced(self) -> CIFP:
        """
        Copy restricted to class B and C airspaces, and to the aerodromes,
        procedures, and runways of their centers.
        """
        classes = {}
        for a in self.airspaces:
            if a.airspace_class is None:
                continue
            current = classes.get(a.center)
            if current is None or a.airspace_class.value < current.value:
                classes[a.center] = a.airspace_class
        centers = set([c for c, k in classes.items() if k in (AIRSPACE_CLASS.B, AIRSPACE_CLASS.C)])

        r = copy.copy(self)
        r.airspaces = [a for a in self.airspaces if a.airspace_class in (AIRSPACE_CLASS.B, AIRSPACE_CLASS.C)]
        r.aerodromes = dict([(k, v) for k, v in self.aerodromes.items() if k in centers])
        r.procedures = {}
        for name, procs in self.procedures.items():
            kept = [p for p in procs if p.airport in centers]
            if len(kept) > 0:
                r.procedures[name] = kept
        r.runways = dict([(k, v) for k, v in self.runways.items() if k in centers])
        return r

    def getInfo(self):
        """
        Returns instance information.
        """
        return {
            "type": "CIFP",
            "cycle": self.cycle,
            "moras": len(self.moras),
            "airspaces": len(self.airspaces),
            "aerodromes": len(self.aerodromes),
            "fixes": len(self.fixes),
            "navaids": len(self.navaids),
            "airways": len(self.airways),
            "procedures": sum(len(p) for p in self.procedures.values()),
            "runways": sum(len(r) for r in self.runways.values()),
            "holds": sum(len(h) for h in self.holds.values())
        }
