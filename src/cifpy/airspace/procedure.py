"""
A Procedure is a named, ordered list of steps (legs) at an airport:
SID, STAR, or approach. All transitions of a procedure are kept together.

Each step is built from one procedure line: the path terminator selects the
leg endpoint, via, and termination condition. Steps are first built with
names, then resolved against the fix and navaid registries.
"""
from __future__ import annotations

import logging
from abc import ABC

from cifpy.constants import PATH_TERMINATION, PROC_TYPE
from cifpy.exceptions import ResolutionError
from cifpy.geo import Coordinate, MagneticCourse
from cifpy.record import ProcedureLine
from cifpy.airspace.restriction import AltitudeRestriction, SpeedRestriction
from cifpy.airspace.resolver import concretize_navaid, local_magnetic_variation
from cifpy.airspace.geometry import Fix, Direct, Distance, Arc
from cifpy.airspace.geometry import UnresolvedWaypoint, UnresolvedRadial, UnresolvedDistance, UnresolvedFixRadialDistance
from cifpy.airspace.hold import Racetrack

logger = logging.getLogger("Procedure")


FIX_TERMINATED = ["IF", "TF", "DF", "CF"]
ALTITUDE_TERMINATED = ["CA", "FA", "VA"]
DISTANCE_TERMINATED = ["CD", "FD", "VD"]
RADIAL_TERMINATED = ["CR", "VR"]
HOLDS = {
    "HA": PATH_TERMINATION.UNTIL_ALTITUDE,
    "HF": PATH_TERMINATION.UNTIL_CROSSING,
    "HM": PATH_TERMINATION.UNTIL_MANUAL
}
INTERCEPTS = ["CI", "VI"]
MANUALS = ["FM", "VM"]


class ProcedureStep:
    """
    One leg of a procedure.
    """

    def __init__(self, line: ProcedureLine, endpoint=None, via=None,
                 termination: PATH_TERMINATION = PATH_TERMINATION.NONE,
                 course=None, resolved: bool = False):
        self.line = line
        self.transition = line.transition
        self.route_type = line.route_type
        self.sequence = line.sequence_number
        self.fix = line.fix
        self.path_terminator = line.path_terminator
        self.turn_direction = line.turn_direction
        self.vertical_angle = line.vertical_angle
        self.endpoint = endpoint
        self.via = via
        self.termination = termination
        self.course = course
        self.altitude = AltitudeRestriction.from_description(line.altitude_description, line.altitude1, line.altitude2)
        self.speed = SpeedRestriction.from_description(line.speed_description, line.speed)
        self.resolved = resolved

    @staticmethod
    def from_line(line: ProcedureLine, variation: float | None = None) -> ProcedureStep:
        """
        Builds an unresolved step from its line.
        Magnetic courses and bearings are anchored with variation when supplied.

        :param      line:       The procedure line
        :type       line:       ProcedureLine
        :param      variation:  The local magnetic variation, usually the airport's
        :type       variation:  float

        :raises     RestrictionViolation: altitude or speed restriction is inconsistent
        """
        def anchored(degrees):
            return MagneticCourse(degrees, variation) if degrees is not None else None

        pt = line.path_terminator
        course = line.course
        if isinstance(course, MagneticCourse) and variation is not None:
            course = course.to_magnetic(variation)

        fix = UnresolvedWaypoint(line.fix) if line.fix is not None else None
        navaid = UnresolvedWaypoint(line.recommended_navaid) if line.recommended_navaid is not None else None
        endpoint = None
        via = None
        termination = PATH_TERMINATION.NONE

        if pt in FIX_TERMINATED:
            endpoint = fix
            termination = PATH_TERMINATION.UNTIL_CROSSING
        elif pt == "PI":
            endpoint = fix
            termination = PATH_TERMINATION.UNTIL_CROSSING | PATH_TERMINATION.PROCEDURE_TURN
        elif pt in ALTITUDE_TERMINATED:
            termination = PATH_TERMINATION.UNTIL_ALTITUDE
        elif pt in DISTANCE_TERMINATED:
            nm = line.distance if line.distance is not None else line.rho
            reference = navaid if navaid is not None else fix
            if nm is None:
                logger.warning(f":from_line: {line.airport} {line.name} {pt} leg {line.sequence_number} has no distance")
            elif reference is None:
                endpoint = Distance(None, nm)  # from the leg start
            elif line.theta is not None:
                endpoint = UnresolvedFixRadialDistance(reference, anchored(line.theta), nm)
            else:
                endpoint = UnresolvedDistance(reference, nm)
            termination = PATH_TERMINATION.UNTIL_DISTANCE
        elif pt == "FC":
            if fix is not None and line.distance is not None:
                endpoint = UnresolvedDistance(fix, line.distance)
            termination = PATH_TERMINATION.UNTIL_DISTANCE
        elif pt in RADIAL_TERMINATED:
            if navaid is not None and line.theta is not None:
                endpoint = UnresolvedRadial(navaid, MagneticCourse(line.theta))
            termination = PATH_TERMINATION.UNTIL_CROSSING
        elif pt == "AF":
            if line.rho is not None and line.recommended_navaid is not None:
                via = Arc(None, line.rho, MagneticCourse(line.theta) if line.theta is not None else None, center_name=line.recommended_navaid)
            endpoint = fix
            termination = PATH_TERMINATION.UNTIL_CROSSING
        elif pt == "RF":
            if line.arc_radius is not None and line.center_fix is not None:
                via = Arc(None, line.arc_radius, None, center_name=line.center_fix)
            endpoint = fix
            termination = PATH_TERMINATION.UNTIL_CROSSING
        elif pt in HOLDS.keys():
            if course is not None:
                via = Racetrack(None, course, distance=line.distance, time=line.hold_time,
                                left_turns=line.turn_direction == "L", waypoint=line.fix)
            else:
                logger.warning(f":from_line: {line.airport} {line.name} hold at {line.fix} has no inbound course")
            if pt == "HF":
                endpoint = fix
            termination = PATH_TERMINATION.HOLD | HOLDS[pt]
        elif pt in INTERCEPTS:
            termination = PATH_TERMINATION.UNTIL_INTERCEPT
        elif pt in MANUALS:
            termination = PATH_TERMINATION.UNTIL_MANUAL
        else:
            logger.warning(f":from_line: {line.airport} {line.name}: unknown path terminator {pt}")

        return ProcedureStep(line, endpoint=endpoint, via=via, termination=termination, course=course)

    def point(self) -> Coordinate | None:
        """
        Resolved point where this step ends, if any.
        """
        if isinstance(self.endpoint, Fix):
            return self.endpoint.point
        return None

    def resolve(self, fixes: dict, navaids: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> ProcedureStep:
        """
        Returns a copy of this step with all named parts anchored.

        :raises     ResolutionError: a name cannot be resolved
        """
        endpoint = self.endpoint
        if isinstance(endpoint, UnresolvedWaypoint):
            endpoint = endpoint.resolve(fixes, ref_coord=ref_coord, ref_name=ref_name)
        elif isinstance(endpoint, UnresolvedRadial):
            endpoint = endpoint.resolve(navaids, ref_coord=ref_coord, ref_name=ref_name)
        elif isinstance(endpoint, UnresolvedDistance):
            endpoint = endpoint.resolve(fixes, ref_coord=ref_coord, ref_name=ref_name)
        elif isinstance(endpoint, UnresolvedFixRadialDistance):
            endpoint = endpoint.resolve(fixes, navaids, ref_coord=ref_coord, ref_name=ref_name, variation=endpoint.bearing.variation)

        end = endpoint.point if isinstance(endpoint, Fix) else None
        via = self.via
        if isinstance(via, Arc):
            if self.path_terminator == "AF" and isinstance(via.arc_to, MagneticCourse) and not via.arc_to.is_anchored():
                station = concretize_navaid(navaids, via.center_name, ref_coord=ref_coord, ref_name=ref_name)
                if station.magnetic_variation is not None:
                    via = Arc(station.position, via.radius, via.arc_to.resolve(station.magnetic_variation), center_name=via.center_name)
            via = via.resolve(fixes, ref_coord=ref_coord, ref_name=ref_name, end=end)
        elif isinstance(via, Racetrack):
            via = via.resolve(fixes, ref_coord=ref_coord, ref_name=ref_name)
        elif via is None and end is not None:
            via = Direct(end)

        step = ProcedureStep(self.line, endpoint=endpoint, via=via, termination=self.termination,
                             course=self.course, resolved=True)
        return step

    def getInfo(self):
        return {
            "sequence": self.sequence,
            "transition": self.transition,
            "path_terminator": self.path_terminator,
            "fix": self.fix,
            "endpoint": self.endpoint.getInfo() if self.endpoint is not None else None,
            "via": self.via.getInfo() if self.via is not None else None,
            "termination": str(self.termination),
            "course": self.course.getInfo() if self.course is not None else None,
            "altitude": self.altitude.getInfo(),
            "speed": self.speed.getInfo(),
            "resolved": self.resolved
        }

    def __str__(self):
        return f"{self.sequence:03d} {self.path_terminator} {self.fix or ''} {self.altitude} {self.speed}"


class Procedure(ABC):
    """
    A Procedure is a named array of ProcedureStep at an airport.
    Abstract class.
    """

    PROC_TYPE: PROC_TYPE | None = None

    def __init__(self, lines: list, fixes: dict, navaids: dict, aerodromes: dict):
        """
        Builds a procedure from its contiguous lines.

        :param      lines:       The procedure lines, all with the same airport and name
        :type       lines:       list[ProcedureLine]
        :param      fixes:       The fix registry
        :type       fixes:       dict[str, list[Coordinate]]
        :param      navaids:     The navaid registry
        :type       navaids:     dict[str, list[Navaid]]
        :param      aerodromes:  The aerodromes
        :type       aerodromes:  dict[str, Aerodrome]

        :raises     RestrictionViolation: a line has inconsistent restrictions
        """
        if len(lines) == 0:
            raise ValueError("Procedure needs at least one line")
        self.airport = lines[0].airport
        self.name = lines[0].name
        self.steps: list[ProcedureStep] = []

        aerodrome = aerodromes.get(self.airport)
        location = aerodrome.location if aerodrome is not None else None
        variation = self.variation(aerodrome, navaids)

        last_transition = None
        ref_coord = location
        for line in lines:
            if line.transition != last_transition:  # each transition starts from the airport
                ref_coord = location
                last_transition = line.transition
            step = ProcedureStep.from_line(line, variation)
            try:
                step = step.resolve(fixes, navaids, ref_coord=ref_coord)
                if step.point() is not None:
                    ref_coord = step.point()
            except ResolutionError as e:
                logger.warning(f":__init__: {type(self).__name__} {self.airport} {self.name} leg {line.sequence_number}: {e}")
            self.steps.append(step)

    def variation(self, aerodrome, navaids: dict) -> float | None:
        if aerodrome is None:
            return None
        if aerodrome.magnetic_variation is not None:
            return aerodrome.magnetic_variation
        try:
            source, variation = local_magnetic_variation(navaids, aerodrome.location)
            return variation
        except ResolutionError:
            logger.debug(f":variation: no magnetic variation for {self.airport}")
        return None

    def transitions(self) -> dict:
        """
        Steps grouped by transition, in order. Common route has no transition name.
        """
        ret = {}
        for step in self.steps:
            ret.setdefault(step.transition, []).append(step)
        return ret

    def is_resolved(self) -> bool:
        return all(s.resolved for s in self.steps)

    def getKey(self):
        return (self.airport, self.name)

    def getInfo(self):
        return {
            "type": type(self).__name__,
            "airport": self.airport,
            "name": self.name,
            "transitions": [t for t in self.transitions().keys() if t is not None],
            "steps": [s.getInfo() for s in self.steps]
        }

    def __str__(self):
        return f"{self.airport} {type(self).__name__} {self.name}"


class SID(Procedure):
    """
    A Standard Instrument Departure is a special instance of a Procedure.
    """
    PROC_TYPE = PROC_TYPE.SID

    def runways(self) -> list:
        return [t for t in self.transitions().keys() if t is not None and t.startswith("RW")]


class STAR(Procedure):
    """
    A Standard Terminal Arrival Route is a special instance of a Procedure.
    """
    PROC_TYPE = PROC_TYPE.STAR

    def runways(self) -> list:
        return [t for t in self.transitions().keys() if t is not None and t.startswith("RW")]


class Approach(Procedure):
    """
    Approach procedure to runway.
    """
    PROC_TYPE = PROC_TYPE.APPROACH

    def is_final_fix_point(self, step: ProcedureStep) -> bool:
        return len(step.line.description) > 3 and step.line.description[3] in ["E", "F"]

    def missed_approach(self) -> list:
        """
        Steps after the missed approach point.
        """
        for i, step in enumerate(self.steps):
            if len(step.line.description) > 3 and step.line.description[3] == "M":
                return self.steps[i + 1:]
        return []
