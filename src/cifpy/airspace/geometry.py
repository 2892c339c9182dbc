# Procedure leg geometry.
#
# An endpoint tells when a leg is over (is_condition_reached).
# A via tells which true course to fly now (turn). Vias are called once per control tick
# by an external driver with the current position and course.
#
# Legs are first built from record lines with unresolved parts (names),
# then resolved against the fix and navaid registries. Unresolved parts raise
# UnresolvedGeometryError if their geometry is used.
#
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import timedelta

from cifpy.constants import PATH_TERMINATION, RADIAL_TRACKING_TOLERANCE, STATION_PASSAGE_DISTANCE
from cifpy.constants import ARC_RADIUS_TOLERANCE, FIX_CROSSING_MAX_ERROR, INTERCEPT_ANGLE
from cifpy.exceptions import UnresolvedGeometryError
from cifpy.geo import Coordinate, NamedCoordinate, Course, TrueCourse, MagneticCourse, mk180, turn_towards
from cifpy.parameters import INTERSECTION_MAX_ITERATIONS
from cifpy.airspace.resolver import concretize, concretize_navaid, local_magnetic_variation, position

logger = logging.getLogger("Geometry")


class ProcedureEndpoint(ABC):

    @abstractmethod
    def is_condition_reached(self, termination: PATH_TERMINATION, position: Coordinate, altitude: int | None,
                             reference=None, tolerance: float = FIX_CROSSING_MAX_ERROR) -> bool:
        """
        Whether the leg terminating condition is reached.

        :param      termination:  The termination kind
        :type       termination:  PATH_TERMINATION
        :param      position:     The current position
        :type       position:     Coordinate
        :param      altitude:     The current altitude in feet
        :type       altitude:     int | None
        :param      reference:    A reference point, usually the previous leg resolved point
        :type       reference:    Coordinate | None
        :param      tolerance:    Tolerance in nautical miles
        :type       tolerance:    float
        """
        raise NotImplementedError

    def getInfo(self):
        return {"type": type(self).__name__}


class ProcedureVia(ABC):

    @abstractmethod
    def turn(self, position: Coordinate, current_course: Course, refresh_interval: timedelta, on_ground: bool) -> TrueCourse:
        """
        True course to steer until next call.

        :param      position:          The current position
        :type       position:          Coordinate
        :param      current_course:    The current course
        :type       current_course:    Course
        :param      refresh_interval:  Time until next call
        :type       refresh_interval:  timedelta
        :param      on_ground:         Whether the aircraft is on the ground
        :type       on_ground:         bool
        """
        raise NotImplementedError

    def controller(self):
        # Stateless vias are their own controller.
        return self

    def getInfo(self):
        return {"type": type(self).__name__}


################################
#
# RESOLVED ENDPOINTS AND VIAS
#
#
class Fix(ProcedureEndpoint):
    """
    Leg ends at a named point.
    """

    def __init__(self, point: NamedCoordinate):
        self.point = point

    @property
    def name(self):
        return self.point.name

    def is_condition_reached(self, termination, position, altitude, reference=None, tolerance=FIX_CROSSING_MAX_ERROR) -> bool:
        if PATH_TERMINATION.UNTIL_CROSSING not in termination:
            raise NotImplementedError(f"Fix cannot terminate {termination}")
        b, d = position.bearing_distance(self.point)
        if d <= tolerance:
            return True
        if isinstance(reference, Coordinate):
            # Crossed when the fix is behind, seen from the leg start
            rb, rd = reference.bearing_distance(self.point)
            if rb is not None:
                return abs(rb.angle(b)) > 90
        return False

    def getInfo(self):
        return {"type": type(self).__name__, "point": self.point.getInfo()}

    def __eq__(self, other):
        return isinstance(other, Fix) and self.point == other.point

    def __hash__(self):
        return hash(self.point)

    def __str__(self):
        return str(self.point)


class Direct(ProcedureVia):
    """
    Fly direct to a point.
    """

    def __init__(self, point: Coordinate):
        self.point = point

    def turn(self, position, current_course, refresh_interval, on_ground) -> TrueCourse:
        b, d = position.bearing_distance(self.point)
        return turn_towards(current_course, b if b is not None else current_course, refresh_interval, on_ground)

    def getInfo(self):
        return {"type": type(self).__name__, "point": self.point.getInfo()}


class Radial(ProcedureEndpoint, ProcedureVia):
    """
    A magnetic bearing from a station. Can be flown (tracking) or used as leg termination (crossing).
    The station must have a magnetic variation to anchor the radial.
    """

    def __init__(self, station, bearing: MagneticCourse):
        self.station = station
        self.bearing = bearing

    def magvar(self) -> float:
        if self.station is None:
            raise UnresolvedGeometryError("Cannot fly a floating radial.")
        if self.station.magnetic_variation is None:
            raise UnresolvedGeometryError("Cannot fly radials of DME.")
        return self.station.magnetic_variation

    def course(self) -> MagneticCourse:
        return MagneticCourse(self.bearing.degrees, self.magvar())

    def turn(self, position, current_course, refresh_interval, on_ground) -> TrueCourse:
        magvar = self.magvar()
        target = self.course()
        current_bearing, distance = self.station.position.bearing_distance(position)
        current_radial = current_bearing.to_magnetic(magvar) if current_bearing is not None else MagneticCourse(0, magvar)
        radial_error = target.angle(current_radial)

        if distance < STATION_PASSAGE_DISTANCE:
            return turn_towards(current_course, target, refresh_interval, on_ground)

        if radial_error + RADIAL_TRACKING_TOLERANCE < 0:
            return turn_towards(current_course, target + INTERCEPT_ANGLE, refresh_interval, on_ground)
        if radial_error - RADIAL_TRACKING_TOLERANCE > 0:
            return turn_towards(current_course, target - INTERCEPT_ANGLE, refresh_interval, on_ground)
        return turn_towards(current_course, target - radial_error, refresh_interval, on_ground)

    def is_condition_reached(self, termination, position, altitude, reference=None, tolerance=FIX_CROSSING_MAX_ERROR) -> bool:
        if self.station is None:
            raise UnresolvedGeometryError("Cannot reach a floating radial.")
        if PATH_TERMINATION.UNTIL_CROSSING not in termination:
            raise NotImplementedError(f"Radial cannot terminate {termination}")

        radial = self.course().to_true()
        context_bearing, d = self.station.position.bearing_distance(position)
        if context_bearing is None:
            raise ValueError("Position shouldn't be on top of the station.")

        if isinstance(reference, Coordinate):
            ref_bearing, rd = self.station.position.bearing_distance(reference)
            if ref_bearing is None:
                return True
            # crossed when reference and position are on either side of the radial
            return (radial.angle(ref_bearing) < 0) ^ (radial.angle(context_bearing) < 0)
        return abs(radial.angle(context_bearing)) <= RADIAL_TRACKING_TOLERANCE

    def intersection(self, other_point, other_course: Course) -> Coordinate | None:
        """
        Intersection of this radial with a course from another point.
        Relaxed search along the other course until the bearing from this station
        is within tracking tolerance of the radial.

        :param      other_point:   The other point (coordinate or navaid)
        :param      other_course:  The course from the other point
        :type       other_course:  Course

        :returns:   The intersection point, None if courses are parallel or the search does not converge
        :rtype:     Coordinate | None
        """
        radial = self.course().to_true()
        other_radial = other_course.to_true()
        if radial.degrees == other_radial.degrees:
            return None

        here = self.station.position
        there = position(other_point).coordinate()
        check_point = there

        distance = here.distance_to(there)
        b, d = here.bearing_distance(there)
        start_positive = b is None or mk180(b.degrees - radial.degrees) >= 0

        for i in range(INTERSECTION_MAX_ITERATIONS):
            b, d = here.bearing_distance(check_point)
            if b is None:  # station is on the other course
                return check_point
            error = mk180(b.degrees - radial.degrees)
            if abs(error) <= RADIAL_TRACKING_TOLERANCE:
                logger.debug(f":intersection: found after {i} iterations")
                return check_point
            distance = distance + abs(error) / 10 * (-1 if start_positive ^ (error >= 0) else 1)
            check_point = there.fix_radial_distance(other_radial, distance)

        logger.warning(f":intersection: radial {self} does not intersect {other_radial} from {there}")
        return None

    def getInfo(self):
        return {
            "type": type(self).__name__,
            "station": self.station.identifier if self.station is not None else None,
            "bearing": self.bearing.getInfo()
        }

    def __str__(self):
        return f"{self.station.identifier if self.station is not None else '?'}/{self.bearing}"


class Distance(ProcedureEndpoint):
    """
    Leg ends at a distance from a point, or from the reference point when point is None.
    """

    def __init__(self, point: Coordinate | None, nm: float):
        self.point = point
        self.nm = nm

    def is_condition_reached(self, termination, position, altitude, reference=None, tolerance=FIX_CROSSING_MAX_ERROR) -> bool:
        origin = self.point if self.point is not None else reference
        if origin is None:
            raise UnresolvedGeometryError("Distance endpoint needs a point or a reference.")
        return origin.distance_to(position) >= self.nm

    def getInfo(self):
        return {"type": type(self).__name__, "point": self.point.getInfo() if self.point is not None else None, "distance": self.nm}


class Arc(ProcedureVia):
    """
    Constant radius arc around a center, flown until arc_to radial.
    The center may be given by name and resolved later.
    """

    def __init__(self, center: Coordinate | None, radius: float, arc_to: Course | None, center_name: str | None = None):
        self.center = center
        self.center_name = center_name
        self.radius = radius
        self.arc_to = arc_to

    def turn(self, position, current_course, refresh_interval, on_ground) -> TrueCourse:
        if self.center is None or self.arc_to is None:
            raise UnresolvedGeometryError("Cannot fly a floating arc.")
        if self.radius <= 0:
            raise UnresolvedGeometryError("Cannot fly an arc with 0 radius.")

        arc_to = self.arc_to.to_true()
        bearing, distance = self.center.bearing_distance(position)

        if bearing is None or distance + ARC_RADIUS_TOLERANCE < self.radius:
            return turn_towards(current_course, bearing if bearing is not None else arc_to, refresh_interval, on_ground)
        if distance - ARC_RADIUS_TOLERANCE > self.radius:
            return turn_towards(current_course, bearing.reciprocal, refresh_interval, on_ground)

        if bearing.angle(arc_to) > 0:
            target = bearing + 90  # clockwise
        else:
            target = bearing - 90  # anticlockwise
        return turn_towards(current_course, target, refresh_interval, on_ground)

    def resolve(self, fixes: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None, end: Coordinate | None = None) -> Arc:
        """
        Anchors the arc center. If the arc has no target radial, it is computed
        from the center to the end point.
        """
        center = self.center
        if center is None:
            center = concretize(fixes, self.center_name, ref_coord=ref_coord, ref_name=ref_name)
        arc_to = self.arc_to
        if (arc_to is None or (isinstance(arc_to, MagneticCourse) and not arc_to.is_anchored())) and end is not None:
            arc_to, d = center.bearing_distance(end)
        return Arc(center, self.radius, arc_to, center_name=self.center_name)

    def getInfo(self):
        return {
            "type": type(self).__name__,
            "center": self.center.getInfo() if self.center is not None else self.center_name,
            "radius": self.radius,
            "arc_to": self.arc_to.getInfo() if self.arc_to is not None else None
        }


################################
#
# UNRESOLVED VARIANTS
#
#
class UnresolvedWaypoint(ProcedureEndpoint):
    """
    A fix known by name only.
    """

    def __init__(self, name: str):
        self.name = name

    def is_condition_reached(self, termination, position, altitude, reference=None, tolerance=FIX_CROSSING_MAX_ERROR) -> bool:
        raise UnresolvedGeometryError(f"Waypoint {self.name} must be resolved.")

    def resolve(self, fixes: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> Fix:
        return Fix(concretize(fixes, self.name, ref_coord=ref_coord, ref_name=ref_name))

    def resolve_navaid(self, navaids: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None):
        return concretize_navaid(navaids, self.name, ref_coord=ref_coord, ref_name=ref_name)

    def getInfo(self):
        return {"type": type(self).__name__, "name": self.name}

    def __str__(self):
        return self.name


class UnresolvedRadial(ProcedureEndpoint, ProcedureVia):

    def __init__(self, station: UnresolvedWaypoint, bearing: MagneticCourse):
        self.station = station
        self.bearing = bearing

    def turn(self, position, current_course, refresh_interval, on_ground) -> TrueCourse:
        raise UnresolvedGeometryError(f"Radial from {self.station} must be resolved.")

    def is_condition_reached(self, termination, position, altitude, reference=None, tolerance=FIX_CROSSING_MAX_ERROR) -> bool:
        raise UnresolvedGeometryError(f"Radial from {self.station} must be resolved.")

    def resolve(self, navaids: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> Radial:
        station = self.station.resolve_navaid(navaids, ref_coord=ref_coord, ref_name=ref_name)
        return Radial(station, self.bearing.to_magnetic(station.magnetic_variation))

    def getInfo(self):
        return {"type": type(self).__name__, "station": self.station.name, "bearing": self.bearing.getInfo()}


class UnresolvedDistance(ProcedureEndpoint):

    def __init__(self, point: UnresolvedWaypoint, nm: float):
        self.point = point
        self.nm = nm

    def is_condition_reached(self, termination, position, altitude, reference=None, tolerance=FIX_CROSSING_MAX_ERROR) -> bool:
        raise UnresolvedGeometryError("Resolve this endpoint first.")

    def resolve(self, fixes: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> Distance:
        return Distance(self.point.resolve(fixes, ref_coord=ref_coord, ref_name=ref_name).point, self.nm)

    def getInfo(self):
        return {"type": type(self).__name__, "point": self.point.name, "distance": self.nm}


class UnresolvedFixRadialDistance(ProcedureEndpoint):
    """
    A point at a distance along a magnetic radial from a fix.
    """

    def __init__(self, reference: UnresolvedWaypoint, bearing: MagneticCourse, nm: float):
        self.reference = reference
        self.bearing = bearing
        self.nm = nm

    def is_condition_reached(self, termination, position, altitude, reference=None, tolerance=FIX_CROSSING_MAX_ERROR) -> bool:
        raise UnresolvedGeometryError("Resolve this endpoint first.")

    def resolve(self, fixes: dict, navaids: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None,
                variation: float | None = None) -> Fix:
        """
        Resolves the reference fix and projects the point.
        Without variation, the local magnetic variation of the closest navaid is used.
        """
        fix = self.reference.resolve(fixes, ref_coord=ref_coord, ref_name=ref_name).point
        if variation is None:
            source, variation = local_magnetic_variation(navaids, fix)
        p = fix.fix_radial_distance(self.bearing.resolve(variation), self.nm)
        return Fix(p.named(f"{fix.name}{int(round(self.bearing.degrees)):03d}{int(round(self.nm)):03d}"))

    def getInfo(self):
        return {"type": type(self).__name__, "reference": self.reference.name, "bearing": self.bearing.getInfo(), "distance": self.nm}
