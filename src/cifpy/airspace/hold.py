# Holding patterns.
#
# Racetrack is the immutable definition of a hold: fix, inbound course, leg length or time, turn direction.
# Flying it needs a state (entry type, current leg, abeam point...) kept in a RacetrackState.
# The same Racetrack can back several independent controllers.
#
from __future__ import annotations

import logging
from datetime import timedelta

from cifpy.constants import HOLD_STATE, ENTRY_TYPE, FIX_CROSSING_MAX_ERROR, COURSE_STABLE_TOLERANCE, TEARDROP_OFFSET
from cifpy.constants import DIRECT_ENTRY_LIMIT, TEARDROP_ENTRY_LIMIT
from cifpy.exceptions import UnresolvedGeometryError
from cifpy.geo import Coordinate, Course, TrueCourse, turn_towards
from cifpy.airspace.geometry import ProcedureVia
from cifpy.airspace.resolver import concretize

logger = logging.getLogger("Hold")

ENTRY_LEG_TIME = timedelta(minutes=1)


class RacetrackState:
    """
    Control loop state of one aircraft flying one hold.
    Time is the sum of the refresh intervals of all previous calls.
    """

    def __init__(self):
        self.hold_state: HOLD_STATE | None = None
        self.entry: ENTRY_TYPE | None = None
        self.abeam_point: Coordinate | None = None
        self.abeam_time: timedelta | None = None
        self.clock = timedelta(0)
        self.stable = True

    def getInfo(self):
        return {
            "state": self.hold_state.value if self.hold_state is not None else None,
            "entry": self.entry.value if self.entry is not None else None,
            "stable": self.stable,
            "clock": self.clock.total_seconds()
        }


class Racetrack(ProcedureVia):
    """
    A holding pattern around a fix.
    """

    def __init__(self, point: Coordinate | None, inbound_course: Course, distance: float | None = None,
                 time: timedelta | None = None, left_turns: bool = False, waypoint: str | None = None):
        self.point = point
        self.waypoint = waypoint
        self.inbound_course = inbound_course
        self.distance = distance
        self.time = time
        self.left_turns = left_turns

    @staticmethod
    def entry_type(current_course: Course, inbound_course: Course) -> ENTRY_TYPE:
        """
        Classifies the hold entry from the angle between the current course and the inbound course.
        Up to 70° is a direct entry, above 110° a teardrop entry, in between a parallel entry.
        The limits are the same for left and right turns.
        """
        a = abs(inbound_course.angle(current_course))
        if a <= DIRECT_ENTRY_LIMIT:
            return ENTRY_TYPE.DIRECT
        if a > TEARDROP_ENTRY_LIMIT:
            return ENTRY_TYPE.TEARDROP
        return ENTRY_TYPE.PARALLEL

    def controller(self) -> RacetrackController:
        return RacetrackController(self)

    def turn(self, position, current_course, refresh_interval, on_ground, state: RacetrackState | None = None) -> TrueCourse:
        if state is None:
            raise ValueError("Racetrack needs a state, use controller()")
        if self.distance is None and self.time is None:
            raise ValueError("Racetrack must have a distance or time defined.")
        if self.point is None:
            raise UnresolvedGeometryError("Cannot fly a floating racetrack.")

        if state.hold_state is None:
            state.hold_state = HOLD_STATE.ENTRY
            state.entry = Racetrack.entry_type(current_course, self.inbound_course)
            state.stable = True
            logger.debug(f":turn: {self}: {state.entry.value} entry")

        now = state.clock
        course = self._turn(state, now, position, current_course, refresh_interval, on_ground)
        state.clock = state.clock + refresh_interval
        return course

    def _turn(self, state: RacetrackState, now: timedelta, position, current_course, refresh_interval, on_ground) -> TrueCourse:
        fix_bearing, distance = position.bearing_distance(self.point)
        hint = None if state.stable else self.left_turns
        reciprocal = self.inbound_course.reciprocal

        if state.hold_state == HOLD_STATE.ENTRY:
            if distance < FIX_CROSSING_MAX_ERROR:
                state.hold_state = HOLD_STATE.OUTBOUND
                state.stable = False
                hint = self.left_turns
            return turn_towards(current_course, fix_bearing if fix_bearing is not None else current_course, refresh_interval, on_ground, hint)

        if state.hold_state == HOLD_STATE.INBOUND:
            if not state.stable and abs(current_course.angle(self.inbound_course)) < COURSE_STABLE_TOLERANCE:
                state.stable = True
            if distance < FIX_CROSSING_MAX_ERROR:
                state.hold_state = HOLD_STATE.OUTBOUND
                state.abeam_point = None
                state.abeam_time = None
                state.entry = None
                state.stable = False
            hint = None if state.stable else self.left_turns
            return turn_towards(current_course, fix_bearing if fix_bearing is not None else self.inbound_course, refresh_interval, on_ground, hint)

        # Outbound
        if state.entry == ENTRY_TYPE.DIRECT:
            state.entry = None

        if state.entry in (ENTRY_TYPE.PARALLEL, ENTRY_TYPE.TEARDROP):
            if state.abeam_time is None:
                state.abeam_time = now
            if now - state.abeam_time < ENTRY_LEG_TIME:
                state.stable = True
                if state.entry == ENTRY_TYPE.PARALLEL:
                    return turn_towards(current_course, reciprocal, refresh_interval, on_ground)
                offset = TEARDROP_OFFSET if self.left_turns else -TEARDROP_OFFSET
                return turn_towards(current_course, reciprocal + offset, refresh_interval, on_ground)
            state.abeam_time = None
            state.stable = False
            state.hold_state = HOLD_STATE.INBOUND
            return self._turn(state, now, position, current_course, refresh_interval, on_ground)

        if not state.stable and abs(current_course.angle(reciprocal)) < COURSE_STABLE_TOLERANCE:
            state.abeam_point = position
            state.abeam_time = now
            state.stable = True

        if not state.stable:
            return turn_towards(current_course, reciprocal, refresh_interval, on_ground, self.left_turns)

        if (self.distance is not None and state.abeam_point.distance_to(position) >= self.distance) or \
           (self.time is not None and now - state.abeam_time >= self.time):
            state.abeam_point = None
            state.abeam_time = None
            state.stable = False
            state.hold_state = HOLD_STATE.INBOUND
            return self._turn(state, now, position, current_course, refresh_interval, on_ground)

        return turn_towards(current_course, reciprocal, refresh_interval, on_ground)

    def resolve(self, fixes: dict, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> Racetrack:
        if self.point is not None:
            return self
        point = concretize(fixes, self.waypoint, ref_coord=ref_coord, ref_name=ref_name)
        return Racetrack(point, self.inbound_course, self.distance, self.time, self.left_turns, waypoint=self.waypoint)

    def getInfo(self):
        return {
            "type": type(self).__name__,
            "point": self.point.getInfo() if self.point is not None else self.waypoint,
            "inbound": self.inbound_course.getInfo(),
            "distance": self.distance,
            "time": self.time.total_seconds() if self.time is not None else None,
            "left_turns": self.left_turns
        }

    def __str__(self):
        leg = f"{self.distance}nm" if self.distance is not None else f"{self.time}"
        return f"hold {self.waypoint or self.point} {self.inbound_course} {leg} {'L' if self.left_turns else 'R'}"


class RacetrackController(ProcedureVia):
    """
    A Racetrack definition bound to its own state.
    Not thread safe: one controller per aircraft.
    """

    def __init__(self, racetrack: Racetrack, state: RacetrackState | None = None):
        self.racetrack = racetrack
        self.state = state if state is not None else RacetrackState()

    def turn(self, position, current_course, refresh_interval, on_ground) -> TrueCourse:
        return self.racetrack.turn(position, current_course, refresh_interval, on_ground, state=self.state)

    def controller(self) -> RacetrackController:
        return self

    def getInfo(self):
        return {"type": type(self).__name__, "racetrack": self.racetrack.getInfo(), "state": self.state.getInfo()}
