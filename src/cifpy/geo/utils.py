# Geographic utility functions
import logging
from datetime import timedelta

from cifpy.parameters import AIRBORNE_TURN_RATE, GROUND_TURN_RATE

logger = logging.getLogger("geoutils")


def mk360(a):
    # Angle in [0, 360[
    r = a % 360
    return 0.0 if r == 360 else r


def mk180(a):
    # Angle in ]-180, 180]
    r = mk360(a)
    return r - 360 if r > 180 else r


def turn_towards(current, target, refresh_interval: timedelta, on_ground: bool, left_turns: bool | None = None):
    """
    Course to steer until the next control tick.

    Without turn direction hint, the target is returned and the driver turns the shortest way.
    With a hint, if the shortest way is on the other side, an intermediate course is returned
    on the requested side, as far as the turn rate allows during refresh_interval.

    :param      current:           The current course
    :type       current:           Course
    :param      target:            The target course
    :type       target:            Course
    :param      refresh_interval:  Time until the next call
    :type       refresh_interval:  timedelta
    :param      on_ground:         Use ground turn rate
    :type       on_ground:         bool
    :param      left_turns:        Turn direction hint, None for shortest turn
    :type       left_turns:        bool | None

    :returns:   The course to steer
    :rtype:     TrueCourse
    """
    target = target.to_true()
    if left_turns is None:
        return target

    delta = current.angle(target)  # > 0 is a right turn
    if delta == 0 or (delta < 0) == left_turns:
        return target

    rate = GROUND_TURN_RATE if on_ground else AIRBORNE_TURN_RATE
    step = min(rate * refresh_interval.total_seconds(), 179.0)
    if step <= 0:
        return current.to_true()
    return current.to_true() + (-step if left_turns else step)
