# Wrapper around turfpy geodesic functions.
# All cifpy code goes through these functions so that units are handled in one place:
# distances are in nautical miles, angles in degrees.
#
from geojson import Feature, Point, Polygon

from turfpy.measurement import distance as turf_distance
from turfpy.measurement import bearing as turf_bearing
from turfpy.measurement import destination as turf_destination
from turfpy.measurement import boolean_point_in_polygon as turf_boolean_point_in_polygon

from cifpy.utils import toNm, toKm


def asFeature(f):
    # Accepts a Feature, a Point, or anything with a feature() method (Coordinate)
    if callable(getattr(f, "feature", None)):
        return f.feature()
    if isinstance(f, Point):
        return Feature(geometry=f)
    return f


def distance(p1, p2) -> float:
    """
    Great circle distance between two points in nautical miles.
    """
    return toNm(turf_distance(asFeature(p1), asFeature(p2), units="km"))


def bearing(p1, p2) -> float:
    """
    Initial true bearing from p1 to p2 in ]-180, 180].
    """
    return turf_bearing(asFeature(p1), asFeature(p2))


def destination(start, length: float, course: float) -> Feature:
    """
    Point at length nautical miles from start following true course.
    """
    def mkBearing(b):
        if b > 180:
            return mkBearing(b - 360)
        if b < -180:
            return mkBearing(b + 360)
        return b

    return turf_destination(asFeature(start), toKm(length), mkBearing(course), {"units": "km"})


def point_in_polygon(point, polygon: Polygon) -> bool:
    return turf_boolean_point_in_polygon(asFeature(point), polygon)
