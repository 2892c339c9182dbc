# Coordinates and courses.
# Coordinates are immutable and hashable so that they can be kept in the fix registry.
#
from __future__ import annotations

from dataclasses import dataclass

from geojson import Feature, Point

from cifpy.exceptions import UnresolvedGeometryError
from cifpy.geo.turf import distance, bearing, destination
from cifpy.geo.utils import mk360, mk180

# Below this distance, two points are on top of each other and bearing is undefined.
COINCIDENT = 1e-6  # nm


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def feature(self) -> Feature:
        return Feature(geometry=Point((self.longitude, self.latitude)))

    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    def named(self, name: str) -> NamedCoordinate:
        return NamedCoordinate(name=name, latitude=self.latitude, longitude=self.longitude)

    def distance_to(self, other: Coordinate) -> float:
        return distance(self, other)

    def bearing_distance(self, other: Coordinate) -> tuple[TrueCourse | None, float]:
        """
        True bearing and distance in nm from this coordinate to other.
        Bearing is None when both points are the same.
        """
        d = distance(self, other)
        if d < COINCIDENT:
            return (None, d)
        return (TrueCourse(bearing(self, other)), d)

    def fix_radial_distance(self, course: Course, nm: float) -> Coordinate:
        """
        Projects a point at nm along course from this coordinate.
        """
        f = destination(self, nm, course.to_true().degrees)
        lon, lat = f["geometry"]["coordinates"][:2]
        return Coordinate(latitude=lat, longitude=lon)

    def getInfo(self):
        return {"lat": self.latitude, "lon": self.longitude}

    def __str__(self):
        return f"({self.latitude:.6f}, {self.longitude:.6f})"


@dataclass(frozen=True)
class NamedCoordinate(Coordinate):
    name: str = ""

    def getInfo(self):
        return {"name": self.name, "lat": self.latitude, "lon": self.longitude}

    def __str__(self):
        return self.name


################################
#
# COURSES
#
#
@dataclass(frozen=True)
class Course:
    """
    Base class for all courses, in degrees, normalized to [0, 360[.
    """
    degrees: float

    def __post_init__(self):
        object.__setattr__(self, "degrees", mk360(self.degrees))

    def to_true(self) -> TrueCourse:
        raise NotImplementedError

    def angle(self, other: Course) -> float:
        """
        Signed angle to turn from this course to other, in ]-180, 180].
        Positive is clockwise (right turn).
        """
        return mk180(other.to_true().degrees - self.to_true().degrees)

    @property
    def reciprocal(self) -> Course:
        return self + 180

    def __add__(self, degrees: float):
        raise NotImplementedError

    def __sub__(self, degrees: float):
        return self + (-degrees)

    def getInfo(self):
        return {"type": type(self).__name__, "degrees": self.degrees}


@dataclass(frozen=True)
class TrueCourse(Course):

    def to_true(self) -> TrueCourse:
        return self

    def to_magnetic(self, variation: float | None) -> MagneticCourse:
        if variation is None:
            raise UnresolvedGeometryError(f"Cannot convert {self} to magnetic without variation")
        return MagneticCourse(self.degrees - variation, variation)

    def __add__(self, degrees: float) -> TrueCourse:
        return TrueCourse(self.degrees + degrees)

    def __str__(self):
        return f"{self.degrees:05.1f}T"


@dataclass(frozen=True)
class MagneticCourse(Course):
    """
    A magnetic course. Without variation it cannot be flown,
    it must first be resolved against a local magnetic variation.
    """
    variation: float | None = None

    def to_true(self) -> TrueCourse:
        if self.variation is None:
            raise UnresolvedGeometryError(f"Magnetic course {self.degrees} has no variation")
        return TrueCourse(self.degrees + self.variation)

    def to_magnetic(self, variation: float | None) -> MagneticCourse:
        if self.variation is None or variation is None:
            return MagneticCourse(self.degrees, variation)
        return MagneticCourse(self.degrees + self.variation - variation, variation)

    def resolve(self, variation: float) -> MagneticCourse:
        return MagneticCourse(self.degrees, variation)

    def is_anchored(self) -> bool:
        return self.variation is not None

    def __add__(self, degrees: float) -> MagneticCourse:
        return MagneticCourse(self.degrees + degrees, self.variation)

    def getInfo(self):
        return {"type": type(self).__name__, "degrees": self.degrees, "variation": self.variation}

    def __str__(self):
        return f"{self.degrees:05.1f}M"
