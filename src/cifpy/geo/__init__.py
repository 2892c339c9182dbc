from .utils import mk360, mk180, turn_towards
from .coordinate import Coordinate, NamedCoordinate, Course, TrueCourse, MagneticCourse
