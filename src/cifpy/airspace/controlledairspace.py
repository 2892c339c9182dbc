"""
Controlled airspace built from contiguous controlled airspace lines
with the same center and multiple code.
Boundaries are turned into polygons so that point inclusion can be tested.
"""
from __future__ import annotations

import logging

from geojson import Polygon

from cifpy.constants import AIRSPACE_CLASS
from cifpy.geo import Coordinate, TrueCourse
from cifpy.geo.turf import point_in_polygon

logger = logging.getLogger("ControlledAirspace")

CIRCLE = "C"
LEFT_ARC = "L"  # counterclockwise
RIGHT_ARC = "R"  # clockwise
ARC_STEP = 10  # degrees


class Airspace:
    """
    One controlled airspace with one or more boundary regions.
    """

    def __init__(self, lines: list):
        if len(lines) == 0:
            raise ValueError("Airspace needs at least one line")
        first = lines[0]
        self.center = first.center
        self.multiple_code = first.multiple_code
        self.icao = first.icao
        self.airspace_type = first.airspace_type
        self.airspace_class = AIRSPACE_CLASS(first.airspace_class) if first.airspace_class is not None else None
        self.name = next((l.name for l in lines if l.name is not None), None)
        self.lower_limit = first.lower_limit
        self.upper_limit = first.upper_limit
        self.lines = lines

        self.regions: list[list] = []
        region = []
        for line in lines:
            region.append(line)
            if line.ends_region():
                self.regions.append(region)
                region = []
        if len(region) > 0:
            logger.debug(f":__init__: {self.center}{self.multiple_code}: last region has no end marker")
            self.regions.append(region)

        self._polygons = None

    @staticmethod
    def arc(origin: Coordinate, radius: float, start: Coordinate, end: Coordinate, clockwise: bool) -> list:
        """
        Points along an arc around origin from start to end, both excluded.
        """
        b0, d0 = origin.bearing_distance(start)
        b1, d1 = origin.bearing_distance(end)
        if b0 is None or b1 is None:
            return []
        sweep = b0.angle(b1)
        if clockwise and sweep < 0:
            sweep = sweep + 360
        elif not clockwise and sweep > 0:
            sweep = sweep - 360
        steps = int(abs(sweep) // ARC_STEP)
        points = []
        for i in range(1, steps):
            b = b0 + (sweep * i / steps)
            points.append(origin.fix_radial_distance(b, radius))
        return points

    @staticmethod
    def boundary(region: list) -> list:
        """
        Coordinates of a region boundary, arcs expanded.
        """
        points = []
        for i, line in enumerate(region):
            via = line.boundary_via[0]
            if via == CIRCLE:
                if line.arc_origin is None or line.arc_distance is None:
                    logger.warning(f":boundary: {line.center}: circle without origin or radius")
                    continue
                return [line.arc_origin.fix_radial_distance(TrueCourse(b), line.arc_distance) for b in range(0, 360, ARC_STEP)]
            if line.position is None:
                continue
            points.append(line.position)
            if via in (LEFT_ARC, RIGHT_ARC) and line.arc_origin is not None and line.arc_distance is not None:
                following = region[(i + 1) % len(region)].position
                if following is not None:
                    points = points + Airspace.arc(line.arc_origin, line.arc_distance, line.position, following, via == RIGHT_ARC)
        return points

    def polygons(self) -> list:
        if self._polygons is None:
            self._polygons = []
            for region in self.regions:
                points = Airspace.boundary(region)
                if len(points) < 3:
                    logger.debug(f":polygons: {self.center}{self.multiple_code}: region with less than 3 points ignored")
                    continue
                ring = [(p.longitude, p.latitude) for p in points]
                ring.append(ring[0])
                self._polygons.append(Polygon([ring]))
        return self._polygons

    def contains(self, coordinate: Coordinate) -> bool:
        """
        Whether the coordinate is inside one of the airspace regions.
        """
        return any(point_in_polygon(coordinate, p) for p in self.polygons())

    def getKey(self):
        return f"{self.center}{self.multiple_code}"

    def getInfo(self):
        return {
            "type": type(self).__name__,
            "center": self.center,
            "multiple_code": self.multiple_code,
            "class": self.airspace_class.value if self.airspace_class is not None else None,
            "name": self.name,
            "lower_limit": self.lower_limit,
            "upper_limit": self.upper_limit,
            "regions": len(self.regions)
        }

    def __str__(self):
        return f"{self.center} class {self.airspace_class.value if self.airspace_class else '?'} ({len(self.regions)} regions)"
