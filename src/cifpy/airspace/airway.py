"""
An Airway is an ordered list of resolved fixes.
Airways are assembled into a network to find routes between fixes.
"""
from __future__ import annotations

import logging

from networkx import Graph, shortest_path, exception

from cifpy.geo import NamedCoordinate
from cifpy.airspace.resolver import concretize

logger = logging.getLogger("Airway")


class Airway:
    """
    An airway built from a run of contiguous airway lines with the same identifier
    and increasing sequence numbers.
    """

    def __init__(self, identifier: str, lines: list, fixes: dict):
        """
        Resolves all fixes of the airway. Each fix is resolved close to the previous one,
        the first fix is resolved close to its successor.

        :param      identifier:  The airway identifier
        :type       identifier:  str
        :param      lines:       The airway lines, at least 2
        :type       lines:       list[AirwayFixLine]
        :param      fixes:       The fix registry
        :type       fixes:       dict

        :raises     ResolutionError: a fix cannot be resolved
        """
        if len(lines) < 2:
            raise ValueError(f"Airway {identifier} needs at least 2 fixes")
        self.identifier = identifier
        self.route_type = lines[0].route_type
        self.level = lines[0].level
        self.lines = lines
        self.points: list[NamedCoordinate] = []

        prev = None
        for i, line in enumerate(lines):
            if prev is None:
                p = concretize(fixes, line.fix, ref_name=lines[1].fix)
            else:
                p = concretize(fixes, line.fix, ref_coord=prev)
            self.points.append(p)
            prev = p

    def segments(self):
        """
        Yields consecutive (from, to, line) triplets.
        """
        for i in range(len(self.points) - 1):
            yield (self.points[i], self.points[i + 1], self.lines[i])

    def length(self) -> float:
        return sum(a.distance_to(b) for a, b, l in self.segments())

    def getInfo(self):
        return {
            "type": type(self).__name__,
            "identifier": self.identifier,
            "route_type": self.route_type,
            "level": self.level,
            "points": [p.getInfo() for p in self.points]
        }

    def __str__(self):
        return f"{self.identifier}: " + "-".join([p.name for p in self.points])


def airway_network(airways: dict) -> Graph:
    """
    Builds an undirected graph of all airways.
    Nodes are fix names, edges are airway segments weighted by their length in nautical miles.

    :param      airways:  The airways
    :type       airways:  dict[str, list[Airway]]
    """
    g = Graph()
    for identifier, aws in airways.items():
        for aw in aws:
            for a, b, line in aw.segments():
                g.add_node(a.name, lat=a.latitude, lon=a.longitude)
                g.add_node(b.name, lat=b.latitude, lon=b.longitude)
                g.add_edge(a.name, b.name, weight=a.distance_to(b), airway=identifier)
    logger.debug(f":airway_network: {g.number_of_nodes()} fixes, {g.number_of_edges()} segments")
    return g


def route(network: Graph, src: str, dst: str) -> list | None:
    """
    Shortest route between two fixes on the airway network.

    :returns:   The list of fix names from src to dst, None if there is no route
    :rtype:     list[str] | None
    """
    try:
        return shortest_path(network, source=src, target=dst, weight="weight")
    except exception.NetworkXNoPath:
        logger.warning(f":route: no route from {src} to {dst}")
    except exception.NodeNotFound as e:
        logger.warning(f":route: {e}")
    return None
