# Fix and navaid resolution.
#
# Fix names are not unique: the same 5 letter name may exist in several regions,
# and runway names (RW16L) exist at many airports. A registry maps a name to the
# list of candidates in registration order. Resolution selects one candidate,
# using a reference coordinate or a reference name when there are several.
# Ties go to the first registered candidate.
#
import logging
from math import inf

from cifpy.exceptions import ResolutionError
from cifpy.geo import Coordinate, NamedCoordinate

logger = logging.getLogger("Resolver")


def register(registry: dict, name: str, item):
    """
    Adds item to the candidates for name unless it is already there.

    :param      registry:  The registry
    :type       registry:  dict[str, list]
    :param      name:      The name
    :type       name:      str
    :param      item:      The coordinate or navaid
    """
    candidates = registry.setdefault(name, [])
    if item not in candidates:
        candidates.append(item)


def position(item) -> Coordinate:
    # Navaids carry their position, coordinates are their own position.
    if isinstance(item, Coordinate):
        return item
    return item.position


def _closest(candidates: list, reference: Coordinate):
    best = None
    dist = inf
    for c in candidates:
        d = position(c).distance_to(reference)
        if d < dist:
            dist = d
            best = c
    return best


def _closest_to_any(candidates: list, references: list):
    best = None
    dist = inf
    for c in candidates:
        d = min([position(c).distance_to(position(r)) for r in references])
        if d < dist:
            dist = d
            best = c
    return best


def _select(registry: dict, name: str, ref_coord: Coordinate | None, ref_name: str | None):
    candidates = registry.get(name)
    if candidates is None or len(candidates) == 0:
        return None
    if len(candidates) == 1:
        return candidates[0]
    if ref_coord is not None:
        return _closest(candidates, ref_coord)
    if ref_name is not None:
        references = registry.get(ref_name)
        if references is None or len(references) == 0:
            raise ResolutionError(f"Unknown waypoint {ref_name}.")
        return _closest_to_any(candidates, references)
    return None


def try_concretize(fixes: dict, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> tuple:
    """
    Resolves a fix name to a single coordinate.
    Returns [True, NamedCoordinate] if found, [False, None] if the name is unknown or
    ambiguous without reference.

    :param      fixes:      The fix registry
    :type       fixes:      dict[str, list[Coordinate]]
    :param      name:       The fix name
    :type       name:       str
    :param      ref_coord:  A reference coordinate to select the closest candidate
    :type       ref_coord:  Coordinate
    :param      ref_name:   A reference fix name, used when there is no reference coordinate
    :type       ref_name:   str

    :raises     ResolutionError: the reference name is unknown
    """
    found = _select(fixes, name, ref_coord, ref_name)
    if found is None:
        return (False, None)
    return (True, position(found).named(name))


def concretize(fixes: dict, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> NamedCoordinate:
    ok, coord = try_concretize(fixes, name, ref_coord=ref_coord, ref_name=ref_name)
    if not ok:
        raise ResolutionError(f"Unknown waypoint {name}.")
    return coord


def try_concretize_navaid(navaids: dict, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None) -> tuple:
    found = _select(navaids, name, ref_coord, ref_name)
    if found is None:
        return (False, None)
    return (True, found)


def concretize_navaid(navaids: dict, name: str, ref_coord: Coordinate | None = None, ref_name: str | None = None):
    """
    Resolves a navaid identifier to a single navaid.

    :raises     ResolutionError: unknown identifier, or several candidates and no reference
    """
    if name not in navaids:
        raise ResolutionError(f"Unknown waypoint {name}.")
    found = _select(navaids, name, ref_coord, ref_name)
    if found is None:
        raise ResolutionError(f"Could not resolve waypoint {name} without context.")
    return found


def local_magnetic_variation(navaids: dict, coordinate: Coordinate) -> tuple:
    """
    Magnetic variation of the navaid closest to coordinate that has one.

    :returns:   [navaid position, variation]
    :rtype:     tuple[Coordinate, float]

    :raises     ResolutionError: no navaid has a variation
    """
    best = None
    dist = inf
    for candidates in navaids.values():
        for n in candidates:
            if n.magnetic_variation is None:
                continue
            d = n.position.distance_to(coordinate)
            if d < dist:
                dist = d
                best = n
    if best is None:
        raise ResolutionError(f"No navaid with magnetic variation near {coordinate}")
    return (best.position, best.magnetic_variation)


def local_magnetic_variation_aerodromes(aerodromes: dict, coordinate: Coordinate) -> tuple:
    """
    Magnetic variation of the closest aerodrome. Slower fallback when there is no navaid around.
    """
    best = None
    dist = inf
    for a in aerodromes.values():
        if a.magnetic_variation is None:
            continue
        d = a.location.distance_to(coordinate)
        if d < dist:
            dist = d
            best = a
    if best is None:
        raise ResolutionError(f"No aerodrome with magnetic variation near {coordinate}")
    return (best.location, best.magnetic_variation)
