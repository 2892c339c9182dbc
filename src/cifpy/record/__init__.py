from .recordline import RecordLine
from .airspace import AirspaceLine, GridMORA, ControlledAirspace, RestrictiveAirspace
from .navaid import Navaid, VOR, VORDME, VORTAC, DME, TACAN, NDB, Localizer
from .enroute import EnrouteLine, Waypoint, AirwayFixLine, HoldingLine, ProcedureLine, SIDLine, STARLine, ApproachLine, PathPoint
from .aerodrome import Aerodrome, Airport, Heliport, Runway, AirportMSA
from .parser import parse, try_parse, parse_lines
