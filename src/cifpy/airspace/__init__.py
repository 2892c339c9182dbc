from .restriction import AltitudeRestriction, SpeedRestriction
from .resolver import register, concretize, try_concretize, concretize_navaid, try_concretize_navaid
from .resolver import local_magnetic_variation, local_magnetic_variation_aerodromes
from .geometry import ProcedureEndpoint, ProcedureVia, Fix, Direct, Radial, Distance, Arc
from .geometry import UnresolvedWaypoint, UnresolvedRadial, UnresolvedDistance, UnresolvedFixRadialDistance
from .hold import Racetrack, RacetrackState, RacetrackController
from .procedure import ProcedureStep, Procedure, SID, STAR, Approach
from .airway import Airway, airway_network, route
from .controlledairspace import Airspace
from .cifp import CIFP
