# Format and domain constants.
# Column layouts refer to ARINC 424-18 as published in the FAA CIFP.
#
from enum import Enum, Flag, auto

########################################
# Record format
#
RECORD_LENGTH = 132
HEADER_PREFIX = "HDR"

# File record number and cycle are present on every record
FILE_RECORD_NUMBER = slice(123, 128)
CYCLE = slice(128, 132)


class SECTION(Enum):
    """
    Record category, character 4 of every line
    """
    MORA = "A"
    NAVAID = "D"
    ENROUTE = "E"
    HELIPORT = "H"
    AIRPORT = "P"
    AIRSPACE = "U"


# Aerodrome/heliport subsections, character 12
AERODROME_REFERENCE = "A"
AERODROME_TERMINAL_WAYPOINT = "C"
AERODROME_SID = "D"
AERODROME_STAR = "E"
AERODROME_APPROACH = "F"
AERODROME_RUNWAY = "G"
AERODROME_LOCALIZER = "I"
AERODROME_PATH_POINT = "P"
AERODROME_MSA = "S"

# Enroute subsections, character 5
ENROUTE_WAYPOINT = "A"
ENROUTE_HOLDING = "P"
ENROUTE_AIRWAY = "R"

# Airspace subsections, character 5
AIRSPACE_CONTROLLED = "C"
AIRSPACE_RESTRICTIVE = "R"
MORA_GRID = "S"

ID_SEP = "/"  # airport/runway identifiers

########################################
# Geometry tolerances
#
RADIAL_TRACKING_TOLERANCE = 0.5  # degrees
STATION_PASSAGE_DISTANCE = 0.1  # nm
ARC_RADIUS_TOLERANCE = 0.1  # nm
FIX_CROSSING_MAX_ERROR = 0.1  # nm
COURSE_STABLE_TOLERANCE = 1.0  # degrees
INTERCEPT_ANGLE = 45.0  # degrees
TEARDROP_OFFSET = 30.0  # degrees

DIRECT_ENTRY_LIMIT = 70.0  # degrees
TEARDROP_ENTRY_LIMIT = 110.0  # degrees


class PATH_TERMINATION(Flag):
    """
    When a leg is over.
    """
    NONE = 0
    UNTIL_CROSSING = auto()
    UNTIL_ALTITUDE = auto()
    UNTIL_DISTANCE = auto()
    UNTIL_INTERCEPT = auto()
    UNTIL_MANUAL = auto()
    HOLD = auto()
    PROCEDURE_TURN = auto()


class HOLD_STATE(Enum):
    ENTRY = "entry"
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class ENTRY_TYPE(Enum):
    DIRECT = "direct"
    PARALLEL = "parallel"
    TEARDROP = "teardrop"


class PROC_TYPE(Enum):
    SID = "SID"
    STAR = "STAR"
    APPROACH = "APPCH"


class AIRSPACE_CLASS(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    G = "G"
