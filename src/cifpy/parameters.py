"""
Application parameters.
Used for file location and processing tunables.
Each value can be overridden from the environment with the same name prefixed by CIFPY_.
"""
import os


def _env(name: str, default):
    value = os.environ.get("CIFPY_" + name)
    if value is None:
        return default
    return type(default)(value)


# ######################
# File system-based Data
#
HOME_DIR = _env("HOME_DIR", os.getcwd())

# DATA is where the FAA CIFP file is found (read-only)
DATA_DIR = _env("DATA_DIR", os.path.join(HOME_DIR, "data"))

# Name of the unzipped FAA CIFP file
CIFP_FILE = _env("CIFP_FILE", "FAACIFP18")


# ######################
# Processing
#
# Number of processes used to parse lines, 0 means one per CPU
PARSE_WORKERS = _env("PARSE_WORKERS", 0)
PARSE_CHUNKSIZE = _env("PARSE_CHUNKSIZE", 2000)
# Below this number of lines, lines are parsed in the calling process
PARALLEL_MIN_LINES = _env("PARALLEL_MIN_LINES", 20000)

# Number of threads assembling airways, SIDs, STARs, and approaches
ASSEMBLY_WORKERS = _env("ASSEMBLY_WORKERS", 4)


# ######################
# Leg geometry
#
# Standard rate turn in degrees per second
AIRBORNE_TURN_RATE = _env("AIRBORNE_TURN_RATE", 3.0)
GROUND_TURN_RATE = _env("GROUND_TURN_RATE", 10.0)

# Radial intersection search gives up after that many steps
INTERSECTION_MAX_ITERATIONS = _env("INTERSECTION_MAX_ITERATIONS", 10000)
