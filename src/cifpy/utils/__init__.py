from .unitconversion import FT, NAUTICAL_MILE, toNm, toKm
from .unitconversion import ArincLatitude, ArincLongitude, ArincVariation, ArincAltitude, ArincTenths
