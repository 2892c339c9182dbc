"""
Conversion utility functions.
ARINC 424 writes angles, distances and altitudes in fixed width fields,
often in tenths or hundredths of the unit.
"""

########################################
# Units, etc
#
FT = 12 * 0.0254  # 1 foot = 12 inches
NAUTICAL_MILE = 1.852  # Nautical mile in kilometers
FLIGHT_LEVEL = 100  # feet


def toNm(km):
    """
    Convert kilometers to nautical miles

    :param      km:   distance in kilometers
    :type       km:   float

    :returns:   distance in nautical miles
    :rtype:     float
    """
    return km / NAUTICAL_MILE


def toKm(nm):
    return nm * NAUTICAL_MILE


def ConvertDMSToDD(degrees, minutes, seconds, direction):
    dd = float(degrees) + float(minutes) / 60 + float(seconds) / (60 * 60)
    return dd if direction in ("N", "E") else dd * -1


def ArincLatitude(s: str) -> float:
    """
    Converts an ARINC latitude to decimal degrees.
    N47265700 is N 47° 26' 57.00". High precision latitudes have two more decimals for seconds.

    :param      s:    The latitude field
    :type       s:    str

    :raises     ValueError: field is not a latitude
    """
    if len(s) not in (9, 11) or s[0] not in "NS":
        raise ValueError(f"invalid latitude {s}")
    return ConvertDMSToDD(s[1:3], s[3:5], s[5:7] + "." + s[7:], s[0])


def ArincLongitude(s: str) -> float:
    if len(s) not in (10, 12) or s[0] not in "EW":
        raise ValueError(f"invalid longitude {s}")
    return ConvertDMSToDD(s[1:4], s[4:6], s[6:8] + "." + s[8:], s[0])


def ArincVariation(s: str) -> float | None:
    """
    Magnetic variation or station declination, E0120 is 12.0° East.
    East variations are positive. True referenced (T) or blank fields have no variation.
    """
    if s.strip() == "":
        return None
    if s[0] == "T":
        return 0.0
    if s[0] not in "EW" or not s[1:].isdecimal():
        raise ValueError(f"invalid variation {s}")
    v = int(s[1:]) / 10
    return v if s[0] == "E" else -v


def ArincAltitude(s: str) -> int | None:
    """
    Altitude in feet. FL180 is 18000 ft. Blank is None.
    """
    s = s.strip()
    if s == "":
        return None
    if s.startswith("FL"):
        return int(s[2:]) * FLIGHT_LEVEL
    if s.lstrip("-").isdecimal():
        return int(s)
    raise ValueError(f"invalid altitude {s}")


def ArincTenths(s: str) -> float | None:
    s = s.strip()
    if s == "":
        return None
    if not s.isdecimal():
        raise ValueError(f"invalid number {s}")
    return int(s) / 10
