# Altitude and speed restrictions attached to procedure legs.
# Restrictions are immutable closed ranges [minimum, maximum], either bound may be None.
#
# The FAA CIFP altitude description column carries a few irregular codes.
# from_description() folds them into the canonical range.
#
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from cifpy.exceptions import RestrictionViolation

logger = logging.getLogger("Restriction")


class ALT_DESCRIPTION(Enum):
    AT_OR_ABOVE = "+"
    AT_OR_BELOW = "-"
    AT = "@"
    BETWEEN = "B"


class SPEED_DESCRIPTION(Enum):
    AT = "@"
    AT_OR_ABOVE = "+"
    AT_OR_BELOW = "-"


@dataclass(frozen=True)
class AltitudeRestriction:
    """
    Altitude restriction in feet.
    """
    minimum: int | None = None
    maximum: int | None = None

    @staticmethod
    def unrestricted() -> AltitudeRestriction:
        return AltitudeRestriction(None, None)

    def is_unrestricted(self) -> bool:
        return self.minimum is None and self.maximum is None

    @staticmethod
    def from_description(description: str, alt1: int | None, alt2: int | None) -> AltitudeRestriction:
        """
        Builds a restriction from the altitude description code and the two altitude columns.

        :param      description:  The altitude description code (column 82)
        :type       description:  str
        :param      alt1:         The first altitude
        :type       alt1:         int | None
        :param      alt2:         The second altitude
        :type       alt2:         int | None

        :raises     RestrictionViolation: the combination matches no known pattern
        """
        if alt1 is None and alt2 is None:
            return AltitudeRestriction.unrestricted()
        if alt1 is None:
            raise RestrictionViolation(f"altitude restriction '{description}' has second altitude {alt2} but no first altitude")

        if description in ("I", "G"):
            # Intercept altitude or altitude above glideslope, second value is informational.
            alt2 = None
        elif description in ("J", "H", "V") and alt2 is None:
            # Typos at a few airports where + was meant.
            description = ALT_DESCRIPTION.AT_OR_ABOVE.value
        elif description == "X" and alt1 == alt2:
            alt2 = None

        if description in (" ", "X", "I", "G"):
            description = ALT_DESCRIPTION.AT.value
        elif description in ("J", "H", "V"):
            description = ALT_DESCRIPTION.BETWEEN.value

        if description == ALT_DESCRIPTION.AT_OR_ABOVE.value and alt2 is not None:
            if alt1 < alt2:
                description = ALT_DESCRIPTION.BETWEEN.value
            else:
                # Equal or descending pair, second value dropped.
                # TODO: descending pairs are only observed on a few procedures, confirm with newer cycles.
                alt2 = None
        elif description == ALT_DESCRIPTION.AT_OR_BELOW.value and alt2 is not None and alt2 > alt1:
            description = ALT_DESCRIPTION.BETWEEN.value

        if description == ALT_DESCRIPTION.BETWEEN.value and alt2 is None:
            raise RestrictionViolation("between altitude restrictions need two altitudes")
        if description != ALT_DESCRIPTION.BETWEEN.value and alt2 is not None:
            raise RestrictionViolation(f"single altitude restriction '{description}' given two altitudes")

        if description == ALT_DESCRIPTION.BETWEEN.value:
            return AltitudeRestriction(min(alt1, alt2), max(alt1, alt2))
        if description == ALT_DESCRIPTION.AT.value:
            return AltitudeRestriction(alt1, alt1)
        if description == ALT_DESCRIPTION.AT_OR_ABOVE.value:
            return AltitudeRestriction(alt1, None)
        if description == ALT_DESCRIPTION.AT_OR_BELOW.value:
            return AltitudeRestriction(None, alt1)
        raise RestrictionViolation(f"unknown altitude description '{description}'")

    def is_in_range(self, altitude: int) -> bool:
        return (self.minimum is None or self.minimum <= altitude) and (self.maximum is None or altitude <= self.maximum)

    def getInfo(self):
        return {"type": type(self).__name__, "altmin": self.minimum, "altmax": self.maximum}

    def __str__(self):
        if self.minimum is not None and self.minimum == self.maximum:
            return f"{self.minimum // 100:03d}"
        a = ""
        if self.minimum is not None:
            a = a + f"MIN {self.minimum // 100:03d} "
        if self.maximum is not None:
            a = a + f"MAX {self.maximum // 100:03d}"
        a = a.strip()
        return a if a != "" else "Unrestricted"


@dataclass(frozen=True)
class SpeedRestriction:
    """
    Speed restriction in knots.
    """
    minimum: int | None = None
    maximum: int | None = None

    @staticmethod
    def unrestricted() -> SpeedRestriction:
        return SpeedRestriction(None, None)

    def is_unrestricted(self) -> bool:
        return self.minimum is None and self.maximum is None

    @staticmethod
    def from_description(description: str, speed: int | None) -> SpeedRestriction:
        if speed is None:
            return SpeedRestriction.unrestricted()
        if description in (" ", SPEED_DESCRIPTION.AT.value):
            return SpeedRestriction(speed, speed)
        if description == SPEED_DESCRIPTION.AT_OR_ABOVE.value:
            return SpeedRestriction(speed, None)
        if description == SPEED_DESCRIPTION.AT_OR_BELOW.value:
            return SpeedRestriction(None, speed)
        raise RestrictionViolation(f"unknown speed description '{description}'")

    def is_in_range(self, speed: int) -> bool:
        return (self.minimum is None or self.minimum <= speed) and (self.maximum is None or speed <= self.maximum)

    def getInfo(self):
        return {"type": type(self).__name__, "speedmin": self.minimum, "speedmax": self.maximum}

    def __str__(self):
        if self.minimum is not None and self.minimum == self.maximum:
            return f"AT {self.minimum}K"
        a = ""
        if self.minimum is not None:
            a = a + f"MIN {self.minimum}K "
        if self.maximum is not None:
            a = a + f"MAX {self.maximum}K"
        a = a.strip()
        return a if a != "" else "Unrestricted"
