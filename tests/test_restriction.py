import pytest

from cifpy.exceptions import RestrictionViolation
from cifpy.airspace import AltitudeRestriction, SpeedRestriction


@pytest.mark.parametrize("description, alt1, alt2, expected", [
    (" ", None, None, (None, None)),
    (" ", 5000, None, (5000, 5000)),
    ("@", 5000, None, (5000, 5000)),
    ("+", 5000, None, (5000, None)),
    ("-", 5000, None, (None, 5000)),
    ("B", 9000, 5000, (5000, 9000)),
    ("B", 5000, 9000, (5000, 9000)),
    ("I", 3000, 2500, (3000, 3000)),
    ("G", 3000, 2500, (3000, 3000)),
    ("J", 4000, None, (4000, None)),
    ("H", 4000, 6000, (4000, 6000)),
    ("V", 4000, 6000, (4000, 6000)),
    ("X", 4000, 4000, (4000, 4000)),
    ("X", 4000, None, (4000, 4000)),
    ("+", 5000, 5000, (5000, None)),
    ("+", 5000, 7000, (5000, 7000)),
    ("+", 7000, 5000, (7000, None)),
    ("-", 5000, 7000, (5000, 7000)),
])
def test_altitude_rules(description, alt1, alt2, expected):
    r = AltitudeRestriction.from_description(description, alt1, alt2)
    assert (r.minimum, r.maximum) == expected


@pytest.mark.parametrize("description, alt1, alt2", [
    ("+", None, 5000),  # second altitude only
    ("B", 5000, None),
    ("@", 5000, 6000),
    ("-", 7000, 5000),
    ("Z", 5000, None),
])
def test_altitude_violations(description, alt1, alt2):
    with pytest.raises(RestrictionViolation):
        AltitudeRestriction.from_description(description, alt1, alt2)


def canonical(r: AltitudeRestriction):
    if r.minimum is not None and r.maximum is not None:
        if r.minimum == r.maximum:
            return ("@", r.minimum, None)
        return ("B", r.minimum, r.maximum)
    if r.minimum is not None:
        return ("+", r.minimum, None)
    if r.maximum is not None:
        return ("-", r.maximum, None)
    return (" ", None, None)


@pytest.mark.parametrize("description, alt1, alt2", [
    (" ", 5000, None), ("+", 5000, None), ("-", 5000, None), ("B", 9000, 5000),
    ("J", 4000, None), ("X", 4000, 4000), ("+", 5000, 7000), ("I", 3000, 2500), (" ", None, None),
])
def test_altitude_idempotence(description, alt1, alt2):
    r = AltitudeRestriction.from_description(description, alt1, alt2)
    again = AltitudeRestriction.from_description(*canonical(r))
    assert again == r


def test_altitude_range_and_text():
    r = AltitudeRestriction.from_description("B", 5000, 10000)
    assert r.is_in_range(5000)
    assert r.is_in_range(7500)
    assert not r.is_in_range(11000)
    assert str(r) == "MIN 050 MAX 100"
    assert str(AltitudeRestriction.from_description("@", 5000, None)) == "050"
    assert str(AltitudeRestriction.unrestricted()) == "Unrestricted"
    assert AltitudeRestriction.unrestricted().is_unrestricted()
    assert AltitudeRestriction.unrestricted().is_in_range(45000)


@pytest.mark.parametrize("description, speed, expected, text", [
    (" ", 230, (230, 230), "AT 230K"),
    ("@", 230, (230, 230), "AT 230K"),
    ("+", 200, (200, None), "MIN 200K"),
    ("-", 250, (None, 250), "MAX 250K"),
    (" ", None, (None, None), "Unrestricted"),
])
def test_speed(description, speed, expected, text):
    r = SpeedRestriction.from_description(description, speed)
    assert (r.minimum, r.maximum) == expected
    assert str(r) == text


def test_speed_violation():
    with pytest.raises(RestrictionViolation):
        SpeedRestriction.from_description("B", 250)
