"""
Builders for 132 column CIFP lines.
Positions are 0-based columns as in the record parsers.
"""
import pytest

from cifpy.record import parse

CYCLE = 2313


def arinc_latitude(value: float) -> str:
    hemisphere = "N" if value >= 0 else "S"
    hundredths = round(abs(value) * 360000)
    d, r = divmod(hundredths, 360000)
    m, s = divmod(r, 6000)
    return f"{hemisphere}{d:02d}{m:02d}{s:04d}"


def arinc_longitude(value: float) -> str:
    hemisphere = "E" if value >= 0 else "W"
    hundredths = round(abs(value) * 360000)
    d, r = divmod(hundredths, 360000)
    m, s = divmod(r, 6000)
    return f"{hemisphere}{d:03d}{m:02d}{s:04d}"


def make_line(fields: dict, record_number: int = 1, cycle: int = CYCLE) -> str:
    line = [" "] * 132

    def put(start, text):
        line[start:start + len(text)] = list(text)

    put(0, "SUSA")
    for start, text in fields.items():
        put(start, text)
    put(123, f"{record_number:05d}")
    put(128, f"{cycle:04d}")
    return "".join(line)


def waypoint_line(ident: str, lat: float, lon: float, variation: str = "W0100", airport: str | None = None, record_number: int = 1) -> str:
    fields = {
        13: f"{ident:<5}",
        19: "K4",
        21: "0",
        26: "W  ",
        32: arinc_latitude(lat),
        41: arinc_longitude(lon),
        74: variation,
        98: f"{ident} WAYPOINT"
    }
    if airport is None:
        fields.update({4: "EA", 6: "ENRT"})
    else:
        fields.update({4: "P ", 6: f"{airport:<4}", 10: "K4", 12: "C"})
    return make_line(fields, record_number=record_number)


def airway_line(route: str, seq: int, fix: str, record_number: int = 1) -> str:
    return make_line({
        4: "ER",
        13: f"{route:<5}",
        25: f"{seq:04d}",
        29: f"{fix:<5}",
        34: "K4",
        36: "EA",
        38: "0",
        44: "O",
        45: "B",
        83: "03000"
    }, record_number=record_number)


def vor_line(ident: str, lat: float, lon: float, variation: str = "E0000", dme: bool = True) -> str:
    fields = {
        4: "D ",
        13: f"{ident:<4}",
        19: "K4",
        21: "0",
        22: "11370",
        27: "VDHW " if dme else "V HW ",
        32: arinc_latitude(lat),
        41: arinc_longitude(lon),
        74: variation,
        79: "00500",
        93: f"{ident} VOR"
    }
    if dme:
        fields.update({51: f"{ident:<4}", 55: arinc_latitude(lat), 64: arinc_longitude(lon)})
    return make_line(fields)


def dme_line(ident: str, lat: float, lon: float) -> str:
    return make_line({
        4: "D ",
        13: f"{ident:<4}",
        19: "K4",
        21: "0",
        22: "11370",
        27: " D   ",
        51: f"{ident:<4}",
        55: arinc_latitude(lat),
        64: arinc_longitude(lon),
        93: f"{ident} DME"
    })


def airport_line(ident: str, lat: float, lon: float, variation: str = "W0100", cycle: int = CYCLE) -> str:
    return make_line({
        4: "P ",
        6: f"{ident:<4}",
        10: "K4",
        12: "A",
        13: ident[1:4],
        21: "0",
        32: arinc_latitude(lat),
        41: arinc_longitude(lon),
        51: variation,
        56: "00500",
        70: "18000",
        75: "18000",
        80: "C",
        93: f"{ident} INTERNATIONAL"
    }, cycle=cycle)


def runway_line(airport: str, ident: str, lat: float, lon: float, bearing: str = "1620") -> str:
    return make_line({
        4: "P ",
        6: f"{airport:<4}",
        10: "K4",
        12: "G",
        13: f"RW{ident:<3}",
        21: "0",
        22: "12000",
        27: bearing,
        32: arinc_latitude(lat),
        41: arinc_longitude(lon)
    })


PROCEDURE_COLUMNS = {
    "description": 39,
    "turn": 43,
    "navaid": 50,
    "arc_radius": 56,
    "theta": 62,
    "rho": 66,
    "course": 70,
    "distance": 74,
    "alt_desc": 82,
    "alt1": 84,
    "alt2": 89,
    "speed": 99,
    "center_fix": 106,
    "speed_desc": 117
}


def procedure_line(subsection: str, airport: str, name: str, seq: int, fix: str | None, path_terminator: str,
                   transition: str = "", route_type: str = "5", **kwargs) -> str:
    """
    SID (D), STAR (E) or approach (F) line. Extra columns by name, see PROCEDURE_COLUMNS.
    """
    fields = {
        4: "P ",
        6: f"{airport:<4}",
        10: "K4",
        12: subsection,
        13: f"{name:<6}",
        19: route_type,
        20: f"{transition:<5}",
        26: f"{seq:03d}",
        34: "K4",
        36: "PC",
        38: "0",
        39: "E   ",
        47: path_terminator
    }
    if fix is not None:
        fields[29] = f"{fix:<5}"
    for k, v in kwargs.items():
        fields[PROCEDURE_COLUMNS[k]] = v
    return make_line(fields)


def holding_line(fix: str, course: str = "0900", turn: str = "R", length: str = "   ", time: str = "10", region: str = "ENRT") -> str:
    return make_line({
        4: "EP",
        6: f"{region:<4}",
        10: "K4",
        29: f"{fix:<5}",
        34: "K4",
        36: "EA",
        38: "0",
        39: course,
        43: turn,
        44: length,
        47: time,
        49: "05000",
        98: f"{fix} HOLD"
    })


def airspace_line(center: str, seq: int, lat: float, lon: float, via: str = "G ", airspace_class: str = "B", multiple: str = "A") -> str:
    return make_line({
        4: "UC",
        6: "K4",
        8: "A",
        9: f"{center:<5}",
        16: airspace_class,
        19: multiple,
        20: f"{seq:04d}",
        24: "0",
        30: via,
        32: arinc_latitude(lat),
        41: arinc_longitude(lon),
        81: "GND  ",
        87: "10000",
        92: "M",
        93: f"{center} CLASS {airspace_class}"
    })


def mora_line() -> str:
    return make_line({
        4: "AS",
        13: "N40W080",
        30: "UNK" + "050" * 29
    })


@pytest.fixture
def station():
    # VOR at (0, 0) without magnetic variation offset
    return parse(vor_line("ABC", 0.0, 0.0, variation="E0000"))


@pytest.fixture
def dme_station():
    return parse(dme_line("XYZ", 0.0, 0.0))
