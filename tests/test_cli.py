import json

from cifpy.cli import main

from conftest import waypoint_line, airway_line, airport_line


def write_cifp(tmp_path):
    filename = tmp_path / "FAACIFP18"
    filename.write_text("\n".join([
        "HDR01 FAACIFP18",
        waypoint_line("FIXA", 40.0, -80.0),
        waypoint_line("FIXB", 40.1, -80.0),
        airway_line("V1", 10, "FIXA"),
        airway_line("V1", 20, "FIXB"),
        airport_line("KAAA", 40.05, -80.1),
    ]) + "\n")
    return str(filename)


def test_counts(tmp_path, capsys):
    assert main([write_cifp(tmp_path), "-j", "1"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["type"] == "CIFP"
    assert info["airways"] == 1
    assert info["aerodromes"] == 1


def test_lookups(tmp_path, capsys):
    filename = write_cifp(tmp_path)
    assert main([filename, "-j", "1", "--airway", "v1"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert [p["name"] for p in info[0]["points"]] == ["FIXA", "FIXB"]

    assert main([filename, "-j", "1", "--route", "FIXA", "FIXB"]) == 0
    assert json.loads(capsys.readouterr().out) == ["FIXA", "FIXB"]

    assert main([filename, "-j", "1", "--airport", "KAAA"]) == 0
    assert json.loads(capsys.readouterr().out)["identifier"] == "KAAA"

    assert main([filename, "-j", "1", "--airway", "V9"]) == 1
    assert "not found" in capsys.readouterr().out


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "missing")]) == 1
