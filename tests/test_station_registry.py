import json
from pathlib import Path

import pytest

from shuttle.config import settings
from shuttle.data.station_registry import DEFAULT_ROUTE_ID, StationRegistry, builtin_registry, load_registry
from shuttle.models.domain import ShuttleRoute, Station, Waypoint


def _station(sid: str, lat: float, lon: float) -> Station:
    return Station(id=sid, name=f"Station {sid}", address=f"{sid} road", latitude=lat, longitude=lon)


def test_builtin_registry_exposes_terminals_and_ordered_waypoints():
    registry = builtin_registry()

    assert registry.default_route_id == DEFAULT_ROUTE_ID
    origin, destination = registry.terminals()
    assert origin.id == "mexico"
    assert (origin.latitude, origin.longitude) == (9.0114, 38.7459)
    assert destination.id == "megenagna"

    labels = [waypoint.label for waypoint in registry.waypoints(DEFAULT_ROUTE_ID)]
    assert labels == ["Meskel Square", "Urael", "Hayahulet"]


def test_stations_mapping_is_read_only():
    registry = builtin_registry()
    stations = registry.stations()

    assert set(stations) == {"mexico", "megenagna"}
    with pytest.raises(TypeError):
        stations["new"] = _station("new", 1.0, 1.0)


def test_unknown_route_raises_key_error():
    with pytest.raises(KeyError):
        builtin_registry().waypoints("does-not-exist")


def test_route_referencing_unknown_station_is_rejected():
    with pytest.raises(ValueError, match="unknown station"):
        StationRegistry(
            [_station("A", 9.0, 38.7)],
            [ShuttleRoute(route_id="R1", origin_id="A", destination_id="B")],
        )


def test_out_of_range_waypoint_is_rejected():
    with pytest.raises(ValueError, match="out-of-range"):
        StationRegistry(
            [_station("A", 9.0, 38.7), _station("B", 9.1, 38.8)],
            [ShuttleRoute(route_id="R1", origin_id="A", destination_id="B", waypoints=(Waypoint(91.0, 38.75),))],
        )


def test_duplicate_station_ids_are_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        StationRegistry([_station("A", 9.0, 38.7), _station("A", 9.1, 38.8)], [])


def test_load_registry_from_json_file(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "default_route_id", None)
    payload = {
        "stations": [
            {"id": "north", "name": "North", "address": "1 North St", "latitude": 9.05, "longitude": 38.74},
            {"id": "south", "name": "South", "latitude": 8.98, "longitude": 38.76},
        ],
        "routes": [
            {
                "route_id": "north-south",
                "origin_id": "north",
                "destination_id": "south",
                "waypoints": [{"latitude": 9.01, "longitude": 38.75, "label": "Centre"}],
            }
        ],
    }
    source = tmp_path / "stations.json"
    source.write_text(json.dumps(payload), encoding="utf-8")

    registry = load_registry(source)

    assert registry.default_route_id == "north-south"
    assert registry.station("south").address == ""
    assert registry.waypoints() == (Waypoint(latitude=9.01, longitude=38.75, label="Centre"),)


def test_load_registry_rejects_invalid_file(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(settings, "default_route_id", None)
    source = tmp_path / "stations.json"
    source.write_text(json.dumps({"stations": [], "routes": []}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_registry(source)


def test_load_registry_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_registry(tmp_path / "missing.json")


def test_load_registry_defaults_to_builtin(monkeypatch):
    monkeypatch.setattr(settings, "stations_file", None)
    monkeypatch.setattr(settings, "default_route_id", None)

    registry = load_registry()

    assert registry.default_route_id == DEFAULT_ROUTE_ID
