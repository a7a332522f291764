"""Static station and waypoint configuration for the shuttle route."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from ..config import settings
from ..models.domain import ShuttleRoute, Station, Waypoint
from ..schemas.stations import RegistryFile

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_ID = "mexico-megenagna"

_BUILTIN_STATIONS = (
    Station(
        id="mexico",
        name="Mexico Square Terminal",
        address="Mexico Square, Kirkos, Addis Ababa",
        latitude=9.0114,
        longitude=38.7459,
    ),
    Station(
        id="megenagna",
        name="Megenagna Terminal",
        address="Megenagna Roundabout, Yeka, Addis Ababa",
        latitude=9.0202,
        longitude=38.8025,
    ),
)

_BUILTIN_ROUTES = (
    ShuttleRoute(
        route_id=DEFAULT_ROUTE_ID,
        origin_id="mexico",
        destination_id="megenagna",
        waypoints=(
            Waypoint(latitude=9.0107, longitude=38.7612, label="Meskel Square"),
            Waypoint(latitude=9.0136, longitude=38.7780, label="Urael"),
            Waypoint(latitude=9.0181, longitude=38.7901, label="Hayahulet"),
        ),
    ),
)


def _check_coordinate(latitude: float, longitude: float, owner: str) -> None:
    if not (-90.0 <= latitude <= 90.0) or not (-180.0 <= longitude <= 180.0):
        raise ValueError(f"{owner} has out-of-range coordinates ({latitude}, {longitude}).")


class StationRegistry:
    """Read-only lookup of stations and the ordered waypoints of each route."""

    def __init__(
        self,
        stations: Iterable[Station],
        routes: Iterable[ShuttleRoute],
        *,
        default_route_id: str | None = None,
    ) -> None:
        station_map: dict[str, Station] = {}
        for station in stations:
            if station.id in station_map:
                raise ValueError(f"Duplicate station id '{station.id}'.")
            _check_coordinate(station.latitude, station.longitude, f"Station '{station.id}'")
            station_map[station.id] = station

        route_map: dict[str, ShuttleRoute] = {}
        for route in routes:
            for station_id in (route.origin_id, route.destination_id):
                if station_id not in station_map:
                    raise ValueError(f"Route '{route.route_id}' references unknown station '{station_id}'.")
            for waypoint in route.waypoints:
                _check_coordinate(waypoint.latitude, waypoint.longitude, f"Waypoint of route '{route.route_id}'")
            route_map[route.route_id] = route

        if not route_map:
            raise ValueError("Station registry needs at least one route.")

        self._stations = MappingProxyType(station_map)
        self._routes = MappingProxyType(route_map)
        self.default_route_id = default_route_id or next(iter(route_map))
        if self.default_route_id not in route_map:
            raise ValueError(f"Default route '{self.default_route_id}' is not defined.")

    def stations(self) -> Mapping[str, Station]:
        return self._stations

    def station(self, station_id: str) -> Station:
        return self._stations[station_id]

    def routes(self) -> Mapping[str, ShuttleRoute]:
        return self._routes

    def route(self, route_id: str | None = None) -> ShuttleRoute:
        return self._routes[route_id or self.default_route_id]

    def waypoints(self, route_id: str | None = None) -> tuple[Waypoint, ...]:
        return self.route(route_id).waypoints

    def terminals(self, route_id: str | None = None) -> tuple[Station, Station]:
        """Return (origin, destination) stations of a route."""
        route = self.route(route_id)
        return self._stations[route.origin_id], self._stations[route.destination_id]


def builtin_registry() -> StationRegistry:
    return StationRegistry(_BUILTIN_STATIONS, _BUILTIN_ROUTES, default_route_id=DEFAULT_ROUTE_ID)


def _load_registry_from_file(source: Path, default_route_id: str | None) -> StationRegistry:
    if not source.exists():
        raise FileNotFoundError(f"Station registry file not found: {source}")

    payload = RegistryFile.model_validate_json(source.read_text(encoding="utf-8"))
    stations = [
        Station(
            id=item.id,
            name=item.name,
            address=item.address,
            latitude=item.latitude,
            longitude=item.longitude,
        )
        for item in payload.stations
    ]
    routes = [
        ShuttleRoute(
            route_id=item.route_id,
            origin_id=item.origin_id,
            destination_id=item.destination_id,
            waypoints=tuple(
                Waypoint(latitude=wp.latitude, longitude=wp.longitude, label=wp.label) for wp in item.waypoints
            ),
        )
        for item in payload.routes
    ]
    return StationRegistry(stations, routes, default_route_id=default_route_id)


def load_registry(source: Path | None = None) -> StationRegistry:
    """Load the registry from a JSON file if one is configured, otherwise the built-in one."""
    path = source or settings.stations_file
    if path is None:
        if settings.default_route_id:
            return StationRegistry(_BUILTIN_STATIONS, _BUILTIN_ROUTES, default_route_id=settings.default_route_id)
        return builtin_registry()

    registry = _load_registry_from_file(path, settings.default_route_id)
    logger.info(f"Loaded {len(registry.stations())} stations and {len(registry.routes())} routes from {path}")
    return registry
