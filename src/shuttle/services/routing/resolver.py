"""Live route resolution against the directions provider."""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from ...models.domain import RouteGeometry, RoutePoint, RouteSource, Station, Waypoint
from .errors import UpstreamEmptyRoute, UpstreamMalformedResponse
from .osrm_client import NO_ROUTE_CODES, OSRMClient

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _non_negative(route: dict, field: str) -> float:
    value = route.get(field)
    if not _is_number(value):
        raise UpstreamMalformedResponse(f"Route field '{field}' is missing or not a number.")
    if value < 0:
        raise UpstreamMalformedResponse(f"Route field '{field}' is negative ({value}).")
    return float(value)


def _parse_point(pair: Any, index: int) -> RoutePoint:
    # Provider pairs are [lon, lat]; RoutePoint is (lat, lon).
    if not isinstance(pair, (list, tuple)) or len(pair) < 2:
        raise UpstreamMalformedResponse(f"Coordinate #{index} is not a [lon, lat] pair.")
    lon, lat = pair[0], pair[1]
    if not _is_number(lon) or not _is_number(lat):
        raise UpstreamMalformedResponse(f"Coordinate #{index} contains non-numeric values.")
    return RoutePoint(latitude=float(lat), longitude=float(lon))


def parse_route_response(data: Any) -> RouteGeometry:
    """Turn an OSRM /route payload into a live RouteGeometry.

    Only routes[0].geometry.coordinates, routes[0].distance and
    routes[0].duration are read; everything else is ignored.
    """
    if not isinstance(data, dict):
        raise UpstreamMalformedResponse("OSRM response is not a JSON object.")

    code = data.get("code")
    if code is not None and code != "Ok":
        if code in NO_ROUTE_CODES:
            raise UpstreamEmptyRoute(f"OSRM found no route ({code}).")
        raise UpstreamMalformedResponse(f"OSRM route request failed: {data.get('message', code)}")

    if "routes" not in data:
        raise UpstreamMalformedResponse("OSRM response missing 'routes'.")
    routes = data["routes"]
    if not isinstance(routes, list):
        raise UpstreamMalformedResponse("OSRM 'routes' is not a list.")
    if not routes:
        raise UpstreamEmptyRoute("OSRM returned no routes.")

    route = routes[0]
    if not isinstance(route, dict):
        raise UpstreamMalformedResponse("OSRM route entry is not an object.")

    geometry = route.get("geometry")
    if not isinstance(geometry, dict):
        raise UpstreamMalformedResponse("OSRM route geometry is missing; expected geometries=geojson.")
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list):
        raise UpstreamMalformedResponse("OSRM route geometry has no coordinate list.")
    if len(coordinates) < 2:
        raise UpstreamEmptyRoute(f"OSRM route geometry has {len(coordinates)} coordinate(s); need at least 2.")

    points = tuple(_parse_point(pair, index) for index, pair in enumerate(coordinates))
    return RouteGeometry(
        points=points,
        distance_meters=_non_negative(route, "distance"),
        duration_seconds=_non_negative(route, "duration"),
        source=RouteSource.LIVE,
    )


class RouteResolver:
    """Resolves the live outbound geometry for origin -> waypoints -> destination."""

    def __init__(self, client: OSRMClient | None = None) -> None:
        self._client = client or OSRMClient()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def resolve(
        self,
        origin: Station,
        waypoints: Sequence[Waypoint],
        destination: Station,
    ) -> RouteGeometry:
        coordinates = [
            (origin.latitude, origin.longitude),
            *((waypoint.latitude, waypoint.longitude) for waypoint in waypoints),
            (destination.latitude, destination.longitude),
        ]
        data = await self._client.route(coordinates)
        geometry = parse_route_response(data)
        logger.info(
            f"Resolved live route {origin.id} -> {destination.id}: "
            f"{len(geometry.points)} points, {geometry.distance_meters:.0f} m, {geometry.duration_seconds:.0f} s"
        )
        return geometry
