"""Deterministic fallback geometry built from the station registry alone."""

from __future__ import annotations

import math
from typing import Sequence

from ...config import settings
from ...models.domain import RouteGeometry, RoutePoint, RouteSource, Station, Waypoint
from .errors import FallbackConstructionError


def _point(latitude: float, longitude: float, owner: str) -> RoutePoint:
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise FallbackConstructionError(f"{owner} has non-finite coordinates ({latitude}, {longitude}).")
    return RoutePoint(latitude=float(latitude), longitude=float(longitude))


def build_fallback(
    origin: Station,
    waypoints: Sequence[Waypoint],
    destination: Station,
    *,
    distance_meters: float | None = None,
    duration_seconds: float | None = None,
) -> RouteGeometry:
    """Straight-segment path origin -> waypoints -> destination with nominal metrics.

    Distance and duration come from configuration and are estimates; they are
    not derived from the points.
    """
    distance = settings.fallback_distance_meters if distance_meters is None else distance_meters
    duration = settings.fallback_duration_seconds if duration_seconds is None else duration_seconds
    if not (math.isfinite(distance) and math.isfinite(duration)) or distance < 0 or duration < 0:
        raise FallbackConstructionError(f"Invalid nominal fallback metrics ({distance} m, {duration} s).")

    points = [_point(origin.latitude, origin.longitude, f"Station '{origin.id}'")]
    points.extend(
        _point(waypoint.latitude, waypoint.longitude, f"Waypoint '{waypoint.label or index}'")
        for index, waypoint in enumerate(waypoints)
    )
    points.append(_point(destination.latitude, destination.longitude, f"Station '{destination.id}'"))

    return RouteGeometry(
        points=tuple(points),
        distance_meters=float(distance),
        duration_seconds=float(duration),
        source=RouteSource.FALLBACK,
    )
