"""Domain models for stations, waypoints and resolved route geometry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RouteSource(str, Enum):
    """Provenance of a route geometry."""

    LIVE = "Live"
    FALLBACK = "Fallback"


@dataclass(frozen=True, slots=True)
class Station:
    """A fixed terminal endpoint of the shuttle route."""

    id: str
    name: str
    address: str
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Waypoint:
    """An intermediate point between two stations."""

    latitude: float
    longitude: float
    label: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RoutePoint:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class ShuttleRoute:
    """Binds a route id to its terminals and the ordered waypoints between them."""

    route_id: str
    origin_id: str
    destination_id: str
    waypoints: tuple[Waypoint, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteGeometry:
    """An ordered path plus aggregate distance/duration and a provenance tag."""

    points: tuple[RoutePoint, ...]
    distance_meters: float
    duration_seconds: float
    source: RouteSource

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError("A route geometry needs at least two points.")
        if self.distance_meters < 0 or self.duration_seconds < 0:
            raise ValueError("Route distance and duration must be non-negative.")

    def reversed(self) -> RouteGeometry:
        """Return the return-trip geometry: same metrics and source, points reversed."""
        return RouteGeometry(
            points=tuple(reversed(self.points)),
            distance_meters=self.distance_meters,
            duration_seconds=self.duration_seconds,
            source=self.source,
        )
