"""Route resolution services."""

from .errors import (
    FallbackConstructionError,
    NetworkUnavailable,
    RouteResolutionError,
    ServiceDisposed,
    UpstreamEmptyRoute,
    UpstreamMalformedResponse,
)
from .fallback import build_fallback
from .metrics import to_kilometers, to_minutes
from .resolver import RouteResolver, parse_route_response
from .service import RouteStatus, TripRouteService, TripRouteSnapshot, TripRouteState

__all__ = [
    "RouteResolver",
    "parse_route_response",
    "build_fallback",
    "to_kilometers",
    "to_minutes",
    "TripRouteService",
    "TripRouteSnapshot",
    "TripRouteState",
    "RouteStatus",
    "RouteResolutionError",
    "NetworkUnavailable",
    "UpstreamMalformedResponse",
    "UpstreamEmptyRoute",
    "FallbackConstructionError",
    "ServiceDisposed",
]
