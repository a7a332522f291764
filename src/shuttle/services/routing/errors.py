"""Route resolution errors."""

from __future__ import annotations


class RouteResolutionError(Exception):
    """Base class for recoverable failures while resolving the live route."""


class NetworkUnavailable(RouteResolutionError):
    """Transport-level failure or timeout talking to the directions provider."""


class UpstreamMalformedResponse(RouteResolutionError):
    """The provider answered, but the payload does not match the expected schema."""


class UpstreamEmptyRoute(RouteResolutionError):
    """The provider answered without a usable route."""


class ServiceDisposed(RuntimeError):
    """A resolution was requested from a TripRouteService after dispose()."""


class FallbackConstructionError(Exception):
    """The registry data cannot produce a consistent fallback geometry. Not recoverable."""
