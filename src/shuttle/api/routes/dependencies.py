"""Request-scoped access to the application's trip service."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ...services.routing.service import TripRouteService


def get_trip_service(request: Request) -> TripRouteService:
    service = getattr(request.app.state, "trip_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Trip route service is not running.",
        )
    return service
