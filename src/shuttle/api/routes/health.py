"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.routing.osrm_client import OSRMClient, check_health
from ...services.routing.service import TripRouteService
from .dependencies import get_trip_service

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
async def health_osrm(service: TripRouteService = Depends(get_trip_service)) -> dict:
    """Check that OSRM can route between the shuttle terminals."""
    origin, destination = service.registry.terminals(service.route_id)
    client = OSRMClient()
    try:
        healthy = await check_health(
            client,
            [(origin.latitude, origin.longitude), (destination.latitude, destination.longitude)],
        )
    finally:
        await client.aclose()
    return {"service": "osrm", "base_url": client.base_url, "healthy": healthy}
