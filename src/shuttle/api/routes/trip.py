"""Trip route endpoints consumed by the map and trip-info screens."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.routing import TripRouteSnapshotModel
from ...services.routing.errors import FallbackConstructionError, ServiceDisposed
from ...services.routing.service import TripRouteService
from .dependencies import get_trip_service

router = APIRouter(prefix="/trip", tags=["trip"])


@router.get("/route", response_model=TripRouteSnapshotModel, status_code=status.HTTP_200_OK)
def get_route(service: TripRouteService = Depends(get_trip_service)) -> TripRouteSnapshotModel:
    """Return the latest published snapshot without triggering a resolution."""
    return TripRouteSnapshotModel.from_snapshot(service.snapshot())


@router.post("/route/refresh", response_model=TripRouteSnapshotModel, status_code=status.HTTP_200_OK)
async def refresh_route(service: TripRouteService = Depends(get_trip_service)) -> TripRouteSnapshotModel:
    """Re-resolve the route. Concurrent calls share one provider request."""
    try:
        snapshot = await service.refresh()
    except ServiceDisposed as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except FallbackConstructionError as exc:
        logging.exception(f"Fallback route could not be built: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build route: {str(exc)}",
        ) from exc
    return TripRouteSnapshotModel.from_snapshot(snapshot)
