"""Station registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...schemas.stations import ShuttleRouteModel, StationModel, StationsResponse, WaypointModel
from ...services.routing.service import TripRouteService
from .dependencies import get_trip_service

router = APIRouter(prefix="/stations", tags=["stations"])


@router.get("", response_model=StationsResponse, status_code=status.HTTP_200_OK)
def list_stations(service: TripRouteService = Depends(get_trip_service)) -> StationsResponse:
    registry = service.registry
    return StationsResponse(
        default_route_id=registry.default_route_id,
        stations=[
            StationModel(
                id=station.id,
                name=station.name,
                address=station.address,
                latitude=station.latitude,
                longitude=station.longitude,
            )
            for station in registry.stations().values()
        ],
        routes=[
            ShuttleRouteModel(
                route_id=route.route_id,
                origin_id=route.origin_id,
                destination_id=route.destination_id,
                waypoints=[
                    WaypointModel(latitude=wp.latitude, longitude=wp.longitude, label=wp.label)
                    for wp in route.waypoints
                ],
            )
            for route in registry.routes().values()
        ],
    )
