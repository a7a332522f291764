"""Published trip route snapshot schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..services.routing.service import TripRouteSnapshot


class RoutePointModel(BaseModel):
    lat: float
    lon: float


class TripRouteSnapshotModel(BaseModel):
    """Snapshot as consumed by the map and trip-info screens."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    outbound_route: List[RoutePointModel] = Field(default_factory=list)
    return_route: List[RoutePointModel] = Field(default_factory=list)
    distance_km: Optional[float] = None
    duration_min: Optional[int] = None
    route_source: Optional[Literal["Live", "Fallback"]] = None
    status: str
    resolved_at: Optional[datetime] = None

    @classmethod
    def from_snapshot(cls, snapshot: TripRouteSnapshot) -> "TripRouteSnapshotModel":
        return cls(
            outbound_route=[RoutePointModel(lat=p.latitude, lon=p.longitude) for p in snapshot.outbound_route],
            return_route=[RoutePointModel(lat=p.latitude, lon=p.longitude) for p in snapshot.return_route],
            distance_km=snapshot.distance_km,
            duration_min=snapshot.duration_min,
            route_source=snapshot.route_source.value if snapshot.route_source else None,
            status=snapshot.status.value,
            resolved_at=snapshot.resolved_at,
        )
