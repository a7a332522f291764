"""Station registry schemas (file format and API responses)."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class StationModel(BaseModel):
    id: str
    name: str
    address: str = ""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class WaypointModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    label: Optional[str] = None


class ShuttleRouteModel(BaseModel):
    route_id: str
    origin_id: str
    destination_id: str
    waypoints: List[WaypointModel] = Field(default_factory=list)


class RegistryFile(BaseModel):
    """Layout of the JSON file referenced by SHUTTLE_STATIONS_FILE."""

    stations: List[StationModel] = Field(..., min_length=2)
    routes: List[ShuttleRouteModel] = Field(..., min_length=1)


class StationsResponse(BaseModel):
    default_route_id: str
    stations: List[StationModel]
    routes: List[ShuttleRouteModel]
