from typing import Literal

from pydantic import BaseModel, Field

TravelMode = Literal["walking", "driving", "transit"]
PointRole = Literal["start", "waypoint", "end"]


class RoutePoint(BaseModel):
    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)
    name: str = ""
    role: PointRole = "waypoint"
    business_id: str | None = None
    arrival_mode: TravelMode | None = None  # mode of the segment ending here

    model_config = {"frozen": True}


class RouteRequest(BaseModel):
    points: list[RoutePoint]
    mode: TravelMode = "walking"
    optimize: bool = True
    timeout_seconds: float | None = Field(default=None, gt=0)
