"""Boundary models — strict pydantic schemas validated before entering the core."""

from wayfinder.schemas.budget import BudgetRequest
from wayfinder.schemas.common import ServiceResponse, validate_payload
from wayfinder.schemas.route import PointRole, RoutePoint, RouteRequest, TravelMode
from wayfinder.schemas.trip import (
    Candidate,
    Category,
    Coordinates,
    DateRange,
    RankingRequest,
    TripParams,
)

__all__ = [
    "BudgetRequest",
    "Candidate",
    "Category",
    "Coordinates",
    "DateRange",
    "PointRole",
    "RankingRequest",
    "RoutePoint",
    "RouteRequest",
    "ServiceResponse",
    "TravelMode",
    "TripParams",
    "validate_payload",
]
