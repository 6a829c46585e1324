"""Transport cost estimates for a computed route."""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from wayfinder.config import settings
from wayfinder.services.routing.route_optimizer import Route

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class TransportFares:
    transit_ticket: Decimal = Decimal("5.00")      # flat fare, one ticket per segment
    driving_per_km: Decimal = Decimal("0.42")      # fuel: ~7 L/100km at ~6 per litre


@dataclass
class SegmentCost:
    from_name: str
    to_name: str
    mode: str
    distance_km: float
    duration_minutes: int
    cost: Decimal

    def to_dict(self) -> dict:
        return {
            "from": self.from_name,
            "to": self.to_name,
            "mode": self.mode,
            "distance_km": round(self.distance_km, 2),
            "duration_minutes": self.duration_minutes,
            "cost": str(self.cost),
        }


@dataclass
class TransportCost:
    currency: str
    total_cost: Decimal = Decimal("0.00")
    total_distance_km: float = 0.0
    total_duration_minutes: int = 0
    segments: list[SegmentCost] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "currency": self.currency,
            "total_cost": str(self.total_cost),
            "total_distance_km": round(self.total_distance_km, 2),
            "total_duration_minutes": self.total_duration_minutes,
            "segments": [s.to_dict() for s in self.segments],
        }


def segment_cost(distance_km: float, mode: str, fares: TransportFares) -> Decimal:
    if mode == "transit":
        return fares.transit_ticket
    if mode == "driving":
        km = Decimal(str(distance_km))
        return (km * fares.driving_per_km).quantize(CENTS, rounding=ROUND_HALF_UP)
    return Decimal("0.00")


def estimate_transport_cost(
    route: Route,
    fares: TransportFares | None = None,
    currency: str | None = None,
) -> TransportCost:
    """Per-segment and total travel cost for ``route`` using each segment's mode."""
    fares = fares or TransportFares()
    result = TransportCost(currency=currency or settings.currency)

    for seg in route.segments:
        distance_km = seg.distance_meters / 1000
        cost = segment_cost(distance_km, seg.mode, fares)
        minutes = round(seg.duration_seconds / 60)
        result.segments.append(SegmentCost(
            from_name=seg.from_point.name,
            to_name=seg.to_point.name,
            mode=seg.mode,
            distance_km=distance_km,
            duration_minutes=minutes,
            cost=cost,
        ))
        result.total_cost += cost
        result.total_distance_km += distance_km
        result.total_duration_minutes += minutes

    result.total_cost = result.total_cost.quantize(CENTS)
    logger.debug(f"Transport cost {result.total_cost} {result.currency} over {len(result.segments)} segments")
    return result
