"""Route optimization entry point — orders chosen venues and reports route metrics."""

import logging
import threading

from wayfinder.exceptions import WayfinderError
from wayfinder.schemas.common import ServiceResponse, validate_payload
from wayfinder.schemas.route import RouteRequest
from wayfinder.services.routing.directions import directions_url, format_distance, format_duration
from wayfinder.services.routing.route_optimizer import RouteOptimizer, route_optimizer
from wayfinder.services.routing.transport_costs import TransportFares, estimate_transport_cost

logger = logging.getLogger(__name__)


class RouteService:
    def __init__(
        self,
        optimizer: RouteOptimizer | None = None,
        fares: TransportFares | None = None,
    ):
        self.optimizer = optimizer or route_optimizer
        self.fares = fares or TransportFares()

    def plan_route(
        self,
        payload: RouteRequest | dict,
        cancel_event: threading.Event | None = None,
    ) -> ServiceResponse:
        """Optimized route with segments, totals, transport cost and display fields."""
        try:
            request = validate_payload(RouteRequest, payload)
            route = self.optimizer.plan(
                request.points,
                mode=request.mode,
                optimize=request.optimize,
                timeout_seconds=request.timeout_seconds,
                cancel_event=cancel_event,
            )
        except WayfinderError as e:
            logger.info(f"Route request rejected ({e.error_type}): {e.reason}")
            return ServiceResponse.fail(e)

        data = route.to_dict()
        data["transport_cost"] = estimate_transport_cost(route, self.fares).to_dict()
        data["distance_text"] = format_distance(route.total_distance_meters)
        data["duration_text"] = format_duration(route.total_duration_seconds)
        data["directions_url"] = directions_url(route.points)

        logger.info(
            f"Planned route through {len(route.points)} points: "
            f"{data['distance_text']}, {data['duration_text']}"
            + (" (cancelled early)" if route.cancelled else "")
        )
        return ServiceResponse.ok(data)


route_service = RouteService()
