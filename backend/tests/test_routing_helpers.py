from decimal import ROUND_HALF_UP, Decimal

import pytest

from wayfinder.exceptions import InvalidInput
from wayfinder.schemas.route import RoutePoint
from wayfinder.services.routing.directions import directions_url, format_distance, format_duration
from wayfinder.services.routing.geo import haversine_meters
from wayfinder.services.routing.route_optimizer import OptimizerConfig, RouteOptimizer
from wayfinder.services.routing.transport_costs import TransportFares, estimate_transport_cost


def _point(name, lat, lng, **kwargs) -> RoutePoint:
    return RoutePoint(latitude=lat, longitude=lng, name=name, **kwargs)


# ---------- geo ----------


def test_haversine_one_degree_of_latitude():
    assert haversine_meters(0.0, 0.0, 1.0, 0.0) == pytest.approx(111195, rel=1e-4)


def test_haversine_is_symmetric_and_zero_for_same_point():
    d1 = haversine_meters(44.43, 26.10, 45.75, 21.22)
    d2 = haversine_meters(45.75, 21.22, 44.43, 26.10)
    assert d1 == pytest.approx(d2)
    assert haversine_meters(44.43, 26.10, 44.43, 26.10) == 0.0


def test_haversine_handles_antipodal_points():
    assert haversine_meters(0.0, 0.0, 0.0, 180.0) == pytest.approx(6371e3 * 3.141592653589793)


# ---------- directions ----------


def test_format_distance():
    assert format_distance(850) == "850m"
    assert format_distance(1234) == "1.2km"
    assert format_distance(15000) == "15.0km"


def test_format_duration():
    assert format_duration(2700) == "45m"
    assert format_duration(3900) == "1h 5m"
    assert format_duration(59) == "0m"


def test_google_directions_url_uses_waypoints():
    points = [_point("a", 1.0, 2.0), _point("b", 3.0, 4.0), _point("c", 5.0, 6.0)]
    url = directions_url(points)
    assert url.startswith("https://www.google.com/maps/dir/?api=1")
    assert "waypoints=1.0,2.0%7C3.0,4.0" in url
    assert url.endswith("&destination=5.0,6.0")


def test_single_point_and_waze_urls():
    only = [_point("a", 1.0, 2.0)]
    assert directions_url(only) == "https://www.google.com/maps/dir/?api=1&destination=1.0,2.0"
    assert directions_url(only + [_point("b", 3.0, 4.0)], provider="waze") == (
        "https://www.waze.com/ul?ll=3.0,4.0&navigate=yes"
    )
    assert directions_url([]) == ""


def test_unknown_provider_is_rejected():
    with pytest.raises(InvalidInput):
        directions_url([_point("a", 1.0, 2.0)], provider="atlas")


# ---------- transport costs ----------


def test_transport_cost_per_mode():
    points = [
        _point("hotel", 0.0, 0.0),
        _point("park", 0.01, 0.0),
        _point("museum", 0.03, 0.0, arrival_mode="transit"),
        _point("dinner", 0.08, 0.0, arrival_mode="driving"),
    ]
    route = RouteOptimizer(OptimizerConfig()).build_route(points, mode="walking")

    cost = estimate_transport_cost(route, TransportFares(), currency="EUR")

    walking, transit, driving = cost.segments
    assert walking.cost == Decimal("0.00")
    assert transit.cost == Decimal("5.00")
    expected_driving = (
        Decimal(str(driving.distance_km)) * Decimal("0.42")
    ).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    assert driving.cost == expected_driving
    assert cost.total_cost == walking.cost + transit.cost + driving.cost
    assert cost.currency == "EUR"
    assert cost.total_distance_km == pytest.approx(route.total_distance_meters / 1000)
    assert cost.to_dict()["segments"][1]["from"] == "park"


def test_transport_cost_of_empty_route():
    route = RouteOptimizer(OptimizerConfig()).build_route([], mode="walking")
    cost = estimate_transport_cost(route)
    assert cost.total_cost == Decimal("0.00")
    assert cost.segments == []
