"""Display helpers — human-readable distances/durations and map provider links."""

from urllib.parse import quote

from wayfinder.exceptions import InvalidInput
from wayfinder.schemas.route import RoutePoint

GOOGLE_DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1"
WAZE_URL = "https://www.waze.com/ul"


def format_distance(meters: float) -> str:
    """``850m`` below a kilometre, ``1.2km`` above."""
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"


def format_duration(seconds: float) -> str:
    """``45m`` under an hour, ``1h 5m`` otherwise."""
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes = rest // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _latlng(point: RoutePoint) -> str:
    return f"{point.latitude},{point.longitude}"


def directions_url(points: list[RoutePoint], provider: str = "google") -> str:
    """Deep link that opens the route in Google Maps or Waze.

    Waze has no waypoint support, so it navigates to the final point only.
    """
    if not points:
        return ""

    destination = points[-1]
    if provider == "waze":
        return f"{WAZE_URL}?ll={_latlng(destination)}&navigate=yes"
    if provider != "google":
        raise InvalidInput(f"Unknown directions provider {provider!r}")

    if len(points) == 1:
        return f"{GOOGLE_DIRECTIONS_URL}&destination={_latlng(destination)}"

    waypoints = "|".join(_latlng(p) for p in points[:-1])
    return (
        f"{GOOGLE_DIRECTIONS_URL}&waypoints={quote(waypoints, safe=',')}"
        f"&destination={_latlng(destination)}"
    )
