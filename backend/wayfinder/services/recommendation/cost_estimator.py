"""Cost estimator — fills in a venue cost from its price level when none is listed."""

import math
from decimal import Decimal

from wayfinder.exceptions import InvalidInput
from wayfinder.services.recommendation.config import PriceEstimates, recommendation_config

MIN_PRICE_LEVEL = 1
MAX_PRICE_LEVEL = 4


def estimate_cost(
    category: str,
    price_level: int | None,
    group_size: int,
    days: int,
    prices: PriceEstimates | None = None,
) -> Decimal:
    """Estimated total cost of a venue for the whole party.

    hotel:      level * 50 * nights * rooms (two guests per room)
    restaurant: level * 30 * group size
    activity:   level * 20 * group size
    """
    prices = prices or recommendation_config.prices
    level = prices.default_price_level if price_level is None else price_level
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidInput(f"price_level must be a whole number (got {level!r})")
    if not MIN_PRICE_LEVEL <= level <= MAX_PRICE_LEVEL:
        raise InvalidInput(f"price_level must be between {MIN_PRICE_LEVEL} and {MAX_PRICE_LEVEL} (got {level})")
    if group_size < 1 or days < 1:
        raise InvalidInput("group_size and days must be at least 1")

    if category == "hotel":
        rooms = math.ceil(group_size / prices.guests_per_room)
        return prices.hotel_per_room_night * level * days * rooms
    if category == "restaurant":
        return prices.restaurant_per_person * level * group_size
    if category == "activity":
        return prices.activity_per_person * level * group_size
    raise InvalidInput(f"Unknown category {category!r}")
