"""Recommendation configuration — single source for weights, limits and estimates."""

import math
from dataclasses import dataclass, field
from decimal import Decimal

from wayfinder.config import settings
from wayfinder.exceptions import InvalidInput, InvalidWeightConfig

WEIGHT_SUM_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ScoringWeights:
    """Weights for the composite fit score. Must be non-negative and sum to 1.0."""
    budget_fit: float = 0.35
    preference_match: float = 0.30
    proximity: float = 0.20
    popularity: float = 0.15

    def __post_init__(self):
        values = self.as_dict()
        negative = [name for name, w in values.items() if not math.isfinite(w) or w < 0]
        if negative:
            raise InvalidWeightConfig(
                f"Weights must be finite and non-negative: {', '.join(negative)}"
            )
        total = math.fsum(values.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidWeightConfig(f"Weights must sum to 1.0 (got {total:.6f})")

    def as_dict(self) -> dict[str, float]:
        # Order here is the factor evaluation order
        return {
            "budget_fit": self.budget_fit,
            "preference_match": self.preference_match,
            "proximity": self.proximity,
            "popularity": self.popularity,
        }

    @classmethod
    def from_settings(cls) -> "ScoringWeights":
        return cls(
            budget_fit=settings.weight_budget_fit,
            preference_match=settings.weight_preference_match,
            proximity=settings.weight_proximity,
            popularity=settings.weight_popularity,
        )

    @classmethod
    def from_mapping(cls, mapping: dict[str, float]) -> "ScoringWeights":
        """Build weights from an admin-supplied mapping; every factor is required."""
        expected = set(cls().as_dict())
        unknown = set(mapping) - expected
        missing = expected - set(mapping)
        if unknown or missing:
            raise InvalidWeightConfig(
                f"Weight keys must be exactly {sorted(expected)} "
                f"(unknown: {sorted(unknown)}, missing: {sorted(missing)})"
            )
        try:
            values = {k: float(v) for k, v in mapping.items()}
        except (TypeError, ValueError) as e:
            raise InvalidWeightConfig(f"Weights must be numbers: {e}") from e
        return cls(**values)


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring engine parameters."""
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    max_radius_meters: float = 15000.0   # proximity scores 0 beyond this

    def __post_init__(self):
        if not math.isfinite(self.max_radius_meters) or self.max_radius_meters <= 0:
            raise InvalidInput("max_radius_meters must be a positive number")

    @classmethod
    def from_settings(cls) -> "ScoringConfig":
        return cls(
            weights=ScoringWeights.from_settings(),
            max_radius_meters=settings.max_radius_meters,
        )


@dataclass(frozen=True)
class RankingConfig:
    """Ranking pipeline limits and parallelism."""
    limit: int = 20
    workers: int = 1                   # 1 = score serially
    parallel_min_candidates: int = 64  # below this, always serial

    @classmethod
    def from_settings(cls) -> "RankingConfig":
        return cls(
            limit=settings.ranking_limit,
            workers=settings.scoring_workers,
            parallel_min_candidates=settings.parallel_scoring_min_candidates,
        )


@dataclass(frozen=True)
class PriceEstimates:
    """Per-unit price multipliers when a venue only exposes a price level (1-4)."""
    default_price_level: int = 2
    hotel_per_room_night: Decimal = Decimal("50")   # x level x nights x rooms
    restaurant_per_person: Decimal = Decimal("30")  # x level x group size
    activity_per_person: Decimal = Decimal("20")    # x level x group size
    guests_per_room: int = 2


@dataclass(frozen=True)
class RecommendationConfig:
    """Top-level config aggregating all sub-configs."""
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    prices: PriceEstimates = field(default_factory=PriceEstimates)

    @classmethod
    def from_settings(cls) -> "RecommendationConfig":
        return cls(
            scoring=ScoringConfig.from_settings(),
            ranking=RankingConfig.from_settings(),
        )


# Singleton, built from environment settings at import
recommendation_config = RecommendationConfig.from_settings()
