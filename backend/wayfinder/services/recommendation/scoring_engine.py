"""Scoring engine — composite fit score for one candidate against trip parameters.

Factors (each normalized to 0-1, weighted by ScoringWeights):
  budget_fit        1.0 up to the per-day allowance, linear to 0 at twice it
  preference_match  share of the traveler's preference tags the venue carries
  proximity         1 at the anchor, linear to 0 at max_radius_meters
  popularity        rating / 5

Stateless and deterministic: no I/O, no randomness.
"""

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_FLOOR, Decimal

from wayfinder.schemas.trip import Candidate, TripParams
from wayfinder.services.recommendation.budget_tracker import BudgetState
from wayfinder.services.recommendation.config import ScoringConfig, recommendation_config
from wayfinder.services.routing.geo import haversine_meters

logger = logging.getLogger(__name__)


# ---------- Data structures ----------


@dataclass(frozen=True)
class FactorScore:
    """One factor's normalized value and its weighted contribution."""

    raw: float       # 0-1
    weight: float
    weighted: float  # raw * weight

    def to_dict(self) -> dict:
        return {
            "raw": round(self.raw, 4),
            "weight": self.weight,
            "weighted": round(self.weighted, 4),
        }


@dataclass
class RankedLocation:
    """A candidate with its composite score. ``rank`` is assigned by the pipeline."""

    candidate: Candidate
    score: float
    score_breakdown: dict[str, FactorScore] = field(default_factory=dict)
    rank: int = 0                   # 1-based once ranked
    distance_meters: float = 0.0    # from the trip anchor

    def to_dict(self) -> dict:
        return {
            "candidate_id": self.candidate.id,
            "name": self.candidate.name,
            "category": self.candidate.category,
            "estimated_cost": str(self.candidate.estimated_cost),
            "score": round(self.score, 4),
            "breakdown": {k: round(f.weighted, 4) for k, f in self.score_breakdown.items()},
            "factors": {k: f.to_dict() for k, f in self.score_breakdown.items()},
            "distance_meters": round(self.distance_meters, 1),
            "rank": self.rank,
        }


# ---------- Factor functions ----------


def daily_allowance(state: BudgetState, days: int) -> Decimal:
    """Remaining budget per remaining day, rounded down to a whole unit."""
    return (state.remaining / Decimal(days)).to_integral_value(rounding=ROUND_FLOOR)


def budget_fit(cost: Decimal, allowance: Decimal) -> float:
    if allowance <= 0:
        return 1.0 if cost <= 0 else 0.0
    if cost <= allowance:
        return 1.0
    ratio = float(cost / allowance)
    return max(0.0, 2.0 - ratio)


def preference_match(tags: frozenset[str], preferences: frozenset[str]) -> float:
    matches = len(tags & preferences)
    return min(1.0, max(0.0, matches / max(1, len(preferences))))


def proximity(distance_meters: float, max_radius_meters: float) -> float:
    return 1.0 - min(1.0, distance_meters / max_radius_meters)


def popularity(rating: float) -> float:
    return min(1.0, max(0.0, rating / 5.0))


# ---------- Engine ----------


class ScoringEngine:
    """Weighted multi-factor scoring of a single candidate."""

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or recommendation_config.scoring

    def score(
        self,
        candidate: Candidate,
        params: TripParams,
        current_spend: Decimal | float | int = Decimal("0"),
    ) -> RankedLocation:
        """Score ``candidate``; raises InvalidInput if current spend is out of range."""
        state = BudgetState(total_budget=params.total_budget, committed_spend=current_spend)
        return self.score_with_allowance(candidate, params, daily_allowance(state, params.days))

    def score_with_allowance(
        self,
        candidate: Candidate,
        params: TripParams,
        allowance: Decimal,
    ) -> RankedLocation:
        """Score against a precomputed per-day allowance (shared across a ranking call)."""
        distance = haversine_meters(
            params.anchor.lat, params.anchor.lng,
            candidate.coords.lat, candidate.coords.lng,
        )

        raw = {
            "budget_fit": budget_fit(candidate.estimated_cost, allowance),
            "preference_match": preference_match(candidate.tags, params.preference_tags),
            "proximity": proximity(distance, self.config.max_radius_meters),
            "popularity": popularity(candidate.popularity_rating),
        }

        breakdown: dict[str, FactorScore] = {}
        for name, weight in self.config.weights.as_dict().items():
            value = raw[name]
            breakdown[name] = FactorScore(raw=value, weight=weight, weighted=value * weight)

        total = math.fsum(f.weighted for f in breakdown.values())
        total = min(1.0, max(0.0, total))

        return RankedLocation(
            candidate=candidate,
            score=total,
            score_breakdown=breakdown,
            distance_meters=distance,
        )


scoring_engine = ScoringEngine()
