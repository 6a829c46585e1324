"""Ranking pipeline — filters, scores, orders and truncates candidates for one category.

Steps:
  1. Keep candidates of the requested category
  2. Drop candidates the remaining budget cannot cover
  3. Score survivors (optionally across a thread pool)
  4. Sort by score desc, popularity desc, id asc
  5. Truncate to ``limit`` and assign 1-based ranks
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import get_args

from wayfinder.exceptions import InvalidInput
from wayfinder.schemas.trip import Candidate, Category, TripParams
from wayfinder.services.recommendation.budget_tracker import BudgetState, BudgetTracker, budget_tracker
from wayfinder.services.recommendation.config import RankingConfig, recommendation_config
from wayfinder.services.recommendation.scoring_engine import (
    RankedLocation,
    ScoringEngine,
    daily_allowance,
    scoring_engine,
)

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = get_args(Category)


def ranking_key(ranked: RankedLocation) -> tuple:
    """Total order: higher score, then higher popularity, then smaller id."""
    return (-ranked.score, -ranked.candidate.popularity_rating, ranked.candidate.id)


class RankingPipeline:
    """Orchestrates budget filtering, scoring and deterministic ordering."""

    def __init__(
        self,
        engine: ScoringEngine | None = None,
        config: RankingConfig | None = None,
        tracker: BudgetTracker | None = None,
    ):
        self.engine = engine or scoring_engine
        self.config = config or recommendation_config.ranking
        self.tracker = tracker or budget_tracker

    def rank(
        self,
        candidates: list[Candidate],
        params: TripParams,
        category: str,
        current_spend: Decimal | float | int = Decimal("0"),
        limit: int | None = None,
    ) -> list[RankedLocation]:
        """Return at most ``limit`` ranked candidates; empty input gives an empty list."""
        if category not in CATEGORIES:
            raise InvalidInput(f"category must be one of {', '.join(CATEGORIES)} (got {category!r})")
        limit = self.config.limit if limit is None else limit
        if limit < 1:
            raise InvalidInput(f"limit must be at least 1 (got {limit})")

        state = BudgetState(total_budget=params.total_budget, committed_spend=current_spend)
        started = time.perf_counter()

        # 1-2. Category and affordability filters
        in_category = [c for c in candidates if c.category == category]
        affordable = [c for c in in_category if self.tracker.can_afford(state, c.estimated_cost)]

        if not affordable:
            logger.debug(
                f"No affordable {category} candidates "
                f"({len(in_category)} in category, remaining {state.remaining})"
            )
            return []

        # 3. Score
        allowance = daily_allowance(state, params.days)
        scored = self._score_all(affordable, params, allowance)

        # 4. Sort (single-threaded, deterministic)
        scored.sort(key=ranking_key)

        # 5. Truncate and assign ranks
        ranked = scored[:limit]
        for i, item in enumerate(ranked):
            item.rank = i + 1

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"Ranked {len(ranked)}/{len(affordable)} {category} candidates "
            f"({len(candidates) - len(affordable)} filtered) in {elapsed_ms:.1f}ms"
        )
        return ranked

    def _score_all(
        self,
        candidates: list[Candidate],
        params: TripParams,
        allowance: Decimal,
    ) -> list[RankedLocation]:
        """Score candidates; results keep input order regardless of worker count."""
        workers = self.config.workers
        if workers <= 1 or len(candidates) < self.config.parallel_min_candidates:
            return [self.engine.score_with_allowance(c, params, allowance) for c in candidates]

        with ThreadPoolExecutor(max_workers=min(workers, len(candidates))) as pool:
            return list(pool.map(
                lambda c: self.engine.score_with_allowance(c, params, allowance),
                candidates,
            ))


ranking_pipeline = RankingPipeline()
