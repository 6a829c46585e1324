"""Recommendation entry point — validates a ranking request and returns ranked venues."""

import logging
from typing import Any

from pydantic import ValidationError

from wayfinder.exceptions import WayfinderError
from wayfinder.schemas.common import ServiceResponse, describe_validation_error, validate_payload
from wayfinder.schemas.trip import Candidate, RankingRequest, TripParams
from wayfinder.services.recommendation.candidate_source import CandidateSource
from wayfinder.services.recommendation.cost_estimator import estimate_cost
from wayfinder.services.recommendation.ranking_pipeline import RankingPipeline, ranking_pipeline
from wayfinder.services.recommendation.scoring_engine import RankedLocation

logger = logging.getLogger(__name__)


class RecommendationService:
    """Fetches candidates from a source, normalizes them and runs the ranking pipeline."""

    def __init__(
        self,
        source: CandidateSource | None = None,
        pipeline: RankingPipeline | None = None,
    ):
        self.source = source
        self.pipeline = pipeline or ranking_pipeline

    def get_recommendations(
        self,
        payload: RankingRequest | dict,
        candidates: list[Any] | None = None,
    ) -> ServiceResponse:
        """Ranked list on success; typed failure on invalid input.

        ``candidates`` bypasses the configured source when given.
        """
        try:
            request = validate_payload(RankingRequest, payload)
            ranked = self.rank(request, candidates)
        except WayfinderError as e:
            logger.info(f"Recommendation request rejected ({e.error_type}): {e.reason}")
            return ServiceResponse.fail(e)

        logger.info(
            f"Recommended {len(ranked)} {request.category} venues "
            f"for city {request.city_id!r}"
        )
        return ServiceResponse.ok([r.to_dict() for r in ranked])

    def rank(
        self,
        request: RankingRequest,
        candidates: list[Any] | None = None,
    ) -> list[RankedLocation]:
        raw = candidates if candidates is not None else self._fetch(request)
        normalized = self._normalize(raw, request.params)
        return self.pipeline.rank(
            normalized,
            request.params,
            request.category,
            current_spend=request.current_spend,
            limit=request.limit,
        )

    def _fetch(self, request: RankingRequest) -> list[Any]:
        if self.source is None:
            logger.warning("No candidate source configured; returning no candidates")
            return []
        try:
            return self.source.fetch_candidates(request.city_id, request.category) or []
        except Exception as e:
            logger.warning(f"Candidate source failed for {request.category} in {request.city_id!r}: {e}")
            return []

    def _normalize(self, records: list[Any], params: TripParams) -> list[Candidate]:
        """Validate raw records into Candidates, estimating missing costs. Bad records are skipped."""
        normalized = []
        for record in records:
            if isinstance(record, Candidate):
                normalized.append(record)
                continue
            try:
                normalized.append(self._to_candidate(record, params))
            except ValidationError as e:
                logger.warning(f"Skipping malformed candidate {_record_id(record)}: {describe_validation_error(e)}")
            except WayfinderError as e:
                logger.warning(f"Skipping candidate {_record_id(record)}: {e.reason}")
        return normalized

    def _to_candidate(self, record: Any, params: TripParams) -> Candidate:
        if not isinstance(record, dict):
            return Candidate.model_validate(record, from_attributes=True)
        data = dict(record)
        if data.get("estimated_cost") is None:
            data["estimated_cost"] = estimate_cost(
                data.get("category"),
                data.pop("price_level", None),
                params.group_size,
                params.days,
            )
        else:
            data.pop("price_level", None)
        return Candidate.model_validate(data)


def _record_id(record: Any) -> str:
    if isinstance(record, dict):
        return repr(record.get("id"))
    return repr(getattr(record, "id", None))


recommendation_service = RecommendationService()
