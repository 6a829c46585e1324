"""Budget entry point — affordability checks and commits against a trip budget."""

import logging

from wayfinder.exceptions import WayfinderError
from wayfinder.schemas.budget import BudgetRequest
from wayfinder.schemas.common import ServiceResponse, validate_payload
from wayfinder.services.recommendation.budget_tracker import BudgetState, BudgetTracker, budget_tracker

logger = logging.getLogger(__name__)


class BudgetService:
    def __init__(self, tracker: BudgetTracker | None = None):
        self.tracker = tracker or budget_tracker

    def evaluate(self, payload: BudgetRequest | dict) -> ServiceResponse:
        """``{remaining, accepted, reason}`` for a proposed cost; nothing is committed."""
        try:
            request = validate_payload(BudgetRequest, payload)
            state = BudgetState(request.total_budget, request.committed_spend)
            accepted = self.tracker.can_afford(state, request.proposed_cost)
        except WayfinderError as e:
            logger.info(f"Budget check rejected ({e.error_type}): {e.reason}")
            return ServiceResponse.fail(e)

        remaining = self.tracker.remaining(state)
        reason = None
        if not accepted:
            reason = f"Proposed cost {request.proposed_cost} exceeds remaining budget {remaining}"
        return ServiceResponse.ok({
            "remaining": str(remaining),
            "accepted": accepted,
            "reason": reason,
        })

    def commit(self, payload: BudgetRequest | dict) -> ServiceResponse:
        """Commit the proposed cost and return the new budget state."""
        try:
            request = validate_payload(BudgetRequest, payload)
            state = BudgetState(request.total_budget, request.committed_spend)
            new_state = self.tracker.commit(state, request.proposed_cost)
        except WayfinderError as e:
            logger.info(f"Budget commit rejected ({e.error_type}): {e.reason}")
            return ServiceResponse.fail(e)
        return ServiceResponse.ok(new_state.to_dict())


budget_service = BudgetService()
