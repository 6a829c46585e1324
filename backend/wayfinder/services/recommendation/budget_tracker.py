"""Budget tracker — remaining budget, affordability and immutable commits."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from wayfinder.exceptions import InvalidAmount, InvalidInput, Overspend

logger = logging.getLogger(__name__)


def to_amount(value, field_name: str = "amount") -> Decimal:
    """Coerce ``value`` to a finite Decimal. Floats go through ``str`` to avoid binary noise."""
    if isinstance(value, bool):
        raise InvalidAmount(f"{field_name} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(f"{field_name} must be a number (got {value!r})") from None
    if not amount.is_finite():
        raise InvalidAmount(f"{field_name} must be finite (got {value!r})")
    return amount


@dataclass(frozen=True)
class BudgetState:
    """Total budget and spend committed so far in one planning session."""
    total_budget: Decimal
    committed_spend: Decimal = Decimal("0")

    def __post_init__(self):
        total = to_amount(self.total_budget, "total_budget")
        committed = to_amount(self.committed_spend, "committed_spend")
        if total < 0:
            raise InvalidAmount("total_budget must be non-negative")
        if committed < 0:
            raise InvalidAmount("committed_spend must be non-negative")
        if committed > total:
            raise InvalidInput(
                f"committed_spend {committed} exceeds total_budget {total}"
            )
        object.__setattr__(self, "total_budget", total)
        object.__setattr__(self, "committed_spend", committed)

    @property
    def remaining(self) -> Decimal:
        return self.total_budget - self.committed_spend

    def to_dict(self) -> dict:
        return {
            "total_budget": str(self.total_budget),
            "committed_spend": str(self.committed_spend),
            "remaining": str(self.remaining),
        }


class BudgetTracker:
    """Pure operations over BudgetState; never mutates its input."""

    def remaining(self, state: BudgetState) -> Decimal:
        return state.remaining

    def can_afford(self, state: BudgetState, cost) -> bool:
        """True iff ``cost`` fits in the remaining budget. Negative cost is invalid."""
        amount = to_amount(cost, "cost")
        if amount < 0:
            raise InvalidAmount(f"cost must be non-negative (got {amount})")
        return amount <= state.remaining

    def commit(self, state: BudgetState, cost) -> BudgetState:
        """Return a new state with ``cost`` added to committed spend.

        Overspend is rejected, never clamped.
        """
        amount = to_amount(cost, "cost")
        if amount < 0:
            raise InvalidAmount(f"cost must be non-negative (got {amount})")
        new_committed = state.committed_spend + amount
        if new_committed > state.total_budget:
            raise Overspend(
                f"cost {amount} exceeds remaining budget {state.remaining}"
            )
        logger.debug(f"Committed {amount}; remaining {state.total_budget - new_committed}")
        return BudgetState(total_budget=state.total_budget, committed_spend=new_committed)


budget_tracker = BudgetTracker()
