from decimal import Decimal

from pydantic import BaseModel, Field


class BudgetRequest(BaseModel):
    total_budget: Decimal = Field(ge=0)
    committed_spend: Decimal = Field(default=Decimal("0"), ge=0)
    proposed_cost: Decimal = Field(ge=0)
