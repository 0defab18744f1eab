from typing import Annotated, Literal
from pydantic import BaseModel, Field

from ..models import BillingCycle
from .report import CategoryBreakdown

# Row ids as SQLite stores them
SubscriptionId = Annotated[int, Field(ge=1, le=2**63 - 1)]


# --- Input schemas ---

class CancelSimulationRequest(BaseModel):
    subscription_ids: list[SubscriptionId] = Field(min_length=1)


class AddSimulationRequest(BaseModel):
    """A hypothetical subscription that is never persisted."""
    service_name: str = Field(min_length=1, max_length=100)
    amount: int = Field(ge=0, le=9_999_999)
    billing_cycle: BillingCycle
    category_id: str | None = None


class ApplySimulationRequest(BaseModel):
    action: Literal["cancel"]
    subscription_ids: list[SubscriptionId] = Field(min_length=1)


# --- Response schemas ---

class SimulationResult(BaseModel):
    current_monthly_total: int
    simulated_monthly_total: int
    monthly_difference: int  # current - simulated; negative means a cost increase
    annual_difference: int
    category_breakdown: list[CategoryBreakdown]
