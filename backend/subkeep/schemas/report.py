from pydantic import BaseModel


class CategoryBreakdown(BaseModel):
    category_id: str
    category_name: str
    color: str
    monthly_amount: int
    percentage: float
    count: int


class MonthlyTrend(BaseModel):
    year: int
    month: int
    amount: int
    count: int


class AverageCost(BaseModel):
    monthly: int
    annual: int
    weekly: int


class ReportSummary(BaseModel):
    total_subscriptions: int
    active_count: int
    paused_count: int
    most_expensive: str | None = None
    most_expensive_amount: int
    average_satisfaction: float


class ReportOverview(BaseModel):
    category_breakdown: list[CategoryBreakdown]
    monthly_trend: list[MonthlyTrend]
    average_cost: AverageCost
    summary: ReportSummary


class DashboardSummary(BaseModel):
    monthly_total: int
    annual_total: int
    active_count: int
    paused_count: int
    category_breakdown: list[CategoryBreakdown]


class CancelRecommendation(BaseModel):
    subscription_id: int
    service_name: str
    monthly_amount: int
    annual_saving: int
    satisfaction_score: int | None
    reason: str
