import calendar
import math
from datetime import date
from fractions import Fraction
from sqlalchemy.orm import Session

from ..models import Subscription, SubscriptionStatus
from ..schemas import (
    CategoryBreakdown,
    MonthlyTrend,
    AverageCost,
    ReportSummary,
    ReportOverview,
    DashboardSummary,
    CancelRecommendation,
)
from .billing import (
    MONTHS_PER_YEAR,
    WEEKS_PER_YEAR,
    category_label,
    personal_monthly,
    round_half_up,
    round_to_tenth,
)
from .subscription_store import SubscriptionStore

TREND_MONTHS = 12
TOP_COST_FRACTION = Fraction(1, 5)

REASON_LOW_SATISFACTION = "low satisfaction"
REASON_HIGH_COST = "high cost relative to satisfaction"


class CategoryAccumulator:
    """Running per-category totals, keyed by category id."""

    def __init__(self):
        self._groups: dict[str, dict] = {}

    def add(self, category_id: str, name: str, color: str, amount: int) -> None:
        group = self._groups.get(category_id)
        if group is None:
            self._groups[category_id] = {
                "category_id": category_id,
                "category_name": name,
                "color": color,
                "monthly_amount": amount,
                "count": 1,
            }
        else:
            group["monthly_amount"] += amount
            group["count"] += 1

    def add_subscription(self, subscription: Subscription, amount: int) -> None:
        self.add(*category_label(subscription), amount)

    def breakdown(self, total: int) -> list[CategoryBreakdown]:
        """Groups with their share of `total`, largest first."""
        items = [
            CategoryBreakdown(
                **group,
                percentage=(
                    round_to_tenth(Fraction(group["monthly_amount"] * 100, total))
                    if total > 0 else 0.0
                ),
            )
            for group in self._groups.values()
        ]
        items.sort(key=lambda item: item.monthly_amount, reverse=True)
        return items


def category_breakdown(
    subscriptions: list[Subscription],
    share_map: dict,
) -> list[CategoryBreakdown]:
    """Personal monthly spend per category."""
    groups = CategoryAccumulator()
    total = 0
    for sub in subscriptions:
        personal = personal_monthly(sub, share_map)
        total += personal
        groups.add_subscription(sub, personal)
    return groups.breakdown(total)


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_trend(
    subscriptions: list[Subscription],
    share_map: dict,
    today: date,
) -> list[MonthlyTrend]:
    """
    Personal monthly spend for the trailing 12 months, oldest first.

    A subscription counts toward every month ending on or after its
    start_date, regardless of its current status.
    """
    costs = [(sub.start_date, personal_monthly(sub, share_map)) for sub in subscriptions]

    trend = []
    for offset in range(TREND_MONTHS - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        month_end = date(year, month, calendar.monthrange(year, month)[1])
        started = [amount for start, amount in costs if start <= month_end]
        trend.append(MonthlyTrend(
            year=year,
            month=month,
            amount=sum(started),
            count=len(started),
        ))
    return trend


def average_cost(subscriptions: list[Subscription], share_map: dict) -> AverageCost:
    monthly = sum(personal_monthly(sub, share_map) for sub in subscriptions)
    annual = monthly * MONTHS_PER_YEAR
    return AverageCost(
        monthly=monthly,
        annual=annual,
        weekly=round_half_up(Fraction(annual, WEEKS_PER_YEAR)),
    )


def report_summary(
    active: list[Subscription],
    paused: list[Subscription],
    share_map: dict,
) -> ReportSummary:
    most_expensive = None
    most_expensive_amount = 0
    scores = []

    for sub in active + paused:
        if sub.satisfaction_score is not None:
            scores.append(sub.satisfaction_score)

        personal = personal_monthly(sub, share_map)
        if personal > most_expensive_amount:
            most_expensive_amount = personal
            most_expensive = sub.service_name

    average_satisfaction = 0.0
    if scores:
        average_satisfaction = round_to_tenth(Fraction(sum(scores), len(scores)))

    return ReportSummary(
        total_subscriptions=len(active) + len(paused),
        active_count=len(active),
        paused_count=len(paused),
        most_expensive=most_expensive,
        most_expensive_amount=most_expensive_amount,
        average_satisfaction=average_satisfaction,
    )


def cancel_recommendations(
    subscriptions: list[Subscription],
    share_map: dict,
) -> list[CancelRecommendation]:
    """
    Subscriptions worth cancelling.

    Recommended when satisfaction <= 2, or when the personal cost is in the
    top 20% and satisfaction <= 3. Unscored subscriptions are never
    recommended. Ordered by satisfaction ascending, then cost descending.
    """
    if not subscriptions:
        return []

    costs = sorted(
        ((sub, personal_monthly(sub, share_map)) for sub in subscriptions),
        key=lambda pair: pair[1],
        reverse=True,
    )
    top_index = math.ceil(len(costs) * TOP_COST_FRACTION)
    threshold = costs[top_index - 1][1] if top_index > 0 else 0

    recommendations = []
    for sub, monthly in costs:
        score = sub.satisfaction_score
        if score is None:
            continue

        if score <= 2:
            reason = REASON_LOW_SATISFACTION
        elif monthly >= threshold and score <= 3:
            reason = REASON_HIGH_COST
        else:
            continue

        recommendations.append(CancelRecommendation(
            subscription_id=sub.id,
            service_name=sub.service_name,
            monthly_amount=monthly,
            annual_saving=monthly * MONTHS_PER_YEAR,
            satisfaction_score=score,
            reason=reason,
        ))

    recommendations.sort(key=lambda r: (r.satisfaction_score, -r.monthly_amount))
    return recommendations


class ReportService:
    def __init__(self, db: Session):
        self.store = SubscriptionStore(db)

    def overview(self, user_id: str, today: date | None = None) -> ReportOverview:
        active = self.store.list_for_user(user_id, SubscriptionStatus.ACTIVE)
        paused = self.store.list_for_user(user_id, SubscriptionStatus.PAUSED)
        share_map = self.store.share_map(user_id)

        return ReportOverview(
            category_breakdown=category_breakdown(active, share_map),
            monthly_trend=monthly_trend(active + paused, share_map, today or date.today()),
            average_cost=average_cost(active, share_map),
            summary=report_summary(active, paused, share_map),
        )

    def dashboard_summary(self, user_id: str) -> DashboardSummary:
        active = self.store.list_for_user(user_id, SubscriptionStatus.ACTIVE)
        paused = self.store.list_for_user(user_id, SubscriptionStatus.PAUSED)
        share_map = self.store.share_map(user_id)

        monthly_total = sum(personal_monthly(sub, share_map) for sub in active)
        return DashboardSummary(
            monthly_total=monthly_total,
            annual_total=monthly_total * MONTHS_PER_YEAR,
            active_count=len(active),
            paused_count=len(paused),
            category_breakdown=category_breakdown(active, share_map),
        )

    def recommendations(self, user_id: str) -> list[CancelRecommendation]:
        active = self.store.list_for_user(user_id, SubscriptionStatus.ACTIVE)
        return cancel_recommendations(active, self.store.share_map(user_id))
