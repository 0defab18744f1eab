from datetime import date, datetime

import pytest

from subkeep.models import Subscription
from subkeep.services.report_service import (
    REASON_HIGH_COST,
    REASON_LOW_SATISFACTION,
    ReportService,
    cancel_recommendations,
    monthly_trend,
)


@pytest.fixture
def portfolio(add_subscription, add_category, add_share):
    ott = add_category("OTT", color="#E50914")
    netflix = add_subscription("Netflix", amount=17000, category_id=ott.id,
                               satisfaction_score=4)
    add_share(netflix, "equal", members=4)
    add_subscription("Wavve", amount=10000, category_id=ott.id)
    add_subscription("Cloud", amount=120000, billing_cycle="yearly",
                     satisfaction_score=2)
    add_subscription("Gym", amount=8000, status="paused", satisfaction_score=5)
    add_subscription("Old", amount=99000, status="cancelled")
    add_subscription("Removed", amount=50000, deleted_at=datetime(2026, 1, 1))


def test_category_breakdown_sums_personal_shares(db, portfolio):
    overview = ReportService(db).overview("user-1", today=date(2026, 10, 17))

    ott, uncategorized = overview.category_breakdown
    assert ott.category_name == "OTT"
    assert ott.color == "#E50914"
    assert ott.monthly_amount == 14250
    assert ott.count == 2
    assert ott.percentage == 58.8
    assert uncategorized.category_id == "uncategorized"
    assert uncategorized.category_name == "Uncategorized"
    assert uncategorized.monthly_amount == 10000
    assert uncategorized.percentage == 41.2


def test_average_cost(db, portfolio):
    overview = ReportService(db).overview("user-1", today=date(2026, 10, 17))

    assert overview.average_cost.monthly == 24250
    assert overview.average_cost.annual == 291000
    assert overview.average_cost.weekly == 5596


def test_summary_counts_and_satisfaction(db, portfolio):
    summary = ReportService(db).overview("user-1", today=date(2026, 10, 17)).summary

    assert summary.total_subscriptions == 4
    assert summary.active_count == 3
    assert summary.paused_count == 1
    # Wavve and Cloud tie at 10000; the first one reached wins
    assert summary.most_expensive == "Wavve"
    assert summary.most_expensive_amount == 10000
    assert summary.average_satisfaction == 3.7


def test_dashboard_summary(db, portfolio):
    summary = ReportService(db).dashboard_summary("user-1")

    assert summary.monthly_total == 24250
    assert summary.annual_total == 291000
    assert summary.active_count == 3
    assert summary.paused_count == 1
    assert [c.category_name for c in summary.category_breakdown] == ["OTT", "Uncategorized"]


def test_overview_for_user_without_subscriptions(db, portfolio):
    overview = ReportService(db).overview("someone-else", today=date(2026, 10, 17))

    assert overview.category_breakdown == []
    assert len(overview.monthly_trend) == 12
    assert all(point.amount == 0 and point.count == 0 for point in overview.monthly_trend)
    assert overview.average_cost.weekly == 0
    assert overview.summary.most_expensive is None
    assert overview.summary.average_satisfaction == 0.0


def test_monthly_trend_counts_from_start_date():
    subs = [
        Subscription(id=1, amount=10000, billing_cycle="monthly", start_date=date(2025, 1, 1)),
        Subscription(id=2, amount=5000, billing_cycle="monthly", start_date=date(2026, 6, 30)),
        Subscription(id=3, amount=7000, billing_cycle="monthly", start_date=date(2026, 11, 1)),
    ]

    trend = monthly_trend(subs, {}, date(2026, 10, 17))

    assert [(p.year, p.month) for p in trend][:3] == [(2025, 11), (2025, 12), (2026, 1)]
    assert (trend[-1].year, trend[-1].month) == (2026, 10)
    assert trend[0].amount == 10000
    assert trend[6].amount == 10000  # May 2026
    assert trend[7].amount == 15000  # June 2026
    assert trend[7].count == 2
    assert trend[-1].amount == 15000


def test_monthly_trend_window_crosses_year_boundary():
    trend = monthly_trend([], {}, date(2026, 1, 15))
    assert (trend[0].year, trend[0].month) == (2025, 2)
    assert (trend[-1].year, trend[-1].month) == (2026, 1)


def _scored(id, amount, score):
    return Subscription(
        id=id, service_name=f"sub-{id}", amount=amount,
        billing_cycle="monthly", satisfaction_score=score,
    )


def test_cancel_recommendations():
    subs = [
        _scored(1, 90000, None),
        _scored(2, 50000, 3),
        _scored(3, 30000, 2),
        _scored(4, 20000, 1),
        _scored(5, 10000, None),
        _scored(6, 5000, 3),
    ]

    recs = cancel_recommendations(subs, {})

    assert [r.subscription_id for r in recs] == [4, 3, 2]
    assert recs[0].reason == REASON_LOW_SATISFACTION
    assert recs[1].reason == REASON_LOW_SATISFACTION
    assert recs[2].reason == REASON_HIGH_COST
    assert recs[2].annual_saving == 600000


def test_recommendations_never_include_unscored():
    subs = [_scored(1, 1_000_000, None), _scored(2, 100, 4)]
    assert cancel_recommendations(subs, {}) == []


def test_recommendations_break_ties_by_cost():
    recs = cancel_recommendations([_scored(1, 30000, 2), _scored(2, 40000, 2)], {})
    assert [r.subscription_id for r in recs] == [2, 1]


def test_recommendations_use_personal_share(db, add_subscription, add_share):
    big = add_subscription("Family plan", amount=100000, satisfaction_score=3)
    add_share(big, "fixed_amount", amount=1000)
    add_subscription("Solo", amount=20000, satisfaction_score=3)
    for i in range(3):
        add_subscription(f"Filler {i}", amount=2000, satisfaction_score=5)

    recs = ReportService(db).recommendations("user-1")

    assert [r.service_name for r in recs] == ["Solo"]
    assert recs[0].monthly_amount == 20000


def test_recommendations_for_empty_input():
    assert cancel_recommendations([], {}) == []


def test_overview_trend_includes_paused_and_skips_cancelled(db, portfolio):
    trend = ReportService(db).overview("user-1", today=date(2026, 10, 17)).monthly_trend

    # Netflix share 4250 + Wavve 10000 + Cloud 10000 + paused Gym 8000
    assert trend[-1].amount == 32250
    assert trend[-1].count == 4


def test_breakdown_percentage_is_zero_when_total_is_zero(db, add_subscription, add_share):
    family = add_subscription("Family plan", amount=30000)
    add_share(family, "fixed_amount", amount=None)

    (entry,) = ReportService(db).dashboard_summary("user-1").category_breakdown

    assert entry.monthly_amount == 0
    assert entry.count == 1
    assert entry.percentage == 0.0
