from types import SimpleNamespace

import pytest

from subkeep.models import BillingCycle, Subscription, SubscriptionShare
from subkeep.services.billing import (
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
    annual_equivalent,
    category_label,
    monthly_equivalent,
    personal_monthly,
    personal_share,
    round_half_up,
    round_to_tenth,
)


def _policy(split_type, members=1, amount=None, ratio=None):
    return SimpleNamespace(
        split_type=split_type,
        my_share_amount=amount,
        my_share_ratio=ratio,
        total_members_snapshot=members,
    )


@pytest.mark.parametrize("amount", [0, 1, 999, 10000, 1234567])
def test_monthly_amount_is_unchanged(amount):
    assert monthly_equivalent(amount, "monthly") == amount


@pytest.mark.parametrize("cycle", ["weekly", "monthly", "yearly", "daily"])
def test_annual_is_twelve_times_monthly(cycle):
    for amount in (0, 7, 10000, 5000, 99999):
        assert annual_equivalent(amount, cycle) == monthly_equivalent(amount, cycle) * 12


def test_yearly_rounds_to_nearest():
    assert monthly_equivalent(10000, "yearly") == 833
    assert monthly_equivalent(118800, BillingCycle.YEARLY) == 9900


def test_weekly_rounds_to_nearest():
    assert monthly_equivalent(5000, "weekly") == 21667
    assert monthly_equivalent(3, BillingCycle.WEEKLY) == 13


def test_halves_round_away_from_zero():
    # 6 / 12 = 0.5 and 30 / 12 = 2.5: banker's rounding would give 0 and 2
    assert monthly_equivalent(6, "yearly") == 1
    assert monthly_equivalent(30, "yearly") == 3
    assert round_half_up(-2.5) == -3
    assert round_to_tenth(0.25) == 0.3


def test_unknown_cycle_falls_back_to_monthly():
    assert monthly_equivalent(4200, "fortnightly") == 4200
    assert monthly_equivalent(4200, "") == 4200


def test_subscription_properties_use_normalizer():
    sub = Subscription(amount=12000, billing_cycle="yearly")
    assert sub.monthly_amount == 1000
    assert sub.annual_amount == 12000


def test_equal_split_with_zero_members_returns_full_amount():
    assert personal_share(_policy("equal", members=0), 10000) == 10000


def test_equal_split_divides_by_snapshot():
    assert personal_share(_policy("equal", members=4), 20000) == 5000
    assert personal_share(_policy("equal", members=3), 10000) == 3333


def test_fixed_amount_split():
    assert personal_share(_policy("fixed_amount", amount=4500), 17000) == 4500
    assert personal_share(_policy("fixed_amount"), 17000) == 0


def test_fixed_ratio_split():
    assert personal_share(_policy("fixed_ratio", ratio=0.25), 17000) == 4250
    assert personal_share(_policy("fixed_ratio", ratio=0.5), 15) == 8
    assert personal_share(_policy("fixed_ratio"), 17000) == 0


def test_unknown_split_type_attributes_full_amount():
    assert personal_share(_policy("custom"), 17000) == 17000


def test_share_model_delegates_to_resolver():
    share = SubscriptionShare(split_type="equal", total_members_snapshot=2)
    assert share.personal_amount(9000) == 4500


def test_personal_monthly_without_policy_is_full_amount():
    sub = Subscription(id=1, amount=5000, billing_cycle="weekly")
    assert personal_monthly(sub, {}) == 21667
    assert personal_monthly(sub, {1: _policy("equal", members=2)}) == 10834


def test_category_label_uses_sentinel_when_uncategorized():
    sub = Subscription(amount=100, billing_cycle="monthly")
    assert category_label(sub) == (UNCATEGORIZED_ID, UNCATEGORIZED_NAME, UNCATEGORIZED_COLOR)
