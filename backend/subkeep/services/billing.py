"""
Billing normalization and cost splitting.

Everything here is pure: no database access, no clock, no shared state.
Unknown billing cycles and split types never raise; they fall back to the
documented defaults so that legacy rows cannot break an aggregation.
"""

import math
from fractions import Fraction
from typing import Protocol

from ..models.subscription import BillingCycle
from ..models.subscription_share import SplitType

# Bucket used for subscriptions without a category.
UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#9E9E9E"

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12


class SplitPolicy(Protocol):
    split_type: str | SplitType
    my_share_amount: int | None
    my_share_ratio: float | None
    total_members_snapshot: int


def round_half_up(value: Fraction | int | float) -> int:
    """Round to the nearest integer, halves away from zero."""
    value = Fraction(value)
    if value < 0:
        return -math.floor(-value + Fraction(1, 2))
    return math.floor(value + Fraction(1, 2))


def round_to_tenth(value: Fraction | int | float) -> float:
    """Round to one decimal place, halves away from zero."""
    return round_half_up(Fraction(value) * 10) / 10


def coerce_enum(enum_cls, value):
    """Enum member for value, or None when value is not a known member."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def monthly_equivalent(amount: int, billing_cycle: BillingCycle | str) -> int:
    """
    Convert an amount billed every `billing_cycle` into a monthly figure.

    - monthly: unchanged
    - yearly:  amount / 12
    - weekly:  amount * 52 / 12
    Unknown cycles are treated as monthly.
    """
    cycle = coerce_enum(BillingCycle, billing_cycle)
    if cycle == BillingCycle.YEARLY:
        return round_half_up(Fraction(amount, MONTHS_PER_YEAR))
    if cycle == BillingCycle.WEEKLY:
        return round_half_up(Fraction(amount * WEEKS_PER_YEAR, MONTHS_PER_YEAR))
    return amount


def annual_equivalent(amount: int, billing_cycle: BillingCycle | str) -> int:
    return monthly_equivalent(amount, billing_cycle) * MONTHS_PER_YEAR


def personal_share(policy: SplitPolicy, monthly_amount: int) -> int:
    """
    Amount of monthly_amount owed by the current user under a split policy.

    - equal:        monthly / members snapshot (full amount if snapshot is 0)
    - fixed_amount: the stored amount, or 0 when not set
    - fixed_ratio:  monthly * ratio, or 0 when not set
    Unknown split types attribute the full amount.
    """
    split = coerce_enum(SplitType, policy.split_type)

    if split == SplitType.EQUAL:
        if not policy.total_members_snapshot:
            return monthly_amount
        return round_half_up(Fraction(monthly_amount, policy.total_members_snapshot))

    if split == SplitType.FIXED_AMOUNT:
        if policy.my_share_amount is not None:
            return policy.my_share_amount
        return 0

    if split == SplitType.FIXED_RATIO:
        if policy.my_share_ratio is not None:
            return round_half_up(monthly_amount * policy.my_share_ratio)
        return 0

    return monthly_amount


def personal_monthly(subscription, share_map: dict) -> int:
    """Monthly personal share of a subscription, given a {subscription_id: policy} map."""
    monthly = monthly_equivalent(subscription.amount, subscription.billing_cycle)
    policy = share_map.get(subscription.id)
    if policy is None:
        return monthly
    return personal_share(policy, monthly)


def category_label(subscription) -> tuple[str, str, str]:
    """(id, name, color) used to group a subscription; sentinel when uncategorized."""
    category = subscription.category
    if subscription.category_id is None or category is None:
        return UNCATEGORIZED_ID, UNCATEGORIZED_NAME, UNCATEGORIZED_COLOR
    return str(category.id), category.name, category.color or UNCATEGORIZED_COLOR
