import calendar
from datetime import date, timedelta
from sqlalchemy.orm import Session

from ..errors import BadRequestError
from ..models import Subscription, SubscriptionStatus
from ..models.subscription import BillingCycle
from ..schemas import CalendarEntry, CalendarDay, MonthlyCalendar, UpcomingPayment
from .billing import coerce_enum, category_label, monthly_equivalent, personal_share
from .subscription_store import SubscriptionStore

MIN_YEAR = 2000
MAX_YEAR = 2100
DEFAULT_UPCOMING_DAYS = 30
MAX_UPCOMING_DAYS = 90


def _last_day(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def billing_day_in_month(
    subscription: Subscription,
    year: int,
    month: int,
) -> tuple[int, bool]:
    """
    Project a subscription's anchor date onto (year, month).

    Returns (day, applies). Monthly bills every month and yearly only in the
    anchor's month; both are clamped to the last day of short months.
    Weekly (and any unknown cycle) only counts the anchor occurrence itself,
    so it applies only when the anchor falls inside the target month.
    """
    anchor = subscription.next_billing_date
    cycle = coerce_enum(BillingCycle, subscription.billing_cycle)

    if cycle == BillingCycle.MONTHLY:
        return min(anchor.day, _last_day(year, month)), True

    if cycle == BillingCycle.YEARLY:
        if anchor.month != month:
            return 0, False
        return min(anchor.day, _last_day(year, month)), True

    if anchor.year == year and anchor.month == month:
        return anchor.day, True
    return 0, False


def _validate_month(year: int, month: int) -> None:
    if year < MIN_YEAR or year > MAX_YEAR:
        raise BadRequestError(f"year must be between {MIN_YEAR} and {MAX_YEAR}")
    if month < 1 or month > 12:
        raise BadRequestError("month must be between 1 and 12")


def _build_entry(subscription: Subscription, share_map: dict) -> CalendarEntry:
    monthly = monthly_equivalent(subscription.amount, subscription.billing_cycle)
    policy = share_map.get(subscription.id)
    personal = personal_share(policy, monthly) if policy is not None else monthly
    _, category_name, category_color = category_label(subscription)
    return CalendarEntry(
        subscription_id=subscription.id,
        service_name=subscription.service_name,
        amount=subscription.amount,
        monthly_amount=monthly,
        personal_amount=personal,
        billing_cycle=subscription.billing_cycle,
        category_name=category_name,
        category_color=category_color,
        auto_renew=subscription.auto_renew,
    )


def build_monthly_calendar(
    subscriptions: list[Subscription],
    share_map: dict,
    year: int,
    month: int,
    today: date,
) -> MonthlyCalendar:
    """Group active subscriptions by their (clamped) billing day in a month."""
    days: dict[int, list[CalendarEntry]] = {}
    total_amount = 0
    total_count = 0
    remaining_amount = 0
    remaining_count = 0

    for sub in subscriptions:
        day, applies = billing_day_in_month(sub, year, month)
        if not applies:
            continue

        entry = _build_entry(sub, share_map)
        days.setdefault(day, []).append(entry)

        total_amount += entry.personal_amount
        total_count += 1
        if date(year, month, day) >= today:
            remaining_amount += entry.personal_amount
            remaining_count += 1

    return MonthlyCalendar(
        year=year,
        month=month,
        total_amount=total_amount,
        total_count=total_count,
        remaining_amount=remaining_amount,
        remaining_count=remaining_count,
        days=[
            CalendarDay(
                date=date(year, month, day),
                total_amount=sum(e.personal_amount for e in entries),
                subscriptions=entries,
            )
            for day, entries in sorted(days.items())
        ],
    )


def build_day_detail(
    subscriptions: list[Subscription],
    share_map: dict,
    target: date,
) -> CalendarDay:
    """Subscriptions whose clamped billing day is `target`."""
    entries = []
    for sub in subscriptions:
        day, applies = billing_day_in_month(sub, target.year, target.month)
        if applies and day == target.day:
            entries.append(_build_entry(sub, share_map))

    return CalendarDay(
        date=target,
        total_amount=sum(e.personal_amount for e in entries),
        subscriptions=entries,
    )


def build_upcoming_payments(
    subscriptions: list[Subscription],
    share_map: dict,
    today: date,
    days: int | None = None,
) -> list[UpcomingPayment]:
    """
    Payments whose anchor date lies within [today, today + days].

    Uses the literal next_billing_date, not the projected day; a subscription
    anchored on the 31st is reported on the 31st here even though the
    monthly calendar shows it on the last day of a short month.
    """
    if days is None or days <= 0:
        days = DEFAULT_UPCOMING_DAYS
    days = min(days, MAX_UPCOMING_DAYS)
    deadline = today + timedelta(days=days)

    payments = []
    for sub in subscriptions:
        anchor = sub.next_billing_date
        if anchor < today or anchor > deadline:
            continue

        entry = _build_entry(sub, share_map)
        payments.append(UpcomingPayment(
            date=anchor,
            days_until=(anchor - today).days,
            subscription_id=entry.subscription_id,
            service_name=entry.service_name,
            amount=entry.amount,
            personal_amount=entry.personal_amount,
            category_name=entry.category_name,
            category_color=entry.category_color,
        ))

    payments.sort(key=lambda p: p.date)
    return payments


class CalendarService:
    def __init__(self, db: Session):
        self.store = SubscriptionStore(db)

    def _active(self, user_id: str) -> tuple[list[Subscription], dict]:
        subs = self.store.list_for_user(user_id, SubscriptionStatus.ACTIVE)
        return subs, self.store.share_map(user_id)

    def monthly_calendar(
        self,
        user_id: str,
        year: int,
        month: int,
        today: date | None = None,
    ) -> MonthlyCalendar:
        _validate_month(year, month)
        subs, share_map = self._active(user_id)
        return build_monthly_calendar(subs, share_map, year, month, today or date.today())

    def day_detail(self, user_id: str, year: int, month: int, day: int) -> CalendarDay:
        _validate_month(year, month)
        if day < 1 or day > _last_day(year, month):
            raise BadRequestError(f"day must be between 1 and {_last_day(year, month)}")
        subs, share_map = self._active(user_id)
        return build_day_detail(subs, share_map, date(year, month, day))

    def upcoming_payments(
        self,
        user_id: str,
        days: int | None = None,
        today: date | None = None,
    ) -> list[UpcomingPayment]:
        subs, share_map = self._active(user_id)
        return build_upcoming_payments(subs, share_map, today or date.today(), days)
