from datetime import date
from pydantic import BaseModel


class CalendarEntry(BaseModel):
    """A subscription billing on a given calendar day."""
    subscription_id: int
    service_name: str
    amount: int
    monthly_amount: int
    personal_amount: int
    billing_cycle: str
    category_name: str
    category_color: str
    auto_renew: bool


class CalendarDay(BaseModel):
    date: date
    total_amount: int
    subscriptions: list[CalendarEntry]


class MonthlyCalendar(BaseModel):
    year: int
    month: int
    total_amount: int
    total_count: int
    remaining_amount: int
    remaining_count: int
    days: list[CalendarDay]


class UpcomingPayment(BaseModel):
    date: date
    days_until: int
    subscription_id: int
    service_name: str
    amount: int
    personal_amount: int
    category_name: str
    category_color: str
