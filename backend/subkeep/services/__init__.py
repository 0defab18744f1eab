from .billing import (
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
    UNCATEGORIZED_COLOR,
    monthly_equivalent,
    annual_equivalent,
    personal_share,
    personal_monthly,
)
from .subscription_store import SubscriptionStore
from .calendar_service import CalendarService, billing_day_in_month
from .report_service import ReportService
from .simulation_service import SimulationService, UndoStore

__all__ = [
    "UNCATEGORIZED_ID",
    "UNCATEGORIZED_NAME",
    "UNCATEGORIZED_COLOR",
    "monthly_equivalent",
    "annual_equivalent",
    "personal_share",
    "personal_monthly",
    "SubscriptionStore",
    "CalendarService",
    "billing_day_in_month",
    "ReportService",
    "SimulationService",
    "UndoStore",
]
