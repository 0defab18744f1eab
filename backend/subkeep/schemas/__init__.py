from .report import (
    CategoryBreakdown,
    MonthlyTrend,
    AverageCost,
    ReportSummary,
    ReportOverview,
    DashboardSummary,
    CancelRecommendation,
)
from .calendar import CalendarEntry, CalendarDay, MonthlyCalendar, UpcomingPayment
from .simulation import (
    CancelSimulationRequest,
    AddSimulationRequest,
    ApplySimulationRequest,
    SimulationResult,
)

__all__ = [
    "CategoryBreakdown",
    "MonthlyTrend",
    "AverageCost",
    "ReportSummary",
    "ReportOverview",
    "DashboardSummary",
    "CancelRecommendation",
    "CalendarEntry",
    "CalendarDay",
    "MonthlyCalendar",
    "UpcomingPayment",
    "CancelSimulationRequest",
    "AddSimulationRequest",
    "ApplySimulationRequest",
    "SimulationResult",
]
