from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import CalendarDay, MonthlyCalendar, UpcomingPayment
from ..services.calendar_service import CalendarService
from .deps import get_current_user_id

router = APIRouter()


@router.get("/monthly", response_model=MonthlyCalendar)
def get_monthly_calendar(
    year: int | None = Query(None),
    month: int | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Billing schedule for a month (defaults to the current month)."""
    today = date.today()
    service = CalendarService(db)
    return service.monthly_calendar(
        user_id,
        year if year is not None else today.year,
        month if month is not None else today.month,
        today=today,
    )


@router.get("/daily", response_model=CalendarDay)
def get_day_detail(
    year: int = Query(...),
    month: int = Query(...),
    day: int = Query(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Subscriptions billing on a single day."""
    service = CalendarService(db)
    return service.day_detail(user_id, year, month, day)


@router.get("/upcoming", response_model=list[UpcomingPayment])
def get_upcoming_payments(
    days: int | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Payments due within the next `days` days (default 30, max 90)."""
    service = CalendarService(db)
    return service.upcoming_payments(user_id, days)
