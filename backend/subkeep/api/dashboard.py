from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import DashboardSummary, CancelRecommendation
from ..services.report_service import ReportService
from .deps import get_current_user_id

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
def get_summary(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Monthly and annual totals with a category breakdown."""
    return ReportService(db).dashboard_summary(user_id)


@router.get("/recommendations", response_model=list[CancelRecommendation])
def get_recommendations(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Subscriptions worth cancelling."""
    return ReportService(db).recommendations(user_id)
