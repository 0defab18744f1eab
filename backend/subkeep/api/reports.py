from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import ReportOverview
from ..services.report_service import ReportService
from .deps import get_current_user_id

router = APIRouter()


@router.get("/overview", response_model=ReportOverview)
def get_overview(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    service = ReportService(db)
    return service.overview(user_id)
