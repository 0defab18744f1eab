from fastapi import APIRouter

from .dashboard import router as dashboard_router
from .reports import router as reports_router
from .calendar import router as calendar_router
from .simulations import router as simulations_router

api_router = APIRouter()

api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
api_router.include_router(calendar_router, prefix="/calendar", tags=["calendar"])
api_router.include_router(simulations_router, prefix="/simulations", tags=["simulations"])
