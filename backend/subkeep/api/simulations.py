from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import (
    CancelSimulationRequest,
    AddSimulationRequest,
    ApplySimulationRequest,
    SimulationResult,
)
from ..services.simulation_service import SimulationService
from .deps import get_current_user_id

router = APIRouter()


@router.post("/cancel", response_model=SimulationResult)
def simulate_cancel(
    req: CancelSimulationRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Impact of cancelling subscriptions, without changing anything."""
    return SimulationService(db).simulate_cancel(user_id, req.subscription_ids)


@router.post("/add", response_model=SimulationResult)
def simulate_add(
    req: AddSimulationRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Impact of adding a hypothetical subscription."""
    return SimulationService(db).simulate_add(user_id, req)


@router.post("/apply")
def apply_simulation(
    req: ApplySimulationRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Carry out a simulated cancellation. Can be undone for a short time."""
    SimulationService(db).apply(user_id, req.action, req.subscription_ids)
    return {"status": "applied", "subscription_ids": req.subscription_ids}


@router.post("/undo")
def undo_simulation(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Reverse the last applied simulation."""
    restored = SimulationService(db).undo(user_id)
    return {"status": "restored", "subscription_ids": restored}
