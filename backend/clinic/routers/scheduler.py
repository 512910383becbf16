# backend/clinic/routers/scheduler.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.treatment_plans import (
    AssignedSessionRead,
    RequiredItemRead,
    TreatmentPlanAllocate,
    TreatmentPlanAllocated,
)
from ..services.scheduler import SessionAllocator

router = APIRouter(prefix="/scheduler", tags=["scheduler"])


@router.post(
    "/",
    response_model=TreatmentPlanAllocated,
    status_code=status.HTTP_201_CREATED,
)
def allocate_treatment_plan(
    data: TreatmentPlanAllocate,
    db: Session = Depends(get_db),
):
    """Create a treatment plan and pin every session to a therapist slot."""
    result = SessionAllocator(db).allocate(
        patient_id=data.patient_id,
        therapy_id=data.therapy_id,
        start_date=data.start_date,
        num_sessions=data.num_sessions,
        frequency=data.frequency,
        practitioner_id=data.practitioner_id,
    )
    return TreatmentPlanAllocated(
        plan_id=result.plan_id,
        sessions=[AssignedSessionRead.model_validate(s) for s in result.sessions],
        required_items=[RequiredItemRead.model_validate(i) for i in result.required_items],
    )
