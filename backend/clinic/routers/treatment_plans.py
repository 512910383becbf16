# backend/clinic/routers/treatment_plans.py
# Read side only: plans are created by POST /scheduler

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from ..database import get_db
from ..models.generated import TreatmentPlans as DBTreatmentPlans
from ..schemas.treatment_plans import TreatmentPlanDetail, TreatmentPlanRead

router = APIRouter(prefix="/treatment_plans", tags=["treatment_plans"])


@router.get("/", response_model=list[TreatmentPlanRead])
def list_treatment_plans(
    patient_id: int | None = None,
    db: Session = Depends(get_db),
):
    q = db.query(DBTreatmentPlans)
    if patient_id is not None:
        q = q.filter(DBTreatmentPlans.patient_id == patient_id)
    return q.order_by(DBTreatmentPlans.id.desc()).all()


@router.get("/{id}", response_model=TreatmentPlanDetail)
def get_treatment_plan(id: int, db: Session = Depends(get_db)):
    obj = (
        db.query(DBTreatmentPlans)
        .options(selectinload(DBTreatmentPlans.sessions))
        .filter(DBTreatmentPlans.id == id)
        .first()
    )
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj
