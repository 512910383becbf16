# backend/clinic/routers/appointments.py
# PATCH = 405, DELETE = 405 (cancel instead)

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Appointments as DBAppointments
from ..schemas.appointments import AppointmentCreate, AppointmentRead
from ..services.appointments import cancel_appointment, create_appointment, list_appointments

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("/", response_model=list[AppointmentRead])
def get_appointments(
    provider_id: int | None = None,
    appointment_date: date | None = None,
    db: Session = Depends(get_db),
):
    return list_appointments(db, provider_id=provider_id, appointment_date=appointment_date)


@router.get("/{id}", response_model=AppointmentRead)
def get_appointment(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBAppointments, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
def book_appointment(
    data: AppointmentCreate,
    db: Session = Depends(get_db),
):
    return create_appointment(db, **data.model_dump())


@router.post("/{id}/cancel", response_model=AppointmentRead)
def cancel(id: int, db: Session = Depends(get_db)):
    return cancel_appointment(db, id)


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
