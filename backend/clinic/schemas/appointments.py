# backend/clinic/schemas/appointments.py

from datetime import date
from typing import Optional
from pydantic import BaseModel


class AppointmentCreate(BaseModel):
    patient_id: int
    provider_id: int
    appointment_date: date
    start_time: str
    end_time: str
    slot_id: Optional[int] = None
    service_type: Optional[str] = None
    consultation_type: Optional[str] = None
    notes: Optional[str] = None


class AppointmentRead(BaseModel):
    id: int
    patient_id: int
    provider_id: int
    slot_id: Optional[int] = None
    appointment_date: date
    start_time: str
    end_time: str
    status: str
    service_type: Optional[str] = None
    consultation_type: Optional[str] = None
    notes: Optional[str] = None
    confirmation_code: Optional[str] = None

    model_config = {"from_attributes": True}
