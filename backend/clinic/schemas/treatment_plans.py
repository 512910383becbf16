# backend/clinic/schemas/treatment_plans.py

from datetime import date
from typing import Optional, Union
from pydantic import BaseModel, Field


class TreatmentPlanAllocate(BaseModel):
    """Body of POST /scheduler."""
    patient_id: int = Field(alias="patientId")
    therapy_id: int = Field(alias="therapyId")
    start_date: date = Field(alias="startDate")
    # Kept loose: the allocator owns the 1..50 integer check
    num_sessions: Union[int, str] = Field(alias="numSessions")
    frequency: str
    practitioner_id: Optional[int] = Field(None, alias="practitionerId")

    model_config = {"populate_by_name": True}


class AssignedSessionRead(BaseModel):
    session_id: int = Field(alias="sessionId")
    session_number: int = Field(alias="sessionNumber")
    session_date: date = Field(alias="sessionDate")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    therapist_id: int = Field(alias="therapistId")
    therapist: str
    staff_id: int = Field(alias="staff")

    model_config = {"from_attributes": True, "populate_by_name": True}


class RequiredItemRead(BaseModel):
    name: str
    required: int
    available: Optional[int] = None

    model_config = {"from_attributes": True}


class TreatmentPlanAllocated(BaseModel):
    message: str = "Treatment plan and sessions created successfully"
    plan_id: int = Field(alias="treatmentPlanId")
    sessions: list[AssignedSessionRead] = Field(alias="treatmentSessions")
    required_items: list[RequiredItemRead] = Field(alias="requiredItems")

    model_config = {"from_attributes": True, "populate_by_name": True}


class TreatmentSessionRead(BaseModel):
    id: int
    session_number: int
    session_date: date
    start_time: str
    end_time: str
    therapist_id: int
    staff_id: Optional[int] = None
    duration_minutes: int
    status: str

    model_config = {"from_attributes": True}


class TreatmentPlanRead(BaseModel):
    id: int
    patient_id: int
    practitioner_id: Optional[int] = None
    therapy_id: Optional[int] = None
    treatment_name: str
    start_date: date
    end_date: date
    total_sessions: int
    status: str

    model_config = {"from_attributes": True}


class TreatmentPlanDetail(TreatmentPlanRead):
    sessions: list[TreatmentSessionRead] = []
