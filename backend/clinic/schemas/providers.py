# backend/clinic/schemas/providers.py

from typing import Any, Optional
from pydantic import BaseModel, Field


class ProviderRead(BaseModel):
    id: int
    user_id: int
    kind: str
    display_name: str
    working_hours: str
    leave_days: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}


class ProviderScheduleUpdate(BaseModel):
    """Replace working hours and/or leave days; omitted fields stay as they are."""
    working_hours: Optional[Any] = Field(None, alias="workingHours")
    leave_days: Optional[list[str]] = Field(None, alias="leaveDays")
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")

    model_config = {"populate_by_name": True}


class LeaveDaysRead(BaseModel):
    leave_days: list[str] = Field(alias="leaveDays")

    model_config = {"populate_by_name": True}
