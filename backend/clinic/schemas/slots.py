# backend/clinic/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field


SlotStatus = Literal["free", "booked", "leave"]


class SlotRead(BaseModel):
    id: int
    provider_id: int
    day: str
    start_time: str
    end_time: str
    status: str

    model_config = {"from_attributes": True}


class SlotsGenerateRequest(BaseModel):
    """Request to (re)generate slot grids."""
    regenerate: bool = False


class SlotsGenerateResponse(BaseModel):
    message: str = "Slots generated successfully"
    provider_id: Optional[int] = None
    created: int = Field(description="Number of slot rows created")


class SlotsGenerateAllResponse(BaseModel):
    message: str = "Slots generated for all practitioners"
    created: dict[int, int] = Field(description="provider_id → slots created")


class SlotStatusUpdate(BaseModel):
    # Checked by the store, so an unknown value is a domain ValidationError
    status: str


class SlotStatusResponse(BaseModel):
    message: str = "Slot updated successfully"
    slot: SlotRead


class AvailabilityRequest(BaseModel):
    """Who is free at date + time."""
    date: date
    time: str = Field(description="Time in HH:MM format; matches stored start times by prefix")


class AvailableProvider(BaseModel):
    id: int
    kind: str
    display_name: str
    specializations: Optional[str] = None

    model_config = {"from_attributes": True}
