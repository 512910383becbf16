# backend/clinic/routers/slots.py
"""
Slots API endpoints.

POST /slots/generate/{provider_id} - (Re)generate one provider's weekly grid
POST /slots/generate               - Same for every active practitioner
GET  /slots/{provider_id}          - Filtered listing, day auto-generated if empty
PUT  /slots/{slot_id}              - Status transition (booked / free / leave)
POST /slots/available              - Practitioners free at date + time
"""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.slots import (
    AvailabilityRequest,
    AvailableProvider,
    SlotRead,
    SlotsGenerateAllResponse,
    SlotsGenerateRequest,
    SlotsGenerateResponse,
    SlotStatusResponse,
    SlotStatusUpdate,
)
from ..services.slots import SlotStore, find_available_providers


router = APIRouter(prefix="/slots", tags=["slots"])


@router.post("/generate/{provider_id}", response_model=SlotsGenerateResponse)
def generate_slots(
    provider_id: int,
    data: SlotsGenerateRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    regenerate = data.regenerate if data else False
    created = SlotStore(db).generate(provider_id, regenerate=regenerate)
    return SlotsGenerateResponse(provider_id=provider_id, created=created)


@router.post("/generate", response_model=SlotsGenerateAllResponse)
def generate_all_slots(
    data: SlotsGenerateRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    regenerate = data.regenerate if data else False
    created = SlotStore(db).generate_all(regenerate=regenerate)
    return SlotsGenerateAllResponse(created=created)


@router.post("/available", response_model=list[AvailableProvider])
def available_providers(
    data: AvailabilityRequest,
    db: Session = Depends(get_db),
):
    """Practitioners with no scheduled/confirmed appointment at date + time."""
    return find_available_providers(db, data.date, data.time)


@router.get("/{provider_id}", response_model=list[SlotRead])
def list_slots(
    provider_id: int,
    day: str | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
):
    return SlotStore(db).list_slots(provider_id, day=day, status=status)


@router.put("/{slot_id}", response_model=SlotStatusResponse)
def update_slot_status(
    slot_id: int,
    data: SlotStatusUpdate,
    db: Session = Depends(get_db),
):
    slot = SlotStore(db).set_status(slot_id, data.status)
    return SlotStatusResponse(slot=SlotRead.model_validate(slot))
