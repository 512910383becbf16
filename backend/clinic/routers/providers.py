# backend/clinic/routers/providers.py
# Endpoints:
# - PATCH /{id}/schedule = ALLOWED (regenerates slot grid)
# - Domain relation: providers -> slots

import json
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload

from ..database import get_db
from ..exceptions import ValidationError
from ..models.generated import Providers as DBProviders
from ..schemas.providers import LeaveDaysRead, ProviderRead, ProviderScheduleUpdate
from ..services.slots import SlotStore
from ..services.slots.calendar import parse_leave_days, validate_working_hours
from ..services.slots.config import WEEKDAYS, normalize_time_str

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/providers", tags=["providers"])


def _get_provider_or_404(db: Session, id: int) -> DBProviders:
    obj = (
        db.query(DBProviders)
        .options(joinedload(DBProviders.user))
        .filter(DBProviders.id == id)
        .first()
    )
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


# ---------------------------------------------------------------------
# Base read
# ---------------------------------------------------------------------

@router.get("/", response_model=list[ProviderRead])
def list_providers(kind: str | None = None, db: Session = Depends(get_db)):
    q = (
        db.query(DBProviders)
        .options(joinedload(DBProviders.user))
        .filter(DBProviders.is_active == 1)
    )
    if kind:
        q = q.filter(DBProviders.kind == kind)
    return q.order_by(DBProviders.id).all()


@router.get("/{id}", response_model=ProviderRead)
def get_provider(id: int, db: Session = Depends(get_db)):
    return _get_provider_or_404(db, id)


# ---------------------------------------------------------------------
# Domain: Provider → Schedule
# ---------------------------------------------------------------------

@router.get("/{id}/leave-days", response_model=LeaveDaysRead)
def get_leave_days(id: int, db: Session = Depends(get_db)):
    obj = _get_provider_or_404(db, id)
    days = parse_leave_days(obj.leave_days)
    return LeaveDaysRead(leave_days=[d for d in WEEKDAYS if d in days])


@router.patch("/{id}/schedule", response_model=ProviderRead)
def update_schedule(
    id: int,
    data: ProviderScheduleUpdate,
    db: Session = Depends(get_db),
):
    """Update working hours / leave days and rebuild the provider's slot grid."""
    obj = _get_provider_or_404(db, id)
    changes = data.model_dump(exclude_unset=True)

    updates = {}
    try:
        if "working_hours" in changes:
            updates["working_hours"] = json.dumps(validate_working_hours(changes["working_hours"]))
        for field in ("start_time", "end_time"):
            if field in changes:
                value = changes[field]
                updates[field] = normalize_time_str(value) if value else None
    except ValueError as e:
        raise ValidationError(str(e))

    if "leave_days" in changes:
        unknown = [d for d in changes["leave_days"] or [] if d.strip().lower() not in WEEKDAYS]
        if unknown:
            raise ValidationError(f"Unknown leave days: {', '.join(unknown)}")
        updates["leave_days"] = json.dumps([d.strip().lower() for d in changes["leave_days"] or []])

    # Nothing touches the row until every field has been validated
    for field, value in updates.items():
        setattr(obj, field, value)

    obj.updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    # Commits the profile change together with the new grid
    created = SlotStore(db).regenerate(id)
    logger.info(f"Schedule of provider {id} updated, {created} slots regenerated")

    db.refresh(obj)
    return obj
