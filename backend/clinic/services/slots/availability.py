# backend/clinic/services/slots/availability.py
"""
Ad hoc provider availability for a single requested date and time.

A provider is available when it has no active appointment (scheduled or
confirmed) on that date whose start time begins with the requested time.
Nothing is reserved here: the caller books separately, and the unique
index on appointments turns a lost race into a ConflictError at insert.
"""

from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...exceptions import ValidationError
from ...models.generated import Appointments, Providers
from .config import normalize_time_str

ACTIVE_APPOINTMENT_STATUSES = ("scheduled", "confirmed")


def find_available_providers(
    db: Session,
    target_date: date,
    time_str: str,
    kind: str = "practitioner",
) -> list[Providers]:
    """
    Providers of `kind` with no conflicting appointment at date + time.

    Providers are returned in id order.
    """
    try:
        time_prefix = normalize_time_str(time_str)
    except ValueError as e:
        raise ValidationError(str(e))

    providers = _get_providers(db, kind)
    booked = _count_booked(db, [p.id for p in providers], target_date, time_prefix)

    return [p for p in providers if booked.get(p.id, 0) == 0]


# ── Database helpers ─────────────────────────────────────────────────────


def _get_providers(db: Session, kind: str) -> list[Providers]:
    return (
        db.query(Providers)
        .options(joinedload(Providers.user))
        .filter(Providers.kind == kind, Providers.is_active == 1)
        .order_by(Providers.id)
        .all()
    )


def _count_booked(
    db: Session,
    provider_ids: list[int],
    target_date: date,
    time_prefix: str,
) -> dict[int, int]:
    """Active appointment count per provider at date + time prefix."""
    if not provider_ids:
        return {}

    rows = (
        db.query(Appointments.provider_id, func.count(Appointments.id))
        .filter(
            Appointments.provider_id.in_(provider_ids),
            Appointments.appointment_date == target_date.isoformat(),
            Appointments.start_time.like(f"{time_prefix}%"),
            Appointments.status.in_(ACTIVE_APPOINTMENT_STATUSES),
        )
        .group_by(Appointments.provider_id)
        .all()
    )
    return {provider_id: count for provider_id, count in rows}
