# backend/clinic/services/appointments.py
"""
Single ad hoc appointment booking.

Booking runs an overlap pre-check against the provider's active
appointments; the partial unique index on (provider, date, start_time)
catches whatever slips between the check and the insert, and both paths
surface as ConflictError.

A booking may name a slot of the provider's grid; the slot is marked
booked in the same transaction and freed again on cancellation.
"""

import logging
import secrets
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models.generated import Appointments, Patients, Providers, Slots
from .events import emit_event
from .slots.availability import ACTIVE_APPOINTMENT_STATUSES
from .slots.config import normalize_time_str, time_str_to_seconds, weekday_name

logger = logging.getLogger(__name__)


def _now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def create_appointment(
    db: Session,
    patient_id: int,
    provider_id: int,
    appointment_date: date,
    start_time: str,
    end_time: str,
    slot_id: int | None = None,
    service_type: str | None = None,
    consultation_type: str | None = None,
    notes: str | None = None,
) -> Appointments:
    try:
        start = normalize_time_str(start_time)
        end = normalize_time_str(end_time)
    except ValueError as e:
        raise ValidationError(str(e))
    if time_str_to_seconds(start) >= time_str_to_seconds(end):
        raise ValidationError("End time must be after start time")

    if not db.get(Patients, patient_id):
        raise NotFoundError("Patient not found")
    provider = db.get(Providers, provider_id)
    if not provider or not provider.is_active:
        raise NotFoundError("Provider not found")

    date_str = appointment_date.isoformat()
    clash = _find_overlap(db, provider_id, date_str, start, end)
    if clash:
        raise ConflictError(
            f"Provider already booked {clash.start_time}-{clash.end_time} on {date_str}"
        )

    slot = None
    if slot_id is not None:
        slot = db.get(Slots, slot_id)
        if not slot or slot.provider_id != provider_id:
            raise NotFoundError("Slot not found")
        if slot.day != weekday_name(appointment_date) or (slot.start_time, slot.end_time) != (start, end):
            raise ValidationError(
                f"Slot is {slot.day} {slot.start_time}-{slot.end_time}, "
                f"not {weekday_name(appointment_date)} {start}-{end}"
            )
        if slot.status != "free":
            raise ConflictError(f"Slot is {slot.status}")

    obj = Appointments(
        patient_id=patient_id,
        provider_id=provider_id,
        slot_id=slot_id,
        appointment_date=date_str,
        start_time=start,
        end_time=end,
        service_type=service_type,
        consultation_type=consultation_type,
        notes=notes,
        status="scheduled",
        booking_channel="app",
        confirmation_code=secrets.token_hex(4).upper(),
    )

    try:
        db.add(obj)
        if slot is not None:
            slot.status = "booked"
            slot.updated_at = _now_str()
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Appointment insert collided for provider {provider_id} at {date_str} {start}")
        raise ConflictError("Provider was booked concurrently for this time") from e
    except Exception:
        db.rollback()
        raise

    db.refresh(obj)
    emit_event("appointment_booked", {
        "appointment_id": obj.id,
        "provider_id": provider_id,
        "patient_id": patient_id,
        "date": date_str,
        "start_time": start,
    })
    return obj


def cancel_appointment(db: Session, appointment_id: int) -> Appointments:
    obj = db.get(Appointments, appointment_id)
    if not obj:
        raise NotFoundError("Appointment not found")
    if obj.status == "cancelled":
        return obj
    if obj.status == "completed":
        raise ConflictError("Completed appointments cannot be cancelled")

    obj.status = "cancelled"
    obj.updated_at = _now_str()
    if obj.slot is not None and obj.slot.status == "booked":
        obj.slot.status = "free"
        obj.slot.updated_at = _now_str()
    db.commit()
    db.refresh(obj)

    emit_event("appointment_cancelled", {
        "appointment_id": obj.id,
        "provider_id": obj.provider_id,
    })
    return obj


def list_appointments(
    db: Session,
    provider_id: int | None = None,
    appointment_date: date | None = None,
) -> list[Appointments]:
    q = db.query(Appointments)
    if provider_id is not None:
        q = q.filter(Appointments.provider_id == provider_id)
    if appointment_date is not None:
        q = q.filter(Appointments.appointment_date == appointment_date.isoformat())
    return q.order_by(Appointments.appointment_date.desc(), Appointments.start_time.desc()).all()


def _find_overlap(
    db: Session,
    provider_id: int,
    date_str: str,
    start: str,
    end: str,
) -> Appointments | None:
    start_s, end_s = time_str_to_seconds(start), time_str_to_seconds(end)
    active = (
        db.query(Appointments)
        .filter(
            Appointments.provider_id == provider_id,
            Appointments.appointment_date == date_str,
            Appointments.status.in_(ACTIVE_APPOINTMENT_STATUSES),
        )
        .all()
    )
    for appt in active:
        if start_s < time_str_to_seconds(appt.end_time) and end_s > time_str_to_seconds(appt.start_time):
            return appt
    return None
