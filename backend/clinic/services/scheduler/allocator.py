# backend/clinic/services/scheduler/allocator.py
"""
Treatment-plan session allocator.

Given a patient, a therapy, a start date, a session count and a frequency,
creates one TreatmentPlans row and one TreatmentSessions row per session,
each pinned to a distinct (therapist, date, 30-minute slot).

Steps:
1. Stock sufficiency for the therapy's required items
2. Active staff (anyone who has updated stock) for round-robin assignment
3. Session count in [1, max_sessions]
4. Session dates from the recurrence rule
5. Plan row, end_date = last session date, status planned
6. Per date, in order: first therapist (policy order) whose working window
   on that weekday has a slot not overlapping any existing session or
   active appointment of that therapist on that date

Steps 1-4 fail before any write. The plan and all sessions are committed
together; a date with no free slot rolls the whole plan back.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ...exceptions import ConflictError, NoAvailableSlotError, NotFoundError
from ...models.generated import (
    Appointments,
    Patients,
    Providers,
    Therapies,
    TreatmentPlans,
    TreatmentSessions,
)
from ..events import emit_event
from ..slots.availability import ACTIVE_APPOINTMENT_STATUSES
from ..slots.calendar import WorkingHoursCalendar
from ..slots.config import BookingConfig, get_booking_config, time_str_to_seconds, weekday_name
from ..slots.slicer import TimeSlot, slice_time_range
from .inventory import RequiredItem, check_stock, get_required_items, list_active_staff
from .recurrence import compute_session_dates, parse_session_count, parse_start_date

logger = logging.getLogger(__name__)


# ── Candidate policy ─────────────────────────────────────────────────────


class CandidatePolicy(Protocol):
    """Order in which therapists are tried for one session date."""

    def order(self, therapists: list[Providers], session_date: date) -> list[Providers]:
        ...


class FirstFitPolicy:
    """Stable id order; the first feasible therapist/slot wins."""

    def order(self, therapists: list[Providers], session_date: date) -> list[Providers]:
        return sorted(therapists, key=lambda t: t.id)


# ── Result types ─────────────────────────────────────────────────────────


@dataclass
class AssignedSession:
    session_id: int
    session_number: int
    session_date: date
    start_time: str
    end_time: str
    therapist_id: int
    therapist: str
    staff_id: int


@dataclass
class AllocationResult:
    plan_id: int
    sessions: list[AssignedSession] = field(default_factory=list)
    required_items: list[RequiredItem] = field(default_factory=list)


# ── Allocator ────────────────────────────────────────────────────────────


class SessionAllocator:
    """Synchronous single-pass allocation; no backtracking across dates."""

    def __init__(
        self,
        db: Session,
        config: BookingConfig | None = None,
        policy: CandidatePolicy | None = None,
    ):
        self.db = db
        self.config = config or get_booking_config()
        self.policy = policy or FirstFitPolicy()

    def allocate(
        self,
        patient_id: int,
        therapy_id: int,
        start_date,
        num_sessions,
        frequency: str,
        practitioner_id: int | None = None,
    ) -> AllocationResult:
        therapy = self.db.get(Therapies, therapy_id)
        if not therapy:
            raise NotFoundError("Therapy not found")
        if not self.db.get(Patients, patient_id):
            raise NotFoundError("Patient not found")
        if practitioner_id is not None:
            practitioner = self.db.get(Providers, practitioner_id)
            if not practitioner or practitioner.kind != "practitioner":
                raise NotFoundError("Practitioner not found")

        required_items = get_required_items(self.db, therapy_id)
        check_stock(required_items)

        staff = list_active_staff(self.db)

        count = parse_session_count(num_sessions, self.config.max_sessions)
        session_dates = compute_session_dates(parse_start_date(start_date), count, frequency)

        therapists = self._get_therapists()
        calendars = {
            t.id: WorkingHoursCalendar.from_provider(t, self.config) for t in therapists
        }

        try:
            plan = TreatmentPlans(
                patient_id=patient_id,
                practitioner_id=practitioner_id,
                therapy_id=therapy.id,
                treatment_name=therapy.name,
                treatment_type="therapy",
                start_date=session_dates[0].isoformat(),
                end_date=session_dates[-1].isoformat(),
                total_sessions=count,
                total_cost=0.0,
                status="planned",
            )
            self.db.add(plan)
            self.db.flush()

            result = AllocationResult(plan_id=plan.id, required_items=required_items)

            for index, session_date in enumerate(session_dates):
                found = self._find_slot(therapists, calendars, session_date)
                if found is None:
                    logger.warning(
                        f"No free slot for session {index + 1} on {session_date} "
                        f"(plan for patient {patient_id})"
                    )
                    raise NoAvailableSlotError(index, session_date)

                therapist, slot = found
                staff_id = staff[index % len(staff)]

                session = TreatmentSessions(
                    treatment_plan_id=plan.id,
                    session_number=index + 1,
                    session_date=session_date.isoformat(),
                    start_time=slot.start,
                    end_time=slot.end,
                    therapist_id=therapist.id,
                    staff_id=staff_id,
                    procedures_performed=json.dumps([therapy.name]),
                    duration_minutes=self.config.session_duration_minutes,
                    status="scheduled",
                )
                self.db.add(session)
                # Later dates must see this row in their conflict check
                self.db.flush()

                logger.info(
                    f"Session {index + 1}/{count} on {session_date} {slot.start}-{slot.end} "
                    f"-> therapist {therapist.id}, staff {staff_id}"
                )
                result.sessions.append(AssignedSession(
                    session_id=session.id,
                    session_number=index + 1,
                    session_date=session_date,
                    start_time=slot.start,
                    end_time=slot.end,
                    therapist_id=therapist.id,
                    therapist=therapist.display_name,
                    staff_id=staff_id,
                ))

            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Concurrent allocation collided on a therapist slot: {e.orig}")
            raise ConflictError("A therapist slot was booked concurrently, retry the plan") from e
        except Exception:
            self.db.rollback()
            raise

        emit_event("treatment_plan_scheduled", {
            "plan_id": result.plan_id,
            "patient_id": patient_id,
            "sessions": len(result.sessions),
            "start_date": session_dates[0].isoformat(),
            "end_date": session_dates[-1].isoformat(),
        })
        return result

    # ── Search ───────────────────────────────────────────────────────────

    def _find_slot(
        self,
        therapists: list[Providers],
        calendars: dict[int, WorkingHoursCalendar],
        session_date: date,
    ) -> tuple[Providers, TimeSlot] | None:
        day = weekday_name(session_date)

        for therapist in self.policy.order(therapists, session_date):
            window = calendars[therapist.id].window_for(day)
            if window is None:
                continue

            candidates = slice_time_range(window[0], window[1], self.config.session_duration_minutes)
            if not candidates:
                continue

            busy = self._busy_intervals(therapist.id, session_date)
            for slot in candidates:
                if not _overlaps_any(slot, busy):
                    return therapist, slot

        return None

    def _busy_intervals(self, therapist_id: int, session_date: date) -> list[tuple[int, int]]:
        """Occupied [start, end) seconds of a therapist on a date."""
        date_str = session_date.isoformat()

        sessions = (
            self.db.query(TreatmentSessions.start_time, TreatmentSessions.end_time)
            .filter(
                TreatmentSessions.therapist_id == therapist_id,
                TreatmentSessions.session_date == date_str,
                TreatmentSessions.status != "cancelled",
            )
            .all()
        )
        appointments = (
            self.db.query(Appointments.start_time, Appointments.end_time)
            .filter(
                Appointments.provider_id == therapist_id,
                Appointments.appointment_date == date_str,
                Appointments.status.in_(ACTIVE_APPOINTMENT_STATUSES),
            )
            .all()
        )

        return [
            (time_str_to_seconds(start), time_str_to_seconds(end))
            for start, end in [*sessions, *appointments]
        ]

    def _get_therapists(self) -> list[Providers]:
        return (
            self.db.query(Providers)
            .options(joinedload(Providers.user))
            .filter(Providers.kind == "therapist", Providers.is_active == 1)
            .order_by(Providers.id)
            .all()
        )


def _overlaps_any(slot: TimeSlot, busy: list[tuple[int, int]]) -> bool:
    start, end = time_str_to_seconds(slot.start), time_str_to_seconds(slot.end)
    return any(start < b_end and end > b_start for b_start, b_end in busy)


def allocate_treatment_plan(db: Session, **request) -> AllocationResult:
    """Allocate with the default configuration and first-fit policy."""
    return SessionAllocator(db).allocate(**request)
