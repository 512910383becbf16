# backend/clinic/services/slots/store.py
"""
Persisted weekly slot grid per provider.

Rows: one per (provider, weekday, start_time), status free / booked / leave.
Working days are sliced from the provider's window with status "free";
non-working and leave days get placeholder slots over the conventional
09:00-17:00 day with status "leave".

Every write commits once or rolls back entirely.
"""

import logging
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...exceptions import ConflictError, NotFoundError, ValidationError
from ...models.generated import Providers, Slots
from ..events import emit_event
from .calendar import WorkingHoursCalendar
from .config import WEEKDAYS, BookingConfig, get_booking_config
from .slicer import slice_time_range

logger = logging.getLogger(__name__)

SLOT_STATUSES = ("booked", "free", "leave")


def _now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class SlotStore:
    """SQLAlchemy-backed slot table for one session."""

    def __init__(self, db: Session, config: BookingConfig | None = None):
        self.db = db
        self.config = config or get_booking_config()

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Slot write conflict: {e.orig}")
            raise ConflictError("Slot grid was modified concurrently, retry") from e
        except Exception:
            self.db.rollback()
            raise

    # ── Write ────────────────────────────────────────────────────────────

    def generate(self, provider_id: int, regenerate: bool = False) -> int:
        """
        Generate the weekly grid for a provider.

        regenerate=True deletes every existing slot of the provider first;
        otherwise only weekdays without any slots are filled.

        Returns:
            Number of slots created.
        """
        provider = self._get_provider(provider_id)

        with self._transaction():
            if regenerate:
                deleted = (
                    self.db.query(Slots)
                    .filter(Slots.provider_id == provider_id)
                    .delete(synchronize_session="fetch")
                )
                logger.info(f"Deleted {deleted} slots of provider {provider_id}")
                days = list(WEEKDAYS)
            else:
                existing = self._days_with_slots(provider_id)
                days = [d for d in WEEKDAYS if d not in existing]

            created = self._insert_days(provider, days)

        if created:
            emit_event("slots_regenerated", {
                "provider_id": provider_id,
                "regenerate": regenerate,
                "created": created,
            })
        logger.info(f"Generated {created} slots for provider {provider_id} (regenerate={regenerate})")
        return created

    def regenerate(self, provider_id: int) -> int:
        return self.generate(provider_id, regenerate=True)

    def ensure_generated(self, provider_id: int, day: str) -> int:
        """Lazily fill one weekday if the provider has no slots for it."""
        day = self._validate_day(day)
        if day in self._days_with_slots(provider_id):
            return 0

        provider = self._get_provider(provider_id)
        with self._transaction():
            created = self._insert_days(provider, [day])
        logger.info(f"Auto-generated {created} {day} slots for provider {provider_id}")
        return created

    def generate_all(self, regenerate: bool = False) -> dict[int, int]:
        """Generate grids for every active practitioner."""
        provider_ids = [
            pid for (pid,) in (
                self.db.query(Providers.id)
                .filter(Providers.kind == "practitioner", Providers.is_active == 1)
                .order_by(Providers.id)
                .all()
            )
        ]
        return {pid: self.generate(pid, regenerate) for pid in provider_ids}

    def set_status(self, slot_id: int, status: str) -> Slots:
        """Transition one slot; re-setting the current status changes nothing."""
        if status not in SLOT_STATUSES:
            raise ValidationError(f"Invalid status {status!r}, expected one of {', '.join(SLOT_STATUSES)}")

        slot = self.db.get(Slots, slot_id)
        if not slot:
            raise NotFoundError("Slot not found")

        if slot.status != status:
            with self._transaction():
                slot.status = status
                slot.updated_at = _now_str()
            self.db.refresh(slot)
        return slot

    # ── Read ─────────────────────────────────────────────────────────────

    def list_slots(
        self,
        provider_id: int,
        day: str | None = None,
        status: str | None = None,
    ) -> list[Slots]:
        """
        Slots of a provider ordered by weekday then start time.

        When a specific day is requested and nothing exists for it, the day
        is generated on demand before returning.
        """
        self._get_provider(provider_id)
        if day is not None:
            day = self._validate_day(day)
        if status is not None and status not in SLOT_STATUSES:
            raise ValidationError(f"Invalid status {status!r}")

        slots = self._query(provider_id, day, status)
        if not slots and day is not None and self.ensure_generated(provider_id, day):
            slots = self._query(provider_id, day, status)
        return slots

    # ── Helpers ──────────────────────────────────────────────────────────

    def _query(self, provider_id: int, day: str | None, status: str | None) -> list[Slots]:
        q = self.db.query(Slots).filter(Slots.provider_id == provider_id)
        if day is not None:
            q = q.filter(Slots.day == day)
        if status is not None:
            q = q.filter(Slots.status == status)
        return sorted(q.all(), key=lambda s: (WEEKDAYS.index(s.day), s.start_time))

    def _insert_days(self, provider: Providers, days: list[str]) -> int:
        calendar = WorkingHoursCalendar.from_provider(provider, self.config)
        step = self.config.slot_step_minutes
        rows = []

        for day in days:
            window = calendar.window_for(day)
            if window is None:
                pieces = slice_time_range(self.config.default_day_start, self.config.default_day_end, step)
                status = "leave"
            else:
                pieces = slice_time_range(window[0], window[1], step)
                status = "free"

            rows.extend(
                Slots(
                    provider_id=provider.id,
                    day=day,
                    start_time=piece.start,
                    end_time=piece.end,
                    status=status,
                )
                for piece in pieces
            )

        self.db.add_all(rows)
        self.db.flush()
        return len(rows)

    def _days_with_slots(self, provider_id: int) -> set[str]:
        rows = (
            self.db.query(Slots.day)
            .filter(Slots.provider_id == provider_id)
            .distinct()
            .all()
        )
        return {day for (day,) in rows}

    def _get_provider(self, provider_id: int) -> Providers:
        provider = self.db.get(Providers, provider_id)
        if not provider:
            raise NotFoundError("Provider not found")
        return provider

    @staticmethod
    def _validate_day(day: str) -> str:
        day = day.strip().lower()
        if day not in WEEKDAYS:
            raise ValidationError(f"Invalid day {day!r}")
        return day
