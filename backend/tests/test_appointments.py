"""Tests for single appointment booking and cancellation."""

from datetime import date

import pytest

from clinic.exceptions import ConflictError, NotFoundError, ValidationError
from clinic.models.generated import Appointments, Slots
from clinic.services.appointments import cancel_appointment, create_appointment, list_appointments
from clinic.services.slots import SlotStore

DAY = date(2024, 3, 4)  # Monday


@pytest.fixture
def doctor(seed):
    return seed.practitioner()


@pytest.fixture
def patient(seed):
    return seed.patient()


class TestCreateAppointment:
    def test_books_and_normalizes_times(self, db, doctor, patient):
        appt = create_appointment(db, patient.id, doctor.id, DAY, "10:00:00", "10:30:00")

        assert appt.id is not None
        assert (appt.start_time, appt.end_time) == ("10:00", "10:30")
        assert appt.status == "scheduled"
        assert len(appt.confirmation_code) == 8

    def test_overlap_conflicts(self, db, doctor, patient):
        """An overlapping active booking of the same provider is refused."""
        create_appointment(db, patient.id, doctor.id, DAY, "10:00", "11:00")

        with pytest.raises(ConflictError):
            create_appointment(db, patient.id, doctor.id, DAY, "10:30", "11:00")
        assert db.query(Appointments).count() == 1

    def test_adjacent_booking_allowed(self, db, doctor, patient):
        create_appointment(db, patient.id, doctor.id, DAY, "10:00", "10:30")
        create_appointment(db, patient.id, doctor.id, DAY, "10:30", "11:00")

        assert db.query(Appointments).count() == 2

    def test_cancelled_booking_does_not_conflict(self, db, doctor, patient):
        first = create_appointment(db, patient.id, doctor.id, DAY, "10:00", "10:30")
        cancel_appointment(db, first.id)

        again = create_appointment(db, patient.id, doctor.id, DAY, "10:00", "10:30")

        assert again.status == "scheduled"

    def test_end_before_start(self, db, doctor, patient):
        with pytest.raises(ValidationError):
            create_appointment(db, patient.id, doctor.id, DAY, "11:00", "10:00")

    def test_bad_time(self, db, doctor, patient):
        with pytest.raises(ValidationError):
            create_appointment(db, patient.id, doctor.id, DAY, "10", "10:30")

    def test_unknown_patient(self, db, doctor):
        with pytest.raises(NotFoundError):
            create_appointment(db, 999, doctor.id, DAY, "10:00", "10:30")

    def test_inactive_provider(self, db, seed, patient):
        gone = seed.practitioner(is_active=0)

        with pytest.raises(NotFoundError):
            create_appointment(db, patient.id, gone.id, DAY, "10:00", "10:30")


class TestSlotLinkedBooking:
    def test_slot_marked_booked_then_freed(self, db, doctor, patient):
        slot = SlotStore(db).list_slots(doctor.id, day="monday")[2]

        appt = create_appointment(
            db, patient.id, doctor.id, DAY, slot.start_time, slot.end_time, slot_id=slot.id
        )
        assert db.get(Slots, slot.id).status == "booked"

        cancel_appointment(db, appt.id)
        assert db.get(Slots, slot.id).status == "free"

    def test_booked_slot_refused(self, db, doctor, patient):
        slot = SlotStore(db).list_slots(doctor.id, day="monday")[0]
        SlotStore(db).set_status(slot.id, "booked")

        with pytest.raises(ConflictError):
            create_appointment(db, patient.id, doctor.id, DAY, "09:00", "09:30", slot_id=slot.id)

    def test_slot_on_another_weekday_refused(self, db, doctor, patient):
        """A Monday slot cannot back a Tuesday booking; the slot stays free."""
        slot = SlotStore(db).list_slots(doctor.id, day="monday")[0]

        with pytest.raises(ValidationError):
            create_appointment(
                db, patient.id, doctor.id, date(2024, 3, 5), "09:00", "09:30", slot_id=slot.id
            )
        assert db.get(Slots, slot.id).status == "free"
        assert db.query(Appointments).count() == 0

    def test_slot_with_other_times_refused(self, db, doctor, patient):
        slot = SlotStore(db).list_slots(doctor.id, day="monday")[0]

        with pytest.raises(ValidationError):
            create_appointment(db, patient.id, doctor.id, DAY, "14:00", "14:30", slot_id=slot.id)
        assert db.get(Slots, slot.id).status == "free"

    def test_slot_times_compared_after_normalizing(self, db, doctor, patient):
        slot = SlotStore(db).list_slots(doctor.id, day="monday")[0]

        create_appointment(db, patient.id, doctor.id, DAY, "09:00:00", "09:30:00", slot_id=slot.id)

        assert db.get(Slots, slot.id).status == "booked"

    def test_slot_of_other_provider(self, db, seed, doctor, patient):
        other = seed.practitioner(first_name="Kiran")
        slot = SlotStore(db).list_slots(other.id, day="monday")[0]

        with pytest.raises(NotFoundError):
            create_appointment(db, patient.id, doctor.id, DAY, "09:00", "09:30", slot_id=slot.id)


class TestCancelAppointment:
    def test_cancel_is_idempotent(self, db, doctor, patient, fake_redis):
        appt = create_appointment(db, patient.id, doctor.id, DAY, "10:00", "10:30")
        cancel_appointment(db, appt.id)
        fake_redis.rpush.reset_mock()

        again = cancel_appointment(db, appt.id)

        assert again.status == "cancelled"
        fake_redis.rpush.assert_not_called()

    def test_completed_cannot_be_cancelled(self, db, doctor, patient):
        appt = create_appointment(db, patient.id, doctor.id, DAY, "10:00", "10:30")
        appt.status = "completed"
        db.commit()

        with pytest.raises(ConflictError):
            cancel_appointment(db, appt.id)

    def test_missing(self, db):
        with pytest.raises(NotFoundError):
            cancel_appointment(db, 999)


def test_list_filters(db, seed, doctor, patient):
    other = seed.practitioner(first_name="Kiran")
    create_appointment(db, patient.id, doctor.id, DAY, "10:00", "10:30")
    create_appointment(db, patient.id, other.id, DAY, "10:00", "10:30")
    create_appointment(db, patient.id, doctor.id, date(2024, 3, 5), "10:00", "10:30")

    assert len(list_appointments(db)) == 3
    assert len(list_appointments(db, provider_id=doctor.id)) == 2
    assert len(list_appointments(db, provider_id=doctor.id, appointment_date=DAY)) == 1
