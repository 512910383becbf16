"""Shared fixtures: in-memory SQLite, mocked Redis, seed helpers."""

import json
from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic.database import enable_sqlite_fk, get_db
from clinic.models.generated import (
    Base,
    Patients,
    Providers,
    Stock,
    StockItems,
    Therapies,
    TherapyRequiredItems,
    TreatmentPlans,
    TreatmentSessions,
    Users,
)

MONDAY = date(2024, 1, 1)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(eng, "connect", enable_sqlite_fk)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Replace the Redis client used for events and health checks."""
    fake = MagicMock()
    fake.ping.return_value = True
    monkeypatch.setattr("clinic.services.events.redis_client", fake)
    monkeypatch.setattr("clinic.main.redis_client", fake)
    return fake


@pytest.fixture
def client(db):
    from clinic.main import create_app

    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


class Seed:
    """Small factory for rows the scheduling core reads."""

    def __init__(self, db):
        self.db = db
        self._n = 0

    def _user(self, role: str, first_name: str, last_name: str | None = None) -> Users:
        self._n += 1
        user = Users(
            first_name=first_name,
            last_name=last_name,
            role=role,
            email=f"{role}{self._n}@clinic.test",
        )
        self.db.add(user)
        self.db.flush()
        return user

    def patient(self, first_name: str = "Asha") -> Patients:
        user = self._user("patient", first_name)
        patient = Patients(user_id=user.id)
        self.db.add(patient)
        self.db.commit()
        return patient

    def staff(self, first_name: str = "Ravi") -> Users:
        user = self._user("staff", first_name)
        self.db.commit()
        return user

    def provider(
        self,
        kind: str = "therapist",
        first_name: str = "Meera",
        last_name: str = "Nair",
        working_hours=None,
        leave_days=None,
        start_time: str | None = None,
        end_time: str | None = None,
        is_active: int = 1,
    ) -> Providers:
        user = self._user(kind, first_name, last_name)
        provider = Providers(
            user_id=user.id,
            kind=kind,
            working_hours=json.dumps(working_hours or []),
            leave_days=json.dumps(leave_days or []),
            start_time=start_time,
            end_time=end_time,
            is_active=is_active,
        )
        self.db.add(provider)
        self.db.commit()
        return provider

    def therapist(self, **kwargs) -> Providers:
        return self.provider(kind="therapist", **kwargs)

    def practitioner(self, **kwargs) -> Providers:
        kwargs.setdefault("first_name", "Vaidya")
        kwargs.setdefault("last_name", "Sharma")
        return self.provider(kind="practitioner", **kwargs)

    def therapy(
        self,
        name: str = "Abhyanga",
        items: list[tuple[str, int, int | None]] = (("Sesame oil", 2, 10),),
        staff: Users | None = None,
    ) -> Therapies:
        """
        Therapy with required items.

        items: (item name, required qty, available qty or None for no stock row)
        """
        therapy = Therapies(name=name)
        self.db.add(therapy)
        self.db.flush()

        for item_name, required, available in items:
            stock_item = self.db.query(StockItems).filter_by(name=item_name).first()
            if stock_item is None:
                stock_item = StockItems(name=item_name, category="oil", unit="ml")
                self.db.add(stock_item)
                self.db.flush()
            self.db.add(TherapyRequiredItems(
                therapy_id=therapy.id,
                stock_item_id=stock_item.id,
                quantity=required,
            ))
            if available is not None:
                self.db.add(Stock(
                    item_name=item_name,
                    quantity=available,
                    unit="ml",
                    updated_by=staff.id if staff else None,
                ))

        self.db.commit()
        return therapy

    def booked_sessions(self, therapist: Providers, patient: Patients, on: date, times: list[tuple[str, str]]):
        """A pre-existing plan occupying the given times of a therapist."""
        plan = TreatmentPlans(
            patient_id=patient.id,
            treatment_name="Existing",
            start_date=on.isoformat(),
            end_date=on.isoformat(),
            total_sessions=len(times),
        )
        self.db.add(plan)
        self.db.flush()
        for number, (start, end) in enumerate(times, start=1):
            self.db.add(TreatmentSessions(
                treatment_plan_id=plan.id,
                session_number=number,
                session_date=on.isoformat(),
                start_time=start,
                end_time=end,
                therapist_id=therapist.id,
            ))
        self.db.commit()
        return plan


@pytest.fixture
def seed(db):
    return Seed(db)


@pytest.fixture
def clinic(seed):
    """One patient, one staff member, one therapist (default hours), one stocked therapy."""
    staff = seed.staff()
    return {
        "patient": seed.patient(),
        "staff": staff,
        "therapist": seed.therapist(),
        "therapy": seed.therapy(staff=staff),
    }
