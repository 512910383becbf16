from sqlalchemy import Column, Enum, Float, ForeignKey, Index, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Users(Base):
    __tablename__ = 'users'

    first_name = Column(Text, nullable=False)
    role = Column(Enum('admin', 'practitioner', 'therapist', 'staff', 'patient'), nullable=False)
    id = Column(Integer, primary_key=True)
    last_name = Column(Text)
    email = Column(Text, unique=True)
    phone = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    patient = relationship('Patients', uselist=False, back_populates='user')
    provider = relationship('Providers', uselist=False, back_populates='user')
    stock_updates = relationship('Stock', back_populates='updated_by_user')

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()


class Patients(Base):
    __tablename__ = 'patients'

    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    notes = Column(Text)

    user = relationship('Users', back_populates='patient')
    treatment_plans = relationship('TreatmentPlans', back_populates='patient')
    appointments = relationship('Appointments', back_populates='patient')


class Providers(Base):
    __tablename__ = 'providers'

    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    kind = Column(Enum('practitioner', 'therapist'), nullable=False)
    working_hours = Column(Text, nullable=False, server_default=text("'[]'"))
    leave_days = Column(Text, nullable=False, server_default=text("'[]'"))
    id = Column(Integer, primary_key=True)
    start_time = Column(Text)
    end_time = Column(Text)
    specializations = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    user = relationship('Users', back_populates='provider')
    slots = relationship('Slots', back_populates='provider', cascade='all, delete-orphan')
    appointments = relationship('Appointments', back_populates='provider')
    treatment_sessions = relationship('TreatmentSessions', back_populates='therapist')

    @property
    def display_name(self) -> str:
        return self.user.full_name if self.user else f"Provider {self.id}"


class Slots(Base):
    __tablename__ = 'slots'
    __table_args__ = (
        UniqueConstraint('provider_id', 'day', 'start_time'),
    )

    provider_id = Column(ForeignKey('providers.id', ondelete='CASCADE'), nullable=False)
    day = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    status = Column(Enum('free', 'booked', 'leave'), nullable=False, server_default=text("'free'"))
    id = Column(Integer, primary_key=True)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    provider = relationship('Providers', back_populates='slots')


class Therapies(Base):
    __tablename__ = 'therapies'

    name = Column(Text, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    description = Column(Text)
    duration_minutes = Column(Integer, nullable=False, server_default=text('30'))

    required_items = relationship('TherapyRequiredItems', back_populates='therapy')
    treatment_plans = relationship('TreatmentPlans', back_populates='therapy')


class StockItems(Base):
    __tablename__ = 'stock_items'

    name = Column(Text, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    category = Column(Text)
    unit = Column(Text)

    required_by = relationship('TherapyRequiredItems', back_populates='stock_item')


class TherapyRequiredItems(Base):
    __tablename__ = 'therapy_required_items'
    __table_args__ = (
        UniqueConstraint('therapy_id', 'stock_item_id'),
    )

    therapy_id = Column(ForeignKey('therapies.id', ondelete='CASCADE'), nullable=False)
    stock_item_id = Column(ForeignKey('stock_items.id', ondelete='CASCADE'), nullable=False)
    quantity = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)

    therapy = relationship('Therapies', back_populates='required_items')
    stock_item = relationship('StockItems', back_populates='required_by')


class Stock(Base):
    __tablename__ = 'stock'

    item_name = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    unit = Column(Text)
    updated_by = Column(ForeignKey('users.id', ondelete='SET NULL'))
    last_updated = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    updated_by_user = relationship('Users', back_populates='stock_updates')


class TreatmentPlans(Base):
    __tablename__ = 'treatment_plans'

    patient_id = Column(ForeignKey('patients.id', ondelete='CASCADE'), nullable=False)
    treatment_name = Column(Text, nullable=False)
    start_date = Column(Text, nullable=False)
    end_date = Column(Text, nullable=False)
    total_sessions = Column(Integer, nullable=False)
    status = Column(Enum('planned', 'active', 'completed'), nullable=False, server_default=text("'planned'"))
    id = Column(Integer, primary_key=True)
    practitioner_id = Column(ForeignKey('providers.id', ondelete='SET NULL'))
    therapy_id = Column(ForeignKey('therapies.id', ondelete='SET NULL'))
    treatment_type = Column(Text, server_default=text("'therapy'"))
    total_cost = Column(Float, server_default=text('0'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    patient = relationship('Patients', back_populates='treatment_plans')
    practitioner = relationship('Providers')
    therapy = relationship('Therapies', back_populates='treatment_plans')
    sessions = relationship(
        'TreatmentSessions',
        back_populates='treatment_plan',
        order_by='TreatmentSessions.session_number',
    )


class TreatmentSessions(Base):
    __tablename__ = 'treatment_sessions'
    __table_args__ = (
        Index(
            'uq_treatment_sessions_therapist_slot',
            'therapist_id', 'session_date', 'start_time',
            unique=True,
            sqlite_where=text("status <> 'cancelled'"),
            postgresql_where=text("status <> 'cancelled'"),
        ),
    )

    treatment_plan_id = Column(ForeignKey('treatment_plans.id', ondelete='CASCADE'), nullable=False)
    session_number = Column(Integer, nullable=False)
    session_date = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    therapist_id = Column(ForeignKey('providers.id'), nullable=False)
    duration_minutes = Column(Integer, nullable=False, server_default=text('30'))
    status = Column(Enum('scheduled', 'completed', 'cancelled'), nullable=False, server_default=text("'scheduled'"))
    id = Column(Integer, primary_key=True)
    staff_id = Column(ForeignKey('users.id', ondelete='SET NULL'))
    procedures_performed = Column(Text, server_default=text("'[]'"))

    treatment_plan = relationship('TreatmentPlans', back_populates='sessions')
    therapist = relationship('Providers', back_populates='treatment_sessions')
    staff = relationship('Users')


class Appointments(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        Index(
            'uq_appointments_provider_slot',
            'provider_id', 'appointment_date', 'start_time',
            unique=True,
            sqlite_where=text("status IN ('scheduled', 'confirmed')"),
            postgresql_where=text("status IN ('scheduled', 'confirmed')"),
        ),
    )

    patient_id = Column(ForeignKey('patients.id', ondelete='CASCADE'), nullable=False)
    provider_id = Column(ForeignKey('providers.id', ondelete='CASCADE'), nullable=False)
    appointment_date = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    status = Column(
        Enum('scheduled', 'confirmed', 'completed', 'cancelled'),
        nullable=False,
        server_default=text("'scheduled'"),
    )
    id = Column(Integer, primary_key=True)
    slot_id = Column(ForeignKey('slots.id', ondelete='SET NULL'))
    service_type = Column(Text)
    consultation_type = Column(Text)
    notes = Column(Text)
    booking_channel = Column(Text, server_default=text("'app'"))
    confirmation_code = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    patient = relationship('Patients', back_populates='appointments')
    provider = relationship('Providers', back_populates='appointments')
    slot = relationship('Slots')
