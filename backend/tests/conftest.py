import os

# Keep the app's own engine away from any real database during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hospital import crud, schemas
from hospital.api.deps import get_db
from hospital.db.base import Base
from hospital.db.session import enable_sqlite_foreign_keys
from hospital.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def asha_in():
    return schemas.PatientCreate(
        name="Asha Rao",
        birth_date=date(1990, 4, 2),
        email="asha@x.com",
        gender="female",
        blood_group="O+",
        insurance=schemas.InsuranceCreate(
            policy_number="POL-1", provider="Acme", valid_until=date(2030, 1, 1)
        ),
    )


@pytest.fixture
def doctor(db):
    return crud.doctor.create(
        db, schemas.DoctorCreate(name="Dr. Mehta", specialization="Cardiology", email="mehta@hospital.org")
    )


@pytest.fixture
def book(db):
    """Books an appointment through the repository."""
    def _book(patient_id, doctor_id, when=datetime(2025, 3, 1, 9, 30), reason="Checkup"):
        return crud.appointment.create(
            db,
            schemas.AppointmentCreate(
                appointment_time=when, reason=reason, patient_id=patient_id, doctor_id=doctor_id
            ),
        )
    return _book
