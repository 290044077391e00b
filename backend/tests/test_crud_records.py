from datetime import date, datetime, timezone

import pytest

from hospital import crud, schemas
from hospital.core.exceptions import (
    ImmutableFieldError,
    InvalidQuery,
    NotFound,
    ReferenceViolation,
    RequiredFieldMissing,
    UniquenessViolation,
)


@pytest.fixture
def doctors(db):
    names = ["Dr. Iyer", "Dr. Bose", "Dr. Chopra", "Dr. Anand", "Dr. Erra"]
    return [
        crud.doctor.create(db, schemas.DoctorCreate(name=name, email=f"{name[4:].lower()}@hospital.org"))
        for name in names
    ]


@pytest.fixture
def patient(db):
    return crud.patient.create(db, schemas.PatientCreate(name="Meera Nair", email="meera@x.com"))


# --- Pagination ---

def test_get_all_returns_a_page_with_totals(db, doctors):
    page = crud.doctor.get_all(db, page=1, size=2)

    assert [d.name for d in page.items] == ["Dr. Chopra", "Dr. Anand"]
    assert page.total == 5
    assert page.page == 1
    assert page.size == 2
    assert page.total_pages == 3


def test_get_all_past_the_last_page_is_empty(db, doctors):
    page = crud.doctor.get_all(db, page=10, size=2)

    assert page.items == []
    assert page.total == 5


def test_get_all_sorts_by_field(db, doctors):
    ascending = crud.doctor.get_all(db, size=5, sort="name")
    descending = crud.doctor.get_all(db, size=5, sort="-name")

    assert [d.name for d in ascending.items] == sorted(d.name for d in doctors)
    assert [d.name for d in descending.items] == sorted((d.name for d in doctors), reverse=True)


@pytest.mark.parametrize("kwargs", [{"sort": "salary"}, {"page": -1}, {"size": 0}])
def test_get_all_rejects_bad_queries(db, kwargs):
    with pytest.raises(InvalidQuery):
        crud.doctor.get_all(db, **kwargs)


def test_empty_table_has_no_pages(db):
    page = crud.insurance.get_all(db)

    assert page.items == []
    assert page.total == 0
    assert page.total_pages == 0


# --- Doctors ---

def test_get_unknown_doctor(db):
    with pytest.raises(NotFound) as excinfo:
        crud.doctor.get(db, 42)

    assert excinfo.value.entity == "Doctor"
    assert excinfo.value.record_id == 42


def test_doctor_email_is_unique(db, doctors):
    with pytest.raises(UniquenessViolation) as excinfo:
        crud.doctor.create(db, schemas.DoctorCreate(name="Dr. Clone", email="iyer@hospital.org"))

    assert excinfo.value.fields == ("email",)


def test_doctor_update(db, doctors):
    updated = crud.doctor.update(db, doctors[0].id, schemas.DoctorUpdate(specialization="Neurology"))

    assert updated.specialization == "Neurology"
    assert updated.email == "iyer@hospital.org"


def test_doctor_with_appointments_cannot_be_deleted(db, doctors, patient, book):
    book(patient.id, doctors[0].id)

    with pytest.raises(ReferenceViolation):
        crud.doctor.delete(db, doctors[0].id)

    assert crud.doctor.get(db, doctors[0].id) is not None


def test_doctor_without_references_is_deleted(db, doctors):
    crud.doctor.delete(db, doctors[1].id)

    with pytest.raises(NotFound):
        crud.doctor.get(db, doctors[1].id)


# --- Insurance ---

def test_standalone_insurance_gets_a_creation_timestamp(db):
    policy = crud.insurance.create(
        db, schemas.InsuranceCreate(policy_number="POL-9", provider="Acme", valid_until=date(2029, 12, 31))
    )

    assert policy.id is not None
    assert policy.created_at is not None
    assert policy.patient is None


def test_insurance_creation_timestamp_is_immutable(db):
    policy = crud.insurance.create(
        db, schemas.InsuranceCreate(policy_number="POL-9", provider="Acme", valid_until=date(2029, 12, 31))
    )
    created_at = policy.created_at

    with pytest.raises(ImmutableFieldError):
        crud.insurance.update(db, policy.id, {"created_at": datetime(2001, 1, 1)})

    updated = crud.insurance.update(db, policy.id, schemas.InsuranceUpdate(provider="Acme Health"))
    assert updated.provider == "Acme Health"
    assert updated.created_at == created_at


def test_insurance_update_may_echo_the_stored_timestamp(db):
    policy = crud.insurance.create(
        db, schemas.InsuranceCreate(policy_number="POL-9", provider="Acme", valid_until=date(2029, 12, 31))
    )
    stored = policy.created_at
    if stored.tzinfo is None:
        echoed = stored.replace(tzinfo=timezone.utc)
    else:
        echoed = stored

    updated = crud.insurance.update(db, policy.id, {"created_at": echoed, "provider": "Acme Health"})

    assert updated.provider == "Acme Health"
    assert updated.created_at == stored


def test_insurance_requires_provider(db):
    with pytest.raises(RequiredFieldMissing) as excinfo:
        crud.insurance.create(db, {"policy_number": "POL-10", "valid_until": date(2030, 1, 1)})

    assert excinfo.value.entity == "Insurance"
    assert excinfo.value.field == "provider"


# --- Appointments ---

def test_appointment_needs_an_existing_patient(db, doctors):
    with pytest.raises(NotFound) as excinfo:
        crud.appointment.create(
            db,
            schemas.AppointmentCreate(appointment_time=datetime(2025, 1, 1, 8, 0), patient_id=77, doctor_id=doctors[0].id),
        )

    assert excinfo.value.entity == "Patient"


def test_appointment_needs_a_time(db, doctors, patient):
    with pytest.raises(RequiredFieldMissing) as excinfo:
        crud.appointment.create(db, {"patient_id": patient.id, "doctor_id": doctors[0].id})

    assert excinfo.value.field == "appointment_time"


def test_appointment_cannot_change_patient(db, doctors, patient, book):
    other = crud.patient.create(db, schemas.PatientCreate(name="Other", email="other@x.com"))
    appointment = book(patient.id, doctors[0].id)

    with pytest.raises(ImmutableFieldError):
        crud.appointment.update(db, appointment.id, {"patient_id": other.id})

    assert crud.appointment.get(db, appointment.id).patient_id == patient.id


def test_appointment_can_move_to_another_doctor(db, doctors, patient, book):
    appointment = book(patient.id, doctors[0].id)

    updated = crud.appointment.update(
        db, appointment.id, schemas.AppointmentUpdate(doctor_id=doctors[1].id, reason="Second opinion")
    )

    assert updated.doctor_id == doctors[1].id
    assert updated.patient_id == patient.id
    assert updated.reason == "Second opinion"


def test_appointment_cannot_move_to_unknown_doctor(db, doctors, patient, book):
    appointment = book(patient.id, doctors[0].id)

    with pytest.raises(NotFound):
        crud.appointment.update(db, appointment.id, schemas.AppointmentUpdate(doctor_id=999))


def test_appointments_by_patient_and_doctor(db, doctors, patient, book):
    book(patient.id, doctors[0].id, when=datetime(2025, 2, 1, 9, 0))
    book(patient.id, doctors[1].id, when=datetime(2025, 1, 1, 9, 0))

    assert [a.doctor_id for a in crud.appointment.get_for_patient(db, patient.id)] == [doctors[1].id, doctors[0].id]
    assert len(crud.appointment.get_for_doctor(db, doctors[0].id)) == 1
    with pytest.raises(NotFound):
        crud.appointment.get_for_patient(db, 999)
    with pytest.raises(NotFound):
        crud.appointment.get_for_doctor(db, 999)


def test_deleting_an_appointment_keeps_the_patient(db, doctors, patient, book):
    appointment = book(patient.id, doctors[0].id)

    crud.appointment.delete(db, appointment.id)

    assert crud.patient.get(db, patient.id).appointments == []


# --- Departments ---

def test_department_membership(db, doctors):
    cardiology = crud.department.create(
        db, schemas.DepartmentCreate(name="Cardiology", head_doctor_id=doctors[0].id)
    )

    crud.department.add_doctor(db, cardiology.id, doctors[1].id)
    crud.department.add_doctor(db, cardiology.id, doctors[2].id)
    crud.department.add_doctor(db, cardiology.id, doctors[2].id)
    updated = crud.department.remove_doctor(db, cardiology.id, doctors[1].id)

    assert [d.id for d in updated.doctors] == [doctors[2].id]
    assert updated.head_doctor.id == doctors[0].id
    with pytest.raises(NotFound):
        crud.department.remove_doctor(db, cardiology.id, doctors[1].id)


def test_department_requires_existing_head(db):
    with pytest.raises(NotFound) as excinfo:
        crud.department.create(db, schemas.DepartmentCreate(name="Oncology", head_doctor_id=5))

    assert excinfo.value.entity == "Doctor"


def test_department_name_is_unique(db, doctors):
    crud.department.create(db, schemas.DepartmentCreate(name="Cardiology", head_doctor_id=doctors[0].id))

    with pytest.raises(UniquenessViolation):
        crud.department.create(db, schemas.DepartmentCreate(name="Cardiology", head_doctor_id=doctors[1].id))


def test_deleting_a_member_doctor_drops_the_membership(db, doctors):
    cardiology = crud.department.create(
        db, schemas.DepartmentCreate(name="Cardiology", head_doctor_id=doctors[0].id)
    )
    crud.department.add_doctor(db, cardiology.id, doctors[3].id)

    crud.doctor.delete(db, doctors[3].id)
    db.expire_all()

    assert crud.department.get(db, cardiology.id).doctors == []


def test_head_doctor_cannot_be_deleted(db, doctors):
    crud.department.create(db, schemas.DepartmentCreate(name="Cardiology", head_doctor_id=doctors[0].id))

    with pytest.raises(ReferenceViolation):
        crud.doctor.delete(db, doctors[0].id)
