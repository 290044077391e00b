import logging
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from hospital import crud, schemas
from hospital.api.deps import PageParams, get_db
from hospital.core.exceptions import NotFound

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patients",
    tags=["Patients"],
)

@router.post("/", response_model=schemas.Patient, status_code=201)
def create_patient(
    patient_in: schemas.PatientCreate,
    db: Session = Depends(get_db)
):
    """
    Register a new patient, optionally with its insurance policy.
    """
    return crud.patient.create(db, patient_in)


@router.get("/", response_model=schemas.Page[schemas.Patient])
def list_patients(
    params: PageParams = Depends(),
    db: Session = Depends(get_db)
):
    page = crud.patient.get_all(db, page=params.page, size=params.size, sort=params.sort)
    return schemas.Page[schemas.Patient].model_validate(page, from_attributes=True)


@router.get("/search/by-email", response_model=schemas.Patient)
def find_patient_by_email(
    email: str,
    db: Session = Depends(get_db)
):
    db_patient = crud.patient.get_by_email(db, email)
    if db_patient is None:
        raise NotFound("Patient", email, field="email")
    return db_patient


@router.get("/search/by-birth-date", response_model=List[schemas.Patient])
def find_patients_by_birth_date(
    start: date,
    end: date,
    db: Session = Depends(get_db)
):
    """
    Patients born between start and end, inclusive.
    """
    return crud.patient.find_by_birth_date_between(db, start, end)


@router.get("/{patient_id}", response_model=schemas.Patient)
def read_patient(
    patient_id: int,
    db: Session = Depends(get_db)
):
    return crud.patient.get(db, patient_id)


@router.patch("/{patient_id}", response_model=schemas.Patient)
def update_patient(
    patient_id: int,
    patient_in: schemas.PatientUpdate,
    db: Session = Depends(get_db)
):
    """
    Partially update a patient. Sending `insurance` replaces the current
    policy; sending `"insurance": null` removes it.
    """
    return crud.patient.update(db, patient_id, patient_in)


@router.delete("/{patient_id}", status_code=204)
def delete_patient(
    patient_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a patient together with its insurance and appointments.
    """
    crud.patient.delete(db, patient_id)
    return None


@router.get("/{patient_id}/appointments", response_model=List[schemas.Appointment])
def list_patient_appointments(
    patient_id: int,
    db: Session = Depends(get_db)
):
    return crud.appointment.get_for_patient(db, patient_id)
