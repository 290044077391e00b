from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from hospital import crud, schemas
from hospital.api.deps import PageParams, get_db

router = APIRouter(
    prefix="/doctors",
    tags=["Doctors"],
)

@router.post("/", response_model=schemas.Doctor, status_code=201)
def create_doctor(doctor_in: schemas.DoctorCreate, db: Session = Depends(get_db)):
    return crud.doctor.create(db, doctor_in)


@router.get("/", response_model=schemas.Page[schemas.Doctor])
def list_doctors(params: PageParams = Depends(), db: Session = Depends(get_db)):
    page = crud.doctor.get_all(db, page=params.page, size=params.size, sort=params.sort)
    return schemas.Page[schemas.Doctor].model_validate(page, from_attributes=True)


@router.get("/{doctor_id}", response_model=schemas.Doctor)
def read_doctor(doctor_id: int, db: Session = Depends(get_db)):
    return crud.doctor.get(db, doctor_id)


@router.patch("/{doctor_id}", response_model=schemas.Doctor)
def update_doctor(doctor_id: int, doctor_in: schemas.DoctorUpdate, db: Session = Depends(get_db)):
    return crud.doctor.update(db, doctor_id, doctor_in)


@router.delete("/{doctor_id}", status_code=204)
def delete_doctor(doctor_id: int, db: Session = Depends(get_db)):
    crud.doctor.delete(db, doctor_id)
    return None


@router.get("/{doctor_id}/appointments", response_model=List[schemas.Appointment])
def list_doctor_appointments(doctor_id: int, db: Session = Depends(get_db)):
    return crud.appointment.get_for_doctor(db, doctor_id)
