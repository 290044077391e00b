from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hospital import crud, schemas
from hospital.api.deps import PageParams, get_db

router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
)

@router.post("/", response_model=schemas.Appointment, status_code=201)
def create_appointment(appointment_in: schemas.AppointmentCreate, db: Session = Depends(get_db)):
    """
    Book an appointment. Both the patient and the doctor must exist.
    """
    return crud.appointment.create(db, appointment_in)


@router.get("/", response_model=schemas.Page[schemas.Appointment])
def list_appointments(params: PageParams = Depends(), db: Session = Depends(get_db)):
    page = crud.appointment.get_all(db, page=params.page, size=params.size, sort=params.sort)
    return schemas.Page[schemas.Appointment].model_validate(page, from_attributes=True)


@router.get("/{appointment_id}", response_model=schemas.Appointment)
def read_appointment(appointment_id: int, db: Session = Depends(get_db)):
    return crud.appointment.get(db, appointment_id)


@router.patch("/{appointment_id}", response_model=schemas.Appointment)
def update_appointment(appointment_id: int, appointment_in: schemas.AppointmentUpdate, db: Session = Depends(get_db)):
    return crud.appointment.update(db, appointment_id, appointment_in)


@router.delete("/{appointment_id}", status_code=204)
def delete_appointment(appointment_id: int, db: Session = Depends(get_db)):
    crud.appointment.delete(db, appointment_id)
    return None
