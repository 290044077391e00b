from sqlalchemy.orm import Session
from typing import List

from hospital.crud.base import CRUDBase
from hospital.crud.crud_doctor import doctor
from hospital.models.appointment import Appointment
from hospital.models.patient import Patient
from hospital.schemas.appointment import AppointmentCreate, AppointmentUpdate
from hospital.core.exceptions import NotFound


class CRUDAppointment(CRUDBase[Appointment, AppointmentCreate, AppointmentUpdate]):
    # An appointment belongs to the patient it was booked for, for its whole life.
    immutable_fields = ("patient_id",)

    def get_for_patient(self, db: Session, patient_id: int) -> List[Appointment]:
        """
        Retrieves all appointments of a patient, earliest first.
        """
        if db.get(Patient, patient_id) is None:
            raise NotFound("Patient", patient_id)
        stmt = (
            self._select()
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_time, Appointment.id)
        )
        return list(db.execute(stmt).scalars().all())

    def get_for_doctor(self, db: Session, doctor_id: int) -> List[Appointment]:
        doctor.get(db, doctor_id)
        stmt = (
            self._select()
            .where(Appointment.doctor_id == doctor_id)
            .order_by(Appointment.appointment_time, Appointment.id)
        )
        return list(db.execute(stmt).scalars().all())


appointment = CRUDAppointment(Appointment)
