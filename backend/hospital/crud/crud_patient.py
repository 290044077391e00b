import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from hospital.core.config import settings
from hospital.core.exceptions import CascadeFailure, InvalidQuery
from hospital.crud.base import CRUDBase
from hospital.crud.crud_insurance import insurance as crud_insurance
from hospital.db.transaction import atomic
from hospital.models.appointment import Appointment
from hospital.models.insurance import Insurance
from hospital.models.patient import Patient
from hospital.schemas.patient import PatientCreate, PatientUpdate

logger = logging.getLogger(__name__)


class CRUDPatient(CRUDBase[Patient, PatientCreate, PatientUpdate]):
    """
    Patient repository.

    A patient owns its insurance (created inline, replaced, removed with it)
    and its appointments (removed with it). Those rules are carried out here
    as explicit statements inside one transaction rather than by ORM cascades.
    """

    nested_fields = ("insurance",)

    def __init__(self, model, eager_appointments: Optional[bool] = None):
        super().__init__(model)
        # None means "follow settings.PATIENT_EAGER_APPOINTMENTS"
        self.eager_appointments = eager_appointments

    def _load_options(self):
        eager = self.eager_appointments
        if eager is None:
            eager = settings.PATIENT_EAGER_APPOINTMENTS
        options = [joinedload(Patient.insurance)]
        if eager:
            options.append(selectinload(Patient.appointments))
        return options

    def _values(self, obj_in, exclude_unset: bool = False) -> Dict[str, Any]:
        values = super()._values(obj_in, exclude_unset=exclude_unset)
        # The link is only changed through "insurance" so the old row is always removed.
        if "insurance_id" in values:
            raise InvalidQuery("Patient insurance is set through 'insurance', not 'insurance_id'")
        return values

    # --- Lookups ---

    def get_by_email(self, db: Session, email: str) -> Optional[Patient]:
        return db.execute(self._select().where(Patient.email == email)).scalars().first()

    def get_by_name_and_birth_date(self, db: Session, name: str, birth_date: date) -> Optional[Patient]:
        stmt = self._select().where(Patient.name == name, Patient.birth_date == birth_date)
        return db.execute(stmt).scalars().first()

    def find_by_birth_date_between(self, db: Session, start: date, end: date) -> List[Patient]:
        """
        Retrieves patients born between ``start`` and ``end`` (both inclusive),
        oldest first. Served by idx_patient_birth_date.
        """
        if start > end:
            raise InvalidQuery("start must not be after end")
        stmt = (
            self._select()
            .where(Patient.birth_date.between(start, end))
            .order_by(Patient.birth_date, Patient.id)
        )
        return list(db.execute(stmt).scalars().all())

    # --- Writes ---

    def create(self, db: Session, obj_in: Union[PatientCreate, Dict[str, Any]]) -> Patient:
        """
        Creates a patient and, when given, its insurance in the same transaction.
        """
        values = self._values(obj_in)
        insurance_in = values.pop("insurance", None)
        with atomic(db):
            db_patient = self._prepare_create(db, values)
            if insurance_in is not None:
                db_patient.insurance = crud_insurance._prepare_create(db, crud_insurance._values(insurance_in))
        logger.info(f"Created Patient {db_patient.id} (insurance: {db_patient.insurance_id})")
        return self.get(db, db_patient.id)

    def update(self, db: Session, id: Any, obj_in: Union[PatientUpdate, Dict[str, Any]]) -> Patient:
        """
        Applies a partial update. An ``insurance`` key replaces the current
        insurance (or removes it when null); the old row is deleted.
        """
        changes = self._values(obj_in, exclude_unset=True)
        replace_insurance = "insurance" in changes
        insurance_in = changes.pop("insurance", None)
        with atomic(db):
            db_patient = self.get(db, id)
            self._apply_update(db, db_patient, changes)
            if replace_insurance:
                self._replace_insurance(db, db_patient, insurance_in)
        logger.info(f"Updated Patient {id}: {sorted(changes)}{' + insurance' if replace_insurance else ''}")
        return self.get(db, id)

    def _replace_insurance(self, db: Session, db_patient: Patient, insurance_in: Optional[Any]) -> None:
        old_insurance = db_patient.insurance
        if old_insurance is not None:
            old_id = old_insurance.id
            # Unlink first: the patient row holds the foreign key.
            db_patient.insurance = None
            db.flush()
            db.delete(old_insurance)
            db.flush()
            logger.info(f"Removed orphaned Insurance {old_id} of Patient {db_patient.id}")
        if insurance_in is not None:
            db_patient.insurance = crud_insurance._prepare_create(db, crud_insurance._values(insurance_in))
            db.flush()

    def delete(self, db: Session, id: Any) -> None:
        """
        Deletes a patient together with its appointments and its insurance.

        Either every row goes or, on any failure, none does and CascadeFailure
        is raised.
        """
        with atomic(db):
            db_patient = self.get(db, id)
            insurance_id = db_patient.insurance_id
            try:
                removed_appointments = db.execute(
                    delete(Appointment).where(Appointment.patient_id == id)
                ).rowcount
                removed = db.execute(delete(Patient).where(Patient.id == id)).rowcount
                if removed != 1:
                    raise CascadeFailure(self.entity, id, f"expected to delete 1 patient row, deleted {removed}")
                if insurance_id is not None:
                    removed = db.execute(delete(Insurance).where(Insurance.id == insurance_id)).rowcount
                    if removed != 1:
                        raise CascadeFailure(self.entity, id, f"insurance {insurance_id} was not deleted")
                remaining = db.scalar(
                    select(func.count()).select_from(Appointment).where(Appointment.patient_id == id)
                )
                if remaining:
                    raise CascadeFailure(self.entity, id, f"{remaining} appointment(s) still reference the patient")
            except IntegrityError as exc:
                logger.error(f"Cascade delete of Patient {id} rejected by the database: {exc.orig}")
                raise CascadeFailure(self.entity, id, str(exc.orig)) from exc
            except CascadeFailure as exc:
                logger.error(str(exc))
                raise
        logger.info(
            f"Deleted Patient {id} with {removed_appointments} appointment(s) and insurance {insurance_id}"
        )


patient = CRUDPatient(Patient)
