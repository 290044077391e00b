import logging
from sqlalchemy.orm import Session, selectinload

from hospital.core.exceptions import NotFound
from hospital.crud.base import CRUDBase
from hospital.crud.crud_doctor import doctor
from hospital.db.transaction import atomic
from hospital.models.department import Department
from hospital.schemas.department import DepartmentCreate, DepartmentUpdate

logger = logging.getLogger(__name__)


class CRUDDepartment(CRUDBase[Department, DepartmentCreate, DepartmentUpdate]):
    def _load_options(self):
        return (selectinload(Department.doctors),)

    def add_doctor(self, db: Session, department_id: int, doctor_id: int) -> Department:
        """
        Adds a doctor to the department's members. Adding an existing member is a no-op.
        """
        with atomic(db):
            db_department = self.get(db, department_id)
            db_doctor = doctor.get(db, doctor_id)
            if db_doctor not in db_department.doctors:
                db_department.doctors.append(db_doctor)
                logger.info(f"Doctor {doctor_id} joined department {department_id}")
        return self.get(db, department_id)

    def remove_doctor(self, db: Session, department_id: int, doctor_id: int) -> Department:
        with atomic(db):
            db_department = self.get(db, department_id)
            member = next((d for d in db_department.doctors if d.id == doctor_id), None)
            if member is None:
                raise NotFound(f"Doctor in department {department_id}", doctor_id)
            db_department.doctors.remove(member)
            logger.info(f"Doctor {doctor_id} left department {department_id}")
        return self.get(db, department_id)


department = CRUDDepartment(Department)
