from hospital.crud.base import CRUDBase
from hospital.models.doctor import Doctor

doctor = CRUDBase(Doctor)
