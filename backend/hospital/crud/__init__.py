from .base import CRUDBase, Page
from .crud_appointment import appointment
from .crud_department import department
from .crud_doctor import doctor
from .crud_insurance import insurance
from .crud_patient import patient
