from .appointment import Appointment, AppointmentCreate, AppointmentUpdate
from .department import Department, DepartmentCreate, DepartmentUpdate
from .doctor import Doctor, DoctorCreate, DoctorUpdate
from .insurance import Insurance, InsuranceCreate, InsuranceUpdate
from .page import Page
from .patient import Patient, PatientCreate, PatientUpdate
