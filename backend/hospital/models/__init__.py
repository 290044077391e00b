from .appointment import Appointment
from .department import Department, department_doctors
from .doctor import Doctor
from .insurance import Insurance
from .patient import BloodGroupType, Patient
