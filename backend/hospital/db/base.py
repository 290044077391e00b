# Imports every model so that Base.metadata knows about all tables before
# create_all() or the integrity-error translation looks them up.
from hospital.db.base_class import Base
from hospital.models.appointment import Appointment
from hospital.models.department import Department, department_doctors
from hospital.models.doctor import Doctor
from hospital.models.insurance import Insurance
from hospital.models.patient import Patient
