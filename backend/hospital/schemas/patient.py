from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List

from hospital.models.patient import BloodGroupType
from .appointment import Appointment
from .insurance import Insurance, InsuranceCreate

class PatientBase(BaseModel):
    name: Optional[str] = Field(None, max_length=40)
    birth_date: Optional[date] = None
    email: Optional[str] = Field(None, max_length=255)
    gender: Optional[str] = Field(None, max_length=20)
    blood_group: Optional[BloodGroupType] = None

class PatientCreate(PatientBase):
    name: str = Field(..., max_length=40)
    email: str = Field(..., max_length=255)
    # Created in the same transaction as the patient
    insurance: Optional[InsuranceCreate] = None

class PatientUpdate(PatientBase):
    # Present and null: remove the current insurance. Present: replace it.
    insurance: Optional[InsuranceCreate] = None

class Patient(PatientBase):
    id: int
    created_at: datetime
    insurance: Optional[Insurance] = None
    appointments: List[Appointment] = []

    class Config:
        from_attributes = True
