from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

class AppointmentBase(BaseModel):
    appointment_time: datetime
    reason: Optional[str] = Field(None, max_length=500)

class AppointmentCreate(AppointmentBase):
    patient_id: int
    doctor_id: int

# patient_id is deliberately absent: an appointment never changes owner.
class AppointmentUpdate(BaseModel):
    appointment_time: Optional[datetime] = None
    reason: Optional[str] = Field(None, max_length=500)
    doctor_id: Optional[int] = None

class Appointment(AppointmentBase):
    id: int
    patient_id: int
    doctor_id: int

    class Config:
        from_attributes = True
