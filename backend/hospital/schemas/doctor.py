from pydantic import BaseModel, Field
from typing import Optional

class DoctorBase(BaseModel):
    name: str = Field(..., max_length=100)
    specialization: Optional[str] = Field(None, max_length=100)
    email: str = Field(..., max_length=100)

class DoctorCreate(DoctorBase):
    pass

class DoctorUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    specialization: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=100)

class Doctor(DoctorBase):
    id: int

    class Config:
        from_attributes = True
