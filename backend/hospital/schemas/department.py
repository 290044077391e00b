from pydantic import BaseModel, Field
from typing import List, Optional

from .doctor import Doctor

class DepartmentBase(BaseModel):
    name: str = Field(..., max_length=100)
    head_doctor_id: int

class DepartmentCreate(DepartmentBase):
    pass

class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    head_doctor_id: Optional[int] = None

class Department(DepartmentBase):
    id: int
    doctors: List[Doctor] = []

    class Config:
        from_attributes = True
