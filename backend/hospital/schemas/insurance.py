from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional

class InsuranceBase(BaseModel):
    policy_number: str = Field(..., max_length=50)
    provider: str = Field(..., max_length=100)
    valid_until: date

class InsuranceCreate(InsuranceBase):
    pass

class InsuranceUpdate(BaseModel):
    policy_number: Optional[str] = Field(None, max_length=50)
    provider: Optional[str] = Field(None, max_length=100)
    valid_until: Optional[date] = None

class Insurance(InsuranceBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
