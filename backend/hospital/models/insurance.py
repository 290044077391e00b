from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.orm import relationship

from hospital.db.base_class import Base
from hospital.models.patient import utcnow

class Insurance(Base):
    __tablename__ = "insurance"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    policy_number = Column(String(50), nullable=False, unique=True)
    provider = Column(String(100), nullable=False)
    valid_until = Column(Date, nullable=False)

    # Assigned on insert, never updated
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Inverse side: read-only view of the patient that points at this row.
    patient = relationship("Patient", uselist=False, viewonly=True)
