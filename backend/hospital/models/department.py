from sqlalchemy import Column, Integer, String, ForeignKey, Table
from sqlalchemy.orm import relationship

from hospital.db.base_class import Base

# Membership rows disappear with either side.
department_doctors = Table(
    "department_doctors",
    Base.metadata,
    Column("department_id", Integer, ForeignKey("department.id", ondelete="CASCADE"), primary_key=True),
    Column("doctor_id", Integer, ForeignKey("doctor.id", ondelete="CASCADE"), primary_key=True),
)

class Department(Base):
    __tablename__ = "department"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    head_doctor_id = Column(Integer, ForeignKey("doctor.id"), nullable=False)

    head_doctor = relationship("Doctor", foreign_keys=[head_doctor_id])
    doctors = relationship("Doctor", secondary=department_doctors, back_populates="departments", passive_deletes=True)
