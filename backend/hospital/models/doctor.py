from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from hospital.db.base_class import Base

class Doctor(Base):
    __tablename__ = "doctor"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    specialization = Column(String(100))
    email = Column(String(100), nullable=False, unique=True)

    appointments = relationship("Appointment", back_populates="doctor", passive_deletes="all")
    departments = relationship("Department", secondary="department_doctors", back_populates="doctors")
