from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from hospital.db.base_class import Base

class Appointment(Base):
    __tablename__ = "appointment"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    appointment_time = Column(DateTime, nullable=False)
    reason = Column(String(500))

    # Non-owning references; the patient removes its appointments on delete.
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctor.id"), nullable=False, index=True)

    patient = relationship("Patient", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")
