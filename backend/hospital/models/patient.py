import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Date, DateTime, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from hospital.db.base_class import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BloodGroupType(enum.Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"


class Patient(Base):
    __tablename__ = "patient"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(40), nullable=False)
    birth_date = Column(Date)
    email = Column(String(255), nullable=False)
    gender = Column(String(20))
    blood_group = Column(Enum(BloodGroupType, name="blood_group_type"))

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Owning side of the one-to-one: the foreign key lives on the patient row.
    insurance_id = Column("patient_insurance_id", Integer, ForeignKey("insurance.id"))

    __table_args__ = (
        UniqueConstraint("name", "birth_date", name="unique_patient_name_birthdate"),
        UniqueConstraint("email", name="unique_patient_email"),
        UniqueConstraint("patient_insurance_id", name="unique_patient_insurance"),
        # Birth-date range lookups
        Index("idx_patient_birth_date", "birth_date"),
        {"sqlite_autoincrement": True},
    )

    # --- Relationships ---
    # Only save-update/merge cascade here: deleting a patient, and removing an
    # insurance it no longer points at, is done explicitly by crud_patient.
    insurance = relationship("Insurance", cascade="save-update, merge")
    appointments = relationship(
        "Appointment",
        back_populates="patient",
        cascade="save-update, merge",
        order_by="Appointment.appointment_time",
        passive_deletes="all",
    )
