# app/system_models/patient_model/patient_model.py
import uuid

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, CheckConstraint
from sqlalchemy.orm import relationship

from app.database.connection import Base
from app.helpers.time import utcnow


def new_id() -> str:
    return uuid.uuid4().hex


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(32), primary_key=True, default=new_id)

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=False, unique=True)
    # one phone number per patient, however it is formatted
    phone_digits = Column(String(20), nullable=False, unique=True, index=True)
    gender = Column(String(10), nullable=False)

    address = Column(String(200), nullable=True)
    age = Column(Integer, nullable=True)
    marital_status = Column(String(50), nullable=True)
    occupation = Column(String(100), nullable=True)
    visit_date = Column(DateTime(timezone=True), nullable=True)
    vaccination = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("gender IN ('male', 'female', 'child')", name="check_gender_values"),
        CheckConstraint("age IS NULL OR (age >= 0 AND age <= 150)", name="check_age_range"),
        Index("ix_patients_name", "first_name", "last_name"),
        Index("ix_patients_visit_date", "visit_date"),
        Index("ix_patients_gender", "gender"),
        Index("ix_patients_age", "age"),
        Index("ix_patients_created_at", "created_at"),
    )

    notes = relationship(
        "PatientNote",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="PatientNote.date.desc()",
        lazy="selectin",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Patient {self.id}: {self.first_name} {self.last_name}>"
