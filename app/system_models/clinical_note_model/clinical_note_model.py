# app/system_models/clinical_note_model/clinical_note_model.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.database.connection import Base
from app.helpers.time import utcnow


class PatientNote(Base):
    __tablename__ = "patient_notes"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    patient_id = Column(
        String(32), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    patient = relationship("Patient", back_populates="notes")

    def __repr__(self):
        return f"<PatientNote {self.id} of {self.patient_id}: {self.title!r}>"
