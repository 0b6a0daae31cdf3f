# app/system_services/create_clinical_note.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.exceptions import NotFound, TooManyNotes, ValidationError
from app.helpers.time import advance
from app.system_models.clinical_note_model.clinical_note_model import PatientNote
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_validation import MAX_NOTES_PER_PATIENT, validate_note
from app.system_services.get_patient import get_patient

logger = logging.getLogger(__name__)


async def add_note(db: AsyncSession, patient_id: str, title: str, content: str) -> Patient:
    """Append a note to a patient's record."""
    errors = validate_note(title, content)
    if errors:
        raise ValidationError("Invalid note data", errors)

    patient = await get_patient(db, patient_id)
    if len(patient.notes) >= MAX_NOTES_PER_PATIENT:
        raise TooManyNotes(f"Cannot have more than {MAX_NOTES_PER_PATIENT} notes per patient")

    # notes are loaded newest first
    latest = patient.notes[0].date if patient.notes else None
    note = PatientNote(patient_id=patient.id, title=title.strip(), content=content.strip(), date=advance(latest))
    patient.notes.append(note)
    patient.updated_at = advance(patient.updated_at)

    await db.commit()
    logger.info(f"Added note {note.id} to patient {patient_id} ({len(patient.notes)}/{MAX_NOTES_PER_PATIENT})")
    return await get_patient(db, patient_id)


async def remove_note(db: AsyncSession, patient_id: str, note_id: str) -> Patient:
    """Permanently delete one note from a patient's record."""
    patient = await get_patient(db, patient_id)

    note = next((n for n in patient.notes if n.id == note_id), None)
    if note is None:
        raise NotFound("Note not found")

    patient.notes.remove(note)
    patient.updated_at = advance(patient.updated_at)

    await db.commit()
    logger.info(f"Removed note {note_id} from patient {patient_id}")
    return await get_patient(db, patient_id)


async def list_notes(db: AsyncSession, patient_id: str, limit: Optional[int] = None) -> List[PatientNote]:
    """Notes of a patient, most recent first."""
    patient = await get_patient(db, patient_id)
    notes = list(patient.notes)
    if limit is not None:
        notes = notes[: max(0, limit)]
    return notes
