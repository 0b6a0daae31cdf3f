# app/system_services/create_patient.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.exceptions import DuplicatePhone, FieldError, ValidationError
from app.helpers.time import advance, as_utc, utcnow
from app.system_models.clinical_note_model.clinical_note_model import PatientNote
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import PatientCreate
from app.system_models.patient_model.patient_validation import (
    MAX_NOTES_PER_PATIENT,
    validate_note,
    validate_patient_fields,
)
from app.system_services.get_patient import get_patient, normalize_phone, phone_digits, phone_taken

logger = logging.getLogger(__name__)


def _strip(value):
    return value.strip() if isinstance(value, str) else value


async def create_patient(db: AsyncSession, patient: PatientCreate) -> Patient:
    """Create a new patient (and any initial notes)."""
    fields = patient.model_dump(by_alias=True, exclude={"notes"})
    errors = validate_patient_fields(fields)

    if len(patient.notes) > MAX_NOTES_PER_PATIENT:
        errors.append(FieldError("notes", f"Cannot have more than {MAX_NOTES_PER_PATIENT} notes per patient"))
    for i, note in enumerate(patient.notes):
        for error in validate_note(note.title, note.content):
            errors.append(FieldError(f"notes.{i}.{error.field}", error.message))

    if errors:
        raise ValidationError("Invalid patient data", errors)

    phone = normalize_phone(patient.phone)
    if await phone_taken(db, phone):
        raise DuplicatePhone()

    now = utcnow()
    db_patient = Patient(
        first_name=patient.first_name.strip(),
        last_name=patient.last_name.strip(),
        phone=phone,
        phone_digits=phone_digits(phone),
        gender=patient.gender,
        address=_strip(patient.address),
        age=patient.age,
        marital_status=_strip(patient.marital_status),
        occupation=_strip(patient.occupation),
        visit_date=as_utc(patient.visit_date),
        vaccination=[v.strip() for v in patient.vaccination],
        created_at=now,
        updated_at=now,
    )

    note_date = None
    for note in patient.notes:
        note_date = advance(note_date)
        db_patient.notes.append(
            PatientNote(title=note.title.strip(), content=note.content.strip(), date=note_date)
        )

    db.add(db_patient)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        # Lost a race with a concurrent insert of the same phone
        if "phone" in str(exc.orig).lower():
            raise DuplicatePhone() from exc
        raise

    logger.info(f"Created patient {db_patient.id}")
    return await get_patient(db, db_patient.id)
