# app/system_services/update_patient.py
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.exceptions import DuplicatePhone, ValidationError
from app.helpers.time import advance, as_utc
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import PatientUpdate
from app.system_models.patient_model.patient_validation import validate_patient_fields
from app.system_services.get_patient import get_patient, normalize_phone, phone_digits, phone_taken

logger = logging.getLogger(__name__)

# API field name -> column attribute
UPDATABLE_FIELDS: Dict[str, str] = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "gender": "gender",
    "address": "address",
    "age": "age",
    "maritalStatus": "marital_status",
    "occupation": "occupation",
    "visitDate": "visit_date",
    "vaccination": "vaccination",
}


def _clean(name: str, value: Any) -> Any:
    if name == "phone":
        return normalize_phone(value)
    if name == "visitDate":
        return as_utc(value)
    if name == "vaccination":
        return [v.strip() for v in value] if value else []
    if isinstance(value, str):
        return value.strip()
    return value


async def update_patient(db: AsyncSession, patient_id: str, update: PatientUpdate) -> Patient:
    """
    Apply a partial update.
    Only the fields present in the payload are validated and written;
    everything else (notes included) is left exactly as it was.
    """
    changes = {k: v for k, v in update.changes().items() if k in UPDATABLE_FIELDS}

    errors = validate_patient_fields(changes, partial=True)
    if errors:
        raise ValidationError("Invalid patient data", errors)

    patient = await get_patient(db, patient_id)

    if "phone" in changes:
        changes["phone"] = normalize_phone(changes["phone"])
        if await phone_taken(db, changes["phone"], exclude_id=patient.id):
            raise DuplicatePhone()

    for name, value in changes.items():
        setattr(patient, UPDATABLE_FIELDS[name], _clean(name, value))
    if "phone" in changes:
        patient.phone_digits = phone_digits(patient.phone)

    patient.updated_at = advance(patient.updated_at)

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if "phone" in str(exc.orig).lower():
            raise DuplicatePhone() from exc
        raise

    logger.info(f"Updated patient {patient_id}: {', '.join(sorted(changes)) or 'no fields'}")
    return await get_patient(db, patient_id)
