# app/system_services/get_patient.py
import re
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.exceptions import NotFound
from app.system_models.patient_model.patient_model import Patient


def normalize_phone(phone: str) -> str:
    """Trim and collapse inner whitespace runs to a single space."""
    return re.sub(r"\s+", " ", phone).strip()


def phone_digits(phone: str) -> str:
    return re.sub(r"\D", "", phone)


async def load_patient(db: AsyncSession, patient_id: str) -> Optional[Patient]:
    """Fetch a patient with its notes freshly loaded (most recent first)."""
    result = await db.execute(
        select(Patient)
        .where(Patient.id == patient_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_patient(db: AsyncSession, patient_id: str) -> Patient:
    """Get a patient by id or raise NotFound."""
    patient = await load_patient(db, patient_id)
    if not patient:
        raise NotFound("Patient not found")
    return patient


async def get_patient_by_phone(db: AsyncSession, phone: str) -> Patient:
    """Look a patient up by phone, ignoring formatting characters."""
    digits = phone_digits(phone)
    if not digits:
        raise NotFound("Patient not found with this phone number")

    result = await db.execute(select(Patient).where(Patient.phone_digits == digits))
    patient = result.scalars().first()
    if not patient:
        raise NotFound("Patient not found with this phone number")
    return patient


async def phone_taken(db: AsyncSession, phone: str, exclude_id: Optional[str] = None) -> bool:
    """True when another patient already has this number (formatting ignored)."""
    query = select(Patient.id).where(Patient.phone_digits == phone_digits(phone))
    if exclude_id:
        query = query.where(Patient.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None
