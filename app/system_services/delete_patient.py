# app/system_services/delete_patient.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.system_services.get_patient import get_patient

logger = logging.getLogger(__name__)


async def delete_patient(db: AsyncSession, patient_id: str) -> str:
    """Delete a patient; its notes go with it."""
    patient = await get_patient(db, patient_id)
    await db.delete(patient)
    await db.commit()
    logger.info(f"Deleted patient {patient_id} ({len(patient.notes)} notes)")
    return patient_id
