# app/system_services/system_routes.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.system_models.clinical_note_model.clinical_note_schemas import (
    PatientNoteCreate,
    PatientNoteList,
    PatientNoteResponse,
)
from app.system_models.patient_model.patient_schemas import (
    PatientCreate,
    PatientDeleteResponse,
    PatientListResponse,
    PatientResponse,
    PatientStatsResponse,
    PatientUpdate,
)
from app.system_services.create_clinical_note import add_note, list_notes, remove_note
from app.system_services.create_patient import create_patient
from app.system_services.delete_patient import delete_patient
from app.system_services.get_patient import get_patient, get_patient_by_phone
from app.system_services.patient_stats import get_patient_stats
from app.system_services.search_patients import PatientSearchFilter, search_patients
from app.system_services.update_patient import update_patient
from app.users.auth_dependencies import get_current_clinician, get_current_user
from app.users.user_models.user_model import User

router = APIRouter()


@router.get("/stats", response_model=PatientStatsResponse)
async def get_stats_endpoint(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Patient counters for the dashboard."""
    return await get_patient_stats(db)


@router.get("/patients", response_model=PatientListResponse)
async def list_patients_endpoint(
    query: Optional[str] = Query(None, max_length=200),
    gender: Optional[Literal["male", "female", "child"]] = None,
    age_min: Optional[int] = Query(None, alias="ageMin", ge=0, le=150),
    age_max: Optional[int] = Query(None, alias="ageMax", ge=0, le=150),
    limit: int = 10,
    offset: int = 0,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Search patients.

    Example: GET /api/patients?query=Ana&gender=female&ageMin=18&limit=20
    """
    search = PatientSearchFilter(
        query=query, gender=gender, age_min=age_min, age_max=age_max, limit=limit, offset=offset
    )
    patients, total = await search_patients(db, search)
    return PatientListResponse(
        patients=[PatientResponse.model_validate(p) for p in patients],
        total=total,
        limit=search.clamped_limit,
        offset=search.clamped_offset,
    )


@router.get("/patients/search/phone/{phone}", response_model=PatientResponse)
async def get_patient_by_phone_endpoint(
    phone: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Find a patient by phone number (formatting characters ignored)."""
    return await get_patient_by_phone(db, phone)


@router.get("/patients/{patient_id}", response_model=PatientResponse)
async def get_patient_endpoint(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await get_patient(db, patient_id)


@router.post("/patients", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient_endpoint(
    patient: PatientCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a new patient."""
    return await create_patient(db, patient)


@router.put("/patients/{patient_id}", response_model=PatientResponse)
async def update_patient_endpoint(
    patient_id: str,
    patient: PatientUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Partially update a patient; omitted fields are left unchanged."""
    return await update_patient(db, patient_id, patient)


@router.delete("/patients/{patient_id}", response_model=PatientDeleteResponse)
async def delete_patient_endpoint(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_clinician),
):
    """Delete a patient and all of their notes. Admins and doctors only."""
    deleted_id = await delete_patient(db, patient_id)
    return PatientDeleteResponse(message="Patient deleted successfully", id=deleted_id)


@router.get("/patients/{patient_id}/notes", response_model=PatientNoteList)
async def list_notes_endpoint(
    patient_id: str,
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Notes of a patient, most recent first."""
    notes = await list_notes(db, patient_id, limit)
    return PatientNoteList(
        patient_id=patient_id,
        notes=[PatientNoteResponse.model_validate(n) for n in notes],
        total=len(notes),
    )


@router.post("/patients/{patient_id}/notes", response_model=PatientResponse)
async def add_note_endpoint(
    patient_id: str,
    note: PatientNoteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Append a note to a patient's record."""
    return await add_note(db, patient_id, note.title, note.content)


@router.delete("/patients/{patient_id}/notes/{note_id}", response_model=PatientResponse)
async def remove_note_endpoint(
    patient_id: str,
    note_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_clinician),
):
    """Permanently delete a note. Admins and doctors only."""
    return await remove_note(db, patient_id, note_id)
