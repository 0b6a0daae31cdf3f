# app/system_services/search_patients.py
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.system_models.patient_model.patient_model import Patient

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

SEARCHABLE_COLUMNS = (Patient.first_name, Patient.last_name, Patient.phone, Patient.address)


@dataclass
class PatientSearchFilter:
    query: Optional[str] = None
    gender: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @property
    def clamped_limit(self) -> int:
        if self.limit is None:
            return DEFAULT_LIMIT
        return max(1, min(self.limit, MAX_LIMIT))

    @property
    def clamped_offset(self) -> int:
        return max(0, self.offset or 0)

    @property
    def tokens(self) -> List[str]:
        return (self.query or "").split()


def _escape_like(token: str) -> str:
    return token.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_conditions(search: PatientSearchFilter) -> list:
    """Translate a filter into a list of SQL conditions (implicitly ANDed)."""
    conditions = []

    # Every token has to show up in at least one of the searchable columns
    for token in search.tokens:
        pattern = f"%{_escape_like(token)}%"
        conditions.append(or_(*(col.ilike(pattern, escape="\\") for col in SEARCHABLE_COLUMNS)))

    if search.gender:
        conditions.append(Patient.gender == search.gender)
    if search.age_min is not None:
        conditions.append(Patient.age >= search.age_min)
    if search.age_max is not None:
        conditions.append(Patient.age <= search.age_max)

    return conditions


async def search_patients(db: AsyncSession, search: PatientSearchFilter) -> Tuple[List[Patient], int]:
    """
    Page through patients matching the filter.
    Newest first; ties on creation time fall back to id so pages stay stable.
    """
    conditions = build_conditions(search)

    total = await db.scalar(select(func.count()).select_from(Patient).where(*conditions))

    result = await db.execute(
        select(Patient)
        .where(*conditions)
        .order_by(Patient.created_at.desc(), Patient.id.asc())
        .offset(search.clamped_offset)
        .limit(search.clamped_limit)
    )
    return list(result.scalars().all()), total or 0
