# app/system_services/patient_stats.py
import math
from datetime import timedelta
from typing import Dict

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.time import utcnow
from app.system_models.patient_model.patient_model import Patient

RECENT_VISIT_DAYS = 30


def _gender_count(gender: str):
    return func.coalesce(func.sum(case((Patient.gender == gender, 1), else_=0)), 0)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


async def get_patient_stats(db: AsyncSession) -> Dict[str, int]:
    """
    Dashboard counters.
    averageAge only considers patients with a recorded age (AVG skips NULLs).
    """
    row = (
        await db.execute(
            select(
                func.count(Patient.id),
                _gender_count("male"),
                _gender_count("female"),
                _gender_count("child"),
                func.avg(Patient.age),
            )
        )
    ).one()
    total, male, female, children, average_age = row

    since = utcnow() - timedelta(days=RECENT_VISIT_DAYS)
    recent_visits = await db.scalar(
        select(func.count(Patient.id)).where(Patient.visit_date >= since)
    )

    return {
        "total": total or 0,
        "male": int(male or 0),
        "female": int(female or 0),
        "children": int(children or 0),
        "average_age": round_half_up(float(average_age)) if average_age is not None else 0,
        "recent_visits": recent_visits or 0,
    }
