# app/system_models/patient_model/patient_schemas.py
"""
Request/response shapes for the patient endpoints.
Wire format is camelCase; Python attributes are snake_case.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.helpers.time import as_utc
from app.system_models.clinical_note_model.clinical_note_schemas import (
    PatientNoteCreate,
    PatientNoteResponse,
)
from app.system_models.patient_model.patient_validation import (
    FIELD_RULES,
    MAX_NOTES_PER_PATIENT,
)

GENDER = Literal["male", "female", "child"]


def _apply_rule(api_field: str, value: Any) -> Any:
    error = FIELD_RULES[api_field](value)
    if error:
        raise ValueError(error.message)
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _PatientFieldsMixin(_CamelModel):
    """Field-level rules shared by create and update payloads."""

    @field_validator("first_name", "last_name", "phone", "gender", check_fields=False)
    def validate_required_text(cls, v, info):
        if v is None:
            # only reachable on updates; create declares these as required
            raise ValueError(f"{to_camel(info.field_name)} cannot be null")
        return _apply_rule(to_camel(info.field_name), v)

    @field_validator(
        "address", "age", "marital_status", "occupation", "vaccination", check_fields=False
    )
    def validate_optional(cls, v, info):
        return _apply_rule(to_camel(info.field_name), v)


class PatientCreate(_PatientFieldsMixin):
    first_name: str
    last_name: str
    phone: str
    gender: str
    address: Optional[str] = None
    age: Optional[int] = None
    marital_status: Optional[str] = None
    occupation: Optional[str] = None
    visit_date: Optional[datetime] = None
    vaccination: List[str] = Field(default_factory=list)
    notes: List[PatientNoteCreate] = Field(default_factory=list, max_length=MAX_NOTES_PER_PATIENT)


class PatientUpdate(_PatientFieldsMixin):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    age: Optional[int] = None
    marital_status: Optional[str] = None
    occupation: Optional[str] = None
    visit_date: Optional[datetime] = None
    vaccination: Optional[List[str]] = None

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, keyed by API name."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class PatientResponse(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    first_name: str
    last_name: str
    full_name: str
    phone: str
    gender: GENDER
    address: Optional[str] = None
    age: Optional[int] = None
    marital_status: Optional[str] = None
    occupation: Optional[str] = None
    visit_date: Optional[datetime] = None
    vaccination: List[str] = Field(default_factory=list)
    notes: List[PatientNoteResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("visit_date", "created_at", "updated_at")
    def ensure_utc(cls, v):
        return as_utc(v)


class PatientListResponse(_CamelModel):
    patients: List[PatientResponse]
    total: int
    limit: int
    offset: int


class PatientDeleteResponse(_CamelModel):
    message: str
    id: str


class PatientStatsResponse(_CamelModel):
    total: int
    male: int
    female: int
    children: int
    average_age: int
    recent_visits: int
