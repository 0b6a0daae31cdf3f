# app/system_models/clinical_note_model/clinical_note_schemas.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.helpers.time import as_utc
from app.system_models.patient_model.patient_validation import check_note_content, check_note_title


class PatientNoteCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    content: str

    @field_validator("title")
    def validate_title(cls, v):
        error = check_note_title(v)
        if error:
            raise ValueError(error.message)
        return v.strip()

    @field_validator("content")
    def validate_content(cls, v):
        error = check_note_content(v)
        if error:
            raise ValueError(error.message)
        return v.strip()


class PatientNoteResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    content: str
    date: datetime

    @field_validator("date")
    def ensure_utc(cls, v):
        return as_utc(v)


class PatientNoteList(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    patient_id: str
    notes: List[PatientNoteResponse]
    total: int
