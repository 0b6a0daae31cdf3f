# app/system_models/patient_model/patient_validation.py

"""
Patient Field Validation Rules
Pure, stateless checks over primitive values (no database involved).
Each rule returns None when the value passes, or a FieldError naming the
field and the reason, so callers can report every problem at once.
"""
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.helpers.exceptions import FieldError

GENDERS = ("male", "female", "child")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PHONE_MIN_LENGTH = 7
PHONE_MAX_LENGTH = 20
ADDRESS_MIN_LENGTH = 10
ADDRESS_MAX_LENGTH = 200
AGE_MIN = 0
AGE_MAX = 150
MARITAL_STATUS_MAX_LENGTH = 50
OCCUPATION_MAX_LENGTH = 100
NOTE_TITLE_MAX_LENGTH = 100
NOTE_CONTENT_MAX_LENGTH = 1000
MAX_NOTES_PER_PATIENT = 50

# Letters (accented Latin included), spaces and hyphens
NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ \-]+$")
PHONE_PATTERN = re.compile(r"^[0-9\s\-()+]+$")

REQUIRED_FIELDS = ("firstName", "lastName", "phone", "gender")


def _text_length(field: str, label: str, value: Any, min_len: int, max_len: int) -> Optional[FieldError]:
    if not isinstance(value, str):
        return FieldError(field, f"{label} must be a string")
    length = len(value.strip())
    if length < min_len:
        if min_len <= 1:
            return FieldError(field, f"{label} is required")
        return FieldError(field, f"{label} must be at least {min_len} characters")
    if length > max_len:
        return FieldError(field, f"{label} cannot exceed {max_len} characters")
    return None


def check_name(value: Any, field: str = "firstName") -> Optional[FieldError]:
    label = "First name" if field == "firstName" else "Last name"
    error = _text_length(field, label, value, NAME_MIN_LENGTH, NAME_MAX_LENGTH)
    if error:
        return error
    if not NAME_PATTERN.match(value.strip()):
        return FieldError(field, f"{label} contains invalid characters")
    return None


def check_phone(value: Any, field: str = "phone") -> Optional[FieldError]:
    error = _text_length(field, "Phone", value, PHONE_MIN_LENGTH, PHONE_MAX_LENGTH)
    if error:
        return error
    if not PHONE_PATTERN.match(value.strip()):
        return FieldError(field, "Phone number format is invalid")
    return None


def check_address(value: Any, field: str = "address") -> Optional[FieldError]:
    if value is None:
        return None
    return _text_length(field, "Address", value, ADDRESS_MIN_LENGTH, ADDRESS_MAX_LENGTH)


def check_age(value: Any, field: str = "age") -> Optional[FieldError]:
    if value is None:
        return None
    # bool is an int subclass; True is not an age
    if isinstance(value, bool) or not isinstance(value, int):
        return FieldError(field, "Age must be a whole number")
    if value < AGE_MIN:
        return FieldError(field, f"Age must be at least {AGE_MIN}")
    if value > AGE_MAX:
        return FieldError(field, f"Age cannot exceed {AGE_MAX}")
    return None


def check_gender(value: Any, field: str = "gender") -> Optional[FieldError]:
    if value not in GENDERS:
        return FieldError(field, f"Gender must be one of: {', '.join(GENDERS)}")
    return None


def check_marital_status(value: Any, field: str = "maritalStatus") -> Optional[FieldError]:
    if value is None:
        return None
    return _text_length(field, "Marital status", value, 0, MARITAL_STATUS_MAX_LENGTH)


def check_occupation(value: Any, field: str = "occupation") -> Optional[FieldError]:
    if value is None:
        return None
    return _text_length(field, "Occupation", value, 0, OCCUPATION_MAX_LENGTH)


def check_vaccination(value: Any, field: str = "vaccination") -> Optional[FieldError]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        return FieldError(field, "Vaccination must be a list")
    if not all(isinstance(v, str) and v.strip() for v in value):
        return FieldError(field, "All vaccinations must be non-empty strings")
    return None


def check_note_title(value: Any, field: str = "title") -> Optional[FieldError]:
    return _text_length(field, "Note title", value, 1, NOTE_TITLE_MAX_LENGTH)


def check_note_content(value: Any, field: str = "content") -> Optional[FieldError]:
    return _text_length(field, "Note content", value, 1, NOTE_CONTENT_MAX_LENGTH)


FIELD_RULES: Dict[str, Callable[..., Optional[FieldError]]] = {
    "firstName": lambda v: check_name(v, "firstName"),
    "lastName": lambda v: check_name(v, "lastName"),
    "phone": check_phone,
    "gender": check_gender,
    "address": check_address,
    "age": check_age,
    "maritalStatus": check_marital_status,
    "occupation": check_occupation,
    "vaccination": check_vaccination,
}

REQUIRED_MESSAGES = {
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "phone": "Phone number is required",
    "gender": "Gender is required",
}


def validate_note(title: Any, content: Any) -> List[FieldError]:
    return [e for e in (check_note_title(title), check_note_content(content)) if e]


def validate_patient_fields(fields: Mapping[str, Any], partial: bool = False) -> List[FieldError]:
    """
    Check a patient payload keyed by API (camelCase) field names.

    In partial mode only keys present in `fields` are checked; otherwise the
    required fields must be present. Unknown keys are ignored.
    """
    errors: List[FieldError] = []

    for name, rule in FIELD_RULES.items():
        if name not in fields:
            if not partial and name in REQUIRED_FIELDS:
                errors.append(FieldError(name, REQUIRED_MESSAGES[name]))
            continue
        value = fields[name]
        if value is None and name in REQUIRED_FIELDS:
            errors.append(FieldError(name, REQUIRED_MESSAGES[name]))
            continue
        error = rule(value)
        if error:
            errors.append(error)

    return errors
