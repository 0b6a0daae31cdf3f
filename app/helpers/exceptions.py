# app/helpers/exceptions.py
"""
Domain error taxonomy.
Services raise these; app/helpers/error_handlers.py turns them into JSON.
"""
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class ClinicError(Exception):
    code = "InternalError"
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[List[FieldError]] = None):
        self.message = message or self.default_message
        self.details = list(details or [])
        super().__init__(self.message)


class ValidationError(ClinicError):
    code = "ValidationError"
    status_code = 400
    default_message = "Invalid data"

    @property
    def fields(self) -> List[str]:
        return [d.field for d in self.details]


class DuplicatePhone(ClinicError):
    code = "DuplicatePhone"
    status_code = 409
    default_message = "A patient with this phone number already exists"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, [FieldError("phone", "Phone number is already registered")])


class DuplicateEmail(ClinicError):
    code = "DuplicateEmail"
    status_code = 409
    default_message = "User with this email already exists"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, [FieldError("email", "Email is already registered")])


class NotFound(ClinicError):
    code = "NotFound"
    status_code = 404
    default_message = "Resource not found"


class InvalidCredentials(ClinicError):
    code = "InvalidCredentials"
    status_code = 401
    default_message = "Incorrect email or password"


class Unauthorized(ClinicError):
    code = "Unauthorized"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(ClinicError):
    code = "Forbidden"
    status_code = 403
    default_message = "Insufficient permissions"


class TooManyNotes(ClinicError):
    code = "TooManyNotes"
    status_code = 409
    default_message = "Cannot have more than 50 notes per patient"


class InternalError(ClinicError):
    pass
