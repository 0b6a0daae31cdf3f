# app/helpers/error_handlers.py
"""
API boundary error translation.
Every failure leaves the API as {"error", "message", "details"?, "timestamp"}.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.helpers.exceptions import (
    ClinicError,
    DuplicateEmail,
    DuplicatePhone,
    FieldError,
    InternalError,
)
from app.helpers.time import utcnow

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BadRequest",
    401: "Unauthorized",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
    409: "Conflict",
    429: "TooManyRequests",
}


def error_body(
    code: str,
    message: str,
    details: Optional[List[Dict[str, str]]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": code, "message": message}
    if details:
        body["details"] = details
    body.update(extra)
    body["timestamp"] = utcnow().isoformat()
    return body


def field_errors_from_pydantic(errors: List[Dict[str, Any]]) -> List[FieldError]:
    """Collapse pydantic error locations into one FieldError per field."""
    result: List[FieldError] = []
    seen = set()
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        if field in seen:
            continue
        seen.add(field)
        message = err.get("msg", "Invalid value")
        # "Value error, <message>" is how pydantic wraps ValueError raised by validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        result.append(FieldError(field, message))
    return result


def map_integrity_error(exc: IntegrityError) -> Optional[ClinicError]:
    """Re-map storage duplicate-key failures onto the domain taxonomy."""
    text = str(getattr(exc, "orig", exc)).lower()
    if "phone" in text:
        return DuplicatePhone()
    if "email" in text:
        return DuplicateEmail()
    return None


def _clinic_response(exc: ClinicError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, [d.to_dict() for d in exc.details]),
    )


def _internal_response(request: Request, exc: Exception) -> JSONResponse:
    correlation_id = uuid.uuid4().hex
    logger.error(
        f"❌ Unhandled error on {request.method} {request.url.path} [{correlation_id}]: {exc}",
        exc_info=exc,
    )
    settings = request.app.state.settings
    message = InternalError.default_message if settings.is_production else f"{type(exc).__name__}: {exc}"
    return JSONResponse(
        status_code=500,
        content=error_body(InternalError.code, message, correlationId=correlation_id),
    )


async def clinic_error_handler(request: Request, exc: ClinicError) -> JSONResponse:
    if exc.status_code >= 500:
        return _internal_response(request, exc)
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return _clinic_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = field_errors_from_pydantic(exc.errors())
    return JSONResponse(
        status_code=400,
        content=error_body("ValidationError", "Invalid request data", [d.to_dict() for d in details]),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    mapped = map_integrity_error(exc)
    if mapped is None:
        return _internal_response(request, exc)
    return _clinic_response(mapped)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTPError")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return _internal_response(request, exc)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicError, clinic_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
