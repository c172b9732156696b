"""
Error taxonomy for the intake and admin paths, plus the FastAPI handlers
that render every failure as ``{"success": false, "error": ...}``.
"""
from enum import Enum
from typing import Any, Dict, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

INVALID_SUBMISSION = "Invalid submission. Please fill required fields and agree."


class ErrorSeverity(Enum):
    """Error severity levels for log triage."""
    LOW = "low"           # validation errors, bad secrets, expected failures
    MEDIUM = "medium"     # provider rejections, recoverable errors
    HIGH = "high"         # lost records, storage unreachable
    CRITICAL = "critical" # service down


class ClinicError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ClinicError):
    status_code = 400
    default_message = INVALID_SUBMISSION


class ConfigurationError(ClinicError):
    status_code = 500
    default_message = "Server is not configured"


class DeliveryError(ClinicError):
    status_code = 500
    default_message = "Failed to send message"


class PersistenceError(ClinicError):
    status_code = 500
    default_message = "Appointment store unavailable"


class AuthorizationError(ClinicError):
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(ClinicError):
    status_code = 404
    default_message = "Not found"


class RateLimitError(ClinicError):
    status_code = 429
    default_message = "Too many requests, please try again later."


_DEFAULT_SEVERITY = {
    ValidationError: ErrorSeverity.LOW,
    AuthorizationError: ErrorSeverity.LOW,
    NotFoundError: ErrorSeverity.LOW,
    RateLimitError: ErrorSeverity.LOW,
    DeliveryError: ErrorSeverity.MEDIUM,
    ConfigurationError: ErrorSeverity.HIGH,
    PersistenceError: ErrorSeverity.HIGH,
}


def log_error(error: Exception, context: Optional[Dict[str, Any]] = None,
              severity: Optional[ErrorSeverity] = None) -> None:
    """Log an error as a single structured event."""
    context = context or {}
    if severity is None:
        severity = _DEFAULT_SEVERITY.get(type(error), ErrorSeverity.MEDIUM)

    log = logger.warning if severity == ErrorSeverity.LOW else logger.error
    log(
        "error",
        error_type=type(error).__name__,
        error=str(error),
        severity=severity.value,
        **context,
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


async def _clinic_error_handler(request: Request, exc: ClinicError) -> JSONResponse:
    log_error(exc, {"endpoint": request.url.path, "status_code": exc.status_code})
    return error_response(exc.status_code, exc.message)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log_error(ValidationError(), {"endpoint": request.url.path, "fields": len(exc.errors())})
    return error_response(400, INVALID_SUBMISSION)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error(exc, {"endpoint": request.url.path}, ErrorSeverity.CRITICAL)
    return error_response(500, ClinicError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicError, _clinic_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
