"""
Error handler middleware and custom exceptions.

Every error leaves the API as {"error", "correlation_id", "details"}.
Services raise plain domain errors (BookingNotFoundError,
ServiceNotFoundError, UnsupportedStatusTargetError,
BookingStatusTransitionError); they are translated to HTTP here, so routes
do not catch them:

    BookingNotFoundError / ServiceNotFoundError  -> 404
    UnsupportedStatusTargetError                 -> 400
    BookingStatusTransitionError                 -> 409 (details: current, target)
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Type, Union
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from laundry.lib.logging import get_logger
from laundry.services.booking_service import (
    BookingNotFoundError,
    BookingStatusTransitionError,
    UnsupportedStatusTargetError,
)
from laundry.services.catalog_service import ServiceNotFoundError

logger = get_logger(__name__)


# Custom exception classes
class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "resource_id": resource_id},
        )


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details or {},
        )


class ConflictException(AppException):
    """Resource conflict exception."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details or {},
        )


class ValidationException(AppException):
    """Validation error exception."""

    def __init__(self, message: str, errors: Optional[Union[Dict[str, Any], List[Dict[str, Any]]]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"errors": errors or {}},
        )


# Domain error translation
def _booking_not_found(exc: BookingNotFoundError) -> AppException:
    return NotFoundException("Booking", str(exc.booking_id))


def _service_not_found(exc: ServiceNotFoundError) -> AppException:
    return NotFoundException("Service", str(exc.service_id))


def _unsupported_status(exc: UnsupportedStatusTargetError) -> AppException:
    return BadRequestException(str(exc), details={"status": exc.target.value})


def _invalid_transition(exc: BookingStatusTransitionError) -> AppException:
    return ConflictException(
        str(exc),
        details={"current": exc.current.value, "target": exc.target.value},
    )


DOMAIN_ERRORS: Dict[Type[Exception], Callable[[Any], AppException]] = {
    BookingNotFoundError: _booking_not_found,
    ServiceNotFoundError: _service_not_found,
    UnsupportedStatusTargetError: _unsupported_status,
    BookingStatusTransitionError: _invalid_transition,
}


def to_app_exception(exc: Exception) -> AppException:
    """
    Map a domain error to its HTTP exception.

    Raises:
        KeyError: if the error type has no mapping
    """
    for error_type in type(exc).__mro__:
        if error_type in DOMAIN_ERRORS:
            return DOMAIN_ERRORS[error_type](exc)
    raise KeyError(type(exc).__name__)


def _error_response(request: Request, exc: AppException) -> JSONResponse:
    content = {
        "error": exc.message,
        "correlation_id": getattr(request.state, "correlation_id", "unknown"),
    }
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


# Exception handlers
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        log_level,
        f"Application error: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
        },
    )
    return _error_response(request, exc)


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for errors raised by the booking and catalog services."""
    return await app_exception_handler(request, to_app_exception(exc))


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handler for Pydantic validation errors.

    Body, path and query errors are reported as a list of {loc, msg, type}.
    """
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]

    logger.warning(
        "Validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": errors,
        },
    )

    return _error_response(request, ValidationException("Validation error", errors=errors))


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handler for Starlette HTTP exceptions (unknown routes, wrong methods)."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return _error_response(request, AppException(str(exc.detail), status_code=exc.status_code))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for unhandled exceptions.

    Logs full stack trace and returns generic error message.
    """
    logger.error(
        f"Unhandled exception: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=True,
    )
    return _error_response(request, AppException("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    """Install every handler above on the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    for error_type in DOMAIN_ERRORS:
        app.add_exception_handler(error_type, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
