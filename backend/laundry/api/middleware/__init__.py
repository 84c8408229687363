"""
API middleware module.
"""
from laundry.api.middleware.error_handler import (
    AppException,
    NotFoundException,
    BadRequestException,
    ConflictException,
    ValidationException,
    DOMAIN_ERRORS,
    to_app_exception,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "NotFoundException",
    "BadRequestException",
    "ConflictException",
    "ValidationException",
    "DOMAIN_ERRORS",
    "to_app_exception",
    "register_exception_handlers",
]
