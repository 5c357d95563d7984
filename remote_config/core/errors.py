"""
Error taxonomy shared by the handlers and the exception handlers.
"""
from typing import Any, Optional


class AppError(Exception):
    """Base application error. Subclasses pin the HTTP status and error code."""

    status_code: int = 400
    default_code: str = "ERROR"
    default_message: str = "An error occurred"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class Forbidden(AppError):
    status_code = 403
    default_code = "FORBIDDEN"
    default_message = "Forbidden: admin role required"


class NotFound(AppError):
    status_code = 404
    default_code = "NOT_FOUND"
    default_message = "Not Found"


class StoreError(AppError):
    """A store call failed. The message stays generic; the cause is only logged."""

    status_code = 500
    default_code = "STORE_ERROR"
    default_message = "Internal server error"


class HandlerError(AppError):
    status_code = 500
    default_code = "HANDLER_ERROR"
    default_message = "Internal server error"


class StoreConfigurationError(RuntimeError):
    """Raised when the selected store backend is missing required settings."""
