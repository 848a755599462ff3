"""Typed failures raised by the service layer.

Services never build HTTP responses; they raise one of these and the handlers
registered in ``main.py`` turn them into status codes.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for every expected application failure."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message}


class ValidationError(AppError):
    """Malformed or inconsistent input the caller can correct."""

    status_code = 400
    default_message = "Validation error"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class Unauthorized(AppError):
    """Missing, invalid or expired credential. The message stays generic."""

    status_code = 401
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    """Uniqueness violation on ``field``."""

    status_code = 409
    default_message = "Already exists"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class Fatal(AppError):
    """Persistence or consistency failure. Logged; the caller sees an opaque message."""

    status_code = 500

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.default_message}
