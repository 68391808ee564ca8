"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict


class AppError(Exception):
    """Base class for expected business outcomes."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code

    @property
    def name(self) -> str:
        return type(self).__name__


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class PaymentRequiredError(AppError):
    """Raised when the ticket does not entitle the user to a hotel room."""

    def __init__(self, message: str = "Your ticket is not paid or does not include hotel"):
        super().__init__(message, status_code=402)


class ForbiddenError(AppError):
    """Raised when the room is full or the booking belongs to someone else."""

    def __init__(self, message: str = "Room is full or you do not have a reservation"):
        super().__init__(message, status_code=403)


class UnauthorizedError(AppError):
    """Raised when the authorizer did not attach a user to the request."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=400)


def _json_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    return _json_response(
        error.status_code,
        {"name": error.name, "message": str(error), "status": "error"},
    )


def fault_response() -> Dict[str, Any]:
    """Generic 500 for anything outside the AppError hierarchy."""
    return _json_response(
        500,
        {"name": "InternalServerError", "message": "Internal server error", "status": "error"},
    )


def ok_response(body: Dict[str, Any]) -> Dict[str, Any]:
    """Successful JSON response."""
    return _json_response(200, body)
