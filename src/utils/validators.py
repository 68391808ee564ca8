"""Lightweight validation helpers for path and context parameters."""

from typing import Any

from utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is falsy."""
    if value in (None, "", []):
        raise ValidationError(f"{field} is required")


def parse_positive_int(value: Any, field: str) -> int:
    """Parse a path parameter such as bookingId into a positive integer."""
    ensure_present(value, field)
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be an integer") from None
    if parsed <= 0:
        raise ValidationError(f"{field} must be positive")
    return parsed
