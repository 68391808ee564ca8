"""
Handlers for /booking.

GET /booking, POST /booking and PUT /booking/{bookingId}. The API Gateway
authorizer has already verified the caller and put the user id in the
request context.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from models.booking import BookingCreated, BookingRequest
from utils.error_handling import (
    AppError,
    UnauthorizedError,
    ValidationError,
    fault_response,
    ok_response,
    to_response,
)
from utils.logging_config import get_logger
from utils.validators import parse_positive_int

if TYPE_CHECKING:
    from services.booking_service import BookingService

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_booking_service: Optional["BookingService"] = None


def _get_booking_service():
    """Lazy-load BookingService with its repository."""
    global _booking_service
    if _booking_service is None:
        from config.settings import Settings
        from repositories.booking_repo import BookingRepository
        from repositories.postgres_repo import PostgresRepository, create_db_engine
        from services.booking_service import BookingService

        settings = Settings.from_environment()
        repository = BookingRepository(PostgresRepository(create_db_engine(settings)))
        _booking_service = BookingService(
            repository, enforce_single_booking=settings.enforce_single_booking
        )
    return _booking_service


def _user_id(event) -> int:
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    user_id = (authorizer.get("lambda") or {}).get("userId")
    if user_id in (None, ""):
        raise UnauthorizedError()
    return parse_positive_int(user_id, "userId")


def _room_request(event) -> BookingRequest:
    try:
        payload = json.loads(event.get("body") or "{}")
        return BookingRequest.model_validate(payload)
    except (json.JSONDecodeError, PydanticValidationError) as exc:
        raise ValidationError(f"Invalid booking payload: {exc}") from exc


def _handle(action: str, work: Callable[[], Dict]) -> Dict:
    """Run work() and map every outcome to a response."""
    try:
        return ok_response(work())
    except AppError as err:
        logger.info(
            "Booking request rejected",
            extra={"action": action, "error": err.name, "status_code": err.status_code},
        )
        return to_response(err)
    except Exception:
        logger.exception("Booking request failed", extra={"action": action})
        return fault_response()


def get_booking_handler(event, context):
    """Handle GET /booking."""

    def work():
        user_id = _user_id(event)
        service = _get_booking_service()
        service.check_hotel_eligibility(user_id)
        return service.get_booking(user_id).view()

    return _handle("get_booking", work)


def create_booking_handler(event, context):
    """Handle POST /booking."""

    def work():
        user_id = _user_id(event)
        request = _room_request(event)
        booking = _get_booking_service().create_booking(user_id, request.room_id)
        logger.info(
            "Booking reserved",
            extra={"user_id": user_id, "booking_id": booking.id, "room_id": booking.room_id},
        )
        return BookingCreated(id=booking.id).model_dump()

    return _handle("create_booking", work)


def edit_booking_handler(event, context):
    """Handle PUT /booking/{bookingId}."""

    def work():
        user_id = _user_id(event)
        path_params = event.get("pathParameters") or {}
        booking_id = parse_positive_int(path_params.get("bookingId"), "bookingId")
        request = _room_request(event)
        booking = _get_booking_service().edit_booking(user_id, request.room_id, booking_id)
        return BookingCreated(id=booking.id).model_dump()

    return _handle("edit_booking", work)
