"""
Hotel booking service.

Decides whether an attendee may reserve or move a hotel room. Every check
raises the first failing condition and stops; nothing is retried.
"""

from __future__ import annotations

from models.booking import Booking
from repositories.booking_repo import BookingDataSource, BookingMissingError
from utils.error_handling import ForbiddenError, NotFoundError, PaymentRequiredError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class BookingService:
    """Eligibility, ownership and capacity rules for hotel bookings."""

    def __init__(self, repository: BookingDataSource, enforce_single_booking: bool = False):
        self.repository = repository
        self.enforce_single_booking = enforce_single_booking

    def check_hotel_eligibility(self, user_id: int) -> bool:
        """Require a paid, in-person ticket whose plan includes the hotel."""
        enrollment = self.repository.find_enrollment_by_user(user_id)
        if not enrollment:
            raise NotFoundError("Enrollment not found")

        ticket = self.repository.find_ticket_by_enrollment(enrollment.id)
        if not ticket:
            raise NotFoundError("Ticket not found")

        if not ticket.grants_hotel:
            logger.info(
                "Ticket does not grant a hotel room",
                extra={
                    "user_id": user_id,
                    "ticket_id": ticket.id,
                    "status": ticket.status,
                },
            )
            raise PaymentRequiredError()
        return True

    def get_booking(self, user_id: int) -> Booking:
        """Return the user's booking. Callers check eligibility first."""
        booking = self.repository.find_booking_by_user(user_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def check_room_capacity(self, room_id: int) -> bool:
        """A room is available while its capacity exceeds its booking count."""
        room = self.repository.find_room_by_id(room_id)
        if not room:
            raise NotFoundError("Room not found")

        taken = self.repository.count_bookings_for_room(room_id)
        if room.capacity <= taken:
            logger.info(
                "Room is full",
                extra={"room_id": room_id, "capacity": room.capacity, "taken": taken},
            )
            raise ForbiddenError("Room is full")
        return True

    def create_booking(self, user_id: int, room_id: int) -> Booking:
        """Reserve a room for an eligible user."""
        self.check_hotel_eligibility(user_id)
        if self.enforce_single_booking and self.repository.find_booking_by_user(user_id):
            raise ForbiddenError("User already has a booking")
        self.check_room_capacity(room_id)

        booking = self.repository.create_booking(user_id, room_id)
        if booking is None:
            # Another request took the last bed between the check and the write.
            raise ForbiddenError("Room is full")
        return booking

    def edit_booking(self, user_id: int, room_id: int, booking_id: int) -> Booking:
        """Move the user's own booking to another room."""
        current = self.repository.find_booking_by_user(user_id)
        if not current:
            raise ForbiddenError("You do not have a reservation")
        if current.id != booking_id:
            logger.info(
                "Booking ownership mismatch",
                extra={"user_id": user_id, "booking_id": booking_id},
            )
            raise ForbiddenError("Booking does not belong to user")

        self.check_room_capacity(room_id)

        try:
            booking = self.repository.update_booking_room(current.id, room_id)
        except BookingMissingError as exc:
            raise NotFoundError("Booking not found") from exc
        if booking is None:
            raise ForbiddenError("Room is full")
        return booking
