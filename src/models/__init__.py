"""Pydantic models for the booking API."""

from models.booking import (  # noqa: F401
    Booking,
    BookingCreated,
    BookingRequest,
    Enrollment,
    Room,
    RoomSummary,
    Ticket,
    TicketStatus,
    TicketType,
)
