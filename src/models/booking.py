"""Booking domain models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class TicketStatus(str, Enum):
    """Known payment statuses. Stored values outside this set are kept as-is."""

    RESERVED = "RESERVED"
    PAID = "PAID"


class Enrollment(BaseModel):
    """A user's registration for the event."""

    id: int
    user_id: int


class TicketType(BaseModel):
    """Purchasable plan; decides whether a hotel room comes with the ticket."""

    id: int
    name: str
    price: int
    includes_hotel: bool
    is_remote: bool


class Ticket(BaseModel):
    """Ticket with its embedded plan."""

    id: int
    enrollment_id: int
    # Plain str so statuses added upstream (PENDING, ...) still load and are ineligible.
    status: str
    ticket_type: TicketType

    @property
    def grants_hotel(self) -> bool:
        return (
            self.status == TicketStatus.PAID
            and self.ticket_type.includes_hotel
            and not self.ticket_type.is_remote
        )


class Room(BaseModel):
    """Hotel room with a fixed number of beds."""

    id: int
    name: str
    capacity: PositiveInt
    hotel_id: int


class RoomSummary(BaseModel):
    """Room fields embedded in a booking view."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    capacity: int
    hotel_id: int = Field(alias="hotelId")


class Booking(BaseModel):
    """A user's reservation of one room."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    user_id: int
    room_id: int
    room: Optional[RoomSummary] = Field(default=None, alias="Room")

    def view(self) -> dict:
        """Payload returned by GET /booking."""
        return self.model_dump(mode="json", by_alias=True, include={"id", "room"})


class BookingRequest(BaseModel):
    """Body of POST /booking and PUT /booking/{bookingId}."""

    model_config = ConfigDict(populate_by_name=True)

    room_id: int = Field(alias="roomId", strict=True, gt=0)


class BookingCreated(BaseModel):
    """Acknowledgement returned after a booking is created or moved."""

    id: int
