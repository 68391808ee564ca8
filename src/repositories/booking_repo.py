"""
Booking data access over the platform's relational store.

The tables are owned by the ticketing platform; they are described here
only so SQLAlchemy Core can build queries against them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Connection

from models.booking import Booking, Enrollment, Room, RoomSummary, Ticket, TicketType
from repositories.postgres_repo import PostgresRepository
from utils.logging_config import get_logger

logger = get_logger(__name__)


class BookingMissingError(LookupError):
    """Raised when a booking row vanished between lookup and update."""


metadata = MetaData()

enrollment_table = Table(
    "Enrollment",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("userId", Integer, nullable=False),
)

ticket_type_table = Table(
    "TicketType",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False),
    Column("price", Integer, nullable=False),
    Column("isRemote", Boolean, nullable=False),
    Column("includesHotel", Boolean, nullable=False),
)

ticket_table = Table(
    "Ticket",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("ticketTypeId", Integer, ForeignKey("TicketType.id"), nullable=False),
    Column("enrollmentId", Integer, ForeignKey("Enrollment.id"), nullable=False),
    Column("status", String, nullable=False),
)

room_table = Table(
    "Room",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False),
    Column("capacity", Integer, nullable=False),
    Column("hotelId", Integer, nullable=False),
)

booking_table = Table(
    "Booking",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("userId", Integer, nullable=False),
    Column("roomId", Integer, ForeignKey("Room.id"), nullable=False),
    Column("createdAt", DateTime, nullable=False),
    Column("updatedAt", DateTime, nullable=False),
)


class BookingDataSource(Protocol):
    """Reads and writes the booking service depends on."""

    def find_enrollment_by_user(self, user_id: int) -> Optional[Enrollment]: ...

    def find_ticket_by_enrollment(self, enrollment_id: int) -> Optional[Ticket]: ...

    def find_booking_by_user(self, user_id: int) -> Optional[Booking]: ...

    def find_room_by_id(self, room_id: int) -> Optional[Room]: ...

    def count_bookings_for_room(self, room_id: int) -> int: ...

    def create_booking(self, user_id: int, room_id: int) -> Optional[Booking]: ...

    def update_booking_room(self, booking_id: int, room_id: int) -> Optional[Booking]: ...


def _now() -> datetime:
    # Prisma stores timestamp(3) without time zone, in UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


_booking_columns = (
    booking_table.c.id,
    booking_table.c.userId.label("user_id"),
    booking_table.c.roomId.label("room_id"),
)


class BookingRepository:
    """SQLAlchemy Core implementation of BookingDataSource."""

    def __init__(self, db: PostgresRepository):
        self.db = db

    def find_enrollment_by_user(self, user_id: int) -> Optional[Enrollment]:
        stmt = (
            select(enrollment_table.c.id, enrollment_table.c.userId.label("user_id"))
            .where(enrollment_table.c.userId == user_id)
            .order_by(enrollment_table.c.id)
            .limit(1)
        )
        row = self.db.fetch_one(stmt)
        return Enrollment(**row) if row else None

    def find_ticket_by_enrollment(self, enrollment_id: int) -> Optional[Ticket]:
        stmt = (
            select(
                ticket_table.c.id,
                ticket_table.c.enrollmentId.label("enrollment_id"),
                ticket_table.c.status,
                ticket_type_table.c.id.label("type_id"),
                ticket_type_table.c.name.label("type_name"),
                ticket_type_table.c.price.label("type_price"),
                ticket_type_table.c.includesHotel.label("includes_hotel"),
                ticket_type_table.c.isRemote.label("is_remote"),
            )
            .join(ticket_type_table, ticket_type_table.c.id == ticket_table.c.ticketTypeId)
            .where(ticket_table.c.enrollmentId == enrollment_id)
            .order_by(ticket_table.c.id)
            .limit(1)
        )
        row = self.db.fetch_one(stmt)
        if not row:
            return None
        return Ticket(
            id=row["id"],
            enrollment_id=row["enrollment_id"],
            status=row["status"],
            ticket_type=TicketType(
                id=row["type_id"],
                name=row["type_name"],
                price=row["type_price"],
                includes_hotel=row["includes_hotel"],
                is_remote=row["is_remote"],
            ),
        )

    def find_booking_by_user(self, user_id: int) -> Optional[Booking]:
        """First booking for the user, with the room summary embedded."""
        stmt = (
            select(
                *_booking_columns,
                room_table.c.name.label("room_name"),
                room_table.c.capacity.label("room_capacity"),
                room_table.c.hotelId.label("hotel_id"),
            )
            .join(room_table, room_table.c.id == booking_table.c.roomId)
            .where(booking_table.c.userId == user_id)
            .order_by(booking_table.c.id)
            .limit(1)
        )
        row = self.db.fetch_one(stmt)
        if not row:
            return None
        return Booking(
            id=row["id"],
            user_id=row["user_id"],
            room_id=row["room_id"],
            room=RoomSummary(
                id=row["room_id"],
                name=row["room_name"],
                capacity=row["room_capacity"],
                hotel_id=row["hotel_id"],
            ),
        )

    def find_room_by_id(self, room_id: int) -> Optional[Room]:
        stmt = select(
            room_table.c.id,
            room_table.c.name,
            room_table.c.capacity,
            room_table.c.hotelId.label("hotel_id"),
        ).where(room_table.c.id == room_id)
        row = self.db.fetch_one(stmt)
        return Room(**row) if row else None

    def count_bookings_for_room(self, room_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(booking_table)
            .where(booking_table.c.roomId == room_id)
        )
        return int(self.db.scalar(stmt) or 0)

    def create_booking(self, user_id: int, room_id: int) -> Optional[Booking]:
        """Insert a booking unless the room filled up; returns None if it did."""
        with self.db.transaction() as conn:
            if not self._room_has_space(conn, room_id):
                return None
            now = _now()
            result = conn.execute(
                insert(booking_table).values(
                    userId=user_id, roomId=room_id, createdAt=now, updatedAt=now
                )
            )
            booking_id = result.inserted_primary_key[0]
        logger.info(
            "Booking created",
            extra={"booking_id": booking_id, "user_id": user_id, "room_id": room_id},
        )
        return Booking(id=booking_id, user_id=user_id, room_id=room_id)

    def update_booking_room(self, booking_id: int, room_id: int) -> Optional[Booking]:
        """Move a booking to another room unless it filled up; returns None if it did.

        Raises BookingMissingError when the booking row no longer exists.
        """
        with self.db.transaction() as conn:
            if not self._room_has_space(conn, room_id):
                return None
            result = conn.execute(
                update(booking_table)
                .where(booking_table.c.id == booking_id)
                .values(roomId=room_id, updatedAt=_now())
            )
            if result.rowcount == 0:
                raise BookingMissingError(f"Booking {booking_id} does not exist")
            row = conn.execute(
                select(*_booking_columns).where(booking_table.c.id == booking_id)
            ).fetchone()
        logger.info("Booking moved", extra={"booking_id": booking_id, "room_id": room_id})
        return Booking(**row._mapping)

    def _room_has_space(self, conn: Connection, room_id: int) -> bool:
        # Locking the room row serializes concurrent writes for the same room
        # until the surrounding transaction ends.
        capacity = conn.execute(
            select(room_table.c.capacity)
            .where(room_table.c.id == room_id)
            .with_for_update()
        ).scalar()
        if capacity is None:
            return False
        taken = conn.execute(
            select(func.count())
            .select_from(booking_table)
            .where(booking_table.c.roomId == room_id)
        ).scalar()
        return capacity > taken
