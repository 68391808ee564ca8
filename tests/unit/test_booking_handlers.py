"""
Tests for the /booking Lambda handlers.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from handlers import booking as booking_handler
from models.booking import Booking, RoomSummary
from utils.error_handling import ForbiddenError, NotFoundError, PaymentRequiredError


def _event(user_id="7", body=None, booking_id=None):
    event = {
        "requestContext": {"authorizer": {"lambda": {"userId": user_id}}},
        "body": json.dumps(body) if body is not None else None,
        "pathParameters": {"bookingId": booking_id} if booking_id is not None else None,
    }
    return event


@pytest.fixture
def service():
    mock_service = MagicMock()
    with patch.object(booking_handler, "_get_booking_service", return_value=mock_service):
        yield mock_service


class TestGetBooking:
    """GET /booking."""

    def test_happy_path(self, service):
        service.get_booking.return_value = Booking(
            id=5,
            user_id=7,
            room_id=3,
            room=RoomSummary(id=3, name="101", capacity=2, hotel_id=1),
        )
        resp = booking_handler.get_booking_handler(_event(), None)
        assert resp["statusCode"] == 200
        body = json.loads(resp["body"])
        assert body == {"id": 5, "Room": {"id": 3, "name": "101", "capacity": 2, "hotelId": 1}}
        service.check_hotel_eligibility.assert_called_once_with(7)

    def test_no_enrollment_returns_404(self, service):
        service.check_hotel_eligibility.side_effect = NotFoundError()
        resp = booking_handler.get_booking_handler(_event(), None)
        assert resp["statusCode"] == 404
        service.get_booking.assert_not_called()

    def test_unpaid_ticket_returns_402(self, service):
        service.check_hotel_eligibility.side_effect = PaymentRequiredError()
        resp = booking_handler.get_booking_handler(_event(), None)
        assert resp["statusCode"] == 402
        assert json.loads(resp["body"])["name"] == "PaymentRequiredError"

    def test_missing_user_returns_401(self, service):
        resp = booking_handler.get_booking_handler({"requestContext": {}}, None)
        assert resp["statusCode"] == 401


class TestCreateBooking:
    """POST /booking."""

    def test_happy_path(self, service):
        service.create_booking.return_value = Booking(id=42, user_id=7, room_id=3)
        resp = booking_handler.create_booking_handler(_event(body={"roomId": 3}), None)
        assert resp["statusCode"] == 200
        assert json.loads(resp["body"]) == {"id": 42}
        service.create_booking.assert_called_once_with(7, 3)

    def test_full_room_returns_403(self, service):
        service.create_booking.side_effect = ForbiddenError("Room is full")
        resp = booking_handler.create_booking_handler(_event(body={"roomId": 3}), None)
        assert resp["statusCode"] == 403

    @pytest.mark.parametrize(
        "body",
        [{}, {"roomId": 0}, {"roomId": -4}, {"roomId": "abc"}, {"roomId": True}, {"roomId": 2.0}],
    )
    def test_invalid_body_returns_400(self, service, body):
        resp = booking_handler.create_booking_handler(_event(body=body), None)
        assert resp["statusCode"] == 400
        service.create_booking.assert_not_called()

    def test_malformed_json_returns_400(self, service):
        event = _event()
        event["body"] = "{not json"
        resp = booking_handler.create_booking_handler(event, None)
        assert resp["statusCode"] == 400

    def test_unexpected_error_returns_500(self, service):
        service.create_booking.side_effect = RuntimeError("connection refused")
        resp = booking_handler.create_booking_handler(_event(body={"roomId": 3}), None)
        assert resp["statusCode"] == 500
        assert "connection refused" not in resp["body"]


class TestEditBooking:
    """PUT /booking/{bookingId}."""

    def test_happy_path(self, service):
        service.edit_booking.return_value = Booking(id=5, user_id=7, room_id=4)
        resp = booking_handler.edit_booking_handler(
            _event(body={"roomId": 4}, booking_id="5"), None
        )
        assert resp["statusCode"] == 200
        assert json.loads(resp["body"]) == {"id": 5}
        service.edit_booking.assert_called_once_with(7, 4, 5)

    def test_other_users_booking_returns_403(self, service):
        service.edit_booking.side_effect = ForbiddenError()
        resp = booking_handler.edit_booking_handler(
            _event(body={"roomId": 4}, booking_id="5"), None
        )
        assert resp["statusCode"] == 403

    def test_unknown_room_returns_404(self, service):
        service.edit_booking.side_effect = NotFoundError()
        resp = booking_handler.edit_booking_handler(
            _event(body={"roomId": 4}, booking_id="5"), None
        )
        assert resp["statusCode"] == 404

    @pytest.mark.parametrize("booking_id", ["abc", "0", "-1", ""])
    def test_invalid_booking_id_returns_400(self, service, booking_id):
        resp = booking_handler.edit_booking_handler(
            _event(body={"roomId": 4}, booking_id=booking_id), None
        )
        assert resp["statusCode"] == 400
        service.edit_booking.assert_not_called()


def test_service_built_from_settings(monkeypatch):
    """The lazy getter wires settings, engine, repository and service together."""
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("ENFORCE_SINGLE_BOOKING", "true")
    monkeypatch.setattr(booking_handler, "_booking_service", None)

    service = booking_handler._get_booking_service()

    assert service.enforce_single_booking is True
    assert booking_handler._get_booking_service() is service


def test_pending_ticket_returns_402(monkeypatch, engine):
    """A stored status the model does not enumerate is ineligible, not a fault."""
    from sqlalchemy import insert

    from repositories.booking_repo import (
        BookingRepository,
        enrollment_table,
        room_table,
        ticket_table,
        ticket_type_table,
    )
    from repositories.postgres_repo import PostgresRepository
    from services.booking_service import BookingService

    with engine.begin() as conn:
        conn.execute(insert(enrollment_table).values(id=1, userId=7))
        conn.execute(
            insert(ticket_type_table).values(
                id=1, name="Presencial + Hotel", price=600, isRemote=False, includesHotel=True
            )
        )
        conn.execute(
            insert(ticket_table).values(id=1, ticketTypeId=1, enrollmentId=1, status="PENDING")
        )
        conn.execute(insert(room_table).values(id=3, name="101", capacity=2, hotelId=1))

    service = BookingService(BookingRepository(PostgresRepository(engine)))
    monkeypatch.setattr(booking_handler, "_booking_service", service)

    resp = booking_handler.create_booking_handler(_event(body={"roomId": 3}), None)

    assert resp["statusCode"] == 402
