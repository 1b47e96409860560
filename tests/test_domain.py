# tests/test_domain.py
from datetime import datetime, timedelta, timezone

import pytest

from room_booking.domain.constants import KeyClass, Role
from room_booking.domain.entities import ClaimSet, Reservation
from room_booking.domain.exceptions import (
    AuthenticationError,
    InvalidReservationIntervalError,
    InvalidTokenError,
    ReservationConflictError,
    TokenExpiredError,
    UnknownSubjectError,
)
from room_booking.domain.value_objects import EmailAddress, TimeInterval

from conftest import at


def test_email_value_object():
    email = EmailAddress("  Alice@Example.com ")
    assert str(email) == "alice@example.com"

    with pytest.raises(ValueError):
        EmailAddress("invalid-email")


def test_time_interval_requires_start_before_end():
    with pytest.raises(InvalidReservationIntervalError):
        TimeInterval(at(11), at(10))

    with pytest.raises(InvalidReservationIntervalError):
        TimeInterval(at(10), at(10))


def test_time_interval_treats_naive_as_utc():
    naive = TimeInterval(datetime(2025, 1, 1, 10), datetime(2025, 1, 1, 11))
    assert naive == TimeInterval(at(10), at(11))

    plus_two = timezone(timedelta(hours=2))
    shifted = TimeInterval(datetime(2025, 1, 1, 12, tzinfo=plus_two), datetime(2025, 1, 1, 13, tzinfo=plus_two))
    assert shifted.start == at(10)
    assert shifted.end == at(11)


def test_time_interval_overlap_is_half_open():
    existing = TimeInterval(at(10), at(11))

    assert existing.overlaps(TimeInterval(at(10, 30), at(11, 30)))
    assert existing.overlaps(TimeInterval(at(9), at(12)))
    assert existing.overlaps(TimeInterval(at(10, 15), at(10, 45)))

    # touching boundaries do not overlap
    assert not existing.overlaps(TimeInterval(at(11), at(12)))
    assert not existing.overlaps(TimeInterval(at(9), at(10)))


def test_reservation_interval_and_reschedule():
    reservation = Reservation(room_id=1, user_id=2, start_time=at(10), end_time=at(11), id=5)
    moved = reservation.rescheduled(TimeInterval(at(12), at(13)))

    assert reservation.interval == TimeInterval(at(10), at(11))
    assert moved.id == 5
    assert moved.start_time == at(12)
    assert moved.end_time == at(13)


def test_claim_set_admin_shortcut():
    base = dict(subject="a@example.com", issuer="i", audience="a", issued_at=at(9), expires_at=at(10))

    assert ClaimSet(role=Role.ADMIN, **base).is_admin
    assert not ClaimSet(role=Role.USER, **base).is_admin
    assert not ClaimSet(key_class=KeyClass.REFRESH, **base).is_admin


def test_error_family():
    expired = TokenExpiredError()
    assert isinstance(expired, InvalidTokenError)
    assert isinstance(expired, AuthenticationError)
    assert expired.reason == "expired"

    assert isinstance(UnknownSubjectError("gone@example.com"), AuthenticationError)

    conflict = ReservationConflictError(TimeInterval(at(10), at(11)), "Room 1")
    assert conflict.room_name == "Room 1"
    assert "Room 1" in str(conflict)
    assert "2025-01-01T10:00:00+00:00" in str(conflict)
