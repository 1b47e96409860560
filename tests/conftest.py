# tests/conftest.py
import base64
from datetime import datetime, timedelta, timezone

import pytest
from argon2 import PasswordHasher

from room_booking.adapters.jwt.codec import JWTTokenCodec
from room_booking.adapters.memory.stores import (
    InMemoryReservationStore,
    InMemoryRoomStore,
    InMemoryUserStore,
)
from room_booking.adapters.security.argon2_hasher import Argon2PasswordHasher
from room_booking.application.services.tokens import TokenService
from room_booking.config import AuthSettings
from room_booking.domain.constants import Role
from room_booking.integrations.common.core_factory import create_booking_core

T0 = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

ACCESS_KEY = b"access-signing-key-used-only-in-tests!!"
REFRESH_KEY = b"refresh-signing-key-used-only-in-tests!"

PASSWORD = "s3cret-pass"


def at(hour: int, minute: int = 0) -> datetime:
    """2025-01-01 at the given UTC wall time."""
    return datetime(2025, 1, 1, hour, minute, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices = []

    def reservation_created(self, notice) -> None:
        self.notices.append(notice)


@pytest.fixture
def clock():
    return FrozenClock(T0)


@pytest.fixture
def settings():
    return AuthSettings(
        secret=base64.b64encode(ACCESS_KEY).decode(),
        refresh_secret=base64.b64encode(REFRESH_KEY).decode(),
        issuer="room-booking",
        audience="room-booking-clients",
        expiration_ms=15 * 60 * 1000,
        refresh_expiration_ms=7 * 24 * 60 * 60 * 1000,
    )


@pytest.fixture
def token_service(settings, clock):
    return TokenService.from_settings(settings, codec=JWTTokenCodec(), clock=clock)


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def room_store():
    return InMemoryRoomStore()


@pytest.fixture
def reservation_store():
    return InMemoryReservationStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def password_hasher():
    # cheap parameters, the tests only care about correctness
    return Argon2PasswordHasher(PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


@pytest.fixture
def core(settings, clock, user_store, room_store, reservation_store, password_hasher, notifier):
    return create_booking_core(
        settings,
        user_store=user_store,
        room_store=room_store,
        reservation_store=reservation_store,
        clock=clock,
        password_hasher=password_hasher,
        notifier=notifier,
    )


def register(core, email: str, role: Role = Role.USER):
    return core.register_use_case.execute(email=email, password=PASSWORD, name=email.split("@")[0], role=role)


def login_context(core, email: str):
    pair = core.login(email, PASSWORD)
    return core.authenticate(pair.access_token)


@pytest.fixture
def alice(core):
    register(core, "alice@example.com")
    return login_context(core, "alice@example.com")


@pytest.fixture
def bob(core):
    register(core, "bob@example.com")
    return login_context(core, "bob@example.com")


@pytest.fixture
def admin(core):
    register(core, "admin@example.com", role=Role.ADMIN)
    return login_context(core, "admin@example.com")


@pytest.fixture
def room(core, admin):
    return core.rooms.create(admin, name="Room 1", capacity=8, location="First floor")
