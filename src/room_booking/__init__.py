"""
room_booking

Authorization and booking-integrity core for a room-booking backend:
token issuance/validation, ownership-based authorization and
reservation conflict detection, with a thin FastAPI integration.
"""

__version__ = "0.1.0"

from .domain.constants import KeyClass, Role
from .domain.entities import AccessContext, ClaimSet, Reservation, Room, User
from .domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BadCredentialsError,
    ConfigurationError,
    ForbiddenError,
    InvalidReservationIntervalError,
    InvalidTokenError,
    MissingCredentialsError,
    ReservationConflictError,
    TokenExpiredError,
    UnknownSubjectError,
)
from .domain.value_objects import EmailAddress, TimeInterval, TokenPair
from .domain.ports import Clock, ReservationStore, RoomStore, TokenCodec, UserStore

from .application.services.tokens import TokenService
from .application.services.identity import IdentityResolver
from .application.services.conflicts import ReservationConflictChecker
from .application.use_cases.authorize import AuthorizationGuard

from .adapters.jwt.codec import JWTTokenCodec
from .config import AuthSettings, settings_from_env
from .integrations.common.core_factory import BookingCore, create_booking_core

__all__ = [
    "__version__",
    # domain core
    "KeyClass",
    "Role",
    "AccessContext",
    "ClaimSet",
    "Reservation",
    "Room",
    "User",
    "EmailAddress",
    "TimeInterval",
    "TokenPair",
    "Clock",
    "TokenCodec",
    "UserStore",
    "RoomStore",
    "ReservationStore",
    # exceptions
    "AuthenticationError",
    "AuthorizationError",
    "BadCredentialsError",
    "ConfigurationError",
    "ForbiddenError",
    "InvalidReservationIntervalError",
    "InvalidTokenError",
    "MissingCredentialsError",
    "ReservationConflictError",
    "TokenExpiredError",
    "UnknownSubjectError",
    # services
    "TokenService",
    "IdentityResolver",
    "ReservationConflictChecker",
    "AuthorizationGuard",
    # adapters / wiring
    "JWTTokenCodec",
    "AuthSettings",
    "settings_from_env",
    "BookingCore",
    "create_booking_core",
]
