from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .value_objects import TimeInterval


class ConfigurationError(RuntimeError):
    """Raised at startup when signing keys or settings are unusable."""
    pass


class AuthenticationError(Exception):
    """Raised when authentication fails."""
    pass


class AuthorizationError(Exception):
    """Raised when the caller lacks the rights for an action."""
    pass


class InvalidTokenError(AuthenticationError):
    """
    Raised when a token is malformed, carries a bad signature or has expired.

    `reason` is one of "malformed", "bad-signature" or "expired". It is meant
    for logging only; the HTTP boundary never echoes it to the client.
    """

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad-signature"
    EXPIRED = "expired"

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or f"Invalid token ({reason})")
        self.reason = reason


class TokenExpiredError(InvalidTokenError):
    """Raised when a correctly signed token is past its `exp`."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(InvalidTokenError.EXPIRED, message)


class UnknownSubjectError(AuthenticationError):
    """Raised when a validly signed token names a user that no longer exists."""

    def __init__(self, subject: str) -> None:
        super().__init__(f"No user found for subject {subject!r}")
        self.subject = subject


class MissingCredentialsError(AuthenticationError):
    """Raised when a request carries no bearer token at all."""

    def __init__(self) -> None:
        super().__init__("Not authenticated")


class BadCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match a stored user."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class ForbiddenError(AuthorizationError):
    """Raised when an authenticated caller may not touch a resource."""

    def __init__(self, message: str = "You are not allowed to perform this action") -> None:
        super().__init__(message)


# --- Booking ---------------------------------------------------------------


class ReservationConflictError(Exception):
    """Raised when a candidate interval overlaps an existing reservation."""

    def __init__(self, conflicting_interval: TimeInterval, room_name: str) -> None:
        super().__init__(
            f"The room '{room_name}' is already reserved from "
            f"{conflicting_interval.start.isoformat()} to {conflicting_interval.end.isoformat()}."
        )
        self.conflicting_interval = conflicting_interval
        self.room_name = room_name


class InvalidReservationIntervalError(ValueError):
    """Raised when a reservation does not start strictly before it ends."""
    pass


class NotFoundError(Exception):
    """Base class for missing users, rooms and reservations."""

    entity = "Entity"

    def __init__(self, key: object) -> None:
        super().__init__(f"{self.entity} not found: {key}")
        self.key = key


class UserNotFoundError(NotFoundError):
    entity = "User"


class RoomNotFoundError(NotFoundError):
    entity = "Room"


class ReservationNotFoundError(NotFoundError):
    entity = "Reservation"


class AlreadyExistsError(Exception):
    """Base class for uniqueness violations (user email, room name)."""

    entity = "Entity"

    def __init__(self, key: object) -> None:
        super().__init__(f"{self.entity} already exists: {key}")
        self.key = key


class UserAlreadyExistsError(AlreadyExistsError):
    entity = "User"


class RoomAlreadyExistsError(AlreadyExistsError):
    entity = "Room"
