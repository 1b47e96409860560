from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from .constants import KeyClass, Role
from .value_objects import TimeInterval


@dataclass(frozen=True, slots=True)
class ClaimSet:
    """
    Decoded, verified payload of an access or refresh token.

    Refresh tokens carry no role, so `role` is None for them; privilege is
    re-derived from the user store when a refresh token is exchanged.
    """
    subject: str
    issuer: str
    audience: str
    issued_at: datetime
    expires_at: datetime
    key_class: KeyClass = KeyClass.ACCESS
    role: Optional[Role] = None
    token_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(slots=True)
class User:
    """Durable user record. `email` is unique and doubles as the token subject."""
    email: str
    password_hash: str
    role: Role = Role.USER
    name: str = ""
    phone: str = ""
    id: Optional[int] = None


@dataclass(slots=True)
class Room:
    name: str
    capacity: int
    location: str
    description: Optional[str] = None
    id: Optional[int] = None


@dataclass(slots=True)
class Reservation:
    room_id: int
    user_id: int
    start_time: datetime
    end_time: datetime
    id: Optional[int] = None

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start_time, self.end_time)

    def rescheduled(self, interval: TimeInterval) -> "Reservation":
        return replace(self, start_time=interval.start, end_time=interval.end)


@dataclass(slots=True)
class AccessContext:
    """
    Bundles the verified claims with the user record they resolve to.

    Passed explicitly to every operation that needs the caller's identity.
    """
    claims: ClaimSet
    user: User

    # --- Read-only shortcuts -------------------------------------------

    @property
    def email(self) -> str:
        return self.claims.subject

    @property
    def role(self) -> Optional[Role]:
        return self.claims.role

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id


@dataclass(slots=True)
class ReservationNotice:
    """Payload handed to the notifier after a reservation is created."""
    reservation_id: int
    user_email: str
    user_name: str
    room_name: str
    start_time: datetime
    end_time: datetime
