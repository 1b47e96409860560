from __future__ import annotations

from datetime import datetime
from typing import Any, ContextManager, Iterable, Mapping, Optional, Protocol

from .entities import Reservation, ReservationNotice, Room, User


class Clock(Protocol):
    """Time source. Injected everywhere so expiry can be simulated in tests."""

    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        ...


class TokenCodec(Protocol):
    """
    Port for turning a claims mapping into a compact signed token and back.

    Implementations live in the adapters layer (e.g. the PyJWT codec).
    """

    def encode(self, claims: Mapping[str, Any], key: bytes) -> str:
        ...

    def decode(self, token: str, key: bytes) -> Mapping[str, Any]:
        """
        Verify the signature with `key` and return the raw claims.

        Must not check expiry; the caller compares `exp` against its own clock.
        Raises:
          - InvalidTokenError (reason "malformed" or "bad-signature")
        """
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str:
        ...

    def verify(self, password_hash: str, password: str) -> bool:
        ...


class UserStore(Protocol):
    def find_by_email(self, email: str) -> Optional[User]:
        ...

    def get(self, user_id: int) -> Optional[User]:
        ...

    def list_all(self) -> list[User]:
        ...

    def add(self, user: User) -> User:
        ...

    def update(self, user: User) -> User:
        ...

    def delete(self, user_id: int) -> None:
        ...


class RoomStore(Protocol):
    def get(self, room_id: int) -> Optional[Room]:
        ...

    def find_by_name(self, name: str) -> Optional[Room]:
        ...

    def list_all(self) -> list[Room]:
        ...

    def add(self, room: Room) -> Room:
        ...

    def update(self, room: Room) -> Room:
        ...

    def delete(self, room_id: int) -> None:
        ...


class ReservationStore(Protocol):
    """
    Durable reservation storage.

    `find_overlapping` may return a superset of the truly overlapping rows;
    the conflict checker re-evaluates the half-open rule itself.

    `transaction(room_id)` must make a read-then-write sequence on that room
    serializable with respect to every other reservation write on the same
    room. Create and update run inside it.
    """

    def find_overlapping(self, room_id: int, start: datetime, end: datetime) -> Iterable[Reservation]:
        ...

    def transaction(self, room_id: int) -> ContextManager[None]:
        ...

    def get(self, reservation_id: int) -> Optional[Reservation]:
        ...

    def list_all(self) -> list[Reservation]:
        ...

    def list_for_user(self, user_id: int) -> list[Reservation]:
        ...

    def add(self, reservation: Reservation) -> Reservation:
        ...

    def update(self, reservation: Reservation) -> Reservation:
        ...

    def delete(self, reservation_id: int) -> None:
        ...

    def delete_for_user(self, user_id: int) -> int:
        ...

    def delete_for_room(self, room_id: int) -> int:
        ...


class ReservationNotifier(Protocol):
    """Fire-and-forget dispatch; failures must never undo a booking."""

    def reservation_created(self, notice: ReservationNotice) -> None:
        ...
