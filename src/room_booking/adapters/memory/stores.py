from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterator, List, Optional

from ...domain.entities import Reservation, Room, User
from ...domain.exceptions import (
    ReservationNotFoundError,
    RoomAlreadyExistsError,
    RoomNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from ...domain.ports import ReservationStore, RoomStore, UserStore


class InMemoryUserStore(UserStore):
    """
    Thread-safe dict-backed user store.

    Records are copied in and out, so callers only change stored state
    through `add` / `update`.
    """

    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        with self._lock:
            for user in self._users.values():
                if user.email.lower() == wanted:
                    return replace(user)
        return None

    def get(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user is not None else None

    def list_all(self) -> List[User]:
        with self._lock:
            return [replace(u) for u in self._users.values()]

    def add(self, user: User) -> User:
        with self._lock:
            if any(u.email.lower() == user.email.lower() for u in self._users.values()):
                raise UserAlreadyExistsError(user.email)
            stored = replace(user, id=next(self._ids))
            self._users[stored.id] = stored
            return replace(stored)

    def update(self, user: User) -> User:
        with self._lock:
            if user.id not in self._users:
                raise UserNotFoundError(user.id)
            self._users[user.id] = replace(user)
            return replace(user)

    def delete(self, user_id: int) -> None:
        with self._lock:
            if self._users.pop(user_id, None) is None:
                raise UserNotFoundError(user_id)


class InMemoryRoomStore(RoomStore):
    def __init__(self) -> None:
        self._rooms: Dict[int, Room] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get(self, room_id: int) -> Optional[Room]:
        with self._lock:
            room = self._rooms.get(room_id)
            return replace(room) if room is not None else None

    def find_by_name(self, name: str) -> Optional[Room]:
        with self._lock:
            for room in self._rooms.values():
                if room.name == name:
                    return replace(room)
        return None

    def list_all(self) -> List[Room]:
        with self._lock:
            return [replace(r) for r in self._rooms.values()]

    def add(self, room: Room) -> Room:
        with self._lock:
            if any(r.name == room.name for r in self._rooms.values()):
                raise RoomAlreadyExistsError(room.name)
            stored = replace(room, id=next(self._ids))
            self._rooms[stored.id] = stored
            return replace(stored)

    def update(self, room: Room) -> Room:
        with self._lock:
            if room.id not in self._rooms:
                raise RoomNotFoundError(room.id)
            self._rooms[room.id] = replace(room)
            return replace(room)

    def delete(self, room_id: int) -> None:
        with self._lock:
            if self._rooms.pop(room_id, None) is None:
                raise RoomNotFoundError(room_id)


class InMemoryReservationStore(ReservationStore):
    """
    Dict-backed reservation store.

    `transaction(room_id)` holds a per-room lock for the duration of the
    block, which serializes every check-then-write sequence on that room.
    Data access itself is guarded by a separate store-wide lock.
    """

    def __init__(self) -> None:
        self._reservations: Dict[int, Reservation] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._room_locks: Dict[int, threading.Lock] = {}

    # ------------------------------------------------------------------ #
    # transactional discipline
    # ------------------------------------------------------------------ #

    def _room_lock(self, room_id: int) -> threading.Lock:
        with self._lock:
            return self._room_locks.setdefault(room_id, threading.Lock())

    @contextmanager
    def transaction(self, room_id: int) -> Iterator[None]:
        with self._room_lock(room_id):
            yield

    # ------------------------------------------------------------------ #
    # queries
    # ------------------------------------------------------------------ #

    def find_overlapping(self, room_id: int, start: datetime, end: datetime) -> List[Reservation]:
        with self._lock:
            return [
                replace(r)
                for r in self._reservations.values()
                if r.room_id == room_id and r.start_time < end and r.end_time > start
            ]

    def get(self, reservation_id: int) -> Optional[Reservation]:
        with self._lock:
            reservation = self._reservations.get(reservation_id)
            return replace(reservation) if reservation is not None else None

    def list_all(self) -> List[Reservation]:
        with self._lock:
            return [replace(r) for r in self._reservations.values()]

    def list_for_user(self, user_id: int) -> List[Reservation]:
        with self._lock:
            return [replace(r) for r in self._reservations.values() if r.user_id == user_id]

    # ------------------------------------------------------------------ #
    # commands
    # ------------------------------------------------------------------ #

    def add(self, reservation: Reservation) -> Reservation:
        with self._lock:
            stored = replace(reservation, id=next(self._ids))
            self._reservations[stored.id] = stored
            return replace(stored)

    def update(self, reservation: Reservation) -> Reservation:
        with self._lock:
            if reservation.id not in self._reservations:
                raise ReservationNotFoundError(reservation.id)
            self._reservations[reservation.id] = replace(reservation)
            return replace(reservation)

    def delete(self, reservation_id: int) -> None:
        with self._lock:
            if self._reservations.pop(reservation_id, None) is None:
                raise ReservationNotFoundError(reservation_id)

    def delete_for_user(self, user_id: int) -> int:
        return self._delete_where(lambda r: r.user_id == user_id)

    def delete_for_room(self, room_id: int) -> int:
        return self._delete_where(lambda r: r.room_id == room_id)

    def _delete_where(self, predicate) -> int:
        with self._lock:
            doomed = [rid for rid, r in self._reservations.items() if predicate(r)]
            for rid in doomed:
                del self._reservations[rid]
            return len(doomed)
