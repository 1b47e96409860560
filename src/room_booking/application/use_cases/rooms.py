from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.constants import Role
from ...domain.entities import AccessContext, Room
from ...domain.exceptions import RoomAlreadyExistsError, RoomNotFoundError
from ...domain.ports import ReservationStore, RoomStore
from .authorize import AuthorizationGuard

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RoomUseCases:
    """Room catalogue. Reads are open to any caller, writes are ADMIN only."""

    room_store: RoomStore
    reservation_store: ReservationStore
    guard: AuthorizationGuard

    def list_all(self) -> list[Room]:
        return self.room_store.list_all()

    def get(self, room_id: int) -> Room:
        room = self.room_store.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def create(
            self,
            caller: AccessContext,
            *,
            name: str,
            capacity: int,
            location: str,
            description: Optional[str] = None,
    ) -> Room:
        self.guard.require_roles(caller.claims, Role.ADMIN)
        self._ensure_name_free(name)
        room = self.room_store.add(
            Room(name=name, capacity=capacity, location=location, description=description)
        )
        logger.info("Room created", extra={"room_id": room.id})
        return room

    def update(
            self,
            caller: AccessContext,
            room_id: int,
            *,
            name: str,
            capacity: int,
            location: str,
            description: Optional[str] = None,
    ) -> Room:
        self.guard.require_roles(caller.claims, Role.ADMIN)
        room = self.get(room_id)
        self._ensure_name_free(name, room_id=room_id)

        room.name = name
        room.capacity = capacity
        room.location = location
        room.description = description
        return self.room_store.update(room)

    def delete(self, caller: AccessContext, room_id: int) -> None:
        self.guard.require_roles(caller.claims, Role.ADMIN)
        self.get(room_id)
        with self.reservation_store.transaction(room_id):
            removed = self.reservation_store.delete_for_room(room_id)
            self.room_store.delete(room_id)
        logger.info("Room deleted", extra={"room_id": room_id, "reservations_removed": removed})

    def _ensure_name_free(self, name: str, room_id: Optional[int] = None) -> None:
        clash = self.room_store.find_by_name(name)
        if clash is not None and clash.id != room_id:
            raise RoomAlreadyExistsError(name)
