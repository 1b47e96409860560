from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...domain.exceptions import ReservationConflictError, RoomNotFoundError
from ...domain.ports import ReservationStore, RoomStore
from ...domain.value_objects import TimeInterval

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReservationConflictChecker:
    """
    Decides whether `[start, end)` is bookable for a room.

    The check alone does not protect against concurrent writers; callers
    must run it and the following write inside
    `ReservationStore.transaction(room_id)`.
    """

    reservation_store: ReservationStore
    room_store: RoomStore

    def check(
            self,
            room_id: int,
            start: datetime,
            end: datetime,
            excluding_reservation_id: Optional[int] = None,
    ) -> None:
        """
        Raises:
            InvalidReservationIntervalError if start >= end
            RoomNotFoundError if the room does not exist
            ReservationConflictError on the first overlapping reservation
        """
        candidate = TimeInterval(start, end)

        room = self.room_store.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)

        for existing in self.reservation_store.find_overlapping(room_id, candidate.start, candidate.end):
            # an update must not conflict with itself
            if excluding_reservation_id is not None and existing.id == excluding_reservation_id:
                continue

            if candidate.overlaps(existing.interval):
                logger.info(
                    "Reservation conflict",
                    extra={
                        "room_id": room_id,
                        "candidate": str(candidate),
                        "conflicting_reservation_id": existing.id,
                    },
                )
                raise ReservationConflictError(existing.interval, room.name)
