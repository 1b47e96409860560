from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...domain.constants import Role
from ...domain.entities import AccessContext, Reservation, ReservationNotice
from ...domain.exceptions import (
    ReservationNotFoundError,
    RoomNotFoundError,
    UnknownSubjectError,
)
from ...domain.ports import ReservationNotifier, ReservationStore, RoomStore, UserStore
from ...domain.value_objects import TimeInterval
from ..services.conflicts import ReservationConflictChecker
from .authorize import AuthorizationGuard

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReservationUseCases:
    """
    Booking flow for reservations.

    Create and update run the conflict check and the write inside
    `ReservationStore.transaction(room_id)`, so two overlapping requests for
    the same room cannot both pass the check before either write lands.
    """

    reservation_store: ReservationStore
    room_store: RoomStore
    user_store: UserStore
    conflict_checker: ReservationConflictChecker
    guard: AuthorizationGuard
    notifier: ReservationNotifier

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_all(self, caller: AccessContext) -> list[Reservation]:
        self.guard.require_roles(caller.claims, Role.ADMIN)
        return self.reservation_store.list_all()

    def list_mine(self, caller: AccessContext) -> list[Reservation]:
        return self.reservation_store.list_for_user(caller.user.id)

    def get(self, caller: AccessContext, reservation_id: int) -> Reservation:
        reservation = self._get_or_raise(reservation_id)
        self.guard.authorize_owner_action(caller.claims, self._owner_email(reservation))
        return reservation

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(
            self,
            caller: AccessContext,
            room_id: int,
            start: datetime,
            end: datetime,
    ) -> Reservation:
        interval = TimeInterval(start, end)
        if self.room_store.get(room_id) is None:
            raise RoomNotFoundError(room_id)

        with self.reservation_store.transaction(room_id):
            # room and caller may have been deleted while we waited for the lock
            room = self.room_store.get(room_id)
            if room is None:
                raise RoomNotFoundError(room_id)
            if self.user_store.get(caller.user.id) is None:
                raise UnknownSubjectError(caller.email)

            self.conflict_checker.check(room_id, interval.start, interval.end)
            reservation = self.reservation_store.add(
                Reservation(
                    room_id=room_id,
                    user_id=caller.user.id,
                    start_time=interval.start,
                    end_time=interval.end,
                )
            )

        logger.info(
            "Reservation created",
            extra={"reservation_id": reservation.id, "room_id": room_id, "subject": caller.email},
        )
        self._notify_created(caller, reservation, room.name)
        return reservation

    def update(
            self,
            caller: AccessContext,
            reservation_id: int,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None,
    ) -> Reservation:
        """Partial update: a missing bound keeps its stored value."""
        existing = self._get_or_raise(reservation_id)
        self.guard.authorize_owner_action(caller.claims, self._owner_email(existing))

        with self.reservation_store.transaction(existing.room_id):
            # re-read under the room transaction; it may have been deleted meanwhile
            current = self._get_or_raise(reservation_id)
            interval = TimeInterval(
                start if start is not None else current.start_time,
                end if end is not None else current.end_time,
            )
            self.conflict_checker.check(
                current.room_id,
                interval.start,
                interval.end,
                excluding_reservation_id=reservation_id,
            )
            updated = self.reservation_store.update(current.rescheduled(interval))

        logger.info(
            "Reservation updated",
            extra={"reservation_id": reservation_id, "subject": caller.email},
        )
        return updated

    def delete(self, caller: AccessContext, reservation_id: int) -> None:
        existing = self._get_or_raise(reservation_id)
        self.guard.authorize_owner_action(caller.claims, self._owner_email(existing))
        self.reservation_store.delete(reservation_id)
        logger.info(
            "Reservation deleted",
            extra={"reservation_id": reservation_id, "subject": caller.email},
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _get_or_raise(self, reservation_id: int) -> Reservation:
        reservation = self.reservation_store.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def _owner_email(self, reservation: Reservation) -> Optional[str]:
        owner = self.user_store.get(reservation.user_id)
        return owner.email if owner is not None else None

    def _notify_created(self, caller: AccessContext, reservation: Reservation, room_name: str) -> None:
        notice = ReservationNotice(
            reservation_id=reservation.id,
            user_email=caller.user.email,
            user_name=caller.user.name,
            room_name=room_name,
            start_time=reservation.start_time,
            end_time=reservation.end_time,
        )
        try:
            self.notifier.reservation_created(notice)
        except Exception:  # noqa: BLE001
            # the booking is already committed
            logger.exception(
                "Reservation notification failed",
                extra={"reservation_id": reservation.id},
            )
