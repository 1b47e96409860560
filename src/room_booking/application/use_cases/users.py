from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Optional

from ...domain.constants import Role
from ...domain.entities import AccessContext, User
from ...domain.exceptions import UserNotFoundError
from ...domain.ports import PasswordHasher, ReservationStore, RoomStore, UserStore
from .authenticate import RegisterUserUseCase
from .authorize import AuthorizationGuard

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserUseCases:
    """User records, guarded by the same owner-or-admin rule as reservations."""

    user_store: UserStore
    room_store: RoomStore
    reservation_store: ReservationStore
    password_hasher: PasswordHasher
    guard: AuthorizationGuard

    def list_all(self, caller: AccessContext) -> list[User]:
        self.guard.require_roles(caller.claims, Role.ADMIN)
        return self.user_store.list_all()

    def get(self, caller: AccessContext, user_id: int) -> User:
        user = self._get_or_raise(user_id)
        self.guard.authorize_owner_action(caller.claims, user.email)
        return user

    def create(
            self,
            caller: AccessContext,
            *,
            email: str,
            password: str,
            name: str = "",
            phone: str = "",
            role: Role = Role.USER,
    ) -> User:
        """Admin provisioning; unlike self-registration the role can be chosen."""
        self.guard.require_roles(caller.claims, Role.ADMIN)
        user = RegisterUserUseCase(
            user_store=self.user_store,
            password_hasher=self.password_hasher,
        ).execute(email=email, password=password, name=name, phone=phone, role=role)
        logger.info("User created by admin", extra={"user_id": user.id, "subject": caller.email})
        return user

    def update(
            self,
            caller: AccessContext,
            user_id: int,
            *,
            name: Optional[str] = None,
            phone: Optional[str] = None,
            password: Optional[str] = None,
    ) -> User:
        user = self._get_or_raise(user_id)
        self.guard.authorize_owner_action(caller.claims, user.email)

        if name is not None:
            user.name = name
        if phone is not None:
            user.phone = phone
        if password is not None:
            user.password_hash = self.password_hasher.hash(password)
        return self.user_store.update(user)

    def delete(self, caller: AccessContext, user_id: int) -> None:
        """
        Removes the user and every reservation they hold.

        All room transactions are held (in room id order) for the cascade, so
        a booking by this user cannot land between the cascade and the delete.
        A booking that waited on a room lock re-checks the user under it.
        """
        user = self._get_or_raise(user_id)
        self.guard.authorize_owner_action(caller.claims, user.email)

        room_ids = sorted(room.id for room in self.room_store.list_all())
        with ExitStack() as stack:
            for room_id in room_ids:
                stack.enter_context(self.reservation_store.transaction(room_id))
            self.user_store.delete(user_id)
            removed = self.reservation_store.delete_for_user(user_id)
        logger.info("User deleted", extra={"user_id": user_id, "reservations_removed": removed})

    def _get_or_raise(self, user_id: int) -> User:
        user = self.user_store.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
