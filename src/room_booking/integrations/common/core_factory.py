from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...adapters.clock import SystemClock
from ...adapters.jwt.codec import JWTTokenCodec
from ...adapters.memory.stores import (
    InMemoryReservationStore,
    InMemoryRoomStore,
    InMemoryUserStore,
)
from ...adapters.notifications.logging_notifier import LoggingReservationNotifier
from ...adapters.security.argon2_hasher import Argon2PasswordHasher
from ...application.services.conflicts import ReservationConflictChecker
from ...application.services.identity import IdentityResolver
from ...application.services.tokens import TokenService
from ...application.use_cases.authenticate import (
    AuthenticateTokenUseCase,
    LoginUseCase,
    RefreshTokenUseCase,
    RegisterUserUseCase,
)
from ...application.use_cases.authorize import AuthorizationGuard
from ...application.use_cases.reservations import ReservationUseCases
from ...application.use_cases.rooms import RoomUseCases
from ...application.use_cases.users import UserUseCases
from ...config.settings import AuthSettings
from ...domain.entities import AccessContext
from ...domain.ports import (
    Clock,
    PasswordHasher,
    ReservationNotifier,
    ReservationStore,
    RoomStore,
    UserStore,
)
from ...domain.value_objects import TokenPair


@dataclass(slots=True)
class BookingCore:
    """
    Framework-agnostic facade over the wired components.

    Integrations (FastAPI, CLI, tests) adapt this to their own
    dependency systems.
    """

    token_service: TokenService
    identity_resolver: IdentityResolver
    guard: AuthorizationGuard
    conflict_checker: ReservationConflictChecker

    auth_use_case: AuthenticateTokenUseCase
    login_use_case: LoginUseCase
    refresh_use_case: RefreshTokenUseCase
    register_use_case: RegisterUserUseCase

    reservations: ReservationUseCases
    rooms: RoomUseCases
    users: UserUseCases

    # --- Core operations --------------------------------------------------

    def authenticate(self, token: str) -> AccessContext:
        """Access token -> AccessContext (or raise auth exceptions)."""
        return self.auth_use_case.execute(token)

    def login(self, email: str, password: str) -> TokenPair:
        return self.login_use_case.execute(email, password)

    def refresh(self, refresh_token: str) -> TokenPair:
        return self.refresh_use_case.execute(refresh_token)


def create_booking_core(
        settings: AuthSettings,
        *,
        user_store: Optional[UserStore] = None,
        room_store: Optional[RoomStore] = None,
        reservation_store: Optional[ReservationStore] = None,
        clock: Optional[Clock] = None,
        password_hasher: Optional[PasswordHasher] = None,
        notifier: Optional[ReservationNotifier] = None,
) -> BookingCore:
    """
    Explicit composition at process start.

    Order: codec -> TokenService -> IdentityResolver -> guard -> conflict
    checker -> use cases. Unsupplied collaborators default to the in-memory
    stores, the system clock, argon2 hashing and the logging notifier.

    Raises ConfigurationError when the signing keys are unusable.
    """
    user_store = user_store or InMemoryUserStore()
    room_store = room_store or InMemoryRoomStore()
    reservation_store = reservation_store or InMemoryReservationStore()
    clock = clock or SystemClock()
    password_hasher = password_hasher or Argon2PasswordHasher()
    notifier = notifier or LoggingReservationNotifier()

    codec = JWTTokenCodec(algorithm=settings.algorithm)
    token_service = TokenService.from_settings(settings, codec=codec, clock=clock)
    identity_resolver = IdentityResolver(user_store=user_store)
    guard = AuthorizationGuard()
    conflict_checker = ReservationConflictChecker(
        reservation_store=reservation_store,
        room_store=room_store,
    )

    return BookingCore(
        token_service=token_service,
        identity_resolver=identity_resolver,
        guard=guard,
        conflict_checker=conflict_checker,
        auth_use_case=AuthenticateTokenUseCase(
            token_service=token_service,
            identity_resolver=identity_resolver,
        ),
        login_use_case=LoginUseCase(
            user_store=user_store,
            password_hasher=password_hasher,
            token_service=token_service,
        ),
        refresh_use_case=RefreshTokenUseCase(
            token_service=token_service,
            identity_resolver=identity_resolver,
        ),
        register_use_case=RegisterUserUseCase(
            user_store=user_store,
            password_hasher=password_hasher,
        ),
        reservations=ReservationUseCases(
            reservation_store=reservation_store,
            room_store=room_store,
            user_store=user_store,
            conflict_checker=conflict_checker,
            guard=guard,
            notifier=notifier,
        ),
        rooms=RoomUseCases(
            room_store=room_store,
            reservation_store=reservation_store,
            guard=guard,
        ),
        users=UserUseCases(
            user_store=user_store,
            room_store=room_store,
            reservation_store=reservation_store,
            password_hasher=password_hasher,
            guard=guard,
        ),
    )
