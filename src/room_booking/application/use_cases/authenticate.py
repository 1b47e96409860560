from __future__ import annotations

import logging
from dataclasses import dataclass

from ...domain.constants import KeyClass, Role
from ...domain.entities import AccessContext, User
from ...domain.exceptions import (
    BadCredentialsError,
    UserAlreadyExistsError,
)
from ...domain.ports import PasswordHasher, UserStore
from ...domain.value_objects import EmailAddress, TokenPair
from ..services.identity import IdentityResolver
from ..services.tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AuthenticateTokenUseCase:
    """
    Application use case:
    - Validate an access token via TokenService
    - Resolve its subject to a user record

    Raises:
        InvalidTokenError / TokenExpiredError
        UnknownSubjectError
    """

    token_service: TokenService
    identity_resolver: IdentityResolver

    def execute(self, token: str) -> AccessContext:
        claims = self.token_service.validate(token, KeyClass.ACCESS)
        user = self.identity_resolver.resolve(claims.subject)
        return AccessContext(claims=claims, user=user)


@dataclass(slots=True)
class LoginUseCase:
    """Email + password -> access/refresh token pair."""

    user_store: UserStore
    password_hasher: PasswordHasher
    token_service: TokenService

    def execute(self, email: str, password: str) -> TokenPair:
        try:
            normalized = str(EmailAddress(email))
        except ValueError as exc:
            raise BadCredentialsError() from exc

        user = self.user_store.find_by_email(normalized)
        if user is None or not self.password_hasher.verify(user.password_hash, password):
            logger.info("Login failed", extra={"subject": normalized})
            raise BadCredentialsError()

        logger.info("Login succeeded", extra={"subject": user.email})
        return self.token_service.issue_token_pair(user.email, user.role)


@dataclass(slots=True)
class RefreshTokenUseCase:
    """
    Refresh token -> new access/refresh token pair.

    The role is re-derived from the user store; refresh tokens never carry
    privilege. The presented refresh token stays valid until it expires.
    """

    token_service: TokenService
    identity_resolver: IdentityResolver

    def execute(self, refresh_token: str) -> TokenPair:
        subject = self.token_service.subject_of(refresh_token, KeyClass.REFRESH)
        user = self.identity_resolver.resolve(subject)
        return self.token_service.issue_token_pair(user.email, user.role)


@dataclass(slots=True)
class RegisterUserUseCase:
    user_store: UserStore
    password_hasher: PasswordHasher

    def execute(
            self,
            *,
            email: str,
            password: str,
            name: str = "",
            phone: str = "",
            role: Role = Role.USER,
    ) -> User:
        normalized = str(EmailAddress(email))
        if self.user_store.find_by_email(normalized) is not None:
            raise UserAlreadyExistsError(normalized)

        user = self.user_store.add(
            User(
                email=normalized,
                password_hash=self.password_hasher.hash(password),
                role=role,
                name=name,
                phone=phone,
            )
        )
        logger.info("User registered", extra={"user_id": user.id, "subject": user.email})
        return user
