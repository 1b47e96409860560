from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from ...config.settings import AuthSettings
from ...domain.constants import REFRESH_TOKEN_TYPE, KeyClass, Role
from ...domain.entities import ClaimSet
from ...domain.exceptions import InvalidTokenError, TokenExpiredError
from ...domain.ports import Clock, TokenCodec
from ...domain.value_objects import TokenPair

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ("sub", "iss", "aud", "iat", "exp")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _from_epoch(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


@dataclass(slots=True)
class TokenService:
    """
    Issues and validates access and refresh tokens.

    - Access and refresh tokens are signed with independent keys, so a
      leaked key of one class cannot mint tokens of the other.
    - Expiry is evaluated against the injected clock with sub-second
      precision (`exp` and `iat` are float epochs).
    - Refresh tokens carry a unique `jti` but are not tracked server-side.

    Holds only immutable keys, so it is safe to share across threads.
    """

    codec: TokenCodec
    clock: Clock
    keys: Mapping[KeyClass, bytes]
    issuer: str
    audience: str
    access_ttl: timedelta
    refresh_ttl: timedelta

    @classmethod
    def from_settings(cls, settings: AuthSettings, codec: TokenCodec, clock: Clock) -> "TokenService":
        return cls(
            codec=codec,
            clock=clock,
            keys=settings.signing_keys(),
            issuer=settings.issuer,
            audience=settings.audience,
            access_ttl=settings.access_ttl,
            refresh_ttl=settings.refresh_ttl,
        )

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_access_token(self, subject: str, role: Role) -> str:
        now = self.clock.now()
        claims = {
            "sub": subject,
            "role": Role(role).value,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now.timestamp(),
            "exp": (now + self.access_ttl).timestamp(),
        }
        return self.codec.encode(claims, self.keys[KeyClass.ACCESS])

    def issue_refresh_token(self, subject: str) -> str:
        now = self.clock.now()
        claims = {
            "sub": subject,
            "jti": str(uuid.uuid4()),
            "type": REFRESH_TOKEN_TYPE,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now.timestamp(),
            "exp": (now + self.refresh_ttl).timestamp(),
        }
        return self.codec.encode(claims, self.keys[KeyClass.REFRESH])

    def issue_token_pair(self, subject: str, role: Role) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(subject, role),
            refresh_token=self.issue_refresh_token(subject),
        )

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate(self, token: str, key_class: KeyClass = KeyClass.ACCESS) -> ClaimSet:
        """
        Verify signature, claims and expiry.

        Raises:
            TokenExpiredError  (reason "expired")
            InvalidTokenError  (reason "malformed" or "bad-signature")
        """
        try:
            payload = self.codec.decode(token, self.keys[key_class])
            return self._to_claim_set(payload, key_class)
        except InvalidTokenError as exc:
            logger.info(
                "Token rejected",
                extra={"reason": exc.reason, "key_class": key_class.value},
            )
            raise

    def subject_of(self, token: str, key_class: KeyClass = KeyClass.ACCESS) -> str:
        return self.validate(token, key_class).subject

    # ------------------------------------------------------------------ #
    # Internal: payload -> ClaimSet
    # ------------------------------------------------------------------ #

    def _to_claim_set(self, payload: Mapping[str, Any], key_class: KeyClass) -> ClaimSet:
        missing = [name for name in _REQUIRED_CLAIMS if payload.get(name) in (None, "")]
        if missing:
            raise InvalidTokenError(InvalidTokenError.MALFORMED, f"Missing claims: {missing}")

        if not _is_number(payload["iat"]) or not _is_number(payload["exp"]):
            raise InvalidTokenError(InvalidTokenError.MALFORMED, "iat/exp must be numeric")

        if payload["iss"] != self.issuer or payload["aud"] != self.audience:
            raise InvalidTokenError(InvalidTokenError.MALFORMED, "Unexpected issuer or audience")

        is_refresh = payload.get("type") == REFRESH_TOKEN_TYPE
        if is_refresh != (key_class is KeyClass.REFRESH):
            raise InvalidTokenError(InvalidTokenError.MALFORMED, "Token used with the wrong key class")

        role: Role | None = None
        if key_class is KeyClass.ACCESS:
            try:
                role = Role(payload.get("role"))
            except ValueError as exc:
                raise InvalidTokenError(InvalidTokenError.MALFORMED, "Unknown role claim") from exc
        elif not payload.get("jti"):
            raise InvalidTokenError(InvalidTokenError.MALFORMED, "Refresh token without jti")

        if self.clock.now().timestamp() >= payload["exp"]:
            raise TokenExpiredError()

        return ClaimSet(
            subject=str(payload["sub"]),
            issuer=payload["iss"],
            audience=payload["aud"],
            issued_at=_from_epoch(payload["iat"]),
            expires_at=_from_epoch(payload["exp"]),
            key_class=key_class,
            role=role,
            token_id=payload.get("jti"),
        )
