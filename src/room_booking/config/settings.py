from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import timedelta

from ..domain.constants import DEFAULT_ALGORITHM, KeyClass
from ..domain.exceptions import ConfigurationError

# HS256 needs at least as many key bytes as the digest size.
MIN_KEY_BYTES = 32


def _decode_key(name: str, raw: str) -> bytes:
    try:
        key = base64.b64decode(raw.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError(f"{name} is not valid base64") from exc
    if len(key) < MIN_KEY_BYTES:
        raise ConfigurationError(
            f"{name} decodes to {len(key)} bytes, at least {MIN_KEY_BYTES} are required"
        )
    return key


@dataclass(slots=True)
class AuthSettings:
    """
    Token signing and lifetime settings.

    Host code decides how to construct this (env, config file, etc.).
    Secrets are base64-encoded symmetric keys; access and refresh tokens
    must be signed with different keys.
    """
    secret: str
    refresh_secret: str
    issuer: str
    audience: str
    expiration_ms: int = 15 * 60 * 1000
    refresh_expiration_ms: int = 7 * 24 * 60 * 60 * 1000
    algorithm: str = DEFAULT_ALGORITHM

    @property
    def access_ttl(self) -> timedelta:
        return timedelta(milliseconds=self.expiration_ms)

    @property
    def refresh_ttl(self) -> timedelta:
        return timedelta(milliseconds=self.refresh_expiration_ms)

    def signing_keys(self) -> dict[KeyClass, bytes]:
        """
        Decode and sanity-check both keys.

        Raises ConfigurationError so a misconfigured process fails at startup
        rather than on the first request.
        """
        access_key = _decode_key("JWT_SECRET", self.secret)
        refresh_key = _decode_key("JWT_REFRESH_SECRET", self.refresh_secret)
        if access_key == refresh_key:
            raise ConfigurationError("JWT_SECRET and JWT_REFRESH_SECRET must differ")
        if self.expiration_ms <= 0 or self.refresh_expiration_ms <= 0:
            raise ConfigurationError("Token expirations must be positive")
        return {KeyClass.ACCESS: access_key, KeyClass.REFRESH: refresh_key}
