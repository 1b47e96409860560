from __future__ import annotations

import os

from ..domain.exceptions import ConfigurationError
from .settings import AuthSettings


def settings_from_env() -> AuthSettings:
    def _int(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid integer for {key}: {raw}") from exc

    secret = os.getenv("JWT_SECRET")
    refresh_secret = os.getenv("JWT_REFRESH_SECRET")
    issuer = os.getenv("JWT_ISSUER")
    audience = os.getenv("JWT_AUDIENCE")
    if not all([secret, refresh_secret, issuer, audience]):
        missing = [
            n
            for n, v in [
                ("JWT_SECRET", secret),
                ("JWT_REFRESH_SECRET", refresh_secret),
                ("JWT_ISSUER", issuer),
                ("JWT_AUDIENCE", audience),
            ]
            if not v
        ]
        raise ConfigurationError(f"Missing JWT settings: {', '.join(missing)}")

    return AuthSettings(
        secret=secret,
        refresh_secret=refresh_secret,
        issuer=issuer,
        audience=audience,
        expiration_ms=_int("JWT_EXPIRATION_MS", 15 * 60 * 1000),
        refresh_expiration_ms=_int("JWT_REFRESH_EXPIRATION_MS", 7 * 24 * 60 * 60 * 1000),
        algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
    )
