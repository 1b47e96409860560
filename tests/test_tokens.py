# tests/test_tokens.py
import base64
from datetime import timedelta

import jwt
import pytest

from room_booking.adapters.jwt.codec import JWTTokenCodec
from room_booking.application.services.tokens import TokenService
from room_booking.config import AuthSettings, settings_from_env
from room_booking.domain.constants import KeyClass, Role
from room_booking.domain.exceptions import (
    ConfigurationError,
    InvalidTokenError,
    TokenExpiredError,
)

from conftest import ACCESS_KEY, REFRESH_KEY, T0


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("subject", ["alice@example.com", "x@y.z", "first.last+tag@sub.example.org"])
def test_access_token_round_trip(token_service, subject, role):
    claims = token_service.validate(token_service.issue_access_token(subject, role), KeyClass.ACCESS)

    assert claims.subject == subject
    assert claims.role is role
    assert claims.issuer == "room-booking"
    assert claims.audience == "room-booking-clients"
    assert claims.issued_at == T0
    assert claims.expires_at == T0 + timedelta(minutes=15)
    assert claims.key_class is KeyClass.ACCESS
    assert claims.token_id is None


def test_refresh_token_has_no_role_and_unique_id(token_service):
    first = token_service.issue_refresh_token("alice@example.com")
    second = token_service.issue_refresh_token("alice@example.com")

    claims = token_service.validate(first, KeyClass.REFRESH)
    assert claims.subject == "alice@example.com"
    assert claims.role is None
    assert claims.token_id
    assert claims.expires_at == T0 + timedelta(days=7)
    assert claims.token_id != token_service.validate(second, KeyClass.REFRESH).token_id

    raw = jwt.decode(first, options={"verify_signature": False})
    assert "role" not in raw
    assert set(raw) >= {"sub", "jti", "iss", "aud", "iat", "exp"}


def test_access_token_payload_fields(token_service):
    raw = jwt.decode(token_service.issue_access_token("a@example.com", Role.USER), options={"verify_signature": False})
    assert set(raw) == {"sub", "role", "iss", "aud", "iat", "exp"}


def test_subject_of(token_service):
    token = token_service.issue_access_token("alice@example.com", Role.USER)
    assert token_service.subject_of(token) == "alice@example.com"

    refresh = token_service.issue_refresh_token("alice@example.com")
    assert token_service.subject_of(refresh, KeyClass.REFRESH) == "alice@example.com"


def test_access_token_expires_exactly_at_ttl(token_service, clock):
    token = token_service.issue_access_token("alice@example.com", Role.USER)

    clock.advance(timedelta(minutes=15) - timedelta(milliseconds=1))
    assert token_service.validate(token).subject == "alice@example.com"

    clock.advance(timedelta(milliseconds=1))
    with pytest.raises(TokenExpiredError) as excinfo:
        token_service.validate(token)
    assert excinfo.value.reason == "expired"

    with pytest.raises(InvalidTokenError):
        token_service.subject_of(token)


def test_refresh_token_expires_exactly_at_ttl(token_service, clock):
    token = token_service.issue_refresh_token("alice@example.com")

    clock.advance(timedelta(days=7) - timedelta(milliseconds=1))
    token_service.validate(token, KeyClass.REFRESH)

    clock.advance(timedelta(milliseconds=1))
    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.validate(token, KeyClass.REFRESH)
    assert excinfo.value.reason == "expired"


def test_key_isolation(token_service):
    access = token_service.issue_access_token("alice@example.com", Role.ADMIN)
    refresh = token_service.issue_refresh_token("alice@example.com")

    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.validate(access, KeyClass.REFRESH)
    assert excinfo.value.reason == "bad-signature"

    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.validate(refresh, KeyClass.ACCESS)
    assert excinfo.value.reason == "bad-signature"


def test_refresh_key_cannot_mint_access_tokens(token_service):
    codec = JWTTokenCodec()
    forged = codec.encode(
        {
            "sub": "mallory@example.com",
            "role": "ADMIN",
            "iss": "room-booking",
            "aud": "room-booking-clients",
            "iat": T0.timestamp(),
            "exp": (T0 + timedelta(hours=1)).timestamp(),
        },
        REFRESH_KEY,
    )
    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.validate(forged, KeyClass.ACCESS)
    assert excinfo.value.reason == "bad-signature"


def test_swapped_payload_is_rejected(token_service):
    alice = token_service.issue_access_token("alice@example.com", Role.USER)
    admin = token_service.issue_access_token("root@example.com", Role.ADMIN)

    header, _, signature = alice.split(".")
    _, admin_payload, _ = admin.split(".")

    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.validate(f"{header}.{admin_payload}.{signature}")
    assert excinfo.value.reason == "bad-signature"


@pytest.mark.parametrize("token", ["", "   ", "not-a-jwt", "a.b.c"])
def test_malformed_tokens(token_service, token):
    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.validate(token)
    assert excinfo.value.reason == "malformed"


def test_unsigned_token_is_rejected(token_service):
    unsigned = jwt.encode(
        {"sub": "mallory@example.com", "role": "ADMIN", "iss": "room-booking",
         "aud": "room-booking-clients", "iat": T0.timestamp(), "exp": T0.timestamp() + 60},
        None,
        algorithm="none",
    )
    with pytest.raises(InvalidTokenError):
        token_service.validate(unsigned)


def test_correctly_signed_but_incomplete_claims(token_service):
    codec = JWTTokenCodec()
    no_role = codec.encode(
        {"sub": "a@example.com", "iss": "room-booking", "aud": "room-booking-clients",
         "iat": T0.timestamp(), "exp": T0.timestamp() + 60},
        ACCESS_KEY,
    )
    no_exp = codec.encode(
        {"sub": "a@example.com", "role": "USER", "iss": "room-booking", "aud": "room-booking-clients",
         "iat": T0.timestamp()},
        ACCESS_KEY,
    )
    for token in (no_role, no_exp):
        with pytest.raises(InvalidTokenError) as excinfo:
            token_service.validate(token)
        assert excinfo.value.reason == "malformed"


def test_foreign_issuer_is_rejected(settings, clock, token_service):
    settings.issuer = "someone-else"
    foreign = TokenService.from_settings(settings, codec=JWTTokenCodec(), clock=clock)
    token = foreign.issue_access_token("alice@example.com", Role.USER)

    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.validate(token)
    assert excinfo.value.reason == "malformed"


# --- settings ------------------------------------------------------------------


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


def test_settings_reject_identical_keys():
    settings = AuthSettings(secret=_b64(ACCESS_KEY), refresh_secret=_b64(ACCESS_KEY), issuer="i", audience="a")
    with pytest.raises(ConfigurationError):
        settings.signing_keys()


def test_settings_reject_short_or_invalid_keys():
    short = AuthSettings(secret=_b64(b"short"), refresh_secret=_b64(REFRESH_KEY), issuer="i", audience="a")
    with pytest.raises(ConfigurationError):
        short.signing_keys()

    garbage = AuthSettings(secret="%%% not base64 %%%", refresh_secret=_b64(REFRESH_KEY), issuer="i", audience="a")
    with pytest.raises(ConfigurationError):
        garbage.signing_keys()


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", _b64(ACCESS_KEY))
    monkeypatch.setenv("JWT_REFRESH_SECRET", _b64(REFRESH_KEY))
    monkeypatch.setenv("JWT_ISSUER", "room-booking")
    monkeypatch.setenv("JWT_AUDIENCE", "clients")
    monkeypatch.setenv("JWT_EXPIRATION_MS", "60000")
    monkeypatch.delenv("JWT_REFRESH_EXPIRATION_MS", raising=False)

    settings = settings_from_env()
    assert settings.access_ttl == timedelta(minutes=1)
    assert settings.refresh_ttl == timedelta(days=7)
    assert settings.signing_keys()[KeyClass.ACCESS] == ACCESS_KEY


def test_settings_from_env_lists_missing(monkeypatch):
    for name in ("JWT_SECRET", "JWT_REFRESH_SECRET", "JWT_ISSUER", "JWT_AUDIENCE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JWT_ISSUER", "room-booking")

    with pytest.raises(ConfigurationError) as excinfo:
        settings_from_env()
    message = str(excinfo.value)
    assert "JWT_SECRET" in message
    assert "JWT_AUDIENCE" in message
    assert "JWT_ISSUER" not in message
