from typing import Any, Mapping

import jwt
from jwt.exceptions import (
    DecodeError,
    InvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
)

from ...domain.constants import DEFAULT_ALGORITHM
from ...domain.exceptions import InvalidTokenError
from ...domain.ports import TokenCodec

# Time-based and audience/issuer checks are done by TokenService against the
# injected clock and the configured values; the codec only verifies signatures.
_SIGNATURE_ONLY = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
}


class JWTTokenCodec(TokenCodec):
    """
    Adapter implementing the TokenCodec port with PyJWT and a symmetric
    HMAC algorithm.

    Infrastructure layer:
    - Knows about JWT structure and signing.
    - Knows nothing about clocks, roles or key classes.
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        if not algorithm.startswith("HS"):
            raise ValueError(f"Only HMAC algorithms are supported, got {algorithm!r}")
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def encode(self, claims: Mapping[str, Any], key: bytes) -> str:
        return jwt.encode(dict(claims), key, algorithm=self._algorithm)

    def decode(self, token: str, key: bytes) -> Mapping[str, Any]:
        """
        Verify the signature and return the claims.

        Raises:
            InvalidTokenError with reason "bad-signature" or "malformed"
        """
        if not isinstance(token, str) or not token.strip():
            raise InvalidTokenError(InvalidTokenError.MALFORMED, "Token is empty")

        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[self._algorithm],
                options=_SIGNATURE_ONLY,
            )
        except InvalidSignatureError as exc:
            raise InvalidTokenError(InvalidTokenError.BAD_SIGNATURE, "Token signature mismatch") from exc
        except (DecodeError, JWTInvalidTokenError) as exc:
            raise InvalidTokenError(InvalidTokenError.MALFORMED, f"Invalid token: {exc}") from exc

        if not isinstance(payload, dict):
            raise InvalidTokenError(InvalidTokenError.MALFORMED, "Token payload is not an object")
        return payload
