from __future__ import annotations

from typing import Optional

from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...domain.exceptions import MissingCredentialsError

# Expose this so routes get the OpenAPI bearer security scheme
bearer_scheme = HTTPBearer(auto_error=False)


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    """Raises MissingCredentialsError when no `Authorization: Bearer` token was sent."""
    if credentials is None or not credentials.credentials.strip():
        raise MissingCredentialsError()
    return credentials.credentials.strip()
