from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials

from ...domain.entities import AccessContext
from ..common.core_factory import BookingCore
from .security import bearer_scheme, bearer_token


@dataclass(slots=True)
class FastAPIAuthorization:
    """
    FastAPI integration for the booking core.

    Turns the request's bearer token into an explicit AccessContext that
    route handlers pass on to the use cases. Authentication failures are
    left to the exception handlers in `errors.py`.
    """

    core: BookingCore

    async def get_current_user(
            self,
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> AccessContext:
        """Dependency: Require authentication."""
        return self.core.authenticate(bearer_token(credentials))
