"""Translate the domain error taxonomy into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ...domain.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    BadCredentialsError,
    ForbiddenError,
    InvalidReservationIntervalError,
    MissingCredentialsError,
    NotFoundError,
    ReservationConflictError,
)

logger = logging.getLogger(__name__)

# Same message for forged, expired and orphaned tokens.
INVALID_TOKEN_DETAIL = "Invalid or expired token"


def _api_error(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": status_code, "message": message, **extra},
    )


async def _authentication_error(request: Request, exc: AuthenticationError) -> JSONResponse:
    if isinstance(exc, (BadCredentialsError, MissingCredentialsError)):
        message = str(exc)
    else:
        # the reason was logged where the token was rejected
        message = INVALID_TOKEN_DETAIL
    response = _api_error(status.HTTP_401_UNAUTHORIZED, message)
    response.headers["WWW-Authenticate"] = "Bearer"
    return response


async def _forbidden(request: Request, exc: ForbiddenError) -> JSONResponse:
    return _api_error(status.HTTP_403_FORBIDDEN, str(exc))


async def _reservation_conflict(request: Request, exc: ReservationConflictError) -> JSONResponse:
    return _api_error(
        status.HTTP_409_CONFLICT,
        str(exc),
        room_name=exc.room_name,
        start_time=exc.conflicting_interval.start.isoformat(),
        end_time=exc.conflicting_interval.end.isoformat(),
    )


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _api_error(status.HTTP_404_NOT_FOUND, str(exc))


async def _already_exists(request: Request, exc: AlreadyExistsError) -> JSONResponse:
    return _api_error(status.HTTP_409_CONFLICT, str(exc))


async def _invalid_interval(request: Request, exc: InvalidReservationIntervalError) -> JSONResponse:
    logger.info("Rejected reservation interval at %s: %s", request.url.path, exc)
    return _api_error(422, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Expected, user-triggerable conditions are answered here. Anything else
    propagates to the server as a 500.
    """
    app.add_exception_handler(AuthenticationError, _authentication_error)
    app.add_exception_handler(ForbiddenError, _forbidden)
    app.add_exception_handler(ReservationConflictError, _reservation_conflict)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(AlreadyExistsError, _already_exists)
    app.add_exception_handler(InvalidReservationIntervalError, _invalid_interval)
