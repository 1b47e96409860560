from __future__ import annotations

from fastapi import FastAPI

from ... import __version__
from ...config import AuthSettings, settings_from_env
from ..common.core_factory import BookingCore, create_booking_core
from .deps import FastAPIAuthorization
from .errors import register_exception_handlers
from .routes import API_PREFIX, build_routers


def create_fastapi_app(
    *,
    settings: AuthSettings | None = None,
    core: BookingCore | None = None,
) -> FastAPI:
    """
    High-level helper:

    - Builds the BookingCore from settings (env when omitted), unless a
      pre-wired core is given
    - Wraps it in FastAPIAuthorization
    - Mounts the auth, rooms, reservations and users routers

    Usable as an ASGI factory:

        uvicorn room_booking.integrations.fastapi:create_fastapi_app --factory
    """
    if core is None:
        core = create_booking_core(settings or settings_from_env())

    app = FastAPI(title="Room Booking API", version=__version__)
    app.state.core = core

    fastapi_auth = FastAPIAuthorization(core=core)
    for router in build_routers(fastapi_auth):
        app.include_router(router)
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


__all__ = ["API_PREFIX", "FastAPIAuthorization", "create_fastapi_app"]
