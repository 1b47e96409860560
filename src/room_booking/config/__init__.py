"""
room_booking.config

- AuthSettings: signing keys, issuer/audience and token lifetimes.
- settings_from_env: convenience constructor for env-driven deployments.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import AuthSettings

__all__ = ["AuthSettings", "settings_from_env"]
