# src/room_booking/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from .exceptions import InvalidReservationIntervalError


# --- Identity value objects ----------------------------------------------


@dataclass(frozen=True, slots=True)
class EmailAddress:
    """
    Simple email value object.

    Emails are the token subject, so they are compared case-insensitively
    by normalizing to lower case on construction.
    """
    value: str

    def __post_init__(self) -> None:
        if "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value!r}")
        object.__setattr__(self, "value", self.value.strip().lower())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"


# --- Booking value objects -----------------------------------------------


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class TimeInterval:
    """
    Half-open interval `[start, end)`.

    A reservation ending exactly when another begins does not overlap it.
    """

    start: datetime
    end: datetime

    def __init__(self, start: datetime, end: datetime) -> None:
        start, end = as_utc(start), as_utc(end)
        if not start < end:
            raise InvalidReservationIntervalError(
                f"Start time must be before end time ({start.isoformat()} >= {end.isoformat()})"
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def overlaps(self, other: TimeInterval) -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"
