from datetime import datetime, timezone

from ..domain.ports import Clock


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
