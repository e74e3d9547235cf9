"""Injectable wall-clock so freshness checks can be simulated in tests.

All timestamps are naive datetimes in UTC: SQLite keeps datetimes as text
without an offset, so comparisons only hold if every writer drops tzinfo.
"""

from datetime import UTC, datetime, timedelta
from typing import Protocol


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Reads the real UTC time."""

    def now(self) -> datetime:
        return utc_now()


class FixedClock:
    """Clock frozen at a given instant until moved explicitly."""

    def __init__(self, current: datetime | None = None):
        self._current = current or utc_now()

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = current

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by a timedelta built from kwargs (minutes=5, ...)."""
        self._current = self._current + timedelta(**kwargs)
        return self._current
