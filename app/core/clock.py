"""
Time providers.

Services never read the wall clock directly; they receive a Clock so that
record timestamps and due dates are reproducible under test.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Real UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """A clock frozen at a given instant, moved only by advance()."""

    def __init__(self, instant: Optional[datetime] = None):
        instant = instant or datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def today(self) -> date:
        return self._instant.date()

    def advance(self, **kwargs) -> datetime:
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant


system_clock = SystemClock()


def get_clock() -> Clock:
    """FastAPI dependency; overridden in tests."""
    return system_clock
