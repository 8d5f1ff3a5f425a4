"""Injectable clock used to measure time since the last failure.

The retry policy never reads the wall clock directly. Production code
passes a SystemClock; tests pass a FakeClock and move it explicitly,
so elapsed-time decisions are deterministic without sleeping.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


def as_utc(ts: datetime) -> datetime:
    """Return ``ts`` as an aware UTC datetime (naive values are taken as UTC)."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


class Clock(Protocol):
    """Protocol for time sources (satisfied by SystemClock and FakeClock)."""

    def now(self) -> datetime: ...

    def since(self, ts: datetime) -> timedelta: ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def since(self, ts: datetime) -> timedelta:
        return self.now() - as_utc(ts)


class FakeClock:
    """Manually driven clock for tests.

    Time only moves when ``set_time()`` or ``step()`` is called.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = as_utc(start) if start is not None else datetime(2024, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def since(self, ts: datetime) -> timedelta:
        return self._now - as_utc(ts)

    def set_time(self, ts: datetime) -> None:
        self._now = as_utc(ts)

    def step(self, delta: timedelta) -> None:
        self._now = self._now + delta


__all__ = ["Clock", "FakeClock", "SystemClock", "as_utc"]
