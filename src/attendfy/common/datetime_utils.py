from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse an ISO 8601 date or datetime string into a calendar date."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return date.fromisoformat(value)
    except ValueError:
        return datetime.fromisoformat(value).date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def trailing_days(end: date, days: int) -> Iterator[date]:
    """`days` consecutive dates ending at `end`, oldest first."""
    for offset in range(days - 1, -1, -1):
        yield end - timedelta(days=offset)


def format_clock(value: datetime) -> str:
    """12-hour clock without a leading zero, e.g. ``9:05 AM``."""
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {'AM' if value.hour < 12 else 'PM'}"


def isoformat_or_none(value) -> str | None:
    return value.isoformat() if value is not None else None
