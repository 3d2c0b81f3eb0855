"""Time utilities for timezone-aware datetimes and local calendar dates."""

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def local_today(tz_name: str) -> date:
    """Return today's calendar date in the named IANA timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` string into a ``time``."""
    hour, _, minute = value.partition(":")
    return time(int(hour), int(minute or 0))
