# src/dispatch_terminal/db/time.py
"""Time utilities for database rows and reports."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from dispatch_terminal.core.settings import settings


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def now_ms() -> int:
    """Return the current time as integer milliseconds since the epoch."""
    return int(utcnow().timestamp() * 1000)


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def ms_to_local(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds into an aware datetime in the terminal's timezone."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC).astimezone(local_zone())


def local_date(timestamp_ms: int) -> str:
    """Return the ``YYYY-MM-DD`` calendar date of ``timestamp_ms`` in local time."""
    return ms_to_local(timestamp_ms).date().isoformat()


def today() -> date:
    return utcnow().astimezone(local_zone()).date()


def format_date_br(value: str) -> str:
    """Render an ISO ``YYYY-MM-DD`` string as ``DD/MM/YYYY``."""
    if not value:
        return ""
    year, month, day = value.split("-")
    return f"{day}/{month}/{year}"


def format_time_hm(timestamp_ms: int) -> str:
    """Render epoch milliseconds as local ``HH:MM``."""
    return ms_to_local(timestamp_ms).strftime("%H:%M")
