# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities.

All timestamps are stored and compared as timezone-aware UTC values.
Some drivers (SQLite in tests) hand back naive datetimes, so anything read
from the database is passed through ensure_utc() before comparison.

Usage:
    from src.utils.datetime import utc_now

    created_at = mapped_column(DateTime(timezone=True), default=utc_now)
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return ``dt`` as an aware UTC datetime.

    Naive values are assumed to already be UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def days_from_now(days: int) -> datetime:
    """Get a datetime N days from now."""
    return utc_now() + timedelta(days=days)


def hours_ago(hours: int) -> datetime:
    """Get a datetime N hours ago from now."""
    return utc_now() - timedelta(hours=hours)


def add_months(start: datetime, months: int) -> datetime:
    """Advance ``start`` by a number of 30-day billing months."""
    return start + timedelta(days=30 * months)


def days_until(target: datetime) -> int:
    """Whole days left until ``target``, rounded up, never negative."""
    remaining = ensure_utc(target) - utc_now()
    seconds = remaining.total_seconds()
    if seconds <= 0:
        return 0
    return int(-(-seconds // 86400))


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as an ISO 8601 UTC string."""
    if dt is None:
        return None

    return ensure_utc(dt).isoformat()
