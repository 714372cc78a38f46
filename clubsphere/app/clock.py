"""
clock.py — UTC time helpers.

All timestamps are stored and compared in UTC. SQLite returns naive
datetimes for DateTime(timezone=True) columns while PostgreSQL returns aware
ones; ensure_utc() makes both comparable.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive values are taken to be UTC already; aware values are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat(value: datetime | None) -> str | None:
    return ensure_utc(value).isoformat() if value is not None else None
