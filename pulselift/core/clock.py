"""Datetime helpers: timestamps are stored in UTC, calendar maths runs in local time."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Tz-aware UTC. Naive values (e.g. read back from SQLite) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime) -> datetime:
    """Same instant in the process' local timezone."""
    return as_utc(value).astimezone()


def local_date(value: datetime) -> date:
    """Local calendar day of a timestamp (local midnight normalisation)."""
    return to_local(value).date()
