"""UTC time helpers for review scheduling.

All ISO strings produced by this module are UTC and end with 'Z', with second precision:
YYYY-MM-DDTHH:MM:SSZ
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC 'now'."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime (naive values are taken to be UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_datetime_to_iso_z(dt: datetime) -> str:
    """Format a datetime as UTC ISO string with second precision and trailing 'Z'."""
    dt = ensure_utc(dt).replace(microsecond=0)
    return dt.isoformat().replace("+00:00", "Z")


def utc_now_iso() -> str:
    return utc_datetime_to_iso_z(utc_now())


def parse_iso_z(s: str) -> datetime:
    """Parse an ISO-8601 string ending with 'Z' (or '+00:00') into UTC datetime.

    Accepts both second precision and fractional seconds.
    """
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(s))


def add_days(dt: datetime, days: int) -> datetime:
    return ensure_utc(dt) + timedelta(days=days)


def utc_date(dt: datetime) -> date:
    """Calendar date of dt in UTC."""
    return ensure_utc(dt).date()


def minute_bucket(dt: datetime) -> datetime:
    """Truncate dt (in UTC) to the start of its minute."""
    return ensure_utc(dt).replace(second=0, microsecond=0)
