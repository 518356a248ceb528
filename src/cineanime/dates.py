"""Date helpers shared by the catalog, the feed walker and the site."""

import time
from datetime import date, datetime, timezone
from typing import Any


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO string (or struct_time/datetime) into an aware datetime.

    Naive values are assumed to be UTC. Returns None for empty or
    unparseable input.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, time.struct_time):
        parsed = datetime(*value[:6])
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        s = str(value).strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` (or full ISO datetime) into a date."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
