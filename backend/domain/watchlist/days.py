"""Calendar-day primitives.

All watchlist comparisons happen on local calendar days. These helpers are the
only place where timestamps and strings become `date` objects, so the
classifier, the aggregations and the day-keyed lookups always agree on what
"the same day" means.
"""

from __future__ import annotations

import re
from datetime import date, datetime, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from domain.errors import ValidationError

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def resolve_timezone(name: Optional[str], *, default: Optional[str] = None) -> tzinfo:
    """Resolve an IANA zone name (falls back to `default`, then UTC)."""
    key = (name or "").strip() or (default or "").strip() or "UTC"
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"unknown timezone: {key}")


def to_local_day(value: date, tz: Optional[tzinfo] = None) -> date:
    """Normalize a date or datetime to the calendar day it falls on locally.

    Naive datetimes are taken as local wall-clock time. Aware datetimes are
    converted to `tz` first (no conversion when `tz` is None).
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def parse_day(value: Any, tz: Optional[tzinfo] = None) -> date:
    """Parse user input into a local calendar day.

    A bare `YYYY-MM-DD` string is that day in the viewer's zone (as if
    `T00:00:00` local had been appended); it is never shifted through UTC.
    """
    if value is None:
        raise ValidationError("date is required")
    if isinstance(value, date):
        return to_local_day(value, tz)
    if not isinstance(value, str):
        raise ValidationError("invalid date format")

    raw = value.strip()
    if not raw:
        raise ValidationError("date is required")
    try:
        if _DAY_RE.match(raw):
            return date.fromisoformat(raw)
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        return to_local_day(datetime.fromisoformat(raw), tz)
    except ValueError:
        raise ValidationError("invalid date format")


def local_today(tz: Optional[tzinfo] = None, *, now: Optional[datetime] = None) -> date:
    """Reference day for the viewer. Only the HTTP layer should call this."""
    current = now if now is not None else datetime.now(tz)
    return to_local_day(current, tz)
