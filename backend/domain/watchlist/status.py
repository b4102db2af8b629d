"""Watch-status classification and the rules of the mutating actions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from enum import Enum
from typing import Any, Optional, Union

from domain.errors import NotFoundOrUnauthorizedError, ValidationError
from domain.watchlist.days import to_local_day
from domain.watchlist.watch_record import WatchRecord

RATING_MIN = 1
RATING_MAX = 5


class WatchStatus(str, Enum):
    TO_WATCH = "to_watch"
    UPCOMING = "upcoming"
    WATCHED = "watched"


class WatchAction(str, Enum):
    SCHEDULED = "scheduled"
    MARKED_WATCHED = "marked_watched"


@dataclass(frozen=True)
class ToWatch:
    status = WatchStatus.TO_WATCH
    on: None = None


@dataclass(frozen=True)
class Upcoming:
    on: date
    status = WatchStatus.UPCOMING


@dataclass(frozen=True)
class Watched:
    on: date
    status = WatchStatus.WATCHED


WatchState = Union[ToWatch, Upcoming, Watched]


def classify(record: WatchRecord, today: date, tz: Optional[tzinfo] = None) -> WatchState:
    """Derive the display state of a record relative to `today`.

    `today` is the viewer's local calendar day. A record dated today counts as
    watched, not upcoming. A watched record without a day is treated as
    to-watch instead of failing.
    """
    if not record.watched or record.occurs_on is None:
        return ToWatch()
    day = to_local_day(record.occurs_on, tz)
    if day > to_local_day(today, tz):
        return Upcoming(on=day)
    return Watched(on=day)


def plan_watch(on: Optional[date], today: date) -> WatchAction:
    """Label a schedule/mark request; both apply `watched=True, occurs_on=on`."""
    if on is None:
        raise ValidationError("date is required")
    return WatchAction.SCHEDULED if on > today else WatchAction.MARKED_WATCHED


def validate_rating(value: Any) -> Optional[int]:
    """Accept an int in 1..5 (3.0 counts as 3), or None to clear the rating."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    # bool is an int subclass; True must not pass as 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("rating must be an integer between 1 and 5, or null to remove rating")
    if value < RATING_MIN or value > RATING_MAX:
        raise ValidationError("rating must be an integer between 1 and 5, or null to remove rating")
    return value


def ensure_rateable(record: Optional[WatchRecord], today: date, tz: Optional[tzinfo] = None) -> WatchRecord:
    """Only records currently classified as watched can be rated."""
    if record is None or not isinstance(classify(record, today, tz), Watched):
        raise NotFoundOrUnauthorizedError("movie not found in watchlist or not marked as watched")
    return record
