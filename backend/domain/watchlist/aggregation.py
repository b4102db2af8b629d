"""Derived watchlist views (calendar, upcoming list, watched history).

Everything here is recomputed from the full record list on each read. A
user's list holds tens to low hundreds of rows, so there is no index to keep
in sync.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Iterable, List, Optional, Tuple

from domain.watchlist.status import Upcoming, WatchState, Watched, classify
from domain.watchlist.watch_record import WatchRecord


@dataclass(frozen=True)
class ClassifiedRecord:
    record: WatchRecord
    state: WatchState


@dataclass(frozen=True)
class WatchlistOverview:
    to_watch: List[ClassifiedRecord] = field(default_factory=list)
    upcoming: List[ClassifiedRecord] = field(default_factory=list)
    watched: List[ClassifiedRecord] = field(default_factory=list)
    watched_days: List[date] = field(default_factory=list)
    scheduled_days: List[date] = field(default_factory=list)


@dataclass(frozen=True)
class DaySchedule:
    day: date
    watched: List[ClassifiedRecord] = field(default_factory=list)
    upcoming: List[ClassifiedRecord] = field(default_factory=list)


def classify_all(
    records: Iterable[WatchRecord], today: date, tz: Optional[tzinfo] = None
) -> List[ClassifiedRecord]:
    return [ClassifiedRecord(record=r, state=classify(r, today, tz)) for r in records]


def _upcoming_key(item: ClassifiedRecord) -> Tuple[date, str]:
    return (item.state.on, (item.record.title or "").lower())


def build_overview(
    records: Iterable[WatchRecord], today: date, tz: Optional[tzinfo] = None
) -> WatchlistOverview:
    to_watch: list[ClassifiedRecord] = []
    upcoming_items: list[ClassifiedRecord] = []
    watched: list[ClassifiedRecord] = []
    for item in classify_all(records, today, tz):
        if isinstance(item.state, Upcoming):
            upcoming_items.append(item)
        elif isinstance(item.state, Watched):
            watched.append(item)
        else:
            to_watch.append(item)

    upcoming_items.sort(key=_upcoming_key)
    # Most recent first; sort is stable so equal days keep store order.
    watched.sort(key=lambda x: x.state.on, reverse=True)
    return WatchlistOverview(
        to_watch=to_watch,
        upcoming=upcoming_items,
        watched=watched,
        watched_days=sorted({i.state.on for i in watched}),
        scheduled_days=sorted({i.state.on for i in upcoming_items}),
    )


def upcoming(
    records: Iterable[WatchRecord],
    today: date,
    tz: Optional[tzinfo] = None,
    *,
    limit: Optional[int] = None,
) -> List[ClassifiedRecord]:
    items = build_overview(records, today, tz).upcoming
    if limit is not None:
        items = items[: max(0, int(limit))]
    return items


def watched_days(records: Iterable[WatchRecord], today: date, tz: Optional[tzinfo] = None) -> List[date]:
    """Distinct days holding at least one watched movie (calendar highlights)."""
    return build_overview(records, today, tz).watched_days


def records_on_day(
    records: Iterable[WatchRecord], day: date, today: date, tz: Optional[tzinfo] = None
) -> DaySchedule:
    watched: list[ClassifiedRecord] = []
    scheduled: list[ClassifiedRecord] = []
    for item in classify_all(records, today, tz):
        if item.state.on != day:
            continue
        if isinstance(item.state, Watched):
            watched.append(item)
        elif isinstance(item.state, Upcoming):
            scheduled.append(item)
    return DaySchedule(day=day, watched=watched, upcoming=scheduled)


HIGH_RATING = 4


@dataclass(frozen=True)
class RatingSummary:
    """Counts shown above the ratings page, over Watched records only."""

    watched: int = 0
    rated: int = 0
    highly_rated: int = 0
    commented: int = 0


def rating_summary(
    records: Iterable[WatchRecord],
    today: date,
    tz: Optional[tzinfo] = None,
    *,
    commented_movie_ids: Iterable[int] = (),
) -> RatingSummary:
    """Summarize the user's watched history.

    `commented_movie_ids` are the movies the user has commented on; only the
    ones that are currently watched count. Ratings kept on unmarked or
    scheduled records are ignored.
    """
    watched = build_overview(records, today, tz).watched
    commented = {int(m) for m in commented_movie_ids}
    return RatingSummary(
        watched=len(watched),
        rated=sum(1 for i in watched if i.record.rating is not None),
        highly_rated=sum(1 for i in watched if (i.record.rating or 0) >= HIGH_RATING),
        commented=sum(1 for i in watched if i.record.movie_id in commented),
    )
