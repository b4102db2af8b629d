from domain.watchlist.aggregation import (
    ClassifiedRecord,
    DaySchedule,
    RatingSummary,
    WatchlistOverview,
    build_overview,
    classify_all,
    rating_summary,
    records_on_day,
    upcoming,
    watched_days,
)
from domain.watchlist.days import local_today, parse_day, resolve_timezone, to_local_day
from domain.watchlist.status import (
    ToWatch,
    Upcoming,
    WatchAction,
    WatchState,
    WatchStatus,
    Watched,
    classify,
    ensure_rateable,
    plan_watch,
    validate_rating,
)
from domain.watchlist.watch_record import WatchRecord

__all__ = [
    "ClassifiedRecord",
    "DaySchedule",
    "RatingSummary",
    "ToWatch",
    "Upcoming",
    "WatchAction",
    "WatchRecord",
    "WatchState",
    "WatchStatus",
    "Watched",
    "WatchlistOverview",
    "build_overview",
    "classify",
    "classify_all",
    "ensure_rateable",
    "local_today",
    "parse_day",
    "plan_watch",
    "rating_summary",
    "records_on_day",
    "resolve_timezone",
    "to_local_day",
    "upcoming",
    "validate_rating",
    "watched_days",
]
