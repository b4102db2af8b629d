"""Watchlist use cases: add/remove, schedule or mark watched, unmark, rate.

The service owns validation (before anything reaches the store) and delegates
state derivation to `domain.watchlist`. Every call that depends on "today"
takes the reference day as a parameter; the service never reads the clock.
"""

from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Any, Iterable, List, Optional, Tuple

from application.ports.watch_record_store_port import WatchRecordStorePort
from domain.errors import NotFoundOrUnauthorizedError, ValidationError
from domain.movie_ids import require_movie_id
from domain.watchlist import (
    ClassifiedRecord,
    DaySchedule,
    RatingSummary,
    WatchAction,
    WatchRecord,
    WatchlistOverview,
    build_overview,
    classify,
    classify_all,
    ensure_rateable,
    parse_day,
    plan_watch,
    rating_summary,
    records_on_day,
    validate_rating,
)
from domain.watchlist import upcoming as upcoming_view

logger = logging.getLogger(__name__)

_NOT_IN_WATCHLIST = "movie not found in watchlist"


class WatchlistService:
    def __init__(self, *, store: WatchRecordStorePort) -> None:
        self._store = store

    async def add_movie(
        self,
        *,
        user_id: str,
        movie_id: Any,
        title: Optional[str],
        poster_url: Optional[str] = None,
        release_date: Optional[str] = None,
    ) -> WatchRecord:
        title_s = (title or "").strip()
        if not title_s:
            raise ValidationError("movie id and title are required")
        record = await self._store.add_record(
            user_id=str(user_id),
            movie_id=require_movie_id(movie_id),
            title=title_s,
            poster_url=(poster_url or None),
            release_date=(release_date or None),
        )
        logger.info("watchlist add user=%s movie=%s", user_id, record.movie_id)
        return record

    async def remove_movie(self, *, user_id: str, movie_id: Any) -> None:
        # Removal is idempotent: deleting an absent movie still succeeds.
        deleted = await self._store.delete_record(user_id=str(user_id), movie_id=require_movie_id(movie_id))
        logger.debug("watchlist remove user=%s movie=%s deleted=%s", user_id, movie_id, deleted)

    async def list_movies(
        self, *, user_id: str, today: date, tz: Optional[tzinfo] = None
    ) -> List[ClassifiedRecord]:
        records = await self._store.list_records(user_id=str(user_id))
        return classify_all(records, today, tz)

    async def overview(self, *, user_id: str, today: date, tz: Optional[tzinfo] = None) -> WatchlistOverview:
        records = await self._store.list_records(user_id=str(user_id))
        return build_overview(records, today, tz)

    async def upcoming(
        self,
        *,
        user_id: str,
        today: date,
        tz: Optional[tzinfo] = None,
        limit: Optional[int] = None,
    ) -> List[ClassifiedRecord]:
        records = await self._store.list_records(user_id=str(user_id))
        return upcoming_view(records, today, tz, limit=limit)

    async def day_schedule(
        self,
        *,
        user_id: str,
        day: Any,
        today: date,
        tz: Optional[tzinfo] = None,
    ) -> DaySchedule:
        target = parse_day(day, tz)
        records = await self._store.list_records(user_id=str(user_id))
        return records_on_day(records, target, today, tz)

    async def watched_days(self, *, user_id: str, today: date, tz: Optional[tzinfo] = None) -> List[date]:
        return (await self.overview(user_id=user_id, today=today, tz=tz)).watched_days

    async def ratings(
        self,
        *,
        user_id: str,
        today: date,
        tz: Optional[tzinfo] = None,
        commented_movie_ids: Iterable[int] = (),
    ) -> Tuple[RatingSummary, List[ClassifiedRecord]]:
        """Watched history (most recent first) plus its summary counts."""
        records = await self._store.list_records(user_id=str(user_id))
        summary = rating_summary(records, today, tz, commented_movie_ids=commented_movie_ids)
        return summary, build_overview(records, today, tz).watched

    async def set_watch_date(
        self,
        *,
        user_id: str,
        movie_id: Any,
        on: Any,
        today: date,
        tz: Optional[tzinfo] = None,
    ) -> Tuple[WatchAction, ClassifiedRecord]:
        """Schedule (future day) or mark watched (today or earlier).

        Both write `watched=True, occurs_on=day`, so repeating the call is a
        no-op apart from `updated_at`.
        """
        mid = require_movie_id(movie_id)
        day = parse_day(on, tz) if on is not None else None
        action = plan_watch(day, today)
        updated = await self._store.set_watch_state(
            user_id=str(user_id),
            movie_id=mid,
            watched=True,
            occurs_on=day,
        )
        if updated is None:
            raise NotFoundOrUnauthorizedError(_NOT_IN_WATCHLIST)
        logger.info("watchlist %s user=%s movie=%s day=%s", action.value, user_id, mid, day)
        return action, ClassifiedRecord(record=updated, state=classify(updated, today, tz))

    async def unmark_watched(
        self,
        *,
        user_id: str,
        movie_id: Any,
        today: date,
        tz: Optional[tzinfo] = None,
    ) -> ClassifiedRecord:
        # The rating is left as is; re-marking the movie brings it back.
        mid = require_movie_id(movie_id)
        updated = await self._store.set_watch_state(
            user_id=str(user_id),
            movie_id=mid,
            watched=False,
            occurs_on=None,
        )
        if updated is None:
            raise NotFoundOrUnauthorizedError(_NOT_IN_WATCHLIST)
        logger.info("watchlist unmark user=%s movie=%s", user_id, mid)
        return ClassifiedRecord(record=updated, state=classify(updated, today, tz))

    async def rate(
        self,
        *,
        user_id: str,
        movie_id: Any,
        rating: Any,
        today: date,
        tz: Optional[tzinfo] = None,
    ) -> ClassifiedRecord:
        mid = require_movie_id(movie_id)
        value = validate_rating(rating)
        current = await self._store.get_record(user_id=str(user_id), movie_id=mid)
        ensure_rateable(current, today, tz)
        updated = await self._store.set_rating(user_id=str(user_id), movie_id=mid, rating=value)
        if updated is None:
            raise NotFoundOrUnauthorizedError("movie not found in watchlist or not marked as watched")
        logger.info("watchlist rate user=%s movie=%s rating=%s", user_id, mid, value)
        return ClassifiedRecord(record=updated, state=classify(updated, today, tz))

    async def close(self) -> None:
        await self._store.close()
