from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class WatchRecord:
    """A user's watchlist entry for one catalog movie.

    `watched` is true both for movies already seen and for movies scheduled on
    a future day; `occurs_on` holds the day in both cases. Use
    `domain.watchlist.status.classify` to tell them apart.
    """

    id: UUID
    user_id: str
    movie_id: int
    title: str
    poster_url: Optional[str] = None
    release_date: Optional[str] = None
    watched: bool = False
    occurs_on: Optional[date] = None
    # 1..5, None when unrated
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
