from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from domain.watchlist import WatchRecord


class WatchRecordStorePort(Protocol):
    async def add_record(
        self,
        *,
        user_id: str,
        movie_id: int,
        title: str,
        poster_url: Optional[str] = None,
        release_date: Optional[str] = None,
    ) -> WatchRecord:
        """Create a to-watch record; raises ConflictError if the movie is already listed."""
        ...

    async def get_record(self, *, user_id: str, movie_id: int) -> Optional[WatchRecord]:
        ...

    async def list_records(self, *, user_id: str) -> List[WatchRecord]:
        """All of a user's records, newest first."""
        ...

    async def set_watch_state(
        self,
        *,
        user_id: str,
        movie_id: int,
        watched: bool,
        occurs_on: Optional[date],
    ) -> Optional[WatchRecord]:
        """Update `watched`/`occurs_on` only. Returns None when the record is absent."""
        ...

    async def set_rating(
        self,
        *,
        user_id: str,
        movie_id: int,
        rating: Optional[int],
    ) -> Optional[WatchRecord]:
        """Update `rating` only. Returns None when absent or not flagged watched."""
        ...

    async def delete_record(self, *, user_id: str, movie_id: int) -> bool:
        ...

    async def close(self) -> None:
        ...
