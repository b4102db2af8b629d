from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from application.ports.watch_record_store_port import WatchRecordStorePort
from domain.errors import ConflictError
from domain.watchlist import WatchRecord
from infrastructure.config.settings import POSTGRES_POOL_MAX_SIZE, POSTGRES_POOL_MIN_SIZE

logger = logging.getLogger(__name__)

_COLUMNS = "id, user_id, movie_id, title, poster_url, release_date, watched, occurs_on, rating, created_at, updated_at"


class InMemoryWatchRecordStore(WatchRecordStorePort):
    """Process-local store for dev/tests when Postgres is not configured."""

    def __init__(self) -> None:
        self._items: dict[tuple[str, int], WatchRecord] = {}

    async def add_record(
        self,
        *,
        user_id: str,
        movie_id: int,
        title: str,
        poster_url: Optional[str] = None,
        release_date: Optional[str] = None,
    ) -> WatchRecord:
        key = (str(user_id), int(movie_id))
        if key in self._items:
            raise ConflictError("movie already in watchlist")
        now = datetime.now(timezone.utc)
        record = WatchRecord(
            id=uuid4(),
            user_id=str(user_id),
            movie_id=int(movie_id),
            title=title,
            poster_url=poster_url,
            release_date=release_date,
            watched=False,
            occurs_on=None,
            rating=None,
            created_at=now,
            updated_at=now,
        )
        self._items[key] = record
        return record

    async def get_record(self, *, user_id: str, movie_id: int) -> Optional[WatchRecord]:
        return self._items.get((str(user_id), int(movie_id)))

    async def list_records(self, *, user_id: str) -> List[WatchRecord]:
        items = [r for (uid, _), r in self._items.items() if uid == str(user_id)]
        items.sort(key=lambda r: r.created_at or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
        return items

    async def set_watch_state(
        self,
        *,
        user_id: str,
        movie_id: int,
        watched: bool,
        occurs_on: Optional[date],
    ) -> Optional[WatchRecord]:
        key = (str(user_id), int(movie_id))
        current = self._items.get(key)
        if current is None:
            return None
        updated = replace(
            current,
            watched=bool(watched),
            occurs_on=occurs_on,
            updated_at=datetime.now(timezone.utc),
        )
        self._items[key] = updated
        return updated

    async def set_rating(
        self,
        *,
        user_id: str,
        movie_id: int,
        rating: Optional[int],
    ) -> Optional[WatchRecord]:
        key = (str(user_id), int(movie_id))
        current = self._items.get(key)
        if current is None or not current.watched:
            return None
        updated = replace(current, rating=rating, updated_at=datetime.now(timezone.utc))
        self._items[key] = updated
        return updated

    async def delete_record(self, *, user_id: str, movie_id: int) -> bool:
        return self._items.pop((str(user_id), int(movie_id)), None) is not None

    async def close(self) -> None:
        return None


class PostgresWatchRecordStore(WatchRecordStorePort):
    """Postgres-backed watchlist storage (asyncpg)."""

    def __init__(
        self,
        *,
        dsn: str,
        min_size: int = 1,
        max_size: int = 5,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self):
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is not None:
                return self._pool
            import asyncpg  # type: ignore

            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
            )
            await self._ensure_schema()
            logger.info("PostgreSQL watchlist store pool initialized")
            return self._pool

    async def _ensure_schema(self) -> None:
        pool = self._pool
        if pool is None:
            return
        async with pool.acquire() as conn:
            try:
                await conn.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto";')
            except Exception as e:
                logger.warning("Failed to ensure pgcrypto extension: %s", e)
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS watchlist (
                    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
                    user_id text NOT NULL,
                    movie_id int NOT NULL,
                    title text NOT NULL,
                    poster_url text,
                    release_date text,
                    watched boolean NOT NULL DEFAULT false,
                    occurs_on date,
                    rating int CHECK (rating IS NULL OR rating BETWEEN 1 AND 5),
                    created_at timestamptz NOT NULL DEFAULT NOW(),
                    updated_at timestamptz NOT NULL DEFAULT NOW(),
                    UNIQUE (user_id, movie_id)
                );
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS watchlist_user_created_idx ON watchlist(user_id, created_at DESC);"
            )

    @staticmethod
    def _row_to_record(row: dict) -> WatchRecord:
        return WatchRecord(
            id=row["id"],
            user_id=str(row.get("user_id") or ""),
            movie_id=int(row["movie_id"]),
            title=str(row.get("title") or ""),
            poster_url=row.get("poster_url"),
            release_date=row.get("release_date"),
            watched=bool(row.get("watched")),
            occurs_on=row.get("occurs_on"),
            rating=row.get("rating"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    async def add_record(
        self,
        *,
        user_id: str,
        movie_id: int,
        title: str,
        poster_url: Optional[str] = None,
        release_date: Optional[str] = None,
    ) -> WatchRecord:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO watchlist (user_id, movie_id, title, poster_url, release_date)
                VALUES ($1, $2, $3, $4, $5)
                ON CONFLICT (user_id, movie_id) DO NOTHING
                RETURNING {_COLUMNS};
                """,
                str(user_id),
                int(movie_id),
                title,
                poster_url,
                release_date,
            )
        if row is None:
            raise ConflictError("movie already in watchlist")
        return self._row_to_record(dict(row))

    async def get_record(self, *, user_id: str, movie_id: int) -> Optional[WatchRecord]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM watchlist WHERE user_id = $1 AND movie_id = $2;",
                str(user_id),
                int(movie_id),
            )
        return self._row_to_record(dict(row)) if row else None

    async def list_records(self, *, user_id: str) -> List[WatchRecord]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM watchlist WHERE user_id = $1 ORDER BY created_at DESC, id DESC;",
                str(user_id),
            )
        return [self._row_to_record(dict(r)) for r in rows]

    async def set_watch_state(
        self,
        *,
        user_id: str,
        movie_id: int,
        watched: bool,
        occurs_on: Optional[date],
    ) -> Optional[WatchRecord]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE watchlist
                SET watched = $3,
                    occurs_on = $4,
                    updated_at = NOW()
                WHERE user_id = $1
                  AND movie_id = $2
                RETURNING {_COLUMNS};
                """,
                str(user_id),
                int(movie_id),
                bool(watched),
                occurs_on,
            )
        return self._row_to_record(dict(row)) if row else None

    async def set_rating(
        self,
        *,
        user_id: str,
        movie_id: int,
        rating: Optional[int],
    ) -> Optional[WatchRecord]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE watchlist
                SET rating = $3,
                    updated_at = NOW()
                WHERE user_id = $1
                  AND movie_id = $2
                  AND watched = true
                RETURNING {_COLUMNS};
                """,
                str(user_id),
                int(movie_id),
                rating,
            )
        return self._row_to_record(dict(row)) if row else None

    async def delete_record(self, *, user_id: str, movie_id: int) -> bool:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                "DELETE FROM watchlist WHERE user_id = $1 AND movie_id = $2 RETURNING id;",
                str(user_id),
                int(movie_id),
            )
        return bool(row)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
        self._pool = None


def build_watch_record_store(*, dsn: Optional[str]) -> WatchRecordStorePort:
    if dsn:
        return PostgresWatchRecordStore(dsn=dsn, min_size=POSTGRES_POOL_MIN_SIZE, max_size=POSTGRES_POOL_MAX_SIZE)
    logger.info("POSTGRES_DSN not set; using in-memory watchlist store")
    return InMemoryWatchRecordStore()


__all__ = [
    "InMemoryWatchRecordStore",
    "PostgresWatchRecordStore",
    "build_watch_record_store",
]
