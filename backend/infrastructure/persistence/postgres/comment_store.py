from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from application.ports.comment_store_port import CommentStorePort
from domain.comments import Comment
from infrastructure.config.settings import POSTGRES_POOL_MAX_SIZE, POSTGRES_POOL_MIN_SIZE

logger = logging.getLogger(__name__)

_COLUMNS = "id, user_id, movie_id, content, created_at, updated_at"


class InMemoryCommentStore(CommentStorePort):
    """In-memory comment store for dev/tests when Postgres is not configured."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Comment] = {}

    async def list_comments(self, *, movie_id: int) -> List[Comment]:
        items = [c for c in self._by_id.values() if c.movie_id == int(movie_id)]
        items.sort(key=lambda c: c.created_at or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
        return items

    async def list_commented_movie_ids(self, *, user_id: str) -> List[int]:
        return sorted({c.movie_id for c in self._by_id.values() if c.user_id == str(user_id)})

    async def get_comment(self, *, comment_id: UUID) -> Optional[Comment]:
        return self._by_id.get(comment_id)

    async def add_comment(self, *, user_id: str, movie_id: int, content: str) -> Comment:
        now = datetime.now(timezone.utc)
        comment = Comment(
            id=uuid4(),
            user_id=str(user_id),
            movie_id=int(movie_id),
            content=content,
            created_at=now,
            updated_at=now,
        )
        self._by_id[comment.id] = comment
        return comment

    async def update_comment(self, *, comment_id: UUID, user_id: str, content: str) -> Optional[Comment]:
        current = self._by_id.get(comment_id)
        if current is None or current.user_id != str(user_id):
            return None
        updated = replace(current, content=content, updated_at=datetime.now(timezone.utc))
        self._by_id[comment_id] = updated
        return updated

    async def delete_comment(self, *, comment_id: UUID, user_id: str) -> bool:
        current = self._by_id.get(comment_id)
        if current is None or current.user_id != str(user_id):
            return False
        del self._by_id[comment_id]
        return True

    async def close(self) -> None:
        return None


class PostgresCommentStore(CommentStorePort):
    """PostgreSQL comment store (asyncpg)."""

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
                CREATE TABLE IF NOT EXISTS comments (
                    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
                    user_id text NOT NULL,
                    movie_id int NOT NULL,
                    content text NOT NULL,
                    created_at timestamptz NOT NULL DEFAULT NOW(),
                    updated_at timestamptz NOT NULL DEFAULT NOW()
                );
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS comments_movie_created_idx ON comments(movie_id, created_at DESC);"
            )
            await conn.execute("CREATE INDEX IF NOT EXISTS comments_user_movie_idx ON comments(user_id, movie_id);")

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
            logger.info("PostgreSQL comment store pool initialized")
            return self._pool

    @staticmethod
    def _row_to_comment(row: dict) -> Comment:
        return Comment(
            id=row["id"],
            user_id=str(row.get("user_id") or ""),
            movie_id=int(row["movie_id"]),
            content=str(row.get("content") or ""),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    async def list_comments(self, *, movie_id: int) -> List[Comment]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM comments WHERE movie_id = $1 ORDER BY created_at DESC, id DESC;",
                int(movie_id),
            )
        return [self._row_to_comment(dict(r)) for r in rows]

    async def list_commented_movie_ids(self, *, user_id: str) -> List[int]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT DISTINCT movie_id FROM comments WHERE user_id = $1 ORDER BY movie_id;",
                str(user_id),
            )
        return [int(r["movie_id"]) for r in rows]

    async def get_comment(self, *, comment_id: UUID) -> Optional[Comment]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {_COLUMNS} FROM comments WHERE id = $1;", comment_id)
        return self._row_to_comment(dict(row)) if row else None

    async def add_comment(self, *, user_id: str, movie_id: int, content: str) -> Comment:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO comments (user_id, movie_id, content)
                VALUES ($1, $2, $3)
                RETURNING {_COLUMNS};
                """,
                str(user_id),
                int(movie_id),
                content,
            )
        assert row is not None
        return self._row_to_comment(dict(row))

    async def update_comment(self, *, comment_id: UUID, user_id: str, content: str) -> Optional[Comment]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE comments
                SET content = $3,
                    updated_at = NOW()
                WHERE id = $1
                  AND user_id = $2
                RETURNING {_COLUMNS};
                """,
                comment_id,
                str(user_id),
                content,
            )
        return self._row_to_comment(dict(row)) if row else None

    async def delete_comment(self, *, comment_id: UUID, user_id: str) -> bool:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                "DELETE FROM comments WHERE id = $1 AND user_id = $2 RETURNING id;",
                comment_id,
                str(user_id),
            )
        return bool(row)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
        self._pool = None


def build_comment_store(*, dsn: Optional[str]) -> CommentStorePort:
    if dsn:
        return PostgresCommentStore(dsn=dsn, min_size=POSTGRES_POOL_MIN_SIZE, max_size=POSTGRES_POOL_MAX_SIZE)
    logger.info("POSTGRES_DSN not set; using in-memory comment store")
    return InMemoryCommentStore()


__all__ = [
    "InMemoryCommentStore",
    "PostgresCommentStore",
    "build_comment_store",
]
