from __future__ import annotations

import logging
from typing import Any, List
from uuid import UUID

from application.ports.comment_store_port import CommentStorePort
from domain.comments import Comment, ensure_owner, validate_content
from domain.errors import NotFoundOrUnauthorizedError
from domain.movie_ids import require_movie_id

logger = logging.getLogger(__name__)


class CommentService:
    """Comment CRUD with content validation and owner-only mutation."""

    def __init__(self, *, store: CommentStorePort) -> None:
        self._store = store

    async def list_comments(self, *, movie_id: Any) -> List[Comment]:
        return await self._store.list_comments(movie_id=require_movie_id(movie_id))

    async def commented_movie_ids(self, *, user_id: str) -> List[int]:
        return await self._store.list_commented_movie_ids(user_id=str(user_id))

    async def create_comment(self, *, user_id: str, movie_id: Any, content: Any) -> Comment:
        mid = require_movie_id(movie_id)
        text = validate_content(content)
        comment = await self._store.add_comment(user_id=str(user_id), movie_id=mid, content=text)
        logger.info("comment created id=%s user=%s movie=%s", comment.id, user_id, mid)
        return comment

    async def update_comment(self, *, comment_id: UUID, user_id: str, content: Any) -> Comment:
        text = validate_content(content)
        ensure_owner(await self._store.get_comment(comment_id=comment_id), user_id)
        updated = await self._store.update_comment(comment_id=comment_id, user_id=str(user_id), content=text)
        if updated is None:
            # Deleted between the ownership check and the update.
            raise NotFoundOrUnauthorizedError("comment not found or not authorized")
        return updated

    async def delete_comment(self, *, comment_id: UUID, user_id: str) -> None:
        ensure_owner(await self._store.get_comment(comment_id=comment_id), user_id)
        if not await self._store.delete_comment(comment_id=comment_id, user_id=str(user_id)):
            raise NotFoundOrUnauthorizedError("comment not found or not authorized")
        logger.info("comment deleted id=%s user=%s", comment_id, user_id)

    async def close(self) -> None:
        await self._store.close()
