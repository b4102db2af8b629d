from __future__ import annotations

from typing import List, Optional, Protocol
from uuid import UUID

from domain.comments import Comment


class CommentStorePort(Protocol):
    async def list_comments(self, *, movie_id: int) -> List[Comment]:
        """Comments on a movie, newest first."""
        ...

    async def list_commented_movie_ids(self, *, user_id: str) -> List[int]:
        """Distinct movie ids the user has commented on, ascending."""
        ...

    async def get_comment(self, *, comment_id: UUID) -> Optional[Comment]:
        ...

    async def add_comment(self, *, user_id: str, movie_id: int, content: str) -> Comment:
        ...

    async def update_comment(
        self,
        *,
        comment_id: UUID,
        user_id: str,
        content: str,
    ) -> Optional[Comment]:
        """Owner-scoped update. Returns None when absent or owned by someone else."""
        ...

    async def delete_comment(self, *, comment_id: UUID, user_id: str) -> bool:
        ...

    async def close(self) -> None:
        ...
