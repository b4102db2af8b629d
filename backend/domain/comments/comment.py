from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class Comment:
    """A user's comment on a catalog movie."""

    id: UUID
    user_id: str
    movie_id: int
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
