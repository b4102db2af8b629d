from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol


class MovieCatalogPort(Protocol):
    """Read-only access to the external movie catalog.

    List endpoints return the upstream page envelope unchanged
    (`results`, `page`, `total_pages`, `total_results`). Failures raise
    `domain.errors.UpstreamError`.
    """

    async def search_movies(
        self,
        *,
        query: str,
        page: int = 1,
        genre_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        ...

    async def get_movie(self, *, movie_id: int) -> Dict[str, Any]:
        ...

    async def list_genres(self) -> List[Dict[str, Any]]:
        ...

    async def movies_by_genre(self, *, genre_id: int, page: int = 1) -> Dict[str, Any]:
        ...

    async def top_rated(self, *, page: int = 1) -> Dict[str, Any]:
        ...

    async def close(self) -> None:
        ...
